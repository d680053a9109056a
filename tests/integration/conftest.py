# Copyright 2025 CrownOps Engineering
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Fixtures for multi-component integration tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path

ConfWriter = Callable[[str, str], "Path"]


@pytest.fixture
def write_conf(tmp_path: Path) -> ConfWriter:
    """Return a helper that writes a configuration file under ``tmp_path``.

    Returns:
        Callable taking a filename and its text and returning the written path.
    """

    def _write(filename: str, text: str) -> Path:
        path = tmp_path / filename
        _ = path.write_text(text, encoding="utf-8")
        return path

    return _write
