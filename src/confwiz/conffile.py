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

"""Locating and reading the configuration file.

When the configured filename cannot be opened as given, its base name is
looked up in a sequence of directories controlled by :class:`ConfFileSearch`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from confwiz.exceptions import MissingConfFileError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class ConfFileSearch(BaseModel):
    """Where to look for the configuration file when it is not found as named.

    Locations are tried in attribute order; the first readable match wins.

    Attributes:
        paths: Directories checked first, in the order given.
        path_env_vars: Environment variables holding ``os.pathsep``-separated
            directory lists; ``$VAR`` references inside them are expanded.
        check_working_dir: Look in the current working directory.
        check_exe_dir: Look in the directory of the running program.
        search_path: Look in every directory listed in ``PATH``.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid", frozen=True)

    paths: tuple[Path, ...] = Field(default_factory=tuple)
    path_env_vars: tuple[str, ...] = Field(default_factory=tuple)
    check_working_dir: bool = False
    check_exe_dir: bool = False
    search_path: bool = True

    @field_validator("paths", "path_env_vars", mode="before")
    @classmethod
    def _coerce_sequence(cls, value: object) -> object:
        if isinstance(value, (str, os.PathLike)):
            return (value,)
        return value

    @field_validator("path_env_vars")
    @classmethod
    def _strip_env_vars(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(name.strip() for name in value if name.strip())


def env_var_paths(raw: str) -> list[Path]:
    """Split a path-list variable value and expand variables in each entry."""
    if not raw:
        return []
    return [Path(os.path.expandvars(entry)) for entry in raw.split(os.pathsep) if entry]


def executable_dir() -> Path:
    """Return the directory holding the running program."""
    if sys.argv and sys.argv[0]:
        return Path(sys.argv[0]).resolve().parent
    return Path(sys.executable).resolve().parent


def _read(path: Path) -> bytes | None:
    try:
        with path.open("rb") as handle:
            return handle.read()
    except OSError:
        return None


def _first_readable(basename: str, directories: Iterable[Path]) -> tuple[Path, bytes] | None:
    for directory in directories:
        candidate = directory / basename
        data = _read(candidate)
        if data is not None:
            return candidate, data
    return None


def _search_steps(search: ConfFileSearch) -> Iterator[tuple[str, list[Path]]]:
    if search.paths:
        yield "; ".join(os.fspath(path) for path in search.paths), list(search.paths)
    if search.path_env_vars:
        directories = [path for name in search.path_env_vars for path in env_var_paths(os.environ.get(name, ""))]
        yield "; ".join(f"${name}" for name in search.path_env_vars), directories
    if search.check_working_dir:
        cwd = Path.cwd()
        yield os.fspath(cwd), [cwd]
    if search.check_exe_dir:
        exe_dir = executable_dir()
        yield os.fspath(exe_dir), [exe_dir]
    if search.search_path:
        yield "$PATH", env_var_paths(os.environ.get("PATH", ""))


def read_conf_file(filename: str, search: ConfFileSearch | None = None) -> tuple[Path, bytes]:
    """Read the configuration file, searching for it if necessary.

    Args:
        filename: Configured filename, absolute or relative to the working
            directory.
        search: Additional locations to try; ``None`` uses the defaults.

    Returns:
        The path that was read and its contents.

    Raises:
        MissingConfFileError: If no location yields a readable file. The error
            lists every location checked.
    """
    direct = Path(filename)
    data = _read(direct)
    if data is not None:
        return direct, data

    basename = direct.name
    searched = [filename]
    for label, directories in _search_steps(search or ConfFileSearch()):
        found = _first_readable(basename, directories)
        if found is not None:
            return found
        searched.append(label)
    raise MissingConfFileError(filename, tuple(searched))


__all__ = ["ConfFileSearch", "env_var_paths", "executable_dir", "read_conf_file"]
