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

"""Mutability lattice: which sources may change a setting of a given kind.

The kinds form the chain ``BASIC < CORE < CONF_FILE_VAR < ENV_VAR < FLAG``;
each step up admits one more external source. The table below is the only
place the mapping is spelled out.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from confwiz.core.model_types import SettingKind, Source

if TYPE_CHECKING:
    from collections.abc import Mapping

    from confwiz.setting import Setting


@dataclass(slots=True, frozen=True)
class Mutability:
    """Per-source permission flags derived from a setting kind."""

    is_conf_file_var: bool = False
    is_env_var: bool = False
    is_flag: bool = False
    is_core: bool = False


LATTICE: Final[Mapping[SettingKind, Mutability]] = MappingProxyType(
    {
        SettingKind.BASIC: Mutability(),
        SettingKind.CORE: Mutability(is_core=True),
        SettingKind.CONF_FILE_VAR: Mutability(is_conf_file_var=True),
        SettingKind.ENV_VAR: Mutability(is_conf_file_var=True, is_env_var=True),
        SettingKind.FLAG: Mutability(is_conf_file_var=True, is_env_var=True, is_flag=True),
    },
)


def mutability_for(kind: SettingKind) -> Mutability:
    """Return the permission flags for ``kind``."""
    return LATTICE[kind]


def permits(setting: Setting, source: Source) -> bool:
    """Return whether ``source`` may update ``setting``.

    Core settings admit nothing. Programmatic writes are reserved for basic
    settings; each external source needs its matching flag.
    """
    if setting.is_core:
        return False
    match source:
        case Source.CONF_FILE:
            return setting.is_conf_file_var
        case Source.ENV:
            return setting.is_env_var
        case Source.FLAG:
            return setting.is_flag
        case _:
            return setting.kind is SettingKind.BASIC


__all__ = ["LATTICE", "Mutability", "mutability_for", "permits"]
