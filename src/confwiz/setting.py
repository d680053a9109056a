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

"""Immutable setting record held by a registry."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from confwiz.lattice import mutability_for

if TYPE_CHECKING:
    from confwiz.compat import Self
    from confwiz.core.model_types import DataType, SettingKind


@dataclass(slots=True, frozen=True)
class Setting:
    """One named, typed value together with its provenance policy.

    Records are never mutated in place; the registry publishes a replacement
    built by :meth:`with_value`, so a reader holding a record always sees a
    consistent snapshot.

    Attributes:
        name: Unique key within the registry.
        short: Optional flag alias; empty when absent.
        data_type: Representation of ``value``.
        value: Current value.
        default_text: Canonical text of the registration value.
        usage: Help text shown by flag usage output.
        kind: Provenance class chosen at registration.
        is_conf_file_var: The configuration file may update this setting.
        is_env_var: The environment may update this setting.
        is_flag: Flags may update this setting.
        is_core: The value is frozen.
    """

    name: str
    short: str
    data_type: DataType
    value: object
    default_text: str
    usage: str
    kind: SettingKind
    is_conf_file_var: bool = False
    is_env_var: bool = False
    is_flag: bool = False
    is_core: bool = False

    @classmethod
    def create(
        cls,
        kind: SettingKind,
        data_type: DataType,
        name: str,
        value: object,
        *,
        short: str = "",
        default_text: str,
        usage: str = "",
    ) -> Self:
        """Build a record whose mutability flags follow from ``kind``."""
        flags = mutability_for(kind)
        return cls(
            name=name,
            short=short,
            data_type=data_type,
            value=value,
            default_text=default_text,
            usage=usage,
            kind=kind,
            is_conf_file_var=flags.is_conf_file_var,
            is_env_var=flags.is_env_var,
            is_flag=flags.is_flag,
            is_core=flags.is_core,
        )

    def with_value(self, value: object) -> Self:
        """Return a copy of this record holding ``value``."""
        return replace(self, value=value)


__all__ = ["Setting"]
