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

"""Process-wide default registry and module-level convenience functions.

The default registry is created on first use and named after the running
program, so its environment variables are ``<PROGRAM>_<SETTING>``. Each
function here forwards to the matching :class:`~confwiz.settings.Settings`
method.
"""

from __future__ import annotations

import sys
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from confwiz.core.model_types import Source
from confwiz.settings import Settings

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from confwiz.conffile import ConfFileSearch
    from confwiz.core.model_types import DataType, SettingKind
    from confwiz.setting import Setting

_default_lock = threading.Lock()
_default: Settings | None = None


def _program_name() -> str:
    if sys.argv and sys.argv[0]:
        return Path(sys.argv[0]).name
    return Path(sys.executable).name


def default_settings() -> Settings:
    """Return the process-wide registry, creating it on first use."""
    global _default  # noqa: PLW0603  # JUSTIFIED: lazily initialised module singleton
    with _default_lock:
        if _default is None:
            _default = Settings(_program_name())
        return _default


def reset_default_settings() -> None:
    """Discard the process-wide registry; the next access creates a new one."""
    global _default  # noqa: PLW0603  # JUSTIFIED: lazily initialised module singleton
    with _default_lock:
        _default = None


def name() -> str:
    return default_settings().name


def register(
    kind: SettingKind | str,
    data_type: DataType | str,
    name: str,
    value: object,
    *,
    short: str = "",
    default_text: str | None = None,
    usage: str = "",
) -> None:
    default_settings().register(
        kind,
        data_type,
        name,
        value,
        short=short,
        default_text=default_text,
        usage=usage,
    )


def add(name: str, value: object, *, data_type: DataType | str | None = None, usage: str = "") -> None:
    default_settings().add(name, value, data_type=data_type, usage=usage)


def add_core(name: str, value: object, *, data_type: DataType | str | None = None, usage: str = "") -> None:
    default_settings().add_core(name, value, data_type=data_type, usage=usage)


def add_conf_file_var(name: str, value: object, *, data_type: DataType | str | None = None, usage: str = "") -> None:
    default_settings().add_conf_file_var(name, value, data_type=data_type, usage=usage)


def add_env_var(name: str, value: object, *, data_type: DataType | str | None = None, usage: str = "") -> None:
    default_settings().add_env_var(name, value, data_type=data_type, usage=usage)


def add_flag(
    name: str,
    value: object,
    short: str = "",
    usage: str = "",
    *,
    data_type: DataType | str | None = None,
) -> None:
    default_settings().add_flag(name, value, short, usage, data_type=data_type)


def update(name: str, value: object, *, source: Source = Source.PROGRAMMATIC) -> None:
    default_settings().update(name, value, source=source)


def update_bool(name: str, value: bool) -> None:
    default_settings().update_bool(name, value)


def update_int(name: str, value: int) -> None:
    default_settings().update_int(name, value)


def update_int64(name: str, value: int) -> None:
    default_settings().update_int64(name, value)


def update_string(name: str, value: str) -> None:
    default_settings().update_string(name, value)


def override(name: str, value: object) -> None:
    default_settings().override(name, value)


def env_var_name(name: str) -> str:
    return default_settings().env_var_name(name)


def load_env_vars() -> None:
    default_settings().load_env_vars()


def set_conf_filename(filename: str) -> None:
    default_settings().set_conf_filename(filename)


def set_require_conf_file(required: bool) -> None:
    default_settings().set_require_conf_file(required)


def set_conf_file_search(search: ConfFileSearch | Mapping[str, object] | None) -> None:
    default_settings().set_conf_file_search(search)


def load_conf_file() -> None:
    default_settings().load_conf_file()


def materialize() -> None:
    default_settings().materialize()


def is_set() -> bool:
    return default_settings().is_set()


def parse_flags(args: Sequence[str] | None = None) -> list[str]:
    """Parse flags for the default registry; ``args`` defaults to ``sys.argv[1:]``."""
    return default_settings().parse_flags(args)


def visited() -> list[str]:
    return default_settings().visited()


def was_visited(name: str) -> bool:
    return default_settings().was_visited(name)


def flag_usage() -> str:
    return default_settings().flag_usage()


def get(name: str) -> object:
    return default_settings().get(name)


def get_bool(name: str) -> bool:
    return default_settings().get_bool(name)


def get_int(name: str) -> int:
    return default_settings().get_int(name)


def get_int64(name: str) -> int:
    return default_settings().get_int64(name)


def get_string(name: str) -> str:
    return default_settings().get_string(name)


def value(name: str) -> object | None:
    return default_settings().value(name)


def bool_value(name: str) -> bool:
    return default_settings().bool_value(name)


def int_value(name: str) -> int:
    return default_settings().int_value(name)


def int64_value(name: str) -> int:
    return default_settings().int64_value(name)


def string_value(name: str) -> str:
    return default_settings().string_value(name)


def exists(name: str) -> bool:
    return default_settings().exists(name)


def setting(name: str) -> Setting:
    return default_settings().setting(name)


def is_core(name: str) -> bool:
    return default_settings().is_core(name)


def is_conf_file_var(name: str) -> bool:
    return default_settings().is_conf_file_var(name)


def is_env_var(name: str) -> bool:
    return default_settings().is_env_var(name)


def is_flag(name: str) -> bool:
    return default_settings().is_flag(name)


def names(*, kind: SettingKind | str | None = None, data_type: DataType | str | None = None) -> list[str]:
    return default_settings().names(kind=kind, data_type=data_type)


__all__ = [
    "add",
    "add_conf_file_var",
    "add_core",
    "add_env_var",
    "add_flag",
    "bool_value",
    "default_settings",
    "env_var_name",
    "exists",
    "flag_usage",
    "get",
    "get_bool",
    "get_int",
    "get_int64",
    "get_string",
    "int64_value",
    "int_value",
    "is_conf_file_var",
    "is_core",
    "is_env_var",
    "is_flag",
    "is_set",
    "load_conf_file",
    "load_env_vars",
    "materialize",
    "name",
    "names",
    "override",
    "parse_flags",
    "register",
    "reset_default_settings",
    "set_conf_file_search",
    "set_conf_filename",
    "set_require_conf_file",
    "setting",
    "string_value",
    "update",
    "update_bool",
    "update_int",
    "update_int64",
    "update_string",
    "value",
    "visited",
    "was_visited",
]
