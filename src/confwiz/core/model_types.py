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

# ignore JUSTIFIED: StrEnum inheritance stack exceeds pylint threshold
# pylint: disable=too-many-ancestors

"""Model enumerations for confwiz.

This module defines the tags that describe a setting and the inputs that may
change it:

- ``DataType``: the runtime type tag carried by each setting record
- ``SettingKind``: the provenance class assigned at registration
- ``Source``: the origin of a single update
- ``ConfFormat``: configuration-file encodings recognised by the loader
- ``FlagState``: the flag-parsing state machine of a registry
- ``LogFormat`` / ``LogComponent``: structured logging vocabulary
"""

from __future__ import annotations

from typing import Final

from confwiz.compat import StrEnum


class DataType(StrEnum):
    """Scalar type tag of a setting.

    Attributes:
        BOOL: ``bool`` values; canonical text ``true``/``false``.
        INT: platform-word integers (``sys.maxsize`` bounds).
        INT64: 64-bit signed integers.
        STRING: text, stored verbatim.
        OPAQUE: any Python object; never set from string sources.
    """

    BOOL = "bool"
    INT = "int"
    INT64 = "int64"
    STRING = "string"
    OPAQUE = "opaque"

    @classmethod
    def from_str(cls, raw: str) -> DataType:
        """Create a DataType from its textual tag.

        Args:
            raw: Tag such as ``"int64"``; surrounding whitespace and case are ignored.

        Returns:
            Matching DataType member.

        Raises:
            ValueError: If the tag is not a known data type.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            message = f"Unknown data type '{raw}'"
            raise ValueError(message) from exc

    @classmethod
    def infer(cls, value: object) -> DataType:
        """Return the data type a Python value maps to.

        ``bool`` is checked before ``int`` because it is an ``int`` subclass.
        """
        if isinstance(value, bool):
            return cls.BOOL
        if isinstance(value, int):
            return cls.INT
        if isinstance(value, str):
            return cls.STRING
        return cls.OPAQUE


class SettingKind(StrEnum):
    """Provenance class of a setting, ordered from least to most permissive.

    Attributes:
        BASIC: changed only through programmatic updates.
        CORE: frozen after registration.
        CONF_FILE_VAR: may be set from the configuration file.
        ENV_VAR: may be set from environment variables or the configuration file.
        FLAG: may be set from flags, environment variables or the configuration file.
    """

    BASIC = "basic"
    CORE = "core"
    CONF_FILE_VAR = "conf_file_var"
    ENV_VAR = "env_var"
    FLAG = "flag"

    @classmethod
    def from_str(cls, raw: str) -> SettingKind:
        """Create a SettingKind from its textual tag.

        Args:
            raw: Tag such as ``"env_var"``; dashes are accepted for underscores.

        Returns:
            Matching SettingKind member.

        Raises:
            ValueError: If the tag is not a known kind.
        """
        value = raw.strip().lower().replace("-", "_")
        try:
            return cls(value)
        except ValueError as exc:
            message = f"Unknown setting kind '{raw}'"
            raise ValueError(message) from exc


class Source(StrEnum):
    """Origin of a single update request.

    Attributes:
        PROGRAMMATIC: application code calling ``Settings.update``.
        CONF_FILE: the configuration-file loader.
        ENV: the environment-variable loader.
        FLAG: the flag driver, through the override path.
    """

    PROGRAMMATIC = "programmatic"
    CONF_FILE = "conf_file"
    ENV = "env"
    FLAG = "flag"


STRING_SOURCES: Final[frozenset[Source]] = frozenset({Source.ENV, Source.FLAG, Source.CONF_FILE})
LOWER_THAN_FLAG_SOURCES: Final[frozenset[Source]] = frozenset({Source.ENV, Source.CONF_FILE})


class ConfFormat(StrEnum):
    """Configuration file encodings.

    Attributes:
        JSON: JSON documents; the ``cjsn``/``cjson`` extensions allow comments.
        TOML: TOML documents.
        YAML: YAML documents.
    """

    JSON = "json"
    TOML = "toml"
    YAML = "yaml"


class FlagState(StrEnum):
    """Flag-parsing state of a registry.

    ``PARSED`` is terminal. A failed parse returns the registry to
    ``UNPARSED`` so callers can retry with corrected arguments.
    """

    UNPARSED = "unparsed"
    PARSING = "parsing"
    PARSED = "parsed"


class LogFormat(StrEnum):
    """Enumeration of log output formats.

    Attributes:
        TEXT: Human-readable text format.
        JSON: Machine-readable JSON format.
    """

    TEXT = "text"
    JSON = "json"

    @classmethod
    def from_str(cls, raw: str) -> LogFormat:
        """Create a LogFormat enum from a string value.

        Args:
            raw: String representation of the log format.

        Returns:
            LogFormat enum value.

        Raises:
            ValueError: If the string does not match any LogFormat value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            message = f"Unknown log format '{raw}'"
            raise ValueError(message) from exc


class LogComponent(StrEnum):
    """Logical component attached to structured log records."""

    REGISTRY = "registry"
    ENV = "env"
    CONF_FILE = "conf_file"
    FLAGS = "flags"


__all__ = [
    "LOWER_THAN_FLAG_SOURCES",
    "STRING_SOURCES",
    "ConfFormat",
    "DataType",
    "FlagState",
    "LogComponent",
    "LogFormat",
    "SettingKind",
    "Source",
]
