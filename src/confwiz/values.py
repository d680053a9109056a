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

"""Canonical text forms and type-directed conversion for setting values.

Every setting holds exactly one Python object whose representation is fixed by
its ``DataType``:

- ``BOOL`` holds a ``bool``
- ``INT`` and ``INT64`` hold an ``int`` (never a ``bool``) within their range
- ``STRING`` holds a ``str``
- ``OPAQUE`` holds any object

Text arriving from the environment, flags, or a configuration file is routed
through :func:`convert_text`; native values are checked by :func:`check_native`.
"""

from __future__ import annotations

import re
import sys
from typing import Final, cast

from confwiz.core.model_types import STRING_SOURCES, DataType, Source
from confwiz.exceptions import ConversionError, TypeMismatchError

INT_MIN: Final[int] = -sys.maxsize - 1
INT_MAX: Final[int] = sys.maxsize
INT64_MIN: Final[int] = -(2**63)
INT64_MAX: Final[int] = 2**63 - 1

TRUE_STRINGS: Final[frozenset[str]] = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_STRINGS: Final[frozenset[str]] = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_DECIMAL_RE: Final[re.Pattern[str]] = re.compile(r"[+-]?[0-9]+")
_INT_BOUNDS: Final[dict[DataType, tuple[int, int]]] = {
    DataType.INT: (INT_MIN, INT_MAX),
    DataType.INT64: (INT64_MIN, INT64_MAX),
}


def parse_bool(text: str) -> bool:
    """Parse a truth value.

    Args:
        text: One of ``1 t T TRUE true True`` or ``0 f F FALSE false False``.

    Returns:
        The parsed boolean.

    Raises:
        ValueError: If ``text`` is not an accepted spelling.
    """
    if text in TRUE_STRINGS:
        return True
    if text in FALSE_STRINGS:
        return False
    message = f"invalid boolean {text!r}"
    raise ValueError(message)


def parse_decimal(text: str, data_type: DataType) -> int:
    """Parse a base-10 integer and check it against ``data_type``'s range.

    Raises:
        ValueError: If ``text`` is not a signed decimal or is out of range.
    """
    if _DECIMAL_RE.fullmatch(text) is None:
        message = f"invalid integer {text!r}"
        raise ValueError(message)
    value = int(text)
    low, high = _INT_BOUNDS[data_type]
    if not low <= value <= high:
        message = f"{text} is out of range for {data_type}"
        raise ValueError(message)
    return value


def type_label(value: object) -> str:
    """Return the label used for ``value`` in type-mismatch errors."""
    data_type = DataType.infer(value)
    if data_type is DataType.OPAQUE:
        return type(value).__name__
    return str(data_type)


def canonical_text(data_type: DataType, value: object) -> str:
    """Return the deterministic textual form of ``value``.

    Booleans render as ``true``/``false``, integers in base 10, strings
    verbatim, and opaque values through ``str``.
    """
    if data_type is DataType.BOOL:
        return "true" if value else "false"
    return str(value)


def convert_text(name: str, text: str, data_type: DataType) -> object:
    """Convert ``text`` to the representation of ``data_type``.

    Args:
        name: Setting name, reported in errors.
        text: Raw text from a string source.
        data_type: Target data type.

    Returns:
        The converted value.

    Raises:
        ConversionError: If the text cannot be represented as ``data_type``.
    """
    try:
        match data_type:
            case DataType.BOOL:
                return parse_bool(text)
            case DataType.INT | DataType.INT64:
                return parse_decimal(text, data_type)
            case DataType.STRING:
                return text
            case _:
                raise ValueError(text)
    except ValueError as exc:
        raise ConversionError(name, text, data_type) from exc


def check_native(name: str, value: object, data_type: DataType) -> object:
    """Verify that ``value`` already has the representation of ``data_type``.

    Raises:
        TypeMismatchError: If the Python type does not match.
        ConversionError: If an integer falls outside the type's range.
    """
    if data_type is DataType.OPAQUE:
        return value
    found = DataType.infer(value)
    compatible = found is data_type or (found is DataType.INT and data_type is DataType.INT64)
    if not compatible:
        raise TypeMismatchError(name, type_label(value), str(data_type))
    if data_type in _INT_BOUNDS:
        low, high = _INT_BOUNDS[data_type]
        if not low <= cast("int", value) <= high:
            raise ConversionError(name, str(value), data_type)
    return value


def coerce(name: str, value: object, data_type: DataType, source: Source) -> object:
    """Bring an update value into the representation of ``data_type``.

    Strings from string-bearing sources are converted; everything else must
    already be native. Opaque settings accept any native value but never text
    from the environment or flags.
    """
    if isinstance(value, str) and source in STRING_SOURCES:
        if data_type is DataType.OPAQUE:
            if source is Source.CONF_FILE:
                return value
            raise ConversionError(name, value, data_type)
        return convert_text(name, value, data_type)
    return check_native(name, value, data_type)


__all__ = [
    "FALSE_STRINGS",
    "INT64_MAX",
    "INT64_MIN",
    "INT_MAX",
    "INT_MIN",
    "TRUE_STRINGS",
    "canonical_text",
    "check_native",
    "coerce",
    "convert_text",
    "parse_bool",
    "parse_decimal",
    "type_label",
]
