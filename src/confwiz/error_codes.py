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

"""Stable error codes for confwiz exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, NewType

from confwiz.exceptions import (
    ConfFileError,
    ConfwizError,
    ConfwizTypeError,
    ConfwizValidationError,
    ConversionError,
    DecoderError,
    DuplicateNameError,
    DuplicateShortError,
    EmptyNameError,
    FlagParseError,
    ImmutableSettingError,
    LockedAfterFlagsError,
    MissingConfFileError,
    NotOverridableError,
    RegistrationError,
    SettingNotFoundError,
    SourceNotPermittedError,
    TypeMismatchError,
    UnsupportedFormatError,
    UpdateError,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

ErrorCode = NewType("ErrorCode", str)

_ERROR_CODES: dict[type[BaseException], ErrorCode] = {
    ConfwizError: ErrorCode("CW000"),
    ConfwizValidationError: ErrorCode("CW100"),
    ConfwizTypeError: ErrorCode("CW101"),
    RegistrationError: ErrorCode("CW110"),
    EmptyNameError: ErrorCode("CW111"),
    DuplicateNameError: ErrorCode("CW112"),
    DuplicateShortError: ErrorCode("CW113"),
    SettingNotFoundError: ErrorCode("CW120"),
    UpdateError: ErrorCode("CW200"),
    ImmutableSettingError: ErrorCode("CW201"),
    NotOverridableError: ErrorCode("CW202"),
    LockedAfterFlagsError: ErrorCode("CW203"),
    SourceNotPermittedError: ErrorCode("CW204"),
    TypeMismatchError: ErrorCode("CW210"),
    ConversionError: ErrorCode("CW211"),
    ConfFileError: ErrorCode("CW300"),
    UnsupportedFormatError: ErrorCode("CW301"),
    MissingConfFileError: ErrorCode("CW302"),
    DecoderError: ErrorCode("CW303"),
    FlagParseError: ErrorCode("CW400"),
}


def error_code_for(exc: BaseException) -> ErrorCode:
    """Return a stable error code for a structured confwiz exception."""

    for cls in type(exc).__mro__:
        code = _ERROR_CODES.get(cls)
        if code:
            return code
    return ErrorCode("CW000")


def error_code_catalog() -> Mapping[str, ErrorCode]:
    """Return a stable mapping of fully-qualified exception names to error codes.

    Intended for diagnostics, tests, and documentation generation without
    exposing the private mapping.
    """

    result: dict[str, ErrorCode] = {}
    for exc_type, code in _ERROR_CODES.items():
        key = f"{exc_type.__module__}.{exc_type.__name__}"
        result[key] = code
    return result


__all__ = ["ErrorCode", "error_code_catalog", "error_code_for"]
