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

"""Exception hierarchy for confwiz.

Every failure the registry reports is a subclass of ``ConfwizError`` and keeps
the values that describe it as attributes, so callers can branch on structure
rather than on message text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from confwiz.core.model_types import DataType, Source


class ConfwizError(Exception):
    """Base error for all confwiz exceptions."""


class ConfwizValidationError(ConfwizError, ValueError):
    """Raised when input data fails validation checks."""


class ConfwizTypeError(ConfwizError, TypeError):
    """Raised when input data has an unexpected type."""


class RegistrationError(ConfwizValidationError):
    """Raised when a setting cannot be registered."""


class EmptyNameError(RegistrationError):
    """Raised when a setting is registered without a name."""

    def __init__(self) -> None:
        """Initialize the exception."""
        super().__init__("setting name must not be empty")


class DuplicateNameError(RegistrationError):
    """Raised when a setting name is already registered."""

    def __init__(self, name: str) -> None:
        """Initialize the exception with the colliding name.

        Args:
            name: The setting name that already exists.
        """
        self.name = name
        super().__init__(f"{name}: setting already exists")


class DuplicateShortError(RegistrationError):
    """Raised when a flag short alias is already bound to another setting."""

    def __init__(self, short: str, bound_to: str) -> None:
        """Initialize the exception with the alias and its current owner.

        Args:
            short: The short alias that collided.
            bound_to: Long name of the setting that already owns the alias.
        """
        self.short = short
        self.bound_to = bound_to
        super().__init__(f"{short}: short flag already exists for {bound_to}")


class SettingNotFoundError(ConfwizError, KeyError):
    """Raised when a read, update, or override targets an unregistered key."""

    def __init__(self, name: str) -> None:
        """Initialize the exception with the missing key.

        Args:
            name: The setting name that was not found.
        """
        self.name = name
        super().__init__(f"{name}: setting not found")

    def __str__(self) -> str:
        """Return the message without KeyError's repr quoting."""
        return str(self.args[0])


class UpdateError(ConfwizError):
    """Raised when the update engine rejects a write."""

    def __init__(self, name: str, message: str) -> None:
        """Initialize the exception with the setting name and reason.

        Args:
            name: The setting the write targeted.
            message: Human-readable rejection reason.
        """
        self.name = name
        super().__init__(message)


class ImmutableSettingError(UpdateError):
    """Raised when a write targets a core setting."""

    def __init__(self, name: str) -> None:
        """Initialize the exception with the core setting's name.

        Args:
            name: The core setting that was targeted.
        """
        super().__init__(name, f"{name}: core settings cannot be updated")


class NotOverridableError(UpdateError):
    """Raised when an override targets a setting that is not a non-core flag."""

    def __init__(self, name: str) -> None:
        """Initialize the exception with the setting name.

        Args:
            name: The setting that cannot be overridden.
        """
        super().__init__(name, f"{name}: only non-core flag settings can be overridden")


class LockedAfterFlagsError(UpdateError):
    """Raised when a lower-precedence source writes after flags were parsed."""

    def __init__(self, name: str, source: Source) -> None:
        """Initialize the exception with the setting name and rejected source.

        Args:
            name: The setting that was targeted.
            source: The source whose write was rejected.
        """
        self.source = source
        super().__init__(name, f"{name}: {source} updates are not allowed after flags have been parsed")


class SourceNotPermittedError(UpdateError):
    """Raised when a setting's kind does not allow updates from a source."""

    def __init__(self, name: str, source: Source) -> None:
        """Initialize the exception with the setting name and rejected source.

        Args:
            name: The setting that was targeted.
            source: The source the setting's kind does not permit.
        """
        self.source = source
        super().__init__(name, f"{name}: setting cannot be updated from {source}")


class TypeMismatchError(ConfwizTypeError):
    """Raised when a value's type differs from the type a caller expects."""

    def __init__(self, name: str, is_: str, want: str) -> None:
        """Initialize the exception with the observed and expected types.

        Args:
            name: The setting involved.
            is_: Type that was found.
            want: Type that was required.
        """
        self.name = name
        self.is_ = is_
        self.want = want
        super().__init__(f"{name}: type mismatch: is {is_}, want {want}")


class ConversionError(ConfwizValidationError):
    """Raised when text cannot be converted to a setting's data type."""

    def __init__(self, name: str, source_text: str, target_type: DataType) -> None:
        """Initialize the exception with the failing text and target type.

        Args:
            name: The setting being converted for.
            source_text: The text that failed to convert.
            target_type: Data type the text was converted to.
        """
        self.name = name
        self.source_text = source_text
        self.target_type = target_type
        super().__init__(f"{name}: cannot convert {source_text!r} to {target_type}")


class ConfFileError(ConfwizError):
    """Base class for configuration-file failures."""


class UnsupportedFormatError(ConfFileError, ValueError):
    """Raised when a configuration filename does not name a supported format."""

    def __init__(self, filename: str, reason: str) -> None:
        """Initialize the exception with the filename and what was wrong.

        Args:
            filename: The configuration filename that was inspected.
            reason: Why no format could be derived from it.
        """
        self.filename = filename
        self.reason = reason
        super().__init__(f"unable to determine configuration format of {filename!r}: {reason}")


class MissingConfFileError(ConfFileError, FileNotFoundError):
    """Raised when a required configuration file cannot be found."""

    def __init__(self, filename: str, searched: tuple[str, ...] = ()) -> None:
        """Initialize the exception with the filename and the locations tried.

        Args:
            filename: The configuration filename that was requested.
            searched: Every location that was checked, in order.
        """
        self.filename = filename
        self.searched = searched
        message = f"configuration file {filename!r} not found"
        if searched:
            message = f"{message}; searched: {'; '.join(searched)}"
        super().__init__(message)

    def __str__(self) -> str:
        """Return the message instead of OSError's errno formatting."""
        return str(self.args[0])


class DecoderError(ConfFileError):
    """Raised when a configuration file cannot be decoded."""

    def __init__(self, filename: str, error: Exception | str) -> None:
        """Initialize the exception with the filename and decoder failure.

        Args:
            filename: The configuration file that failed to decode.
            error: The underlying decoder exception or message.
        """
        self.filename = filename
        self.error = error
        super().__init__(f"{filename}: {error}")


class FlagParseError(ConfwizError):
    """Raised when the flag parser rejects the argument vector."""

    def __init__(self, inner: str) -> None:
        """Initialize the exception with the parser's message.

        Args:
            inner: Message reported by the flag parser, kept verbatim.
        """
        self.inner = inner
        super().__init__(f"parse of command-line arguments failed: {inner}")


__all__ = [
    "ConfFileError",
    "ConfwizError",
    "ConfwizTypeError",
    "ConfwizValidationError",
    "ConversionError",
    "DecoderError",
    "DuplicateNameError",
    "DuplicateShortError",
    "EmptyNameError",
    "FlagParseError",
    "ImmutableSettingError",
    "LockedAfterFlagsError",
    "MissingConfFileError",
    "NotOverridableError",
    "RegistrationError",
    "SettingNotFoundError",
    "SourceNotPermittedError",
    "TypeMismatchError",
    "UnsupportedFormatError",
    "UpdateError",
]
