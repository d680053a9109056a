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

"""confwiz - typed, precedence-ordered application settings.

Settings are registered with a kind that decides which inputs may change them,
then merged from environment variables, a configuration file, and
command-line flags, in that order of increasing precedence.
"""

from __future__ import annotations

from confwiz._internal.logging_utils import configure_logging
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

from .conffile import ConfFileSearch
from .core.model_types import ConfFormat, DataType, FlagState, SettingKind, Source
from .default import default_settings, reset_default_settings
from .error_codes import error_code_catalog, error_code_for
from .flags import ArgparseFlagParser, FlagBinding, FlagParser
from .setting import Setting
from .settings import Settings

__all__ = [
    "ArgparseFlagParser",
    "ConfFileError",
    "ConfFileSearch",
    "ConfFormat",
    "ConfwizError",
    "ConfwizTypeError",
    "ConfwizValidationError",
    "ConversionError",
    "DataType",
    "DecoderError",
    "DuplicateNameError",
    "DuplicateShortError",
    "EmptyNameError",
    "FlagBinding",
    "FlagParseError",
    "FlagParser",
    "FlagState",
    "ImmutableSettingError",
    "LockedAfterFlagsError",
    "MissingConfFileError",
    "NotOverridableError",
    "RegistrationError",
    "Setting",
    "SettingKind",
    "SettingNotFoundError",
    "Settings",
    "Source",
    "SourceNotPermittedError",
    "TypeMismatchError",
    "UnsupportedFormatError",
    "UpdateError",
    "__version__",
    "configure_logging",
    "default_settings",
    "error_code_catalog",
    "error_code_for",
    "reset_default_settings",
]

__version__ = "0.1.0"
