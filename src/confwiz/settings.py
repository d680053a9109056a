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

"""The settings registry and its update engine.

A :class:`Settings` instance owns a set of named, typed settings. Each setting
is registered with a :class:`~confwiz.core.model_types.SettingKind` that fixes
which inputs may change it afterwards. Values are merged from the environment,
then the configuration file, then command-line flags; each later source wins.

Example:
    >>> settings = Settings("app")
    >>> settings.add_flag("retries", 3, usage="attempts before giving up")
    >>> settings.parse_flags(["-retries=9", "deploy"])
    ['deploy']
    >>> settings.get_int("retries")
    9
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from typing import TYPE_CHECKING, Final, cast

from pydantic import ValidationError

from confwiz._internal.locks import ReadWriteLock
from confwiz._internal.logging_utils import structured_extra
from confwiz.conffile import ConfFileSearch, read_conf_file
from confwiz.core.model_types import (
    LOWER_THAN_FLAG_SOURCES,
    DataType,
    FlagState,
    LogComponent,
    SettingKind,
    Source,
)
from confwiz.exceptions import (
    ConfwizError,
    ConfwizValidationError,
    DecoderError,
    DuplicateNameError,
    DuplicateShortError,
    EmptyNameError,
    ImmutableSettingError,
    LockedAfterFlagsError,
    MissingConfFileError,
    NotOverridableError,
    SettingNotFoundError,
    SourceNotPermittedError,
    TypeMismatchError,
    UnsupportedFormatError,
)
from confwiz.flags import FlagBinding, default_parser_factory
from confwiz.formats import decode, format_from_filename
from confwiz.lattice import permits
from confwiz.setting import Setting
from confwiz.values import canonical_text, check_native, coerce, type_label

if TYPE_CHECKING:
    from collections.abc import Sequence

    from confwiz.flags import FlagParser, FlagParserFactory
    from confwiz.formats import Decoder

logger: logging.Logger = logging.getLogger("confwiz.registry")
loader_logger: logging.Logger = logging.getLogger("confwiz.loaders")
flags_logger: logging.Logger = logging.getLogger("confwiz.flags")

_ENV_KINDS: Final[frozenset[SettingKind]] = frozenset({SettingKind.ENV_VAR, SettingKind.FLAG})


def _coerce_kind(kind: SettingKind | str) -> SettingKind:
    if isinstance(kind, SettingKind):
        return kind
    try:
        return SettingKind.from_str(kind)
    except ValueError as exc:
        raise ConfwizValidationError(str(exc)) from exc


def _coerce_data_type(data_type: DataType | str) -> DataType:
    if isinstance(data_type, DataType):
        return data_type
    try:
        return DataType.from_str(data_type)
    except ValueError as exc:
        raise ConfwizValidationError(str(exc)) from exc


def _coerce_search(search: ConfFileSearch | Mapping[str, object] | None) -> ConfFileSearch:
    if search is None:
        return ConfFileSearch()
    if isinstance(search, ConfFileSearch):
        return search
    try:
        return ConfFileSearch.model_validate(search)
    except ValidationError as exc:
        message = f"invalid configuration file search options: {exc}"
        raise ConfwizValidationError(message) from exc


class Settings:
    """Thread-safe registry of typed settings for one application.

    Args:
        name: Registry name; prefixes every environment variable name.
        require_conf_file: Whether a missing configuration file is an error.
        conf_file_search: Extra locations to look for the configuration file.
        decoder: Callable decoding configuration bytes into a mapping.
        parser_factory: Callable returning a fresh flag parser for each parse.
    """

    def __init__(
        self,
        name: str,
        *,
        require_conf_file: bool = True,
        conf_file_search: ConfFileSearch | Mapping[str, object] | None = None,
        decoder: Decoder = decode,
        parser_factory: FlagParserFactory = default_parser_factory,
    ) -> None:
        self._name = name
        self._lock = ReadWriteLock()
        self._settings: dict[str, Setting] = {}
        self._shorts: dict[str, str] = {}
        self._conf_file_vars: set[str] = set()
        self._conf_filename = ""
        self._use_conf_file = False
        self._use_env_vars = False
        self._use_flags = False
        self._require_conf_file = require_conf_file
        self._search = _coerce_search(conf_file_search)
        self._decoder = decoder
        self._parser_factory = parser_factory
        self._conf_file_vars_set = False
        self._env_vars_set = False
        self._flag_state = FlagState.UNPARSED
        self._visited: tuple[str, ...] = ()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"

    @property
    def name(self) -> str:
        return self._name

    def register(
        self,
        kind: SettingKind | str,
        data_type: DataType | str,
        name: str,
        value: object,
        *,
        short: str = "",
        default_text: str | None = None,
        usage: str = "",
    ) -> None:
        """Register a new setting.

        Args:
            kind: Provenance class; decides which sources may update the value.
            data_type: Representation of the value.
            name: Unique, non-empty key.
            value: Initial value; must already match ``data_type``.
            short: Optional flag alias. Only flag settings index it.
            default_text: Text shown as the default; defaults to the canonical
                text of ``value``.
            usage: Help text for flag usage output.

        Raises:
            EmptyNameError: If ``name`` is empty.
            DuplicateNameError: If ``name`` is already registered.
            DuplicateShortError: If a flag's name or short clashes with the
                name or short of a flag, itself included.
            ConfwizValidationError: If ``kind`` or ``data_type`` is an unknown tag.
            TypeMismatchError: If ``value`` does not match ``data_type``.
        """
        if not name:
            raise EmptyNameError
        kind = _coerce_kind(kind)
        data_type = _coerce_data_type(data_type)
        value = check_native(name, value, data_type)
        if default_text is None:
            default_text = canonical_text(data_type, value)
        record = Setting.create(
            kind,
            data_type,
            name,
            value,
            short=short,
            default_text=default_text,
            usage=usage,
        )
        is_flag_kind = kind is SettingKind.FLAG
        indexes_short = bool(short) and is_flag_kind
        with self._lock.write_locked():
            if name in self._settings:
                raise DuplicateNameError(name)
            if is_flag_kind:
                self._check_flag_strings(name, short if indexes_short else "")
            self._settings[name] = record
            if indexes_short:
                self._shorts[short] = name
            if record.is_conf_file_var:
                self._conf_file_vars.add(name)
            if kind in _ENV_KINDS:
                self._use_env_vars = True
            if kind is SettingKind.FLAG:
                self._use_flags = True

    def _check_flag_strings(self, name: str, short: str) -> None:
        # Caller holds the write lock. Flag names and shorts share one
        # option-string namespace on the command line.
        if name in self._shorts:
            raise DuplicateShortError(name, self._shorts[name])
        if not short:
            return
        if short == name:
            raise DuplicateShortError(short, name)
        if short in self._shorts:
            raise DuplicateShortError(short, self._shorts[short])
        existing = self._settings.get(short)
        if existing is not None and existing.kind is SettingKind.FLAG:
            raise DuplicateShortError(short, short)

    def add(self, name: str, value: object, *, data_type: DataType | str | None = None, usage: str = "") -> None:
        """Register a basic setting; only application code may change it."""
        self._add(SettingKind.BASIC, name, value, data_type=data_type, usage=usage)

    def add_core(self, name: str, value: object, *, data_type: DataType | str | None = None, usage: str = "") -> None:
        """Register a core setting; its value never changes."""
        self._add(SettingKind.CORE, name, value, data_type=data_type, usage=usage)

    def add_conf_file_var(
        self,
        name: str,
        value: object,
        *,
        data_type: DataType | str | None = None,
        usage: str = "",
    ) -> None:
        """Register a setting the configuration file may change."""
        self._add(SettingKind.CONF_FILE_VAR, name, value, data_type=data_type, usage=usage)

    def add_env_var(
        self,
        name: str,
        value: object,
        *,
        data_type: DataType | str | None = None,
        usage: str = "",
    ) -> None:
        """Register a setting the environment or configuration file may change."""
        self._add(SettingKind.ENV_VAR, name, value, data_type=data_type, usage=usage)

    def add_flag(
        self,
        name: str,
        value: object,
        short: str = "",
        usage: str = "",
        *,
        data_type: DataType | str | None = None,
    ) -> None:
        """Register a setting that flags, the environment or the file may change."""
        self._add(SettingKind.FLAG, name, value, data_type=data_type, short=short, usage=usage)

    def _add(
        self,
        kind: SettingKind,
        name: str,
        value: object,
        *,
        data_type: DataType | str | None,
        short: str = "",
        usage: str,
    ) -> None:
        resolved = DataType.infer(value) if data_type is None else data_type
        self.register(kind, resolved, name, value, short=short, usage=usage)

    def update(self, name: str, value: object, *, source: Source = Source.PROGRAMMATIC) -> None:
        """Change a setting's value on behalf of ``source``.

        Text from the environment, flags or the configuration file is
        converted to the setting's type; any other value must already match.

        Raises:
            SettingNotFoundError: If ``name`` is not registered.
            ImmutableSettingError: If the setting is a core setting.
            LockedAfterFlagsError: If flags were parsed and ``source`` has lower
                precedence than flags.
            SourceNotPermittedError: If the setting's kind excludes ``source``.
            ConversionError: If text cannot be converted.
            TypeMismatchError: If a native value has the wrong type.
        """
        with self._lock.write_locked():
            self._update(name, value, source)

    def update_bool(self, name: str, value: bool) -> None:
        self._update_typed(name, value, DataType.BOOL)

    def update_int(self, name: str, value: int) -> None:
        self._update_typed(name, value, DataType.INT)

    def update_int64(self, name: str, value: int) -> None:
        self._update_typed(name, value, DataType.INT64)

    def update_string(self, name: str, value: str) -> None:
        self._update_typed(name, value, DataType.STRING)

    def override(self, name: str, value: object) -> None:
        """Set a flag setting's value, as flag parsing does.

        Raises:
            SettingNotFoundError: If ``name`` is not registered.
            NotOverridableError: If the setting is not a non-core flag.
            ConversionError: If text cannot be converted.
            TypeMismatchError: If a native value has the wrong type.
        """
        with self._lock.write_locked():
            self._settings[name] = self._overridden(name, value)

    def _lookup(self, name: str) -> Setting:
        record = self._settings.get(name)
        if record is None:
            raise SettingNotFoundError(name)
        return record

    def _update(self, name: str, value: object, source: Source) -> None:
        # Caller holds the write lock.
        current = self._lookup(name)
        if current.is_core:
            raise ImmutableSettingError(name)
        if self._flag_state is FlagState.PARSED and source in LOWER_THAN_FLAG_SOURCES:
            raise LockedAfterFlagsError(name, source)
        if not permits(current, source):
            raise SourceNotPermittedError(name, source)
        self._settings[name] = current.with_value(coerce(name, value, current.data_type, source))

    def _update_typed(self, name: str, value: object, want: DataType) -> None:
        with self._lock.write_locked():
            current = self._lookup(name)
            if current.data_type is not want:
                raise TypeMismatchError(name, str(current.data_type), str(want))
            self._update(name, value, Source.PROGRAMMATIC)

    def _overridden(self, name: str, value: object) -> Setting:
        # Caller holds the write lock.
        current = self._lookup(name)
        if not current.is_flag or current.is_core:
            raise NotOverridableError(name)
        return current.with_value(coerce(name, value, current.data_type, Source.FLAG))

    def env_var_name(self, name: str) -> str:
        """Return the environment variable consulted for setting ``name``."""
        return f"{self._name}_{name}".upper()

    def load_env_vars(self) -> None:
        """Update env-var-capable settings from the environment.

        Variables that are unset or empty are ignored. The first failing update
        aborts the walk and is raised; earlier updates stay applied and the
        phase remains incomplete. A completed phase is never repeated.
        """
        with self._lock.read_locked():
            if not self._use_env_vars or self._env_vars_set:
                return
            names = sorted(name for name, record in self._settings.items() if record.is_env_var)
        pending = [(name, raw) for name in names if (raw := os.environ.get(self.env_var_name(name), ""))]
        with self._lock.write_locked():
            if self._env_vars_set:
                return
            for name, raw in pending:
                self._update(name, raw, Source.ENV)
            self._env_vars_set = True
        loader_logger.debug(
            "Applied %d environment variable(s)",
            len(pending),
            extra=structured_extra(LogComponent.ENV, registry=self._name, count=len(pending)),
        )

    def set_conf_filename(self, filename: str) -> None:
        """Point the registry at a configuration file and enable loading it.

        Raises:
            UnsupportedFormatError: If ``filename`` is empty.
        """
        if not filename:
            raise UnsupportedFormatError(filename, "no filename")
        with self._lock.write_locked():
            self._conf_filename = filename
            self._use_conf_file = True

    @property
    def conf_filename(self) -> str:
        with self._lock.read_locked():
            return self._conf_filename

    def set_require_conf_file(self, required: bool) -> None:
        with self._lock.write_locked():
            self._require_conf_file = required

    @property
    def require_conf_file(self) -> bool:
        with self._lock.read_locked():
            return self._require_conf_file

    def set_conf_file_search(self, search: ConfFileSearch | Mapping[str, object] | None) -> None:
        """Replace the locations searched when the configuration file is not found.

        Raises:
            ConfwizValidationError: If a mapping of options fails validation.
        """
        resolved = _coerce_search(search)
        with self._lock.write_locked():
            self._search = resolved

    @property
    def conf_file_search(self) -> ConfFileSearch:
        with self._lock.read_locked():
            return self._search

    def load_conf_file(self) -> None:
        """Update configuration-file settings from the configured file.

        Only keys registered as configuration-file settings are applied; other
        top-level keys are ignored. That includes keys naming basic or core
        settings, which the file never reaches, so they are skipped rather than
        rejected. A missing file is an error only when the file is required. A
        completed phase is never repeated.

        Raises:
            UnsupportedFormatError: If the filename has no supported extension.
            MissingConfFileError: If a required file cannot be found.
            DecoderError: If the file cannot be decoded into a mapping.
        """
        with self._lock.read_locked():
            if not self._use_conf_file or not self._conf_filename or self._conf_file_vars_set:
                return
            filename = self._conf_filename
            search = self._search
            decoder = self._decoder
            required = self._require_conf_file
        conf_format = format_from_filename(filename)
        try:
            path, data = read_conf_file(filename, search)
        except MissingConfFileError:
            if required:
                raise
            with self._lock.write_locked():
                self._conf_file_vars_set = True
            loader_logger.debug(
                "Configuration file %s not found; continuing without it",
                filename,
                extra=structured_extra(LogComponent.CONF_FILE, registry=self._name, path=filename),
            )
            return
        try:
            document = decoder(conf_format, data)
        # ignore JUSTIFIED: decoders are pluggable; any failure becomes a structured error
        except Exception as exc:
            raise DecoderError(filename, exc) from exc
        if not isinstance(document, Mapping):
            raise DecoderError(filename, f"decoded {type(document).__name__}, expected a mapping")
        with self._lock.write_locked():
            if self._conf_file_vars_set:
                return
            applied = 0
            for key, value in document.items():
                if key not in self._conf_file_vars:
                    continue
                self._update(key, value, Source.CONF_FILE)
                applied += 1
            self._conf_file_vars_set = True
        loader_logger.debug(
            "Applied %d setting(s) from %s",
            applied,
            path,
            extra=structured_extra(
                LogComponent.CONF_FILE,
                registry=self._name,
                path=path,
                format=conf_format,
                count=applied,
            ),
        )

    def materialize(self) -> None:
        """Apply environment variables, then the configuration file.

        Flags are not parsed here; call :meth:`parse_flags` afterwards.
        """
        self.load_env_vars()
        self.load_conf_file()

    def is_set(self) -> bool:
        """Return whether every enabled source has been applied."""
        with self._lock.read_locked():
            if self._use_conf_file and not self._conf_file_vars_set:
                return False
            if self._use_env_vars and not self._env_vars_set:
                return False
            return not self._use_flags or self._flag_state is FlagState.PARSED

    @property
    def use_env_vars(self) -> bool:
        with self._lock.read_locked():
            return self._use_env_vars

    def set_use_env_vars(self, enabled: bool) -> None:
        with self._lock.write_locked():
            self._use_env_vars = enabled

    @property
    def use_conf_file(self) -> bool:
        with self._lock.read_locked():
            return self._use_conf_file

    def set_use_conf_file(self, enabled: bool) -> None:
        with self._lock.write_locked():
            self._use_conf_file = enabled

    @property
    def use_flags(self) -> bool:
        with self._lock.read_locked():
            return self._use_flags

    def set_use_flags(self, enabled: bool) -> None:
        with self._lock.write_locked():
            self._use_flags = enabled

    @property
    def flag_state(self) -> FlagState:
        with self._lock.read_locked():
            return self._flag_state

    def _flag_bindings(self) -> list[FlagBinding]:
        return [
            FlagBinding(
                name=record.name,
                short=record.short,
                data_type=record.data_type,
                default_text=record.default_text,
                usage=record.usage,
            )
            for _, record in sorted(self._settings.items())
            if record.is_flag and record.data_type is not DataType.OPAQUE
        ]

    def _build_parser(self, factory: FlagParserFactory, bindings: Sequence[FlagBinding]) -> FlagParser:
        parser = factory(self._name)
        for binding in bindings:
            parser.bind(binding)
        return parser

    def parse_flags(self, args: Sequence[str] | None = None) -> list[str]:
        """Parse command-line flags and apply them to flag settings.

        Flags are parsed at most once. When flags are disabled or were already
        parsed, ``args`` is returned unchanged.

        Args:
            args: Argument vector without the program name; defaults to
                ``sys.argv[1:]``.

        Returns:
            The arguments remaining after the last flag.

        Raises:
            FlagParseError: If the arguments cannot be parsed. No setting is
                changed and parsing may be retried.
        """
        argv = list(sys.argv[1:] if args is None else args)
        with self._lock.write_locked():
            if not self._use_flags or self._flag_state is not FlagState.UNPARSED:
                return argv
            self._flag_state = FlagState.PARSING
            bindings = self._flag_bindings()
            factory = self._parser_factory
        try:
            parser = self._build_parser(factory, bindings)
            parser.parse(argv)
            parsed = dict(parser.visited())
            remaining = parser.remaining()
        except Exception:
            with self._lock.write_locked():
                self._flag_state = FlagState.UNPARSED
            raise
        with self._lock.write_locked():
            try:
                updates: dict[str, Setting] = {}
                for flag, value in parsed.items():
                    name = flag if flag in self._settings else self._shorts.get(flag)
                    if name is None:
                        continue
                    updates[name] = self._overridden(name, value)
            except ConfwizError:
                self._flag_state = FlagState.UNPARSED
                raise
            self._settings.update(updates)
            self._visited = tuple(sorted(updates))
            self._flag_state = FlagState.PARSED
        flags_logger.debug(
            "Parsed %d flag(s)",
            len(updates),
            extra=structured_extra(LogComponent.FLAGS, registry=self._name, count=len(updates)),
        )
        return remaining

    def visited(self) -> list[str]:
        """Return the names of flag settings set by parsing, sorted."""
        with self._lock.read_locked():
            return list(self._visited)

    def was_visited(self, name: str) -> bool:
        with self._lock.read_locked():
            return name in self._visited

    def flag_usage(self) -> str:
        """Return help text describing every flag setting."""
        with self._lock.read_locked():
            bindings = self._flag_bindings()
            factory = self._parser_factory
        return self._build_parser(factory, bindings).format_usage()

    def get(self, name: str) -> object:
        """Return the value of ``name``.

        Raises:
            SettingNotFoundError: If ``name`` is not registered.
        """
        with self._lock.read_locked():
            return self._lookup(name).value

    def _typed(self, name: str, want: DataType) -> object:
        with self._lock.read_locked():
            record = self._lookup(name)
        if record.data_type is not want:
            raise TypeMismatchError(name, str(record.data_type), str(want))
        found = DataType.infer(record.value)
        if found is not want and not (found is DataType.INT and want is DataType.INT64):
            raise TypeMismatchError(name, type_label(record.value), str(want))
        return record.value

    def get_bool(self, name: str) -> bool:
        """Return the value of a bool setting.

        Raises:
            SettingNotFoundError: If ``name`` is not registered.
            TypeMismatchError: If the setting is not a bool setting.
        """
        return cast("bool", self._typed(name, DataType.BOOL))

    def get_int(self, name: str) -> int:
        """Return the value of an int setting.

        Raises:
            SettingNotFoundError: If ``name`` is not registered.
            TypeMismatchError: If the setting is not an int setting.
        """
        return cast("int", self._typed(name, DataType.INT))

    def get_int64(self, name: str) -> int:
        """Return the value of an int64 setting.

        Raises:
            SettingNotFoundError: If ``name`` is not registered.
            TypeMismatchError: If the setting is not an int64 setting.
        """
        return cast("int", self._typed(name, DataType.INT64))

    def get_string(self, name: str) -> str:
        """Return the value of a string setting.

        Raises:
            SettingNotFoundError: If ``name`` is not registered.
            TypeMismatchError: If the setting is not a string setting.
        """
        return cast("str", self._typed(name, DataType.STRING))

    # The *_value readers discard every error and return a zero value.

    def value(self, name: str) -> object | None:
        try:
            return self.get(name)
        except ConfwizError:
            return None

    def bool_value(self, name: str) -> bool:
        try:
            return self.get_bool(name)
        except ConfwizError:
            return False

    def int_value(self, name: str) -> int:
        try:
            return self.get_int(name)
        except ConfwizError:
            return 0

    def int64_value(self, name: str) -> int:
        try:
            return self.get_int64(name)
        except ConfwizError:
            return 0

    def string_value(self, name: str) -> str:
        try:
            return self.get_string(name)
        except ConfwizError:
            return ""

    def exists(self, name: str) -> bool:
        with self._lock.read_locked():
            return name in self._settings

    def setting(self, name: str) -> Setting:
        """Return the current record for ``name``.

        Raises:
            SettingNotFoundError: If ``name`` is not registered.
        """
        with self._lock.read_locked():
            return self._lookup(name)

    def is_core(self, name: str) -> bool:
        return self.setting(name).is_core

    def is_conf_file_var(self, name: str) -> bool:
        return self.setting(name).is_conf_file_var

    def is_env_var(self, name: str) -> bool:
        return self.setting(name).is_env_var

    def is_flag(self, name: str) -> bool:
        return self.setting(name).is_flag

    def names(
        self,
        *,
        kind: SettingKind | str | None = None,
        data_type: DataType | str | None = None,
    ) -> list[str]:
        """Return registered setting names in sorted order.

        Args:
            kind: Only include settings of this kind.
            data_type: Only include settings of this data type.
        """
        want_kind = None if kind is None else _coerce_kind(kind)
        want_type = None if data_type is None else _coerce_data_type(data_type)
        with self._lock.read_locked():
            records = list(self._settings.values())
        return sorted(
            record.name
            for record in records
            if (want_kind is None or record.kind is want_kind)
            and (want_type is None or record.data_type is want_type)
        )


__all__ = ["Settings"]
