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

"""Flag parser protocol and the default ``argparse`` adapter.

Flags follow the conventional single-dash style: ``-name=value``,
``-name value`` and ``--name=value``; boolean flags also accept a bare
``-name``. Parsing stops at ``--`` or at the first token that is not a flag,
and everything from there on is returned untouched.
"""

from __future__ import annotations

import argparse
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, NoReturn, Protocol

from confwiz.compat import override
from confwiz.core.model_types import DataType
from confwiz.exceptions import ConversionError, FlagParseError
from confwiz.values import convert_text

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(slots=True, frozen=True)
class FlagBinding:
    """Snapshot of one flag setting handed to a parser.

    Attributes:
        name: Long flag name; also the destination reported by ``visited``.
        short: Optional alias sharing the destination; empty when absent.
        data_type: Type the parsed text is converted to.
        default_text: Canonical text of the registration value, for help output.
        usage: Help text.
    """

    name: str
    short: str
    data_type: DataType
    default_text: str
    usage: str


class FlagParser(Protocol):
    """Minimal interface the registry needs from a command-line parser."""

    def bind(self, binding: FlagBinding) -> None:
        """Declare a flag variable."""
        ...  # pragma: no cover - Protocol definition

    def parse(self, args: Sequence[str]) -> None:
        """Parse ``args``; raise ``FlagParseError`` on any failure."""
        ...  # pragma: no cover - Protocol definition

    def visited(self) -> Mapping[str, object]:
        """Return parsed values keyed by the flag name that was set."""
        ...  # pragma: no cover - Protocol definition

    def remaining(self) -> list[str]:
        """Return the arguments left after the last flag."""
        ...  # pragma: no cover - Protocol definition

    def format_usage(self) -> str:
        """Return help text describing every bound flag."""
        ...  # pragma: no cover - Protocol definition


FlagParserFactory = Callable[[str], FlagParser]


class _RaisingArgumentParser(argparse.ArgumentParser):
    """``ArgumentParser`` that raises instead of printing and exiting."""

    @override
    def error(self, message: str) -> NoReturn:
        raise FlagParseError(message)


def _converter(name: str, data_type: DataType) -> Callable[[str], object]:
    def convert(text: str) -> object:
        try:
            return convert_text(name, text, data_type)
        except ConversionError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    convert.__name__ = str(data_type)
    return convert


def _flag_name(token: str) -> str:
    return token.lstrip("-").partition("=")[0]


class ArgparseFlagParser:
    """Default :class:`FlagParser` built on :mod:`argparse`.

    The argument vector is split into its flag prefix and the remaining
    arguments before ``argparse`` sees it, so positional arguments never
    interleave with flags. Bare boolean flags are rewritten to ``-name=true``
    so they cannot swallow the following argument.
    """

    def __init__(self, prog: str) -> None:
        self._parser = _RaisingArgumentParser(
            prog=prog,
            add_help=False,
            allow_abbrev=False,
        )
        self._bool_names: set[str] = set()
        self._names: set[str] = set()
        self._values: dict[str, object] = {}
        self._remaining: list[str] = []

    def bind(self, binding: FlagBinding) -> None:
        option_strings = [f"-{binding.name}", f"--{binding.name}"]
        if binding.short:
            option_strings.extend((f"-{binding.short}", f"--{binding.short}"))
        help_text = binding.usage
        if binding.default_text:
            help_text = f"{help_text} (default {binding.default_text})".strip()
        is_bool = binding.data_type is DataType.BOOL
        try:
            _ = self._parser.add_argument(
                *option_strings,
                dest=binding.name,
                default=argparse.SUPPRESS,
                type=_converter(binding.name, binding.data_type),
                help=help_text.replace("%", "%%"),
                metavar=str(binding.data_type),
                nargs="?" if is_bool else None,
                const=True if is_bool else None,
            )
        except argparse.ArgumentError as exc:
            raise FlagParseError(str(exc)) from exc
        names = {binding.name, binding.short} - {""}
        self._names.update(names)
        if is_bool:
            self._bool_names.update(names)

    def _split(self, args: Sequence[str]) -> tuple[list[str], list[str]]:
        flags: list[str] = []
        index = 0
        while index < len(args):
            token = args[index]
            if token == "--":
                return flags, list(args[index + 1 :])
            if not token.startswith("-") or token == "-":
                break
            name = _flag_name(token)
            if "=" in token:
                flags.append(token)
            elif name in self._bool_names:
                flags.append(f"{token}=true")
            else:
                if name in self._names and index + 1 < len(args):
                    index += 1
                    token = f"{token}={args[index]}"
                flags.append(token)
            index += 1
        return flags, list(args[index:])

    def parse(self, args: Sequence[str]) -> None:
        flags, remaining = self._split(args)
        namespace = self._parser.parse_args(flags)
        self._values = dict(vars(namespace))
        self._remaining = remaining

    def visited(self) -> Mapping[str, object]:
        return dict(self._values)

    def remaining(self) -> list[str]:
        return list(self._remaining)

    def format_usage(self) -> str:
        return self._parser.format_help()


def default_parser_factory(prog: str) -> FlagParser:
    """Return a fresh :class:`ArgparseFlagParser` for ``prog``."""
    return ArgparseFlagParser(prog)


__all__ = [
    "ArgparseFlagParser",
    "FlagBinding",
    "FlagParser",
    "FlagParserFactory",
    "default_parser_factory",
]
