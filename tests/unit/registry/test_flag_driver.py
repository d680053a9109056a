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

"""Unit tests for the flag driver of the registry."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import pytest

from confwiz.core.model_types import FlagState
from confwiz.exceptions import ConversionError, FlagParseError
from confwiz.settings import Settings

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from confwiz.flags import FlagBinding, FlagParser

pytestmark = pytest.mark.unit


class StaticFlagParser:
    """Parser double that reports a fixed set of visited flags."""

    def __init__(self, values: Mapping[str, object], remaining: Sequence[str] = ()) -> None:
        self.bindings: list[FlagBinding] = []
        self.parsed: list[list[str]] = []
        self._values = dict(values)
        self._remaining = list(remaining)

    def bind(self, binding: FlagBinding) -> None:
        self.bindings.append(binding)

    def parse(self, args: Sequence[str]) -> None:
        self.parsed.append(list(args))

    def visited(self) -> Mapping[str, object]:
        return dict(self._values)

    def remaining(self) -> list[str]:
        return list(self._remaining)

    def format_usage(self) -> str:
        return "\n".join(binding.name for binding in self.bindings)


def _registry_with(parser: StaticFlagParser) -> Settings:
    def factory(prog: str) -> FlagParser:
        _ = prog
        return parser

    return Settings("app", parser_factory=factory)


def test_parse_applies_values_and_returns_remaining(registry: Settings) -> None:
    registry.add_flag("retries", 3, usage="attempts")
    registry.add_flag("verbose", False, "v")
    remaining = registry.parse_flags(["-retries", "9", "-v", "deploy", "-retries=1"])
    assert remaining == ["deploy", "-retries=1"]
    assert registry.get("retries") == 9
    assert registry.get("verbose") is True
    assert registry.visited() == ["retries", "verbose"]
    assert registry.was_visited("verbose")
    assert registry.flag_state is FlagState.PARSED


def test_double_dash_ends_flags(registry: Settings) -> None:
    registry.add_flag("retries", 3)
    assert registry.parse_flags(["--retries=4", "--", "-retries=5"]) == ["-retries=5"]
    assert registry.get("retries") == 4


def test_unvisited_flags_keep_their_value(registry: Settings) -> None:
    registry.add_flag("retries", 3)
    registry.add_flag("verbose", False)
    assert registry.parse_flags(["cmd"]) == ["cmd"]
    assert registry.get("retries") == 3
    assert registry.visited() == []
    assert not registry.was_visited("retries")


def test_flags_disabled_returns_args_unchanged(registry: Settings) -> None:
    registry.add_flag("retries", 3)
    registry.set_use_flags(False)
    assert registry.parse_flags(["-retries=9", "cmd"]) == ["-retries=9", "cmd"]
    assert registry.get("retries") == 3
    assert registry.flag_state is FlagState.UNPARSED


def test_registry_without_flags_does_not_parse(registry: Settings) -> None:
    registry.add("workers", 2)
    assert not registry.use_flags
    assert registry.parse_flags(["-workers=3"]) == ["-workers=3"]


def test_second_parse_is_a_noop(registry: Settings) -> None:
    registry.add_flag("retries", 3)
    _ = registry.parse_flags(["-retries=4"])
    assert registry.parse_flags(["-retries=5", "x"]) == ["-retries=5", "x"]
    assert registry.get("retries") == 4


def test_parse_defaults_to_process_arguments(registry: Settings, monkeypatch: pytest.MonkeyPatch) -> None:
    registry.add_flag("retries", 3)
    monkeypatch.setattr(sys, "argv", ["prog", "-retries=6", "run"])
    assert registry.parse_flags() == ["run"]
    assert registry.get("retries") == 6


@pytest.mark.parametrize("args", [["-retries=abc"], ["-unknown"], ["-retries"]])
def test_failed_parse_leaves_registry_unparsed(registry: Settings, args: list[str]) -> None:
    registry.add_flag("retries", 3)
    with pytest.raises(FlagParseError):
        _ = registry.parse_flags(args)
    assert registry.flag_state is FlagState.UNPARSED
    assert registry.get("retries") == 3
    assert registry.visited() == []

    assert registry.parse_flags(["-retries=4"]) == []
    assert registry.get("retries") == 4


def test_opaque_flags_are_not_bound(registry: Settings) -> None:
    registry.add_flag("blob", {"a": 1})
    registry.add_flag("retries", 3)
    with pytest.raises(FlagParseError):
        _ = registry.parse_flags(["-blob=x"])
    assert registry.get("blob") == {"a": 1}


def test_flag_usage_lists_flags(registry: Settings) -> None:
    registry.add_flag("retries", 3, "r", "attempts")
    registry.add_flag("blob", {"a": 1})
    registry.add("workers", 2)
    usage = registry.flag_usage()
    assert "-retries" in usage
    assert "-r" in usage
    assert "attempts" in usage
    assert "(default 3)" in usage
    assert "blob" not in usage
    assert "workers" not in usage


def test_custom_parser_receives_sorted_bindings(clean_env: pytest.MonkeyPatch) -> None:
    _ = clean_env
    parser = StaticFlagParser({}, remaining=["rest"])
    registry = _registry_with(parser)
    registry.add_flag("zeta", "z")
    registry.add_flag("alpha", 1, "a", "first")
    registry.add_env_var("port", 80)
    assert registry.parse_flags(["anything"]) == ["rest"]
    assert [binding.name for binding in parser.bindings] == ["alpha", "zeta"]
    assert parser.bindings[0].short == "a"
    assert parser.bindings[0].default_text == "1"
    assert parser.parsed == [["anything"]]


def test_short_names_resolve_to_settings(clean_env: pytest.MonkeyPatch) -> None:
    _ = clean_env
    registry = _registry_with(StaticFlagParser({"r": 5, "ghost": 1}))
    registry.add_flag("retries", 3, "r")
    _ = registry.parse_flags([])
    assert registry.get("retries") == 5
    assert registry.visited() == ["retries"]
    assert not registry.exists("ghost")


def test_text_values_from_parser_are_converted(clean_env: pytest.MonkeyPatch) -> None:
    _ = clean_env
    registry = _registry_with(StaticFlagParser({"retries": "7", "verbose": "T"}))
    registry.add_flag("retries", 3)
    registry.add_flag("verbose", False)
    _ = registry.parse_flags([])
    assert registry.get("retries") == 7
    assert registry.get("verbose") is True


def test_failed_override_publishes_nothing(clean_env: pytest.MonkeyPatch) -> None:
    _ = clean_env
    registry = _registry_with(StaticFlagParser({"verbose": True, "retries": "many"}))
    registry.add_flag("retries", 3)
    registry.add_flag("verbose", False)
    with pytest.raises(ConversionError):
        _ = registry.parse_flags([])
    assert registry.get("verbose") is False
    assert registry.flag_state is FlagState.UNPARSED


def test_parser_failure_reverts_state(clean_env: pytest.MonkeyPatch) -> None:
    _ = clean_env

    def factory(prog: str) -> FlagParser:
        message = f"{prog}: parser unavailable"
        raise RuntimeError(message)

    registry = Settings("app", parser_factory=factory)
    registry.add_flag("retries", 3)
    with pytest.raises(RuntimeError):
        _ = registry.parse_flags([])
    assert registry.flag_state is FlagState.UNPARSED


def test_custom_usage(clean_env: pytest.MonkeyPatch) -> None:
    _ = clean_env
    registry = _registry_with(StaticFlagParser({}))
    registry.add_flag("beta", 1)
    registry.add_flag("alpha", 2)
    assert registry.flag_usage() == "alpha\nbeta"
