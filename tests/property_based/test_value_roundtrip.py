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

"""Property-based tests for canonical text and text conversion."""

from __future__ import annotations

import re

import pytest
from hypothesis import given
from hypothesis import strategies as st

from confwiz.core.model_types import DataType, Source
from confwiz.exceptions import ConversionError
from confwiz.values import (
    INT64_MAX,
    INT64_MIN,
    TRUE_STRINGS,
    canonical_text,
    coerce,
    convert_text,
    parse_bool,
)
from tests.property_based.strategies import bool_spellings, decimal_texts, native_values

pytestmark = pytest.mark.property


@given(native_values())
def test_canonical_text_converts_back_to_value(pair: tuple[DataType, object]) -> None:
    data_type, value = pair
    assert convert_text("s", canonical_text(data_type, value), data_type) == value


@given(bool_spellings())
def test_bool_spellings_parse(text: str) -> None:
    assert parse_bool(text) is (text in TRUE_STRINGS)
    assert canonical_text(DataType.BOOL, parse_bool(text)) in {"true", "false"}


@given(decimal_texts(DataType.INT64))
def test_decimal_text_parses_to_its_value(pair: tuple[str, int]) -> None:
    text, value = pair
    assert convert_text("n", text, DataType.INT64) == value


@given(st.integers(min_value=INT64_MAX + 1) | st.integers(max_value=INT64_MIN - 1))
def test_out_of_range_int64_text_is_rejected(value: int) -> None:
    with pytest.raises(ConversionError) as excinfo:
        _ = convert_text("n", str(value), DataType.INT64)
    assert excinfo.value.source_text == str(value)


@given(st.text().filter(lambda text: re.fullmatch(r"[+-]?[0-9]+", text) is None))
def test_non_decimal_text_is_rejected(text: str) -> None:
    with pytest.raises(ConversionError):
        _ = convert_text("n", text, DataType.INT)


@given(st.text(), st.sampled_from([Source.ENV, Source.FLAG]))
def test_opaque_settings_never_take_text(text: str, source: Source) -> None:
    with pytest.raises(ConversionError):
        _ = coerce("blob", text, DataType.OPAQUE, source)


@given(st.text())
def test_string_text_is_stored_verbatim(text: str) -> None:
    assert coerce("s", text, DataType.STRING, Source.ENV) == text
