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

"""Shared Hypothesis strategies for property-based tests."""

from __future__ import annotations

from hypothesis import strategies as st

from confwiz.core.model_types import DataType, SettingKind, Source
from confwiz.values import FALSE_STRINGS, INT64_MAX, INT64_MIN, INT_MAX, INT_MIN, TRUE_STRINGS

__all__ = [
    "bool_spellings",
    "decimal_texts",
    "native_values",
    "setting_kinds",
    "setting_names",
    "sources",
]

_BOUNDS = {
    DataType.INT: (INT_MIN, INT_MAX),
    DataType.INT64: (INT64_MIN, INT64_MAX),
}


def setting_names(max_size: int = 16) -> st.SearchStrategy[str]:
    """Return a strategy for identifier-like setting names."""
    return st.from_regex(rf"[a-z][a-z0-9_]{{0,{max_size - 1}}}", fullmatch=True)


def bool_spellings() -> st.SearchStrategy[str]:
    """Every accepted spelling of a truth value."""
    return st.sampled_from(sorted(TRUE_STRINGS | FALSE_STRINGS))


def decimal_texts(data_type: DataType = DataType.INT) -> st.SearchStrategy[tuple[str, int]]:
    """Strategy emitting in-range decimal text paired with its integer value.

    Args:
        data_type: ``INT`` or ``INT64``; selects the admissible range.

    Returns:
        Hypothesis strategy producing ``(text, value)`` pairs; positive values
        sometimes carry an explicit ``+`` sign.
    """
    low, high = _BOUNDS[data_type]
    return st.integers(min_value=low, max_value=high).flatmap(
        lambda value: st.sampled_from(
            [(str(value), value), (f"+{value}", value)] if value >= 0 else [(str(value), value)],
        ),
    )


def native_values() -> st.SearchStrategy[tuple[DataType, object]]:
    """Values paired with the data type they are stored under."""
    return st.one_of(
        st.booleans().map(lambda value: (DataType.BOOL, value)),
        st.integers(min_value=INT_MIN, max_value=INT_MAX).map(lambda value: (DataType.INT, value)),
        st.integers(min_value=INT64_MIN, max_value=INT64_MAX).map(lambda value: (DataType.INT64, value)),
        st.text().map(lambda value: (DataType.STRING, value)),
    )


def setting_kinds() -> st.SearchStrategy[SettingKind]:
    return st.sampled_from(list(SettingKind))


def sources() -> st.SearchStrategy[Source]:
    return st.sampled_from(list(Source))
