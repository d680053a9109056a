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

"""Unit tests for configuration format detection and decoding."""

from __future__ import annotations

import pytest
import yaml

from confwiz.core.model_types import ConfFormat
from confwiz.exceptions import UnsupportedFormatError
from confwiz.formats import decode, format_from_filename, strip_json_comments

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("cfg.json", ConfFormat.JSON),
        ("cfg.jsn", ConfFormat.JSON),
        ("cfg.cjsn", ConfFormat.JSON),
        ("cfg.cjson", ConfFormat.JSON),
        ("cfg.toml", ConfFormat.TOML),
        ("cfg.tml", ConfFormat.TOML),
        ("cfg.yaml", ConfFormat.YAML),
        ("cfg.yml", ConfFormat.YAML),
        ("CFG.JSON", ConfFormat.JSON),
        ("app.prod.settings.yaml", ConfFormat.YAML),
        ("/etc/app.d/cfg.toml", ConfFormat.TOML),
    ],
)
def test_format_from_filename(filename: str, expected: ConfFormat) -> None:
    assert format_from_filename(filename) is expected


def test_format_from_filename_rejects_empty_name() -> None:
    with pytest.raises(UnsupportedFormatError, match="no filename"):
        _ = format_from_filename("")


@pytest.mark.parametrize("filename", ["cfg", "/etc/app.d/cfg"])
def test_format_from_filename_requires_extension(filename: str) -> None:
    with pytest.raises(UnsupportedFormatError, match="no extension") as excinfo:
        _ = format_from_filename(filename)
    assert excinfo.value.reason == "no extension"


def test_format_from_filename_rejects_unknown_extension() -> None:
    with pytest.raises(UnsupportedFormatError, match="unknown extension 'ini'"):
        _ = format_from_filename("cfg.ini")


def test_format_from_filename_only_reads_trailing_component() -> None:
    with pytest.raises(UnsupportedFormatError, match="unknown extension 'bak'"):
        _ = format_from_filename("cfg.json.bak")


def test_strip_json_comments_removes_line_and_block_comments() -> None:
    text = '{\n  // leading\n  "a": 1, /* inline */ "b": "x" // trailing\n}\n'
    assert decode(ConfFormat.JSON, text.encode()) == {"a": 1, "b": "x"}


def test_strip_json_comments_keeps_comment_markers_in_strings() -> None:
    text = '{"url": "http://example.com/*path*/", "escaped": "quote \\" // not a comment"}'
    assert strip_json_comments(text) == text


def test_strip_json_comments_preserves_line_numbers() -> None:
    text = '{/* one\ntwo\nthree */"a": 1}'
    assert strip_json_comments(text).count("\n") == 2


def test_strip_json_comments_rejects_unterminated_block() -> None:
    with pytest.raises(ValueError, match="unterminated"):
        _ = strip_json_comments('{"a": 1 /* open')


def test_decode_toml() -> None:
    data = b'debug = false\nname = "svc"\n[nested]\nkey = 1\n'
    assert decode(ConfFormat.TOML, data) == {"debug": False, "name": "svc", "nested": {"key": 1}}


def test_decode_yaml() -> None:
    data = b"debug: true\nretries: 4\n"
    assert decode(ConfFormat.YAML, data) == {"debug": True, "retries": 4}


def test_decode_yaml_stringifies_keys() -> None:
    assert decode(ConfFormat.YAML, b"1: one\n") == {"1": "one"}


def test_decode_empty_documents_yield_empty_mapping() -> None:
    assert decode(ConfFormat.YAML, b"") == {}
    assert decode(ConfFormat.TOML, b"") == {}


def test_decode_accepts_utf8_bom() -> None:
    assert decode(ConfFormat.JSON, b'\xef\xbb\xbf{"a": 1}') == {"a": 1}


def test_decode_rejects_non_mapping_top_level() -> None:
    with pytest.raises(TypeError, match="must be a mapping"):
        _ = decode(ConfFormat.JSON, b"[1, 2]")


def test_decode_propagates_malformed_documents() -> None:
    with pytest.raises(ValueError, match="Expecting property name"):
        _ = decode(ConfFormat.JSON, b"{not json")
    with pytest.raises(yaml.YAMLError):
        _ = decode(ConfFormat.YAML, b"a: [unclosed\n")
