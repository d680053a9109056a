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

"""Configuration file formats and the default decoder.

The format is chosen from the lowercased last ``.`` component of the filename.
JSON documents may carry ``//`` line comments and ``/* */`` block comments;
they are removed before the document reaches :mod:`json`.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from types import MappingProxyType
from typing import Final, Protocol, cast

import yaml

from confwiz.compat import tomllib
from confwiz.core.model_types import ConfFormat
from confwiz.exceptions import UnsupportedFormatError

EXTENSIONS: Final[Mapping[str, ConfFormat]] = MappingProxyType(
    {
        "json": ConfFormat.JSON,
        "jsn": ConfFormat.JSON,
        "cjsn": ConfFormat.JSON,
        "cjson": ConfFormat.JSON,
        "toml": ConfFormat.TOML,
        "tml": ConfFormat.TOML,
        "yaml": ConfFormat.YAML,
        "yml": ConfFormat.YAML,
    },
)


class Decoder(Protocol):
    """Callable turning raw configuration bytes into a top-level mapping."""

    def __call__(self, conf_format: ConfFormat, data: bytes) -> Mapping[str, object]: ...


def format_from_filename(filename: str) -> ConfFormat:
    """Return the configuration format implied by ``filename``.

    Only the trailing extension is consulted, so ``app.prod.yaml`` is YAML.

    Raises:
        UnsupportedFormatError: If the name is empty, has no extension, or the
            extension is not recognised.
    """
    if not filename:
        raise UnsupportedFormatError(filename, "no filename")
    stripped = filename.strip()
    _, sep, extension = os.path.basename(stripped).rpartition(".")
    if not sep:
        raise UnsupportedFormatError(stripped, "no extension")
    conf_format = EXTENSIONS.get(extension.lower())
    if conf_format is None:
        raise UnsupportedFormatError(stripped, f"unknown extension {extension!r}")
    return conf_format


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments outside JSON string literals.

    Line comments keep their terminating newline so decoder error positions
    still point at the right line.
    """
    out: list[str] = []
    i = 0
    length = len(text)
    in_string = False
    while i < length:
        char = text[i]
        if in_string:
            out.append(char)
            if char == "\\" and i + 1 < length:
                out.append(text[i + 1])
                i += 2
                continue
            if char == '"':
                in_string = False
            i += 1
            continue
        nxt = text[i + 1] if i + 1 < length else ""
        if char == '"':
            in_string = True
            out.append(char)
            i += 1
        elif char == "/" and nxt == "/":
            end = text.find("\n", i)
            i = length if end == -1 else end
        elif char == "/" and nxt == "*":
            end = text.find("*/", i + 2)
            if end == -1:
                message = "unterminated block comment"
                raise ValueError(message)
            out.append("\n" * text.count("\n", i, end))
            i = end + 2
        else:
            out.append(char)
            i += 1
    return "".join(out)


def _decode_document(conf_format: ConfFormat, data: bytes) -> object:
    text = data.decode("utf-8-sig")
    match conf_format:
        case ConfFormat.JSON:
            return json.loads(strip_json_comments(text))
        case ConfFormat.TOML:
            return tomllib.loads(text)
        case ConfFormat.YAML:
            return yaml.safe_load(text)
        case _:
            message = f"unsupported configuration format {conf_format!r}"
            raise ValueError(message)


def decode(conf_format: ConfFormat, data: bytes) -> Mapping[str, object]:
    """Decode a configuration document into its top-level mapping.

    Args:
        conf_format: Encoding of ``data``.
        data: Raw file contents.

    Returns:
        The decoded top-level mapping; an empty document yields an empty mapping.

    Raises:
        ValueError: If a JSON or TOML document is malformed.
        yaml.YAMLError: If a YAML document is malformed.
        TypeError: If the top level of the document is not a mapping.
    """
    document = _decode_document(conf_format, data)
    if document is None:
        return {}
    if not isinstance(document, Mapping):
        message = f"top level of a {conf_format} document must be a mapping, got {type(document).__name__}"
        raise TypeError(message)
    return {str(key): value for key, value in cast("Mapping[object, object]", document).items()}


__all__ = ["EXTENSIONS", "Decoder", "decode", "format_from_filename", "strip_json_comments"]
