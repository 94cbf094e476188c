"""Decoding of `go mod download -json` output.

The tool writes one JSON object per module, back to back with no enclosing
array, and may surround them with plain-text diagnostics.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

from pydantic import ValidationError

from ..model import Module
from .errors import ModuleDecodeError

_decoder = json.JSONDecoder()


def sanitize_output(data: bytes) -> bytes:
    """Trim text before the first '{' and after the last '}'.

    Not JSON-aware: braces inside the surrounding diagnostics would defeat it.
    Output without any '{' is returned unchanged; without a '}' after it, only
    the prefix is trimmed so a truncated payload still reaches the decoder.
    """
    start = data.find(b"{")
    if start < 0:
        return data
    end = data.rfind(b"}")
    if end < start:
        return data[start:]
    return data[start : end + 1]


def iter_json_objects(text: str) -> Iterator[Any]:
    """Yield each JSON value from a stream of concatenated values.

    Raises:
        json.JSONDecodeError: Malformed or truncated value
    """
    pos = 0
    end = len(text)
    while True:
        while pos < end and text[pos].isspace():
            pos += 1
        if pos == end:
            return
        value, pos = _decoder.raw_decode(text, pos)
        yield value


def decode_modules(data: bytes) -> list[Module]:
    """Decode sanitized tool output into modules, in stream order.

    Raises:
        ModuleDecodeError: Output is not a sequence of module objects
    """
    content = sanitize_output(data).decode("utf-8", errors="replace")

    modules: list[Module] = []
    try:
        for value in iter_json_objects(content):
            modules.append(Module.model_validate(value))
    except json.JSONDecodeError as e:
        raise ModuleDecodeError(str(e), content) from e
    except ValidationError as e:
        raise ModuleDecodeError(f"unexpected module object: {e}", content) from e

    return modules
