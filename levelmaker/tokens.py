"""levelmaker/tokens.py — Typed token tree over decoded JSON.

The level payload is decoded once into a closed set of token variants so the
validator and assembler can match on structure explicitly instead of probing
raw Python values. Every JSON number, integral or not, becomes a
``NumberToken`` carrying a float.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Union

from levelmaker.errors import DecodeError


# ---------------------------------------------------------------------------
# Token variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ListToken:
    items: tuple["Token", ...]

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> "Token":
        return self.items[index]


@dataclass(frozen=True)
class NumberToken:
    value: float


@dataclass(frozen=True)
class OtherToken:
    """Any decoded value that is neither a list nor a number."""

    kind: str  # "string", "boolean", "null", "object"
    value: Any = None


Token = Union[ListToken, NumberToken, OtherToken]


def token_type(token: Token) -> str:
    """Short type name used in diagnostics."""
    if isinstance(token, ListToken):
        return "list"
    if isinstance(token, NumberToken):
        return "number"
    return token.kind


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _reject_constant(name: str) -> float:
    raise ValueError(f"Non-finite number literal {name!r} is not allowed")


def _to_token(value: Any) -> Token:
    # bool is an int subclass, so it must be checked first
    if isinstance(value, bool):
        return OtherToken("boolean", value)
    if isinstance(value, (int, float)):
        number = float(value)
        if not math.isfinite(number):
            raise ValueError(f"Number out of range: {value!r}")
        return NumberToken(number)
    if isinstance(value, list):
        return ListToken(tuple(_to_token(v) for v in value))
    if value is None:
        return OtherToken("null")
    if isinstance(value, str):
        return OtherToken("string", value)
    return OtherToken("object", value)


def from_python(value: Any) -> Token:
    """Build a token tree from already-decoded Python data."""
    try:
        return _to_token(value)
    except (ValueError, OverflowError) as e:
        raise DecodeError(str(e)) from e


def decode(text: str) -> Token:
    """Decode JSON text into a token tree.

    Raises:
        DecodeError: If the text is not well-formed JSON or holds a number
            that does not fit a finite float.
    """
    try:
        raw = json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError subclass
        raise DecodeError(f"Could not parse the provided json data: {e}") from e
    return from_python(raw)
