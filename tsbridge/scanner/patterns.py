"""Closed-form recognisers for the three declaration shapes tsbridge handles.

These are single regular expressions plus whitespace tokenisation, not a
grammar.  They assume conventionally formatted, machine-generated (ts-rs) or
rustfmt-styled declarations.  Anything outside those shapes is ignored, and
a few shapes are knowingly mis-extracted:

* a constant whose value contains a space or tab keeps only its last word,
* a union alternative that is not a valid identifier still becomes an enum
  member name.
"""

from __future__ import annotations

import re

from tsbridge.errors import MalformedDeclarationError

from .models import ConstantDeclaration, OptionalFieldMatch


CONSTANT_PREFIX = "pub const"
CONSTANT_TERMINATOR = ";"

_CONSTANT_PATTERN = re.compile(r'\s*pub const ([A-Z_0-9]+): &str =\s*".+";')
_UNION_TYPE_PATTERN = re.compile(
    r'export type \w+\s*=\s*[a-zA-Z"0-9\s]+(\|[a-zA-Z"0-9\s]+)+;'
)
_OPTIONAL_FIELD_PATTERN = re.compile(r"(\w+):\s*(\w+)\s*\|\s*undefined\b")

# Constant buffers are tokenised on spaces and tabs only; other whitespace
# characters may appear inside a literal.
_TOKEN_SEPARATOR = re.compile(r"[ \t]+")


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------


def matches_constant_declaration(line: str) -> bool:
    """Return True if *line* is a complete ``pub const NAME: &str = "...";``."""
    return _CONSTANT_PATTERN.match(line.lstrip(" \t")) is not None


def extract_constant(buffer: str) -> ConstantDeclaration | None:
    """Pull the name and value out of a matching constant declaration.

    The name is the third whitespace token (``pub``, ``const``, ``NAME:``),
    the value the last token with ``;`` and quotes stripped.  Returns None
    when *buffer* does not match or yields an invalid name.
    """
    if not matches_constant_declaration(buffer):
        return None

    tokens = _TOKEN_SEPARATOR.split(buffer.strip())
    if len(tokens) < 3:
        return None

    name = tokens[2].strip(":")
    value = tokens[-1].strip(";").strip('"')
    if not re.fullmatch(r"[A-Z_0-9]+", name):
        return None
    return ConstantDeclaration(name=name, value=value)


def require_constant(buffer: str) -> ConstantDeclaration:
    """Like ``extract_constant`` but raise ``MalformedDeclarationError`` on failure."""
    declaration = extract_constant(buffer)
    if declaration is None:
        raise MalformedDeclarationError(buffer.strip(), kind="constant declaration")
    return declaration


# ---------------------------------------------------------------------------
# Union types
# ---------------------------------------------------------------------------


def matches_union_type(line: str) -> bool:
    """Return True if *line* declares an exported union of two or more literals."""
    return _UNION_TYPE_PATTERN.match(line.strip()) is not None


def extract_union_type(line: str) -> tuple[str, list[str]] | None:
    """Return ``(name, values)`` for a union type line, or None.

    Tokens from the fifth onward are the alternatives.  Tokens are further
    split on ``|`` so ``"a"|"b"`` written without spaces still yields two
    values.
    """
    stripped = line.strip()
    if not matches_union_type(stripped):
        return None

    tokens = stripped.split()
    if len(tokens) < 5 or tokens[3] != "=":
        return None

    name = tokens[2]
    values: list[str] = []
    for token in tokens[4:]:
        for part in token.split("|"):
            value = part.strip(";").strip('"')
            if value:
                values.append(value)

    if not values:
        return None
    return name, values


def require_union_type(line: str) -> tuple[str, list[str]]:
    """Like ``extract_union_type`` but raise ``MalformedDeclarationError`` on failure."""
    extracted = extract_union_type(line)
    if extracted is None:
        raise MalformedDeclarationError(line.strip(), kind="union type")
    return extracted


# ---------------------------------------------------------------------------
# Optional fields
# ---------------------------------------------------------------------------


def find_optional_field_occurrences(text: str) -> list[OptionalFieldMatch]:
    """Every non-overlapping ``field: T | undefined`` in *text*, in order."""
    return [
        OptionalFieldMatch(
            full_match=match.group(0),
            field_name=match.group(1),
            base_type=match.group(2),
        )
        for match in _OPTIONAL_FIELD_PATTERN.finditer(text)
    ]
