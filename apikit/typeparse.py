"""Parse C-style type expressions into :mod:`apikit.ir` type trees.

Only the vocabulary used by API descriptions is supported: a base name with
an optional ``signed``/``unsigned`` qualifier, a leading ``const``, pointer
stars, fixed array lengths and the ``...`` variadic marker.

Modifiers are suffixes of the base type, so the token list is consumed
from the end::

    >>> parse_type("const Vector2 *")
    Pointer(to=Name(value='Vector2', qualifier=None), constant=True)
    >>> parse_type("float[4]")
    Array(of=Name(value='float', qualifier=None), length=4)
"""

from __future__ import annotations

from typing import NamedTuple, cast

from apikit.errors import MalformedTypeError
from apikit.ir import Array, Name, Pointer, TypeExpr, Variadic

__all__ = ["Token", "parse_type", "tokenize"]

# Token kinds
WORD = "word"
SIGNED = "signed"
UNSIGNED = "unsigned"
CONST = "const"
STAR = "star"
ARRAY = "array"
VARIADIC = "variadic"

_KEYWORDS: dict[str, str] = {
    "signed": SIGNED,
    "unsigned": UNSIGNED,
    "const": CONST,
}


class Token(NamedTuple):
    kind: str
    value: str | int | None = None

    def __repr__(self) -> str:
        if self.value is None:
            return self.kind.capitalize()
        return f"{self.kind.capitalize()}({self.value!r})"


def _is_identifier(c: str) -> bool:
    return c.isalnum() or c == "_"


def tokenize(text: str) -> list[Token]:
    """Split a type expression into tokens.

    :raises MalformedTypeError: On an unterminated or non-numeric array
        length, or on a character outside the supported vocabulary.
    """
    tokens: list[Token] = []
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if _is_identifier(c):
            start = i
            while i < n and _is_identifier(text[i]):
                i += 1
            word = text[start:i]
            kind = _KEYWORDS.get(word)
            tokens.append(Token(kind) if kind else Token(WORD, word))
            continue
        if c == "*":
            tokens.append(Token(STAR))
        elif c == "[":
            end = text.find("]", i + 1)
            if end < 0:
                raise MalformedTypeError(text, tokens, "unterminated array length")
            length = text[i + 1 : end].strip()
            if not length.isdigit():
                raise MalformedTypeError(text, tokens, f"array length {length!r} is not a number")
            tokens.append(Token(ARRAY, int(length)))
            i = end
        elif text.startswith("...", i):
            tokens.append(Token(VARIADIC))
            i += 2
        elif not c.isspace():
            raise MalformedTypeError(text, tokens, f"unexpected character {c!r}")
        i += 1
    return tokens


def _parse_tokens(tokens: list[Token], text: str) -> TypeExpr:
    if not tokens:
        raise MalformedTypeError(text, tokens, "empty type")

    last = tokens[-1]
    if last.kind == STAR:
        constant = tokens[0].kind == CONST
        inner = tokens[1:-1] if constant else tokens[:-1]
        return Pointer(_parse_tokens(inner, text), constant)
    if last.kind == ARRAY:
        return Array(_parse_tokens(tokens[:-1], text), cast(int, last.value))

    kinds = [t.kind for t in tokens]
    if kinds == [SIGNED, WORD] or kinds == [UNSIGNED, WORD]:
        return Name(str(tokens[1].value), tokens[0].kind)
    if kinds == [WORD]:
        return Name(str(tokens[0].value))
    if kinds == [VARIADIC]:
        return Variadic()
    raise MalformedTypeError(text, tokens)


def parse_type(text: str) -> TypeExpr:
    """Parse a type expression such as ``"unsigned char *"``.

    :param text: The type string.
    :returns: The parsed type tree.
    :raises MalformedTypeError: If the string does not match the grammar.
    """
    return _parse_tokens(tokenize(text), text)
