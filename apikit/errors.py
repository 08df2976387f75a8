"""Exceptions raised while compiling an API description.

Every failure is fatal: a malformed description cannot be turned into
correct bindings, so nothing in apikit recovers from these locally.
"""

from __future__ import annotations

from collections.abc import Sequence

__all__ = [
    "ApiDescriptionError",
    "InvalidQualifierError",
    "MalformedTypeError",
    "StructuralMismatchError",
]


def _located(message: str, line: int | None, source: str | None, record: str | None = None) -> str:
    """Prefix ``message`` with ``source:line`` or ``source: record`` when known."""
    if line is not None:
        return f"{source or '<string>'}:{line}: {message}"
    if record is not None:
        return f"{source or '<string>'}: {record}: {message}"
    return message


class ApiDescriptionError(ValueError):
    """Base class for all apikit errors."""


class MalformedTypeError(ApiDescriptionError):
    """A type expression does not reduce to a type under the supported grammar.

    Parsers fill in where the type was read: ``line`` for the text format,
    ``record`` (e.g. ``root.structs[0].fields[1]``) for the JSON format.
    """

    def __init__(
        self,
        text: str,
        tokens: Sequence[object] = (),
        reason: str | None = None,
        line: int | None = None,
        source: str | None = None,
        record: str | None = None,
    ) -> None:
        self.text = text
        self.tokens = list(tokens)
        self.reason = reason
        self.line = line
        self.source = source
        self.record = record
        detail = reason or f"unsupported token sequence {self.tokens!r}"
        super().__init__(_located(f"Malformed type {text!r}: {detail}", line, source, record))

    def at(self, line: int | None = None, source: str | None = None, record: str | None = None) -> MalformedTypeError:
        """Copy of this error carrying the location it was read from."""
        return MalformedTypeError(self.text, self.tokens, self.reason, line, source, record)


class StructuralMismatchError(ApiDescriptionError):
    """A record does not have the shape its section requires.

    :param message: What failed to match.
    :param line: 1-based line number in the source, when known.
    :param source: Source file name, when known.
    """

    def __init__(self, message: str, line: int | None = None, source: str | None = None) -> None:
        self.line = line
        self.source = source
        super().__init__(_located(message, line, source))


class InvalidQualifierError(ApiDescriptionError):
    """A ``signed``/``unsigned`` qualifier was applied to a non-integer name."""

    def __init__(self, name: str, qualifier: str) -> None:
        self.name = name
        self.qualifier = qualifier
        super().__init__(f"Qualifier {qualifier!r} used on invalid type: {name}")
