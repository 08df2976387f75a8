"""Parser for the positional, line-oriented API description.

The document is six sections (Defines, Structs, Aliases, Enums, Callbacks,
Functions), each introduced by a separator line, a ``<Label> found: <count>``
header and another separator, then exactly ``count`` records::

    Structs found: 1

    Struct 01: Vector2 (2 fields)
      Name: Vector2
      Description: Vector2, 2 components
      Field[1]: float x // Vector x component
      Field[2]: float y // Vector y component

Records are matched line by line; any line that does not have the
expected shape aborts the parse with a
:class:`~apikit.errors.StructuralMismatchError` naming the line.
"""

from __future__ import annotations

import logging
import re

from apikit.errors import MalformedTypeError, StructuralMismatchError
from apikit.ir import (
    Alias,
    Api,
    Callback,
    Define,
    Enum,
    EnumVariant,
    Field,
    Function,
    Param,
    Struct,
    TypeExpr,
)
from apikit.typeparse import parse_type

__all__ = ["TextParser", "parse_text"]

logger = logging.getLogger(__name__)

SECTION_LABELS: tuple[tuple[str, str], ...] = (
    ("defines", "Defines"),
    ("structs", "Structs"),
    ("aliases", "Aliases"),
    ("enums", "Enums"),
    ("callbacks", "Callbacks"),
    ("functions", "Functions"),
)

NO_PARAMS = "No input parameters"

_SEPARATOR = re.compile(r"^[-=]*$")
_HEADER_COUNT = re.compile(r"^(\w+)[^:]*:\s*(\d+)$")
_TRAILING_COUNT = re.compile(r"\((\d+)\s[^()]*\)$")
_IDENTIFIER = re.compile(r"^[A-Za-z_]\w*$")
_ARRAY_SUFFIX = re.compile(r"^([A-Za-z_]\w*)((?:\[\d+\])+)$")


class _Lines:
    """Cursor over the document lines, 1-based for diagnostics."""

    def __init__(self, text: str, filename: str) -> None:
        self.lines = text.splitlines()
        self.filename = filename
        self.pos = 0

    @property
    def lineno(self) -> int:
        return self.pos + 1

    def error(self, message: str, lineno: int | None = None) -> StructuralMismatchError:
        return StructuralMismatchError(message, lineno or self.lineno, self.filename)

    def peek(self) -> str | None:
        if self.pos < len(self.lines):
            return self.lines[self.pos]
        return None

    def next(self, what: str) -> str:
        line = self.peek()
        if line is None:
            raise self.error(f"unexpected end of input, expected {what}")
        self.pos += 1
        return line

    def separator(self) -> None:
        line = self.next("a separator line")
        if not _SEPARATOR.match(line.strip()):
            raise self.error(f"expected a separator line, got {line!r}", self.pos)

    def labelled(self, label: str) -> str:
        """Consume ``<label>: value`` and return the stripped value."""
        line = self.next(f"'{label}:'")
        stripped = line.strip()
        if not stripped.startswith(label + ":"):
            raise self.error(f"expected '{label}:', got {line!r}", self.pos)
        return stripped[len(label) + 1 :].strip()

    def record(self, label: str) -> str:
        """Consume a record line starting with ``label`` (e.g. ``Field[1]:``).

        :returns: Everything after the first colon, stripped.
        """
        line = self.next(f"a {label} line")
        stripped = line.strip()
        colon = stripped.find(":")
        if not stripped.startswith(label) or colon < 0:
            raise self.error(f"expected a {label} line, got {line!r}", self.pos)
        return stripped[colon + 1 :].strip()


def _count_in_parens(lines: _Lines, header: str, unit: str) -> int:
    match = _TRAILING_COUNT.search(header.strip())
    if match is None:
        raise lines.error(f"missing '(<N> {unit})' in record header {header!r}", lines.pos)
    return int(match.group(1))


def _type(lines: _Lines, text: str) -> TypeExpr:
    try:
        return parse_type(text)
    except MalformedTypeError as e:
        raise e.at(lines.pos, lines.filename) from None


def _split_declaration(lines: _Lines, decl: str) -> tuple[str, str]:
    """Split ``<type> <name>`` at the last space.

    An array suffix on the name moves onto the type; a name that is not an
    identifier (``*data``) is rejected.
    """
    type_text, sep, name = decl.strip().rpartition(" ")
    if not sep or not type_text.strip():
        raise lines.error(f"expected '<type> <name>', got {decl!r}", lines.pos)
    match = _ARRAY_SUFFIX.match(name)
    if match is not None:
        name = match.group(1)
        type_text = type_text.rstrip() + match.group(2)
    if not _IDENTIFIER.match(name):
        raise lines.error(f"field name {name!r} is not an identifier", lines.pos)
    return type_text.strip(), name


def _parse_define(lines: _Lines) -> Define:
    lines.record("Define")
    name = lines.labelled("Name")
    kind = lines.labelled("Type")
    value = lines.labelled("Value")
    description = lines.labelled("Description")
    return Define(name, kind, value, description)


def _parse_field(lines: _Lines) -> Field:
    rest = lines.record("Field")
    decl, sep, description = rest.partition("//")
    if not sep:
        raise lines.error(f"missing '//' in field line {rest!r}", lines.pos)
    type_text, name = _split_declaration(lines, decl)
    return Field(name, _type(lines, type_text), description.strip())


def _parse_struct(lines: _Lines) -> Struct:
    header = lines.next("a Struct record")
    if not header.strip().startswith("Struct"):
        raise lines.error(f"expected a Struct record, got {header!r}", lines.pos)
    count = _count_in_parens(lines, header, "fields")
    name = lines.labelled("Name")
    description = lines.labelled("Description")
    fields = [_parse_field(lines) for _ in range(count)]
    return Struct(name, fields, description)


def _parse_alias(lines: _Lines) -> Alias:
    lines.record("Alias")
    type_text = lines.labelled("Type")
    name = lines.labelled("Name")
    description = lines.labelled("Description")
    return Alias(name, type_text, description)


def _parse_variant(lines: _Lines) -> EnumVariant:
    line = lines.next("a Value line")
    stripped = line.strip()
    if not stripped.startswith("Value"):
        raise lines.error(f"expected a Value line, got {line!r}", lines.pos)
    open_idx = stripped.find("[")
    close_idx = stripped.find("]", open_idx + 1)
    colon = stripped.find(":")
    if open_idx < 0 or close_idx < 0:
        raise lines.error(f"missing '[name]' in value line {line!r}", lines.pos)
    if colon < close_idx:
        raise lines.error(f"value must follow '[name]:' in {line!r}", lines.pos)
    name = stripped[open_idx + 1 : close_idx].strip()
    value_text, _, description = stripped[colon + 1 :].partition("//")
    try:
        value = int(value_text.strip())
    except ValueError:
        raise lines.error(f"enum value {value_text.strip()!r} is not an integer", lines.pos) from None
    return EnumVariant(name, value, description.strip())


def _parse_enum(lines: _Lines) -> Enum:
    header = lines.next("an Enum record")
    if not header.strip().startswith("Enum"):
        raise lines.error(f"expected an Enum record, got {header!r}", lines.pos)
    count = _count_in_parens(lines, header, "values")
    name = lines.labelled("Name")
    description = lines.labelled("Description")
    values = [_parse_variant(lines) for _ in range(count)]
    return Enum(name, values, description)


def _parse_param(lines: _Lines) -> Param:
    rest = lines.record("Param")
    start = rest.find("(type:")
    end = rest.find(")", start + 1)
    if start < 0 or end < 0:
        raise lines.error(f"expected '<name> (type: <type>)', got {rest!r}", lines.pos)
    name = rest[:start].strip()
    if not name:
        raise lines.error(f"missing parameter name in {rest!r}", lines.pos)
    return Param(name, _type(lines, rest[start + len("(type:") : end].strip()))


def _parse_signature(lines: _Lines, label: str) -> tuple[str, str, TypeExpr, list[Param]]:
    header = lines.next(f"a {label} record")
    if not header.strip().startswith(label):
        raise lines.error(f"expected a {label} record, got {header!r}", lines.pos)
    count = _count_in_parens(lines, header, "input parameters")
    name = lines.labelled("Name")
    return_type = _type(lines, lines.labelled("Return type"))
    description = lines.labelled("Description")
    params = [_parse_param(lines) for _ in range(count)]
    if count == 0 and (lines.peek() or "").strip() == NO_PARAMS:
        lines.pos += 1
    return name, description, return_type, params


def _parse_callback(lines: _Lines) -> Callback:
    name, description, return_type, params = _parse_signature(lines, "Callback")
    return Callback(name, return_type, params, description)


def _parse_function(lines: _Lines) -> Function:
    name, description, return_type, params = _parse_signature(lines, "Function")
    return Function(name, return_type, params, description)


_RECORD_PARSERS = {
    "defines": _parse_define,
    "structs": _parse_struct,
    "aliases": _parse_alias,
    "enums": _parse_enum,
    "callbacks": _parse_callback,
    "functions": _parse_function,
}


def _parse_section_header(lines: _Lines, label: str) -> int:
    lines.separator()
    header = lines.next(f"the '{label} found' header")
    match = _HEADER_COUNT.match(header.strip())
    if match is None or match.group(1) != label:
        raise lines.error(f"expected '{label} found: <count>', got {header!r}", lines.pos)
    lines.separator()
    return int(match.group(2))


def parse_text(text: str, filename: str = "<string>") -> Api:
    """Parse a line-oriented API description.

    :param text: Whole document.
    :param filename: Name used in diagnostics.
    :returns: The complete model.
    :raises StructuralMismatchError: If any line does not have the
        expected shape or a section ends early.
    :raises MalformedTypeError: If a type does not parse; the error
        carries the file name and line.
    """
    lines = _Lines(text, filename)
    api = Api()
    for section, label in SECTION_LABELS:
        count = _parse_section_header(lines, label)
        parse_record = _RECORD_PARSERS[section]
        records = getattr(api, section)
        for _ in range(count):
            records.append(parse_record(lines))
        logger.debug("%s: %d %s", filename, count, section)

    while (line := lines.peek()) is not None:
        if line.strip():
            raise lines.error(f"unexpected content after the Functions section: {line!r}")
        lines.pos += 1
    return api


class TextParser:
    """Parser for the positional line-oriented description format.

    Example
    -------
    ::

        from apikit.backends import get_backend

        api = get_backend("text").parse(source, "raylib_api.txt")
    """

    def parse(self, text: str, filename: str = "<string>") -> Api:
        return parse_text(text, filename)

    @property
    def name(self) -> str:
        return "text"


from apikit.backends import register_backend  # noqa: E402

register_backend("text", TextParser)
