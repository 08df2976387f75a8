"""Parser for the hierarchical (JSON) API description.

The document root holds one array per section::

    {
      "defines": [{"name": "PI", "type": "FLOAT", "value": 3.14, "description": ""}],
      "structs": [{"name": "Vector2", "description": "...",
                   "fields": [{"type": "float", "name": "x", "description": "..."}]}],
      "aliases": [{"type": "Vector4", "name": "Quaternion", "description": "..."}],
      "enums": [{"name": "ConfigFlags", "description": "...",
                 "values": [{"name": "FLAG_VSYNC_HINT", "value": 64, "description": "..."}]}],
      "callbacks": [{"name": "...", "description": "...", "returnType": "void", "params": [...]}],
      "functions": [{"name": "...", "description": "...", "returnType": "void", "params": [...]}]
    }

Records are built from named keys, so the result does not depend on key
order or whitespace. ``params`` may be omitted for functions without
parameters; ``desc`` is accepted in place of ``description``. Numeric
define values are kept as the digits written in the document.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from apikit.errors import MalformedTypeError, StructuralMismatchError
from apikit.ir import (
    SECTIONS,
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

__all__ = ["JsonParser", "api_from_dict", "parse_json"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Record:
    """Typed access to one JSON object, with the record path for errors."""

    def __init__(self, data: object, where: str, source: str) -> None:
        if not isinstance(data, dict):
            raise StructuralMismatchError(f"{source}: {where}: expected an object, got {type(data).__name__}")
        self.data: dict[str, Any] = data
        self.where = where
        self.source = source

    def error(self, message: str) -> StructuralMismatchError:
        return StructuralMismatchError(f"{self.source}: {self.where}: {message}")

    def text(self, key: str) -> str:
        if key not in self.data:
            raise self.error(f"missing key {key!r}")
        value = self.data[key]
        if not isinstance(value, str):
            raise self.error(f"{key!r} must be a string, got {value!r}")
        return value

    def description(self) -> str:
        for key in ("description", "desc"):
            if key in self.data:
                return self.text(key)
        return ""

    def type_expr(self, key: str) -> TypeExpr:
        text = self.text(key)
        try:
            return parse_type(text)
        except MalformedTypeError as e:
            raise e.at(source=self.source, record=self.where) from None

    def records(self, key: str, build: Callable[[_Record], T], optional: bool = False) -> list[T]:
        if key not in self.data:
            if optional:
                return []
            raise self.error(f"missing key {key!r}")
        items = self.data[key]
        if not isinstance(items, list):
            raise self.error(f"{key!r} must be an array")
        return [build(_Record(item, f"{self.where}.{key}[{i}]", self.source)) for i, item in enumerate(items)]


def _define(r: _Record) -> Define:
    if "value" not in r.data:
        raise r.error("missing key 'value'")
    value = r.data["value"]
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise r.error(f"'value' must be a string or number, got {value!r}")
    if not isinstance(value, str):
        value = json.dumps(value)
    return Define(r.text("name"), r.text("type"), value, r.description())


def _field(r: _Record) -> Field:
    return Field(r.text("name"), r.type_expr("type"), r.description())


def _struct(r: _Record) -> Struct:
    return Struct(r.text("name"), r.records("fields", _field), r.description())


def _alias(r: _Record) -> Alias:
    return Alias(r.text("name"), r.text("type"), r.description())


def _variant(r: _Record) -> EnumVariant:
    value = r.data.get("value")
    if isinstance(value, bool) or not isinstance(value, int):
        raise r.error(f"'value' must be an integer, got {value!r}")
    return EnumVariant(r.text("name"), value, r.description())


def _enum(r: _Record) -> Enum:
    return Enum(r.text("name"), r.records("values", _variant), r.description())


def _param(r: _Record) -> Param:
    return Param(r.text("name"), r.type_expr("type"))


def _callback(r: _Record) -> Callback:
    params = r.records("params", _param, optional=True)
    return Callback(r.text("name"), r.type_expr("returnType"), params, r.description())


def _function(r: _Record) -> Function:
    params = r.records("params", _param, optional=True)
    return Function(r.text("name"), r.type_expr("returnType"), params, r.description())


_BUILDERS: dict[str, Callable[[_Record], Any]] = {
    "defines": _define,
    "structs": _struct,
    "aliases": _alias,
    "enums": _enum,
    "callbacks": _callback,
    "functions": _function,
}


def api_from_dict(data: object, filename: str = "<string>") -> Api:
    """Build an :class:`Api` from an already-decoded JSON document.

    :param data: Decoded document root.
    :param filename: Name used in diagnostics.
    :raises StructuralMismatchError: On a missing section, key or wrong shape.
    """
    root = _Record(data, "root", filename)
    api = Api()
    for section in SECTIONS:
        records = root.records(section, _BUILDERS[section])
        setattr(api, section, records)
        logger.debug("%s: %d %s", filename, len(records), section)
    return api


def parse_json(text: str, filename: str = "<string>") -> Api:
    """Parse a JSON API description.

    :raises StructuralMismatchError: If the text is not valid JSON or does
        not have the expected shape.
    :raises MalformedTypeError: If a type string does not parse; the error
        names the record it came from.
    """
    try:
        # Float literals keep their source digits (PI = 3.14159265358979323846)
        data = json.loads(text, parse_float=str)
    except json.JSONDecodeError as e:
        raise StructuralMismatchError(f"invalid JSON: {e.msg}", e.lineno, filename) from e
    return api_from_dict(data, filename)


class JsonParser:
    """Parser for the hierarchical JSON description format.

    Example
    -------
    ::

        from apikit.backends import get_backend

        api = get_backend("json").parse(source, "raylib_api.json")
    """

    def parse(self, text: str, filename: str = "<string>") -> Api:
        return parse_json(text, filename)

    @property
    def name(self) -> str:
        return "json"


from apikit.backends import register_backend  # noqa: E402

register_backend("json", JsonParser)
