"""Serialize an apikit :class:`~apikit.ir.Api` to the JSON description format.

The output is the document :mod:`apikit.backends.json` reads, so a model
written here parses back to an equal model. Types are written in their C
spelling (``"const char *"``).
"""

from __future__ import annotations

import json
from typing import Any

from apikit.ir import (
    Alias,
    Api,
    Callback,
    Define,
    Enum,
    Field,
    Function,
    Param,
    Struct,
)


def _define_to_dict(d: Define) -> dict[str, Any]:
    return {"name": d.name, "type": d.kind, "value": d.value, "description": d.description}


def _field_to_dict(f: Field) -> dict[str, Any]:
    return {"type": str(f.type), "name": f.name, "description": f.description}


def _struct_to_dict(s: Struct) -> dict[str, Any]:
    return {
        "name": s.name,
        "description": s.description,
        "fields": [_field_to_dict(f) for f in s.fields],
    }


def _alias_to_dict(a: Alias) -> dict[str, Any]:
    return {"type": a.type, "name": a.name, "description": a.description}


def _enum_to_dict(e: Enum) -> dict[str, Any]:
    return {
        "name": e.name,
        "description": e.description,
        "values": [{"name": v.name, "value": v.value, "description": v.description} for v in e.values],
    }


def _param_to_dict(p: Param) -> dict[str, Any]:
    return {"type": str(p.type), "name": p.name}


def _signature_to_dict(decl: Callback | Function) -> dict[str, Any]:
    """Convert a Callback or Function; ``params`` is omitted when empty."""
    d: dict[str, Any] = {
        "name": decl.name,
        "description": decl.description,
        "returnType": str(decl.return_type),
    }
    if decl.params:
        d["params"] = [_param_to_dict(p) for p in decl.params]
    return d


def api_to_json_dict(api: Api) -> dict[str, Any]:
    """Convert a model to a dict suitable for ``json.dumps()``."""
    return {
        "defines": [_define_to_dict(d) for d in api.defines],
        "structs": [_struct_to_dict(s) for s in api.structs],
        "aliases": [_alias_to_dict(a) for a in api.aliases],
        "enums": [_enum_to_dict(e) for e in api.enums],
        "callbacks": [_signature_to_dict(c) for c in api.callbacks],
        "functions": [_signature_to_dict(f) for f in api.functions],
    }


def api_to_json(api: Api, indent: int | None = 2) -> str:
    """Convert a model to a JSON description document.

    :param api: The model.
    :param indent: JSON indentation level. None for compact output.
    """
    return json.dumps(api_to_json_dict(api), indent=indent)


class JsonWriter:
    """Writer that emits the JSON API description.

    Options
    -------
    indent : int | None
        JSON indentation level. Defaults to 2. None for compact output.
    """

    def __init__(self, indent: int | None = 2) -> None:
        self._indent = indent

    def write(self, api: Api) -> str:
        """Convert the model to a JSON string."""
        return api_to_json(api, indent=self._indent)

    @property
    def name(self) -> str:
        return "json"

    @property
    def format_description(self) -> str:
        return "JSON API description"


from apikit.writers import register_writer  # noqa: E402

register_writer("json", JsonWriter)
