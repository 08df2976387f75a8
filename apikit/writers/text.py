"""Write an apikit :class:`~apikit.ir.Api` in the positional text format.

The output is the listing :mod:`apikit.backends.text` reads. Enum variant
descriptions, which the upstream listing does not carry, are written as a
trailing ``// description`` so that they survive a round trip.
"""

from __future__ import annotations

from apikit.ir import Alias, Api, Callback, Define, Enum, Function, Struct

INDENT = "  "


def _define_lines(i: int, d: Define) -> list[str]:
    return [
        f"Define {i:03d}: {d.name}",
        f"{INDENT}Name: {d.name}",
        f"{INDENT}Type: {d.kind}",
        f"{INDENT}Value: {d.value}",
        f"{INDENT}Description: {d.description}",
    ]


def _struct_lines(i: int, s: Struct) -> list[str]:
    lines = [
        f"Struct {i:02d}: {s.name} ({len(s.fields)} fields)",
        f"{INDENT}Name: {s.name}",
        f"{INDENT}Description: {s.description}",
    ]
    for n, f in enumerate(s.fields, 1):
        lines.append(f"{INDENT}Field[{n}]: {f.type} {f.name} // {f.description}")
    return lines


def _alias_lines(i: int, a: Alias) -> list[str]:
    return [
        f"Alias {i:03d}: {a.name}",
        f"{INDENT}Type: {a.type}",
        f"{INDENT}Name: {a.name}",
        f"{INDENT}Description: {a.description}",
    ]


def _enum_lines(i: int, e: Enum) -> list[str]:
    lines = [
        f"Enum {i:02d}: {e.name} ({len(e.values)} values)",
        f"{INDENT}Name: {e.name}",
        f"{INDENT}Description: {e.description}",
    ]
    for v in e.values:
        suffix = f" // {v.description}" if v.description else ""
        lines.append(f"{INDENT}Value[{v.name}]: {v.value}{suffix}")
    return lines


def _signature_lines(label: str, i: int, decl: Callback | Function) -> list[str]:
    lines = [
        f"{label} {i:03d}: {decl.name}() ({len(decl.params)} input parameters)",
        f"{INDENT}Name: {decl.name}",
        f"{INDENT}Return type: {decl.return_type}",
        f"{INDENT}Description: {decl.description}",
    ]
    for n, p in enumerate(decl.params, 1):
        lines.append(f"{INDENT}Param[{n}]: {p.name} (type: {p.type})")
    if not decl.params:
        lines.append(f"{INDENT}No input parameters")
    return lines


def api_to_text(api: Api) -> str:
    """Render a model as a line-oriented description document."""
    lines: list[str] = []

    def section(label: str, records: list[list[str]]) -> None:
        lines.extend(["", f"{label} found: {len(records)}", ""])
        for record in records:
            lines.extend(record)

    section("Defines", [_define_lines(i, d) for i, d in enumerate(api.defines, 1)])
    section("Structs", [_struct_lines(i, s) for i, s in enumerate(api.structs, 1)])
    section("Aliases", [_alias_lines(i, a) for i, a in enumerate(api.aliases, 1)])
    section("Enums", [_enum_lines(i, e) for i, e in enumerate(api.enums, 1)])
    section("Callbacks", [_signature_lines("Callback", i, c) for i, c in enumerate(api.callbacks, 1)])
    section("Functions", [_signature_lines("Function", i, f) for i, f in enumerate(api.functions, 1)])
    lines.append("")
    return "\n".join(lines)


class TextWriter:
    """Writer that emits the positional text API description."""

    def write(self, api: Api) -> str:
        return api_to_text(api)

    @property
    def name(self) -> str:
        return "text"

    @property
    def format_description(self) -> str:
        return "Positional text API description"


from apikit.writers import register_writer  # noqa: E402

register_writer("text", TextWriter)
