"""Generate Rust FFI declarations from an apikit :class:`~apikit.ir.Api`.

The output is one Rust module containing, in order: constants, ``#[repr(C)]``
structs, type aliases, callback types, a single ``extern "C"`` block for
all functions, and explicit-discriminant enums each followed by a
``TryFrom<i32>`` reverse lookup.

Enum names and variants are normalized (:func:`apikit.naming.normalize_api`)
as the first step of writing; the model passed in is not modified.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Mapping, Sequence

from apikit.errors import InvalidQualifierError, MalformedTypeError
from apikit.ir import (
    Alias,
    Api,
    Array,
    Callback,
    Define,
    Enum,
    Function,
    Name,
    Param,
    Pointer,
    Struct,
    TypeExpr,
    Variadic,
    is_void,
)
from apikit.naming import normalize_api

__all__ = ["RustWriter", "api_to_rust", "escape_name", "map_type", "type_to_rust"]

logger = logging.getLogger(__name__)

INDENT = "    "

PRELUDE: tuple[str, ...] = (
    "#![allow(non_snake_case, non_camel_case_types, unused)]",
    "use std::ffi;",
)

# (name, qualifier) -> Rust type; qualifiers are only valid on these names
INTEGER_TYPE_MAP: dict[tuple[str, str | None], str] = {
    ("char", "unsigned"): "ffi::c_uchar",
    ("char", "signed"): "ffi::c_schar",
    ("char", None): "ffi::c_char",
    ("short", "unsigned"): "ffi::c_ushort",
    ("short", "signed"): "ffi::c_short",
    ("short", None): "ffi::c_short",
    ("int", "unsigned"): "ffi::c_uint",
    ("int", "signed"): "ffi::c_int",
    ("int", None): "ffi::c_int",
    ("long", "unsigned"): "ffi::c_ulong",
    ("long", "signed"): "ffi::c_long",
    ("long", None): "ffi::c_long",
}

PRIMITIVE_TYPE_MAP: dict[str, str] = {
    "float": "ffi::c_float",
    "double": "ffi::c_double",
    "void": "ffi::c_void",
    "va_list": "va_list::VaList",
}

RUST_KEYWORDS: frozenset[str] = frozenset(
    {
        "abstract", "as", "async", "await", "become", "box", "break", "const",
        "continue", "do", "dyn", "else", "enum", "extern", "false", "final",
        "fn", "for", "gen", "if", "impl", "in", "let", "loop", "macro", "match",
        "mod", "move", "mut", "override", "priv", "pub", "ref", "return",
        "static", "struct", "trait", "true", "try", "type", "typeof", "unsafe",
        "unsized", "use", "virtual", "where", "while", "yield",
    }
)  # fmt: skip

# Keywords that cannot be written as raw identifiers
NON_RAW_KEYWORDS: frozenset[str] = frozenset({"crate", "self", "Self", "super"})

DEFAULT_DERIVES: tuple[str, ...] = ("Debug", "Clone", "Copy", "PartialEq")
ENUM_DERIVES: tuple[str, ...] = ("Debug", "Clone", "Copy", "PartialEq", "Hash")

DEFAULT_EXTRA_DERIVES: dict[str, tuple[str, ...]] = {
    "Color": ("Eq", "Hash", "Default"),
    "Vector2": ("Default",),
    "Vector3": ("Default",),
    "Vector4": ("Default",),
}

# Opaque pointee types declared right before the struct that uses them
DEFAULT_OPAQUE_TYPES: dict[str, tuple[str, ...]] = {
    "AudioStream": ("rAudioBuffer", "rAudioProcessor"),
}

# Aliases written out as a full struct: name -> (doc, [(field, doc), ...])
SPELLED_OUT_ALIASES: dict[str, tuple[str, tuple[tuple[str, str], ...]]] = {
    "Quaternion": (
        "Quaternion, 4 float components",
        (
            ("x", "Imaginary `i` part of the quaternion"),
            ("y", "Imaginary `j` part of the quaternion"),
            ("z", "Imaginary `k` part of the quaternion"),
            ("w", "Real part of the quaternion"),
        ),
    ),
}


# =============================================================================
# Types and names
# =============================================================================


def map_type(name: str, qualifier: str | None = None) -> str:
    """Map a C type name to its Rust spelling.

    :raises InvalidQualifierError: If a qualifier is applied to anything
        but ``char``, ``short``, ``int`` or ``long``.
    """
    rust = INTEGER_TYPE_MAP.get((name, qualifier))
    if rust is not None:
        return rust
    if qualifier is not None:
        raise InvalidQualifierError(name, qualifier)
    return PRIMITIVE_TYPE_MAP.get(name, name)


def type_to_rust(t: TypeExpr) -> str:
    """Render a type expression as a Rust type."""
    if isinstance(t, Name):
        return map_type(t.value, t.qualifier)
    if isinstance(t, Pointer):
        mutability = "const" if t.constant else "mut"
        return f"*{mutability} {type_to_rust(t.to)}"
    if isinstance(t, Array):
        return f"[{type_to_rust(t.of)}; {t.length}]"
    if isinstance(t, Variadic):
        return "..."
    raise TypeError(f"Not a type expression: {t!r}")


def escape_name(name: str) -> str:
    """Escape identifiers that collide with Rust keywords (``type`` -> ``r#type``)."""
    if name in NON_RAW_KEYWORDS:
        return f"{name}_"
    if name in RUST_KEYWORDS:
        return f"r#{name}"
    return name


def _doc(description: str, indent: str = "") -> list[str]:
    """Doc comment lines for ``description``, escaping rustdoc link syntax."""
    if not description:
        return []
    for c in "[]<>":
        description = description.replace(c, "\\" + c)
    return [f"{indent}/// {description}"]


def _derive(derives: Iterable[str]) -> str:
    return f"#[derive({', '.join(derives)})]"


def _value_type(t: TypeExpr, where: str) -> str:
    if isinstance(t, Variadic):
        raise MalformedTypeError("...", [], f"variadic marker used as the type of {where}")
    return type_to_rust(t)


def _param_types(params: Sequence[Param], owner: str, named: bool) -> str:
    parts: list[str] = []
    for i, p in enumerate(params):
        if isinstance(p.type, Variadic):
            if i != len(params) - 1:
                raise MalformedTypeError("...", [], f"variadic marker is not the last parameter of {owner}")
            parts.append("...")
        elif named:
            parts.append(f"{escape_name(p.name)}: {type_to_rust(p.type)}")
        else:
            parts.append(type_to_rust(p.type))
    return ", ".join(parts)


def _return_suffix(t: TypeExpr) -> str:
    return "" if is_void(t) else f" -> {_value_type(t, 'a return value')}"


# =============================================================================
# Declarations
# =============================================================================


def _rust_string(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _define_to_rust(decl: Define) -> list[str] | None:
    """Constant declaration, or None for kinds other than INT and STRING."""
    if decl.kind == "INT":
        line = f"pub const {decl.name}: i32 = {decl.value};"
    elif decl.kind == "STRING":
        line = f"pub const {decl.name}: &str = {_rust_string(decl.value)};"
    else:
        logger.debug("Skipping define %s of kind %s", decl.name, decl.kind)
        return None
    return _doc(decl.description) + [line]


def _struct_to_rust(decl: Struct, extra_derives: Sequence[str] = (), opaque: Sequence[str] = ()) -> list[str]:
    lines = [f"type {name} = ffi::c_void;" for name in opaque]
    if lines:
        lines.append("")
    lines.extend(_doc(decl.description))
    lines.append("#[repr(C)]")
    lines.append(_derive([*DEFAULT_DERIVES, *extra_derives]))
    lines.append(f"pub struct {decl.name} {{")
    for f in decl.fields:
        lines.extend(_doc(f.description, INDENT))
        field_type = _value_type(f.type, f"field {decl.name}.{f.name}")
        lines.append(f"{INDENT}pub {escape_name(f.name)}: {field_type},")
    lines.append("}")
    return lines


def _alias_to_rust(decl: Alias) -> list[str]:
    spelled_out = SPELLED_OUT_ALIASES.get(decl.name)
    if spelled_out is None:
        return _doc(decl.description) + [f"pub type {decl.name} = {decl.type};"]

    doc, fields = spelled_out
    lines = _doc(doc)
    lines.append("#[repr(C)]")
    lines.append(_derive(DEFAULT_DERIVES))
    lines.append(f"pub struct {decl.name} {{")
    for field_name, field_doc in fields:
        lines.extend(_doc(field_doc, INDENT))
        lines.append(f"{INDENT}pub {field_name}: f32,")
    lines.append("}")
    return lines


def _callback_to_rust(decl: Callback) -> list[str]:
    params = _param_types(decl.params, decl.name, named=False)
    signature = f'pub type {decl.name} = extern "C" fn({params}){_return_suffix(decl.return_type)};'
    return _doc(decl.description) + [signature]


def _function_to_rust(decl: Function) -> list[str]:
    params = _param_types(decl.params, decl.name, named=True)
    signature = f"pub fn {escape_name(decl.name)}({params}){_return_suffix(decl.return_type)};"
    return _doc(decl.description, INDENT) + [INDENT + signature]


def _functions_block(functions: Sequence[Function], link_name: str, link_kind: str) -> list[str]:
    lines = [f'#[link(name = "{link_name}", kind = "{link_kind}")]', 'extern "C" {']
    for f in functions:
        lines.extend(_function_to_rust(f))
    lines.append("}")
    return lines


def _try_from_impl(decl: Enum) -> list[str]:
    """``TryFrom<i32>`` impl mapping every discriminant back to its variant."""
    lines = [
        f"impl TryFrom<i32> for {decl.name} {{",
        f"{INDENT}type Error = ();",
        f"{INDENT}fn try_from(value: i32) -> Result<Self, <Self as TryFrom<i32>>::Error> {{",
        f"{INDENT * 2}match value {{",
    ]
    for v in decl.values:
        lines.append(f"{INDENT * 3}{v.value} => Ok({decl.name}::{v.name}),")
    lines.append(f"{INDENT * 3}_ => Err(()),")
    lines.append(f"{INDENT * 2}}}")
    lines.append(f"{INDENT}}}")
    lines.append("}")
    return lines


def _enum_to_rust(decl: Enum) -> list[str]:
    """Enum declaration for an already-normalized enum."""
    lines = _doc(decl.description)
    lines.append("#[repr(C)]")
    lines.append(_derive(ENUM_DERIVES))
    lines.append(f"pub enum {decl.name} {{")
    for v in decl.values:
        lines.extend(_doc(v.description, INDENT))
        lines.append(f"{INDENT}{v.name} = {v.value},")
    lines.append("}")
    lines.extend(_try_from_impl(decl))
    return lines


# =============================================================================
# Module
# =============================================================================


def api_to_rust(
    api: Api,
    link_name: str = "raylib",
    link_kind: str = "static",
    extra_derives: Mapping[str, Sequence[str]] | None = None,
    opaque_types: Mapping[str, Sequence[str]] | None = None,
    renames: Mapping[str, str] | None = None,
    prefix_exempt: Collection[str] | None = None,
    epilogue: Sequence[str] = (),
) -> str:
    """Render a whole model as one Rust module.

    :param api: Parsed model; enums are normalized on a copy.
    :param link_name: Library name for the ``#[link]`` attribute.
    :param link_kind: Link kind for the ``#[link]`` attribute.
    :param extra_derives: Derives added per struct name.
    :param opaque_types: ``c_void`` aliases emitted before a struct.
    :param renames: Enum renames (see :func:`~apikit.naming.normalize_api`).
    :param prefix_exempt: Enums that keep their variant prefixes.
    :param epilogue: Lines appended verbatim at the end.
    :returns: Rust source text.
    :raises InvalidQualifierError: On a qualifier used with a non-integer type.
    :raises MalformedTypeError: On a misplaced variadic marker.
    """
    if extra_derives is None:
        extra_derives = DEFAULT_EXTRA_DERIVES
    if opaque_types is None:
        opaque_types = DEFAULT_OPAQUE_TYPES
    api = normalize_api(api, renames=renames, prefix_exempt=prefix_exempt)

    constants: list[str] = []
    for define in api.defines:
        rendered = _define_to_rust(define)
        if rendered is not None:
            constants.extend(rendered)

    structs: list[str] = []
    for s in api.structs:
        if structs:
            structs.append("")
        structs.extend(_struct_to_rust(s, extra_derives.get(s.name, ()), opaque_types.get(s.name, ())))

    aliases: list[str] = []
    for a in api.aliases:
        aliases.extend(_alias_to_rust(a))

    callbacks: list[str] = []
    for c in api.callbacks:
        callbacks.extend(_callback_to_rust(c))

    enums: list[str] = []
    for e in api.enums:
        if enums:
            enums.append("")
        enums.extend(_enum_to_rust(e))

    sections = [
        list(PRELUDE),
        constants,
        structs,
        aliases,
        callbacks,
        _functions_block(api.functions, link_name, link_kind),
        enums,
        list(epilogue),
    ]
    output_lines: list[str] = []
    for section in sections:
        if not section:
            continue
        if output_lines:
            output_lines.append("")
        output_lines.extend(section)
    output_lines.append("")
    return "\n".join(output_lines)


class RustWriter:
    """Writer that generates Rust FFI declarations.

    Options are the keyword arguments of :func:`api_to_rust`.

    Example
    -------
    ::

        from apikit.writers import get_writer

        writer = get_writer("rust", link_name="raylib", link_kind="static")
        source = writer.write(api)
    """

    def __init__(
        self,
        link_name: str = "raylib",
        link_kind: str = "static",
        extra_derives: Mapping[str, Sequence[str]] | None = None,
        opaque_types: Mapping[str, Sequence[str]] | None = None,
        renames: Mapping[str, str] | None = None,
        prefix_exempt: Collection[str] | None = None,
        epilogue: Sequence[str] = (),
    ) -> None:
        self.link_name = link_name
        self.link_kind = link_kind
        self.extra_derives = extra_derives
        self.opaque_types = opaque_types
        self.renames = renames
        self.prefix_exempt = prefix_exempt
        self.epilogue = tuple(epilogue)

    def write(self, api: Api) -> str:
        """Render ``api`` as a Rust module."""
        return api_to_rust(
            api,
            link_name=self.link_name,
            link_kind=self.link_kind,
            extra_derives=self.extra_derives,
            opaque_types=self.opaque_types,
            renames=self.renames,
            prefix_exempt=self.prefix_exempt,
            epilogue=self.epilogue,
        )

    @property
    def name(self) -> str:
        return "rust"

    @property
    def format_description(self) -> str:
        return "Rust FFI declarations"


from apikit.writers import register_writer  # noqa: E402

register_writer("rust", RustWriter)
