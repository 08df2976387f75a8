"""Intermediate Representation for API descriptions.

This module defines the in-memory model shared by every description parser
and every writer. A parser backend turns a description document into an
:class:`Api`; a writer turns an :class:`Api` into output text.

Type Expressions
----------------
:class:`Name`, :class:`Pointer`, :class:`Array` and :class:`Variadic` form
a small immutable tree. ``str()`` renders a node back to C spelling, and
that spelling parses back to an equal node. ``const`` can only be written
in front of the whole type, so only the outermost pointer of a pointer
chain may be constant; :class:`Pointer` rejects anything else::

    >>> str(Pointer(Name("Vector2"), constant=True))
    'const Vector2 *'

Declarations
------------
:class:`Define`, :class:`Struct`, :class:`Alias`, :class:`Enum`,
:class:`Callback` and :class:`Function` are collected by :class:`Api` in
six ordered lists, always in that order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Union, runtime_checkable

from apikit.errors import MalformedTypeError

QUALIFIERS: tuple[str, ...] = ("signed", "unsigned")

# =============================================================================
# Type Expressions
# =============================================================================


@dataclass(frozen=True)
class Name:
    """A primitive or named type, optionally ``signed``/``unsigned``.

    Whether the qualifier makes sense for ``value`` is checked when the
    type is mapped to a target language, not here.

    :param value: The type name (e.g. ``"int"``, ``"Vector2"``).
    :param qualifier: ``None``, ``"signed"`` or ``"unsigned"``.
    """

    value: str
    qualifier: str | None = None

    def __post_init__(self) -> None:
        if self.qualifier is not None and self.qualifier not in QUALIFIERS:
            raise ValueError(f"Unknown qualifier: {self.qualifier!r}")

    def __str__(self) -> str:
        if self.qualifier:
            return f"{self.qualifier} {self.value}"
        return self.value


@dataclass(frozen=True)
class Pointer:
    """Pointer to another type.

    :param to: The pointee type.
    :param constant: True when the pointee is ``const``.
    """

    to: TypeExpr
    constant: bool = False

    def __post_init__(self) -> None:
        if _has_const_pointer(self.to):
            raise MalformedTypeError(f"{self.to} *", reason="only the outermost pointer can point to const")

    def __str__(self) -> str:
        inner = str(self.to)
        # "char **" rather than "char * *"
        star = "*" if inner.endswith("*") else " *"
        if self.constant:
            return f"const {inner}{star}"
        return f"{inner}{star}"


@dataclass(frozen=True)
class Array:
    """Fixed-size array type.

    :param of: Element type.
    :param length: Number of elements.
    """

    of: TypeExpr
    length: int

    def __str__(self) -> str:
        return f"{self.of}[{self.length}]"


@dataclass(frozen=True)
class Variadic:
    """The C ``...`` marker. Only valid as the last parameter."""

    def __str__(self) -> str:
        return "..."


TypeExpr = Union[Name, Pointer, Array, Variadic]

VOID = Name("void")


def _has_const_pointer(t: TypeExpr) -> bool:
    """True if a constant :class:`Pointer` occurs anywhere inside ``t``."""
    if isinstance(t, Pointer):
        return t.constant or _has_const_pointer(t.to)
    if isinstance(t, Array):
        return _has_const_pointer(t.of)
    return False


def is_void(t: TypeExpr) -> bool:
    """True for the unqualified ``void`` name (a "no return value" marker)."""
    return t == VOID


# =============================================================================
# Declarations
# =============================================================================


@dataclass
class Define:
    """A preprocessor constant.

    :param name: Constant name.
    :param kind: Upstream kind tag (``"INT"``, ``"STRING"``, ``"FLOAT"``, ...).
    :param value: Literal value text exactly as described upstream.
    :param description: Documentation text.
    """

    name: str
    kind: str
    value: str
    description: str = ""


@dataclass
class Field:
    """Struct field."""

    name: str
    type: TypeExpr
    description: str = ""


@dataclass
class Struct:
    """Struct declaration with ordered fields."""

    name: str
    fields: list[Field] = field(default_factory=list)
    description: str = ""


@dataclass
class Alias:
    """Named synonym for another type.

    ``type`` is kept as text: alias right-hand sides are emitted verbatim.
    """

    name: str
    type: str
    description: str = ""


@dataclass
class EnumVariant:
    """A single enum variant. ``value`` need not be unique within its enum."""

    name: str
    value: int
    description: str = ""

    def __str__(self) -> str:
        return f"{self.name} = {self.value}"


@dataclass
class Enum:
    """Enumeration with ordered variants."""

    name: str
    values: list[EnumVariant] = field(default_factory=list)
    description: str = ""


@dataclass
class Param:
    """Function or callback parameter."""

    name: str
    type: TypeExpr

    def __str__(self) -> str:
        if isinstance(self.type, Variadic):
            return "..."
        return f"{self.type} {self.name}"


@dataclass
class Callback:
    """Named function-pointer type."""

    name: str
    return_type: TypeExpr
    params: list[Param] = field(default_factory=list)
    description: str = ""

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.params)
        return f"{self.return_type} (*{self.name})({params})"


@dataclass
class Function:
    """External function declaration."""

    name: str
    return_type: TypeExpr
    params: list[Param] = field(default_factory=list)
    description: str = ""

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.params)
        return f"{self.return_type} {self.name}({params})"


Declaration = Union[Define, Struct, Alias, Enum, Callback, Function]

# =============================================================================
# Container
# =============================================================================

SECTIONS: tuple[str, ...] = ("defines", "structs", "aliases", "enums", "callbacks", "functions")


@dataclass
class Api:
    """Root of a parsed API description.

    The six sections are filled by parsers and consumed by writers in
    the order of :data:`SECTIONS`.
    """

    defines: list[Define] = field(default_factory=list)
    structs: list[Struct] = field(default_factory=list)
    aliases: list[Alias] = field(default_factory=list)
    enums: list[Enum] = field(default_factory=list)
    callbacks: list[Callback] = field(default_factory=list)
    functions: list[Function] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        """Number of declarations per section."""
        return {section: len(getattr(self, section)) for section in SECTIONS}


# =============================================================================
# Parser Protocol
# =============================================================================


@runtime_checkable
class DocumentParser(Protocol):
    """Protocol for description parsers.

    A parser turns one encoding of the API description into an
    :class:`Api`. Parsers raise :class:`~apikit.errors.ApiDescriptionError`
    subclasses on malformed input and never return a partial model.
    """

    @property
    def name(self) -> str:
        """Registry name of this parser (e.g. ``"text"``)."""
        ...

    def parse(self, text: str, filename: str = "<string>") -> Api:
        """Parse a whole description document.

        :param text: Document contents.
        :param filename: Name used in diagnostics.
        :returns: The complete model.
        """
        ...
