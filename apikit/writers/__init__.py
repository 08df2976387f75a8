"""Writers that convert an apikit :class:`~apikit.ir.Api` to output text.

Available Writers
-----------------
rust
    Rust FFI declarations (``#[repr(C)]`` structs, enums, ``extern "C"`` block).
json
    The hierarchical JSON description document.
text
    The positional line-oriented description document.

``json`` and ``text`` write documents the parser backends read back, which
makes them format converters; ``rust`` is the code generator and the default.

Example
-------
::

    from apikit.writers import get_writer

    writer = get_writer("rust", link_name="raylib")
    source = writer.write(api)
"""

from __future__ import annotations

import importlib
from typing import Protocol, runtime_checkable

from apikit.ir import Api

__all__ = [
    "DEFAULT_WRITER",
    "WriterBackend",
    "get_writer",
    "list_writers",
    "register_writer",
]

DEFAULT_WRITER = "rust"

# Bundled writer modules, imported on first lookup
_BUNDLED: tuple[str, ...] = ("apikit.writers.rust", "apikit.writers.json", "apikit.writers.text")


@runtime_checkable
class WriterBackend(Protocol):
    """Protocol for output writers.

    Options (link name, JSON indentation) are constructor keyword
    arguments; :meth:`write` only takes the model.
    """

    def write(self, api: Api) -> str:
        """Render the whole model.

        A writer raises :class:`~apikit.errors.ApiDescriptionError` rather
        than emit a declaration it cannot represent correctly.
        """
        ...

    @property
    def name(self) -> str:
        """Registry name of this writer (e.g. ``"rust"``)."""
        ...

    @property
    def format_description(self) -> str:
        """Short description of the output format."""
        ...


_WRITERS: dict[str, type[WriterBackend]] = {}


def register_writer(name: str, writer_class: type[WriterBackend]) -> None:
    """Make ``writer_class`` available as ``get_writer(name)``.

    Writer modules call this at the bottom of the module.

    :raises ValueError: If ``name`` is already taken.
    """
    if name in _WRITERS:
        raise ValueError(f"Writer already registered: {name!r}")
    _WRITERS[name] = writer_class


def list_writers() -> list[str]:
    """Sorted names of the available writers."""
    _load_bundled()
    return sorted(_WRITERS)


def get_writer(name: str | None = None, **options: object) -> WriterBackend:
    """Instantiate a writer.

    :param name: Writer name; :data:`DEFAULT_WRITER` if None.
    :param options: Constructor options, e.g. ``link_kind="dylib"`` for rust.
    :raises ValueError: If no writer has that name.
    """
    _load_bundled()
    name = name or DEFAULT_WRITER
    writer_class = _WRITERS.get(name)
    if writer_class is None:
        raise ValueError(f"Unknown writer: {name!r}. Available: {', '.join(sorted(_WRITERS))}")
    return writer_class(**options)


def _load_bundled() -> None:
    # Writer modules import register_writer from here, so they cannot be
    # imported at the top of this module.
    for module in _BUNDLED:
        importlib.import_module(module)
