"""Description parser backends for apikit.

Each backend reads one encoding of the API description and produces the
same :class:`~apikit.ir.Api` model.

Available Backends
------------------
text
    Positional, line-oriented listing (``raylib_api.txt`` style). The default.
json
    Hierarchical JSON document (``raylib_api.json`` style).

Example
-------
::

    from apikit.backends import get_backend, parse_file

    api = get_backend("json").parse(source, "raylib_api.json")

    # Or pick the backend from the file name
    api = parse_file("raylib_api.txt")
"""

from __future__ import annotations

import importlib
import logging
import os
from pathlib import Path

from apikit.errors import ApiDescriptionError
from apikit.ir import Api, DocumentParser

__all__ = [
    "DEFAULT_BACKEND",
    "backend_for_path",
    "get_backend",
    "list_backends",
    "parse_file",
    "register_backend",
]

logger = logging.getLogger(__name__)

DEFAULT_BACKEND = "text"

# Bundled backend modules, imported on first lookup
_BUNDLED: tuple[str, ...] = ("apikit.backends.text", "apikit.backends.json")

_BACKENDS: dict[str, type[DocumentParser]] = {}


def register_backend(name: str, backend_class: type[DocumentParser]) -> None:
    """Make ``backend_class`` available as ``get_backend(name)``.

    :raises ValueError: If ``name`` is already taken.
    """
    if name in _BACKENDS:
        raise ValueError(f"Backend already registered: {name!r}")
    _BACKENDS[name] = backend_class


def list_backends() -> list[str]:
    """Sorted names of the available backends."""
    _load_bundled()
    return sorted(_BACKENDS)


def get_backend(name: str | None = None) -> DocumentParser:
    """Get a new parser instance.

    :param name: Backend name; :data:`DEFAULT_BACKEND` if None.
    :raises ValueError: If no backend has that name.
    """
    _load_bundled()
    name = name or DEFAULT_BACKEND
    backend_class = _BACKENDS.get(name)
    if backend_class is None:
        raise ValueError(f"Unknown backend: {name!r}. Available: {', '.join(sorted(_BACKENDS))}")
    return backend_class()


def backend_for_path(path: str | os.PathLike[str]) -> str:
    """Pick a backend name from a file name: ``json`` for ``.json``, else ``text``."""
    return "json" if Path(path).suffix.lower() == ".json" else "text"


def parse_file(path: str | os.PathLike[str], backend: str | None = None) -> Api:
    """Read and parse a whole description file.

    :param path: Description file, read as UTF-8.
    :param backend: Backend name; chosen with :func:`backend_for_path` if None.
    :returns: The parsed model.
    :raises ApiDescriptionError: If the file is not valid UTF-8.
    """
    name = backend or backend_for_path(path)
    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ApiDescriptionError(f"{path}: not valid UTF-8 (byte {e.start}: {e.reason})") from e
    logger.info("Parsing %s with the %s backend", path, name)
    api = get_backend(name).parse(text, str(path))
    logger.debug("Parsed %s: %s", path, api.counts())
    return api


def _load_bundled() -> None:
    # Backend modules import register_backend from here, so they cannot be
    # imported at the top of this module.
    for module in _BUNDLED:
        importlib.import_module(module)
