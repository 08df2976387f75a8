"""Identifier normalization for generated enums.

Upstream enum variants are ``SCREAMING_SNAKE_CASE`` and repeat the enum's
name (``FLAG_VSYNC_HINT`` in ``ConfigFlags``). Before emission they are
converted to PascalCase and the prefix shared by all variants of an enum
is removed. :func:`normalize_api` applies both to a whole model and returns
a new one; the parsed model is left untouched.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Collection, Iterable, Mapping
from dataclasses import replace

from apikit.ir import Api, Enum

__all__ = [
    "DEFAULT_ENUM_RENAMES",
    "DEFAULT_PREFIX_EXEMPT",
    "common_prefix",
    "normalize_api",
    "normalize_enum",
    "snake_to_pascal",
    "strip_common_prefix",
]

logger = logging.getLogger(__name__)

# Enum names replaced at emission time
DEFAULT_ENUM_RENAMES: dict[str, str] = {"KeyboardKey": "Key"}

# Enums whose variants share no textual prefix (only version numbers)
DEFAULT_PREFIX_EXEMPT: frozenset[str] = frozenset({"rlGlVersion"})

_AFTER_DIGIT = re.compile(r"(?<=\d)")


def snake_to_pascal(name: str) -> str:
    """Convert ``snake_case`` (any letter case) to ``PascalCase``.

    Every digit ends a sub-word, so the letter after a digit run is
    capitalized too::

        >>> snake_to_pascal("flag_msaa_4x_hint")
        'FlagMsaa4XHint'
    """
    parts: list[str] = []
    for word in name.split("_"):
        for sub in _AFTER_DIGIT.split(word):
            if sub:
                parts.append(sub[0].upper() + sub[1:].lower())
    return "".join(parts)


def common_prefix(names: Iterable[str]) -> str:
    """Longest string that starts every name in ``names``.

    Returns ``""`` for an empty input, and the name itself for a single one.
    """
    it = iter(names)
    prefix = next(it, "")
    for name in it:
        length = 0
        for a, b in zip(prefix, name):
            if a != b:
                break
            length += 1
        prefix = name[:length]
    return prefix


def strip_common_prefix(names: list[str]) -> list[str]:
    """Remove :func:`common_prefix` from every name."""
    cut = len(common_prefix(names))
    return [name[cut:] for name in names]


def normalize_enum(enum: Enum, rename: str | None = None, strip_prefix: bool = True) -> Enum:
    """Return a normalized copy of ``enum``.

    :param enum: Enum as parsed.
    :param rename: New enum name, or None to keep it.
    :param strip_prefix: Remove the prefix shared by all variants.
    """
    names = [snake_to_pascal(v.name) for v in enum.values]
    if strip_prefix:
        names = strip_common_prefix(names)
    values = [replace(v, name=n) for v, n in zip(enum.values, names)]
    return replace(enum, name=rename or enum.name, values=values)


def normalize_api(
    api: Api,
    renames: Mapping[str, str] | None = None,
    prefix_exempt: Collection[str] | None = None,
) -> Api:
    """Normalize every enum of ``api``.

    The exemption list is matched against the enum name after renaming.

    :param api: Parsed model, not modified.
    :param renames: Enum renames, defaults to :data:`DEFAULT_ENUM_RENAMES`.
    :param prefix_exempt: Enums skipped by prefix stripping, defaults to
        :data:`DEFAULT_PREFIX_EXEMPT`.
    :returns: A new model sharing the non-enum sections with ``api``.
    """
    if renames is None:
        renames = DEFAULT_ENUM_RENAMES
    if prefix_exempt is None:
        prefix_exempt = DEFAULT_PREFIX_EXEMPT

    enums: list[Enum] = []
    for e in api.enums:
        name = renames.get(e.name, e.name)
        strip = name not in prefix_exempt
        if not strip:
            logger.debug("Keeping variant prefixes of enum %s", name)
        enums.append(normalize_enum(e, rename=name, strip_prefix=strip))
    return replace(api, enums=enums)
