# File: axumgen/naming.py
"""
axumgen - Name Normalisation
=============================
The single identifier normaliser used for file paths, Rust module names,
crate names, table names and every string injected at a marker.

``normalize`` converges PascalCase, camelCase (acronyms included), kebab-case
and space-separated input onto one lowercase, underscore-separated form and
is idempotent.  Every other component imports it from here; a second,
independent snake-case routine anywhere in the package is a bug.

All conversions are ``lru_cache``d: entity names are normalised many times
per run (paths, markers, template context).
"""

from __future__ import annotations

import functools
import logging
import re
from typing import Dict, List, Tuple

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("axumgen.naming")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns
# ---------------------------------------------------------------------------

_ACRONYM_BOUNDARY_RE: re.Pattern[str] = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY_RE: re.Pattern[str] = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALPHANUM_RE: re.Pattern[str] = re.compile(r"[^a-zA-Z0-9]")
_MULTI_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"_{2,}")
_EDGE_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"^_+|_+$")


# ---------------------------------------------------------------------------
# Canonical form
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def normalize(identifier: str) -> str:
    """
    Convert any identifier to its canonical snake_case form.

    Examples:
        >>> normalize("OrderItem")
        'order_item'
        >>> normalize("orderItem")
        'order_item'
        >>> normalize("order-item")
        'order_item'
        >>> normalize("Order Item")
        'order_item'
        >>> normalize("HTTPRequestLog")
        'http_request_log'
    """
    if not identifier:
        return ""
    s: str = _ACRONYM_BOUNDARY_RE.sub(r"\1_\2", identifier)
    s = _WORD_BOUNDARY_RE.sub(r"\1_\2", s)
    s = _NON_ALPHANUM_RE.sub("_", s)
    s = _MULTI_UNDERSCORE_RE.sub("_", s)
    s = _EDGE_UNDERSCORE_RE.sub("", s)
    return s.lower()


@functools.lru_cache(maxsize=None)
def _words(identifier: str) -> Tuple[str, ...]:
    canonical: str = normalize(identifier)
    return tuple(w for w in canonical.split("_") if w)


# ---------------------------------------------------------------------------
# Derived case styles (all built on ``normalize``)
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def to_pascal_case(identifier: str) -> str:
    """``order_item`` → ``OrderItem``."""
    return "".join(w.capitalize() for w in _words(identifier))


@functools.lru_cache(maxsize=None)
def to_camel_case(identifier: str) -> str:
    """``order_item`` → ``orderItem``."""
    words: Tuple[str, ...] = _words(identifier)
    if not words:
        return ""
    return words[0] + "".join(w.capitalize() for w in words[1:])


@functools.lru_cache(maxsize=None)
def to_kebab_case(identifier: str) -> str:
    """``OrderItem`` → ``order-item`` (URL segments)."""
    return "-".join(_words(identifier))


_IRREGULAR_PLURALS: Dict[str, str] = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "datum": "data",
    "index": "indices",
    "status": "statuses",
    "address": "addresses",
}


@functools.lru_cache(maxsize=None)
def to_plural(word: str) -> str:
    """
    Naive English pluralisation, sufficient for REST resource names.

    Suffix rules only look at the end of the identifier, so ``OrderItem``
    becomes ``OrderItems``.
    """
    if not word:
        return ""

    lower: str = word.lower()
    if lower in _IRREGULAR_PLURALS:
        plural: str = _IRREGULAR_PLURALS[lower]
        return plural.capitalize() if word[0].isupper() else plural

    if lower.endswith("s") and not lower.endswith("ss"):
        return word
    if lower.endswith(("sh", "ch", "x", "z", "ss")):
        return word + "es"
    if lower.endswith("y") and len(word) > 1 and lower[-2] not in "aeiou":
        return word[:-1] + "ies"
    return word + "s"


__all__: List[str] = [
    "normalize",
    "to_pascal_case",
    "to_camel_case",
    "to_kebab_case",
    "to_plural",
]

logger.debug("axumgen.naming loaded — %d public symbols.", len(__all__))
