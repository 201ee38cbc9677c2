"""
Conversion nom de lieu <-> slug d'URL.

`to_slug` est une fonction pure, totale et idempotente. `from_slug` n'est qu'une heuristique de
retour vers un texte de recherche: plusieurs noms peuvent produire le même slug.
"""

import re

_WHITESPACE_RE = re.compile(r"\s+")
_NON_SLUG_RE = re.compile(r"[^a-z0-9-]")


def to_slug(name: str) -> str:
    """Minuscule, blancs -> '-', suppression de tout caractère hors [a-z0-9-]."""
    return _NON_SLUG_RE.sub("", _WHITESPACE_RE.sub("-", name.lower()))


def from_slug(slug: str) -> str:
    """Texte de recherche approché: "new-delhi" -> "new delhi"."""
    return slug.replace("-", " ")
