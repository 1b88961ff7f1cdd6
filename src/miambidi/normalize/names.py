"""Ingredient name normalization for matching."""

import re

# Accented letters folded to their base letter. Anything outside this table
# (œ, æ, ÿ, ...) is kept as is.
ACCENT_GROUPS: tuple[tuple[str, str], ...] = (
    ("àáâãäå", "a"),
    ("èéêë", "e"),
    ("ìíîï", "i"),
    ("òóôõö", "o"),
    ("ùúûü", "u"),
    ("ç", "c"),
)

_ACCENT_TABLE = str.maketrans(
    {accented: plain for group, plain in ACCENT_GROUPS for accented in group}
)
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_ingredient_name(name: str | None) -> str:
    """
    Normalize an ingredient name for matching.

    - Lowercase
    - Trim and collapse whitespace runs
    - Fold French accents

    Plurals are left alone: "piment" and "piments" stay distinct.
    """
    if not name:
        return ""

    name = name.lower().strip()
    name = _WHITESPACE_RE.sub(" ", name)
    return name.translate(_ACCENT_TABLE)
