"""
Ingredient Matching Service

Functions for normalizing ingredient names and finding the shopping item
a recipe ingredient should merge into.

Normalization is a heuristic, not a stemmer. It is good enough for common
grocery nouns ("Fresh Tomatoes" and "tomato" match) and accepts the odd
false positive ("shoes" -> "sho") in exchange for being predictable.
"""

import re

from constants import NAME_MODIFIERS

_PARENTHETICAL = re.compile(r'\([^)]*\)')
_UNCLOSED_PARENTHETICAL = re.compile(r'\(.*$')


def _strip_modifiers(words, modifiers):
    """Drop leading and trailing modifier words, always keeping one word."""
    while len(words) > 1 and words[0] in modifiers:
        words = words[1:]
    while len(words) > 1 and words[-1] in modifiers:
        words = words[:-1]
    return words


def _depluralize(name):
    """Naive plural stripping: 'tomatoes' -> 'tomato', 'eggs' -> 'egg', 'grass' stays."""
    if name.endswith('oes'):
        return name[:-2]
    if name.endswith('s') and not name.endswith('ss'):
        return name[:-1]
    return name


def _normalize_once(name, modifiers):
    name = _PARENTHETICAL.sub(' ', name)
    name = _UNCLOSED_PARENTHETICAL.sub(' ', name)
    words = _strip_modifiers(name.split(), modifiers)
    return _depluralize(' '.join(words)).strip()


def normalize_ingredient_name(raw_name, modifiers=None):
    """
    Normalize an ingredient name for matching.

    Lowercases and trims, removes parenthetical notes, strips descriptive
    modifiers from either end and drops a plural 's'. Never raises; None or
    whitespace gives ''. The result is a matching key, never a display name.

    Args:
        raw_name: Name as entered or read from a recipe
        modifiers: Iterable of modifier words (default NAME_MODIFIERS)

    Returns:
        Normalized name
    """
    if raw_name is None:
        return ''
    if not isinstance(raw_name, str):
        raw_name = str(raw_name)

    modifiers = frozenset(m.lower() for m in (NAME_MODIFIERS if modifiers is None else modifiers))
    normalized = raw_name.lower().strip()

    # Repeat until stable so normalize(normalize(x)) == normalize(x)
    previous = None
    while normalized != previous:
        previous = normalized
        normalized = _normalize_once(normalized, modifiers)

    return normalized


def build_match_index(items, modifiers=None):
    """
    Index incomplete shopping items by normalized name.

    Completed items are never merge targets. When several items share a key
    the oldest one wins.

    Returns:
        dict of normalized name -> item
    """
    index = {}
    ordered = sorted(items, key=lambda item: (item.created_at is None, item.created_at, item.id or 0))
    for item in ordered:
        if item.is_complete:
            continue
        key = normalize_ingredient_name(item.name, modifiers)
        if key and key not in index:
            index[key] = item
    return index


def find_merge_target(index, name, modifiers=None):
    """Return the indexed item matching name, or None."""
    key = normalize_ingredient_name(name, modifiers)
    if not key:
        return None
    return index.get(key)
