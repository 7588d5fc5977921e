"""
Parsing Service

Functions for reading amount, unit and name out of recipe ingredients.

Recipe data arrives in two shapes: structured records like
{"name": "Flour", "amount": 2, "unit": "cups"} and free text like
"2 cups flour". Both are messy, so nothing here raises on bad input.
"""

import dataclasses
import math
import re
from collections.abc import Mapping
from typing import Optional

from constants import (
    UNIT_MAPPINGS, UNICODE_FRACTIONS,
    ON_UNPARSABLE_NULL, ON_UNPARSABLE_DEFAULT_ONE, VALID_ON_UNPARSABLE,
)
from .quantities import format_amount

# Leading quantity: mixed fraction, simple fraction, then whole/decimal number
_INGREDIENT_TEXT = re.compile(
    r'^(\d+\s+\d+\s*/\s*\d+|\d+\s*/\s*\d+|\d+(?:\.\d+)?)\s*([a-zA-Z]+\.?)?\s*(.*)$'
)


@dataclasses.dataclass
class ParsedQuantity:
    amount: Optional[float]
    unit: Optional[str]
    original_text: str


def normalize_fractions(text):
    """Replace Unicode fraction characters with decimal equivalents."""
    # First, normalize all whitespace (including non-breaking spaces) to regular spaces
    text = re.sub(r'[\s\u00a0\u2000-\u200b]+', ' ', text)

    for char, value in UNICODE_FRACTIONS.items():
        if char in text:
            # Check if preceded by a number (mixed fraction like "1½" or "1 ½")
            pattern = r'(\d+)\s*' + re.escape(char)
            match = re.search(pattern, text)
            if match:
                whole = float(match.group(1))
                replacement = str(whole + value)
                text = re.sub(pattern, replacement, text)
            else:
                text = text.replace(char, str(value))
    return text


def parse_fraction(s):
    """
    Convert a fraction string to float. Handles: 1, 1.5, 1/2, 1 1/2

    Returns:
        float, or None when the string isn't a number
    """
    s = s.strip()

    # Check for mixed fraction like "1 1/2"
    mixed_match = re.match(r'^(\d+)\s+(\d+)\s*/\s*(\d+)$', s)
    if mixed_match:
        whole = float(mixed_match.group(1))
        num = float(mixed_match.group(2))
        denom = float(mixed_match.group(3))
        return whole + (num / denom) if denom else None

    # Check for simple fraction like "1/2"
    frac_match = re.match(r'^(\d+)\s*/\s*(\d+)$', s)
    if frac_match:
        num = float(frac_match.group(1))
        denom = float(frac_match.group(2))
        return num / denom if denom else None

    try:
        return float(s)
    except (ValueError, TypeError):
        return None


def coerce_amount(value):
    """
    Coerce a structured ingredient's amount to a float.

    Numbers pass through; strings are read up to their first non-numeric
    text ("2 large" -> 2.0, "1/2" -> 0.5). Booleans, NaN and infinities
    are not amounts.

    Returns:
        float or None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        text = normalize_fractions(str(value)).strip()
        match = _INGREDIENT_TEXT.match(text)
        if not match:
            return None
        amount = parse_fraction(match.group(1))
        if amount is None:
            return None
    if not math.isfinite(amount):
        return None
    return amount


def _is_malformed(ingredient):
    """Single-letter name with the real name in unit, seen in imported recipe data."""
    name = ingredient.get('name')
    unit = ingredient.get('unit')
    return (
        isinstance(name, str) and len(name.strip()) == 1
        and isinstance(unit, str) and len(unit.strip()) > 1
    )


def _split_ingredient_text(text):
    """
    Split '2 cups flour' into (2.0, 'cups', 'flour').

    The word after the number is only taken as a unit when it is one
    ("3 large onions" has no unit). Text without a leading number gives
    (None, None, text).
    """
    text = normalize_fractions(text).strip()
    match = _INGREDIENT_TEXT.match(text)
    if not match:
        return None, None, text

    amount = parse_fraction(match.group(1))
    word = match.group(2)
    rest = match.group(3).strip()

    unit = None
    if word:
        if word.lower().rstrip('.') in UNIT_MAPPINGS and rest:
            unit = word.lower()
        else:
            rest = f"{word} {rest}".strip()
    return amount, unit, rest


def _fallback_amount(on_unparsable):
    return 1.0 if on_unparsable == ON_UNPARSABLE_DEFAULT_ONE else None


def parse_quantity(ingredient, on_unparsable=ON_UNPARSABLE_NULL):
    """
    Extract amount and unit from a structured or free-text ingredient.

    Args:
        ingredient: dict-like record or free-text line
        on_unparsable: 'null' leaves amount None when it can't be read,
            'default_one' uses 1

    Returns:
        ParsedQuantity(amount, unit, original_text), where original_text is
        "<amount> <unit>" when an amount was read and the raw text otherwise
    """
    if on_unparsable not in VALID_ON_UNPARSABLE:
        raise ValueError(f"on_unparsable must be one of {sorted(VALID_ON_UNPARSABLE)}, got {on_unparsable!r}")

    if isinstance(ingredient, Mapping):
        if _is_malformed(ingredient):
            # The unit field holds the name; the item has no usable quantity
            return ParsedQuantity(amount=1.0, unit=None, original_text='1')

        amount = coerce_amount(ingredient.get('amount'))
        if amount is None:
            amount = _fallback_amount(on_unparsable)
        unit = ingredient.get('unit')
        unit = str(unit).strip() if unit is not None else ''
        amount_text = '' if amount is None else format_amount(amount)
        return ParsedQuantity(
            amount=amount,
            unit=unit or None,
            original_text=f"{amount_text} {unit or ''}".strip(),
        )

    if isinstance(ingredient, str):
        amount, unit, _ = _split_ingredient_text(ingredient)
        if amount is not None and math.isfinite(amount):
            return ParsedQuantity(
                amount=amount,
                unit=unit,
                original_text=f"{format_amount(amount)} {unit or ''}".strip(),
            )
        return ParsedQuantity(
            amount=_fallback_amount(on_unparsable),
            unit=None,
            original_text=ingredient.strip(),
        )

    return ParsedQuantity(
        amount=_fallback_amount(on_unparsable),
        unit=None,
        original_text='' if ingredient is None else str(ingredient).strip(),
    )


def extract_ingredient_name(ingredient):
    """
    Get the shopping item name for an ingredient.

    Mirrors parse_quantity's handling of malformed records: a one-letter
    name with a longer unit means the unit is the real name.

    Returns:
        Trimmed name, '' when there isn't one
    """
    if isinstance(ingredient, Mapping):
        if _is_malformed(ingredient):
            return ingredient['unit'].strip()
        name = ingredient.get('name')
        if name is None:
            return ''
        return str(name).strip()

    if isinstance(ingredient, str):
        amount, _, rest = _split_ingredient_text(ingredient)
        if amount is None:
            return ingredient.strip()
        return rest

    return ''
