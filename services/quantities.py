"""
Quantity Service

Arithmetic on the loose quantity text stored on shopping items.

Quantities are only added when they are comparable: both plain numbers, or
both in the same unit ("2 cups" + "1 cup" = "3 cups"). Anything else is kept
side by side as "2 cups + 1 tbsp" rather than inventing a sum.
"""

import re

from constants import UNIT_MAPPINGS

# Leading number as JavaScript's parseFloat reads it ("2 cups" -> 2.0)
_LEADING_NUMBER = re.compile(r'^\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+))')
# One quantity part: "2", "2.5 cups", "3 Tbsp."
_QUANTITY_PART = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*([a-zA-Z]+\.?)?\s*$')


def format_amount(value):
    """Format a numeric amount for storage: 5.0 -> '5', 2.456 -> '2.46'."""
    value = round(float(value), 2)
    if value == int(value):
        return str(int(value))
    return f"{value:.2f}".rstrip('0').rstrip('.')


def leading_number(value):
    """
    Read the numeric prefix of a quantity.

    Returns:
        float, or None when there is no leading number
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = _LEADING_NUMBER.match(str(value))
    if not match:
        return None
    return float(match.group(1))


def canonical_unit(unit):
    """Map a unit spelling to its standard form ('cups' -> 'CUP'); None stays None."""
    if not unit:
        return None
    key = unit.lower().rstrip('.')
    return UNIT_MAPPINGS.get(key, key.upper())


def split_quantity(text):
    """
    Split one quantity part into (amount, unit).

    Returns:
        (float, str or None), or None if the text isn't "<number> [unit]"
    """
    if text is None:
        return None
    match = _QUANTITY_PART.match(str(text))
    if not match:
        return None
    return float(match.group(1)), match.group(2)


def quantity_text(parsed):
    """Display text for a ParsedQuantity: '2 cups', '3', or its original text."""
    if parsed.amount is not None:
        return f"{format_amount(parsed.amount)} {parsed.unit or ''}".strip()
    return parsed.original_text or ''


def merge_quantity(existing, parsed):
    """
    Add a parsed ingredient quantity to an item's stored quantity.

    Each ' + ' separated part of the existing quantity is tried in turn; the
    first part with a matching unit absorbs the amount. If none matches the
    new quantity is appended as another part.

    Args:
        existing: Stored quantity text (may be empty)
        parsed: ParsedQuantity from services.parsing

    Returns:
        New quantity text
    """
    addition = quantity_text(parsed)
    existing = '' if existing is None else str(existing).strip()

    if not existing:
        return addition or '1'
    if not addition:
        return existing

    parts = [part.strip() for part in existing.split('+') if part.strip()]

    if parsed.amount is not None:
        target_unit = canonical_unit(parsed.unit)
        for i, part in enumerate(parts):
            split = split_quantity(part)
            if split is None:
                continue
            amount, unit = split
            if canonical_unit(unit) == target_unit:
                parts[i] = f"{format_amount(amount + parsed.amount)} {unit or ''}".strip()
                return ' + '.join(parts)

    parts.append(addition)
    return ' + '.join(parts)


def combine_quantities(quantities):
    """
    Fold several stored quantities into one.

    Used when collapsing duplicate rows. Plain numbers and same-unit parts
    are summed (rounded to 2 places); unreadable or empty quantities count
    as nothing; incomparable parts are joined with ' + '.

    Returns:
        Combined quantity text ('0' when nothing was readable)
    """
    totals = []  # [canonical unit, amount, unit as written]
    extras = []

    for quantity in quantities:
        if quantity is None:
            continue
        for part in str(quantity).split('+'):
            part = part.strip()
            if not part:
                continue
            split = split_quantity(part)
            if split is None:
                number = leading_number(part)
                if number is None:
                    if part not in extras:
                        extras.append(part)
                    continue
                split = (number, None)
            amount, unit = split
            key = canonical_unit(unit)
            for entry in totals:
                if entry[0] == key:
                    entry[1] += amount
                    break
            else:
                totals.append([key, amount, unit])

    parts = [f"{format_amount(amount)} {unit or ''}".strip() for _, amount, unit in totals]
    parts.extend(extras)
    return ' + '.join(parts) if parts else '0'


def numeric_total(quantities):
    """Sum the leading numbers of quantities (unreadable counts as 0), rounded to 2 places."""
    total = 0.0
    for quantity in quantities:
        for part in str(quantity or '').split('+'):
            total += leading_number(part) or 0.0
    return format_amount(total)
