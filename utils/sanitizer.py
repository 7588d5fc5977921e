"""
Input Sanitization Module

Cleans item names and quantity text coming from recipe imports and API
callers before they are stored. Names are kept as entered (no escaping);
templates and JSON encoders handle output escaping.
"""

import math
import re

from constants import MAX_LENGTHS


def sanitize_item_name(name, max_length=None):
    """
    Clean a shopping item name for storage.

    Args:
        name: The raw name (can be None)
        max_length: Maximum allowed length (default from MAX_LENGTHS)

    Returns:
        Cleaned name, possibly empty
    """
    if max_length is None:
        max_length = MAX_LENGTHS['item_name']

    if name is None:
        return ''

    if not isinstance(name, str):
        name = str(name)

    # Remove control characters and null bytes
    name = re.sub(r'[\x00-\x1f\x7f-\x9f]', ' ', name)

    # Collapse multiple spaces
    name = re.sub(r'\s+', ' ', name).strip()

    # Truncate if too long
    if len(name) > max_length:
        name = name[:max_length].rstrip()

    return name


def sanitize_quantity_text(value):
    """
    Convert a quantity value to the text stored on a shopping item.

    Numbers are written without a trailing '.0'. Nothing is truncated here;
    the model rejects quantities that don't fit so callers can fall back.

    Returns:
        Quantity text, or None if the value is a non-finite number
    """
    if value is None:
        return ''

    if isinstance(value, bool):
        value = int(value)

    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value == int(value):
            return str(int(value))
        return f"{round(value, 2):.2f}".rstrip('0').rstrip('.')

    if isinstance(value, int):
        return str(value)

    text = str(value)
    text = re.sub(r'[\x00-\x1f\x7f-\x9f]', ' ', text)
    return re.sub(r'\s+', ' ', text).strip()
