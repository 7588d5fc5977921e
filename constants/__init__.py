"""
Constants Package

Shared lookup tables for ingredient matching, quantity parsing and validation.
"""

from .ingredients import NAME_MODIFIERS, DEFAULT_LIST_TITLE
from .units import UNIT_MAPPINGS, UNICODE_FRACTIONS
from .validation import (
    MAX_LENGTHS,
    CONFIRM_ACTION,
    REJECT_ACTIONS,
    VALID_CONFIRM_ACTIONS,
    ON_UNPARSABLE_NULL,
    ON_UNPARSABLE_DEFAULT_ONE,
    VALID_ON_UNPARSABLE,
    DEFAULT_QUANTITY,
)

__all__ = [
    'NAME_MODIFIERS',
    'DEFAULT_LIST_TITLE',
    'UNIT_MAPPINGS',
    'UNICODE_FRACTIONS',
    'MAX_LENGTHS',
    'CONFIRM_ACTION',
    'REJECT_ACTIONS',
    'VALID_CONFIRM_ACTIONS',
    'ON_UNPARSABLE_NULL',
    'ON_UNPARSABLE_DEFAULT_ONE',
    'VALID_ON_UNPARSABLE',
    'DEFAULT_QUANTITY',
]
