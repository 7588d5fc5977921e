"""
Services Package

Business logic for turning recipe ingredients into shopping list items.
"""

from .matching import (
    normalize_ingredient_name,
    build_match_index,
    find_merge_target,
)

from .parsing import (
    ParsedQuantity,
    coerce_amount,
    extract_ingredient_name,
    normalize_fractions,
    parse_fraction,
    parse_quantity,
)

from .quantities import (
    canonical_unit,
    combine_quantities,
    format_amount,
    leading_number,
    merge_quantity,
    numeric_total,
    quantity_text,
)

from .store import ShoppingStore

from .shopping import (
    add_manual_item,
    get_list,
    get_or_create_default_list,
    get_pending_confirmations,
    refresh_list_counts,
)

from .reconcile import (
    ReconcileResult,
    add_recipe_to_list,
    reconcile,
)

from .confirmation import (
    confirm_items,
    reject_items,
    resolve_auto_added_items,
)

from .duplicates import merge_duplicate_items

__all__ = [
    # Matching
    'normalize_ingredient_name',
    'build_match_index',
    'find_merge_target',
    # Parsing
    'ParsedQuantity',
    'coerce_amount',
    'extract_ingredient_name',
    'normalize_fractions',
    'parse_fraction',
    'parse_quantity',
    # Quantities
    'canonical_unit',
    'combine_quantities',
    'format_amount',
    'leading_number',
    'merge_quantity',
    'numeric_total',
    'quantity_text',
    # Storage
    'ShoppingStore',
    # Lists
    'add_manual_item',
    'get_list',
    'get_or_create_default_list',
    'get_pending_confirmations',
    'refresh_list_counts',
    # Reconciliation
    'ReconcileResult',
    'add_recipe_to_list',
    'reconcile',
    # Confirmation
    'confirm_items',
    'reject_items',
    'resolve_auto_added_items',
    # Duplicates
    'merge_duplicate_items',
]
