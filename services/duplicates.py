"""
Duplicate Merge Service

Cleanup pass that collapses items with the same name on a list.

Matching here is purely lexical (case and surrounding whitespace only):
"Milk" and "milk " merge, "Milk" and "Fresh Milk" don't. Users already
see these items, so near-synonyms are left for them to decide.
"""

import logging
from collections import OrderedDict

from sqlalchemy.exc import SQLAlchemyError

from utils.errors import InvalidItemError
from .shopping import get_list, refresh_list_counts, store_combined_quantity
from .store import ShoppingStore

logger = logging.getLogger(__name__)


def merge_duplicate_items(list_id, household_id=None, store=None):
    """
    Merge same-named items on a list into the earliest-created one.

    The kept item gets the combined quantity; it stays complete or pending
    only if every merged item was. Each group runs in its own savepoint;
    groups that fail are rolled back, reported and skipped.

    Raises:
        NotFoundError: list doesn't exist (or belongs to another household)

    Returns:
        dict with ok, mergedItems, totalItems, message and errors
    """
    store = store or ShoppingStore()
    shopping_list = get_list(list_id, household_id=household_id, lock=True, store=store)
    list_id = shopping_list.id

    items = store.items_for_list(list_id)
    groups = OrderedDict()
    for item in items:
        key = item.normalized_key
        if key:
            groups.setdefault(key, []).append(item)
    logger.info("List %s: %s items in %s name groups", list_id, len(items), len(groups))

    merged = 0
    errors = []
    for key, group in groups.items():
        if len(group) < 2:
            continue
        try:
            with store.savepoint():
                keep, duplicates = group[0], group[1:]
                store_combined_quantity(
                    store, keep, [item.quantity for item in group],
                    is_complete=all(item.is_complete for item in group),
                    pending_confirmation=all(item.pending_confirmation for item in group),
                )
                store.delete_items(duplicates)
                store.flush()
                logger.debug("Merged %s %r items into item %s (%r)", len(group), key, keep.id, keep.quantity)
            merged += len(duplicates)
        except (InvalidItemError, SQLAlchemyError) as exc:
            logger.warning("Error merging %r on list %s: %s", key, list_id, exc)
            errors.append(f"Error merging {key}: {exc}")

    try:
        total, _ = refresh_list_counts(shopping_list, store)
        store.commit()
    except SQLAlchemyError as exc:
        store.rollback()
        logger.exception("Failed to save merged duplicates for list %s", list_id)
        return {'ok': False, 'mergedItems': 0, 'totalItems': 0, 'message': '', 'errors': errors, 'error': str(exc)}

    if errors:
        message = f"Merged {merged} duplicate items with {len(errors)} errors: {', '.join(errors)}"
    else:
        message = f"Successfully merged {merged} duplicate items"
    logger.info("Merge complete for list %s: %s merged, %s remaining", list_id, merged, total)
    return {'ok': not errors, 'mergedItems': merged, 'totalItems': total, 'message': message, 'errors': errors}
