"""
Confirmation Service

Resolves auto-added items that are waiting for the user: 'confirm' keeps
them (collapsing same-named duplicates on the way), 'reject' deletes them.

Confirmation is a best-effort batch. Each name group is processed on its
own; a failing group is reported and the rest still go through.
"""

import logging
from collections import OrderedDict

from sqlalchemy.exc import SQLAlchemyError

from constants import VALID_CONFIRM_ACTIONS, REJECT_ACTIONS
from models import utcnow
from utils.errors import InvalidActionError, InvalidItemError
from .shopping import refresh_list_counts, store_combined_quantity
from .store import ShoppingStore

logger = logging.getLogger(__name__)


def _plural(count, word):
    return f"{count} {word}{'' if count == 1 else 's'}"


def clean_item_ids(item_ids):
    """Integer ids from a list of ints/numeric strings, deduplicated, order kept."""
    cleaned = []
    for value in item_ids or []:
        if isinstance(value, bool):
            continue
        try:
            item_id = int(value)
        except (TypeError, ValueError):
            continue
        if item_id not in cleaned:
            cleaned.append(item_id)
    return cleaned


def _refresh_and_commit(store, list_ids):
    """Recompute counts for every touched list and commit. Returns an error string or None."""
    try:
        for list_id in sorted(list_ids):
            shopping_list = store.get_list(list_id)
            if shopping_list is not None:
                refresh_list_counts(shopping_list, store)
        store.commit()
    except SQLAlchemyError as exc:
        store.rollback()
        logger.exception("Failed to save confirmation changes for lists %s", sorted(list_ids))
        return str(exc)
    return None


def reject_items(item_ids, store=None):
    """
    Delete auto-added items still awaiting confirmation.

    Ids of items that were confirmed meanwhile, or never auto-added, are ignored.
    """
    store = store or ShoppingStore()
    items = store.get_items(clean_item_ids(item_ids), pending_only=True)
    list_ids = {item.list_id for item in items}
    removed = store.delete_items(items)

    error = _refresh_and_commit(store, list_ids)
    if error:
        return {'ok': False, 'confirmed': 0, 'removed': 0, 'message': '', 'errors': [], 'error': error}

    logger.info("Removed %s auto-added items", removed)
    return {
        'ok': True,
        'confirmed': 0,
        'removed': removed,
        'message': f"Removed {_plural(removed, 'auto-added item')}",
        'errors': [],
    }


def _find_confirmed_match(store, list_id, key, exclude_ids):
    """Oldest incomplete, already-confirmed item on the list with the same name."""
    for item in store.items_for_list(list_id, include_complete=False):
        if item.id in exclude_ids or item.pending_confirmation:
            continue
        if item.normalized_key == key:
            return item
    return None


def confirm_items(item_ids, store=None):
    """
    Confirm auto-added items, merging same-named ones.

    Items are grouped per list by case-insensitive name. A group merges
    into an existing confirmed item of that name when there is one;
    otherwise its first item is confirmed with the group's total and the
    rest are deleted. Each group runs in its own savepoint, so a failing
    group leaves the others committed.
    """
    store = store or ShoppingStore()
    items = store.get_items(clean_item_ids(item_ids), pending_only=True)
    if not items:
        return {'ok': True, 'confirmed': 0, 'removed': 0, 'message': 'No items to confirm', 'errors': []}

    groups = OrderedDict()
    for item in items:
        groups.setdefault((item.list_id, item.normalized_key), []).append(item)
    logger.info("Confirming %s items in %s name groups", len(items), len(groups))

    confirmed = 0
    errors = []
    for (list_id, key), group in groups.items():
        try:
            with store.savepoint():
                now = utcnow()
                group_ids = {item.id for item in group}
                quantities = [item.quantity for item in group]
                existing = _find_confirmed_match(store, list_id, key, group_ids)

                if existing is not None:
                    store_combined_quantity(
                        store, existing, [existing.quantity] + quantities,
                        auto_added=True,
                        auto_added_at=now,
                        source_recipe_id=existing.source_recipe_id or group[0].source_recipe_id,
                    )
                    store.delete_items(group)
                    store.flush()
                    logger.debug("Merged %s pending %r items into item %s", len(group), key, existing.id)
                else:
                    first = group[0]
                    store_combined_quantity(
                        store, first, quantities,
                        pending_confirmation=False,
                        auto_added_at=now,
                    )
                    store.delete_items(group[1:])
                    store.flush()
                    logger.debug("Confirmed item %s (%r) with quantity %r", first.id, key, first.quantity)
            confirmed += 1
        except (InvalidItemError, SQLAlchemyError) as exc:
            logger.warning("Error confirming %r on list %s: %s", key, list_id, exc)
            errors.append(f"Error processing {key}: {exc}")

    error = _refresh_and_commit(store, {list_id for list_id, _ in groups})
    if error:
        return {'ok': False, 'confirmed': 0, 'removed': 0, 'message': '', 'errors': errors, 'error': error}

    if errors:
        message = f"Confirmed {confirmed} items with {len(errors)} errors: {', '.join(errors)}"
    else:
        message = f"Confirmed {_plural(confirmed, 'auto-added item')}"
    logger.info("Confirmation complete: %s groups confirmed, %s errors", confirmed, len(errors))
    return {'ok': not errors, 'confirmed': confirmed, 'removed': 0, 'message': message, 'errors': errors}


def resolve_auto_added_items(item_ids, action, store=None):
    """
    Confirm or reject a batch of auto-added items.

    Args:
        item_ids: Ids of the items to resolve
        action: 'confirm', or 'reject' (also accepted as 'remove')

    Raises:
        InvalidActionError: unknown action

    Returns:
        dict with ok, confirmed, removed, message and errors
    """
    action = (action or '').strip().lower()
    if action not in VALID_CONFIRM_ACTIONS:
        raise InvalidActionError(f"action must be one of {sorted(VALID_CONFIRM_ACTIONS)}")
    if action in REJECT_ACTIONS:
        return reject_items(item_ids, store)
    return confirm_items(item_ids, store)
