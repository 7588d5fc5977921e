"""
Shopping List Service

Functions for finding shopping lists, keeping their item counts in sync and
managing items outside the recipe import path.
"""

import logging

from flask import current_app, has_app_context
from sqlalchemy.exc import IntegrityError

from constants import DEFAULT_LIST_TITLE
from utils.errors import NotFoundError, QuantityError
from utils.sanitizer import sanitize_item_name
from .quantities import combine_quantities, numeric_total
from .store import ShoppingStore

logger = logging.getLogger(__name__)


def _default_title():
    if has_app_context():
        return current_app.config.get('DEFAULT_LIST_TITLE', DEFAULT_LIST_TITLE)
    return DEFAULT_LIST_TITLE


def get_list(list_id, household_id=None, lock=False, store=None):
    """
    Load a shopping list, optionally checking it belongs to household_id.

    Raises:
        NotFoundError: list missing or owned by another household
    """
    store = store or ShoppingStore()
    shopping_list = store.get_list(list_id, lock=lock)
    if shopping_list is None:
        raise NotFoundError('Shopping list', list_id)
    if household_id is not None and shopping_list.household_id != household_id:
        # Don't reveal that the list exists
        raise NotFoundError('Shopping list', list_id)
    return shopping_list


def get_or_create_default_list(household_id, user_id=None, title=None, store=None):
    """
    Get the household's default list ("Groceries"), creating it if needed.

    Returns:
        (shopping_list, created)
    """
    store = store or ShoppingStore()
    title = title or _default_title()

    shopping_list = store.find_list(household_id, title)
    if shopping_list is not None:
        return shopping_list, False

    try:
        shopping_list = store.create_list(household_id, title, created_by=user_id)
    except IntegrityError:
        # Another request created it between our lookup and insert
        store.rollback()
        shopping_list = store.find_list(household_id, title)
        if shopping_list is None:
            raise
        return shopping_list, False

    logger.info("Created default list %r (id=%s) for household %s", title, shopping_list.id, household_id)
    return shopping_list, True


def refresh_list_counts(shopping_list, store=None):
    """
    Recompute total_items / completed_items from the item table and store them.

    Counts are always recomputed, never adjusted in place.

    Returns:
        (total_items, completed_items)
    """
    store = store or ShoppingStore()
    total = store.count_items(shopping_list.id)
    completed = store.count_items(shopping_list.id, completed=True)
    shopping_list.total_items = total
    shopping_list.completed_items = completed
    logger.debug("List %s counts: %s total, %s completed", shopping_list.id, total, completed)
    return total, completed


def store_combined_quantity(store, item, quantities, **fields):
    """
    Write the combination of several quantities onto item.

    If the combined text doesn't fit, falls back to the plain numeric total.
    """
    try:
        store.update_item(item, quantity=combine_quantities(quantities), **fields)
    except QuantityError as exc:
        fallback = numeric_total(quantities)
        logger.warning("Combined quantity for item %s rejected (%s); storing numeric total %r", item.id, exc, fallback)
        store.update_item(item, quantity=fallback, **fields)
    return item


def get_pending_confirmations(household_id, store=None):
    """
    Auto-added items awaiting confirmation across a household's lists.

    Returns:
        dict with ok, pendingItems (newest first) and count
    """
    store = store or ShoppingStore()
    lists = store.lists_for_household(household_id)
    if not lists:
        logger.info("No shopping lists for household %s when checking pending confirmations", household_id)
        return {'ok': True, 'pendingItems': [], 'count': 0}

    pending = []
    for item in store.pending_items([shopping_list.id for shopping_list in lists]):
        data = item.to_dict()
        data['recipeTitle'] = item.source_recipe.title if item.source_recipe else 'Unknown Recipe'
        pending.append(data)

    logger.info("Household %s has %s pending auto-added items", household_id, len(pending))
    return {'ok': True, 'pendingItems': pending, 'count': len(pending)}


def add_manual_item(list_id, name, quantity=None, user_id=None, household_id=None, store=None):
    """
    Add an item typed in by a user. Manual items are confirmed on creation.

    Raises:
        NotFoundError: list doesn't exist
        InvalidItemError: name empty or quantity unusable
    """
    store = store or ShoppingStore()
    shopping_list = get_list(list_id, household_id=household_id, store=store)

    item = store.insert_item(
        list_id=shopping_list.id,
        name=sanitize_item_name(name),
        quantity=quantity if quantity not in (None, '') else '1',
        is_complete=False,
        auto_added=False,
        pending_confirmation=False,
        created_by=user_id,
    )
    refresh_list_counts(shopping_list, store)
    store.commit()
    logger.info("Added manual item %r to list %s", item.name, shopping_list.id)
    return item
