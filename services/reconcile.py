"""
Recipe Reconciliation Service

Merges a recipe's ingredients into a shopping list. Each ingredient either
tops up the existing item with the same normalized name or becomes a new
auto-added item, pending confirmation unless the caller auto-confirms.

One bad ingredient never stops the batch: each ingredient is written in its
own savepoint, an unstorable quantity falls back to the plain numeric total
and then the default quantity, and anything still failing is rolled back
and reported.
"""

import dataclasses
import logging
from typing import List

from flask import current_app, has_app_context
from sqlalchemy.exc import SQLAlchemyError

from constants import DEFAULT_QUANTITY, ON_UNPARSABLE_DEFAULT_ONE
from models import utcnow
from utils.errors import InvalidItemError, NotFoundError, QuantityError
from utils.sanitizer import sanitize_item_name
from .matching import build_match_index, find_merge_target, normalize_ingredient_name
from .parsing import extract_ingredient_name, parse_quantity
from .quantities import merge_quantity, numeric_total, quantity_text
from .shopping import get_list, get_or_create_default_list, refresh_list_counts
from .store import ShoppingStore

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class ReconcileResult:
    inserted: List = dataclasses.field(default_factory=list)
    updated: List = dataclasses.field(default_factory=list)
    errors: List[str] = dataclasses.field(default_factory=list)

    @property
    def auto_added(self):
        """Items this batch left flagged as auto-added (new or topped-up pending ones)."""
        return [item for item in self.inserted + self.updated if item.auto_added]

    @property
    def pending_confirmations(self):
        return [item for item in self.inserted + self.updated if item.pending_confirmation]


def _write_quantity(write, quantities, name, list_id):
    """
    Run write(quantity) with the first quantity the item accepts.

    The candidates are tried in order, then the default quantity. Only a
    rejected quantity moves on to the next one.
    """
    candidates = [quantity for quantity in quantities if quantity]
    if DEFAULT_QUANTITY not in candidates:
        candidates.append(DEFAULT_QUANTITY)
    for position, quantity in enumerate(candidates):
        try:
            return write(quantity)
        except QuantityError as exc:
            if position == len(candidates) - 1:
                raise
            logger.warning(
                "Quantity %r for %r on list %s rejected (%s); retrying with %r",
                quantity, name, list_id, exc, candidates[position + 1],
            )


def reconcile(existing_items, ingredients, store, list_id, auto_confirm=False,
              source_recipe_id=None, acting_user=None, modifiers=None,
              on_unparsable=ON_UNPARSABLE_DEFAULT_ONE):
    """
    Merge ingredients into a list's items.

    Args:
        existing_items: Items already on the list (completed ones are ignored)
        ingredients: Structured records and/or free-text lines, in order
        store: ShoppingStore used for inserts and updates
        list_id: List new items are created on
        auto_confirm: Create/refresh items as confirmed instead of pending
        source_recipe_id: Recipe recorded on new items
        acting_user: Recorded as created_by on new items
        modifiers: Name modifier words (default NAME_MODIFIERS)
        on_unparsable: Quantity parser policy for unreadable amounts

    Returns:
        ReconcileResult with inserted and updated items and per-ingredient errors
    """
    result = ReconcileResult()
    if not ingredients:
        return result

    index = build_match_index(existing_items, modifiers)
    now = utcnow()

    for position, ingredient in enumerate(ingredients, start=1):
        name = sanitize_item_name(extract_ingredient_name(ingredient))
        if not name:
            logger.warning("Skipping ingredient %s on list %s: no name in %r", position, list_id, ingredient)
            result.errors.append(f"Ingredient {position} has no name")
            continue

        parsed = parse_quantity(ingredient, on_unparsable=on_unparsable)
        target = find_merge_target(index, name, modifiers)

        try:
            with store.savepoint():
                if target is not None:
                    # Manual/confirmed items only get their quantity topped up
                    fields = {}
                    if target.auto_added and target.pending_confirmation:
                        fields = {'auto_added_at': now, 'pending_confirmation': not auto_confirm}

                    def write(quantity, target=target, fields=fields):
                        return store.update_item(target, quantity=quantity, **fields)

                    previous = target.quantity
                    # If the merged text doesn't fit, keep the summed amount rather than the default
                    fallback = numeric_total([previous, quantity_text(parsed)])
                    _write_quantity(write, [merge_quantity(previous, parsed), fallback], name, list_id)
                    store.flush()
                    logger.debug("Merged %r into item %s: %r -> %r", name, target.id, previous, target.quantity)
                else:
                    def write(quantity, name=name):
                        return store.insert_item(
                            list_id=list_id,
                            name=name,
                            quantity=quantity,
                            is_complete=False,
                            auto_added=True,
                            pending_confirmation=not auto_confirm,
                            source_recipe_id=source_recipe_id,
                            auto_added_at=now,
                            created_by=acting_user,
                        )

                    item = _write_quantity(write, [quantity_text(parsed)], name, list_id)
                    store.flush()
                    logger.debug("Added %r (%r) to list %s", name, item.quantity, list_id)
        except (InvalidItemError, SQLAlchemyError) as exc:
            logger.warning("Could not store ingredient %r on list %s: %s", name, list_id, exc)
            result.errors.append(f"{name}: {exc}")
            continue

        if target is None:
            result.inserted.append(item)
            # Later ingredients with the same name merge into this one
            key = normalize_ingredient_name(name, modifiers)
            if key:
                index[key] = item
        elif target not in result.inserted and target not in result.updated:
            result.updated.append(target)

    return result


def _settings():
    defaults = {
        'NAME_MODIFIERS': None,
        'QUANTITY_FALLBACK': ON_UNPARSABLE_DEFAULT_ONE,
    }
    if has_app_context():
        return {key: current_app.config.get(key, value) for key, value in defaults.items()}
    return defaults


def _summary(result, list_id, ok=True, error=None):
    added = len(result.inserted)
    updated = len(result.updated)
    pending = len(result.pending_confirmations)
    message = f"{added} added, {updated} updated"
    if pending:
        message += f", {pending} awaiting confirmation"
    if result.errors:
        message += f" ({len(result.errors)} skipped: {', '.join(result.errors)})"
    summary = {
        'ok': ok,
        'added': added,
        'updated': updated,
        'autoAdded': len(result.auto_added),
        'pendingConfirmations': pending,
        'listId': list_id,
        'message': message,
        'errors': list(result.errors),
    }
    if error:
        summary['error'] = error
    return summary


def add_recipe_to_list(recipe_id, user_id=None, list_id=None, auto_confirm=False, household_id=None, store=None):
    """
    Add a recipe's ingredients to a shopping list.

    Uses list_id when given (it must belong to the recipe's household),
    otherwise the household's default list, creating it if needed. With
    household_id, recipes of other households are treated as missing.

    Raises:
        NotFoundError: recipe or list doesn't exist (or isn't visible)

    Returns:
        dict with ok, added, updated, autoAdded, pendingConfirmations,
        listId, message and errors
    """
    store = store or ShoppingStore()
    settings = _settings()

    recipe = store.get_recipe(recipe_id)
    if recipe is None or (household_id is not None and recipe.household_id != household_id):
        raise NotFoundError('Recipe', recipe_id)

    if list_id is None:
        shopping_list, _ = get_or_create_default_list(recipe.household_id, user_id, store=store)
        list_id = shopping_list.id
    shopping_list = get_list(list_id, household_id=recipe.household_id, lock=True, store=store)
    list_id = shopping_list.id

    ingredients = recipe.ingredients if isinstance(recipe.ingredients, list) else []
    if not ingredients:
        logger.info("Recipe %s (%r) has no ingredients", recipe.id, recipe.title)
        store.commit()
        return _summary(ReconcileResult(), list_id)

    existing = store.items_for_list(list_id, include_complete=False)
    result = reconcile(
        existing,
        ingredients,
        store,
        list_id,
        auto_confirm=auto_confirm,
        source_recipe_id=recipe.id,
        acting_user=user_id,
        modifiers=settings['NAME_MODIFIERS'],
        on_unparsable=settings['QUANTITY_FALLBACK'],
    )

    try:
        refresh_list_counts(shopping_list, store)
        store.commit()
    except SQLAlchemyError as exc:
        store.rollback()
        logger.exception("Failed to save ingredients of recipe %s to list %s", recipe_id, list_id)
        return _summary(ReconcileResult(errors=result.errors), list_id, ok=False, error=str(exc))

    logger.info(
        "Recipe %s (%r) -> list %s: %s added, %s updated, %s pending confirmation, %s errors",
        recipe.id, recipe.title, list_id, len(result.inserted), len(result.updated),
        len(result.pending_confirmations), len(result.errors),
    )
    return _summary(result, list_id)
