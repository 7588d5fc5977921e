"""Tests for confirming and rejecting auto-added items."""

import pytest

from conftest import ForeignKeyFailingStore, count_items, items_on
from models import db, ShoppingList
from services.confirmation import clean_item_ids, resolve_auto_added_items
from services.store import ShoppingStore
from utils.errors import InvalidActionError, QuantityError


def _pending(make_item, shopping_list, name, quantity, **fields):
    return make_item(shopping_list, name, quantity, auto_added=True, pending_confirmation=True, **fields)


def _assert_counts_fresh(list_id):
    shopping_list = db.session.get(ShoppingList, list_id)
    db.session.refresh(shopping_list)
    assert shopping_list.total_items == count_items(list_id)
    assert shopping_list.completed_items == count_items(list_id, completed=True)


def test_reject_only_deletes_pending_auto_added(make_list, make_item):
    shopping_list = make_list()
    pending = _pending(make_item, shopping_list, 'Milk', '1')
    confirmed = make_item(shopping_list, 'Bread', '1', auto_added=True, pending_confirmation=False)
    manual = make_item(shopping_list, 'Eggs', '6')
    pending_id = pending.id

    result = resolve_auto_added_items([pending_id, confirmed.id, manual.id], 'reject')

    assert result['ok'] is True
    assert result['removed'] == 1
    assert result['confirmed'] == 0
    assert result['message'] == 'Removed 1 auto-added item'
    assert [item.name for item in items_on(shopping_list.id)] == ['Bread', 'Eggs']
    _assert_counts_fresh(shopping_list.id)


def test_remove_is_an_alias_for_reject(make_list, make_item):
    shopping_list = make_list()
    a = _pending(make_item, shopping_list, 'Milk', '1')
    b = _pending(make_item, shopping_list, 'Flour', '2 cups')

    result = resolve_auto_added_items([str(a.id), b.id, 'junk'], ' Remove ')

    assert result['removed'] == 2
    assert result['message'] == 'Removed 2 auto-added items'
    assert count_items(shopping_list.id) == 0


def test_confirm_collapses_same_named_pending_items(make_list, make_item):
    shopping_list = make_list()
    first = _pending(make_item, shopping_list, 'Milk', '1')
    second = _pending(make_item, shopping_list, 'milk', '2')
    first_id = first.id

    result = resolve_auto_added_items([first.id, second.id], 'confirm')

    assert result['ok'] is True
    assert result['confirmed'] == 1
    items = items_on(shopping_list.id)
    assert len(items) == 1
    assert items[0].id == first_id
    assert items[0].quantity == '3'
    assert items[0].pending_confirmation is False
    assert items[0].auto_added is True
    _assert_counts_fresh(shopping_list.id)


def test_confirm_merges_into_existing_confirmed_item(make_list, make_item, make_recipe):
    recipe = make_recipe()
    shopping_list = make_list()
    existing = make_item(shopping_list, 'Milk', '1')
    first = _pending(make_item, shopping_list, 'Milk', '1', source_recipe_id=recipe.id)
    second = _pending(make_item, shopping_list, 'Milk', '2', source_recipe_id=recipe.id)
    existing_id = existing.id

    result = resolve_auto_added_items([first.id, second.id], 'confirm')

    assert result['ok'] is True
    items = items_on(shopping_list.id)
    assert [item.id for item in items] == [existing_id]
    assert items[0].quantity == '4'
    assert items[0].pending_confirmation is False
    assert items[0].auto_added_at is not None
    assert items[0].source_recipe_id == recipe.id
    _assert_counts_fresh(shopping_list.id)


def test_confirm_ignores_completed_namesakes(make_list, make_item):
    shopping_list = make_list()
    make_item(shopping_list, 'Milk', '5', is_complete=True)
    pending = _pending(make_item, shopping_list, 'Milk', '1')

    resolve_auto_added_items([pending.id], 'confirm')

    items = items_on(shopping_list.id)
    assert [(item.quantity, item.is_complete) for item in items] == [('5', True), ('1', False)]
    _assert_counts_fresh(shopping_list.id)


def test_confirm_keeps_units_apart(make_list, make_item):
    shopping_list = make_list()
    a = _pending(make_item, shopping_list, 'Flour', '2 cups')
    b = _pending(make_item, shopping_list, 'Flour', '1 tbsp')

    resolve_auto_added_items([a.id, b.id], 'confirm')

    assert items_on(shopping_list.id)[0].quantity == '2 cups + 1 tbsp'


def test_confirm_groups_per_list(make_list, make_item):
    home = make_list()
    party = make_list(title='Party')
    a = _pending(make_item, home, 'Milk', '1')
    b = _pending(make_item, party, 'Milk', '2')

    result = resolve_auto_added_items([a.id, b.id], 'confirm')

    assert result['confirmed'] == 2
    assert [item.quantity for item in items_on(home.id)] == ['1']
    assert [item.quantity for item in items_on(party.id)] == ['2']


def test_confirm_with_nothing_pending(make_list, make_item):
    shopping_list = make_list()
    manual = make_item(shopping_list, 'Milk', '1')

    result = resolve_auto_added_items([manual.id, 12345], 'confirm')

    assert result['ok'] is True
    assert result['confirmed'] == 0
    assert result['message'] == 'No items to confirm'


class BrokenMilkStore(ShoppingStore):
    def update_item(self, item, **fields):
        if item.normalized_key == 'milk':
            raise QuantityError("quantity column rejected the value")
        return super().update_item(item, **fields)


def test_failing_group_does_not_stop_the_others(app, make_list, make_item):
    shopping_list = make_list()
    milk = _pending(make_item, shopping_list, 'Milk', '1')
    eggs = _pending(make_item, shopping_list, 'Eggs', '6')

    result = resolve_auto_added_items([milk.id, eggs.id], 'confirm', store=BrokenMilkStore())

    assert result['ok'] is False
    assert result['confirmed'] == 1
    assert result['errors'] == ['Error processing milk: quantity column rejected the value']
    assert result['message'].startswith('Confirmed 1 items with 1 errors')
    by_name = {item.name: item for item in items_on(shopping_list.id)}
    assert by_name['Eggs'].pending_confirmation is False
    assert by_name['Milk'].pending_confirmation is True


@pytest.mark.parametrize('action', [None, '', 'approve'])
def test_unknown_action(app, action):
    with pytest.raises(InvalidActionError):
        resolve_auto_added_items([1], action)


def test_clean_item_ids():
    assert clean_item_ids([3, '4', 3, 'x', None, True, 4.0]) == [3, 4]
    assert clean_item_ids(None) == []


def test_database_error_in_one_group_keeps_the_others(app, make_list, make_item):
    shopping_list = make_list()
    eggs = _pending(make_item, shopping_list, 'Eggs', '6')
    milk = _pending(make_item, shopping_list, 'Milk', '1')
    more_milk = _pending(make_item, shopping_list, 'milk', '2')

    result = resolve_auto_added_items([eggs.id, milk.id, more_milk.id], 'confirm',
                                      store=ForeignKeyFailingStore('milk'))

    assert 'error' not in result
    assert result['ok'] is False
    assert result['confirmed'] == 1
    assert len(result['errors']) == 1
    assert result['errors'][0].startswith('Error processing milk:')
    state = {(item.name, item.quantity): item.pending_confirmation for item in items_on(shopping_list.id)}
    assert state == {('Eggs', '6'): False, ('Milk', '1'): True, ('milk', '2'): True}
    _assert_counts_fresh(shopping_list.id)
