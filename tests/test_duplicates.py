"""Tests for the duplicate merge cleanup pass."""

import pytest

from conftest import ForeignKeyFailingStore, count_items, items_on
from models import db, ShoppingList
from services.duplicates import merge_duplicate_items
from services.store import ShoppingStore
from utils.errors import NotFoundError, QuantityError


def test_merges_case_and_whitespace_variants(make_list, make_item):
    shopping_list = make_list()
    first = make_item(shopping_list, 'Milk', '1')
    make_item(shopping_list, 'milk ', '2')
    make_item(shopping_list, 'Fresh Milk', '1')
    first_id = first.id

    result = merge_duplicate_items(shopping_list.id)

    assert result['ok'] is True
    assert result['mergedItems'] == 1
    assert result['totalItems'] == 2
    assert result['message'] == 'Successfully merged 1 duplicate items'
    items = items_on(shopping_list.id)
    assert [(item.id, item.name, item.quantity) for item in items][0] == (first_id, 'Milk', '3')
    assert items[1].name == 'Fresh Milk'


def test_keeps_earliest_item_and_combines_quantities(make_list, make_item):
    shopping_list = make_list()
    first = make_item(shopping_list, 'Flour', '2 cups', auto_added=True, pending_confirmation=True)
    make_item(shopping_list, 'FLOUR', '1 cup')
    make_item(shopping_list, 'flour', 'a pinch')
    first_id = first.id

    merge_duplicate_items(shopping_list.id)

    items = items_on(shopping_list.id)
    assert len(items) == 1
    assert items[0].id == first_id
    assert items[0].quantity == '3 cups + a pinch'
    # Not every merged row was pending
    assert items[0].pending_confirmation is False


def test_completion_survives_only_when_all_complete(make_list, make_item):
    shopping_list = make_list()
    make_item(shopping_list, 'Eggs', '6', is_complete=True)
    make_item(shopping_list, 'eggs', '6')
    make_item(shopping_list, 'Salt', '1', is_complete=True)
    make_item(shopping_list, 'salt', '1', is_complete=True)

    merge_duplicate_items(shopping_list.id)

    by_name = {item.name: item for item in items_on(shopping_list.id)}
    assert by_name['Eggs'].is_complete is False
    assert by_name['Eggs'].quantity == '12'
    assert by_name['Salt'].is_complete is True
    shopping_list = db.session.get(ShoppingList, shopping_list.id)
    db.session.refresh(shopping_list)
    assert shopping_list.total_items == count_items(shopping_list.id) == 2
    assert shopping_list.completed_items == count_items(shopping_list.id, completed=True) == 1


def test_nothing_to_merge(make_list, make_item):
    shopping_list = make_list()
    make_item(shopping_list, 'Milk', '1')

    result = merge_duplicate_items(shopping_list.id)

    assert result['mergedItems'] == 0
    assert result['totalItems'] == 1


class BrokenEggsStore(ShoppingStore):
    def update_item(self, item, **fields):
        if item.normalized_key == 'eggs':
            raise QuantityError("quantity column rejected the value")
        return super().update_item(item, **fields)


def test_failing_group_is_reported(app, make_list, make_item):
    shopping_list = make_list()
    make_item(shopping_list, 'Eggs', '6')
    make_item(shopping_list, 'eggs', '6')
    make_item(shopping_list, 'Milk', '1')
    make_item(shopping_list, 'milk', '1')

    result = merge_duplicate_items(shopping_list.id, store=BrokenEggsStore())

    assert result['ok'] is False
    assert result['mergedItems'] == 1
    assert result['totalItems'] == 3
    assert result['errors'] == ['Error merging eggs: quantity column rejected the value']
    assert 'with 1 errors' in result['message']


def test_missing_list(app):
    with pytest.raises(NotFoundError):
        merge_duplicate_items(404)


def test_other_household(make_list):
    shopping_list = make_list(household_id='house-2')
    with pytest.raises(NotFoundError):
        merge_duplicate_items(shopping_list.id, household_id='house-1')


def test_database_error_in_one_group_keeps_the_others(app, make_list, make_item):
    shopping_list = make_list()
    make_item(shopping_list, 'Eggs', '6')
    make_item(shopping_list, 'eggs', '6')
    make_item(shopping_list, 'Milk', '1')
    make_item(shopping_list, 'milk', '1')

    result = merge_duplicate_items(shopping_list.id, store=ForeignKeyFailingStore('eggs'))

    assert 'error' not in result
    assert result['ok'] is False
    assert result['mergedItems'] == 1
    assert result['totalItems'] == 3
    assert result['errors'][0].startswith('Error merging eggs:')
    assert sorted((item.name, item.quantity) for item in items_on(shopping_list.id)) == [
        ('Eggs', '6'), ('Milk', '2'), ('eggs', '6'),
    ]
    shopping_list = db.session.get(ShoppingList, shopping_list.id)
    db.session.refresh(shopping_list)
    assert shopping_list.total_items == count_items(shopping_list.id) == 3
