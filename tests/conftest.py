"""
Shared pytest fixtures: an app on in-memory SQLite plus row factories.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app  # noqa: E402
from models import db, Recipe, ShoppingList, ShoppingItem  # noqa: E402
from services.store import ShoppingStore  # noqa: E402


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return ShoppingStore()


@pytest.fixture
def make_recipe(app):
    def _make(ingredients=None, title='Pasta', household_id='house-1'):
        recipe = Recipe(household_id=household_id, title=title, ingredients=ingredients)
        db.session.add(recipe)
        db.session.commit()
        return recipe
    return _make


@pytest.fixture
def make_list(app):
    def _make(title='Groceries', household_id='house-1'):
        shopping_list = ShoppingList(household_id=household_id, title=title)
        db.session.add(shopping_list)
        db.session.commit()
        return shopping_list
    return _make


@pytest.fixture
def make_item(app):
    def _make(shopping_list, name, quantity='1', **fields):
        item = ShoppingItem(list_id=shopping_list.id, name=name, quantity=quantity, **fields)
        db.session.add(item)
        db.session.commit()
        return item
    return _make


def count_items(list_id, completed=None):
    """Independent COUNT query, bypassing the services."""
    query = db.select(db.func.count()).select_from(ShoppingItem).where(ShoppingItem.list_id == list_id)
    if completed is not None:
        query = query.where(ShoppingItem.is_complete == completed)
    return db.session.execute(query).scalar_one()


def items_on(list_id):
    query = db.select(ShoppingItem).where(ShoppingItem.list_id == list_id).order_by(ShoppingItem.id)
    return list(db.session.execute(query).scalars())


MISSING_RECIPE_ID = 987654


class ForeignKeyFailingStore(ShoppingStore):
    """Store whose writes to one item name point it at a recipe that doesn't exist."""

    def __init__(self, bad_key):
        super().__init__()
        self.bad_key = bad_key

    def _break(self, item):
        if item.normalized_key == self.bad_key:
            item.source_recipe_id = MISSING_RECIPE_ID
        return item

    def insert_item(self, **fields):
        return self._break(super().insert_item(**fields))

    def update_item(self, item, **fields):
        return self._break(super().update_item(item, **fields))
