"""
Shopping Store

Row-level access to recipes, shopping lists and shopping items. Services
go through a ShoppingStore instead of the session directly so the engine
only depends on plain CRUD.

Nothing here commits except commit(); callers decide when a batch is done.
"""

from models import db, Recipe, ShoppingList, ShoppingItem

# Fields that can fail validation are set first so a rejected update leaves the row untouched
_VALIDATED_FIELDS = ('name', 'quantity')


class ShoppingStore:
    """CRUD over the shopping tables through a SQLAlchemy session."""

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    # Recipes

    def get_recipe(self, recipe_id):
        return self.session.get(Recipe, recipe_id)

    # Lists

    def get_list(self, list_id, lock=False):
        """
        Load a shopping list by id.

        With lock=True the row is selected FOR UPDATE, which serializes
        concurrent imports/merges on the same list on databases that
        support row locks (SQLite ignores it; its writes are serialized anyway).
        """
        query = db.select(ShoppingList).filter_by(id=list_id)
        if lock:
            query = query.with_for_update()
        return self.session.execute(query).scalar_one_or_none()

    def find_list(self, household_id, title):
        query = db.select(ShoppingList).filter_by(household_id=household_id, title=title)
        return self.session.execute(query).scalar_one_or_none()

    def create_list(self, household_id, title, created_by=None):
        shopping_list = ShoppingList(household_id=household_id, title=title, created_by=created_by)
        self.session.add(shopping_list)
        self.session.flush()
        return shopping_list

    def lists_for_household(self, household_id):
        query = db.select(ShoppingList).filter_by(household_id=household_id).order_by(ShoppingList.id)
        return list(self.session.execute(query).scalars())

    # Items

    def items_for_list(self, list_id, include_complete=True):
        """Items on a list, oldest first."""
        query = db.select(ShoppingItem).filter_by(list_id=list_id)
        if not include_complete:
            query = query.filter_by(is_complete=False)
        query = query.order_by(ShoppingItem.created_at, ShoppingItem.id)
        return list(self.session.execute(query).scalars())

    def get_items(self, item_ids, pending_only=False):
        """Items by id, oldest first. pending_only keeps auto-added items awaiting confirmation."""
        if not item_ids:
            return []
        query = db.select(ShoppingItem).where(ShoppingItem.id.in_(item_ids))
        if pending_only:
            query = query.filter_by(auto_added=True, pending_confirmation=True)
        query = query.order_by(ShoppingItem.created_at, ShoppingItem.id)
        return list(self.session.execute(query).scalars())

    def pending_items(self, list_ids):
        """Incomplete auto-added items awaiting confirmation, newest first."""
        if not list_ids:
            return []
        query = (
            db.select(ShoppingItem)
            .where(ShoppingItem.list_id.in_(list_ids))
            .filter_by(auto_added=True, pending_confirmation=True, is_complete=False)
            .order_by(ShoppingItem.auto_added_at.desc(), ShoppingItem.id.desc())
        )
        return list(self.session.execute(query).scalars())

    def insert_item(self, **fields):
        """Create an item; raises InvalidItemError before anything is added."""
        item = ShoppingItem(**fields)
        self.session.add(item)
        return item

    def update_item(self, item, **fields):
        """Set fields on an item; raises InvalidItemError before anything changes."""
        for key in _VALIDATED_FIELDS:
            if key in fields:
                setattr(item, key, fields.pop(key))
        for key, value in fields.items():
            setattr(item, key, value)
        return item

    def delete_items(self, items):
        count = 0
        for item in items:
            self.session.delete(item)
            count += 1
        return count

    def count_items(self, list_id, completed=None):
        query = db.select(db.func.count(ShoppingItem.id)).filter_by(list_id=list_id)
        if completed is not None:
            query = query.filter_by(is_complete=completed)
        return self.session.execute(query).scalar_one()

    # Transactions

    def savepoint(self):
        """
        Nested transaction for one unit of a batch.

        Use as a context manager: leaving it normally releases the savepoint,
        an exception rolls back only what happened inside it.
        """
        return self.session.begin_nested()

    def flush(self):
        self.session.flush()

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()
