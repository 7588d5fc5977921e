"""
Shopping Models

Contains the ShoppingList and ShoppingItem models. Item counts on a list
are derived data: only services.shopping.refresh_list_counts writes them.
"""

from sqlalchemy.orm import validates

from constants import MAX_LENGTHS
from utils.errors import InvalidItemError, QuantityError
from utils.sanitizer import sanitize_quantity_text
from .base import db, utcnow


def _isoformat(value):
    return value.isoformat() if value else None


class ShoppingList(db.Model):
    """Named shopping list belonging to a household."""
    __table_args__ = (
        db.UniqueConstraint('household_id', 'title', name='uq_shopping_list_household_title'),
    )

    id = db.Column(db.Integer, primary_key=True)
    household_id = db.Column(db.String(64), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    created_by = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    # Cached from shopping_item COUNT queries, never incremented in place
    total_items = db.Column(db.Integer, default=0, nullable=False)
    completed_items = db.Column(db.Integer, default=0, nullable=False)
    items = db.relationship(
        'ShoppingItem', backref='shopping_list', lazy=True,
        cascade='all, delete-orphan',
        order_by=lambda: [ShoppingItem.created_at, ShoppingItem.id],
    )

    def to_dict(self, include_items=False):
        data = {
            'id': self.id,
            'householdId': self.household_id,
            'title': self.title,
            'createdBy': self.created_by,
            'createdAt': _isoformat(self.created_at),
            'totalItems': self.total_items,
            'completedItems': self.completed_items,
        }
        if include_items:
            data['items'] = [item.to_dict() for item in self.items]
        return data


class ShoppingItem(db.Model):
    """Shopping list line with recipe provenance and confirmation state."""
    __table_args__ = (
        db.CheckConstraint(
            'NOT pending_confirmation OR auto_added',
            name='ck_shopping_item_pending_requires_auto_added',
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    list_id = db.Column(db.Integer, db.ForeignKey('shopping_list.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    # Loose text: "2", "2 cups", "2 cups + 1 tbsp"
    quantity = db.Column(db.String(50), default='1', nullable=False)
    is_complete = db.Column(db.Boolean, default=False, nullable=False, index=True)
    auto_added = db.Column(db.Boolean, default=False, nullable=False)
    pending_confirmation = db.Column(db.Boolean, default=False, nullable=False, index=True)
    # Back-reference only; the item outlives its recipe
    source_recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='SET NULL'), nullable=True)
    source_recipe = db.relationship('Recipe')
    auto_added_at = db.Column(db.DateTime, nullable=True)
    created_by = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    @validates('name')
    def validate_name(self, key, value):
        if value is None or not str(value).strip():
            raise InvalidItemError("Shopping item name cannot be empty")
        value = str(value).strip()
        if len(value) > MAX_LENGTHS['item_name']:
            raise InvalidItemError(f"Shopping item name longer than {MAX_LENGTHS['item_name']} characters")
        return value

    @validates('quantity')
    def validate_quantity(self, key, value):
        text = sanitize_quantity_text(value)
        if text is None:
            raise QuantityError(f"Quantity {value!r} is not a finite number")
        if len(text) > MAX_LENGTHS['quantity']:
            raise QuantityError(f"Quantity {text[:20]!r}... longer than {MAX_LENGTHS['quantity']} characters")
        return text

    @property
    def normalized_key(self):
        """Lexical grouping key: case-insensitive, trimmed."""
        return (self.name or '').strip().lower()

    def to_dict(self):
        return {
            'id': self.id,
            'listId': self.list_id,
            'name': self.name,
            'quantity': self.quantity,
            'isComplete': bool(self.is_complete),
            'autoAdded': bool(self.auto_added),
            'pendingConfirmation': bool(self.pending_confirmation),
            'sourceRecipeId': self.source_recipe_id,
            'autoAddedAt': _isoformat(self.auto_added_at),
            'createdBy': self.created_by,
            'createdAt': _isoformat(self.created_at),
        }
