"""
Recipe Models

Recipes as imported from outside sources. The ingredient array is stored
exactly as received: a mix of structured records and free-text lines.
"""

from .base import db, utcnow


class Recipe(db.Model):
    """Recipe owned by a household, with its raw ingredient list."""
    id = db.Column(db.Integer, primary_key=True)
    household_id = db.Column(db.String(64), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    # e.g. [{"name": "Flour", "amount": 2, "unit": "cups"}, "1 tsp salt"]
    ingredients = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)
