"""
Models Package

Exports all database models and the db instance for use throughout the application.
"""

from .base import db, utcnow

from .recipe import Recipe
from .shopping import ShoppingList, ShoppingItem

__all__ = [
    'db',
    'utcnow',
    'Recipe',
    'ShoppingList',
    'ShoppingItem',
]
