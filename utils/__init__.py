# Utility modules for the shopping list service
from .errors import (
    ShoppingError, NotFoundError, InvalidItemError,
    QuantityError, InvalidActionError
)
from .sanitizer import sanitize_item_name, sanitize_quantity_text
