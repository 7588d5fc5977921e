"""
Shopping Errors

Exceptions raised by the models and services. The API layer turns these
into JSON error responses; batch operations catch the per-item ones and
keep going.
"""


class ShoppingError(Exception):
    """Base class for shopping list errors."""
    pass


class NotFoundError(ShoppingError):
    """Raised when a recipe or shopping list does not exist (or isn't visible)."""

    def __init__(self, kind, identifier):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} {identifier} not found")


class InvalidItemError(ShoppingError, ValueError):
    """Raised when a shopping item field can't be stored."""
    pass


class QuantityError(InvalidItemError):
    """Raised when a quantity value doesn't fit the quantity column."""
    pass


class InvalidActionError(ShoppingError, ValueError):
    """Raised for an unknown confirmation action."""
    pass
