"""
Validation Constants

Field limits and the whitelisted values accepted from API callers.
"""

# Maximum field lengths (match the column sizes in models/shopping.py)
MAX_LENGTHS = {
    'item_name': 200,
    'quantity': 50,
    'list_title': 200,
    'recipe_title': 200,
    'user_id': 64,
}

# Confirmation workflow actions ('remove' is the older spelling of 'reject')
CONFIRM_ACTION = 'confirm'
REJECT_ACTIONS = {'reject', 'remove'}
VALID_CONFIRM_ACTIONS = {CONFIRM_ACTION} | REJECT_ACTIONS

# What the quantity parser returns when no amount can be read
ON_UNPARSABLE_NULL = 'null'
ON_UNPARSABLE_DEFAULT_ONE = 'default_one'
VALID_ON_UNPARSABLE = {ON_UNPARSABLE_NULL, ON_UNPARSABLE_DEFAULT_ONE}

# Stored when a quantity can't be written as-is
DEFAULT_QUANTITY = '1'
