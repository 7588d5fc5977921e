"""
Ingredient Constants

Descriptive modifiers that are stripped from ingredient names before matching,
and the title of the list recipe ingredients land in by default.
"""

# Leading/trailing words that don't change what you buy ("fresh basil" == "basil")
NAME_MODIFIERS = (
    'fresh',
    'dried',
    'chopped',
    'diced',
    'minced',
    'ground',
    'whole',
    'canned',
    'frozen',
    'organic',
    'unsalted',
    'salted',
)

# Every household gets one of these, created on first recipe import
DEFAULT_LIST_TITLE = 'Groceries'
