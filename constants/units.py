"""
Unit Constants

Unit spellings recognised when parsing ingredient text, mapped to a canonical
unit so "2 cups" and "1 cup" can be added together.
"""

# Unit mappings for ingredient parsing (lowercase input -> standard unit)
UNIT_MAPPINGS = {
    'pound': 'LB', 'pounds': 'LB', 'lb': 'LB', 'lbs': 'LB',
    'ounce': 'OZ', 'ounces': 'OZ', 'oz': 'OZ',
    'cup': 'CUP', 'cups': 'CUP', 'c': 'CUP',
    'tablespoon': 'TBSP', 'tablespoons': 'TBSP', 'tbsp': 'TBSP', 'tbs': 'TBSP', 'tb': 'TBSP',
    'teaspoon': 'TSP', 'teaspoons': 'TSP', 'tsp': 'TSP', 'ts': 'TSP',
    'gram': 'G', 'grams': 'G', 'g': 'G',
    'kilogram': 'KG', 'kilograms': 'KG', 'kg': 'KG',
    'milliliter': 'ML', 'milliliters': 'ML', 'ml': 'ML',
    'liter': 'L', 'liters': 'L', 'l': 'L',
    'clove': 'CLOVE', 'cloves': 'CLOVE',
    'head': 'HEAD', 'heads': 'HEAD',
    'slice': 'SLICE', 'slices': 'SLICE',
    'piece': 'PIECE', 'pieces': 'PIECE',
    'can': 'CAN', 'cans': 'CAN',
    'package': 'PKG', 'packages': 'PKG', 'pkg': 'PKG',
    'bunch': 'BUNCH', 'bunches': 'BUNCH',
    'stalk': 'STALK', 'stalks': 'STALK',
    'sprig': 'SPRIG', 'sprigs': 'SPRIG',
    'pinch': 'PINCH', 'pinches': 'PINCH',
    'dash': 'DASH', 'dashes': 'DASH',
}

# Unicode fraction characters mapping
UNICODE_FRACTIONS = {
    '\u00bd': 0.5,    # ½
    '\u2153': 1/3,    # ⅓
    '\u2154': 2/3,    # ⅔
    '\u00bc': 0.25,   # ¼
    '\u00be': 0.75,   # ¾
    '\u2155': 0.2,    # ⅕
    '\u2156': 0.4,    # ⅖
    '\u2157': 0.6,    # ⅗
    '\u2158': 0.8,    # ⅘
    '\u2159': 1/6,    # ⅙
    '\u215a': 5/6,    # ⅚
    '\u215b': 0.125,  # ⅛
    '\u215c': 0.375,  # ⅜
    '\u215d': 0.625,  # ⅝
    '\u215e': 0.875,  # ⅞
}
