"""
Application Configuration

Centralizes all Flask and application configuration settings.
"""

import os

from constants import DEFAULT_LIST_TITLE, NAME_MODIFIERS, ON_UNPARSABLE_DEFAULT_ONE

# Base directory of the application
BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _name_modifiers():
    """Modifier words from NAME_MODIFIERS (comma-separated), else the built-in list."""
    raw = os.environ.get('NAME_MODIFIERS', '')
    words = tuple(word.strip().lower() for word in raw.split(',') if word.strip())
    return words or NAME_MODIFIERS


class Config:
    """Base configuration class."""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-only-change-in-production')

    # SQLAlchemy settings
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///' + os.path.join(BASE_DIR, 'shopping.db'))
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Shopping list settings
    DEFAULT_LIST_TITLE = os.environ.get('DEFAULT_SHOPPING_LIST', DEFAULT_LIST_TITLE)
    NAME_MODIFIERS = _name_modifiers()
    QUANTITY_FALLBACK = ON_UNPARSABLE_DEFAULT_ONE

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    DEFAULT_LIST_TITLE = DEFAULT_LIST_TITLE
    NAME_MODIFIERS = NAME_MODIFIERS
    LOG_LEVEL = 'WARNING'


# Configuration dictionary for easy access
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(env=None):
    """Get configuration based on environment."""
    if env is None:
        env = os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
