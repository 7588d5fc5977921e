"""
Database Base Module

Creates the SQLAlchemy database instance that all models inherit from.
This is separate to avoid circular imports.
"""

import sqlite3
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

# Create the SQLAlchemy instance
# This will be initialized with the Flask app in app.py
db = SQLAlchemy()


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable SQLite foreign key enforcement (ON DELETE SET NULL / CASCADE)."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        # SQLAlchemy emits BEGIN itself (see below) so SAVEPOINTs nest correctly
        dbapi_connection.isolation_level = None


@event.listens_for(Engine, "begin")
def begin_sqlite_transaction(conn):
    """Start SQLite transactions explicitly; pysqlite's implicit BEGIN skips SAVEPOINT."""
    if conn.dialect.name == 'sqlite':
        conn.exec_driver_sql("BEGIN")


def utcnow():
    """Naive UTC timestamp, the form SQLite DateTime columns round-trip."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
