from __future__ import annotations

from collections.abc import Generator

import pytest

from sqlcompose import Database
from sqlcompose.adapters.sqlite import SqliteConfig


@pytest.fixture
def sqlite_database() -> Generator[Database, None, None]:
    """In-memory SQLite database seeded with a few users."""
    config = SqliteConfig()
    with config.provide_database() as db:
        db.execute("CREATE TABLE user (id INTEGER PRIMARY KEY, name TEXT NOT NULL, age INTEGER, status INTEGER)")
        db.execute("CREATE TABLE membership (user_id INTEGER, team_id INTEGER, role TEXT, PRIMARY KEY (user_id, team_id))")
        for row in (
            {"id": 1, "name": "alice", "age": 31, "status": 1},
            {"id": 2, "name": "bob", "age": 25, "status": 1},
            {"id": 3, "name": "carol", "age": 40, "status": 0},
        ):
            db.execute("INSERT INTO user (id, name, age, status) VALUES (:id, :name, :age, :status)", row)
        db.execute("INSERT INTO membership (user_id, team_id, role) VALUES (1, 10, 'owner'), (2, 10, 'member')")
        yield db
