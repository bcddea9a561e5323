"""Integration tests running composed queries against SQLite."""

import logging
from dataclasses import dataclass
from typing import Optional

import msgspec
import pytest

from sqlcompose import (
    BindingTypeError,
    CompositePrimaryKeyError,
    Database,
    DatabaseError,
    MissingPrimaryKeyError,
    NoRowsError,
    new_exp,
)
from sqlcompose.adapters.sqlite import SqliteConfig, SqliteRows


@dataclass
class User:
    id: int
    name: str
    age: Optional[int] = None
    status: Optional[int] = None


class UserStruct(msgspec.Struct):
    id: int
    name: str


@dataclass
class Membership:
    __primary_key__ = ("user_id", "team_id")

    user_id: int
    team_id: int
    role: str


@dataclass
class Audit:
    message: str


def test_config_defaults() -> None:
    config = SqliteConfig()

    assert config.connection_config == {"database": ":memory:"}
    assert SqliteConfig(connection_config={"database": "file:test?mode=memory"}).connection_config["uri"] is True


def test_sqlite_quoting(sqlite_database: Database) -> None:
    assert sqlite_database.select("id").from_("user").to_sql() == 'SELECT "id" FROM "user"'


def test_one_into_schema(sqlite_database: Database) -> None:
    """Test a single row binds into a dataclass."""
    user = sqlite_database.select().from_("user").where({"id": 2}).one(User)

    assert user == User(id=2, name="bob", age=25, status=1)


def test_one_into_msgspec_struct(sqlite_database: Database) -> None:
    user = sqlite_database.select("id", "name").from_("user").where({"id": 1}).one(UserStruct)

    assert user == UserStruct(id=1, name="alice")


def test_one_scalar(sqlite_database: Database) -> None:
    count = sqlite_database.select("COUNT(*)").from_("user").where({"status": 1}).one(int)

    assert count == 2


def test_one_without_from_uses_table_name(sqlite_database: Database) -> None:
    """Test the schema type supplies the table name."""
    user = sqlite_database.select().where(new_exp("name = :name", {"name": "carol"})).one(User)

    assert user.id == 3


def test_one_no_rows(sqlite_database: Database) -> None:
    with pytest.raises(NoRowsError):
        sqlite_database.select().from_("user").where({"id": 404}).one(User)


def test_all_into_typed_list(sqlite_database: Database) -> None:
    """Test all rows bind in order."""
    users = (
        sqlite_database.select("id", "name")
        .from_("user")
        .where({"status": 1})
        .order_by("id DESC")
        .all(list[User])
    )

    assert users == [User(id=2, name="bob"), User(id=1, name="alice")]


def test_all_into_list_of_dicts(sqlite_database: Database) -> None:
    rows: list = []

    sqlite_database.select("id").from_("user").where({"id": [1, 3]}).order_by("id").all(rows)

    assert rows == [{"id": 1}, {"id": 3}]


def test_all_with_empty_in(sqlite_database: Database) -> None:
    """Test an empty IN list matches nothing."""
    assert sqlite_database.select().from_("user").where({"id": []}).all(User) == []


def test_column(sqlite_database: Database) -> None:
    names = sqlite_database.select("name").from_("user").order_by("name").column()

    assert names == ["alice", "bob", "carol"]


def test_row_and_rows(sqlite_database: Database) -> None:
    query = sqlite_database.select("id", "name").from_("user").order_by("id")

    assert query.row() == (1, "alice")
    with query.rows() as rows:
        assert isinstance(rows, SqliteRows)
        assert rows.columns == ("id", "name")
        assert len(rows.fetchall()) == 3


def test_model(sqlite_database: Database) -> None:
    """Test loading by primary key."""
    assert sqlite_database.select().model(3, User) == User(id=3, name="carol", age=40, status=0)

    member = sqlite_database.select().model({"user_id": 2, "team_id": 10}, Membership)
    assert member.role == "member"


def test_model_errors(sqlite_database: Database) -> None:
    with pytest.raises(NoRowsError):
        sqlite_database.select().model(99, User)
    with pytest.raises(CompositePrimaryKeyError):
        sqlite_database.select().model(1, Membership)
    with pytest.raises(MissingPrimaryKeyError):
        sqlite_database.select().model(1, Audit)
    with pytest.raises(BindingTypeError):
        sqlite_database.select().model(1, [])


def test_bind_type_mismatch(sqlite_database: Database) -> None:
    """Test a multi-column row cannot bind to a scalar."""
    with pytest.raises(BindingTypeError):
        sqlite_database.select("id", "name").from_("user").one(int)


def test_driver_errors_are_wrapped(sqlite_database: Database) -> None:
    with pytest.raises(DatabaseError):
        sqlite_database.select().from_("missing_table").all(dict)


def test_hook_substitutes_result(sqlite_database: Database) -> None:
    """Test an exec hook can serve a cached value."""
    cache = {}

    def cached(query, operation):
        key = query.to_sql()
        if key not in cache:
            cache[key] = operation()
        return cache[key]

    query = sqlite_database.select("name").from_("user").order_by("id").with_exec_hook(cached)

    assert query.column() == ["alice", "bob", "carol"]
    sqlite_database.execute("DELETE FROM user")
    assert query.column() == ["alice", "bob", "carol"]


def test_config_dialect_override() -> None:
    """Test a config can quote for another dialect."""
    with SqliteConfig(dialect="mysql").provide_database() as db:
        assert db.select("id").from_("t").to_sql() == "SELECT `id` FROM `t`"


def test_provide_connection() -> None:
    """Test raw connections are opened and closed by the config."""
    with SqliteConfig().provide_connection() as connection:
        assert connection.execute("SELECT 1").fetchone() == (1,)


def test_statements_are_logged(sqlite_database: Database, caplog: pytest.LogCaptureFixture) -> None:
    """Test the driver logs each statement with its parameter count."""
    with caplog.at_level(logging.DEBUG, logger="sqlcompose.adapters.sqlite"):
        sqlite_database.select("id").from_("user").where({"id": [1, 2]}).column()

    record = caplog.records[-1]
    assert record.getMessage() == "Executing SQL"
    assert record.extra_fields == {"sql": 'SELECT "id" FROM "user" WHERE "id" IN (:p0, :p1)', "parameter_count": 2}
