"""Unit tests for binding result rows into destinations."""

from dataclasses import dataclass

import pytest

from sqlcompose.driver import bind_all, bind_one, row_to_dict, scan_column
from sqlcompose.exceptions import BindingTypeError, NoRowsError
from tests.conftest import FakeRows


@dataclass
class User:
    id: int
    name: str


def user_rows() -> FakeRows:
    return FakeRows(("id", "name"), [(1, "alice"), (2, "bob")])


def test_row_to_dict() -> None:
    assert row_to_dict(("a", "b"), (1, 2)) == {"a": 1, "b": 2}


def test_bind_one_into_schema_type() -> None:
    """Test the first row becomes a new schema instance."""
    assert bind_one(user_rows(), User) == User(id=1, name="alice")


def test_bind_one_into_existing_instance() -> None:
    """Test a schema instance is filled in place."""
    user = User(id=0, name="")

    result = bind_one(user_rows(), user)

    assert result is user
    assert user == User(id=1, name="alice")


def test_bind_one_into_dict_and_tuple() -> None:
    """Test dict and tuple destinations."""
    target: dict = {}

    assert bind_one(user_rows(), target) is target
    assert target == {"id": 1, "name": "alice"}
    assert bind_one(user_rows(), dict) == {"id": 1, "name": "alice"}
    assert bind_one(user_rows(), tuple) == (1, "alice")


def test_bind_one_scalar() -> None:
    """Test single-column rows bind to scalar types."""
    assert bind_one(FakeRows(("total",), [("5",)]), int) == 5


def test_bind_one_scalar_requires_single_column() -> None:
    """Test multi-column rows cannot bind to a scalar."""
    with pytest.raises(BindingTypeError):
        bind_one(user_rows(), int)


def test_bind_one_none_destination_fetches_nothing() -> None:
    rows = user_rows()

    assert bind_one(rows, None) is None
    assert len(rows.fetchall()) == 2


def test_bind_one_no_rows() -> None:
    """Test an empty result is reported as no rows."""
    with pytest.raises(NoRowsError):
        bind_one(FakeRows(("id", "name"), []), User)


@pytest.mark.parametrize("destination", [[], list[User], 5, "users", object()])
def test_bind_one_rejects_invalid_destinations(destination: object) -> None:
    """Test destinations that cannot hold a single row."""
    with pytest.raises(BindingTypeError):
        bind_one(user_rows(), destination)


def test_bind_all_list_instance_gets_dicts() -> None:
    """Test a list destination is replaced with one dict per row."""
    target = [{"stale": True}]

    result = bind_all(user_rows(), target)

    assert result is target
    assert target == [{"id": 1, "name": "alice"}, {"id": 2, "name": "bob"}]


def test_bind_all_typed() -> None:
    """Test list[T] and bare T destinations return new lists."""
    expected = [User(id=1, name="alice"), User(id=2, name="bob")]

    assert bind_all(user_rows(), list[User]) == expected
    assert bind_all(user_rows(), User) == expected
    assert bind_all(user_rows(), tuple) == [(1, "alice"), (2, "bob")]


def test_bind_all_empty_result() -> None:
    """Test no rows yields an empty list, not an error."""
    assert bind_all(FakeRows(("id", "name"), []), list[User]) == []


def test_bind_all_rejects_invalid_destination() -> None:
    with pytest.raises(BindingTypeError):
        bind_all(user_rows(), {})
    with pytest.raises(BindingTypeError):
        bind_all(user_rows(), list[int])


def test_scan_column() -> None:
    """Test the first column of each row is collected in order."""
    target = ["old"]

    assert scan_column(user_rows()) == [1, 2]
    assert scan_column(user_rows(), target) is target
    assert target == [1, 2]


def test_scan_column_rejects_non_list() -> None:
    with pytest.raises(BindingTypeError):
        scan_column(user_rows(), {})  # type: ignore[arg-type]
