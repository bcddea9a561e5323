from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from sqlcompose import Database

here = Path(__file__).parent
root_path = here.parent


class FakeRows:
    """In-memory result set."""

    def __init__(self, columns: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
        self._columns = tuple(columns)
        self._rows = list(rows)
        self.closed = False

    @property
    def columns(self) -> Sequence[str]:
        return self._columns

    def fetchone(self) -> tuple[Any, ...] | None:
        return self._rows.pop(0) if self._rows else None

    def fetchall(self) -> list[tuple[Any, ...]]:
        rows, self._rows = self._rows, []
        return rows

    def close(self) -> None:
        self.closed = True


@dataclass
class FakeDriver:
    """Driver that records statements and answers every query with the same rows."""

    columns: Sequence[str] = ()
    rows: list[tuple[Any, ...]] = field(default_factory=list)
    executed: list[tuple[str, dict[str, Any]]] = field(default_factory=list)
    results: list[FakeRows] = field(default_factory=list)
    closed: bool = False

    def execute(self, sql: str, parameters: Any) -> FakeRows:
        self.executed.append((sql, dict(parameters)))
        result = FakeRows(self.columns, list(self.rows))
        self.results.append(result)
        return result

    def execute_no_result(self, sql: str, parameters: Any) -> None:
        self.executed.append((sql, dict(parameters)))

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_driver() -> FakeDriver:
    return FakeDriver(columns=("id", "name"), rows=[(1, "alice"), (2, "bob")])


@pytest.fixture
def database(fake_driver: FakeDriver) -> Database:
    return Database(fake_driver)
