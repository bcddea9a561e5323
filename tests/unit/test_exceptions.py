from sqlcompose.exceptions import (
    BindingError,
    BindingTypeError,
    CompositePrimaryKeyError,
    DatabaseError,
    MissingPrimaryKeyError,
    NoRowsError,
    NotFoundError,
    SQLBuilderError,
    SQLComposeError,
)


class Thing:
    pass


def test_exception_hierarchy():
    """Test exception classes inherit correctly."""
    assert issubclass(BindingTypeError, BindingError)
    assert issubclass(BindingTypeError, TypeError)
    assert issubclass(MissingPrimaryKeyError, BindingError)
    assert issubclass(CompositePrimaryKeyError, BindingError)
    assert issubclass(NoRowsError, NotFoundError)
    for error in (BindingError, NotFoundError, SQLBuilderError, DatabaseError):
        assert issubclass(error, SQLComposeError)


def test_default_messages():
    """Test exceptions carry useful default messages."""
    assert str(NoRowsError()) == "No rows in result set."
    assert str(MissingPrimaryKeyError(Thing)) == "Thing has no primary key field"
    assert "a, b" in str(CompositePrimaryKeyError(Thing, ("a", "b")))
    assert repr(SQLBuilderError("bad")) == "SQLBuilderError - bad"

