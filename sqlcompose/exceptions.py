from typing import Any, Optional

__all__ = (
    "BindingError",
    "BindingTypeError",
    "CompositePrimaryKeyError",
    "DatabaseError",
    "ImproperConfigurationError",
    "MissingPrimaryKeyError",
    "NoRowsError",
    "NotFoundError",
    "SQLBuilderError",
    "SQLComposeError",
)


class SQLComposeError(Exception):
    """Base exception class from which all sqlcompose exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLComposeError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class SQLBuilderError(SQLComposeError):
    """Issues Building or Generating SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues building SQL statement."
        super().__init__(message)


class ImproperConfigurationError(SQLComposeError):
    """Improper Configuration error.

    Raised when a query needs a database handle (or another collaborator) that was never provided.
    """


class DatabaseError(SQLComposeError):
    """A failure reported by the underlying database driver."""


# -- Result binding errors --
class BindingError(SQLComposeError):
    """Base class for result binding errors."""


class BindingTypeError(BindingError, TypeError):
    """The destination cannot receive the result rows."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Unsupported binding destination."
        super().__init__(message)


class MissingPrimaryKeyError(BindingError):
    """A primary-key lookup was requested on a schema without a primary key."""

    schema_type: "Optional[type[Any]]"

    def __init__(self, schema_type: "Optional[type[Any]]" = None) -> None:
        name = schema_type.__name__ if schema_type is not None else "schema"
        super().__init__(f"{name} has no primary key field")
        self.schema_type = schema_type


class CompositePrimaryKeyError(BindingError):
    """A single key value was supplied for a composite primary key."""

    schema_type: "Optional[type[Any]]"

    def __init__(self, schema_type: "Optional[type[Any]]" = None, fields: "tuple[str, ...]" = ()) -> None:
        name = schema_type.__name__ if schema_type is not None else "schema"
        message = f"{name} has a composite primary key"
        if fields:
            message = f"{message} ({', '.join(fields)}); supply one value per key field"
        super().__init__(message)
        self.schema_type = schema_type


# -- Lookup errors --
class NotFoundError(SQLComposeError):
    """An identity does not exist."""


class NoRowsError(NotFoundError):
    """The statement returned no rows where one was required."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "No rows in result set."
        super().__init__(message)

