"""sqlcompose: fluent SELECT building with pluggable execution hooks and result binding."""

from sqlcompose import adapters, base, builder, driver, exceptions, expressions, hooks, typing, utils
from sqlcompose.__metadata__ import __version__
from sqlcompose.base import Database
from sqlcompose.builder import JoinType, Query, SelectQuery, select
from sqlcompose.config import DatabaseConfig
from sqlcompose.dialect import IdentifierQuoter
from sqlcompose.exceptions import (
    BindingError,
    BindingTypeError,
    CompositePrimaryKeyError,
    DatabaseError,
    ImproperConfigurationError,
    MissingPrimaryKeyError,
    NoRowsError,
    NotFoundError,
    SQLBuilderError,
    SQLComposeError,
)
from sqlcompose.expressions import CompoundExp, HashExp, RawExp, and_, new_exp, or_
from sqlcompose.hooks import HookChain
from sqlcompose.parameters import ParameterSet

__all__ = (
    "BindingError",
    "BindingTypeError",
    "CompositePrimaryKeyError",
    "CompoundExp",
    "Database",
    "DatabaseConfig",
    "DatabaseError",
    "HashExp",
    "HookChain",
    "IdentifierQuoter",
    "ImproperConfigurationError",
    "JoinType",
    "MissingPrimaryKeyError",
    "NoRowsError",
    "NotFoundError",
    "ParameterSet",
    "Query",
    "RawExp",
    "SQLBuilderError",
    "SQLComposeError",
    "SelectQuery",
    "__version__",
    "adapters",
    "and_",
    "base",
    "builder",
    "driver",
    "exceptions",
    "expressions",
    "hooks",
    "new_exp",
    "or_",
    "select",
    "typing",
    "utils",
)
