"""CONTAINS and FREETEXT full-text search for SQLAlchemy queries."""

from fulltextsearch.core.exceptions import (
    EmptyPredicateError,
    FullTextSearchError,
    InvalidArgumentError,
    InvalidPredicateTypeError,
    MissingPredicateError,
    UnsupportedSelectorError,
    UnsupportedSourceError,
)
from fulltextsearch.core.interceptor import FullTextInterceptor
from fulltextsearch.core.queryable import search_contains, search_freetext
from fulltextsearch.core.tags import SearchMode

__version__ = "0.1.0"

__all__ = [
    "search_contains",
    "search_freetext",
    "SearchMode",
    "FullTextInterceptor",
    # Exceptions
    "FullTextSearchError",
    "InvalidArgumentError",
    "MissingPredicateError",
    "EmptyPredicateError",
    "InvalidPredicateTypeError",
    "UnsupportedSelectorError",
    "UnsupportedSourceError",
]
