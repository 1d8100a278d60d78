"""Full-text search filters for SQLAlchemy queries.

SQLAlchemy has no ``CONTAINS`` / ``FREETEXT`` operator, so these helpers build
an ordinary substring test (``column LIKE '%' + :param + '%'``) whose operand
is a tagged payload. ``FullTextInterceptor`` finds the payload in the
generated SQL and replaces the ``LIKE`` clause with the native predicate.

Usage:
    stmt = search_contains(select(Article), lambda a: a.title, '"quick*"')
    stmt = search_freetext(select(Article), lambda a: a, "quick fox")
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from fulltextsearch.core import tags
from fulltextsearch.core.exceptions import (
    EmptyPredicateError,
    InvalidPredicateTypeError,
    MissingPredicateError,
)
from fulltextsearch.core.selectors import resolve_selector, row_entity
from fulltextsearch.core.tags import SearchMode

logger = logging.getLogger(__name__)

QueryT = TypeVar("QueryT")


def search_contains(
    source: QueryT,
    selector: Callable[[Any], Any],
    predicate: str,
) -> QueryT:
    """Filter a query with a CONTAINS full-text search.

    Args:
        source: ``Select`` or ORM ``Query`` over a mapped entity.
        selector: Callable receiving the entity and returning the column to
            search, or the entity itself (or ``"*"``) for a wildcard search.
        predicate: CONTAINS search condition, passed through verbatim.

    Returns:
        A new query of the same kind with the search applied.

    Raises:
        MissingPredicateError: If ``predicate`` is None.
        InvalidPredicateTypeError: If ``predicate`` is not a string.
        EmptyPredicateError: If ``predicate`` is empty.
        UnsupportedSourceError: If ``source`` does not select a mapped entity.
        UnsupportedSelectorError: If ``selector`` does not return one column of the row
            or the row itself.
    """
    return _full_text_search(source, selector, predicate, SearchMode.CONTAINS)


def search_freetext(
    source: QueryT,
    selector: Callable[[Any], Any],
    predicate: str,
) -> QueryT:
    """Filter a query with a FREETEXT full-text search.

    Same arguments and errors as ``search_contains``.
    """
    return _full_text_search(source, selector, predicate, SearchMode.FREETEXT)


def _validate_predicate(predicate: Any) -> str:
    if predicate is None:
        raise MissingPredicateError()
    if not isinstance(predicate, str):
        raise InvalidPredicateTypeError(predicate)
    if predicate == "":
        raise EmptyPredicateError()
    return predicate


def _full_text_search(
    source: QueryT,
    selector: Callable[[Any], Any],
    predicate: Any,
    mode: SearchMode,
) -> QueryT:
    predicate = _validate_predicate(predicate)

    target = resolve_selector(row_entity(source), selector)
    payload = tags.encode(mode, predicate)

    # Plain contains() without autoescape keeps the payload byte-for-byte.
    condition = target.expression().contains(payload)

    logger.debug(f"Built {mode.function} search on {target.name}")
    return source.where(condition)
