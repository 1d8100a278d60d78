"""Resolve caller projections into full-text search targets."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Column, String, inspect, literal_column
from sqlalchemy.orm import ColumnProperty, QueryableAttribute
from sqlalchemy.sql.elements import ColumnElement

from fulltextsearch.core.exceptions import UnsupportedSelectorError, UnsupportedSourceError

WILDCARD = "*"


@dataclass(frozen=True)
class WildcardSelector:
    """Search every full-text indexed column of the row."""

    name: str = WILDCARD

    def expression(self) -> ColumnElement[str]:
        """Inline ``'*'`` literal used as the left side of the substring test."""
        return literal_column(f"'{WILDCARD}'", String)


@dataclass(frozen=True)
class FieldSelector:
    """Search a single column."""

    name: str
    column: Any = field(compare=False)

    def expression(self) -> ColumnElement[str]:
        return self.column


Selector = WildcardSelector | FieldSelector


def row_entity(source: Any) -> Any:
    """Get the mapped entity a query returns rows of.

    Args:
        source: A ``Select`` or ORM ``Query`` selecting one mapped entity.

    Returns:
        The mapped class or ``aliased()`` construct of the first selected element.

    Raises:
        UnsupportedSourceError: If the query's first element is not an entity.
    """
    descriptions = getattr(source, "column_descriptions", None)
    if not descriptions:
        raise UnsupportedSourceError(source)

    first = descriptions[0]
    entity = first.get("entity")
    # select(Article.title) reports Article as its entity too; require the
    # row itself to be the entity.
    if entity is None or first.get("expr") is not entity:
        raise UnsupportedSourceError(source)
    return entity


def resolve_selector(entity: Any, selector: Callable[[Any], Any]) -> Selector:
    """Call a selector against the row entity and classify what it returned.

    The selector may return the row entity itself or the literal ``"*"`` for a
    wildcard search, or one column attribute of the row for a field search.
    Columns must belong to the row itself; columns of other tables are not
    searched.

    Raises:
        UnsupportedSelectorError: For composites (tuples, lists), relationship
            attributes, expressions, columns of other entities or tables, or
            anything else that is not one column of the row.
    """
    if not callable(selector):
        raise UnsupportedSelectorError(selector)

    shape = selector(entity)

    if shape is entity:
        return WildcardSelector()
    if isinstance(shape, str):
        if shape == WILDCARD:
            return WildcardSelector()
        raise UnsupportedSelectorError(shape)

    if isinstance(shape, QueryableAttribute):
        prop = shape.property
        if not isinstance(prop, ColumnProperty) or len(prop.columns) != 1:
            raise UnsupportedSelectorError(shape)
        if not _belongs_to(shape.parent, entity):
            raise UnsupportedSelectorError(shape)
        return FieldSelector(name=shape.key, column=shape)

    if isinstance(shape, Column) and _owns_table(entity, shape.table):
        return FieldSelector(name=shape.key, column=shape)

    raise UnsupportedSelectorError(shape)


def _belongs_to(parent: Any, entity: Any) -> bool:
    """Check that an attribute's owning mapper or alias is the searched row."""
    insp = inspect(entity)
    if parent is insp:
        return True
    # Attributes inherited from a base class are still columns of the row.
    return not insp.is_aliased_class and parent.is_mapper and insp.isa(parent)


def _owns_table(entity: Any, table: Any) -> bool:
    """Check that a Core column's table is mapped by the (unaliased) row entity."""
    insp = inspect(entity)
    if insp.is_aliased_class:
        return False
    return any(table is mapped for mapped in insp.tables)
