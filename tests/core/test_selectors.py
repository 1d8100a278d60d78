"""Tests for selector resolution."""

import pytest
from sqlalchemy import func, literal_column, select
from sqlalchemy.orm import Session, aliased

from fulltextsearch.core.exceptions import UnsupportedSelectorError, UnsupportedSourceError
from fulltextsearch.core.selectors import (
    WILDCARD,
    FieldSelector,
    WildcardSelector,
    resolve_selector,
    row_entity,
)
from tests.models import Article, Author


class TestRowEntity:
    """Test cases for row_entity()."""

    def test_select_entity(self):
        """Test that select(Model) yields the model."""
        assert row_entity(select(Article)) is Article

    def test_aliased_entity(self):
        """Test that an aliased entity is returned as-is."""
        alias = aliased(Article)

        assert row_entity(select(alias)) is alias

    def test_orm_query(self, test_db: Session):
        """Test that legacy Query objects are supported."""
        assert row_entity(test_db.query(Article)) is Article

    def test_column_select_rejected(self):
        """Test that selecting a column instead of the row is rejected."""
        with pytest.raises(UnsupportedSourceError):
            row_entity(select(Article.title))

    def test_core_table_rejected(self):
        """Test that Core selects without a mapped entity are rejected."""
        with pytest.raises(UnsupportedSourceError):
            row_entity(select(Article.__table__))

    def test_non_query_rejected(self):
        """Test that arbitrary objects are rejected."""
        with pytest.raises(UnsupportedSourceError) as exc_info:
            row_entity(["not", "a", "query"])

        assert exc_info.value.argument == "source"


class TestResolveSelector:
    """Test cases for resolve_selector()."""

    def test_identity_is_wildcard(self):
        """Test that returning the row selects every column."""
        selector = resolve_selector(Article, lambda a: a)

        assert selector == WildcardSelector()
        assert selector.name == WILDCARD

    def test_star_literal_is_wildcard(self):
        """Test that returning "*" selects every column."""
        assert resolve_selector(Article, lambda a: "*") == WildcardSelector()

    def test_aliased_identity_is_wildcard(self):
        """Test wildcard detection on an aliased entity."""
        alias = aliased(Article)

        assert isinstance(resolve_selector(alias, lambda a: a), WildcardSelector)

    def test_column_attribute(self):
        """Test that a mapped column becomes a field selector."""
        selector = resolve_selector(Article, lambda a: a.title)

        assert isinstance(selector, FieldSelector)
        assert selector.name == "title"
        assert selector.expression() is Article.title

    def test_table_column(self):
        """Test that a Core column of the table is accepted."""
        selector = resolve_selector(Article, lambda a: a.__table__.c.body)

        assert isinstance(selector, FieldSelector)
        assert selector.name == "body"

    def test_field_selectors_compare_by_name(self):
        """Test that field selectors on the same column are equal."""
        assert resolve_selector(Article, lambda a: a.title) == resolve_selector(
            Article, lambda a: a.title
        )
        assert resolve_selector(Article, lambda a: a.title) != resolve_selector(
            Article, lambda a: a.body
        )

    @pytest.mark.parametrize(
        "selector",
        [
            lambda a: (a.title, a.body),
            lambda a: [a.title, a.body],
            lambda a: a.author,
            lambda a: "title",
            lambda a: func.lower(a.title),
            lambda a: 42,
            lambda a: Author.name,
            lambda a: Author.__table__.c.name,
            lambda a: literal_column("x"),
        ],
        ids=[
            "tuple",
            "list",
            "relationship",
            "string",
            "expression",
            "int",
            "other-entity-column",
            "other-table-column",
            "literal-column",
        ],
    )
    def test_unsupported_shapes(self, selector):
        """Test that anything other than one column or the row is rejected."""
        with pytest.raises(UnsupportedSelectorError) as exc_info:
            resolve_selector(Article, selector)

        assert exc_info.value.argument == "selector"
        assert "unsupported selector shape" in str(exc_info.value)

    def test_non_callable_rejected(self):
        """Test that selectors must be callables."""
        with pytest.raises(UnsupportedSelectorError):
            resolve_selector(Article, "title")

    def test_unaliased_column_on_alias_rejected(self):
        """Test that an alias cannot be searched through the base entity's column."""
        alias = aliased(Article)

        with pytest.raises(UnsupportedSelectorError):
            resolve_selector(alias, lambda a: Article.title)
        with pytest.raises(UnsupportedSelectorError):
            resolve_selector(alias, lambda a: Article.__table__.c.title)

    def test_aliased_column(self):
        """Test that the alias's own column is a field selector."""
        alias = aliased(Article)
        selector = resolve_selector(alias, lambda a: a.title)

        assert isinstance(selector, FieldSelector)
        assert selector.name == "title"
