"""Rewrite tagged substring tests into native full-text predicates.

The query helpers in ``fulltextsearch.core.queryable`` emit

    <column> LIKE '%' + <operand> + '%'

where the operand carries a tagged payload. This module finds those clauses in
generated SQL and replaces them with

    CONTAINS(<column>, <operand>)    or    FREETEXT(<column>, <operand>)

The operand is either a string literal (SQL compiled with ``literal_binds``)
or a DBAPI placeholder whose bound value holds the payload. Placeholders stay
where they are and only their values are swapped for the raw predicate, so
parameter order and count never change.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import Engine

from fulltextsearch.core import tags
from fulltextsearch.core.selectors import WILDCARD

logger = logging.getLogger(__name__)

_TAG_GROUP = rf"(?P<tag>{tags.ANY_TAG.pattern})"

# One identifier: bracketed, double or backtick quoted (spaces allowed), or bare.
_SEGMENT = r"(?:\[[^\]]+\]|\"(?:[^\"]|\"\")+\"|`[^`]+`|\w+)"
# Column reference such as title, articles.title, [dbo].[my docs].[title],
# "articles"."title", or the wildcard literal '*'.
_TARGET = rf"(?<![\w\]\"`.])(?P<target>'\*'|(?:{_SEGMENT}\.)*{_SEGMENT})"
_PERCENT = r"'%{1,2}'"
_CONCAT = r"\s*(?:\+|\|\|)\s*"
_LITERAL = rf"(?P<literal>(?P<prefix>N?)'\({_TAG_GROUP}(?P<predicate>(?:[^']|'')*)\)')"
_PLACEHOLDER = r"(?P<placeholder>\?|%s|%\(\w+\)s|:\w+|\$\d+)"

_TAGGED_LIKE = re.compile(
    rf"{_TARGET}\s+(?i:LIKE)\s+(?P<open>\()?\s*{_PERCENT}{_CONCAT}"
    rf"(?:{_LITERAL}|{_PLACEHOLDER}){_CONCAT}{_PERCENT}\s*(?(open)\))"
)

# Quoted literals and escaped percents are skipped when counting placeholders.
_POSITIONAL = re.compile(r"'(?:[^']|'')*'|%%|(?P<mark>\?|%s)")


class FullTextInterceptor:
    """Rewrites tagged ``LIKE`` clauses in SQL text and DBAPI statements.

    Install it on an engine to rewrite every statement before it reaches the
    cursor:

        interceptor = FullTextInterceptor()
        interceptor.install(engine)
    """

    def rewrite_sql(self, sql: str) -> str:
        """Rewrite SQL text whose payloads are rendered as string literals.

        Args:
            sql: SQL compiled with ``literal_binds``.

        Returns:
            The SQL with each tagged ``LIKE`` clause replaced by a native
            ``CONTAINS``/``FREETEXT`` clause.
        """
        rewritten, _ = self._rewrite(sql, None)
        return rewritten

    def rewrite_statement(self, statement: str, parameters: Any) -> tuple[str, Any]:
        """Rewrite a DBAPI statement and its parameters.

        Args:
            statement: SQL as handed to the cursor.
            parameters: Positional sequence or mapping of bound values.

        Returns:
            ``(statement, parameters)`` with tagged clauses rewritten and their
            bound payloads replaced by the raw predicates. Parameters keep
            their container type.
        """
        if isinstance(parameters, Mapping):
            params: Any = dict(parameters)
        elif isinstance(parameters, (list, tuple)):
            params = list(parameters)
        else:
            params = None

        rewritten, params = self._rewrite(statement, params)

        if isinstance(parameters, tuple):
            params = tuple(params)
        elif params is None:
            params = parameters
        return rewritten, params

    def install(self, engine: Engine) -> None:
        """Register the rewrite on an engine's ``before_cursor_execute`` event."""
        if event.contains(engine, "before_cursor_execute", self._before_cursor_execute):
            return
        event.listen(
            engine,
            "before_cursor_execute",
            self._before_cursor_execute,
            retval=True,
        )
        logger.debug(f"Installed full-text interceptor on {engine.url!r}")

    def remove(self, engine: Engine) -> None:
        """Unregister the rewrite from an engine."""
        if event.contains(engine, "before_cursor_execute", self._before_cursor_execute):
            event.remove(engine, "before_cursor_execute", self._before_cursor_execute)

    def _before_cursor_execute(
        self, conn, cursor, statement, parameters, context, executemany
    ):
        if executemany:
            if tags.detect(statement) or any(
                _has_tagged_value(params) for params in parameters or ()
            ):
                logger.warning("Full-text search payload in executemany batch left as LIKE")
            return statement, parameters

        if not tags.detect(statement) and not _has_tagged_value(parameters):
            return statement, parameters
        return self.rewrite_statement(statement, parameters)

    def _rewrite(self, statement: str, params: Any) -> tuple[str, Any]:
        def replace(match: re.Match[str]) -> str:
            target = match.group("target")
            if target == f"'{WILDCARD}'":
                target = WILDCARD

            if match.group("literal") is not None:
                mode = tags.mode_for_tag(match.group("tag"))
                operand = f"{match.group('prefix')}'{match.group('predicate')}'"
                return f"{mode.function}({target}, {operand})"

            if params is None:
                return match.group(0)

            placeholder = match.group("placeholder")
            key = _parameter_key(statement, match, params)
            try:
                value = params[key]
            except (KeyError, IndexError, TypeError):
                return match.group(0)

            decoded = tags.decode(value) if isinstance(value, str) else None
            if decoded is None:
                return match.group(0)

            mode, predicate = decoded
            params[key] = predicate
            return f"{mode.function}({target}, {placeholder})"

        rewritten = _TAGGED_LIKE.sub(replace, statement)

        if rewritten != statement:
            logger.debug(f"Rewrote full-text search predicates: {rewritten}")
        if tags.detect(rewritten) or _has_tagged_value(params):
            logger.warning("Full-text search sentinel remains in statement after rewrite")
        return rewritten, params


def _parameter_key(statement: str, match: re.Match[str], params: Any) -> Any:
    """Find the parameter a placeholder refers to."""
    placeholder = match.group("placeholder")

    if placeholder.startswith("%("):
        return placeholder[2:-2]
    if placeholder.startswith("$"):
        return int(placeholder[1:]) - 1
    if placeholder.startswith(":"):
        name = placeholder[1:]
        if isinstance(params, dict) or not name.isdigit():
            return name
        return int(name) - 1

    # qmark / format: position among the placeholders before this one.
    index = 0
    for token in _POSITIONAL.finditer(statement, 0, match.start("placeholder")):
        if token.group("mark") is not None:
            index += 1
    return index


def _has_tagged_value(parameters: Any) -> bool:
    if isinstance(parameters, Mapping):
        values = parameters.values()
    elif isinstance(parameters, (list, tuple)):
        values = parameters
    else:
        return False
    return any(isinstance(value, str) and tags.detect(value) for value in values)
