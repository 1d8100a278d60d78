"""Sentinel tags that mark full-text search payloads.

A payload is the raw search predicate prefixed with a tag and wrapped in
parentheses, e.g. ``({CONTAINS-AF2E-457D-81C2-85DACAA23B9C}fox)``. The payload
travels through SQLAlchemy as the operand of an ordinary ``contains()`` test
and is recognized again in the generated SQL by the interceptor.
"""

import re
from enum import Enum

# Tags must not occur in a normal search predicate or in generated SQL.
CONTAINS_TAG = "{CONTAINS-AF2E-457D-81C2-85DACAA23B9C}"
FREETEXT_TAG = "{FREETEXT-CE74-4E5F-9166-878AFA2AC1DF}"

ANY_TAG = re.compile(f"(?:{re.escape(CONTAINS_TAG)}|{re.escape(FREETEXT_TAG)})")

_PAYLOAD = re.compile(
    rf"\((?P<tag>{ANY_TAG.pattern})(?P<predicate>.*)\)",
    re.DOTALL,
)


class SearchMode(Enum):
    """Full-text search flavor, one per native SQL Server predicate."""

    CONTAINS = "CONTAINS"
    FREETEXT = "FREETEXT"

    @property
    def tag(self) -> str:
        """Sentinel that marks payloads of this mode."""
        return CONTAINS_TAG if self is SearchMode.CONTAINS else FREETEXT_TAG

    @property
    def function(self) -> str:
        """Native SQL function name the payload is rewritten to."""
        return self.value


def mode_for_tag(tag: str) -> SearchMode:
    """Get the search mode a sentinel belongs to.

    Raises:
        KeyError: If ``tag`` is not one of the sentinels.
    """
    for mode in SearchMode:
        if mode.tag == tag:
            return mode
    raise KeyError(tag)


def encode(mode: SearchMode, predicate: str) -> str:
    """Wrap a raw predicate in a tagged payload.

    The predicate is passed through verbatim; no escaping is applied.
    """
    return f"({mode.tag}{predicate})"


def detect(text: str, mode: SearchMode | None = None) -> bool:
    """Check whether ``text`` contains a sentinel.

    Args:
        text: Text to scan, typically generated SQL or a bound value.
        mode: Only look for this mode's sentinel. Any sentinel if omitted.

    Returns:
        True if a matching sentinel occurs anywhere in ``text``.
    """
    if mode is None:
        return ANY_TAG.search(text) is not None
    return mode.tag in text


def decode(payload: str) -> tuple[SearchMode, str] | None:
    """Split a tagged payload back into its mode and raw predicate.

    Returns:
        ``(mode, predicate)`` if ``payload`` is exactly one tagged payload,
        otherwise None.
    """
    match = _PAYLOAD.fullmatch(payload)
    if match is None:
        return None
    return mode_for_tag(match.group("tag")), match.group("predicate")
