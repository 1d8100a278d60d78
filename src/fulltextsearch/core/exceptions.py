"""Full-text search exceptions."""


class FullTextSearchError(Exception):
    """Base exception for full-text search errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidArgumentError(FullTextSearchError, ValueError):
    """Raised when a search call receives an argument it cannot use."""

    def __init__(self, message: str, argument: str) -> None:
        super().__init__(message)
        self.argument = argument


class MissingPredicateError(InvalidArgumentError):
    """Raised when no search predicate is given."""

    def __init__(self) -> None:
        super().__init__("missing predicate", argument="predicate")


class EmptyPredicateError(InvalidArgumentError):
    """Raised when the search predicate is the empty string."""

    def __init__(self) -> None:
        super().__init__("empty predicate", argument="predicate")


class InvalidPredicateTypeError(InvalidArgumentError, TypeError):
    """Raised when the search predicate is not a string."""

    def __init__(self, value: object) -> None:
        super().__init__(
            f"predicate must be a string, got {type(value).__name__}",
            argument="predicate",
        )


class UnsupportedSelectorError(InvalidArgumentError):
    """Raised when a selector projects to something other than one column or the row."""

    def __init__(self, shape: object) -> None:
        super().__init__(
            f"unsupported selector shape: {shape!r}",
            argument="selector",
        )
        self.shape = shape


class UnsupportedSourceError(InvalidArgumentError):
    """Raised when the source query does not select a mapped entity."""

    def __init__(self, source: object) -> None:
        super().__init__(
            f"source query has no mapped row entity: {type(source).__name__}",
            argument="source",
        )
