class FinderError(Exception):
    """Base class for all Flash Finder exceptions."""


class RecordNotFoundError(FinderError, ValueError):
    """Raised when a single record was expected but none was found."""


class QueryExecutionError(FinderError, RuntimeError):
    """Raised when the store fails while executing a finder query."""


class AssociationError(FinderError, ValueError):
    """Raised when association metadata cannot be resolved for a model."""
