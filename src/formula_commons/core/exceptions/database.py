"""Database exceptions for formula-commons."""

from .base import FormulaCommonsError


class DatabaseError(FormulaCommonsError):
    """Raised when a repository query fails."""
    pass


class QueryError(DatabaseError):
    """Raised when a single statement fails to execute."""
    pass
