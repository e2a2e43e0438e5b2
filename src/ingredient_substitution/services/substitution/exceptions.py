"""Exceptions for the substitution service.

These never leave the public service methods; they label failures in logs
and let internal helpers signal a degraded result to their caller.
"""

from __future__ import annotations


class SubstitutionError(Exception):
    """Base exception for substitution service errors."""

    def __init__(self, message: str, ingredient: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            ingredient: Optional ingredient name related to the error.
        """
        self.ingredient = ingredient
        super().__init__(message)


class CatalogUnavailableError(SubstitutionError):
    """Raised when the catalog or log store cannot be queried."""

    def __init__(
        self,
        message: str,
        ingredient: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            ingredient: Optional ingredient name.
            cause: Optional underlying exception.
        """
        self.cause = cause
        super().__init__(message, ingredient)
