"""
Exceptions raised by the footywire package.
"""

from typing import Optional


class FootywireError(Exception):
    """Base exception for footywire errors."""
    pass


class MalformedRowError(FootywireError, ValueError):
    """Raised when a scraped row does not match the schema of its kind."""
    pass


class FetchError(FootywireError):
    """Raised when a page or archive cannot be retrieved."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class InsufficientDataError(FootywireError, ValueError):
    """Raised when there are no rows to infer rounds from."""
    pass
