"""Site data exception hierarchy.

Every error raised by the persistence layer inherits from SiteDataError and
carries the HTTP status the API layer answers with.
"""

from typing import List


class SiteDataError(Exception):
    """Base exception for all site data errors."""

    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class SiteValidationError(SiteDataError):
    """One or more field rules were violated by a site record."""

    status_code = 400

    def __init__(self, errors: List[str]) -> None:
        super().__init__(f"Site data validation failed: {'; '.join(errors)}")
        self.errors = list(errors)


class SiteNotFoundError(SiteDataError):
    """The addressed site file does not exist."""

    status_code = 404


class SiteAlreadyExistsError(SiteDataError):
    """A site file with the requested name already exists."""

    status_code = 409


class SiteEmptyError(SiteDataError):
    """The site file exists but holds no data."""

    status_code = 422


class SiteStorageError(SiteDataError):
    """Listing, reading or writing the data directory failed."""
