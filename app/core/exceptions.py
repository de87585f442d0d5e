"""Custom exceptions for the API and its external collaborators."""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class BadRequestException(APIException):
    """400 Bad Request exception."""

    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ForbiddenException(APIException):
    """403 Forbidden exception."""

    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundException(APIException):
    """404 Not Found exception."""

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DirectoryError(Exception):
    """Failure reported by the directory service."""


class IdentityAlreadyExistsError(DirectoryError):
    """An identity with the requested email already exists."""

    def __init__(self, email: str):
        super().__init__(f"The email address {email} is already in use by another account")
        self.email = email


class IdentityNotFoundError(DirectoryError):
    """No identity matches the given uid or email."""


class RecordStoreError(Exception):
    """Failure reported by the record store."""


class ProvisioningError(Exception):
    """A provisioning step failed and could not be rolled back cleanly."""
