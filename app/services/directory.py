"""Directory service: login identities for employees.

``DirectoryService`` is the interface the API and the provisioner depend on.
``FirebaseDirectory`` implements it on top of Firebase Authentication; the
Admin SDK is blocking, so every call is moved to a worker thread.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import firebase_admin
from firebase_admin import auth, exceptions as firebase_exceptions

from app.core.exceptions import (
    DirectoryError,
    IdentityAlreadyExistsError,
    IdentityNotFoundError,
)

logger = logging.getLogger(__name__)


@dataclass
class DirectoryUser:
    """Identity as seen by this service."""
    uid: str
    email: Optional[str]
    disabled: bool = False
    email_verified: bool = False


class DirectoryService(Protocol):
    async def get_user_by_email(self, email: str) -> Optional[DirectoryUser]:
        """Return the identity registered for ``email`` or ``None``."""
        ...

    async def create_user(
        self,
        email: str,
        password: str,
        email_verified: bool = True,
        disabled: bool = False,
    ) -> DirectoryUser:
        """Create an identity. Raises ``IdentityAlreadyExistsError`` on collision."""
        ...

    async def update_user(
        self,
        uid: str,
        password: Optional[str] = None,
        disabled: Optional[bool] = None,
    ) -> DirectoryUser:
        """Rotate the credential and/or toggle the identity."""
        ...

    async def delete_user(self, uid: str) -> None:
        """Delete an identity. Raises ``IdentityNotFoundError`` if missing."""
        ...


def _to_directory_user(record: auth.UserRecord) -> DirectoryUser:
    return DirectoryUser(
        uid=record.uid,
        email=record.email,
        disabled=record.disabled,
        email_verified=record.email_verified,
    )


class FirebaseDirectory:
    """Firebase Authentication backed directory."""

    def __init__(self, app: firebase_admin.App):
        self._app = app

    async def get_user_by_email(self, email: str) -> Optional[DirectoryUser]:
        try:
            record = await asyncio.to_thread(auth.get_user_by_email, email, app=self._app)
        except auth.UserNotFoundError:
            return None
        except (firebase_exceptions.FirebaseError, ValueError) as e:
            raise DirectoryError(f"Failed to look up {email}: {e}") from e
        return _to_directory_user(record)

    async def create_user(
        self,
        email: str,
        password: str,
        email_verified: bool = True,
        disabled: bool = False,
    ) -> DirectoryUser:
        try:
            record = await asyncio.to_thread(
                auth.create_user,
                email=email,
                password=password,
                email_verified=email_verified,
                disabled=disabled,
                app=self._app,
            )
        except auth.EmailAlreadyExistsError as e:
            raise IdentityAlreadyExistsError(email) from e
        except (firebase_exceptions.FirebaseError, ValueError) as e:
            raise DirectoryError(f"Failed to create {email}: {e}") from e
        logger.info("Created directory identity %s", record.uid)
        return _to_directory_user(record)

    async def update_user(
        self,
        uid: str,
        password: Optional[str] = None,
        disabled: Optional[bool] = None,
    ) -> DirectoryUser:
        changes = {}
        if password is not None:
            changes["password"] = password
        if disabled is not None:
            changes["disabled"] = disabled
        try:
            record = await asyncio.to_thread(auth.update_user, uid, app=self._app, **changes)
        except auth.UserNotFoundError as e:
            raise IdentityNotFoundError(f"No directory identity {uid}") from e
        except (firebase_exceptions.FirebaseError, ValueError) as e:
            raise DirectoryError(f"Failed to update {uid}: {e}") from e
        return _to_directory_user(record)

    async def delete_user(self, uid: str) -> None:
        try:
            await asyncio.to_thread(auth.delete_user, uid, app=self._app)
        except auth.UserNotFoundError as e:
            raise IdentityNotFoundError(f"No directory identity {uid}") from e
        except (firebase_exceptions.FirebaseError, ValueError) as e:
            raise DirectoryError(f"Failed to delete {uid}: {e}") from e
        logger.info("Deleted directory identity %s", uid)
