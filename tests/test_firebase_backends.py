"""
Firebase directory and record store tests.

The Admin SDK is patched out; these check path layout, field naming
and error translation.
"""

from unittest import mock

import pytest
from firebase_admin import auth, exceptions as firebase_exceptions

from app.core.exceptions import (
    DirectoryError,
    IdentityAlreadyExistsError,
    IdentityNotFoundError,
    RecordStoreError,
)
from app.schemas.employee import EmployeeStatus
from app.services.directory import FirebaseDirectory
from app.services.record_store import FirebaseRecordStore

ROOT = "smartfit_AR_Database"


@pytest.fixture()
def refs():
    """Patch ``db.reference`` and hand out one mock per path."""
    by_path = {}

    def reference(path, app=None):
        return by_path.setdefault(path, mock.MagicMock(name=path))

    with mock.patch("app.services.record_store.db.reference", side_effect=reference):
        yield by_path


@pytest.fixture()
def firebase_store():
    return FirebaseRecordStore(mock.MagicMock(), f"/{ROOT}/")


class TestFirebaseRecordStore:
    @pytest.mark.asyncio
    async def test_shop_lookup_path(self, refs, firebase_store):
        ref = refs.setdefault(f"{ROOT}/shop/owner-O1", mock.MagicMock())
        ref.get.return_value = None
        assert await firebase_store.shop_exists("owner-O1") is False

        ref.get.return_value = True
        assert await firebase_store.shop_exists("owner-O1") is True
        ref.get.assert_called_with(shallow=True)

    @pytest.mark.asyncio
    async def test_counter_transaction_never_lowers(self, refs, firebase_store):
        ref = refs.setdefault(f"{ROOT}/shop/shop-S1/lastEmployeeNumber", mock.MagicMock())
        ref.transaction.side_effect = lambda fn: fn(9)

        assert await firebase_store.advance_last_employee_number("shop-S1", 4) == 9

        ref.transaction.side_effect = lambda fn: fn(None)
        assert await firebase_store.advance_last_employee_number("shop-S1", 4) == 4

    @pytest.mark.asyncio
    async def test_update_uses_stored_field_names(self, refs, firebase_store):
        await firebase_store.update_employee("uid-1", {
            "status": EmployeeStatus.SUSPENDED,
            "status_updated_by": "owner-O1",
        })

        refs[f"{ROOT}/employees/uid-1"].update.assert_called_once_with({
            "status": "suspended",
            "statusUpdatedBy": "owner-O1",
        })

    @pytest.mark.asyncio
    async def test_membership_status_update(self, refs, firebase_store):
        await firebase_store.update_membership_status("shop-S1", "uid-1", EmployeeStatus.INACTIVE)

        refs[f"{ROOT}/shop_employees/shop-S1/uid-1"].update.assert_called_once_with(
            {"status": "inactive"}
        )

    @pytest.mark.asyncio
    async def test_batch_logs_in_push_order(self, refs, firebase_store):
        entry = {
            "shopOwnerId": "owner-O1",
            "countRequested": 1,
            "countCreated": 1,
            "countFailed": 0,
        }
        refs.setdefault(f"{ROOT}/employee_batch_logs/shop-S1", mock.MagicMock()).get.return_value = {
            "-Nb": {**entry, "timestamp": "2024-05-02T00:00:00+00:00"},
            "-Na": {**entry, "timestamp": "2024-05-01T00:00:00+00:00"},
        }

        logs = await firebase_store.list_batch_logs("shop-S1")

        assert [log.timestamp.day for log in logs] == [1, 2]

    @pytest.mark.asyncio
    async def test_sdk_errors_become_record_store_errors(self, refs, firebase_store):
        ref = refs.setdefault(f"{ROOT}/employees/uid-1", mock.MagicMock())
        ref.get.side_effect = firebase_exceptions.UnavailableError("database unavailable")

        with pytest.raises(RecordStoreError, match="database unavailable"):
            await firebase_store.get_employee("uid-1")


class TestFirebaseDirectory:
    @pytest.mark.asyncio
    async def test_missing_identity_lookup_returns_none(self):
        directory = FirebaseDirectory(mock.MagicMock())
        with mock.patch.object(
            auth, "get_user_by_email", side_effect=auth.UserNotFoundError("no user")
        ):
            assert await directory.get_user_by_email("employee1@co.com") is None

    @pytest.mark.asyncio
    async def test_create_collision(self):
        directory = FirebaseDirectory(mock.MagicMock())
        error = auth.EmailAlreadyExistsError("exists", None, None)
        with mock.patch.object(auth, "create_user", side_effect=error):
            with pytest.raises(IdentityAlreadyExistsError, match="employee1@co.com"):
                await directory.create_user("employee1@co.com", "Abc12345")

    @pytest.mark.asyncio
    async def test_create_failure(self):
        directory = FirebaseDirectory(mock.MagicMock())
        error = firebase_exceptions.ResourceExhaustedError("quota exceeded")
        with mock.patch.object(auth, "create_user", side_effect=error):
            with pytest.raises(DirectoryError, match="quota exceeded"):
                await directory.create_user("employee1@co.com", "Abc12345")

    @pytest.mark.asyncio
    async def test_delete_missing_identity(self):
        directory = FirebaseDirectory(mock.MagicMock())
        with mock.patch.object(
            auth, "delete_user", side_effect=auth.UserNotFoundError("no user")
        ):
            with pytest.raises(IdentityNotFoundError):
                await directory.delete_user("uid-1")

    @pytest.mark.asyncio
    async def test_update_passes_only_given_fields(self):
        directory = FirebaseDirectory(mock.MagicMock())
        record = mock.MagicMock(uid="uid-1", email="employee1@co.com", disabled=True,
                                email_verified=True)
        with mock.patch.object(auth, "update_user", return_value=record) as update_user:
            user = await directory.update_user("uid-1", disabled=True)

        assert user.disabled is True
        assert update_user.call_args.kwargs == {"app": mock.ANY, "disabled": True}
