"""Record store: employee records, shop indexes, counters and batch logs.

``RecordStore`` is the interface the API and the provisioner depend on.
``FirebaseRecordStore`` keeps everything in the Realtime Database under a
single root namespace::

    <root>/shop/<shopKey>                      shop node, lastEmployeeNumber
    <root>/employees/<uid>                     employee record
    <root>/shop_employees/<shopId>/<uid>       membership index
    <root>/employee_batch_logs/<shopId>/<id>   batch logs (push ids)
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol

import firebase_admin
from firebase_admin import db, exceptions as firebase_exceptions

from app.core.exceptions import RecordStoreError
from app.schemas.employee import EmployeeRecord, EmployeeStatus, ShopMembership, utcnow
from app.schemas.provisioning import BatchLogEntry

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    async def shop_exists(self, shop_key: str) -> bool:
        """Whether a shop node exists for ``shop_key`` (owner or shop id)."""
        ...

    async def get_last_employee_number(self, shop_id: str) -> int:
        ...

    async def advance_last_employee_number(self, shop_id: str, number: int) -> int:
        """Raise the shop counter to ``number`` atomically; never lowers it.

        Returns the stored value after the update.
        """
        ...

    async def get_employee(self, uid: str) -> Optional[EmployeeRecord]:
        ...

    async def save_employee(self, record: EmployeeRecord) -> None:
        ...

    async def update_employee(self, uid: str, changes: Dict[str, Any]) -> None:
        """Merge ``changes`` (EmployeeRecord field names) into a record."""
        ...

    async def delete_employee(self, uid: str) -> None:
        ...

    async def list_employees(self, shop_id: str) -> List[EmployeeRecord]:
        ...

    async def add_membership(self, shop_id: str, membership: ShopMembership) -> None:
        ...

    async def update_membership_status(
        self, shop_id: str, uid: str, status: EmployeeStatus
    ) -> None:
        ...

    async def remove_membership(self, shop_id: str, uid: str) -> None:
        ...

    async def append_batch_log(self, shop_id: str, entry: BatchLogEntry) -> str:
        """Append a batch log entry and return its key."""
        ...

    async def list_batch_logs(self, shop_id: str) -> List[BatchLogEntry]:
        ...

    async def add_shop(self, shop_id: str, name: Optional[str] = None) -> None:
        """Register a shop node (seeding and tests)."""
        ...


def _dump(model) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def _aliased(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Translate EmployeeRecord field names and values to stored JSON."""
    partial = EmployeeRecord.model_construct(**changes)
    dumped = partial.model_dump(mode="json", by_alias=True, include=set(changes))
    return dumped


class FirebaseRecordStore:
    """Realtime Database backed record store."""

    def __init__(self, app: firebase_admin.App, root: str):
        self._app = app
        self._root = root.strip("/")

    def _ref(self, *parts: str) -> db.Reference:
        return db.reference("/".join((self._root,) + parts), app=self._app)

    async def _call(self, fn, *args, **kwargs):
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except (firebase_exceptions.FirebaseError, ValueError) as e:
            raise RecordStoreError(str(e)) from e

    async def shop_exists(self, shop_key: str) -> bool:
        value = await self._call(self._ref("shop", shop_key).get, shallow=True)
        return value is not None

    async def get_last_employee_number(self, shop_id: str) -> int:
        value = await self._call(self._ref("shop", shop_id, "lastEmployeeNumber").get)
        return int(value) if value is not None else 0

    async def advance_last_employee_number(self, shop_id: str, number: int) -> int:
        ref = self._ref("shop", shop_id, "lastEmployeeNumber")

        def raise_to(current):
            return max(int(current or 0), number)

        return await self._call(ref.transaction, raise_to)

    async def get_employee(self, uid: str) -> Optional[EmployeeRecord]:
        value = await self._call(self._ref("employees", uid).get)
        if value is None:
            return None
        return EmployeeRecord.model_validate(value)

    async def save_employee(self, record: EmployeeRecord) -> None:
        await self._call(self._ref("employees", record.id).set, _dump(record))

    async def update_employee(self, uid: str, changes: Dict[str, Any]) -> None:
        await self._call(self._ref("employees", uid).update, _aliased(changes))

    async def delete_employee(self, uid: str) -> None:
        await self._call(self._ref("employees", uid).delete)

    async def list_employees(self, shop_id: str) -> List[EmployeeRecord]:
        query = self._ref("employees").order_by_child("shopId").equal_to(shop_id)
        values = await self._call(query.get)
        if not values:
            return []
        return [EmployeeRecord.model_validate(value) for value in values.values()]

    async def add_membership(self, shop_id: str, membership: ShopMembership) -> None:
        ref = self._ref("shop_employees", shop_id, membership.employee_id)
        await self._call(ref.set, _dump(membership))

    async def update_membership_status(
        self, shop_id: str, uid: str, status: EmployeeStatus
    ) -> None:
        ref = self._ref("shop_employees", shop_id, uid)
        await self._call(ref.update, {"status": status.value})

    async def remove_membership(self, shop_id: str, uid: str) -> None:
        await self._call(self._ref("shop_employees", shop_id, uid).delete)

    async def append_batch_log(self, shop_id: str, entry: BatchLogEntry) -> str:
        ref = await self._call(self._ref("employee_batch_logs", shop_id).push, _dump(entry))
        return ref.key

    async def list_batch_logs(self, shop_id: str) -> List[BatchLogEntry]:
        values = await self._call(self._ref("employee_batch_logs", shop_id).get)
        if not values:
            return []
        # Push ids sort chronologically
        return [BatchLogEntry.model_validate(values[key]) for key in sorted(values)]

    async def add_shop(self, shop_id: str, name: Optional[str] = None) -> None:
        node = {"dateCreated": utcnow().isoformat()}
        if name:
            node["name"] = name
        await self._call(self._ref("shop", shop_id).update, node)
