"""In-memory directory and record store used by the tests."""

from typing import Any, Dict, List, Optional, Set, Tuple

from app.core.exceptions import (
    DirectoryError,
    IdentityAlreadyExistsError,
    IdentityNotFoundError,
    RecordStoreError,
)
from app.schemas.employee import EmployeeRecord, EmployeeStatus, ShopMembership
from app.schemas.provisioning import BatchLogEntry
from app.services.directory import DirectoryUser

OWNER_ID = "owner-O1"
SHOP_ID = "shop-S1"


class FakeDirectory:
    """Directory keeping identities in a dict.

    ``fail_create`` emails raise a generic directory error on create.
    ``hidden`` emails are invisible to lookups but still collide on create,
    like an identity created concurrently by another request.
    """

    def __init__(self) -> None:
        self.users: Dict[str, DirectoryUser] = {}
        self.passwords: Dict[str, str] = {}
        self.fail_create: Set[str] = set()
        self.fail_delete: Set[str] = set()
        self.hidden: Set[str] = set()
        self.lookups: List[str] = []
        self.create_calls: List[str] = []
        self._next = 1

    def add_existing(self, email: str, hidden: bool = False) -> DirectoryUser:
        user = DirectoryUser(uid=f"existing-{self._next}", email=email, email_verified=True)
        self._next += 1
        self.users[user.uid] = user
        if hidden:
            self.hidden.add(email)
        return user

    def by_email(self, email: str) -> Optional[DirectoryUser]:
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    async def get_user_by_email(self, email: str) -> Optional[DirectoryUser]:
        self.lookups.append(email)
        if email in self.hidden:
            return None
        return self.by_email(email)

    async def create_user(
        self,
        email: str,
        password: str,
        email_verified: bool = True,
        disabled: bool = False,
    ) -> DirectoryUser:
        self.create_calls.append(email)
        if email in self.fail_create:
            raise DirectoryError(f"Failed to create {email}: quota exceeded")
        if self.by_email(email) is not None:
            raise IdentityAlreadyExistsError(email)
        user = DirectoryUser(
            uid=f"uid-{self._next}",
            email=email,
            disabled=disabled,
            email_verified=email_verified,
        )
        self._next += 1
        self.users[user.uid] = user
        self.passwords[user.uid] = password
        return user

    async def update_user(
        self,
        uid: str,
        password: Optional[str] = None,
        disabled: Optional[bool] = None,
    ) -> DirectoryUser:
        user = self.users.get(uid)
        if user is None:
            raise IdentityNotFoundError(f"No directory identity {uid}")
        if password is not None:
            self.passwords[uid] = password
        if disabled is not None:
            user.disabled = disabled
        return user

    async def delete_user(self, uid: str) -> None:
        if uid in self.fail_delete:
            raise DirectoryError(f"Failed to delete {uid}: unavailable")
        if uid not in self.users:
            raise IdentityNotFoundError(f"No directory identity {uid}")
        del self.users[uid]
        self.passwords.pop(uid, None)


class FakeRecordStore:
    """Record store keeping copies of every model it is given."""

    def __init__(self) -> None:
        self.shops: Dict[str, Dict[str, Any]] = {}
        self.employees: Dict[str, EmployeeRecord] = {}
        self.memberships: Dict[Tuple[str, str], ShopMembership] = {}
        self.batch_logs: Dict[str, List[BatchLogEntry]] = {}
        self.fail_save_for: Set[str] = set()
        self.fail_membership_for: Set[str] = set()
        self.fail_batch_log = False
        self.counter_writes: List[Tuple[str, int]] = []

    async def add_shop(self, shop_id: str, name: Optional[str] = None) -> None:
        self.shops.setdefault(shop_id, {})["name"] = name

    async def shop_exists(self, shop_key: str) -> bool:
        return shop_key in self.shops

    async def get_last_employee_number(self, shop_id: str) -> int:
        return self.shops.get(shop_id, {}).get("lastEmployeeNumber", 0)

    async def advance_last_employee_number(self, shop_id: str, number: int) -> int:
        self.counter_writes.append((shop_id, number))
        shop = self.shops.setdefault(shop_id, {})
        shop["lastEmployeeNumber"] = max(shop.get("lastEmployeeNumber", 0), number)
        return shop["lastEmployeeNumber"]

    async def get_employee(self, uid: str) -> Optional[EmployeeRecord]:
        record = self.employees.get(uid)
        return record.model_copy(deep=True) if record else None

    async def save_employee(self, record: EmployeeRecord) -> None:
        if record.email in self.fail_save_for:
            raise RecordStoreError(f"write to employees/{record.id} denied")
        self.employees[record.id] = record.model_copy(deep=True)

    async def update_employee(self, uid: str, changes: Dict[str, Any]) -> None:
        record = self.employees[uid]
        self.employees[uid] = record.model_copy(update=changes, deep=True)

    async def delete_employee(self, uid: str) -> None:
        self.employees.pop(uid, None)

    async def list_employees(self, shop_id: str) -> List[EmployeeRecord]:
        return [
            record.model_copy(deep=True)
            for record in self.employees.values()
            if record.shop_id == shop_id
        ]

    async def add_membership(self, shop_id: str, membership: ShopMembership) -> None:
        if membership.email in self.fail_membership_for:
            raise RecordStoreError(f"write to shop_employees/{shop_id} denied")
        self.memberships[(shop_id, membership.employee_id)] = membership.model_copy(deep=True)

    async def update_membership_status(
        self, shop_id: str, uid: str, status: EmployeeStatus
    ) -> None:
        membership = self.memberships.get((shop_id, uid))
        if membership is not None:
            membership.status = status

    async def remove_membership(self, shop_id: str, uid: str) -> None:
        self.memberships.pop((shop_id, uid), None)

    async def append_batch_log(self, shop_id: str, entry: BatchLogEntry) -> str:
        if self.fail_batch_log:
            raise RecordStoreError("write to employee_batch_logs denied")
        logs = self.batch_logs.setdefault(shop_id, [])
        logs.append(entry.model_copy(deep=True))
        return f"log-{len(logs)}"

    async def list_batch_logs(self, shop_id: str) -> List[BatchLogEntry]:
        return list(self.batch_logs.get(shop_id, []))
