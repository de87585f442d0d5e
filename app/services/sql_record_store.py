"""SQL implementation of the record store (Postgres/Supabase via SQLAlchemy)."""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import RecordStoreError
from app.models.batch_log import EmployeeBatchLog
from app.models.employee import Employee, ShopEmployee
from app.models.shop import EmployeeCounter, Shop
from app.schemas.employee import EmployeeRecord, EmployeeStatus, ShopMembership
from app.schemas.provisioning import BatchLogEntry

logger = logging.getLogger(__name__)

# EmployeeRecord field -> Employee column, where they differ
_COLUMN_NAMES = {"employee_id": "employee_code"}


def _to_record(row: Employee) -> EmployeeRecord:
    return EmployeeRecord(
        id=row.id,
        name=row.name,
        role=row.role,
        permissions=list(row.permissions or []),
        shop_id=row.shop_id,
        shop_owner_id=row.shop_owner_id,
        email=row.email,
        temporary_password=row.temporary_password,
        employee_id=row.employee_code,
        status=row.status,
        date_created=row.date_created,
        last_updated=row.last_updated,
        created_by=row.created_by,
        is_batch_generated=row.is_batch_generated,
        status_updated_by=row.status_updated_by,
        password_reset_at=row.password_reset_at,
        password_reset_by=row.password_reset_by,
    )


def _to_row(record: EmployeeRecord) -> Employee:
    values = record.model_dump()
    values["status"] = record.status.value
    values["employee_code"] = values.pop("employee_id")
    return Employee(**values)


def _to_columns(changes: Dict[str, Any]) -> Dict[str, Any]:
    columns = {}
    for field, value in changes.items():
        if isinstance(value, EmployeeStatus):
            value = value.value
        columns[_COLUMN_NAMES.get(field, field)] = value
    return columns


class SqlRecordStore:
    """Record store backed by relational tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield session
        except SQLAlchemyError as e:
            raise RecordStoreError(str(e)) from e

    async def shop_exists(self, shop_key: str) -> bool:
        async with self._transaction() as session:
            result = await session.execute(select(Shop.id).where(Shop.id == shop_key))
            return result.scalar_one_or_none() is not None

    async def get_last_employee_number(self, shop_id: str) -> int:
        async with self._transaction() as session:
            result = await session.execute(
                select(EmployeeCounter.last_employee_number)
                .where(EmployeeCounter.shop_id == shop_id)
            )
            return result.scalar_one_or_none() or 0

    async def advance_last_employee_number(self, shop_id: str, number: int) -> int:
        async with self._transaction() as session:
            counter = await session.get(EmployeeCounter, shop_id, with_for_update=True)
            if counter is None:
                counter = EmployeeCounter(shop_id=shop_id, last_employee_number=number)
                session.add(counter)
            else:
                counter.last_employee_number = max(counter.last_employee_number, number)
            return counter.last_employee_number

    async def get_employee(self, uid: str) -> Optional[EmployeeRecord]:
        async with self._transaction() as session:
            row = await session.get(Employee, uid)
            return _to_record(row) if row else None

    async def save_employee(self, record: EmployeeRecord) -> None:
        async with self._transaction() as session:
            await session.merge(_to_row(record))

    async def update_employee(self, uid: str, changes: Dict[str, Any]) -> None:
        async with self._transaction() as session:
            await session.execute(
                update(Employee).where(Employee.id == uid).values(**_to_columns(changes))
            )

    async def delete_employee(self, uid: str) -> None:
        async with self._transaction() as session:
            await session.execute(delete(Employee).where(Employee.id == uid))

    async def list_employees(self, shop_id: str) -> List[EmployeeRecord]:
        async with self._transaction() as session:
            result = await session.execute(
                select(Employee)
                .where(Employee.shop_id == shop_id)
                .order_by(Employee.date_created, Employee.employee_code)
            )
            return [_to_record(row) for row in result.scalars().all()]

    async def add_membership(self, shop_id: str, membership: ShopMembership) -> None:
        async with self._transaction() as session:
            await session.merge(ShopEmployee(
                shop_id=shop_id,
                employee_id=membership.employee_id,
                email=membership.email,
                status=membership.status.value,
                date_added=membership.date_added,
            ))

    async def update_membership_status(
        self, shop_id: str, uid: str, status: EmployeeStatus
    ) -> None:
        async with self._transaction() as session:
            await session.execute(
                update(ShopEmployee)
                .where(ShopEmployee.shop_id == shop_id, ShopEmployee.employee_id == uid)
                .values(status=status.value)
            )

    async def remove_membership(self, shop_id: str, uid: str) -> None:
        async with self._transaction() as session:
            await session.execute(
                delete(ShopEmployee).where(
                    ShopEmployee.shop_id == shop_id, ShopEmployee.employee_id == uid
                )
            )

    async def append_batch_log(self, shop_id: str, entry: BatchLogEntry) -> str:
        log_id = str(uuid.uuid4())
        async with self._transaction() as session:
            session.add(EmployeeBatchLog(
                id=log_id,
                shop_id=shop_id,
                timestamp=entry.timestamp,
                shop_owner_id=entry.shop_owner_id,
                count_requested=entry.count_requested,
                count_created=entry.count_created,
                count_failed=entry.count_failed,
                count_skipped=entry.count_skipped,
                exhausted=entry.exhausted,
                employees=[e.model_dump(mode="json", by_alias=True) for e in entry.employees],
                errors=[e.model_dump(mode="json", by_alias=True) for e in entry.errors],
            ))
        return log_id

    async def list_batch_logs(self, shop_id: str) -> List[BatchLogEntry]:
        async with self._transaction() as session:
            result = await session.execute(
                select(EmployeeBatchLog)
                .where(EmployeeBatchLog.shop_id == shop_id)
                .order_by(EmployeeBatchLog.timestamp)
            )
            return [
                BatchLogEntry(
                    timestamp=row.timestamp,
                    shop_owner_id=row.shop_owner_id,
                    count_requested=row.count_requested,
                    count_created=row.count_created,
                    count_failed=row.count_failed,
                    count_skipped=row.count_skipped,
                    exhausted=row.exhausted,
                    employees=row.employees,
                    errors=row.errors,
                )
                for row in result.scalars().all()
            ]

    async def add_shop(self, shop_id: str, name: Optional[str] = None) -> None:
        """Register a shop node. Used by seeding scripts and tests."""
        async with self._transaction() as session:
            if await session.get(Shop, shop_id) is None:
                session.add(Shop(id=shop_id, name=name))
