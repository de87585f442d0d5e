"""API dependencies: injected collaborators and ownership checks."""

import re
from typing import Optional

from fastapi import Depends, Request

from app.config.settings import Settings
from app.core.exceptions import BadRequestException, ForbiddenException, NotFoundException
from app.schemas.employee import EmployeeRecord
from app.services.directory import DirectoryService
from app.services.provisioning import BatchProvisioner
from app.services.record_store import RecordStore

# Characters the realtime database rejects in keys, plus the path separator
_INVALID_KEY = re.compile(r"[.#$\[\]/]")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_directory(request: Request) -> DirectoryService:
    return request.app.state.directory


def get_record_store(request: Request) -> RecordStore:
    return request.app.state.record_store


def get_provisioner(
    directory: DirectoryService = Depends(get_directory),
    store: RecordStore = Depends(get_record_store),
    settings: Settings = Depends(get_settings),
) -> BatchProvisioner:
    return BatchProvisioner(
        directory,
        store,
        max_attempts=settings.max_suffix_attempts,
        password_length=settings.password_length,
    )


def check_key(value: Optional[str], field: str) -> str:
    """Reject missing ids and ids that cannot be used as record keys."""
    if not value:
        raise BadRequestException(detail=f"{field} is required")
    if _INVALID_KEY.search(value):
        raise BadRequestException(detail=f"{field} contains invalid characters")
    return value


async def require_shop_owner(store: RecordStore, shop_owner_id: str, detail: str) -> None:
    """The owner's shop node must exist; that is the whole authorization model."""
    if not await store.shop_exists(shop_owner_id):
        raise ForbiddenException(detail=detail)


async def get_owned_employee(
    store: RecordStore,
    employee_id: str,
    shop_owner_id: Optional[str],
    action: str,
) -> EmployeeRecord:
    """Load an employee that belongs to ``shop_owner_id``."""
    check_key(employee_id, "employeeId")
    employee = await store.get_employee(employee_id)
    if employee is None:
        raise NotFoundException(detail="Employee not found")
    if not shop_owner_id or employee.shop_owner_id != shop_owner_id:
        raise ForbiddenException(detail=f"Unauthorized to {action} this employee")
    return employee
