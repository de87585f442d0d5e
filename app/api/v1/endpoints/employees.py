"""Employee management endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from app.api.deps import (
    check_key,
    get_directory,
    get_owned_employee,
    get_provisioner,
    get_record_store,
    get_settings,
    require_shop_owner,
)
from app.config.settings import Settings
from app.core.exceptions import BadRequestException, IdentityNotFoundError
from app.core.security import generate_password
from app.schemas.common import MessageResponse
from app.schemas.employee import (
    EmployeeBase,
    EmployeeProfileUpdate,
    EmployeeResponse,
    EmployeeStatus,
    OwnerRequest,
    PasswordResetResponse,
    StatusUpdateRequest,
    utcnow,
)
from app.schemas.provisioning import GenerateEmployeesRequest, GenerateEmployeesResponse
from app.services.directory import DirectoryService
from app.services.provisioning import BatchProvisioner, ProvisioningRequest
from app.services.record_store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter()

VALID_STATUSES = [s.value for s in EmployeeStatus]


@router.post("/generate-employees", response_model=GenerateEmployeesResponse)
async def generate_employees(
    data: GenerateEmployeesRequest,
    store: RecordStore = Depends(get_record_store),
    provisioner: BatchProvisioner = Depends(get_provisioner),
    settings: Settings = Depends(get_settings),
):
    """Generate a batch of employee accounts for a shop."""
    if not data.shop_id or not data.shop_owner_id:
        raise BadRequestException(detail="Missing required fields: shopId, shopOwnerId")
    check_key(data.shop_id, "shopId")
    check_key(data.shop_owner_id, "shopOwnerId")

    batch = data.employee_data
    if batch.count > settings.max_batch_size:
        raise BadRequestException(
            detail=f"Cannot generate more than {settings.max_batch_size} employees at once"
        )

    await require_shop_owner(store, data.shop_owner_id, "Shop owner not found or unauthorized")

    result = await provisioner.provision(ProvisioningRequest(
        shop_id=data.shop_id,
        shop_owner_id=data.shop_owner_id,
        count=batch.count,
        domain=batch.domain or settings.default_email_domain,
        role=batch.role or settings.default_role,
        permissions=batch.permissions if batch.permissions is not None else settings.default_permissions,
    ))

    return GenerateEmployeesResponse(
        message=result.message,
        employees=result.employees,
        errors=result.failures,
        summary=result.summary,
        batch_log_id=result.batch_log_id,
    )


@router.patch("/employees/{employee_id}/status", response_model=MessageResponse)
async def update_employee_status(
    employee_id: str,
    data: StatusUpdateRequest,
    store: RecordStore = Depends(get_record_store),
    directory: DirectoryService = Depends(get_directory),
):
    """Activate, deactivate or suspend an employee."""
    if data.status not in VALID_STATUSES:
        raise BadRequestException(detail="Invalid status. Use: active, inactive, or suspended")
    shop_owner_id = check_key(data.shop_owner_id, "shopOwnerId")

    employee = await get_owned_employee(store, employee_id, shop_owner_id, "modify")
    status = EmployeeStatus(data.status)

    await store.update_employee(employee.id, {
        "status": status,
        "last_updated": utcnow(),
        "status_updated_by": shop_owner_id,
    })
    await store.update_membership_status(employee.shop_id, employee.id, status)

    # Only active employees may sign in
    await directory.update_user(employee.id, disabled=status != EmployeeStatus.ACTIVE)

    logger.info("Employee %s status set to %s by %s", employee.id, status.value, shop_owner_id)
    return MessageResponse(message=f"Employee status updated to {status.value}")


@router.post("/employees/{employee_id}/reset-password", response_model=PasswordResetResponse)
async def reset_employee_password(
    employee_id: str,
    data: OwnerRequest,
    store: RecordStore = Depends(get_record_store),
    directory: DirectoryService = Depends(get_directory),
    settings: Settings = Depends(get_settings),
):
    """Issue a new one-time password for an employee."""
    shop_owner_id = check_key(data.shop_owner_id, "shopOwnerId")
    employee = await get_owned_employee(store, employee_id, shop_owner_id, "reset password for")

    new_password = generate_password(settings.password_length)
    await directory.update_user(employee.id, password=new_password)

    now = utcnow()
    await store.update_employee(employee.id, {
        "temporary_password": new_password,
        "password_reset_at": now,
        "password_reset_by": shop_owner_id,
        "last_updated": now,
    })

    logger.info("Password reset for employee %s by %s", employee.id, shop_owner_id)
    return PasswordResetResponse(message="Password reset successfully", new_password=new_password)


@router.patch("/employees/{employee_id}", response_model=EmployeeResponse)
async def update_employee_profile(
    employee_id: str,
    data: EmployeeProfileUpdate,
    store: RecordStore = Depends(get_record_store),
):
    """Update an employee's name, role or permissions."""
    shop_owner_id = check_key(data.shop_owner_id, "shopOwnerId")
    changes = data.model_dump(exclude_unset=True, exclude={"shop_owner_id"})
    changes = {field: value for field, value in changes.items() if value is not None}
    if not changes:
        raise BadRequestException(detail="Nothing to update: provide name, role or permissions")

    employee = await get_owned_employee(store, employee_id, shop_owner_id, "modify")

    changes["last_updated"] = utcnow()
    await store.update_employee(employee.id, changes)

    updated = await store.get_employee(employee.id)
    return EmployeeResponse(
        message="Employee updated successfully",
        data=EmployeeBase.model_validate(updated.model_dump()),
    )


@router.delete("/employees/{employee_id}", response_model=MessageResponse)
async def delete_employee(
    employee_id: str,
    data: Optional[OwnerRequest] = Body(None),
    owner_query: Optional[str] = Query(None, alias="shopOwnerId"),
    store: RecordStore = Depends(get_record_store),
    directory: DirectoryService = Depends(get_directory),
):
    """Delete an employee's identity, record and shop membership."""
    shop_owner_id = check_key(
        (data.shop_owner_id if data else None) or owner_query, "shopOwnerId"
    )
    employee = await get_owned_employee(store, employee_id, shop_owner_id, "delete")

    try:
        await directory.delete_user(employee.id)
    except IdentityNotFoundError:
        logger.warning("Directory identity %s already gone, removing records", employee.id)

    await store.delete_employee(employee.id)
    await store.remove_membership(employee.shop_id, employee.id)

    logger.info("Employee %s deleted by %s", employee.id, shop_owner_id)
    return MessageResponse(message="Employee account deleted successfully")
