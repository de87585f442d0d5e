"""Shop-scoped read endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import check_key, get_record_store, require_shop_owner
from app.core.exceptions import BadRequestException
from app.schemas.common import ListResponse
from app.schemas.employee import EmployeeBase
from app.schemas.provisioning import BatchLogEntry
from app.services.record_store import RecordStore

router = APIRouter()


@router.get("/{shop_id}/employees", response_model=ListResponse[EmployeeBase])
async def list_shop_employees(
    shop_id: str,
    shop_owner_id: Optional[str] = Query(None, alias="shopOwnerId"),
    store: RecordStore = Depends(get_record_store),
):
    """List a shop's employees without their temporary passwords."""
    if not shop_owner_id:
        raise BadRequestException(detail="shopOwnerId query parameter is required")
    check_key(shop_id, "shopId")
    check_key(shop_owner_id, "shopOwnerId")

    await require_shop_owner(store, shop_owner_id, "Unauthorized access to shop employees")

    records = await store.list_employees(shop_id)
    employees = [
        EmployeeBase.model_validate(record.model_dump(exclude={"temporary_password"}))
        for record in records
        if record.shop_owner_id == shop_owner_id
    ]
    return ListResponse[EmployeeBase](data=employees)


@router.get("/{shop_id}/batch-logs", response_model=ListResponse[BatchLogEntry])
async def list_shop_batch_logs(
    shop_id: str,
    shop_owner_id: Optional[str] = Query(None, alias="shopOwnerId"),
    store: RecordStore = Depends(get_record_store),
):
    """List the provisioning runs recorded for a shop."""
    if not shop_owner_id:
        raise BadRequestException(detail="shopOwnerId query parameter is required")
    check_key(shop_id, "shopId")
    check_key(shop_owner_id, "shopOwnerId")

    await require_shop_owner(store, shop_owner_id, "Unauthorized access to shop batch logs")

    logs = await store.list_batch_logs(shop_id)
    return ListResponse[BatchLogEntry](
        data=[log for log in logs if log.shop_owner_id == shop_owner_id]
    )
