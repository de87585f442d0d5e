"""Employee schemas."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.common import CamelModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EmployeeStatus(str, Enum):
    """Employee account status."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class EmployeeBase(CamelModel):
    """Employee fields safe to return to shop owners."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str
    name: str
    role: str = "employee"
    permissions: List[str] = Field(default_factory=list)
    shop_id: str
    shop_owner_id: str
    email: str
    employee_id: str
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    date_created: datetime = Field(default_factory=utcnow)
    last_updated: datetime = Field(default_factory=utcnow)
    created_by: Optional[str] = None
    is_batch_generated: bool = False
    status_updated_by: Optional[str] = None
    password_reset_at: Optional[datetime] = None
    password_reset_by: Optional[str] = None


class EmployeeRecord(EmployeeBase):
    """Stored employee record, including the temporary credential."""

    temporary_password: Optional[str] = None


class ShopMembership(CamelModel):
    """Entry in a shop's employee index."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    employee_id: str
    email: str
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    date_added: datetime = Field(default_factory=utcnow)


class StatusUpdateRequest(CamelModel):
    """Employee status update request."""

    status: Optional[str] = None
    shop_owner_id: Optional[str] = None


class OwnerRequest(CamelModel):
    """Request body carrying only the acting shop owner."""

    shop_owner_id: Optional[str] = None


class EmployeeProfileUpdate(CamelModel):
    """Employee profile update request."""

    shop_owner_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[str] = Field(None, min_length=1, max_length=50)
    permissions: Optional[List[str]] = None


class PasswordResetResponse(CamelModel):
    """Password reset response."""

    success: bool = True
    message: str
    new_password: str


class EmployeeResponse(CamelModel):
    """Single employee response."""

    success: bool = True
    message: str
    data: EmployeeBase
