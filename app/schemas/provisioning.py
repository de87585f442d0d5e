"""Batch provisioning schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.schemas.common import CamelModel
from app.schemas.employee import utcnow


# Dot-separated hostname labels, e.g. "shop.example.com"
DOMAIN_PATTERN = r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)+$"


class EmployeeBatchData(CamelModel):
    """Parameters of a batch of generated employees."""

    count: int = Field(1, ge=1)
    domain: Optional[str] = Field(None, max_length=253, pattern=DOMAIN_PATTERN)
    role: Optional[str] = Field(None, min_length=1, max_length=50)
    permissions: Optional[List[str]] = None


class GenerateEmployeesRequest(CamelModel):
    """Batch generation request."""

    shop_id: Optional[str] = None
    shop_owner_id: Optional[str] = None
    employee_data: EmployeeBatchData = Field(default_factory=EmployeeBatchData)


class CreatedEmployee(CamelModel):
    """Credentials of one generated employee, returned exactly once."""

    uid: str
    employee_id: str
    email: str
    temporary_password: str
    status: str = "created"


class ProvisioningFailure(CamelModel):
    """A suffix whose account could not be created."""

    employee_number: int
    error: str


class ProvisioningSummary(CamelModel):
    """Counts for one provisioning run."""

    total_requested: int
    successfully_created: int
    failed: int
    skipped: int = 0
    exhausted: bool = False


class GenerateEmployeesResponse(CamelModel):
    """Batch generation response."""

    success: bool = True
    message: str
    employees: List[CreatedEmployee]
    errors: List[ProvisioningFailure]
    summary: ProvisioningSummary
    batch_log_id: Optional[str] = None


class BatchLogEmployee(CamelModel):
    """Employee summary kept in a batch log."""

    email: str
    employee_id: str


class BatchLogEntry(CamelModel):
    """Audit entry for one provisioning run."""

    timestamp: datetime = Field(default_factory=utcnow)
    shop_owner_id: str
    count_requested: int
    count_created: int
    count_failed: int
    count_skipped: int = 0
    exhausted: bool = False
    employees: List[BatchLogEmployee] = Field(default_factory=list)
    errors: List[ProvisioningFailure] = Field(default_factory=list)
