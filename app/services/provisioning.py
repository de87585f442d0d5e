"""Batch provisioning of employee accounts.

A run walks numeric suffixes upward from the shop's persisted counter and
turns each free suffix into ``employee<N>@<domain>``:

- an email that already has a directory identity is skipped, whether it is
  found by the lookup or reported by the create call;
- any other failure is recorded against its suffix and the walk goes on;
- an identity whose records could not be written is deleted again;
- at most ``max_attempts`` suffixes are examined per run.

The highest consumed suffix is written back to the shop counter and one
batch log entry is appended per run.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from app.core.exceptions import (
    IdentityAlreadyExistsError,
    IdentityNotFoundError,
    ProvisioningError,
    RecordStoreError,
)
from app.core.security import generate_password
from app.schemas.employee import EmployeeRecord, EmployeeStatus, ShopMembership, utcnow
from app.schemas.provisioning import (
    BatchLogEmployee,
    BatchLogEntry,
    CreatedEmployee,
    ProvisioningFailure,
    ProvisioningSummary,
)
from app.services.directory import DirectoryService
from app.services.record_store import RecordStore

logger = logging.getLogger(__name__)


def build_username(number: int) -> str:
    return f"employee{number}"


def build_employee_code(shop_id: str, number: int) -> str:
    """Human-facing code, e.g. ``EMPAB12007`` for shop ``...ab12`` and suffix 7."""
    return f"EMP{shop_id[-4:].upper()}{number:03d}"


@dataclass
class ProvisioningRequest:
    shop_id: str
    shop_owner_id: str
    count: int
    domain: str
    role: str
    permissions: List[str]


@dataclass
class ProvisioningResult:
    requested: int
    employees: List[CreatedEmployee] = field(default_factory=list)
    failures: List[ProvisioningFailure] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    exhausted: bool = False
    first_number: int = 1
    last_number: int = 0
    batch_log_id: Optional[str] = None

    @property
    def summary(self) -> ProvisioningSummary:
        return ProvisioningSummary(
            total_requested=self.requested,
            successfully_created=len(self.employees),
            failed=len(self.failures),
            skipped=len(self.skipped),
            exhausted=self.exhausted,
        )

    @property
    def message(self) -> str:
        message = (
            f"Successfully created {len(self.employees)} out of "
            f"{self.requested} employee accounts"
        )
        if self.exhausted:
            message += (
                f"; stopped after exhausting the suffix search at employee{self.last_number}"
            )
        return message


class BatchProvisioner:
    """Creates batches of employee accounts for a shop."""

    def __init__(
        self,
        directory: DirectoryService,
        store: RecordStore,
        max_attempts: int = 500,
        password_length: int = 8,
    ):
        self.directory = directory
        self.store = store
        self.max_attempts = max_attempts
        self.password_length = password_length

    async def provision(self, request: ProvisioningRequest) -> ProvisioningResult:
        last_number = await self.store.get_last_employee_number(request.shop_id)
        result = ProvisioningResult(
            requested=request.count,
            first_number=last_number + 1,
            last_number=last_number,
        )

        number = last_number + 1
        while len(result.employees) < request.count:
            if number - result.first_number >= self.max_attempts:
                result.exhausted = True
                logger.warning(
                    "Shop %s: no free suffix within %d attempts, stopping at %d",
                    request.shop_id, self.max_attempts, number - 1,
                )
                break

            result.last_number = number
            email = f"{build_username(number)}@{request.domain}"
            try:
                if await self.directory.get_user_by_email(email) is not None:
                    logger.info("Email %s already exists, trying next number", email)
                    result.skipped.append(number)
                else:
                    result.employees.append(await self._create_employee(request, number, email))
            except IdentityAlreadyExistsError:
                logger.info("Email conflict on %s, trying next number", email)
                result.skipped.append(number)
            except Exception as e:
                logger.exception("Failed to create employee %d for shop %s", number, request.shop_id)
                result.failures.append(ProvisioningFailure(employee_number=number, error=str(e)))
            number += 1

        if result.last_number > last_number:
            try:
                await self.store.advance_last_employee_number(request.shop_id, result.last_number)
            except RecordStoreError:
                # Next run re-probes these suffixes and skips them as collisions
                logger.exception("Failed to persist employee counter for shop %s", request.shop_id)

        result.batch_log_id = await self._append_log(request, result)
        logger.info(
            "Shop %s batch: requested=%d created=%d failed=%d skipped=%d exhausted=%s",
            request.shop_id, request.count, len(result.employees),
            len(result.failures), len(result.skipped), result.exhausted,
        )
        return result

    async def _create_employee(
        self, request: ProvisioningRequest, number: int, email: str
    ) -> CreatedEmployee:
        password = generate_password(self.password_length)
        user = await self.directory.create_user(
            email=email, password=password, email_verified=True, disabled=False
        )

        now = utcnow()
        record = EmployeeRecord(
            id=user.uid,
            name=f"Employee {number}",
            role=request.role,
            permissions=list(request.permissions),
            shop_id=request.shop_id,
            shop_owner_id=request.shop_owner_id,
            email=email,
            temporary_password=password,
            employee_id=build_employee_code(request.shop_id, number),
            status=EmployeeStatus.ACTIVE,
            date_created=now,
            last_updated=now,
            created_by=request.shop_owner_id,
            is_batch_generated=True,
        )
        try:
            await self.store.save_employee(record)
            await self.store.add_membership(
                request.shop_id,
                ShopMembership(employee_id=user.uid, email=email, date_added=now),
            )
        except Exception as e:
            await self._rollback(request.shop_id, user.uid, e)
            raise

        return CreatedEmployee(
            uid=user.uid,
            employee_id=record.employee_id,
            email=email,
            temporary_password=password,
        )

    async def _rollback(self, shop_id: str, uid: str, cause: Exception) -> None:
        """Undo a half-created employee so no orphaned identity remains."""
        logger.warning("Rolling back identity %s after failed record write: %s", uid, cause)
        try:
            await self.directory.delete_user(uid)
        except IdentityNotFoundError:
            pass
        except Exception as e:
            logger.error("Rollback of identity %s failed: %s", uid, e)
            raise ProvisioningError(f"{cause}; identity {uid} left orphaned") from e

        # Each store cleanup runs even if another one fails
        leftovers = []
        for step, call in (
            ("record", lambda: self.store.delete_employee(uid)),
            ("membership", lambda: self.store.remove_membership(shop_id, uid)),
        ):
            try:
                await call()
            except Exception as e:
                logger.error("Failed to remove %s of identity %s: %s", step, uid, e)
                leftovers.append(f"{step} ({e})")
        if leftovers:
            raise ProvisioningError(
                f"{cause}; identity {uid} deleted but could not remove {', '.join(leftovers)}"
            )

    async def _append_log(
        self, request: ProvisioningRequest, result: ProvisioningResult
    ) -> Optional[str]:
        entry = BatchLogEntry(
            shop_owner_id=request.shop_owner_id,
            count_requested=request.count,
            count_created=len(result.employees),
            count_failed=len(result.failures),
            count_skipped=len(result.skipped),
            exhausted=result.exhausted,
            employees=[
                BatchLogEmployee(email=emp.email, employee_id=emp.employee_id)
                for emp in result.employees
            ],
            errors=list(result.failures),
        )
        try:
            return await self.store.append_batch_log(request.shop_id, entry)
        except RecordStoreError:
            # Created credentials are only returned once; keep the response
            logger.exception("Failed to append batch log for shop %s", request.shop_id)
            return None
