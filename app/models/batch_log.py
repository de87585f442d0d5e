"""Batch provisioning log model."""

from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import JSON, Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class EmployeeBatchLog(Base):
    """Append-only audit entry for one provisioning run."""

    __tablename__ = "employee_batch_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    shop_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    shop_owner_id: Mapped[str] = mapped_column(String(128), nullable=False)
    count_requested: Mapped[int] = mapped_column(Integer, nullable=False)
    count_created: Mapped[int] = mapped_column(Integer, nullable=False)
    count_failed: Mapped[int] = mapped_column(Integer, nullable=False)
    count_skipped: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    exhausted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    employees: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    errors: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
