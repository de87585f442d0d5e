"""Database models module."""

from app.models.base import Base, TimestampMixin
from app.models.shop import EmployeeCounter, Shop
from app.models.employee import Employee, ShopEmployee
from app.models.batch_log import EmployeeBatchLog

__all__ = [
    "Base",
    "TimestampMixin",
    "Shop",
    "EmployeeCounter",
    "Employee",
    "ShopEmployee",
    "EmployeeBatchLog",
]
