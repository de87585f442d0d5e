"""API v1 router aggregation."""

from fastapi import APIRouter

from app.api.v1.endpoints import employees, shops

api_router = APIRouter()

api_router.include_router(employees.router, tags=["Employees"])
api_router.include_router(shops.router, prefix="/shop", tags=["Shops"])
