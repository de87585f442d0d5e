"""Common schemas for API responses."""

from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ListResponse(BaseModel, Generic[DataT]):
    """List response schema."""

    success: bool = True
    data: List[DataT]


class MessageResponse(BaseModel):
    """Response with message only."""

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Error envelope returned by the exception handlers."""

    success: bool = False
    error: str
