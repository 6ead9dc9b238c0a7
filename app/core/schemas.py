"""
Response envelope shared by every endpoint.
"""
from typing import Generic, TypeVar
from pydantic import BaseModel


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard `{success, data?, message?}` response body."""
    success: bool = True
    data: T | None = None
    message: str | None = None
