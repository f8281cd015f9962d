from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class DataResult(BaseModel, Generic[T]):
    """Outcome of a data access call.

    ``ok`` with empty ``data`` means the store had no matching records;
    a set ``error`` means the request itself failed.
    """
    data: Optional[T] = Field(default=None, description="Returned payload")
    error: Optional[str] = Field(default=None, description="Failure message")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T) -> "DataResult[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, error: str) -> "DataResult[T]":
        return cls(error=error)
