from __future__ import annotations

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from ._coerce import LooseDate, Text
from .order_items import OrderItem

OrderStatus = Literal["PENDING", "COMPLETED"]

# Fields a completed order keeps for good.
FROZEN_WHEN_COMPLETED = frozenset({"items", "order_total"})


class OrderLifecycleError(ValueError):
    """Raised when a change would move a completed order backwards or edit its items or total."""


class Order(BaseModel):
    """An order as stored in the orders table."""
    id: int = Field(description="Unique order identifier")
    date: LooseDate = Field(default=None, description="Trading day of the order")
    customer_description: Text = Field(default="", description="Free-text customer note")
    items: List[OrderItem] = Field(default_factory=list, description="Ordered line items")
    order_total: int = Field(default=0, description="Order total in minor units")
    status: OrderStatus = Field(default="PENDING", description="Order status")
    created_at: dt.datetime = Field(description="Creation timestamp")
    updated_at: Optional[dt.datetime] = Field(default=None, description="Last update timestamp")

    @property
    def items_total(self) -> int:
        return sum(line.total for line in self.items)

    @property
    def has_consistent_total(self) -> bool:
        return self.items_total == self.order_total

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)

    def with_status(self, status: OrderStatus, now: Optional[dt.datetime] = None) -> Order:
        """Return a copy with the new status. Completed orders cannot go back to pending."""
        if self.status == "COMPLETED" and status != "COMPLETED":
            raise OrderLifecycleError(f"Order {self.id} is already completed")
        return self.model_copy(update={"status": status, "updated_at": now or dt.datetime.now()})

    def apply_update(self, update: OrderUpdate, now: Optional[dt.datetime] = None) -> Order:
        """Return a copy with the set fields of ``update`` applied.

        Replacing the items recomputes ``order_total`` unless the update carries one.
        """
        changes = {
            name: getattr(update, name)
            for name in update.model_fields_set
            if getattr(update, name) is not None
        }
        frozen = sorted(FROZEN_WHEN_COMPLETED.intersection(changes))
        if self.status == "COMPLETED" and frozen:
            raise OrderLifecycleError(f"Completed order {self.id} cannot change {', '.join(frozen)}")

        status = changes.pop("status", self.status)
        updated = self.with_status(status, now)
        if "items" in changes and "order_total" not in changes:
            changes["order_total"] = sum(line.total for line in changes["items"])
        return updated.model_copy(update=changes)


class OrderCreate(BaseModel):
    """Payload for a new order. The total is derived from the items when omitted."""
    date: dt.date = Field(default_factory=dt.date.today, description="Trading day of the order")
    customer_description: str = Field(default="", description="Free-text customer note")
    items: List[OrderItem] = Field(min_length=1, description="Ordered line items")
    order_total: Optional[int] = Field(default=None, ge=0, description="Order total in minor units")
    status: OrderStatus = Field(default="PENDING", description="Initial status")

    @model_validator(mode="after")
    def _fill_total(self) -> OrderCreate:
        if self.order_total is None:
            self.order_total = sum(line.total for line in self.items)
        return self


class OrderUpdate(BaseModel):
    """Partial order update; only fields that are set are written."""
    date: Optional[dt.date] = None
    customer_description: Optional[str] = None
    items: Optional[List[OrderItem]] = None
    order_total: Optional[int] = Field(default=None, ge=0)
    status: Optional[OrderStatus] = None
