from __future__ import annotations

from pydantic import BaseModel, Field


class MenuItem(BaseModel):
    """Static menu entry used to price order lines."""
    id: str = Field(description="Menu item identifier")
    name: str = Field(description="Display name, also used as the order line name")
    default_price: int = Field(ge=0, description="Default unit price in minor units")
    category: str = Field(description="Menu section")
    is_active: bool = Field(default=True, description="Whether the item can be ordered")
