from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field, model_validator


class OrderItem(BaseModel):
    """A single line of an order."""
    item: str = Field(description="Menu item name")
    quantity: int = Field(ge=1, description="Quantity ordered")
    price: int = Field(
        ge=0,
        validation_alias=AliasChoices("price", "pricePerItem"),
        description="Unit price in minor units",
    )
    total: int = Field(default=0, description="Line total in minor units (quantity * price)")

    @model_validator(mode="after")
    def _line_total(self) -> "OrderItem":
        self.total = self.quantity * self.price
        return self
