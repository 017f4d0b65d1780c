"""
Car Doctor Backend — Order Schemas
====================================

What:  Request/response contracts for the orders collection.

Order lifecycle:
    POST /orders           → inserted with status=false
    PUT  /orders/status    → status=true (the only mutation)
    DELETE /orders/{id}    → removed

Body policy:
    Orders carry free-form descriptive fields from the booking form
    (customerName, date, img, price, service_id, ...) so extra keys are
    allowed, but keys that would steer the store (`_id`, `$set`, ...)
    are rejected before the document is built.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator


class OrderCreate(BaseModel):
    """Body of POST /orders."""
    email: str = Field(min_length=1, description="Email of the customer placing the order")
    service: str = Field(min_length=1, description="Name or reference of the booked service")
    status: bool = Field(default=False, description="Confirmation state; new orders are unconfirmed")

    model_config = {"extra": "allow"}

    @model_validator(mode="before")
    @classmethod
    def reject_reserved_keys(cls, data: Any) -> Any:
        """Refuses `_id` and operator-looking keys anywhere at the top level."""
        if isinstance(data, dict):
            reserved = sorted(
                key for key in data
                if isinstance(key, str) and (key == "_id" or key.startswith("$") or "." in key)
            )
            if reserved:
                raise ValueError(f"Order body may not contain reserved keys: {reserved}")
        return data

    def to_document(self) -> dict:
        """Flattens declared and extra fields into the document to insert."""
        return self.model_dump()


class OrderStatusUpdate(BaseModel):
    """Body of PUT /orders/status."""
    id: str = Field(min_length=1, description="Id of the order to confirm")


class Order(BaseModel):
    """An order as stored, with `_id` rendered as a hex string. Only `_id` and `email` are checked."""
    id: str = Field(alias="_id")
    email: str
    # Returned as stored, e.g. "pending" from documents written elsewhere.
    status: Any = False

    model_config = {"extra": "allow", "populate_by_name": True}
