"""Pydantic schemas for kitchen orders.

This module exposes the request validation schemas used by the API and
the read schema used to render orders in responses.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .domain import Order, OrderItem, OrderStatus


class OrderItemIn(BaseModel):
    """Input schema for a single product line.

    Attributes:
        id: Item identifier; generated when omitted.
        name: Product name, must not be blank.
        description: Product description, must not be blank.
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    description: str

    @field_validator("name", "description")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty or whitespace-only text.

        Args:
            v: Raw value from the incoming payload.

        Returns:
            The value unchanged.

        Raises:
            ValueError: When the value is empty or only whitespace.
        """
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v


class CreateOrderDTO(BaseModel):
    """Schema for creating an order.

    Attributes:
        items: At least one ``OrderItemIn``.
        customer_id: Known customer, if any.
        anonymous_tag: Free-text identification for anonymous orders.

    Identity and timestamps are assigned by the service; any ``id`` or
    ``generated_at`` in the payload is ignored.
    """

    items: list[OrderItemIn]
    customer_id: Optional[uuid.UUID] = None
    anonymous_tag: Optional[str] = None

    @field_validator("items")
    @classmethod
    def validate_items(cls, v: list[OrderItemIn]) -> list[OrderItemIn]:
        """Require at least one item.

        Raises:
            ValueError: When the list is empty.
        """
        if not v:
            raise ValueError("Order must contain at least one item.")
        return v

    @field_validator("anonymous_tag")
    @classmethod
    def validate_anonymous_tag(cls, v: Optional[str]) -> Optional[str]:
        """Normalize blank tags to None.

        Storage writes an empty tag as NULL, so a blank tag is treated as
        no tag from the start.
        """
        if v is None or not v.strip():
            return None
        return v

    def to_domain(self) -> Order:
        return Order(
            id=None,
            items=[OrderItem(id=i.id, name=i.name, description=i.description) for i in self.items],
            customer_id=self.customer_id,
            anonymous_tag=self.anonymous_tag,
        )


class UpdateStatusDTO(BaseModel):
    """Schema for a status change.

    Attributes:
        status: Target status, as its number (0-3) or its name
            (e.g. ``"InProgress"``, ``"IN_PROGRESS"``).
    """

    status: OrderStatus

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v):
        """Accept status names in addition to numbers.

        Args:
            v: Raw status value from the payload.

        Returns:
            The matching OrderStatus, or the number for numeric input.

        Raises:
            ValueError: When a name does not match any status.
        """
        if isinstance(v, str):
            if v.isdigit():
                return int(v)
            key = v.replace("_", "").replace("-", "").upper()
            for member in OrderStatus:
                if member.name.replace("_", "") == key:
                    return member
            raise ValueError("Unknown status")
        return v


class OrderItemOut(BaseModel):
    id: uuid.UUID
    name: str
    description: str


class OrderReadDTO(BaseModel):
    """Response schema for an order."""

    id: uuid.UUID
    status: OrderStatus
    status_name: str
    generated_at: datetime
    delivered_at: Optional[datetime] = None
    customer_id: Optional[uuid.UUID] = None
    anonymous_tag: Optional[str] = None
    items: list[OrderItemOut]

    @classmethod
    def from_domain(cls, order: Order) -> "OrderReadDTO":
        return cls(
            id=order.id,
            status=order.status,
            status_name=order.status.name,
            generated_at=order.generated_at,
            delivered_at=order.delivered_at,
            customer_id=order.customer_id,
            anonymous_tag=order.anonymous_tag,
            items=[OrderItemOut(id=i.id, name=i.name, description=i.description) for i in order.items],
        )
