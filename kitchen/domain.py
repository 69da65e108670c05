"""Domain models, ports and service for kitchen orders.

This module contains simple dataclasses for orders and their embedded
items, the protocol (port) describing order persistence, and the domain
service that drives an order through the production lifecycle.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import List, Optional, Protocol

logger = logging.getLogger("kitchen.domain")


# ---- Enums ----
class OrderStatus(IntEnum):
    """Production status of an order.

    Values are persisted as numbers, so the integer of each member is part
    of the storage format and must not be reordered.
    """

    RECEIVED = 0
    IN_PROGRESS = 1
    READY = 2
    COMPLETED = 3


# ---- Entities / DTOs ----
@dataclass(frozen=True)
class OrderItem:
    """A product line embedded in an order.

    Attributes:
        id: Identifier of the item, unique within its order.
        name: Display name.
        description: Display description.
    """

    id: uuid.UUID
    name: str
    description: str


@dataclass
class Order:
    """Container for order data.

    Attributes:
        id: Identifier assigned on creation, or None before that.
        items: Items that make up the order, serialized together with it.
        status: Current OrderStatus.
        generated_at: Creation timestamp (UTC).
        delivered_at: Set when the order enters COMPLETED, otherwise None.
        customer_id: Known customer, or None for anonymous orders.
        anonymous_tag: Free-text identification for anonymous orders.
    """

    id: Optional[uuid.UUID]
    items: List[OrderItem] = field(default_factory=list)
    status: OrderStatus = OrderStatus.RECEIVED
    generated_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    customer_id: Optional[uuid.UUID] = None
    anonymous_tag: Optional[str] = None


# ---- Ports (DIP) ----
class OrderRepositoryPort(Protocol):
    """Port describing order persistence used by the domain.

    Implementers store whole orders keyed by ``Order.id``. There is a
    single write operation: ``put`` overwrites any previous record.
    """

    def put(self, order: Order) -> Order:
        """Write the full record for ``order`` and return it."""
        raise NotImplementedError()

    def get_by_id(self, order_id: uuid.UUID) -> Optional[Order]:
        """Return the stored order, or None when the id is unknown."""
        raise NotImplementedError()

    def get_all(self) -> List[Order]:
        """Return every stored order, in no particular order."""
        raise NotImplementedError()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---- Domain service ----
class OrderService:
    """Domain service for the kitchen production lifecycle.

    The service assigns identity and timestamps and applies the side effects
    of status changes. It does not restrict which transitions are allowed:
    ordering policy belongs to the caller driving the kitchen workflow.
    """

    def __init__(self, repository: OrderRepositoryPort):
        """Initialize the service with its persistence port.

        Args:
            repository: OrderRepositoryPort used to store orders.
        """
        self.repository = repository

    def create_order(self, order: Order) -> Order:
        """Register a new order.

        Any ``id`` or ``generated_at`` set by the caller is replaced.

        Args:
            order: Order to register.

        Returns:
            The stored Order.
        """
        order.id = uuid.uuid4()
        order.generated_at = _utcnow()
        stored = self.repository.put(order)
        logger.info("order created", extra={"order_id": str(stored.id)})
        return stored

    def update_status(self, order_id: uuid.UUID, status: OrderStatus) -> Optional[Order]:
        """Move an order to ``status``.

        Entering COMPLETED stamps ``delivered_at`` with the current time,
        also when the order was already completed. Any other status leaves
        ``delivered_at`` as stored, so moving back from COMPLETED keeps the
        previous delivery time.

        Args:
            order_id: Identifier of the order to update.
            status: New status; any status may follow any other.

        Returns:
            The updated Order, or None when no order has that id (in which
            case nothing is written).
        """
        order = self.repository.get_by_id(order_id)
        if order is None:
            return None

        order.status = status
        if status == OrderStatus.COMPLETED:
            order.delivered_at = _utcnow()

        stored = self.repository.put(order)
        logger.info("order status updated", extra={"order_id": str(order_id), "status": status.name})
        return stored

    def get_order(self, order_id: uuid.UUID) -> Optional[Order]:
        return self.repository.get_by_id(order_id)

    def list_queue(self) -> List[Order]:
        """Return the production queue: every stored order, unsorted."""
        return self.repository.get_all()
