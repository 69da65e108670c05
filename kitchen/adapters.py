"""In-process adapter for the order repository port.

``InMemoryOrderRepository`` implements ``OrderRepositoryPort`` without any
network calls. It is intended for unit tests and local development where
DynamoDB is not available.
"""

import copy
import threading
import uuid
from typing import Dict, List, Optional

from .domain import Order, OrderRepositoryPort


class InMemoryOrderRepository(OrderRepositoryPort):
    """Dict-backed implementation of ``OrderRepositoryPort``.

    Orders are copied on the way in and out so callers cannot mutate the
    stored records, which mirrors how a remote store behaves.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._orders: Dict[uuid.UUID, Order] = {}

    def put(self, order: Order) -> Order:
        with self._lock:
            self._orders[order.id] = copy.deepcopy(order)
        return order

    def get_by_id(self, order_id: uuid.UUID) -> Optional[Order]:
        with self._lock:
            stored = self._orders.get(order_id)
            return copy.deepcopy(stored) if stored is not None else None

    def get_all(self) -> List[Order]:
        with self._lock:
            return [copy.deepcopy(o) for o in self._orders.values()]
