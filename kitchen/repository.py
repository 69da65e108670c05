"""DynamoDB repository for kitchen orders.

This module persists orders in a single DynamoDB table keyed by the order
id, using the low-level boto3 client so the attribute format is explicit.
Items are stored as one JSON document inside the order record rather than
as separate rows.

The repository provisions its table on construction: when the table does
not exist it is created with on-demand billing and the constructor blocks
until DynamoDB reports it ACTIVE. This happens once per instance, not on
every call.
"""

import json
import logging
import time
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from botocore.exceptions import ClientError

from .domain import Order, OrderItem, OrderRepositoryPort, OrderStatus

logger = logging.getLogger("kitchen.repository")

AttributeMap = Dict[str, Dict[str, Any]]

NULL = {"NULL": True}


class TableProvisioningTimeout(TimeoutError):
    """Raised when a newly created table does not become ACTIVE in time."""

    def __init__(self, table_name: str):
        super().__init__(f"Table {table_name} did not become active within the expected time.")
        self.table_name = table_name


def _is_not_found(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") == "ResourceNotFoundException"


# ---- Marshalling ----

def _items_to_json(items: List[OrderItem]) -> str:
    return json.dumps(
        [{"id": str(i.id), "name": i.name, "description": i.description} for i in items]
    )


def _items_from_json(body: str) -> List[OrderItem]:
    return [
        OrderItem(id=uuid.UUID(i["id"]), name=i["name"], description=i["description"])
        for i in json.loads(body)
    ]


def _optional_s(item: AttributeMap, name: str) -> Optional[str]:
    """Read a string attribute that may be missing or explicitly NULL."""
    value = item.get(name)
    if not value or value.get("NULL"):
        return None
    return value["S"]


def order_to_item(order: Order) -> AttributeMap:
    """Map an Order to DynamoDB attribute values.

    ``customerId`` and ``anonymousTag`` are always written (as NULL when
    absent), while ``deliveredAt`` is only written when set.

    Args:
        order: Order with an assigned id and creation timestamp.

    Returns:
        dict: Attribute map suitable for ``put_item``.
    """
    item: AttributeMap = {
        "id": {"S": str(order.id)},
        "status": {"N": str(int(order.status))},
        "generatedAt": {"S": order.generated_at.isoformat()},
        "customerId": {"S": str(order.customer_id)} if order.customer_id else NULL,
        "anonymousTag": {"S": order.anonymous_tag} if order.anonymous_tag else NULL,
        "items": {"S": _items_to_json(order.items)},
    }
    if order.delivered_at is not None:
        item["deliveredAt"] = {"S": order.delivered_at.isoformat()}
    return item


def item_to_order(item: AttributeMap) -> Order:
    """Build an Order from DynamoDB attribute values.

    Optional attributes that are missing are treated like explicit NULLs,
    since older records may not carry them.

    Args:
        item: Attribute map as returned by ``get_item`` or ``scan``.

    Returns:
        Order: The domain object.
    """
    customer_id = _optional_s(item, "customerId")
    delivered_at = _optional_s(item, "deliveredAt")
    return Order(
        id=uuid.UUID(item["id"]["S"]),
        status=OrderStatus(int(item["status"]["N"])),
        generated_at=datetime.fromisoformat(item["generatedAt"]["S"]),
        delivered_at=datetime.fromisoformat(delivered_at) if delivered_at else None,
        customer_id=uuid.UUID(customer_id) if customer_id else None,
        anonymous_tag=_optional_s(item, "anonymousTag"),
        items=_items_from_json(item["items"]["S"]),
    )


class DynamoOrderRepository(OrderRepositoryPort):
    """Repository that persists Order domain objects in DynamoDB.

    Store errors other than the expected "table not found" during
    provisioning are not caught here; they propagate to the caller as
    ``botocore`` exceptions.
    """

    def __init__(self, client, table_name: str, poll_interval: float = 1.0, max_attempts: int = 30):
        """Bind the repository to a table, creating it if needed.

        Args:
            client: boto3 DynamoDB client.
            table_name: Name of the orders table.
            poll_interval: Seconds to sleep between readiness checks.
            max_attempts: Readiness checks before giving up.

        Raises:
            TableProvisioningTimeout: If a created table is not ACTIVE after
                ``max_attempts`` checks.
        """
        self.client = client
        self.table_name = table_name
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self._ensure_table()

    # ---- Provisioning ----

    def _ensure_table(self) -> None:
        try:
            self.client.describe_table(TableName=self.table_name)
            return
        except ClientError as e:
            if not _is_not_found(e):
                raise

        logger.info("creating table", extra={"table": self.table_name})
        self.client.create_table(
            TableName=self.table_name,
            KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        self._wait_until_active()

    def _wait_until_active(self) -> None:
        """Poll ``describe_table`` at a fixed interval until ACTIVE.

        A "not found" answer means the table is still being created.

        Raises:
            TableProvisioningTimeout: When the attempt budget runs out.
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                resp = self.client.describe_table(TableName=self.table_name)
                if resp["Table"]["TableStatus"] == "ACTIVE":
                    logger.info("table active", extra={"table": self.table_name, "attempt": attempt})
                    return
            except ClientError as e:
                if not _is_not_found(e):
                    raise
            time.sleep(self.poll_interval)

        logger.error("table not active", extra={"table": self.table_name, "attempts": self.max_attempts})
        raise TableProvisioningTimeout(self.table_name)

    # ---- Operations ----

    def put(self, order: Order) -> Order:
        """Write the full record for ``order``, replacing any previous one.

        Args:
            order: Order to store.

        Returns:
            Order: The same order.
        """
        self.client.put_item(TableName=self.table_name, Item=order_to_item(order))
        return order

    def get_by_id(self, order_id: uuid.UUID) -> Optional[Order]:
        """Fetch an order by id.

        Returns:
            Order | None: The order, or None when no record exists.
        """
        resp = self.client.get_item(TableName=self.table_name, Key={"id": {"S": str(order_id)}})
        item = resp.get("Item")
        if not item:
            return None
        return item_to_order(item)

    def get_all(self) -> List[Order]:
        """Scan the whole table.

        Every page is read before returning, so the cost grows with the
        size of the table. DynamoDB gives no ordering guarantee.

        Returns:
            list[Order]: All stored orders.
        """
        orders: List[Order] = []
        kwargs: Dict[str, Any] = {"TableName": self.table_name}
        while True:
            resp = self.client.scan(**kwargs)
            orders.extend(item_to_order(i) for i in resp.get("Items", []))
            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                return orders
            kwargs["ExclusiveStartKey"] = last_key
