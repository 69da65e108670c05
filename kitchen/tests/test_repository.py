"""Unit tests for the DynamoDB order repository.

A hand-written fake stands in for the boto3 client so the tests can check
the exact attribute format, the table provisioning sequence and the
readiness polling budget without a DynamoDB endpoint.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from botocore.exceptions import ClientError

from kitchen.domain import Order, OrderItem, OrderRepositoryPort, OrderStatus
from kitchen.repository import (
    DynamoOrderRepository,
    TableProvisioningTimeout,
    item_to_order,
    order_to_item,
)

TABLE = "TestKitchenOrders"


def _client_error(code, op="DescribeTable"):
    return ClientError({"Error": {"Code": code, "Message": code}}, op)


class FakeDynamoClient:
    """Minimal boto3-like DynamoDB client.

    Args:
        describe_results: Outcomes of successive ``describe_table`` calls;
            each is a table status string or ``"NOT_FOUND"``. The last
            outcome repeats once the list is exhausted.
        page_size: Maximum items returned per ``scan`` page.
    """

    def __init__(self, describe_results=("ACTIVE",), page_size=100):
        self.describe_results = list(describe_results)
        self.describe_calls = 0
        self.create_calls = []
        self.page_size = page_size
        self.items = {}
        self.scan_calls = 0

    def describe_table(self, TableName):
        self.describe_calls += 1
        result = self.describe_results.pop(0) if len(self.describe_results) > 1 else self.describe_results[0]
        if result == "NOT_FOUND":
            raise _client_error("ResourceNotFoundException")
        if isinstance(result, Exception):
            raise result
        return {"Table": {"TableName": TableName, "TableStatus": result}}

    def create_table(self, **kwargs):
        self.create_calls.append(kwargs)
        return {"TableDescription": {"TableStatus": "CREATING"}}

    def put_item(self, TableName, Item):
        self.items[Item["id"]["S"]] = Item
        return {}

    def get_item(self, TableName, Key):
        item = self.items.get(Key["id"]["S"])
        return {"Item": item} if item else {}

    def scan(self, TableName, ExclusiveStartKey=None):
        self.scan_calls += 1
        keys = list(self.items)
        start = keys.index(ExclusiveStartKey["id"]["S"]) + 1 if ExclusiveStartKey else 0
        page = keys[start:start + self.page_size]
        resp = {"Items": [self.items[k] for k in page]}
        if start + self.page_size < len(keys):
            resp["LastEvaluatedKey"] = {"id": {"S": page[-1]}}
        return resp


@pytest.fixture
def sleeps(monkeypatch):
    calls = []
    monkeypatch.setattr("time.sleep", lambda s: calls.append(s), raising=True)
    return calls


def _order(**kw):
    base = dict(
        id=uuid.uuid4(),
        items=[
            OrderItem(uuid.uuid4(), "Burger", "Classic burger"),
            OrderItem(uuid.uuid4(), "Fries", "Large fries"),
        ],
        status=OrderStatus.IN_PROGRESS,
        generated_at=datetime.now(timezone.utc),
    )
    base.update(kw)
    return Order(**base)


# ---- Provisioning ----

def test_existing_table_is_not_created(sleeps):
    client = FakeDynamoClient(["ACTIVE"])
    DynamoOrderRepository(client, TABLE)
    assert client.describe_calls == 1
    assert client.create_calls == []
    assert sleeps == []


def test_missing_table_is_created_and_polled_until_active(sleeps):
    client = FakeDynamoClient(["NOT_FOUND", "NOT_FOUND", "CREATING", "ACTIVE"])
    DynamoOrderRepository(client, TABLE)

    assert client.create_calls == [{
        "TableName": TABLE,
        "KeySchema": [{"AttributeName": "id", "KeyType": "HASH"}],
        "AttributeDefinitions": [{"AttributeName": "id", "AttributeType": "S"}],
        "BillingMode": "PAY_PER_REQUEST",
    }]
    assert client.describe_calls == 4
    assert sleeps == [1.0, 1.0]


def test_table_active_on_last_attempt(sleeps):
    client = FakeDynamoClient(["NOT_FOUND"] + ["CREATING"] * 29 + ["ACTIVE"])
    DynamoOrderRepository(client, TABLE)
    assert len(sleeps) == 29


def test_table_never_active_times_out_naming_table(sleeps):
    client = FakeDynamoClient(["NOT_FOUND", "CREATING"])
    with pytest.raises(TableProvisioningTimeout) as e:
        DynamoOrderRepository(client, TABLE)
    assert TABLE in str(e.value)
    assert isinstance(e.value, TimeoutError)
    assert client.describe_calls == 31
    assert len(sleeps) == 30


def test_other_describe_errors_propagate(sleeps):
    client = FakeDynamoClient([_client_error("AccessDeniedException")])
    with pytest.raises(ClientError):
        DynamoOrderRepository(client, TABLE)
    assert client.create_calls == []


# ---- Marshalling ----

def test_put_writes_explicit_nulls_and_omits_delivered_at():
    item = order_to_item(_order())
    assert item["customerId"] == {"NULL": True}
    assert item["anonymousTag"] == {"NULL": True}
    assert "deliveredAt" not in item
    assert item["status"] == {"N": "1"}


def test_put_writes_all_attributes_when_present():
    o = _order(
        customer_id=uuid.uuid4(),
        anonymous_tag="table-7",
        delivered_at=datetime.now(timezone.utc) + timedelta(hours=1),
    )
    client = FakeDynamoClient()
    repo = DynamoOrderRepository(client, TABLE)

    assert repo.put(o) is o

    item = client.items[str(o.id)]
    assert set(item) == {"id", "status", "generatedAt", "customerId", "anonymousTag", "items", "deliveredAt"}
    assert item["generatedAt"] == {"S": o.generated_at.isoformat()}
    assert item["customerId"] == {"S": str(o.customer_id)}


@pytest.mark.parametrize("optional", [
    {},
    {"customer_id": uuid.uuid4()},
    {"anonymous_tag": "walk-in 12", "delivered_at": datetime(2026, 3, 1, 10, 30, 15, 123456, tzinfo=timezone.utc)},
])
def test_get_by_id_returns_what_was_put(optional):
    repo = DynamoOrderRepository(FakeDynamoClient(), TABLE)
    o = _order(**optional)
    repo.put(o)
    assert repo.get_by_id(o.id) == o


def test_missing_optional_attributes_read_as_absent():
    oid = uuid.uuid4()
    item = {
        "id": {"S": str(oid)},
        "status": {"N": "0"},
        "generatedAt": {"S": "2026-01-01T08:00:00.000001+00:00"},
        "items": {"S": "[]"},
    }
    out = item_to_order(item)
    assert out.id == oid
    assert out.status == OrderStatus.RECEIVED
    assert out.customer_id is None
    assert out.anonymous_tag is None
    assert out.delivered_at is None


def test_get_by_id_unknown_returns_none():
    repo = DynamoOrderRepository(FakeDynamoClient(), TABLE)
    assert repo.get_by_id(uuid.uuid4()) is None


# ---- Scan ----

def test_get_all_follows_pages():
    client = FakeDynamoClient(page_size=2)
    repo = DynamoOrderRepository(client, TABLE)
    ids = [repo.put(_order()).id for _ in range(5)]

    out = repo.get_all()

    assert sorted(o.id for o in out) == sorted(ids)
    assert client.scan_calls == 3


def test_put_overwrites_existing_record():
    repo = DynamoOrderRepository(FakeDynamoClient(), TABLE)
    o = _order()
    repo.put(o)
    o.status = OrderStatus.READY
    repo.put(o)

    out = repo.get_all()
    assert len(out) == 1
    assert out[0].status == OrderStatus.READY


def test_store_errors_propagate_unchanged():
    client = FakeDynamoClient()
    repo = DynamoOrderRepository(client, TABLE)

    def boom(**kw):
        raise _client_error("ProvisionedThroughputExceededException", "PutItem")

    client.put_item = boom
    with pytest.raises(ClientError) as e:
        repo.put(_order())
    assert e.value.response["Error"]["Code"] == "ProvisionedThroughputExceededException"


def test_dynamo_repository_implements_port():
    assert OrderRepositoryPort in DynamoOrderRepository.__mro__
