"""Service provider helpers for wiring OrderService with its repository.

``get_order_service`` returns a process-wide ``OrderService``. With the
default ``dynamodb`` backend the service is backed by
``DynamoOrderRepository``, whose construction provisions the table. The
``memory`` backend uses the in-process adapter, suitable for tests and
local development without DynamoDB.
"""

import logging
from functools import lru_cache

import boto3

from .adapters import InMemoryOrderRepository
from .domain import OrderService
from .repository import DynamoOrderRepository
from .settings import Settings, load_settings

logger = logging.getLogger("kitchen.providers")


def build_dynamodb_client(settings: Settings):
    """Create a low-level DynamoDB client from settings.

    When a custom endpoint is configured without credentials, placeholder
    ``local`` credentials are used, which DynamoDB Local accepts.

    Args:
        settings: Loaded service settings.

    Returns:
        A boto3 DynamoDB client.
    """
    access_key = settings.access_key_id
    secret_key = settings.secret_access_key
    if settings.endpoint_url and not access_key:
        access_key, secret_key = "local", "local"
    return boto3.client(
        "dynamodb",
        endpoint_url=settings.endpoint_url,
        region_name=settings.region,
        aws_access_key_id=access_key,
        aws_secret_access_key=secret_key,
    )


@lru_cache(maxsize=1)
def get_order_service() -> OrderService:
    """Return the configured OrderService instance.

    The repository is built on the first call only, so table provisioning
    runs once per process.

    Returns:
        OrderService: A service instance with the selected repository.
    """
    settings = load_settings()
    if settings.store_backend == "memory":
        logger.info("using in-memory order store")
        return OrderService(InMemoryOrderRepository())
    if settings.store_backend != "dynamodb":
        raise ValueError(f"Unknown store backend: {settings.store_backend}")

    repository = DynamoOrderRepository(build_dynamodb_client(settings), settings.table_name)
    return OrderService(repository)
