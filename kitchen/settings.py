"""Runtime configuration read from environment variables.

Values are read when ``load_settings`` is called, so tests can change the
environment before the service is wired.
"""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_TABLE_NAME = "KitchenOrders"


@dataclass(frozen=True)
class Settings:
    """Configuration for the kitchen service.

    Attributes:
        store_backend: ``"dynamodb"`` or ``"memory"``.
        table_name: DynamoDB table holding the orders.
        region: AWS region of the table.
        endpoint_url: Custom endpoint such as DynamoDB Local, or None.
        access_key_id: Explicit access key, or None to use the default chain.
        secret_access_key: Explicit secret key, or None.
        log_level: Level for the ``kitchen`` logger.
    """

    store_backend: str
    table_name: str
    region: str
    endpoint_url: Optional[str]
    access_key_id: Optional[str]
    secret_access_key: Optional[str]
    log_level: str


def load_settings() -> Settings:
    return Settings(
        store_backend=os.getenv("KITCHEN_STORE_BACKEND", "dynamodb").lower(),
        table_name=os.getenv("KITCHEN_ORDERS_TABLE") or DEFAULT_TABLE_NAME,
        region=os.getenv("AWS_REGION", "us-east-1"),
        endpoint_url=os.getenv("DYNAMODB_ENDPOINT_URL") or None,
        access_key_id=os.getenv("AWS_ACCESS_KEY_ID") or None,
        secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
