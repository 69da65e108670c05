import pytest

from kitchen.providers import get_order_service


@pytest.fixture(autouse=True)
def use_memory_store(monkeypatch):
    monkeypatch.setenv("KITCHEN_STORE_BACKEND", "memory")
    get_order_service.cache_clear()
    yield
    get_order_service.cache_clear()
