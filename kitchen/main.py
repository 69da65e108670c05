"""Kitchen order queue API built with FastAPI.

This module exposes endpoints to register orders, move them through the
production lifecycle and read the production queue. Validation is
performed with Pydantic models, while lifecycle rules and persistence are
delegated to ``OrderService`` obtained from ``providers.get_order_service``.
"""

import uuid
from typing import List

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .domain import OrderService
from .logging_filters import configure_logging
from .middleware import add_request_id
from .providers import get_order_service
from .schemas import CreateOrderDTO, OrderReadDTO, UpdateStatusDTO
from .settings import load_settings

logger = configure_logging(load_settings().log_level)

app = FastAPI(title="Kitchen Service")
app.middleware("http")(add_request_id)


@app.on_event("startup")
def _startup_store():
    # builds the repository; a table that never becomes ACTIVE aborts startup
    get_order_service()


@app.exception_handler(RequestValidationError)
async def _validation_error(_request: Request, exc: RequestValidationError):
    return JSONResponse({"detail": _error_list(exc)}, status_code=status.HTTP_400_BAD_REQUEST)


@app.exception_handler(ClientError)
@app.exception_handler(BotoCoreError)
async def _store_error(_request: Request, exc: Exception):
    logger.error("store call failed", exc_info=exc)
    return JSONResponse({"detail": "STORE_UNAVAILABLE"}, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)


def _error_list(exc: RequestValidationError) -> list:
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]


def _not_found() -> JSONResponse:
    return JSONResponse({"detail": "NOT_FOUND"}, status_code=status.HTTP_404_NOT_FOUND)


@app.get("/health")
def health():
    """Liveness/health probe endpoint.

    Returns:
        dict: A small JSON payload indicating service health.
    """
    return {"ok": True}


@app.post("/orders", response_model=OrderReadDTO, status_code=status.HTTP_201_CREATED)
def create_order(req: CreateOrderDTO, service: OrderService = Depends(get_order_service)):
    """Register a new order in the production queue.

    Args:
        req: Validated body with at least one item.
        service: Injected OrderService.

    Returns:
        OrderReadDTO: The stored order with its assigned id and timestamp.
    """
    order = service.create_order(req.to_domain())
    return OrderReadDTO.from_domain(order)


@app.put("/orders/{order_id}/status", response_model=OrderReadDTO)
def update_order_status(
    order_id: uuid.UUID,
    req: UpdateStatusDTO,
    service: OrderService = Depends(get_order_service),
):
    """Move an order to another status.

    Returns:
        OrderReadDTO: The updated order, or 404 when the id is unknown.
    """
    order = service.update_status(order_id, req.status)
    if order is None:
        return _not_found()
    return OrderReadDTO.from_domain(order)


@app.get("/orders/queue", response_model=List[OrderReadDTO])
def production_queue(service: OrderService = Depends(get_order_service)):
    """Return every stored order, in no particular order."""
    return [OrderReadDTO.from_domain(o) for o in service.list_queue()]


@app.get("/orders/{order_id}", response_model=OrderReadDTO)
def retrieve_order(order_id: uuid.UUID, service: OrderService = Depends(get_order_service)):
    order = service.get_order(order_id)
    if order is None:
        return _not_found()
    return OrderReadDTO.from_domain(order)
