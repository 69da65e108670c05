"""Middleware that assigns and propagates a request identifier.

Every incoming HTTP request receives a request identifier. The value of
the incoming ``X-Request-ID`` header is reused when the client provides
one; otherwise a UUIDv4 is generated. The id is stored on
``request.state`` and in a context variable so code running downstream
(including log filters) can read it without passing it explicitly, and it
is returned in the ``X-Request-ID`` response header.
"""

import contextvars
import logging
import uuid

from fastapi import Request

REQUEST_ID_CTX = contextvars.ContextVar("request_id", default="-")
REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger("kitchen.http")


async def add_request_id(request: Request, call_next):
    rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    request.state.request_id = rid
    token = REQUEST_ID_CTX.set(rid)
    try:
        response = await call_next(request)
    finally:
        logger.info("request handled", extra={"path": request.url.path, "method": request.method})
        REQUEST_ID_CTX.reset(token)
    response.headers[REQUEST_ID_HEADER] = rid
    return response
