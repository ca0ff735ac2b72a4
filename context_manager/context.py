import uuid
from contextvars import ContextVar
from typing import Optional

from fastapi import Request

from logger import logger

from database.store import SQLAlchemyStore, Store
from modules.notifications import StatusNotificationService

# defining the context variables to store different types of required data

context_request_id: ContextVar[str] = ContextVar("request_id", default="")

_store: Optional[Store] = None
_notifier: Optional[StatusNotificationService] = None


# whenever an api is hit, define the context variables for it
async def build_request_context(request: Request):
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    context_request_id.set(request_id)
    logger.info(
        extra=request_id, msg=f"REQUEST_INITIATED {request.method} {request.url.path}"
    )


# the same store is shared by every request; each call opens its own session
def get_store() -> Store:
    global _store
    if _store is None:
        _store = SQLAlchemyStore()
    return _store


def get_notifier() -> StatusNotificationService:
    global _notifier
    if _notifier is None:
        _notifier = StatusNotificationService()
    return _notifier
