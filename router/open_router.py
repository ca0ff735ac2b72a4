from fastapi import APIRouter, Depends

from context_manager.context import build_request_context

# routers
from modules.catalog import catalog_router
from modules.laundry_requests import request_router


# master router for the customer facing routes
OpenRouter = APIRouter(prefix="/api/v1", dependencies=[Depends(build_request_context)])


# add all the routes to the master router
OpenRouter.include_router(catalog_router)
OpenRouter.include_router(request_router)
