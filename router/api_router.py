from fastapi import APIRouter, Depends

from context_manager.context import build_request_context

# routers
from modules.catalog import admin_catalog_router
from modules.dashboard import admin_dashboard_router
from modules.laundry_requests import admin_request_router


# master router for the back office routes
CommonRouter = APIRouter(
    prefix="/api/v1",
    dependencies=[Depends(build_request_context)],
)


# add all the routes to the master router
CommonRouter.include_router(admin_dashboard_router)
CommonRouter.include_router(admin_request_router)
CommonRouter.include_router(admin_catalog_router)
