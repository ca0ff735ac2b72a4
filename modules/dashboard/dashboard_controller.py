import http
from fastapi import APIRouter, Depends

from context_manager.context import get_store
from database.store import Store, StoreError

from logger import logger

# schema
from schema.base import GenericResponseModel

# utils
from utils.response_handler import build_api_response

# service
from .dashboard_service import DashboardService

# creating a dashboard router
admin_dashboard_router = APIRouter(tags=["dashboard"], prefix="/admin/dashboard")


@admin_dashboard_router.get(
    "",
    status_code=http.HTTPStatus.OK,
    response_model=GenericResponseModel,
)
async def get_dashboard(store: Store = Depends(get_store)):
    try:
        summary = await DashboardService(store).get_summary()
        response = GenericResponseModel(
            status_code=http.HTTPStatus.OK,
            status=True,
            message="Dashboard fetched successfully",
            data=summary.model_dump(),
        )
    except StoreError as e:
        logger.error(msg=f"Could not build dashboard: {e}")
        response = GenericResponseModel(
            status_code=http.HTTPStatus.INTERNAL_SERVER_ERROR,
            message="Could not load dashboard",
        )

    return build_api_response(response)
