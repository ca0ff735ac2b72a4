import http
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from context_manager.context import get_notifier, get_store
from database.store import RecordNotFoundError, Store, StoreError

from logger import logger

# schema
from schema.base import GenericResponseModel
from .laundry_request_schema import (
    BatchUpdateModel,
    RequestDraft,
    RequestFilters,
    RequestUpdateModel,
)

# utils
from utils.response_handler import build_api_response

# service
from modules.catalog.catalog_service import CatalogService
from modules.notifications import StatusNotificationService
from .laundry_request_service import LaundryRequestService
from .request_export_service import generate_file_name
from .services import RequestSubmissionService, SubmissionState

# customer facing request form
request_router = APIRouter(tags=["requests"], prefix="/requests")

# back office request management
admin_request_router = APIRouter(tags=["admin requests"], prefix="/admin/requests")


SUBMISSION_RESPONSES = {
    SubmissionState.COMMITTED: (
        http.HTTPStatus.CREATED,
        "Request submitted successfully",
    ),
    SubmissionState.PARTIALLY_FAILED: (
        http.HTTPStatus.MULTI_STATUS,
        "Your request was received but some services could not be saved. "
        "Please contact us with your request number.",
    ),
}


def _filters(
    status: str = Query(default="all", description="Request status or 'all'"),
    pickup_date: Optional[date] = Query(default=None, description="Exact pickup date"),
    search: Optional[str] = Query(default=None, description="Name, email, phone or id"),
) -> RequestFilters:
    return RequestFilters(status=status, pickup_date=pickup_date, search=search)


@request_router.post(
    "",
    status_code=http.HTTPStatus.CREATED,
    response_model=GenericResponseModel,
)
async def submit_request(draft: RequestDraft, store: Store = Depends(get_store)):
    """Submit a pickup request against the currently offered services"""
    try:
        services = await CatalogService(store).list_active_services()
    except StoreError as e:
        logger.error(msg=f"Could not load services for submission: {e}")
        return build_api_response(
            GenericResponseModel(
                status_code=http.HTTPStatus.BAD_GATEWAY,
                message="Failed to submit request. Please try again.",
            )
        )

    result = await RequestSubmissionService(store).submit(draft, services)

    if result.state is SubmissionState.REJECTED and result.errors:
        response = GenericResponseModel(
            status_code=http.HTTPStatus.UNPROCESSABLE_ENTITY,
            message="Please fix the errors below",
            data=result.to_dict(),
        )
    elif result.state is SubmissionState.REJECTED:
        response = GenericResponseModel(
            status_code=http.HTTPStatus.BAD_GATEWAY,
            message="Failed to submit request. Please try again.",
            data=result.to_dict(),
        )
    else:
        status_code, message = SUBMISSION_RESPONSES[result.state]
        response = GenericResponseModel(
            status_code=status_code,
            status=result.state is SubmissionState.COMMITTED,
            message=message,
            data=result.to_dict(),
        )

    return build_api_response(response)


@admin_request_router.get(
    "",
    status_code=http.HTTPStatus.OK,
    response_model=GenericResponseModel,
)
async def get_requests(
    filters: RequestFilters = Depends(_filters),
    store: Store = Depends(get_store),
):
    try:
        requests = await LaundryRequestService(store).list_requests(filters)
        response = GenericResponseModel(
            status_code=http.HTTPStatus.OK,
            status=True,
            message="Requests fetched successfully",
            data=requests,
        )
    except StoreError as e:
        logger.error(msg=f"Could not load requests: {e}")
        response = GenericResponseModel(
            status_code=http.HTTPStatus.INTERNAL_SERVER_ERROR,
            message="Could not load requests",
        )
    return build_api_response(response)


@admin_request_router.get("/export", status_code=http.HTTPStatus.OK)
async def export_requests(
    filters: RequestFilters = Depends(_filters),
    store: Store = Depends(get_store),
):
    """Download the filtered requests as CSV"""
    try:
        content = await LaundryRequestService(store).export_requests(filters)
    except StoreError as e:
        logger.error(msg=f"Could not export requests: {e}")
        return build_api_response(
            GenericResponseModel(
                status_code=http.HTTPStatus.INTERNAL_SERVER_ERROR,
                message="Could not export requests",
            )
        )

    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{generate_file_name()}"'},
    )


@admin_request_router.post(
    "/batch-update",
    status_code=http.HTTPStatus.OK,
    response_model=GenericResponseModel,
)
async def batch_update_requests(
    batch_data: BatchUpdateModel,
    store: Store = Depends(get_store),
):
    result = await LaundryRequestService(store).batch_update(
        batch_data.request_ids, batch_data.status, batch_data.internal_notes
    )

    if result.failed and not result.succeeded:
        status_code = http.HTTPStatus.BAD_GATEWAY
    elif result.failed:
        status_code = http.HTTPStatus.MULTI_STATUS
    else:
        status_code = http.HTTPStatus.OK

    response = GenericResponseModel(
        status_code=status_code,
        status=not result.failed,
        message=f"{len(result.succeeded)} updated, {len(result.failed)} failed",
        data=result.to_dict(),
    )
    return build_api_response(response)


@admin_request_router.get(
    "/{request_id}",
    status_code=http.HTTPStatus.OK,
    response_model=GenericResponseModel,
)
async def get_request_details(request_id: str, store: Store = Depends(get_store)):
    try:
        details = await LaundryRequestService(store).get_request_details(request_id)
        response = GenericResponseModel(
            status_code=http.HTTPStatus.OK,
            status=True,
            message="Request fetched successfully",
            data=details,
        )
    except RecordNotFoundError:
        response = GenericResponseModel(
            status_code=http.HTTPStatus.NOT_FOUND,
            message=f"Request {request_id} not found",
        )
    except StoreError as e:
        logger.error(msg=f"Could not load request {request_id}: {e}")
        response = GenericResponseModel(
            status_code=http.HTTPStatus.INTERNAL_SERVER_ERROR,
            message="Could not load request",
        )
    return build_api_response(response)


@admin_request_router.patch(
    "/{request_id}",
    status_code=http.HTTPStatus.OK,
    response_model=GenericResponseModel,
)
async def update_request(
    request_id: str,
    update_data: RequestUpdateModel,
    store: Store = Depends(get_store),
    notifier: StatusNotificationService = Depends(get_notifier),
):
    """Change status and/or internal notes; the customer is emailed on a status change"""
    try:
        result = await LaundryRequestService(store, notifier).update_one(
            request_id,
            status=update_data.status,
            internal_notes=update_data.internal_notes,
        )
        response = GenericResponseModel(
            status_code=http.HTTPStatus.OK,
            status=True,
            message="Request updated successfully",
            data=result.to_dict(),
        )
    except RecordNotFoundError:
        response = GenericResponseModel(
            status_code=http.HTTPStatus.NOT_FOUND,
            message=f"Request {request_id} not found",
        )
    except StoreError as e:
        logger.error(msg=f"Could not update request {request_id}: {e}")
        response = GenericResponseModel(
            status_code=http.HTTPStatus.BAD_GATEWAY,
            message="Could not update request",
        )
    return build_api_response(response)
