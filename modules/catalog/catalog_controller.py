import http
from fastapi import APIRouter, Depends

from context_manager.context import get_store
from database.store import RecordNotFoundError, Store, StoreError

from logger import logger

# schema
from schema.base import GenericResponseModel
from .catalog_schema import ServiceActiveModel, ServiceBaseModel

# utils
from utils.response_handler import build_api_response

# service
from .catalog_service import CatalogService, CatalogValidationError, ServiceInUseError

# public catalog, only active services
catalog_router = APIRouter(tags=["services"], prefix="/services")

# back office catalog management
admin_catalog_router = APIRouter(tags=["admin services"], prefix="/admin/services")


def _not_found(service_id: str) -> GenericResponseModel:
    return GenericResponseModel(
        status_code=http.HTTPStatus.NOT_FOUND,
        message=f"Service {service_id} not found",
    )


def _store_failure(action: str, error: StoreError) -> GenericResponseModel:
    logger.error(msg=f"Could not {action}: {error}")
    return GenericResponseModel(
        status_code=http.HTTPStatus.INTERNAL_SERVER_ERROR,
        message=f"Could not {action}",
    )


@catalog_router.get(
    "",
    status_code=http.HTTPStatus.OK,
    response_model=GenericResponseModel,
)
async def get_active_services(store: Store = Depends(get_store)):
    """Services customers can choose on the request form"""
    try:
        services = await CatalogService(store).list_active_services()
        response = GenericResponseModel(
            status_code=http.HTTPStatus.OK,
            status=True,
            message="Services fetched successfully",
            data=services,
        )
    except StoreError as e:
        response = _store_failure("load services", e)
    return build_api_response(response)


@admin_catalog_router.get(
    "",
    status_code=http.HTTPStatus.OK,
    response_model=GenericResponseModel,
)
async def get_all_services(store: Store = Depends(get_store)):
    try:
        services = await CatalogService(store).list_services()
        response = GenericResponseModel(
            status_code=http.HTTPStatus.OK,
            status=True,
            message="Services fetched successfully",
            data=services,
        )
    except StoreError as e:
        response = _store_failure("load services", e)
    return build_api_response(response)


@admin_catalog_router.post(
    "",
    status_code=http.HTTPStatus.CREATED,
    response_model=GenericResponseModel,
)
async def create_service(
    service_data: ServiceBaseModel, store: Store = Depends(get_store)
):
    try:
        service = await CatalogService(store).create_service(service_data)
        response = GenericResponseModel(
            status_code=http.HTTPStatus.CREATED,
            status=True,
            message="Service created successfully",
            data=service,
        )
    except CatalogValidationError as e:
        response = GenericResponseModel(
            status_code=http.HTTPStatus.UNPROCESSABLE_ENTITY,
            message="Please fix the errors below",
            data={"fields": e.errors},
        )
    except StoreError as e:
        response = _store_failure("create service", e)
    return build_api_response(response)


@admin_catalog_router.put(
    "/{service_id}",
    status_code=http.HTTPStatus.OK,
    response_model=GenericResponseModel,
)
async def update_service(
    service_id: str,
    service_data: ServiceBaseModel,
    store: Store = Depends(get_store),
):
    try:
        service = await CatalogService(store).update_service(service_id, service_data)
        response = GenericResponseModel(
            status_code=http.HTTPStatus.OK,
            status=True,
            message="Service updated successfully",
            data=service,
        )
    except CatalogValidationError as e:
        response = GenericResponseModel(
            status_code=http.HTTPStatus.UNPROCESSABLE_ENTITY,
            message="Please fix the errors below",
            data={"fields": e.errors},
        )
    except RecordNotFoundError:
        response = _not_found(service_id)
    except StoreError as e:
        response = _store_failure("update service", e)
    return build_api_response(response)


@admin_catalog_router.patch(
    "/{service_id}/active",
    status_code=http.HTTPStatus.OK,
    response_model=GenericResponseModel,
)
async def set_service_active(
    service_id: str,
    active_data: ServiceActiveModel,
    store: Store = Depends(get_store),
):
    """Archive or reactivate a service"""
    try:
        service = await CatalogService(store).set_active(service_id, active_data.is_active)
        response = GenericResponseModel(
            status_code=http.HTTPStatus.OK,
            status=True,
            message=f"Service {'activated' if active_data.is_active else 'archived'}",
            data=service,
        )
    except RecordNotFoundError:
        response = _not_found(service_id)
    except StoreError as e:
        response = _store_failure("update service", e)
    return build_api_response(response)


@admin_catalog_router.delete(
    "/{service_id}",
    status_code=http.HTTPStatus.OK,
    response_model=GenericResponseModel,
)
async def delete_service(service_id: str, store: Store = Depends(get_store)):
    try:
        await CatalogService(store).delete_service(service_id)
        response = GenericResponseModel(
            status_code=http.HTTPStatus.OK,
            status=True,
            message="Service deleted successfully",
        )
    except ServiceInUseError as e:
        response = GenericResponseModel(
            status_code=http.HTTPStatus.CONFLICT,
            message=str(e),
        )
    except RecordNotFoundError:
        response = _not_found(service_id)
    except StoreError as e:
        response = _store_failure("delete service", e)
    return build_api_response(response)
