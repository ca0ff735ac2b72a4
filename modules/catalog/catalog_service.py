"""
Service Catalog

Staff maintain the laundry services offered on the request form. Only
active services are offered to customers; archived services keep their
history. A service can only be deleted while no request line uses it.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from database.store import Store
from logger import logger
from utils.validation import PATTERNS, ValidationRule, validate_form

from .catalog_schema import ServiceBaseModel


SERVICES_TABLE = "laundry_services"
LINES_TABLE = "request_services"


class CatalogValidationError(Exception):
    """The service payload breaks one or more catalog rules"""

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__(f"Invalid service: {errors}")


class ServiceInUseError(Exception):
    """The service is still referenced by request lines"""

    def __init__(self, service_id: str, line_count: int):
        self.service_id = service_id
        self.line_count = line_count
        super().__init__(
            f"Service {service_id} is used by {line_count} request lines; archive it instead"
        )


def _price_check(value: Any) -> Optional[str]:
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return "Please enter a valid price"
    if not price.is_finite():
        return "Please enter a valid price"
    if price <= 0:
        return "Must be a positive number"
    if price > Decimal("999999.99"):
        return "Must be no more than 999999.99"
    return None


SERVICE_RULES = {
    "name": ValidationRule(
        required=True,
        min_length=2,
        max_length=100,
        pattern=PATTERNS["service_name"],
        message="Please enter a service name",
    ),
    "description": ValidationRule(
        max_length=500,
        message="Description cannot exceed 500 characters",
    ),
    "price_per_item": ValidationRule(custom=_price_check),
    "price_per_pound": ValidationRule(custom=_price_check),
}


class CatalogService:
    """
    Usage:
        catalog = CatalogService(store)
        services = await catalog.list_active_services()
    """

    def __init__(self, store: Store):
        self.store = store

    # ============================================
    # READS
    # ============================================

    async def list_active_services(self) -> List[Dict[str, Any]]:
        """Services offered to customers, by name"""
        return await self.store.read(
            SERVICES_TABLE, filters={"is_active": True}, order_by="name"
        )

    async def list_services(self) -> List[Dict[str, Any]]:
        """Every service, newest first"""
        return await self.store.read(
            SERVICES_TABLE, order_by="created_at", descending=True
        )

    async def get_service(self, service_id: str) -> Dict[str, Any]:
        return await self.store.read_one(SERVICES_TABLE, service_id)

    # ============================================
    # WRITES
    # ============================================

    @staticmethod
    def validate_service(payload: ServiceBaseModel) -> Dict[str, str]:
        return validate_form(payload.model_dump(), SERVICE_RULES)

    @staticmethod
    def _to_record(payload: ServiceBaseModel) -> Dict[str, Any]:
        def price(value):
            if value is None or str(value).strip() == "":
                return None
            return float(Decimal(str(value).strip()))

        return {
            "name": payload.name,
            "description": payload.description or None,
            "price_per_item": price(payload.price_per_item),
            "price_per_pound": price(payload.price_per_pound),
            "is_active": payload.is_active,
        }

    async def create_service(self, payload: ServiceBaseModel) -> Dict[str, Any]:
        errors = self.validate_service(payload)
        if errors:
            raise CatalogValidationError(errors)

        service = await self.store.create(SERVICES_TABLE, self._to_record(payload))
        logger.info(msg=f"Service created: {service['name']}", extra={"service_id": service["id"]})
        return service

    async def update_service(
        self, service_id: str, payload: ServiceBaseModel
    ) -> Dict[str, Any]:
        errors = self.validate_service(payload)
        if errors:
            raise CatalogValidationError(errors)

        service = await self.store.update(SERVICES_TABLE, service_id, self._to_record(payload))
        logger.info(msg=f"Service updated: {service['name']}", extra={"service_id": service_id})
        return service

    async def set_active(self, service_id: str, is_active: bool) -> Dict[str, Any]:
        """Archive (False) or reactivate (True) a service"""
        service = await self.store.update(
            SERVICES_TABLE, service_id, {"is_active": is_active}
        )
        logger.info(
            msg=f"Service {'activated' if is_active else 'archived'}: {service['name']}",
            extra={"service_id": service_id},
        )
        return service

    async def delete_service(self, service_id: str) -> None:
        service = await self.store.read_one(SERVICES_TABLE, service_id)

        lines = await self.store.read(LINES_TABLE, filters={"service_id": service["id"]})
        if lines:
            raise ServiceInUseError(service["id"], len(lines))

        await self.store.delete(SERVICES_TABLE, service["id"])
        logger.info(msg=f"Service deleted: {service['name']}", extra={"service_id": service_id})
