from .laundry_service import LaundryService
from .laundry_request import LaundryRequest, REQUEST_STATUSES
from .request_service import RequestService


# table name -> model, used by the record store
TABLE_MODELS = {
    LaundryService.__tablename__: LaundryService,
    LaundryRequest.__tablename__: LaundryRequest,
    RequestService.__tablename__: RequestService,
}
