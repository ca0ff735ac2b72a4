from .laundry_request_controller import request_router, admin_request_router
