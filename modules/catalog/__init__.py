from .catalog_controller import catalog_router, admin_catalog_router
