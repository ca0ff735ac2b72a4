from .dashboard_controller import admin_dashboard_router
