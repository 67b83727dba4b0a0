# Import all routes
from .application import router as application_router
from .email_verification import router as email_verification_router
from .admin_auth import router as admin_auth_router
from .admin_dashboard import router as admin_dashboard_router
from .health import router as health_router

# All routers that should be included in main app, in this order
routers = [
    application_router,
    email_verification_router,
    admin_auth_router,
    admin_dashboard_router,
    health_router,
]

__all__ = [
    "application_router",
    "email_verification_router",
    "admin_auth_router",
    "admin_dashboard_router",
    "health_router",
    "routers",
]
