from routes.admin import router as admin_router
from routes.health import router as health_router
from routes.waitlist import router as waitlist_router

__all__ = ["admin_router", "health_router", "waitlist_router"]
