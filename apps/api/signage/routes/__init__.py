"""Route modules."""

from .auth import router as auth_router
from .login import router as login_router
from .slides import router as slides_router

__all__ = ["auth_router", "login_router", "slides_router"]
