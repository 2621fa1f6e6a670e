"""API route modules."""

from whisperlink.api.routes.health import router as health_router
from whisperlink.api.routes.secrets import router as secrets_router

__all__ = ["health_router", "secrets_router"]
