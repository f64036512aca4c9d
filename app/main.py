from fastapi import FastAPI

from app.inventory.api import api_router
from app.inventory.core.config import settings
from app.inventory.core.errors import setup_exception_handlers
from app.inventory.core.logging import configure_logging
from app.inventory.core.security import ensure_signing_key
from app.inventory.middleware.observability import ObservabilityMiddleware
from app.inventory.middleware.tenant import TenantContextMiddleware
from app.inventory.middleware.trace import TraceIdMiddleware


def create_app() -> FastAPI:
    configure_logging()
    ensure_signing_key()
    app = FastAPI(title=settings.APP_NAME)
    app.add_middleware(TenantContextMiddleware)
    app.add_middleware(TraceIdMiddleware)
    app.add_middleware(ObservabilityMiddleware)
    setup_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
