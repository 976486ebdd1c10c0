from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from file_gateway.api.routers import files as files_router
from file_gateway.api.routers import health as health_router
from file_gateway.core.config import Settings, get_settings
from file_gateway.core.errors import register_error_handlers
from file_gateway.core.logging import setup_logging
from file_gateway.services.storage import StorageService


def create_app(
    settings: Settings | None = None,
    storage: StorageService | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        debug=settings.debug,
        title="File Gateway API",
    )
    app.state.settings = settings
    app.state.storage = storage or StorageService(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )
    register_error_handlers(app)

    app.include_router(files_router.router)
    app.include_router(health_router.router)

    return app


app = create_app()
