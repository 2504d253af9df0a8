"""Application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api import api_router
from .api.deps import build_services
from .core.config import Settings, settings as default_settings
from .core.errors import TalentFlowError, talentflow_error_handler
from .core.logging import RequestIDMiddleware, init_logging
from .services import seed_demo_data
from .store import Store


def create_app(settings: Settings | None = None, store: Store | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or default_settings
    init_logging(settings.LOG_LEVEL)
    services = build_services(store)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if settings.SEED_DEMO_DATA:
            await seed_demo_data(
                services.pipeline,
                candidates=settings.SEED_CANDIDATES,
                applications=settings.SEED_APPLICATIONS,
            )
        yield

    app = FastAPI(title="TalentFlow", lifespan=lifespan)
    app.state.services = services
    app.add_middleware(RequestIDMiddleware)
    app.add_exception_handler(TalentFlowError, talentflow_error_handler)
    app.include_router(api_router)
    return app


app = create_app()
