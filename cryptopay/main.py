import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cryptopay import __version__
from cryptopay.core.config import Settings, get_settings
from cryptopay.core.container import ApplicationContainer, build_container
from cryptopay.core.logging import configure_logging
from cryptopay.interfaces.http import create_api_router
from cryptopay.schemas import HealthResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    configure_logging(settings.logging)
    if app.state.container is None:
        app.state.container = build_container(settings)
    container: ApplicationContainer = app.state.container

    await container.init_infrastructure()
    if settings.reconciliation.sweep_enabled:
        container.scheduler.start()
    logger.info("%s %s started (%s)", settings.project_name, __version__, settings.environment)
    try:
        yield
    finally:
        await container.aclose()


def create_app(container: ApplicationContainer | None = None) -> FastAPI:
    settings = container.settings if container is not None else get_settings()
    app = FastAPI(
        title=settings.project_name,
        description="Cryptocurrency payment quoting and blockchain confirmation",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.container = container

    # The storefront UI calls these endpoints directly from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(version=__version__)

    return app


app = create_app()
