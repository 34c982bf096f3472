import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fiilar import __version__
from fiilar.core.config import get_settings
from fiilar.core.events import event_bus
from fiilar.core.logging_utils import RequestLogMiddleware, configure_logging
from fiilar.infrastructure.database import dispose_engine, init_db
from fiilar.interfaces.http.routers import create_api_router
from fiilar.interfaces.http.routers import websocket as websocket_router
from fiilar.interfaces.ws.manager import manager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    manager.bind(event_bus)
    logger.info("%s started", app.title)
    yield
    manager.unbind()
    await dispose_engine()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.project_name,
        description="Marketplace core: wallet ledger, messaging, notifications, reviews and bookings",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLogMiddleware, logger=logging.getLogger("fiilar.http"))

    app.include_router(create_api_router(settings.api_prefix))
    app.include_router(websocket_router.router)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    return app


app = create_app()
