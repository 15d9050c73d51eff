"""
profile-gateway API

FastAPI application exposing CRUD routes over the hosted ``profiles`` table.
Run with ``profile-gateway`` or ``python -m profile_gateway.main``.
"""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api_routes.profiles_api import router as profiles_router
from .config.config import load_environment_config
from .config.logfire_config import SERVICE_NAME, get_logger, setup_logfire
from .db.factory import peek_db_client

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the listening address on startup; close pooled connections on shutdown."""
    config = load_environment_config()
    # no-op when run() already configured logging; covers `uvicorn profile_gateway.main:app`
    setup_logfire(
        token=config.logfire_token,
        enabled=config.logfire_enabled,
        level=config.log_level,
    )
    logger.info("Server running at http://localhost:%d", config.port)
    logger.info("Test your DB at: http://localhost:%d/test-db", config.port)

    yield

    client = peek_db_client()
    close = getattr(client, "close", None)
    if callable(close):
        close()
    logger.info("Shutting down %s", SERVICE_NAME)


def create_app() -> FastAPI:
    app = FastAPI(
        title="profile-gateway",
        description="CRUD gateway over the hosted profiles table",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware: any origin may call the gateway
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(profiles_router)

    @app.get("/health")
    async def health():
        """Liveness check; does not touch the database."""
        return {"status": "healthy", "service": SERVICE_NAME}

    return app


app = create_app()


def run() -> None:
    """Console entry point: load .env, configure logging, serve."""
    import uvicorn

    load_dotenv()
    config = load_environment_config()
    setup_logfire(
        token=config.logfire_token,
        enabled=config.logfire_enabled,
        level=config.log_level,
    )
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    run()
