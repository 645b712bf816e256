import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from parcelhub import __version__
from parcelhub.core.config import get_settings
from parcelhub.db.session import init_db
from parcelhub.infrastructure.database.session import dispose_engine
from parcelhub.interfaces.http import create_api_router
from parcelhub.interfaces.http.errors import register_exception_handlers

settings = get_settings()


def configure_logging() -> None:
    logging.basicConfig(level=settings.logging.level.upper(), format=settings.logging.format)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield
    await dispose_engine()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title=settings.project_name,
        description="Parcel forwarding: purchase orders, shipments and customer wallets",
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

    register_exception_handlers(app)
    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "parcelhub.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.server.reload,
        log_level=settings.logging.level.lower(),
    )
