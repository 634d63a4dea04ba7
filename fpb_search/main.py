# fpb_search/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool

from . import __version__, config
from .catalog.router import router as catalog_router
from .catalog.store import STORE


def configure_logging(level: str = config.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(load_catalog: bool = True) -> FastAPI:
    """Build the API; the catalog is fetched once on startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()
        if load_catalog:
            # requests are served only once the index is built
            await run_in_threadpool(STORE.load)
        yield

    app = FastAPI(
        title="free-programming-books search",
        description=(
            "Fuzzy search over the free-programming-books catalog, with "
            "links to the full section lists on the published pages."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/")
    def health_check():
        return {"status": "ok", "catalog": STORE.state}

    app.include_router(catalog_router)
    return app


app = create_app()
