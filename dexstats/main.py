# dexstats/main.py
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from dexstats.api import api
from dexstats.errors import ValidationError, StoreError, NotFoundError
from dexstats.storage.db import Database
from dexstats.utils.shortname import ShortNameFilter
import logging

logging.basicConfig(
    level=logging.INFO,
    format="[%(levelname)s] %(shortname)s: %(message)s",
)
for handler in logging.getLogger().handlers:
    handler.addFilter(ShortNameFilter())
log = logging.getLogger(__name__)


def create_app(database: Optional[Database] = None) -> FastAPI:
    """`database` is owned by the caller when given; otherwise the app
    builds one from settings at startup and disposes it at shutdown."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = database is None
        app.state.database = database or Database()
        if app.state.database.ping():
            log.info("✅ Database connected.")
        else:
            log.error("❌ DB connection failed")
        yield
        if owned:
            app.state.database.dispose()

    app = FastAPI(title="dexstats", lifespan=lifespan)
    if database is not None:
        # usable without running the lifespan (ASGI test transport)
        app.state.database = database

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(StoreError)
    async def store_error(request: Request, exc: StoreError):
        log.error(f"{request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"error": "store query failed"})

    app.include_router(api.router)
    return app


app = create_app()
