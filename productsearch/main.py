from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy.engine import make_url
import os

from productsearch.database import engine, Base
import productsearch.models  # noqa: register all models
from productsearch.config import settings
from productsearch.errors import BackendUnavailable, InvalidState, BulkSaveError
from productsearch.routers import health, products
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if settings.SEARCH_BACKEND == "sql":
        # Ensure the SQLite directory and tables exist (for dev mode without alembic)
        db_path = make_url(settings.DATABASE_URL).database
        if settings.DATABASE_URL.startswith("sqlite") and db_path and db_path != ":memory:":
            os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        Base.metadata.create_all(bind=engine)

    logger.info("Serving index %s from the %s backend", settings.SEARCH_INDEX, settings.SEARCH_BACKEND)
    yield


app = FastAPI(
    title="Product Search",
    description="Document CRUD and paged search over a product index",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(BackendUnavailable)
async def backend_unavailable_handler(request: Request, exc: BackendUnavailable):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(InvalidState)
async def invalid_state_handler(request: Request, exc: InvalidState):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(BulkSaveError)
async def bulk_save_error_handler(request: Request, exc: BulkSaveError):
    return JSONResponse(status_code=502, content={"detail": str(exc), "positions": exc.positions})


app.include_router(health.router)
app.include_router(products.router)
