from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from loguru import logger
from coastwatch.api import auth, health, locations, reports
from coastwatch.core.config import settings
from coastwatch.core.database import Base, engine
from coastwatch.core.errors import (
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from pathlib import Path
import logging
import uvicorn

# Register table metadata before create_all
import coastwatch.models.user  # noqa: F401
import coastwatch.models.location  # noqa: F401
import coastwatch.models.report  # noqa: F401

app = FastAPI(title=settings.PROJECT_NAME, version=settings.PROJECT_VERSION)

# Configure logging
if settings.LOG_FILE:
    logger.add(settings.LOG_FILE, rotation=settings.LOG_ROTATION)

# Disable default Gunicorn error logging
gunicorn_error_logger = logging.getLogger("gunicorn.error")
gunicorn_error_logger.handlers = []

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

def ensure_sqlite_directory(url: str) -> None:
    if url.startswith("sqlite") and ":///" in url and ":memory:" not in url:
        Path(url.split(":///", 1)[1]).parent.mkdir(parents=True, exist_ok=True)

# Create the database tables
@app.on_event("startup")
async def startup_event():
    ensure_sqlite_directory(settings.DATABASE_URL)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except SQLAlchemyError as e:
        logger.error(f"Database error during startup: {e}")
        raise
    logger.info(f"{settings.PROJECT_NAME} {settings.PROJECT_VERSION} started")

@app.on_event("shutdown")
async def shutdown_event():
    await engine.dispose()

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(reports.router)
app.include_router(locations.router)

if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, log_level="info")
