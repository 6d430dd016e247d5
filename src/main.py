import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.api import api_router
from src.config import APP_VERSION, settings
from src.database.core import Database, make_session
from src.utils.exceptions import AppError, ServerError, app_error_handler, request_validation_handler
from src.utils.logging import configure_logging
from src.utils.middleware import BodySizeLimitMiddleware

configure_logging(settings.log_level, settings.log_file)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup operations
    owned = None
    if getattr(app.state, "database", None) is None and settings.database_url:
        owned = app.state.database = Database(settings.database_url, pool_size=settings.db_pool_size)
        logger.info("Credential store pool ready (size=%d)", settings.db_pool_size)
    elif not settings.database_url:
        logger.warning("DATABASE_URL is not set, account routes will fail")
    yield
    # on-shutdown operations
    if owned is not None:
        owned.dispose()
        app.state.database = None

if settings.app_env == "production":
    # In production: disable Swagger UI and /docs endpoints
    app = FastAPI(lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)
else:
    # In development: keep docs enabled
    app = FastAPI(lifespan=lifespan)

# Inner to CORS so 413 answers still carry CORS headers
app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=lambda: settings.max_body_bytes)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

if settings.app_env != "production":
    @app.get("/", tags=["Health"])
    def read_root():
        return {"message": f"attendance-relay v{APP_VERSION}"}

    @app.get("/test-connection", tags=["Health"])
    def confirm_conn(db: Session = Depends(make_session)):
        try:
            result = db.execute(text("SELECT 1"))
            if result.scalar() == 1:
                return {"message": "Database connection succeeded"}
        except SQLAlchemyError as exc:
            raise ServerError("Database inaccessible") from exc
        raise ServerError("Database inaccessible")

app.include_router(api_router, prefix="/api")
