# Recipe sharing API main entry point
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from .db import SessionLocal, init_db
from .errors import AppError
from .services.photos import build_photo_store
from .services.users import ensure_admin_user
from .settings import settings
from .routers.auth import router as auth_router
from .routers.health import router as health_router
from .routers.recipes import router as recipes_router
from .routers.tags import router as tags_router
from .routers.uploads import router as uploads_router

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("recipeshare")


def bootstrap_admin() -> None:
    db = SessionLocal()()
    try:
        ensure_admin_user(db, settings.admin_email, settings.admin_password)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Admin bootstrap failed")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.should_auto_db_push:
        logger.info("AUTO_DB_PUSH enabled: creating missing tables")
        init_db()
    bootstrap_admin()
    app.state.photo_store = build_photo_store(settings)
    yield


app = FastAPI(title="Recipe Share API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.cors_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid payload"})


@app.exception_handler(SQLAlchemyError)
async def db_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Server error"})


app.include_router(health_router, prefix="/api", tags=["health"])
app.include_router(auth_router, prefix="/api", tags=["auth"])
app.include_router(uploads_router, prefix="/api", tags=["uploads"])
app.include_router(recipes_router, prefix="/api", tags=["recipes"])
app.include_router(tags_router, prefix="/api", tags=["tags"])

# Local photo fallback; cloud backends return absolute URLs instead
app.mount("/uploads", StaticFiles(directory=settings.uploads_dir, check_dir=False), name="uploads")
