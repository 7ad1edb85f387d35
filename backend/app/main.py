from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.api_v1.api import api_router
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.logging_config import setup_logging, get_logger
from app.services.scheduler import init_scheduler, shutdown_scheduler
from app.db.init_db import ensure_tables_exist

setup_logging(settings.LOG_LEVEL, settings.LOG_DIR, settings.LOG_TO_FILE)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    logger.info("🚀 Starting up...")

    await ensure_tables_exist()
    logger.info("📊 Database tables ready")

    init_scheduler()
    yield
    logger.info("🛑 Shutting down...")
    shutdown_scheduler()

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    description="Content management backend - hierarchical categories and menus",
    lifespan=lifespan
)

register_exception_handlers(app)

if settings.BACKEND_CORS_ORIGINS:
    logger.info(f"CORS allowed origins: {settings.BACKEND_CORS_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

logger.info(f"Registering API routes under {settings.API_V1_STR}")
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
async def root():
    return {"message": settings.PROJECT_NAME}


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000, log_level="info")
