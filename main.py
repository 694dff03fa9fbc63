from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import time

from app.core.database import Base, async_engine, get_db
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.logging import setup_logging
from app.modules.organization.router import router as organization_router
from app.modules.borrowers.router import router as borrowers_router
from app.modules.loans.router import router as loans_router
from app.modules.repayments.router import router as repayments_router
from app.modules.analytics.router import router as analytics_router
from app.modules.admin.router import router as admin_router

logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    # Startup
    setup_logging()
    if settings.CREATE_TABLES_ON_STARTUP:
        async with async_engine.begin() as conn:
            # Create all tables (for development - use Alembic in production)
            await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} started ({settings.ENVIRONMENT})")

    yield

    # Shutdown
    await async_engine.dispose()


app = FastAPI(
    title="Microfinance Loan Management API",
    description="Borrowers, loan approvals, repayment schedules and portfolio analytics",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(admin_router)
app.include_router(organization_router)
app.include_router(borrowers_router)
app.include_router(loans_router)
app.include_router(repayments_router)
app.include_router(analytics_router)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


@app.get("/api/health")
async def database_health(db: AsyncSession = Depends(get_db)):
    """Health check including a database round trip"""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return JSONResponse(status_code=500, content={"status": "Database connection failed"})

    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3)
    }


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Welcome to the Microfinance Loan Management API",
        "version": settings.APP_VERSION,
        "docs": "/docs"
    }
