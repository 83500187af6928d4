"""
FastAPI Main Application
Mutual fund portfolio tracker: catalog, ledger, holdings and analysis
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from pathlib import Path
import logging
from typing import AsyncGenerator

from fundtracker.config import settings
from fundtracker.core.logging import setup_logging
from fundtracker.api.errors import register_error_handlers
from fundtracker.domain.services.catalog_service import seed_catalog
from fundtracker.infrastructure.db import database
from fundtracker.infrastructure.db.repositories import create_db_stores
from fundtracker.infrastructure.memory import create_memory_stores

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def catalog_path() -> Path:
    """FUND_CATALOG_FILE, relative paths resolved against the project root"""
    path = Path(settings.FUND_CATALOG_FILE)
    return path if path.is_absolute() else PROJECT_ROOT / path


async def seed_fund_catalog(app: FastAPI) -> None:
    if settings.STORAGE_BACKEND == "memory":
        await seed_catalog(app.state.memory_stores.catalog, catalog_path())
        return

    if database.async_session_factory is None:
        logger.warning("No database session factory; catalog not seeded")
        return

    async with database.async_session_factory() as session:
        try:
            await seed_catalog(create_db_stores(session).catalog, catalog_path())
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Storage setup on startup, connection cleanup on shutdown
    """
    logger.info("=" * 60)
    logger.info("🚀 Starting FundTracker (env=%s, storage=%s)", settings.APP_ENV, settings.STORAGE_BACKEND)
    logger.info("=" * 60)

    if settings.STORAGE_BACKEND == "memory":
        app.state.memory_stores = create_memory_stores()
        logger.info("✅ In-memory stores ready (data is lost on restart)")
    else:
        await database.init_db()
        logger.info("✅ Database initialized")

    if settings.SEED_FUND_CATALOG:
        await seed_fund_catalog(app)
        logger.info("✅ Fund catalog seeded")

    logger.info("   ✅ API Server: http://%s:%s", settings.API_HOST, settings.API_PORT)
    logger.info("   ✅ API Docs: http://%s:%s/docs", settings.API_HOST, settings.API_PORT)

    yield

    logger.info("🛑 Shutting down FundTracker...")
    await database.close_db()
    logger.info("✅ Database connections closed")


# Create FastAPI app
app = FastAPI(
    title="FundTracker - Mutual Fund Portfolio Tracker",
    description="Transaction ledger, holdings at weighted average cost and portfolio analysis",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "FundTracker",
        "version": "1.0.0",
        "environment": settings.APP_ENV,
        "storage": settings.STORAGE_BACKEND,
        "docs": "/docs"
    }


# Import and include routers
from fundtracker.api.routes import alerts, funds, health, portfolio, sips, transactions, users

app.include_router(health.router, tags=["Health"])
app.include_router(funds.router, prefix="/api/v1/funds", tags=["Funds"])
app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])
app.include_router(transactions.router, prefix="/api/v1/transactions", tags=["Transactions"])
app.include_router(portfolio.router, prefix="/api/v1/portfolio", tags=["Portfolio"])
app.include_router(sips.router, prefix="/api/v1/sips", tags=["SIP Plans"])
app.include_router(alerts.router, prefix="/api/v1/alerts", tags=["Alerts"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("fundtracker.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG)
