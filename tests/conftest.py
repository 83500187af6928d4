from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fundtracker.api.errors import register_error_handlers
from fundtracker.api.routes import alerts, funds, health, portfolio, sips, transactions, users
from factories import make_fund
from fundtracker.domain.models import RiskLevel
from fundtracker.infrastructure.db.database import Base, get_db
from fundtracker.infrastructure.db import models  # noqa: F401
from fundtracker.infrastructure.db.repositories import FundRepository
from fundtracker.infrastructure.memory import create_memory_stores


@pytest.fixture()
def sample_funds():
    return [
        make_fund(1, "Large Cap", "50.00", RiskLevel.MODERATE, name="Axis Bluechip Fund"),
        make_fund(2, "Mid Cap", "60.00", RiskLevel.HIGH, name="HDFC Mid-Cap Opportunities Fund"),
        make_fund(3, "Small Cap", "100.00", RiskLevel.HIGH, name="Kotak Small Cap Fund"),
        make_fund(4, "Index", "25.00", RiskLevel.LOW, name="UTI Nifty 50 Index Fund"),
    ]


@pytest.fixture()
def memory_stores(sample_funds):
    return create_memory_stores(sample_funds)


@pytest.fixture()
async def db_engine(tmp_path):
    db_path = tmp_path / "test.db"
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_path}",
        future=True,
        echo=False
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session
        # cleanup
        await session.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            await session.execute(table.delete())
        await session.commit()


@pytest.fixture()
async def seeded_session(db_session, sample_funds) -> AsyncSession:
    repo = FundRepository(db_session)
    for fund in sample_funds:
        await repo.upsert(fund)
    await db_session.commit()
    return db_session


@pytest.fixture()
async def app(seeded_session) -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(health.router, tags=["Health"])
    app.include_router(funds.router, prefix="/api/v1/funds", tags=["Funds"])
    app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])
    app.include_router(transactions.router, prefix="/api/v1/transactions", tags=["Transactions"])
    app.include_router(portfolio.router, prefix="/api/v1/portfolio", tags=["Portfolio"])
    app.include_router(sips.router, prefix="/api/v1/sips", tags=["SIP Plans"])
    app.include_router(alerts.router, prefix="/api/v1/alerts", tags=["Alerts"])

    async def override_get_db():
        try:
            yield seeded_session
            await seeded_session.commit()
        except Exception:
            await seeded_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
