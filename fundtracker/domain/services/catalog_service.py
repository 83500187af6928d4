"""
FUND CATALOG SERVICE
Seed, query and refresh the fund catalog

RESPONSIBILITIES:
- Load the fund universe from funds.yml
- Lookup / list / search
- Apply externally supplied NAVs and raise nav_change alerts

RULES:
✅ Fail fast on invalid seed data
❌ The aggregation engine never writes NAVs; only refresh_nav() does
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import List

import yaml

from fundtracker.domain.exceptions import InvalidAmount, NotFound
from fundtracker.domain.models import AlertType, Fund, RiskLevel, percentage, quantize_nav
from fundtracker.domain.repositories import FundCatalog, HoldingStore
from fundtracker.domain.services.alert_service import AlertService

logger = logging.getLogger(__name__)


class FundCatalogLoader:
    """Reads fund definitions from a YAML file"""

    def __init__(self, catalog_file: Path):
        self.catalog_file = Path(catalog_file)

    def load(self) -> List[Fund]:
        if not self.catalog_file.exists():
            raise FileNotFoundError(f"Fund catalog not found: {self.catalog_file}")

        with open(self.catalog_file, "r") as f:
            data = yaml.safe_load(f) or {}

        funds = []
        for fund_data in data.get("funds", []):
            expense_ratio = fund_data.get("expense_ratio")
            funds.append(Fund(
                id=int(fund_data["id"]),
                name=fund_data["name"],
                category=fund_data["category"],
                amc=fund_data["amc"],
                current_nav=quantize_nav(Decimal(str(fund_data["current_nav"]))),
                expense_ratio=Decimal(str(expense_ratio)) if expense_ratio is not None else None,
                risk_level=RiskLevel(fund_data["risk_level"]),
            ))

        ids = [fund.id for fund in funds]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate fund ids found in catalog")

        return funds


async def seed_catalog(catalog: FundCatalog, catalog_file: Path) -> int:
    """
    Insert funds from the YAML file that the catalog does not have yet

    Existing funds are left alone so refreshed NAVs survive a restart.
    Returns the number of funds inserted.
    """
    funds = FundCatalogLoader(catalog_file).load()
    inserted = 0
    for fund in funds:
        if await catalog.get_by_id(fund.id) is None:
            await catalog.upsert(fund)
            inserted += 1
    logger.info("Fund catalog seeded: %d new of %d funds from %s", inserted, len(funds), catalog_file)
    return inserted


class CatalogService:
    def __init__(
        self,
        catalog: FundCatalog,
        holdings: HoldingStore,
        alerts: AlertService,
        nav_alert_threshold_pct: Decimal = Decimal("5.0"),
    ):
        self.catalog = catalog
        self.holdings = holdings
        self.alerts = alerts
        self.nav_alert_threshold_pct = nav_alert_threshold_pct

    async def list_funds(self) -> List[Fund]:
        return await self.catalog.list_all()

    async def search_funds(self, query: str) -> List[Fund]:
        return await self.catalog.search(query.strip())

    async def get_fund(self, fund_id: int) -> Fund:
        fund = await self.catalog.get_by_id(fund_id)
        if fund is None:
            raise NotFound("Fund", fund_id)
        return fund

    async def refresh_nav(self, fund_id: int, nav: Decimal) -> Fund:
        """
        Store a new NAV for a fund

        Users holding the fund get a nav_change alert when the move is at
        least nav_alert_threshold_pct in either direction.
        """
        if nav <= 0:
            raise InvalidAmount("NAV must be positive", field="nav")

        previous = await self.get_fund(fund_id)
        updated = await self.catalog.update_nav(fund_id, quantize_nav(nav))
        if updated is None:
            raise NotFound("Fund", fund_id)

        change_pct = percentage(updated.current_nav - previous.current_nav, previous.current_nav)
        logger.info(
            "NAV refresh fund=%s %s -> %s (%s%%)",
            fund_id, previous.current_nav, updated.current_nav, change_pct,
        )

        if abs(change_pct) >= self.nav_alert_threshold_pct:
            await self._notify_holders(updated, change_pct)

        return updated

    async def _notify_holders(self, fund: Fund, change_pct: Decimal) -> None:
        direction = "up" if change_pct > 0 else "down"
        holders = {h.user_id for h in await self.holdings.list_for_fund(fund.id) if h.is_open}
        for user_id in sorted(holders):
            await self.alerts.create_alert(
                user_id,
                AlertType.NAV_CHANGE,
                title=f"NAV {direction} {abs(change_pct)}%",
                description=f"{fund.name} NAV is now ₹{fund.current_nav} ({change_pct:+}%).",
            )
