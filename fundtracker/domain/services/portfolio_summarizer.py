"""
PORTFOLIO SUMMARIZER
Holdings + active SIP plans -> one PortfolioSummary per user

RULES:
✅ Pure function of holdings, live NAVs and SIP plans
✅ Percentages are 0 when nothing is invested
✅ monthly_sip counts monthly plans only
"""

import logging
from decimal import Decimal
from typing import Iterable, List

from fundtracker.domain.models import (
    FundHolding,
    PortfolioSummary,
    SipFrequency,
    SipPlan,
    percentage,
    quantize_amount,
)
from fundtracker.domain.repositories import SipPlanStore
from fundtracker.domain.services.holding_aggregator import HoldingAggregator

logger = logging.getLogger(__name__)


def monthly_sip_amount(sip_plans: Iterable[SipPlan]) -> Decimal:
    """Sum of active SIPs that recur monthly; weekly and quarterly plans are excluded."""
    return quantize_amount(sum(
        (p.amount for p in sip_plans if p.is_active and p.frequency == SipFrequency.MONTHLY),
        Decimal("0"),
    ))


def summarize(holdings: List[FundHolding], sip_plans: Iterable[SipPlan]) -> PortfolioSummary:
    """
    Build the portfolio snapshot.

    Args:
        holdings: Open holdings valued at current NAV
        sip_plans: All SIP plans of the user

    Returns:
        PortfolioSummary (all zeros for an empty portfolio)
    """
    open_holdings = [h for h in holdings if h.holding.is_open]

    total_value = sum((h.current_value for h in open_holdings), Decimal("0.00"))
    total_invested = sum((h.holding.total_invested for h in open_holdings), Decimal("0.00"))
    total_gains = total_value - total_invested

    return PortfolioSummary(
        total_value=total_value,
        total_invested=total_invested,
        total_gains=total_gains,
        total_gains_percentage=percentage(total_gains, total_invested),
        monthly_sip=monthly_sip_amount(sip_plans),
        active_funds=len({h.holding.fund_id for h in open_holdings}),
    )


class PortfolioSummarizer:
    """Loads holdings and SIP plans and summarizes them"""

    def __init__(self, aggregator: HoldingAggregator, sip_plans: SipPlanStore):
        self.aggregator = aggregator
        self.sip_plans = sip_plans

    async def get_portfolio_summary(self, user_id: int) -> PortfolioSummary:
        holdings = await self.aggregator.get_holdings(user_id)
        plans = await self.sip_plans.list_for_user(user_id)

        summary = summarize(holdings, plans)
        logger.info(
            "Portfolio summary user=%s | invested=%s value=%s gains=%s (%s%%)",
            user_id,
            summary.total_invested,
            summary.total_value,
            summary.total_gains,
            summary.total_gains_percentage,
        )
        return summary
