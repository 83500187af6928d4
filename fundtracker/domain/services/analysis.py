"""
ALLOCATION & ANALYSIS
Stateless derivations over a set of valued holdings

- Category allocation (value and % of portfolio)
- Diversification score (fixed category-count thresholds)
- Top performers by gains %
- Value-weighted risk score
"""

import logging
from collections import OrderedDict
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from fundtracker.domain.models import (
    CategoryAllocation,
    FundHolding,
    PortfolioAnalysis,
    RiskAssessment,
    percentage,
)
from fundtracker.domain.services.holding_aggregator import HoldingAggregator

logger = logging.getLogger(__name__)

DEFAULT_TOP_PERFORMERS = 5

# (minimum distinct categories, label), checked top-down
DIVERSIFICATION_THRESHOLDS = (
    (4, "Excellent"),
    (3, "Good"),
    (2, "Fair"),
)

# (maximum score, label), checked top-down
RISK_THRESHOLDS = (
    (3, "Low"),
    (6, "Moderate"),
)


def category_allocation(holdings: List[FundHolding]) -> List[CategoryAllocation]:
    """
    Group holdings by fund category.

    Returns:
        One entry per category, largest value first
    """
    by_category: "OrderedDict[str, Decimal]" = OrderedDict()
    for h in holdings:
        by_category[h.category] = by_category.get(h.category, Decimal("0.00")) + h.current_value

    total = sum(by_category.values(), Decimal("0.00"))

    allocation = [
        CategoryAllocation(category=category, value=value, percentage=percentage(value, total))
        for category, value in by_category.items()
    ]
    return sorted(allocation, key=lambda a: a.value, reverse=True)


def category_count(holdings: List[FundHolding]) -> int:
    return len({h.category for h in holdings})


def diversification_score(holdings: List[FundHolding]) -> str:
    count = category_count(holdings)
    for minimum, label in DIVERSIFICATION_THRESHOLDS:
        if count >= minimum:
            return label
    return "Poor"


def top_performers(holdings: List[FundHolding], limit: int = DEFAULT_TOP_PERFORMERS) -> List[FundHolding]:
    """
    Holdings in profit, best gains % first.

    sorted() is stable, so equal percentages keep their input order.
    """
    gainers = [h for h in holdings if h.gains_percentage > 0]
    return sorted(gainers, key=lambda h: h.gains_percentage, reverse=True)[:limit]


def risk_assessment(holdings: List[FundHolding]) -> RiskAssessment:
    """
    Current-value-weighted average of fund risk levels on a 0-10 scale.
    """
    total = sum((h.current_value for h in holdings), Decimal("0"))
    if total <= 0:
        return RiskAssessment(score=0, level="Low")

    weighted = sum((h.current_value * h.fund.risk_level.score for h in holdings), Decimal("0"))
    score = int((weighted / total).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    for maximum, label in RISK_THRESHOLDS:
        if score <= maximum:
            return RiskAssessment(score=score, level=label)
    return RiskAssessment(score=score, level="High")


class PortfolioAnalyzer:
    """Runs the derivations against a user's current holdings"""

    def __init__(self, aggregator: HoldingAggregator, top_performers_limit: int = DEFAULT_TOP_PERFORMERS):
        self.aggregator = aggregator
        self.top_performers_limit = top_performers_limit

    async def get_category_allocation(self, user_id: int) -> List[CategoryAllocation]:
        holdings = await self.aggregator.get_holdings(user_id)
        return category_allocation(holdings)

    async def get_analysis(self, user_id: int) -> PortfolioAnalysis:
        holdings = await self.aggregator.get_holdings(user_id)

        analysis = PortfolioAnalysis(
            allocation=category_allocation(holdings),
            category_count=category_count(holdings),
            diversification=diversification_score(holdings),
            risk=risk_assessment(holdings),
            top_performers=top_performers(holdings, self.top_performers_limit),
        )
        logger.debug(
            "Analysis user=%s | categories=%d diversification=%s risk=%s",
            user_id,
            analysis.category_count,
            analysis.diversification,
            analysis.risk.level,
        )
        return analysis
