"""
Unit Tests for summary and analysis derivations
"""

import pytest
from datetime import datetime
from decimal import Decimal

from factories import make_fund
from fundtracker.domain.models import FundHolding, Holding, RiskLevel, SipFrequency, SipPlan
from fundtracker.domain.services.analysis import (
    PortfolioAnalyzer,
    category_allocation,
    diversification_score,
    risk_assessment,
    top_performers,
)
from fundtracker.domain.services.holding_aggregator import HoldingAggregator
from fundtracker.domain.services.portfolio_summarizer import (
    PortfolioSummarizer,
    monthly_sip_amount,
    summarize,
)


def fund_holding(fund_id, category, nav, units, invested, risk=RiskLevel.MODERATE):
    holding = Holding(
        id=fund_id,
        user_id=1,
        fund_id=fund_id,
        units=Decimal(units),
        avg_nav=Decimal(invested) / Decimal(units) if Decimal(units) else Decimal("0"),
        total_invested=Decimal(invested),
    )
    return FundHolding(holding=holding, fund=make_fund(fund_id, category, nav, risk))


def sip(amount, frequency, active=True):
    return SipPlan(
        id=None,
        user_id=1,
        fund_id=1,
        amount=Decimal(amount),
        frequency=frequency,
        next_date=datetime(2026, 1, 1),
        is_active=active,
    )


# ============================================
# Valuation
# ============================================

def test_holding_gains_at_current_nav():
    """100 units, NAV 55, invested 5000"""
    h = fund_holding(1, "Large Cap", "55", "100", "5000")

    assert h.current_value == Decimal("5500.00")
    assert h.gains == Decimal("500.00")
    assert h.gains_percentage == Decimal("10.00")


def test_zero_invested_gives_zero_percentage():
    h = fund_holding(1, "Large Cap", "55", "10", "0")
    assert h.gains_percentage == Decimal("0.00")


# ============================================
# Summary
# ============================================

def test_summary_totals():
    holdings = [
        fund_holding(1, "Large Cap", "55", "100", "5000"),
        fund_holding(2, "Mid Cap", "45", "100", "5000"),
    ]
    summary = summarize(holdings, [])

    assert summary.total_value == Decimal("10000.00")
    assert summary.total_invested == Decimal("10000.00")
    assert summary.total_gains == Decimal("0.00")
    assert summary.total_gains_percentage == Decimal("0.00")
    assert summary.active_funds == 2


def test_summary_of_empty_portfolio_is_zero():
    summary = summarize([], [])

    assert summary.total_value == Decimal("0")
    assert summary.total_gains_percentage == Decimal("0")
    assert summary.active_funds == 0
    assert summary.monthly_sip == Decimal("0")


def test_monthly_sip_excludes_other_frequencies():
    """One monthly ₹5,000 and one weekly ₹1,000"""
    plans = [sip("5000", SipFrequency.MONTHLY), sip("1000", SipFrequency.WEEKLY)]
    assert monthly_sip_amount(plans) == Decimal("5000.00")


def test_monthly_sip_excludes_paused_plans():
    plans = [sip("5000", SipFrequency.MONTHLY), sip("2000", SipFrequency.MONTHLY, active=False)]
    assert monthly_sip_amount(plans) == Decimal("5000.00")


# ============================================
# Allocation & diversification
# ============================================

def test_allocation_sorted_and_sums_to_100():
    holdings = [
        fund_holding(1, "Large Cap", "10", "100", "1000"),
        fund_holding(2, "Mid Cap", "10", "300", "3000"),
        fund_holding(3, "Large Cap", "10", "100", "1000"),
    ]
    allocation = category_allocation(holdings)

    assert [a.category for a in allocation] == ["Mid Cap", "Large Cap"]
    assert allocation[0].value == Decimal("3000.00")
    assert allocation[1].value == Decimal("2000.00")
    assert sum(a.percentage for a in allocation) == Decimal("100.00")


def test_allocation_of_empty_portfolio():
    assert category_allocation([]) == []


@pytest.mark.parametrize("categories,expected", [
    ([], "Poor"),
    (["Large Cap"], "Poor"),
    (["Large Cap", "Mid Cap"], "Fair"),
    (["Large Cap", "Mid Cap", "Small Cap"], "Good"),
    (["Large Cap", "Mid Cap", "Small Cap", "Index"], "Excellent"),
    (["Large Cap", "Mid Cap", "Small Cap", "Index", "Hybrid"], "Excellent"),
])
def test_diversification_thresholds(categories, expected):
    holdings = [fund_holding(i + 1, c, "10", "10", "100") for i, c in enumerate(categories)]
    assert diversification_score(holdings) == expected


def test_diversification_counts_categories_not_funds():
    holdings = [fund_holding(i, "Large Cap", "10", "10", "100") for i in range(1, 6)]
    assert diversification_score(holdings) == "Poor"


# ============================================
# Top performers & risk
# ============================================

def test_top_performers_order_and_limit():
    holdings = [
        fund_holding(1, "A", "11", "100", "1000"),   # +10%
        fund_holding(2, "B", "13", "100", "1000"),   # +30%
        fund_holding(3, "C", "9", "100", "1000"),    # -10%
        fund_holding(4, "D", "12", "100", "1000"),   # +20%
    ]
    best = top_performers(holdings, limit=2)

    assert [h.fund.id for h in best] == [2, 4]


def test_top_performers_ties_keep_input_order():
    holdings = [
        fund_holding(5, "A", "11", "100", "1000"),
        fund_holding(3, "B", "11", "100", "1000"),
        fund_holding(4, "C", "11", "100", "1000"),
    ]
    assert [h.fund.id for h in top_performers(holdings)] == [5, 3, 4]


def test_top_performers_excludes_losers_and_flat():
    holdings = [
        fund_holding(1, "A", "10", "100", "1000"),
        fund_holding(2, "B", "9", "100", "1000"),
    ]
    assert top_performers(holdings) == []


def test_risk_is_value_weighted():
    holdings = [
        fund_holding(1, "A", "10", "100", "1000", RiskLevel.LOW),        # 1000 @ 2
        fund_holding(2, "B", "10", "300", "3000", RiskLevel.VERY_HIGH),  # 3000 @ 10
    ]
    risk = risk_assessment(holdings)

    assert risk.score == 8
    assert risk.level == "High"


def test_risk_bands():
    assert risk_assessment([fund_holding(1, "A", "10", "10", "100", RiskLevel.LOW)]).level == "Low"
    assert risk_assessment([fund_holding(1, "A", "10", "10", "100", RiskLevel.MODERATE_HIGH)]).level == "Moderate"
    assert risk_assessment([]).score == 0


# ============================================
# Services over stores
# ============================================

@pytest.mark.asyncio
async def test_summarizer_and_analyzer_over_memory_stores(memory_stores):
    aggregator = HoldingAggregator(memory_stores.catalog, memory_stores.holdings)
    for fund_id, units, invested in ((1, "100", "4000"), (2, "50", "3500")):
        await memory_stores.holdings.save(Holding(
            id=None, user_id=1, fund_id=fund_id, units=Decimal(units),
            avg_nav=Decimal(invested) / Decimal(units), total_invested=Decimal(invested),
        ))
    await memory_stores.sip_plans.create(sip("5000", SipFrequency.MONTHLY))
    await memory_stores.sip_plans.create(sip("1000", SipFrequency.WEEKLY))

    summary = await PortfolioSummarizer(aggregator, memory_stores.sip_plans).get_portfolio_summary(1)

    # fund 1: 100 x 50 = 5000, fund 2: 50 x 60 = 3000
    assert summary.total_value == Decimal("8000.00")
    assert summary.total_invested == Decimal("7500.00")
    assert summary.total_gains == Decimal("500.00")
    assert summary.total_gains_percentage == Decimal("6.67")
    assert summary.monthly_sip == Decimal("5000.00")
    assert summary.active_funds == 2

    analysis = await PortfolioAnalyzer(aggregator).get_analysis(1)

    assert analysis.diversification == "Fair"
    assert [a.category for a in analysis.allocation] == ["Large Cap", "Mid Cap"]
    assert [h.fund.id for h in analysis.top_performers] == [1]
