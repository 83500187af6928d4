"""
DOMAIN MODELS - PORTFOLIO & GAINS

Immutable structures derived from holdings and the fund catalog.
No database access.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List

from .entities import Fund, Holding, Transaction, percentage, quantize_amount


@dataclass(frozen=True)
class FundHolding:
    """
    A holding joined with its fund and valued at the fund's current NAV.
    """
    holding: Holding
    fund: Fund

    @property
    def category(self) -> str:
        return self.fund.category

    @property
    def current_value(self) -> Decimal:
        return quantize_amount(self.holding.units * self.fund.current_nav)

    @property
    def gains(self) -> Decimal:
        return self.current_value - self.holding.total_invested

    @property
    def gains_percentage(self) -> Decimal:
        return percentage(self.gains, self.holding.total_invested)


@dataclass(frozen=True)
class TransactionWithFund:
    transaction: Transaction
    fund: Fund


@dataclass(frozen=True)
class PortfolioSummary:
    """
    Portfolio-level snapshot for one user.
    """
    total_value: Decimal
    total_invested: Decimal
    total_gains: Decimal
    total_gains_percentage: Decimal
    monthly_sip: Decimal
    active_funds: int


@dataclass(frozen=True)
class CategoryAllocation:
    """
    Share of portfolio value held in one fund category.
    """
    category: str
    value: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class RiskAssessment:
    score: int
    level: str


@dataclass(frozen=True)
class PortfolioAnalysis:
    allocation: List[CategoryAllocation]
    category_count: int
    diversification: str
    risk: RiskAssessment
    top_performers: List[FundHolding]
