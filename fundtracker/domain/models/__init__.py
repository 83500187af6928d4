"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    AlertType,
    RiskLevel,
    SipFrequency,
    TransactionStatus,
    TransactionType,

    # Entities
    Alert,
    Fund,
    Holding,
    SipPlan,
    Transaction,
    User,

    # Decimal helpers
    percentage,
    quantize_amount,
    quantize_nav,
    quantize_units,
)
from .portfolio import (
    CategoryAllocation,
    FundHolding,
    PortfolioAnalysis,
    PortfolioSummary,
    RiskAssessment,
    TransactionWithFund,
)

__all__ = [
    # Enums
    "AlertType",
    "RiskLevel",
    "SipFrequency",
    "TransactionStatus",
    "TransactionType",

    # Entities
    "Alert",
    "Fund",
    "Holding",
    "SipPlan",
    "Transaction",
    "User",

    # Derived
    "CategoryAllocation",
    "FundHolding",
    "PortfolioAnalysis",
    "PortfolioSummary",
    "RiskAssessment",
    "TransactionWithFund",

    # Decimal helpers
    "percentage",
    "quantize_amount",
    "quantize_nav",
    "quantize_units",
]
