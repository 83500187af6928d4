"""
Domain Models - Entities
Pure domain objects with no infrastructure dependencies
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional


UNITS_QUANT = Decimal("0.0001")
NAV_QUANT = Decimal("0.0001")
AMOUNT_QUANT = Decimal("0.01")
PCT_QUANT = Decimal("0.01")


def quantize_units(value: Decimal) -> Decimal:
    return value.quantize(UNITS_QUANT, rounding=ROUND_HALF_UP)


def quantize_nav(value: Decimal) -> Decimal:
    return value.quantize(NAV_QUANT, rounding=ROUND_HALF_UP)


def quantize_amount(value: Decimal) -> Decimal:
    return value.quantize(AMOUNT_QUANT, rounding=ROUND_HALF_UP)


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    """part / whole * 100, or 0 when whole is not positive"""
    if whole <= 0:
        return Decimal("0.00")
    return (part / whole * Decimal("100")).quantize(PCT_QUANT, rounding=ROUND_HALF_UP)


class TransactionType(str, Enum):
    """Kind of ledger entry"""
    BUY = "buy"
    SELL = "sell"
    SIP = "sip"


class TransactionStatus(str, Enum):
    """Execution status of a ledger entry"""
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


class SipFrequency(str, Enum):
    """How often a SIP instalment recurs"""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class AlertType(str, Enum):
    """Alert categories"""
    NAV_CHANGE = "nav_change"
    SIP_DUE = "sip_due"
    REBALANCE = "rebalance"
    GOAL_ACHIEVED = "goal_achieved"


class RiskLevel(str, Enum):
    """Risk label published by the AMC, lowest first"""
    LOW = "Low"
    MODERATE = "Moderate"
    MODERATE_HIGH = "Moderate High"
    HIGH = "High"
    VERY_HIGH = "Very High"

    @property
    def score(self) -> int:
        """Position on a 0-10 scale"""
        return {
            RiskLevel.LOW: 2,
            RiskLevel.MODERATE: 4,
            RiskLevel.MODERATE_HIGH: 6,
            RiskLevel.HIGH: 8,
            RiskLevel.VERY_HIGH: 10,
        }[self]


@dataclass(frozen=True)
class Fund:
    """Mutual fund definition - Immutable apart from NAV refresh"""
    id: int
    name: str
    category: str
    amc: str
    current_nav: Decimal
    risk_level: RiskLevel
    expense_ratio: Optional[Decimal] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Fund name cannot be empty")
        if self.current_nav <= Decimal("0"):
            raise ValueError(f"Fund {self.id} NAV must be positive")
        if self.expense_ratio is not None and self.expense_ratio < Decimal("0"):
            raise ValueError(f"Fund {self.id} expense ratio cannot be negative")


@dataclass(frozen=True)
class User:
    """Registered investor"""
    id: Optional[int]
    name: str
    email: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Transaction:
    """Ledger entry - Immutable once recorded"""
    id: Optional[int]
    user_id: int
    fund_id: int
    type: TransactionType
    amount: Decimal
    units: Optional[Decimal]
    nav: Optional[Decimal]
    status: TransactionStatus = TransactionStatus.COMPLETED
    created_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.status == TransactionStatus.COMPLETED


@dataclass(frozen=True)
class Holding:
    """Current position of one user in one fund"""
    id: Optional[int]
    user_id: int
    fund_id: int
    units: Decimal
    avg_nav: Decimal
    total_invested: Decimal

    @property
    def is_open(self) -> bool:
        return self.units > Decimal("0")


@dataclass(frozen=True)
class SipPlan:
    """Recurring investment instruction (never auto-executed)"""
    id: Optional[int]
    user_id: int
    fund_id: int
    amount: Decimal
    frequency: SipFrequency
    next_date: datetime
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Alert:
    """Notification shown to the user"""
    id: Optional[int]
    user_id: int
    type: AlertType
    title: str
    description: str
    is_read: bool = False
    created_at: Optional[datetime] = None
