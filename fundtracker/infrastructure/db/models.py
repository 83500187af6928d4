"""
Database Models (SQLAlchemy ORM)
Transactions are insert-only - NO UPDATES, NO DELETES
"""

from sqlalchemy import (
    Boolean, Column, DateTime, Enum as SQLEnum, Index, Integer, Numeric,
    String, Text, UniqueConstraint,
)
import enum

from fundtracker.infrastructure.db.database import Base
from fundtracker.utils.time import now_ist_naive


# Enums
class TransactionTypeEnum(str, enum.Enum):
    BUY = "buy"
    SELL = "sell"
    SIP = "sip"


class TransactionStatusEnum(str, enum.Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


class SipFrequencyEnum(str, enum.Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class AlertTypeEnum(str, enum.Enum):
    NAV_CHANGE = "nav_change"
    SIP_DUE = "sip_due"
    REBALANCE = "rebalance"
    GOAL_ACHIEVED = "goal_achieved"


# Tables

class FundModel(Base):
    """Fund catalog entry"""
    __tablename__ = "funds"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(200), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    amc = Column(String(100), nullable=False)
    current_nav = Column(Numeric(10, 4), nullable=False)
    expense_ratio = Column(Numeric(5, 2), nullable=True)
    risk_level = Column(String(20), nullable=False)
    nav_updated_at = Column(DateTime, nullable=False, default=now_ist_naive)


class UserModel(Base):
    """Registered investor"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    created_at = Column(DateTime, nullable=False, default=now_ist_naive)


class TransactionModel(Base):
    """Ledger entry - AUDIT RECORD"""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False)
    fund_id = Column(Integer, nullable=False)

    type = Column(SQLEnum(TransactionTypeEnum, native_enum=False, length=20), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    units = Column(Numeric(15, 4), nullable=True)
    nav = Column(Numeric(10, 4), nullable=True)
    status = Column(SQLEnum(TransactionStatusEnum, native_enum=False, length=20), nullable=False, default=TransactionStatusEnum.COMPLETED)

    created_at = Column(DateTime, nullable=False, default=now_ist_naive)

    __table_args__ = (
        Index('ix_transactions_user', 'user_id', 'created_at'),
    )


class HoldingModel(Base):
    """Current position - one row per (user, fund)"""
    __tablename__ = "holdings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False)
    fund_id = Column(Integer, nullable=False)

    units = Column(Numeric(15, 4), nullable=False)
    avg_nav = Column(Numeric(10, 4), nullable=False)
    total_invested = Column(Numeric(15, 2), nullable=False)

    __table_args__ = (
        UniqueConstraint('user_id', 'fund_id', name='uq_holdings_user_fund'),
        Index('ix_holdings_user', 'user_id'),
        Index('ix_holdings_fund', 'fund_id'),
    )


class SipPlanModel(Base):
    """Recurring investment instruction"""
    __tablename__ = "sip_plans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False)
    fund_id = Column(Integer, nullable=False)

    amount = Column(Numeric(15, 2), nullable=False)
    frequency = Column(SQLEnum(SipFrequencyEnum, native_enum=False, length=20), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    next_date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_ist_naive)

    __table_args__ = (
        Index('ix_sip_plans_user', 'user_id'),
    )


class AlertModel(Base):
    """User notification"""
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False)

    type = Column(SQLEnum(AlertTypeEnum, native_enum=False, length=20), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=now_ist_naive)

    __table_args__ = (
        Index('ix_alerts_user', 'user_id', 'created_at'),
    )
