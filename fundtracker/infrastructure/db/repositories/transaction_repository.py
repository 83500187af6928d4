"""
Transaction Repository
Append-only ledger - entries are never updated or deleted
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fundtracker.domain.models import Transaction, TransactionStatus, TransactionType
from fundtracker.infrastructure.db.models import (
    TransactionModel,
    TransactionStatusEnum,
    TransactionTypeEnum,
)
from fundtracker.utils.time import now_ist_naive


class TransactionRepository:
    """Repository for ledger entries"""

    def __init__(self, session: AsyncSession):
        """Initialize with database session"""
        self.session = session

    async def record(self, transaction: Transaction) -> Transaction:
        """
        Append a transaction

        Args:
            transaction: Domain transaction without identity

        Returns:
            The stored transaction with id and timestamp assigned
        """
        model = TransactionModel(
            user_id=transaction.user_id,
            fund_id=transaction.fund_id,
            type=TransactionTypeEnum(transaction.type.value),
            amount=transaction.amount,
            units=transaction.units,
            nav=transaction.nav,
            status=TransactionStatusEnum(transaction.status.value),
            created_at=transaction.created_at or now_ist_naive(),
        )

        self.session.add(model)
        await self.session.flush()

        return self._to_domain(model)

    async def list_for_user(self, user_id: int) -> List[Transaction]:
        """
        Ledger of a user, newest first

        Equal timestamps fall back to id, i.e. insertion order.
        """
        result = await self.session.execute(
            select(TransactionModel)
            .where(TransactionModel.user_id == user_id)
            .order_by(TransactionModel.created_at.desc(), TransactionModel.id.desc())
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    @staticmethod
    def _to_decimal(value) -> Optional[Decimal]:
        return Decimal(str(value)) if value is not None else None

    @classmethod
    def _to_domain(cls, model: TransactionModel) -> Transaction:
        """Convert database model to domain entity"""
        return Transaction(
            id=model.id,
            user_id=model.user_id,
            fund_id=model.fund_id,
            type=TransactionType(model.type.value),
            amount=cls._to_decimal(model.amount),
            units=cls._to_decimal(model.units),
            nav=cls._to_decimal(model.nav),
            status=TransactionStatus(model.status.value),
            created_at=model.created_at,
        )
