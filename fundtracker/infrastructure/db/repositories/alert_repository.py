"""
Alert Repository
"""

from typing import List

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fundtracker.domain.models import Alert, AlertType
from fundtracker.infrastructure.db.models import AlertModel, AlertTypeEnum
from fundtracker.utils.time import now_ist_naive


class AlertRepository:
    """Repository for user alerts"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, alert: Alert) -> Alert:
        model = AlertModel(
            user_id=alert.user_id,
            type=AlertTypeEnum(alert.type.value),
            title=alert.title,
            description=alert.description,
            is_read=alert.is_read,
            created_at=alert.created_at or now_ist_naive(),
        )
        self.session.add(model)
        await self.session.flush()
        return self._to_domain(model)

    async def list_for_user(self, user_id: int) -> List[Alert]:
        """Newest first"""
        result = await self.session.execute(
            select(AlertModel)
            .where(AlertModel.user_id == user_id)
            .order_by(AlertModel.created_at.desc(), AlertModel.id.desc())
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    async def mark_read(self, alert_id: int) -> bool:
        result = await self.session.execute(
            update(AlertModel)
            .where(AlertModel.id == alert_id)
            .values(is_read=True)
        )
        return result.rowcount > 0

    @staticmethod
    def _to_domain(model: AlertModel) -> Alert:
        return Alert(
            id=model.id,
            user_id=model.user_id,
            type=AlertType(model.type.value),
            title=model.title,
            description=model.description,
            is_read=bool(model.is_read),
            created_at=model.created_at,
        )
