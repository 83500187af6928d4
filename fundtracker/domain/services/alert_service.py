"""
Alert bookkeeping.
Alerts are side-effect records; no other component reads them.
"""

import logging
from typing import List

from fundtracker.domain.exceptions import NotFound
from fundtracker.domain.models import Alert, AlertType
from fundtracker.domain.repositories import AlertStore

logger = logging.getLogger(__name__)


class AlertService:
    def __init__(self, alerts: AlertStore):
        self.alerts = alerts

    async def create_alert(self, user_id: int, alert_type: AlertType, title: str, description: str) -> Alert:
        alert = await self.alerts.create(Alert(
            id=None,
            user_id=user_id,
            type=alert_type,
            title=title,
            description=description,
        ))
        logger.info("Alert %s (%s) for user %s: %s", alert.id, alert_type.value, user_id, title)
        return alert

    async def list_alerts(self, user_id: int) -> List[Alert]:
        """Newest first"""
        return await self.alerts.list_for_user(user_id)

    async def mark_read(self, alert_id: int) -> None:
        if not await self.alerts.mark_read(alert_id):
            raise NotFound("Alert", alert_id)
