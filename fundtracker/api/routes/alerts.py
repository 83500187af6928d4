from typing import List

from fastapi import APIRouter, Depends

from fundtracker.api.dependencies import get_alert_service
from fundtracker.domain.schemas.account import AlertCreate, AlertSchema
from fundtracker.domain.services.alert_service import AlertService

router = APIRouter()


@router.get("/user/{user_id}", response_model=List[AlertSchema])
async def list_alerts(user_id: int, service: AlertService = Depends(get_alert_service)):
    """Alerts of a user, newest first"""
    return [AlertSchema.from_domain(a) for a in await service.list_alerts(user_id)]


@router.post("", response_model=AlertSchema, status_code=201)
async def create_alert(body: AlertCreate, service: AlertService = Depends(get_alert_service)):
    alert = await service.create_alert(body.user_id, body.type, body.title, body.description)
    return AlertSchema.from_domain(alert)


@router.patch("/{alert_id}/read")
async def mark_alert_read(alert_id: int, service: AlertService = Depends(get_alert_service)):
    await service.mark_read(alert_id)
    return {"success": True}
