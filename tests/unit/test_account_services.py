import pytest
from datetime import datetime
from decimal import Decimal

from fundtracker.domain.exceptions import DuplicateUser, InvalidAmount, NotFound
from fundtracker.domain.models import AlertType, SipFrequency
from fundtracker.domain.services.alert_service import AlertService
from fundtracker.domain.services.sip_service import SipPlanService, next_sip_date
from fundtracker.domain.services.user_service import UserService
from fundtracker.infrastructure.memory import IdGenerator


# ============================================
# SIP plans
# ============================================

@pytest.mark.parametrize("frequency,expected", [
    (SipFrequency.WEEKLY, datetime(2026, 1, 22, 10, 0)),
    (SipFrequency.MONTHLY, datetime(2026, 2, 15, 10, 0)),
    (SipFrequency.QUARTERLY, datetime(2026, 4, 15, 10, 0)),
])
def test_next_sip_date(frequency, expected):
    assert next_sip_date(datetime(2026, 1, 15, 10, 0), frequency) == expected


def test_next_sip_date_clamps_to_month_end():
    assert next_sip_date(datetime(2026, 1, 31), SipFrequency.MONTHLY) == datetime(2026, 2, 28)
    assert next_sip_date(datetime(2028, 1, 31), SipFrequency.MONTHLY) == datetime(2028, 2, 29)
    assert next_sip_date(datetime(2026, 11, 30), SipFrequency.QUARTERLY) == datetime(2027, 2, 28)


@pytest.mark.asyncio
async def test_sip_plan_pause_and_resume(memory_stores):
    service = SipPlanService(memory_stores.sip_plans)
    plan = await service.create_plan(1, 1, Decimal("2500"), SipFrequency.WEEKLY, start=datetime(2026, 3, 1))

    assert plan.next_date == datetime(2026, 3, 8)

    paused = await service.set_active(plan.id, False)
    assert not paused.is_active
    assert [p.is_active for p in await service.list_plans(1)] == [False]

    resumed = await service.set_active(plan.id, True)
    assert resumed.is_active


@pytest.mark.asyncio
async def test_sip_plan_validation(memory_stores):
    service = SipPlanService(memory_stores.sip_plans)

    with pytest.raises(InvalidAmount):
        await service.create_plan(1, 1, Decimal("0"), SipFrequency.MONTHLY)
    with pytest.raises(NotFound):
        await service.set_active(404, False)


# ============================================
# Alerts
# ============================================

@pytest.mark.asyncio
async def test_alerts_newest_first_and_mark_read(memory_stores):
    service = AlertService(memory_stores.alerts)
    first = await service.create_alert(1, AlertType.REBALANCE, "Rebalance", "Equity drifted")
    second = await service.create_alert(1, AlertType.GOAL_ACHIEVED, "Goal", "Reached ₹1L")
    await service.create_alert(2, AlertType.REBALANCE, "Other user", "Not yours")

    alerts = await service.list_alerts(1)
    assert [a.id for a in alerts] == [second.id, first.id]

    await service.mark_read(first.id)
    assert {a.id: a.is_read for a in await service.list_alerts(1)} == {first.id: True, second.id: False}

    with pytest.raises(NotFound):
        await service.mark_read(999)


# ============================================
# Users
# ============================================

@pytest.mark.asyncio
async def test_register_normalises_email_and_rejects_duplicates(memory_stores):
    service = UserService(memory_stores.users)
    user = await service.register("  Ravi Kumar ", "Ravi@Example.com")

    assert user.email == "ravi@example.com"
    assert user.name == "Ravi Kumar"
    assert (await service.get(user.id)).email == "ravi@example.com"

    with pytest.raises(DuplicateUser) as exc:
        await service.register("Someone Else", "RAVI@example.com")
    assert exc.value.message == "User with this email already exists"


@pytest.mark.asyncio
async def test_get_unknown_user(memory_stores):
    with pytest.raises(NotFound):
        await UserService(memory_stores.users).get(7)


def test_id_generator_is_monotonic():
    ids = IdGenerator()
    assert [ids.next_id() for _ in range(3)] == [1, 2, 3]
