from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional

from fundtracker.domain.models import Alert, AlertType, User


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=255)


class UserSchema(BaseModel):
    id: int
    name: str
    email: str
    created_at: Optional[datetime]

    @classmethod
    def from_domain(cls, user: User) -> "UserSchema":
        return cls(id=user.id, name=user.name, email=user.email, created_at=user.created_at)


class AlertCreate(BaseModel):
    user_id: int
    type: AlertType
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)


class AlertSchema(BaseModel):
    id: int
    user_id: int
    type: str
    title: str
    description: str
    is_read: bool
    created_at: Optional[datetime]

    @classmethod
    def from_domain(cls, alert: Alert) -> "AlertSchema":
        return cls(
            id=alert.id,
            user_id=alert.user_id,
            type=alert.type.value,
            title=alert.title,
            description=alert.description,
            is_read=alert.is_read,
            created_at=alert.created_at,
        )


class NavUpdate(BaseModel):
    nav: float = Field(..., gt=0)
