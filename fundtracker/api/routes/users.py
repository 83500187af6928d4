from fastapi import APIRouter, Depends

from fundtracker.api.dependencies import get_user_service
from fundtracker.domain.schemas.account import UserCreate, UserSchema
from fundtracker.domain.services.user_service import UserService

router = APIRouter()


@router.post("", response_model=UserSchema, status_code=201)
async def register_user(body: UserCreate, service: UserService = Depends(get_user_service)):
    """Register an investor (409 if the email is taken)"""
    user = await service.register(body.name, body.email)
    return UserSchema.from_domain(user)


@router.get("/{user_id}", response_model=UserSchema)
async def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    return UserSchema.from_domain(await service.get(user_id))
