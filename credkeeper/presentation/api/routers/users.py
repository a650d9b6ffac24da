"""API router for user management."""

from typing import List

from fastapi import APIRouter, Depends, Query

from ....application.services.credential_service import CredentialService
from ....core.dependencies import get_credential_service
from ....domain.errors import UserNotFound
from ...api.schemas.user_schemas import (
    ChangePasswordRequest,
    EmailExistsResponse,
    UserCreateRequest,
    UserCreatedResponse,
    UserIdResponse,
    UserResponse,
    UserUpdateRequest,
)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=List[UserResponse])
async def list_users(
    service: CredentialService = Depends(get_credential_service),
) -> List[UserResponse]:
    users = await service.list_users()
    return [UserResponse(**user.to_dict()) for user in users]


@router.get("/email-exists", response_model=EmailExistsResponse)
async def email_exists(
    email: str = Query(..., min_length=1),
    service: CredentialService = Depends(get_credential_service),
) -> EmailExistsResponse:
    exists = await service.email_exists(email)
    return EmailExistsResponse(email=service.normalize_email(email), exists=exists)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    service: CredentialService = Depends(get_credential_service),
) -> UserResponse:
    user = await service.get_user(user_id)
    if user is None:
        raise UserNotFound(user_id)
    return UserResponse(**user.to_dict())


@router.post("", response_model=UserCreatedResponse)
async def create_user(
    payload: UserCreateRequest,
    service: CredentialService = Depends(get_credential_service),
) -> UserCreatedResponse:
    created = await service.create_user(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        confirm_password=payload.confirm_password,
    )
    return UserCreatedResponse(**created.to_dict())


@router.put("/{user_id}", response_model=UserIdResponse)
async def update_user(
    user_id: int,
    payload: UserUpdateRequest,
    service: CredentialService = Depends(get_credential_service),
) -> UserIdResponse:
    updated_id = await service.update_user(user_id, payload.name, payload.email)
    return UserIdResponse(id=updated_id)


@router.delete("/{user_id}", response_model=UserIdResponse)
async def delete_user(
    user_id: int,
    service: CredentialService = Depends(get_credential_service),
) -> UserIdResponse:
    deleted_id = await service.delete_user(user_id)
    return UserIdResponse(id=deleted_id)


@router.patch("/{user_id}/change-password", response_model=UserIdResponse)
async def change_password(
    user_id: int,
    payload: ChangePasswordRequest,
    service: CredentialService = Depends(get_credential_service),
) -> UserIdResponse:
    changed_id = await service.change_password(
        user_id,
        old_password=payload.old_password,
        new_password=payload.new_password,
        confirm_password=payload.confirm_password,
    )
    return UserIdResponse(id=changed_id)
