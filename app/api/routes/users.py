"""User endpoints."""

import logging

from fastapi import APIRouter

from app.api.deps import Store
from app.core.exceptions import InvalidInputError
from app.schemas.user import LoginRequest, UserResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/users", response_model=list[UserResponse])
async def list_users(store: Store) -> list[UserResponse]:
    """List all users."""
    users = await store.list_users()
    return [UserResponse.model_validate(u) for u in users]


@router.post("/login", response_model=UserResponse)
async def login(payload: LoginRequest, store: Store) -> UserResponse:
    """Log in by username, creating the user on first login."""
    if not payload.username:
        raise InvalidInputError("Username is required")

    user = await store.get_or_create_user(payload.username)
    logger.info(f"User {user.username} logged in ({user.id})")
    return UserResponse.model_validate(user)
