"""API routes."""

from fastapi import APIRouter

from app.api.routes import chats, health, users
from app.schemas.common import ErrorResponse

router = APIRouter(responses={500: {"model": ErrorResponse}})

router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(users.router, tags=["users"])
router.include_router(chats.router, tags=["chats"])
