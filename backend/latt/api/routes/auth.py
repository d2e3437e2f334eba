"""Auth Routes: register, login and logout backed by the signed session cookie.

Invariants:
    - Only the integer user id is written to the session
    - Login clears any previous session before storing the new id
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from latt.api.dependencies import SESSION_USER_KEY
from latt.infrastructure.database import get_db
from latt.schemas.user import AccountResponse
from latt.services.user_accounts import authenticate_user, register_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/register", response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    request: Request,
    email: Annotated[str, Form(max_length=255)],
    password: Annotated[str, Form(max_length=200)],
    db: AsyncSession = Depends(get_db),
):
    """Create an account and log it in."""
    user_id = await register_user(db, email, password)
    request.session.clear()
    request.session[SESSION_USER_KEY] = user_id
    return AccountResponse(user_id=user_id, message="Registered")


@router.post("/login", response_model=AccountResponse)
async def login(
    request: Request,
    email: Annotated[str, Form(max_length=255)],
    password: Annotated[str, Form(max_length=200)],
    db: AsyncSession = Depends(get_db),
):
    user_id = await authenticate_user(db, email, password)
    request.session.clear()
    request.session[SESSION_USER_KEY] = user_id
    logger.info("User logged in", extra={"user_id": user_id})
    return AccountResponse(user_id=user_id, message="Logged in")


@router.post("/logout")
async def logout(request: Request):
    request.session.clear()
    return {"message": "Logged out"}
