"""User Accounts: registration and password authentication.

Invariants:
    - Emails stored lower-cased; lookups use the same normalisation
    - Unknown email and wrong password raise the same InvalidCredentialsError
    - bcrypt work factor comes from settings (lowered in tests)
    - bcrypt runs in the threadpool, never on the event loop
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from latt.config import get_settings
from latt.core.domain_types import UserId
from latt.core.errors import EmailAlreadyRegisteredError, InvalidCredentialsError
from latt.core.validation import check_password, normalize_email
from latt.infrastructure.database import store_errors
from latt.infrastructure.passwords import hash_password, verify_password
from latt.models.user import User

logger = logging.getLogger(__name__)


async def register_user(db: AsyncSession, email: str, password: str) -> UserId:
    email = normalize_email(email)
    password = check_password(password)
    password_hash = await run_in_threadpool(
        hash_password, password, get_settings().bcrypt_rounds,
    )
    user = User(email=email, password_hash=password_hash)
    try:
        with store_errors("user insert"):
            db.add(user)
            await db.flush()
            user_id = UserId(user.id)
            await db.commit()
    except IntegrityError:
        await db.rollback()
        raise EmailAlreadyRegisteredError(email)
    logger.info("User registered", extra={"user_id": user_id})
    return user_id


async def authenticate_user(db: AsyncSession, email: str, password: str) -> UserId:
    with store_errors("user lookup"):
        result = await db.execute(
            select(User).where(User.email == (email or "").strip().lower()),
        )
    user = result.scalar_one_or_none()
    if user is None or not await run_in_threadpool(
        verify_password, password or "", user.password_hash,
    ):
        raise InvalidCredentialsError()
    return UserId(user.id)
