"""Service Resolver: find-or-create a Service by name, returning a stable id.

Invariants:
    - The same name (after normalisation, case-insensitive) always yields the same id
    - An existing Service is returned unchanged: category and logo are never updated
    - At most one Service row per lookup_key survives concurrent first-time resolutions

Design Decisions:
    - Idempotent-by-retry over advisory locks: the UNIQUE constraint on lookup_key
      arbitrates the race; the loser rolls back, re-reads once and returns the winner
    - A failed re-read after a conflict is a non-transient inconsistency and raises
      ConstraintViolationError instead of retrying again
    - The new Service is committed on its own: if the subscription insert that follows
      fails, the Service stays for later reuse
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from latt.core.domain_types import DEFAULT_LOGO_URL, ServiceId
from latt.core.errors import ConstraintViolationError, ErrorContext
from latt.core.validation import (
    normalize_category, normalize_service_name, service_lookup_key,
)
from latt.infrastructure.database import store_errors
from latt.models.service import Service

logger = logging.getLogger(__name__)


async def _find_service_id(db: AsyncSession, lookup_key: str) -> ServiceId | None:
    with store_errors("service lookup"):
        result = await db.execute(
            select(Service.id).where(Service.lookup_key == lookup_key),
        )
    found = result.scalar_one_or_none()
    return ServiceId(found) if found is not None else None


async def resolve_service(
    db: AsyncSession, name: str, category: str | None = None,
) -> ServiceId:
    """Return the id of the Service called `name`, creating it if absent.

    Raises InvalidInputError for a blank name, StoreUnavailableError on
    connectivity loss, ConstraintViolationError if a lost race cannot be
    resolved by one re-read.
    """
    display_name = normalize_service_name(name)
    lookup_key = service_lookup_key(display_name)
    category = normalize_category(category)

    existing = await _find_service_id(db, lookup_key)
    if existing is not None:
        return existing

    service = Service(
        name=display_name, lookup_key=lookup_key,
        category=category, logo_url=DEFAULT_LOGO_URL,
    )
    try:
        with store_errors("service insert"):
            db.add(service)
            await db.flush()
            service_id = ServiceId(service.id)
            await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info(
            "Service insert lost a race, re-reading winner",
            extra={"service_key": lookup_key},
        )
        winner = await _find_service_id(db, lookup_key)
        if winner is None:
            raise ConstraintViolationError(
                f"Service '{display_name}' conflicts with an existing row "
                "that could not be read back",
                ErrorContext(debug_info={"lookup_key": lookup_key}),
            )
        return winner

    logger.info(
        f"Created service '{display_name}'", extra={"service_id": service_id},
    )
    return service_id


async def list_services(db: AsyncSession) -> list[Service]:
    """Service catalog ordered by name."""
    with store_errors("service list"):
        result = await db.execute(select(Service).order_by(Service.lookup_key))
    return list(result.scalars().all())
