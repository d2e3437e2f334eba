"""Subscription Writer: inserts and deletes subscription rows for one user.

Invariants:
    - All input validated before the store is touched (InvalidInputError never reaches it)
    - One row per successful add; a failed insert is rolled back (no partial state)
    - Service/user existence is left to the store's foreign keys, never pre-checked
    - Deleting a missing (or foreign-owned) id raises ResourceNotFoundError

Design Decisions:
    - user_id is an explicit parameter on every call: no ambient "current user"
    - The name-based add workflow validates every field first, so a bad price
      never creates a Service as a side effect
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from latt.core.domain_types import (
    DEFAULT_BILLING_CYCLE, DEFAULT_CURRENCY,
    ServiceId, SubscriptionId, SubscriptionStatus, UserId,
)
from latt.core.errors import (
    ConstraintViolationError, ErrorContext, ForeignKeyViolationError,
    ResourceNotFoundError,
)
from latt.core.validation import (
    normalize_billing_cycle, normalize_category, normalize_currency,
    normalize_plan_name, normalize_service_name, parse_price, parse_renewal_date,
)
from latt.infrastructure.database import classify_integrity_error, store_errors
from latt.models.subscription import Subscription
from latt.services.service_resolver import resolve_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddedSubscription:
    """Result of the name-based add workflow."""
    subscription_id: SubscriptionId
    service_id: ServiceId


async def add_subscription(
    db: AsyncSession,
    user_id: UserId,
    service_id: ServiceId,
    renewal_date: date | str,
    price: Decimal | int | float | str,
    plan_name: str | None = None,
    billing_cycle: str | None = DEFAULT_BILLING_CYCLE,
    currency: str | None = DEFAULT_CURRENCY,
) -> SubscriptionId:
    """Insert one active subscription and return its id.

    On failure the session is rolled back, which expires every object the
    caller loaded in it: read ids before calling, or refresh afterwards.
    """
    subscription = Subscription(
        user_id=user_id,
        service_id=service_id,
        renewal_date=parse_renewal_date(renewal_date),
        price=parse_price(price),
        plan_name=normalize_plan_name(plan_name),
        billing_cycle=normalize_billing_cycle(billing_cycle),
        currency=normalize_currency(currency),
        status=SubscriptionStatus.ACTIVE.value,
    )
    try:
        with store_errors("subscription insert"):
            db.add(subscription)
            await db.flush()
            subscription_id = SubscriptionId(subscription.id)
            await db.commit()
    except IntegrityError as e:
        await db.rollback()
        ctx = ErrorContext(user_id=user_id, resource_id=str(service_id))
        if classify_integrity_error(e) == "foreign_key":
            logger.warning(
                "Subscription insert referenced a missing user or service",
                extra={"user_id": user_id, "service_id": service_id},
            )
            raise ForeignKeyViolationError(
                f"User {user_id} or service {service_id} does not exist", ctx,
            ) from e
        raise ConstraintViolationError("Subscription insert violated a constraint", ctx) from e

    logger.info(
        "Subscription added",
        extra={
            "user_id": user_id, "service_id": service_id,
            "subscription_id": subscription_id,
        },
    )
    return subscription_id


async def add_subscription_for_service_name(
    db: AsyncSession,
    user_id: UserId,
    service_name: str,
    renewal_date: date | str,
    price: Decimal | int | float | str,
    category: str | None = None,
    plan_name: str | None = None,
    billing_cycle: str | None = DEFAULT_BILLING_CYCLE,
    currency: str | None = DEFAULT_CURRENCY,
) -> AddedSubscription:
    """Validate the form, resolve the service by name, then insert the subscription."""
    normalize_service_name(service_name)
    normalize_category(category)
    parsed_date = parse_renewal_date(renewal_date)
    parsed_price = parse_price(price)
    plan_name = normalize_plan_name(plan_name)
    billing_cycle = normalize_billing_cycle(billing_cycle)
    currency = normalize_currency(currency)

    service_id = await resolve_service(db, service_name, category)
    subscription_id = await add_subscription(
        db, user_id, service_id, parsed_date, parsed_price,
        plan_name=plan_name, billing_cycle=billing_cycle, currency=currency,
    )
    return AddedSubscription(subscription_id=subscription_id, service_id=service_id)


async def delete_subscription(
    db: AsyncSession,
    subscription_id: SubscriptionId,
    user_id: UserId | None = None,
) -> None:
    """Delete a subscription; raise ResourceNotFoundError if no row was removed.

    With user_id set the delete only matches rows owned by that user.
    """
    stmt = delete(Subscription).where(Subscription.id == subscription_id)
    if user_id is not None:
        stmt = stmt.where(Subscription.user_id == user_id)
    with store_errors("subscription delete"):
        result = await db.execute(stmt)
        await db.commit()
    if result.rowcount == 0:
        raise ResourceNotFoundError(
            "Subscription", str(subscription_id), ErrorContext(user_id=user_id),
        )
    logger.info(
        "Subscription deleted",
        extra={"user_id": user_id, "subscription_id": subscription_id},
    )
