"""Spend Report: read side behind the dashboard.

Invariants:
    - Only the given user's subscriptions are read
    - Items ordered by renewal_date ascending, then id (stable for equal dates)
    - total_spend is an exact Decimal, quantised to cents

Design Decisions:
    - Sum computed in Python via core.spend: identical results on PostgreSQL and SQLite
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from latt.core.domain_types import UserId
from latt.core.spend import sum_prices, totals_by_currency
from latt.infrastructure.database import store_errors
from latt.models.service import Service
from latt.models.subscription import Subscription

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubscriptionView:
    """A subscription joined to its service, ready for display."""
    subscription_id: int
    service_id: int
    service_name: str
    category: str | None
    logo_url: str
    renewal_date: date
    price: Decimal
    currency: str
    plan_name: str | None
    billing_cycle: str
    status: str


async def list_subscriptions(db: AsyncSession, user_id: UserId) -> list[SubscriptionView]:
    with store_errors("subscription list"):
        result = await db.execute(
            select(Subscription, Service)
            .join(Service, Subscription.service_id == Service.id)
            .where(Subscription.user_id == user_id)
            .order_by(Subscription.renewal_date.asc(), Subscription.id.asc()),
        )
    return [
        SubscriptionView(
            subscription_id=sub.id,
            service_id=service.id,
            service_name=service.name,
            category=service.category,
            logo_url=service.logo_url,
            renewal_date=sub.renewal_date,
            price=sub.price,
            currency=sub.currency,
            plan_name=sub.plan_name,
            billing_cycle=sub.billing_cycle,
            status=sub.status,
        )
        for sub, service in result.all()
    ]


async def total_spend(db: AsyncSession, user_id: UserId) -> Decimal:
    """Exact sum of price over every subscription the user owns."""
    with store_errors("spend total"):
        result = await db.execute(
            select(Subscription.price).where(Subscription.user_id == user_id),
        )
    return sum_prices(result.scalars().all())


async def build_dashboard(db: AsyncSession, user_id: UserId) -> dict:
    """Items, overall total and per-currency totals in one payload."""
    items = await list_subscriptions(db, user_id)
    return {
        "items": items,
        "total_spend": sum_prices(item.price for item in items),
        "totals_by_currency": totals_by_currency(
            (item.currency, item.price) for item in items
        ),
    }
