"""Subscription Routes: dashboard, add and delete for the logged-in user.

Invariants:
    - Every handler receives the user id from the session dependency, never a global
    - Form field names match the web form: serviceName, category, planName,
      price, billingCycle, renewalDate, currency
    - Semantic validation (price, date, names) happens in core/, not here

Design Decisions:
    - price and renewalDate accepted as raw strings so InvalidInputError carries
      the same field names and envelope as every other domain failure
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from latt.api.dependencies import CurrentUserId
from latt.core.domain_types import SubscriptionId
from latt.infrastructure.database import get_db
from latt.schemas.subscription import DashboardResponse, SubscriptionCreated
from latt.services.spend_report import build_dashboard
from latt.services.subscription_writer import (
    add_subscription_for_service_name, delete_subscription,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])

# Primary keys are 32-bit INTEGER columns
MAX_SUBSCRIPTION_ID = 2**31 - 1


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    user_id: CurrentUserId, db: AsyncSession = Depends(get_db),
):
    """Subscriptions by renewal date with the exact total spend."""
    dashboard = await build_dashboard(db, user_id)
    return DashboardResponse.model_validate(dashboard, from_attributes=True)


@router.post(
    "", response_model=SubscriptionCreated,
    status_code=status.HTTP_201_CREATED,
)
async def add(
    user_id: CurrentUserId,
    service_name: Annotated[str, Form(alias="serviceName", max_length=200)],
    price: Annotated[str, Form(max_length=32)],
    renewal_date: Annotated[str, Form(alias="renewalDate", max_length=32)],
    category: Annotated[str | None, Form(max_length=100)] = None,
    plan_name: Annotated[str | None, Form(alias="planName", max_length=200)] = None,
    billing_cycle: Annotated[str | None, Form(alias="billingCycle", max_length=40)] = None,
    currency: Annotated[str | None, Form(max_length=8)] = None,
    db: AsyncSession = Depends(get_db),
):
    """Resolve the service by name and add a subscription to it."""
    added = await add_subscription_for_service_name(
        db, user_id, service_name, renewal_date, price,
        category=category, plan_name=plan_name,
        billing_cycle=billing_cycle, currency=currency,
    )
    return SubscriptionCreated(
        subscription_id=added.subscription_id, service_id=added.service_id,
    )


@router.delete("/{subscription_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove(
    subscription_id: Annotated[int, Path(ge=1, le=MAX_SUBSCRIPTION_ID)],
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
):
    """Delete one of the user's subscriptions; 404 if it is not there."""
    await delete_subscription(db, SubscriptionId(subscription_id), user_id=user_id)
