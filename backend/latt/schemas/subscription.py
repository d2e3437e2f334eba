"""Subscription Schemas: dashboard, catalog and creation responses.

Invariants:
    - price and totals are Decimal (serialised as strings, exact)
    - Items are built from SubscriptionView / Service attributes (from_attributes)
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class SubscriptionItem(BaseModel):
    """One dashboard row: subscription joined to its service."""
    model_config = ConfigDict(from_attributes=True)

    subscription_id: int
    service_id: int
    service_name: str
    category: str | None = None
    logo_url: str
    renewal_date: date
    price: Decimal
    currency: str
    plan_name: str | None = None
    billing_cycle: str
    status: str


class DashboardResponse(BaseModel):
    """All of a user's subscriptions plus exact totals."""
    items: list[SubscriptionItem]
    total_spend: Decimal
    totals_by_currency: dict[str, Decimal]


class SubscriptionCreated(BaseModel):
    subscription_id: int
    service_id: int


class ServiceResponse(BaseModel):
    """Service catalog entry."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: str | None = None
    logo_url: str
