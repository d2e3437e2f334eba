"""Spend Report: joined listing order and exact totals.

Invariants:
    - total_spend over 9.99, 15.00, 4.01 is exactly 29.00
    - Listing is ascending by renewal date and scoped to one user
    - The Netflix scenario: resolve twice → one id; 15.49 shows up in the total
"""

from datetime import date
from decimal import Decimal

from latt.models import User
from latt.services.service_resolver import resolve_service
from latt.services.spend_report import build_dashboard, list_subscriptions, total_spend
from latt.services.subscription_writer import (
    add_subscription, add_subscription_for_service_name,
)


async def test_total_spend_is_exact(test_db, seed_user):
    for name, price in [("A", "9.99"), ("B", "15.00"), ("C", "4.01")]:
        await add_subscription_for_service_name(
            test_db, seed_user.id, name, "2024-06-01", price,
        )

    total = await total_spend(test_db, seed_user.id)

    assert total == Decimal("29.00")
    assert str(total) == "29.00"


async def test_total_spend_without_subscriptions_is_zero(test_db, seed_user):
    assert str(await total_spend(test_db, seed_user.id)) == "0.00"


async def test_listing_ordered_by_renewal_date(test_db, seed_user):
    for name, day in [("Later", "2024-09-01"), ("Soon", "2024-06-01"), ("Middle", "2024-07-15")]:
        await add_subscription_for_service_name(
            test_db, seed_user.id, name, day, "1.00",
        )

    items = await list_subscriptions(test_db, seed_user.id)

    assert [i.service_name for i in items] == ["Soon", "Middle", "Later"]
    assert items[0].renewal_date == date(2024, 6, 1)


async def test_listing_joins_service_details(test_db, seed_user):
    await add_subscription_for_service_name(
        test_db, seed_user.id, "Spotify", "2024-06-01", "10.99",
        category="Music", plan_name="Duo", billing_cycle="Monthly",
    )

    [item] = await list_subscriptions(test_db, seed_user.id)

    assert item.service_name == "Spotify"
    assert item.category == "Music"
    assert item.logo_url.endswith("placeholder.png")
    assert item.plan_name == "Duo"
    assert item.billing_cycle == "monthly"
    assert item.status == "active"


async def test_other_users_rows_excluded(test_db, seed_user):
    other = User(email="other@example.com", password_hash="x")
    test_db.add(other)
    await test_db.commit()
    await add_subscription_for_service_name(test_db, seed_user.id, "Mine", "2024-06-01", "3.00")
    await add_subscription_for_service_name(test_db, other.id, "Theirs", "2024-06-01", "50.00")

    items = await list_subscriptions(test_db, seed_user.id)

    assert [i.service_name for i in items] == ["Mine"]
    assert await total_spend(test_db, seed_user.id) == Decimal("3.00")


async def test_netflix_scenario(test_db, seed_user):
    n1 = await resolve_service(test_db, "Netflix", "Streaming")
    assert await resolve_service(test_db, "Netflix", "Streaming") == n1

    s1 = await add_subscription(
        test_db, seed_user.id, n1, "2024-06-01", 15.49,
        plan_name="Standard", billing_cycle="monthly",
    )

    [item] = await list_subscriptions(test_db, seed_user.id)
    assert item.subscription_id == s1
    assert item.service_id == n1
    assert await total_spend(test_db, seed_user.id) == Decimal("15.49")


async def test_dashboard_groups_currencies(test_db, seed_user):
    await add_subscription_for_service_name(
        test_db, seed_user.id, "A", "2024-06-01", "10.00", currency="usd",
    )
    await add_subscription_for_service_name(
        test_db, seed_user.id, "B", "2024-06-02", "5.50", currency="EUR",
    )

    dashboard = await build_dashboard(test_db, seed_user.id)

    assert len(dashboard["items"]) == 2
    assert dashboard["total_spend"] == Decimal("15.50")
    assert dashboard["totals_by_currency"] == {
        "EUR": Decimal("5.50"), "USD": Decimal("10.00"),
    }
