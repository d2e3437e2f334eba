"""Subscription Routes: dashboard, add and delete over HTTP.

Invariants:
    - Every subscription route requires a session (401 otherwise)
    - POST uses the web form field names and returns 201 with both ids
    - Domain failures render the standard error envelope with the right status
    - DELETE returns 204, then 404 for the same id
"""

from latt.core.domain_types import DEFAULT_LOGO_URL


def _form(**overrides):
    form = {
        "serviceName": "Netflix",
        "category": "Streaming",
        "planName": "Standard",
        "price": "15.49",
        "billingCycle": "monthly",
        "renewalDate": "2024-06-01",
    }
    form.update(overrides)
    return form


async def test_dashboard_requires_session(client):
    res = await client.get("/api/v1/subscriptions")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"


async def test_add_then_dashboard(logged_in_client):
    res = await logged_in_client.post("/api/v1/subscriptions", data=_form())
    assert res.status_code == 201
    created = res.json()

    res = await logged_in_client.get("/api/v1/subscriptions")
    assert res.status_code == 200
    body = res.json()
    assert body["total_spend"] == "15.49"
    [item] = body["items"]
    assert item["subscription_id"] == created["subscription_id"]
    assert item["service_id"] == created["service_id"]
    assert item["service_name"] == "Netflix"
    assert item["logo_url"] == DEFAULT_LOGO_URL
    assert item["renewal_date"] == "2024-06-01"
    assert item["price"] == "15.49"


async def test_same_service_name_reuses_service(logged_in_client):
    first = (await logged_in_client.post("/api/v1/subscriptions", data=_form())).json()
    second = (await logged_in_client.post(
        "/api/v1/subscriptions", data=_form(serviceName=" NETFLIX ", price="4.01"),
    )).json()

    assert first["service_id"] == second["service_id"]

    services = (await logged_in_client.get("/api/v1/services")).json()
    assert [s["name"] for s in services] == ["Netflix"]


async def test_total_spend_is_exact_over_http(logged_in_client):
    for name, price in [("A", "9.99"), ("B", "15.00"), ("C", "4.01")]:
        res = await logged_in_client.post(
            "/api/v1/subscriptions", data=_form(serviceName=name, price=price),
        )
        assert res.status_code == 201

    body = (await logged_in_client.get("/api/v1/subscriptions")).json()
    assert body["total_spend"] == "29.00"


async def test_negative_price_returns_400(logged_in_client):
    res = await logged_in_client.post("/api/v1/subscriptions", data=_form(price="-5"))

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"] == "price"


async def test_missing_form_field_returns_400(logged_in_client):
    form = _form()
    del form["serviceName"]

    res = await logged_in_client.post("/api/v1/subscriptions", data=form)

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_delete_then_delete_again(logged_in_client):
    created = (await logged_in_client.post("/api/v1/subscriptions", data=_form())).json()
    sub_id = created["subscription_id"]

    res = await logged_in_client.delete(f"/api/v1/subscriptions/{sub_id}")
    assert res.status_code == 204

    res = await logged_in_client.delete(f"/api/v1/subscriptions/{sub_id}")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_delete_never_created_returns_404(logged_in_client):
    res = await logged_in_client.delete("/api/v1/subscriptions/99999")
    assert res.status_code == 404


async def test_delete_out_of_range_id_returns_400(logged_in_client):
    res = await logged_in_client.delete("/api/v1/subscriptions/3000000000")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
