from __future__ import annotations

import pytest

from dealboard.core.exceptions import BackendError
from dealboard.services.activity_service import ActivityService


def test_shopify_webhook_requires_order_id(client):
    response = client.post("/api/v1/integrations/shopify", json={"dealId": "d1"})

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}


def test_shopify_webhook_rejects_zero_order_id(client):
    response = client.post("/api/v1/integrations/shopify", json={"dealId": "d1", "orderId": 0})

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}


def test_shopify_webhook_records_order_activity(client):
    response = client.post(
        "/api/v1/integrations/shopify",
        json={"dealId": "d1", "orderId": 1001, "customer": "Acme Corp", "totalPrice": "75.00"},
    )

    assert response.status_code == 200
    activity = response.json()["activity"]
    assert activity["title"] == "Order 1001"
    assert activity["description"] == "Order by Acme Corp - $75.00"
    assert activity["activity_type"] == "shopify"


@pytest.mark.parametrize(
    ("path", "payload", "title"),
    [
        ("gmail", {"dealId": "d1", "subject": "Quote", "from": "buyer@acme.test", "preview": "See attached"}, "Quote"),
        ("twilio", {"dealId": "d1", "body": "On my way", "direction": "inbound", "sid": "SM1"}, "SMS received"),
    ],
)
def test_webhooks_are_listed_per_type(client, path, payload, title):
    assert client.post(f"/api/v1/integrations/{path}", json=payload).status_code == 200

    response = client.get(f"/api/v1/integrations/{path}", params={"dealId": "d1"})

    assert response.status_code == 200
    activities = response.json()["activities"]
    assert [item["title"] for item in activities] == [title]


def test_listing_requires_deal_id(client):
    response = client.get("/api/v1/integrations/gmail")

    assert response.status_code == 400
    assert response.json() == {"error": "Deal ID is required"}


def test_non_json_body_is_rejected(client):
    response = client.post(
        "/api/v1/integrations/twilio",
        content="not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400


def test_unknown_deal_is_reported_as_processing_failure(client):
    response = client.post("/api/v1/integrations/gmail", json={"dealId": "ghost", "subject": "Hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process Gmail event"}


def test_listing_failure_returns_error_envelope(client, monkeypatch):
    def broken_list(self, deal_id, activity_type, limit=10):
        raise BackendError("read failed")

    monkeypatch.setattr(ActivityService, "list_recent", broken_list)
    response = client.get("/api/v1/integrations/shopify", params={"dealId": "d1"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch Shopify activities"}
