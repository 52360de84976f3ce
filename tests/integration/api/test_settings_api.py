from __future__ import annotations


def test_settings_require_a_user(client):
    response = client.get("/api/v1/settings/integrations")

    assert response.status_code == 401
    assert response.json()["detail"] == "User not authenticated"


def test_settings_round_trip_for_user(client):
    headers = {"X-User-Id": "user-1"}

    saved = client.put(
        "/api/v1/settings/integrations",
        json={"integrations": [{"integration_type": "gmail", "enabled": True, "api_key": "g-key"}]},
        headers=headers,
    )
    assert saved.status_code == 200

    items = {item["integration_type"]: item for item in client.get("/api/v1/settings/integrations", headers=headers).json()}
    assert items["gmail"] == {"integration_type": "gmail", "enabled": True, "api_key": "g-key"}
    assert items["shopify"]["enabled"] is False


def test_empty_settings_update_is_rejected(client):
    response = client.put("/api/v1/settings/integrations", json={"integrations": []}, headers={"X-User-Id": "u"})

    assert response.status_code == 422


def test_health_and_root(client):
    assert client.get("/api/v1/health").json()["status"] == "ok"
    assert client.get("/").json()["api_prefix"] == "/api/v1"
