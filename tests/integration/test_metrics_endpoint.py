"""Integration tests for metrics and health endpoints."""

from __future__ import annotations


def test_metrics_endpoint_available(client):
    client.get("/healthz")
    response = client.get("/metrics")
    assert response.status_code == 200
    body = response.content.decode()
    assert "dinnerboard_http_requests_total" in body
    assert "dinnerboard_grocery_list_regenerations_total" in body


def test_healthz(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_request_metrics_use_route_templates(client):
    for item_id in (4242, 4343):
        client.patch(f"/grocery-list/items/{item_id}")

    body = client.get("/metrics").content.decode()

    assert 'path="/grocery-list/items/{item_id}"' in body
    assert "/grocery-list/items/4242" not in body
    assert "/grocery-list/items/4343" not in body
