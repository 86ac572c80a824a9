"""Integration tests for the admin stock-alert endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from eshop.api import register_error_handlers, stock_alert_router

ADMIN = {"X-User-Id": "admin-001", "X-User-Role": "Admin"}
CUSTOMER = {"X-User-Id": "user-001"}


@pytest.fixture()
def client(storefront):
    app = FastAPI()
    app.include_router(stock_alert_router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def alert_id(storefront, make_product):
    make_product("Rain Jacket", stock=2, threshold=5)
    (alert,) = storefront.stock_alerts.check_and_create_alerts()
    return alert.id


class TestStockAlertEndpoints:
    def test_list(self, client, alert_id):
        response = client.get("/stock-alerts", headers=ADMIN)

        assert response.status_code == 200
        alerts = response.json()
        assert [a["id"] for a in alerts] == [alert_id]
        assert alerts[0]["product_name"] == "Rain Jacket"
        assert alerts[0]["quantity_at_trigger"] == 2

    def test_unacknowledged_count(self, client, alert_id):
        response = client.get("/stock-alerts/unacknowledged/count", headers=ADMIN)
        assert response.json() == {"count": 1}

    def test_acknowledge(self, client, alert_id):
        response = client.put(f"/stock-alerts/{alert_id}/acknowledge", headers=ADMIN)

        assert response.status_code == 204
        assert client.get(f"/stock-alerts/{alert_id}", headers=ADMIN).json()["is_acknowledged"] is True
        assert client.get("/stock-alerts/unacknowledged/count", headers=ADMIN).json() == {"count": 0}

    def test_delete(self, client, alert_id):
        assert client.delete(f"/stock-alerts/{alert_id}", headers=ADMIN).status_code == 204
        assert client.get(f"/stock-alerts/{alert_id}", headers=ADMIN).status_code == 404

    def test_unknown_alert(self, client):
        assert client.get("/stock-alerts/42", headers=ADMIN).status_code == 404
        assert client.put("/stock-alerts/42/acknowledge", headers=ADMIN).status_code == 404
        assert client.delete("/stock-alerts/42", headers=ADMIN).status_code == 404


class TestStockAlertAuthorization:
    def test_customers_are_forbidden(self, client):
        assert client.get("/stock-alerts", headers=CUSTOMER).status_code == 403

    def test_anonymous(self, client):
        assert client.get("/stock-alerts").status_code == 401


class TestAlertsFromCheckout:
    def test_order_that_crosses_threshold_is_listed(self, client, storefront, make_product):
        product = make_product("Field Guide", stock=6, threshold=5)
        storefront.carts.add_item("user-001", product.id, 2)

        assert storefront.checkout.create_order("user-001").success

        alerts = client.get("/stock-alerts", headers=ADMIN).json()
        assert [(a["product_id"], a["quantity_at_trigger"]) for a in alerts] == [(product.id, 4)]
        assert alerts[0]["is_acknowledged"] is False
