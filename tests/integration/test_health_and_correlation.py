import logging
import uuid
from unittest.mock import patch

import pytest
from django.db import OperationalError

pytestmark = pytest.mark.integration


class TestHealthCheck:
    def test_healthy(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["services"]["database"]["status"] == "up"

    def test_database_down(self, client):
        with patch("modules.core.views.connections") as connections:
            connections.__getitem__.return_value.ensure_connection.side_effect = (
                OperationalError("could not connect")
            )
            response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["services"]["database"] == {"status": "down"}


class TestCorrelationIdMiddleware:
    def test_returns_provided_request_id(self, client):
        custom_id = "my-custom-request-id-123"
        response = client.get("/health", HTTP_X_REQUEST_ID=custom_id)
        assert response["X-Request-ID"] == custom_id

    def test_generates_uuid_when_no_request_id(self, client):
        request_id = client.get("/health")["X-Request-ID"]
        assert str(uuid.UUID(request_id, version=4)) == request_id

    def test_correlation_id_in_checkout_logs(self, customer_client, caplog):
        custom_id = "checkout-correlation-456"
        with caplog.at_level(logging.INFO):
            customer_client.post(
                "/api/v1/checkout/",
                {"items": [{"id": 1, "name": "Rice", "price": 25000, "quantity": 1}]},
                format="json",
                HTTP_X_REQUEST_ID=custom_id,
            )

        placed = [
            r.getMessage()
            for r in caplog.records
            if "checkout.order_placed" in r.getMessage()
        ]
        assert placed
        assert custom_id in placed[0]
