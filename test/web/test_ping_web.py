#!/usr/bin/env python3
"""Health check for the nova web server"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from nova.upstream import UpstreamGateway
from nova.web_server import NovaWebServer


@pytest.fixture
def client(fake_upstream):
    """Server with no credentials configured and a recording fake upstream."""
    server = NovaWebServer(gateway=UpstreamGateway(client=fake_upstream.client()))
    return TestClient(server.app)


class TestPing:
    def test_ping_reports_nova_service(self, client):
        """Ping answers 200 with the nova service name and ok status"""
        response = client.get("/ping")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["service"] == "nova"

    def test_ping_timestamp_is_iso_format(self, client):
        """Ping timestamp parses as an ISO-8601 datetime"""
        timestamp = client.get("/ping").json()["timestamp"]
        assert isinstance(datetime.fromisoformat(timestamp), datetime)

    def test_ping_healthy_without_upstream_credentials(self, client):
        """Ping succeeds while turns would fail for lack of VOICEFLOW_API_KEY"""
        assert client.get("/ping").status_code == 200
        assert client.post("/api/voiceflow", json={"userId": "user-1"}).status_code == 500

    def test_ping_never_contacts_upstream(self, client, fake_upstream):
        """Health checks are answered locally"""
        client.get("/ping")
        client.get("/ping")
        assert fake_upstream.requests == []
