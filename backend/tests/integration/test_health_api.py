"""
Integration Tests: Health API

Tests the Flask health app with the test client and the threaded server:
- /health reflects the ingestion state (200 healthy / 500 unhealthy)
- / reports uptime
- JSON error responses
"""

import json
import time
import urllib.request

import pytest

from api.app import create_app
from api.server import start_health_server
from scheduler.liveness import IngestionState, LivenessReporter


pytestmark = pytest.mark.integration


@pytest.fixture
def state():
    return IngestionState(poll_minutes=10)


@pytest.fixture
def app(state):
    app = create_app(LivenessReporter(state), started_at=time.monotonic() - 42)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


class TestHealthEndpoint:
    """Test GET /health."""

    def test_fresh_state_is_healthy(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.get_json() == {
            "ok": True,
            "status": {"lastSuccess": None, "lastError": None, "pollMinutes": 10}
        }

    def test_error_without_success_is_unhealthy(self, client, state):
        """
        Given: The only run so far failed
        When: GET /health
        Then: 500 with ok=false and the error in the status
        """
        state.last_error = "Disneyland Resort destination not found"

        response = client.get('/health')

        assert response.status_code == 500
        data = response.get_json()
        assert data["ok"] is False
        assert data["status"]["lastError"] == "Disneyland Resort destination not found"

    def test_error_after_success_is_healthy(self, client, state):
        state.last_success = '2025-07-04T16:30:00.000Z'
        state.last_error = "Fetch error: 503 - Service Unavailable"
        state.poll_minutes = 15

        response = client.get('/health')

        assert response.status_code == 200
        assert response.get_json()["status"] == {
            "lastSuccess": '2025-07-04T16:30:00.000Z',
            "lastError": "Fetch error: 503 - Service Unavailable",
            "pollMinutes": 15
        }

    def test_health_allows_cross_origin(self, client):
        response = client.get('/health', headers={'Origin': 'https://dashboard.example.com'})

        assert response.headers.get('Access-Control-Allow-Origin') in ('*', 'https://dashboard.example.com')

    def test_status_keys_keep_declared_order(self, client, state):
        state.last_success = '2025-07-04T16:30:00.000Z'
        state.last_error = "Fetch error: 503 - Service Unavailable"

        body = client.get('/health').get_data(as_text=True)

        assert body.index('"lastSuccess"') < body.index('"lastError"') < body.index('"pollMinutes"')


class TestRootAndErrors:
    """Test GET / and error handlers."""

    def test_root_reports_uptime(self, client):
        response = client.get('/')

        assert response.status_code == 200
        assert response.get_json()["uptime"] >= 42

    def test_unknown_route_is_json_404(self, client):
        response = client.get('/nope')

        assert response.status_code == 404
        assert response.get_json()["error"] == "Not Found"

    def test_wrong_method_is_json_405(self, client):
        response = client.post('/health')

        assert response.status_code == 405
        assert response.get_json()["error"] == "Method Not Allowed"

    def test_reporter_failure_is_json_500(self, app):
        class BrokenReporter:
            def get_status(self):
                raise RuntimeError("state unavailable")

        app.config['LIVENESS_REPORTER'] = BrokenReporter()
        app.config['TESTING'] = False
        app.config['PROPAGATE_EXCEPTIONS'] = False

        response = app.test_client().get('/health')

        assert response.status_code == 500
        assert response.get_json()["error"] == "Internal Server Error"


class TestHealthServer:
    """Test the background WSGI server."""

    def test_serves_health_on_ephemeral_port(self, app, state):
        server = start_health_server(app, port=0, host='127.0.0.1')
        try:
            assert server.port != 0
            with urllib.request.urlopen(f"http://127.0.0.1:{server.port}/health", timeout=5) as response:
                assert response.status == 200
                assert json.loads(response.read())["status"]["pollMinutes"] == 10
        finally:
            server.stop()

    def test_stop_is_idempotent(self, app):
        server = start_health_server(app, port=0, host='127.0.0.1')
        server.stop()
        server.stop()
