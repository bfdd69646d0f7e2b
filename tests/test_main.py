import httpx
import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from app.config.settings import Settings
from app.main import app, get_agent_service, get_settings, get_token_service, get_webhook_client
from app.services.agent_service import AgentService
from app.services.token_service import TokenService
from app.services.webhook_client import WebhookClient

client = TestClient(app)

TEST_SETTINGS = Settings(
    app_id="app-id",
    app_certificate="certificate",
    customer_id="customer",
    customer_secret="secret",
    webhook_url="https://workflows.example.com/webhook",
    tts_api_key="sk_0123456789abcdef",
    tts_voice_id="voice-1",
)


@pytest.fixture(autouse=True)
def clear_overrides():
    app.dependency_overrides[get_settings] = lambda: TEST_SETTINGS
    yield
    app.dependency_overrides.clear()


def override_agent_api(handler):
    service = AgentService("app-id", "customer", "secret", transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_agent_service] = lambda: service


def override_webhook(handler, url="https://workflows.example.com/webhook"):
    webhook = WebhookClient(url, transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_webhook_client] = lambda: webhook


def webhook_error(request):
    return httpx.Response(500, text="Internal Server Error")


def webhook_timeout(request):
    raise httpx.ReadTimeout("timed out", request=request)


def webhook_wrong_types(request):
    return httpx.Response(200, json={"text": {"answer": "hi"}, "audio_url": 7})


def test_health_check():
    """Test the health check endpoint returns correct response"""
    response = client.get("/health")
    assert response.status_code == 200

    response_json = response.json()
    assert response_json["status"] == "healthy"
    assert response_json["app_id_configured"] is True
    assert response_json["certificate_configured"] is True
    assert response_json["agent_api_configured"] is True
    assert response_json["webhook_configured"] is True
    assert response_json["tts_configured"] is True


def test_root_endpoint():
    """Test the root endpoint returns the correct API information"""
    response = client.get("/")
    assert response.status_code == 200

    response_json = response.json()
    assert response_json["name"] == "Voice Agent Relay"
    assert response_json["version"] == "1.0.0"
    for path in ("/generate-token", "/start-agent", "/stop-agent", "/chat-message", "/health"):
        assert path in response_json["endpoints"]


class TestGenerateToken:

    @patch("app.services.token_service.RtcTokenBuilder")
    def test_success(self, mock_builder):
        mock_builder.buildTokenWithUid.return_value = "signed-token"

        response = client.post("/generate-token", json={"channelName": "support_session_1"})

        assert response.status_code == 200
        assert response.json() == {"token": "signed-token"}
        assert mock_builder.buildTokenWithUid.call_args[0][:4] == (
            "app-id", "certificate", "support_session_1", 0
        )

    def test_missing_certificate(self):
        app.dependency_overrides[get_token_service] = lambda: TokenService("app-id", "")

        response = client.post("/generate-token", json={"channelName": "support_session_1"})

        assert response.status_code == 500
        assert response.json() == {"error": "App Certificate is not configured on the server."}

    @patch("app.services.token_service.RtcTokenBuilder")
    def test_signing_failure(self, mock_builder):
        mock_builder.buildTokenWithUid.side_effect = RuntimeError("boom")

        response = client.post("/generate-token", json={"channelName": "support_session_1"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate RTC token."}

    def test_invalid_body(self):
        response = client.post("/generate-token", json={})
        assert response.status_code == 422


class TestAgentEndpoints:

    def test_start_agent_passes_vendor_payload_through(self):
        override_agent_api(
            lambda request: httpx.Response(200, json={"agent_id": "a-1", "status": "RUNNING", "create_ts": 5})
        )

        response = client.post("/start-agent", json={"channelName": "support_session_1", "token": "t"})

        assert response.status_code == 200
        assert response.json() == {"agent_id": "a-1", "status": "RUNNING", "create_ts": 5}

    def test_start_agent_vendor_error(self):
        override_agent_api(lambda request: httpx.Response(403, json={"message": "forbidden"}))

        response = client.post("/start-agent", json={"channelName": "support_session_1", "token": "t"})

        assert response.status_code == 500
        assert response.json() == {"error": "Agent API responded with status 403: forbidden"}

    def test_start_agent_network_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable")

        override_agent_api(handler)

        response = client.post("/start-agent", json={"channelName": "support_session_1", "token": "t"})

        assert response.status_code == 500
        assert response.json()["error"].startswith("Agent API request failed")

    def test_stop_agent(self):
        override_agent_api(lambda request: httpx.Response(200, json={}))

        response = client.post("/stop-agent", json={"agentId": "a-1"})

        assert response.status_code == 200
        assert response.json() == {"success": True}

    def test_stop_agent_vendor_error(self):
        override_agent_api(lambda request: httpx.Response(404, json={}))

        response = client.post("/stop-agent", json={"agentId": "a-1"})

        assert response.status_code == 500
        assert response.json() == {"error": "Agent API responded with status 404"}


class TestChatEndpoints:

    def test_chat_message_relays_webhook_answer(self):
        override_webhook(
            lambda request: httpx.Response(200, json={"text": "Hi!", "status": "success", "audio_url": None})
        )

        response = client.post(
            "/chat-message",
            json={"text": "Hello", "user_id": "chat_user_1", "channel": "chat_channel",
                  "timestamp": "2024-01-01T00:00:00Z"},
        )

        assert response.status_code == 200
        assert response.json() == {"text": "Hi!", "status": "success", "audio_url": None}

    @pytest.mark.parametrize(
        "handler",
        [webhook_error, webhook_timeout, webhook_wrong_types],
        ids=["webhook-500", "webhook-timeout", "webhook-wrong-types"],
    )
    def test_chat_message_falls_back(self, handler):
        override_webhook(handler)

        response = client.post("/chat-message", json={"text": "Hello"})

        assert response.status_code == 200
        assert response.json() == {
            "text": 'I understand you said: "Hello". I\'m your AI assistant and I\'m here to help you!',
            "status": "success",
            "audio_url": None,
        }

    def test_chat_message_without_webhook(self):
        override_webhook(lambda request: httpx.Response(200, json={}), url="")

        response = client.post("/chat-message", json={"text": "Hello"})

        assert response.status_code == 200
        assert "Hello" in response.json()["text"]

    def test_chat_message_internal_error(self):
        class BrokenWebhook:
            async def relay(self, message):
                raise KeyError("unexpected")

        app.dependency_overrides[get_webhook_client] = lambda: BrokenWebhook()

        response = client.post("/chat-message", json={"text": "Hello"})

        assert response.status_code == 500
        assert response.json() == {
            "text": "Sorry, I encountered an error while processing your message.",
            "status": "error",
        }

    def test_test_webhook(self):
        response = client.post("/test-webhook", json={"text": "ping"})

        assert response.status_code == 200
        assert response.json() == {
            "text": "This is a test response from the webhook",
            "status": "success",
            "audio_url": None,
        }

    def test_test_webhook_without_body(self):
        response = client.post("/test-webhook")
        assert response.status_code == 200
