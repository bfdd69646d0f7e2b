import pytest
from pydantic import ValidationError

from app.models.api_schemas import (
    ChatMessageRequest,
    ChatMessageResponse,
    GenerateTokenRequest,
    StartAgentResponse,
    StopAgentRequest,
)
from app.models.session import Session, SessionState, new_channel_name


class TestApiSchemas:

    def test_generate_token_request(self):
        request = GenerateTokenRequest(channelName="support_session_1")
        assert request.uid is None

    def test_generate_token_request_rejects_blank_channel(self):
        with pytest.raises(ValidationError):
            GenerateTokenRequest(channelName="   ")

    def test_generate_token_request_requires_channel(self):
        with pytest.raises(ValidationError):
            GenerateTokenRequest()

    def test_stop_agent_request_requires_agent_id(self):
        with pytest.raises(ValidationError):
            StopAgentRequest()

    def test_start_agent_response_keeps_unknown_fields(self):
        response = StartAgentResponse.model_validate(
            {"agent_id": "a-1", "status": "RUNNING", "create_ts": 1, "region": "us"}
        )
        assert response.model_dump()["region"] == "us"

    def test_chat_message_optional_fields(self):
        request = ChatMessageRequest(text="Hello")
        assert request.user_id is None
        assert request.channel is None

    def test_chat_message_response_defaults(self):
        assert ChatMessageResponse(text="Hi").model_dump() == {
            "text": "Hi",
            "status": "success",
            "audio_url": None,
        }


class TestSessionModel:

    def test_session_starts_empty(self):
        session = Session(channel_name=new_channel_name())
        assert session.holds_resources is False
        assert session.muted is True
        assert session.closing is False

    def test_holds_resources(self):
        session = Session(channel_name="support_session_1", agent_handle="a-1")
        assert session.holds_resources is True

    def test_channel_names_are_prefixed(self):
        assert new_channel_name().startswith("support_session_")

    def test_channel_name_never_repeats(self):
        future = "support_session_99999999999999"
        assert new_channel_name(future) == "support_session_100000000000000"

    def test_channel_names_increase(self):
        first = new_channel_name()
        second = new_channel_name(first)
        assert int(second.rsplit("_", 1)[1]) > int(first.rsplit("_", 1)[1])

    def test_state_values(self):
        assert [s.value for s in SessionState] == [
            "IDLE", "CONNECTING", "CONNECTED", "DISCONNECTING", "ERROR"
        ]
