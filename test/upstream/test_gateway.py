"""Tests for the upstream conversational gateway."""

import pytest

from nova.exceptions import (
    ConfigurationError,
    TransportFailureError,
    UpstreamRejectionError,
    ValidationError,
)
from nova.upstream import RESPONSE_CONFIG, SERVICES_DELIMITER, StepKind, UpstreamGateway, compose_payload
from upstream_helpers import (
    RUNTIME_URL,
    TEST_API_KEY,
    connect_error,
    text_step,
    timeout_error,
    visual_step,
)


@pytest.fixture
def gateway(fake_upstream):
    return UpstreamGateway(
        api_key=TEST_API_KEY, runtime_url=RUNTIME_URL, client=fake_upstream.client()
    )


class TestComposePayload:
    def test_joins_message_and_services(self):
        assert (
            compose_payload("hello", ["seo", "web design"])
            == f"hello{SERVICES_DELIMITER}seo, web design"
        )

    def test_delimiter_present_without_services(self):
        assert compose_payload("hello", []) == f"hello{SERVICES_DELIMITER}"


class TestBootstrap:
    @pytest.mark.asyncio
    async def test_sends_launch_action_with_credential(self, gateway, fake_upstream):
        fake_upstream.reply_json([text_step("Hi, I'm Nova")])

        steps = await gateway.bootstrap("user-1")

        request = fake_upstream.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/state/user/user-1/interact"
        assert request.url.params["logs"] == "off"
        assert request.headers["Authorization"] == TEST_API_KEY
        assert fake_upstream.body() == {"action": {"type": "launch"}, "config": RESPONSE_CONFIG}
        assert [step.message for step in steps] == ["Hi, I'm Nova"]

    @pytest.mark.asyncio
    async def test_correlation_id_is_path_escaped(self, gateway, fake_upstream):
        fake_upstream.reply_json([])
        await gateway.bootstrap("a/b c")
        assert fake_upstream.requests[0].url.raw_path.startswith(b"/state/user/a%2Fb%20c/interact")


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_sends_composed_payload(self, gateway, fake_upstream):
        fake_upstream.reply_json([text_step("Sure!")])

        await gateway.send_message("user-1", "hello", ["seo"])

        assert fake_upstream.body()["action"] == {
            "type": "text",
            "payload": f"hello{SERVICES_DELIMITER}seo",
        }

    @pytest.mark.asyncio
    async def test_response_flags_disable_speech_and_control_steps(self, gateway, fake_upstream):
        fake_upstream.reply_json([])
        await gateway.send_message("user-1", "hello")

        config = fake_upstream.body()["config"]
        assert config["tts"] is False
        assert config["stripSSML"] is True
        assert set(config["excludeTypes"]) == {"block", "debug", "flow"}

    @pytest.mark.asyncio
    async def test_steps_are_normalized_translated_and_ordered(self, gateway, fake_upstream):
        fake_upstream.reply_json(
            [
                text_step("one"),
                {"type": "choice", "payload": {"buttons": []}},
                visual_step("https://img.test/plan.png"),
                text_step('See <doc id="abc123">', step_type="speak"),
            ]
        )

        steps = await gateway.send_message("user-1", "hello")

        assert [step.kind for step in steps] == [StepKind.TEXT, StepKind.VISUAL, StepKind.TEXT]
        assert steps[0].message == "one"
        assert steps[1].image_ref == "https://img.test/plan.png"
        assert steps[2].message == "See <DOCUMENTID>abc123</DOCUMENTID>"

    @pytest.mark.asyncio
    async def test_send_payload_forwards_verbatim(self, gateway, fake_upstream):
        fake_upstream.reply_json([])
        await gateway.send_payload("user-1", "raw payload")
        assert fake_upstream.body()["action"] == {"type": "text", "payload": "raw payload"}


class TestGatewayErrors:
    @pytest.mark.asyncio
    async def test_missing_credential_fails_before_network(self, fake_upstream):
        gateway = UpstreamGateway(runtime_url=RUNTIME_URL, client=fake_upstream.client())

        with pytest.raises(ConfigurationError):
            await gateway.send_message("user-1", "hello")
        assert fake_upstream.requests == []

    @pytest.mark.asyncio
    async def test_credential_read_from_environment(self, upstream_env, fake_upstream):
        fake_upstream.reply_json([])
        gateway = UpstreamGateway(client=fake_upstream.client())

        await gateway.bootstrap("user-1")

        assert fake_upstream.requests[0].headers["Authorization"] == TEST_API_KEY
        assert str(fake_upstream.requests[0].url).startswith(RUNTIME_URL)

    @pytest.mark.asyncio
    async def test_missing_correlation_id_is_validation_error(self, gateway, fake_upstream):
        with pytest.raises(ValidationError):
            await gateway.send_message("  ", "hello")
        assert fake_upstream.requests == []

    @pytest.mark.asyncio
    async def test_rejection_keeps_status_and_body(self, gateway, fake_upstream):
        fake_upstream.reply_text('{"message":"Invalid API key"}', status_code=401)

        with pytest.raises(UpstreamRejectionError) as exc_info:
            await gateway.send_message("user-1", "hello")

        assert exc_info.value.status_code == 401
        assert exc_info.value.body == '{"message":"Invalid API key"}'

    @pytest.mark.asyncio
    async def test_connection_failure_is_transport_error(self, gateway, fake_upstream):
        fake_upstream.reply(connect_error())
        with pytest.raises(TransportFailureError):
            await gateway.send_message("user-1", "hello")

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self, gateway, fake_upstream):
        fake_upstream.reply(timeout_error())
        with pytest.raises(TransportFailureError):
            await gateway.bootstrap("user-1")

    @pytest.mark.asyncio
    async def test_non_list_body_is_rejected(self, gateway, fake_upstream):
        fake_upstream.reply_json({"unexpected": True})
        with pytest.raises(UpstreamRejectionError) as exc_info:
            await gateway.send_message("user-1", "hello")
        assert exc_info.value.status_code == 502
