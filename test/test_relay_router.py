"""HTTP-level tests for the relay routes."""

from datetime import datetime, timedelta, timezone

from fastapi import FastAPI
from fastapi.testclient import TestClient

from callrelay.telephony.mock_adapter import MockTelephonyAdapter

from conftest import FakeTokenIssuer


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        resp = client.get("/health")

        assert resp.status_code == 200
        assert resp.json() == {
            "status": "ok",
            "message": "Call and Text Me Maybe Agent is running",
        }


class TestLiveKitToken:
    def test_json_body(self, client: TestClient, token_issuer: FakeTokenIssuer) -> None:
        resp = client.post("/livekit-token", json={"identity": "alice", "room": "lobby"})

        assert resp.status_code == 200
        assert resp.json() == {"token": "signed-test-token"}
        assert token_issuer.requests == [("alice", "lobby")]

    def test_form_body(self, client: TestClient) -> None:
        resp = client.post("/livekit-token", data={"identity": "alice", "room": "lobby"})

        assert resp.status_code == 200
        assert resp.json()["token"]

    def test_missing_room(self, client: TestClient) -> None:
        resp = client.post("/livekit-token", json={"identity": "alice"})

        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing required fields: identity and room"}

    def test_empty_body(self, client: TestClient) -> None:
        resp = client.post("/livekit-token")

        assert resp.status_code == 400
        assert "error" in resp.json()

    def test_malformed_json(self, client: TestClient) -> None:
        resp = client.post(
            "/livekit-token",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert resp.status_code == 400
        assert resp.json() == {"error": "Malformed JSON body"}

    def test_malformed_multipart(self, client: TestClient) -> None:
        resp = client.post(
            "/livekit-token",
            content=b"identity=alice",
            headers={"content-type": "multipart/form-data"},
        )

        assert resp.status_code == 400
        assert resp.json()["error"].startswith("Malformed form body")

    def test_non_string_field(self, client: TestClient) -> None:
        resp = client.post("/livekit-token", json={"identity": {"a": 1}, "room": "lobby"})

        assert resp.status_code == 400
        assert "identity" in resp.json()["error"]

    def test_signing_failure(self, client: TestClient, token_issuer: FakeTokenIssuer) -> None:
        token_issuer.error = RuntimeError("invalid secret")

        resp = client.post("/livekit-token", json={"identity": "alice", "room": "lobby"})

        assert resp.status_code == 500
        assert resp.json() == {"error": "invalid secret"}


class TestTwilioVoice:
    def test_returns_twiml(self, client: TestClient) -> None:
        resp = client.post("/twilio-voice", data={"From": "+14155551234", "CallSid": "CA1"})

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/xml")
        assert "Welcome to Call and Text Me Maybe." in resp.text
        assert "<Play>https://api.twilio.com/Cowbell.mp3</Play>" in resp.text

    def test_garbage_payload_still_200(self, client: TestClient) -> None:
        resp = client.post(
            "/twilio-voice",
            content=b"\x00\x01garbage",
            headers={"content-type": "application/json"},
        )

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/xml")
        assert "<Play>" in resp.text

    def test_multipart_without_boundary_still_200(self, client: TestClient) -> None:
        resp = client.post(
            "/twilio-voice",
            content=b"From=%2B1",
            headers={"content-type": "multipart/form-data"},
        )

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/xml")
        assert "<Play>https://api.twilio.com/Cowbell.mp3</Play>" in resp.text

    def test_failure_still_200(self, app: FastAPI, client: TestClient) -> None:
        relay = app.state.relay

        def boom(caller_id: str, room_name: str) -> str:
            raise RuntimeError("boom")

        relay._build_voice_markup = boom

        resp = client.post("/twilio-voice", data={"From": "+1"})

        assert resp.status_code == 200
        assert "Sorry, something went wrong. Please try again." in resp.text


class TestTwilioSms:
    def test_help_reply(self, client: TestClient) -> None:
        resp = client.post("/twilio-sms", data={"From": "+1", "Body": "HELP please"})

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/xml")
        assert (
            "<Message>I can help you with calls and messages. What do you need?</Message>"
            in resp.text
        )

    def test_farewell_reply(self, client: TestClient) -> None:
        resp = client.post("/twilio-sms", data={"From": "+1", "Body": "goodbye friend"})

        assert "<Message>Goodbye! Have a great day!</Message>" in resp.text

    def test_missing_body_apologizes(self, client: TestClient) -> None:
        resp = client.post("/twilio-sms", data={"From": "+1"})

        assert resp.status_code == 200
        assert "Sorry, I could not process your message." in resp.text

    def test_multipart_without_boundary_still_200(self, client: TestClient) -> None:
        resp = client.post(
            "/twilio-sms",
            content=b"From=%2B1&Body=hello",
            headers={"content-type": "multipart/form-data"},
        )

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/xml")
        assert "Sorry, I could not process your message." in resp.text


class TestSendSms:
    def test_success(self, client: TestClient, mock_adapter: MockTelephonyAdapter) -> None:
        resp = client.post("/send-sms", json={"to": "+14155551234", "message": "Hello"})

        assert resp.status_code == 200
        assert resp.json() == {
            "success": True,
            "messageId": "MOCK_SM_000001",
            "message": "SMS sent successfully",
        }
        assert mock_adapter.get_last_message().body == "Hello"

    def test_missing_message(self, client: TestClient) -> None:
        resp = client.post("/send-sms", json={"to": "+14155551234"})

        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing required fields: to and message"}

    def test_provider_failure(self, client: TestClient, mock_adapter: MockTelephonyAdapter) -> None:
        mock_adapter.configure_failure(error_message="Permission to send an SMS has not been enabled")

        resp = client.post("/send-sms", json={"to": "+14155551234", "message": "Hello"})

        assert resp.status_code == 500
        assert resp.json() == {"error": "Permission to send an SMS has not been enabled"}


class TestMakeCall:
    def test_success(self, client: TestClient, mock_adapter: MockTelephonyAdapter) -> None:
        resp = client.post("/make-call", json={"to": "+14155551234", "from": "+14155559999"})

        assert resp.status_code == 200
        assert resp.json() == {
            "success": True,
            "callId": "MOCK_CA_000001",
            "message": "Call initiated",
        }
        call = mock_adapter.get_last_call()
        assert call.from_number == "+14155559999"
        assert call.instructions_url == "https://relay.example.com/twilio-voice"

    def test_missing_to(self, client: TestClient) -> None:
        resp = client.post("/make-call", json={"from": "+14155559999"})

        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing required field: to"}

    def test_provider_failure(self, client: TestClient, mock_adapter: MockTelephonyAdapter) -> None:
        mock_adapter.configure_failure(error_message="Request to Twilio timed out after 5s")

        resp = client.post("/make-call", json={"to": "+14155551234"})

        assert resp.status_code == 500
        assert resp.json()["error"] == "Request to Twilio timed out after 5s"


class TestAgentStatus:
    def test_descriptor(self, client: TestClient) -> None:
        before = datetime.now(timezone.utc)
        resp = client.get("/agent-status")

        assert resp.status_code == 200
        body = resp.json()
        assert body["agent"] == "call-and-text-me-maybe"
        assert body["status"] == "active"
        assert body["capabilities"] == ["voice_calls", "sms_messages", "livekit_integration"]
        assert body["livekit_url"] == "wss://test.livekit.cloud"

        stamp = datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))
        assert abs(stamp - before) < timedelta(seconds=5)


class TestNotFound:
    def test_unknown_route(self, client: TestClient) -> None:
        resp = client.get("/does-not-exist")

        assert resp.status_code == 404
        assert resp.json() == {"error": "Not found"}

    def test_wrong_method(self, client: TestClient) -> None:
        resp = client.get("/send-sms")

        assert resp.status_code == 404
        assert resp.json() == {"error": "Not found"}


class TestOpenApi:
    def test_error_responses_documented(self, app: FastAPI) -> None:
        schema = app.openapi()

        assert schema["components"]["schemas"]["ErrorResponse"]["required"] == ["error"]
        for path in ("/livekit-token", "/send-sms", "/make-call"):
            responses = schema["paths"][path]["post"]["responses"]
            for status in ("400", "500"):
                ref = responses[status]["content"]["application/json"]["schema"]["$ref"]
                assert ref.endswith("/ErrorResponse")


def test_lifespan_closes_provider(app: FastAPI, mock_adapter: MockTelephonyAdapter) -> None:
    closed: list[bool] = []
    mock_adapter.close = lambda: closed.append(True)

    with TestClient(app) as client:
        assert client.get("/health").status_code == 200

    assert closed == [True]
