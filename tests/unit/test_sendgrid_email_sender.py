"""
Unit tests for SendGridEmailSender adapter.

Uses httpx.MockTransport to verify payload shape, success parsing,
error mapping and the retry-with-backoff policy without network access.
"""

import json
import logging

import httpx
import pytest

from softwarehub.adapters.mail.sendgrid import SendGridEmailSender, build_payload
from softwarehub.domain.activation import SenderIdentity, build_activation_message
from softwarehub.domain.exceptions import EmailDeliveryFailed

SENDER = SenderIdentity(
    from_email="team@softwarehub.com",
    from_name="SoftwareHub Team",
    base_url="http://localhost:5000",
    reply_to="support@softwarehub.com",
)


def make_message():
    return build_activation_message(
        "user@example.com", "Test User", "test_user", SENDER, idempotency_key="idem-1"
    )


def make_sender(handler, sleeps: list[float] | None = None, **kwargs) -> SendGridEmailSender:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    recorded = sleeps if sleeps is not None else []
    return SendGridEmailSender(
        "SG.test-key", client=client, sleep=recorded.append, **kwargs
    )


class TestBuildPayload:
    """Tests for the SendGrid v3 request body."""

    def test_payload_shape(self) -> None:
        payload = build_payload(make_message())

        assert payload["personalizations"] == [
            {
                "to": [{"email": "user@example.com"}],
                "custom_args": {
                    "userId": "test_user",
                    "campaignType": "activation",
                    "idempotencyKey": "idem-1",
                },
            }
        ]
        assert payload["from"] == {"email": "team@softwarehub.com", "name": "SoftwareHub Team"}
        assert payload["reply_to"] == {"email": "support@softwarehub.com"}
        assert payload["subject"].startswith("Welcome to SoftwareHub!")
        assert payload["content"][0]["type"] == "text/html"
        assert payload["categories"] == ["welcome", "user-onboarding"]
        assert payload["headers"]["X-Priority"] == "3"

    def test_payload_is_json_serializable(self) -> None:
        json.dumps(build_payload(make_message()))


class TestConstruction:
    """Tests for adapter construction."""

    def test_missing_api_key_rejected(self) -> None:
        with pytest.raises(ValueError):
            SendGridEmailSender("")

    def test_unusual_key_format_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            SendGridEmailSender("not-a-sendgrid-key", client=httpx.Client())
        assert "SG." in caplog.text


class TestSendSuccess:
    """Tests for accepted messages."""

    def test_returns_message_id_and_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(202, headers={"X-Message-Id": "msg-123"})

        result = make_sender(handler).send(make_message())

        assert result.message_id == "msg-123"
        assert result.status_code == 202

    def test_request_is_authenticated_json_post(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(202)

        make_sender(handler).send(make_message())

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.sendgrid.com/v3/mail/send"
        assert request.headers["Authorization"] == "Bearer SG.test-key"
        body = json.loads(request.content)
        assert body["personalizations"][0]["to"] == [{"email": "user@example.com"}]


class TestSendFailure:
    """Tests for provider rejections."""

    def test_unauthorized_fails_without_retry(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(401, json={"errors": [{"message": "bad key"}]})

        with pytest.raises(EmailDeliveryFailed) as exc_info:
            make_sender(handler).send(make_message())

        assert len(calls) == 1
        assert exc_info.value.status_code == 401
        assert "Invalid API key" in str(exc_info.value)

    def test_forbidden_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"errors": [{"message": "sender not verified"}]})

        with pytest.raises(EmailDeliveryFailed) as exc_info:
            make_sender(handler).send(make_message())

        assert "sender verification" in str(exc_info.value)
        assert exc_info.value.body == {"errors": [{"message": "sender not verified"}]}

    def test_bad_request_reports_provider_errors(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"errors": [{"message": "Invalid from", "field": "from"}]})

        with pytest.raises(EmailDeliveryFailed) as exc_info:
            make_sender(handler).send(make_message())

        assert "Invalid from" in str(exc_info.value)

    def test_failure_is_logged_with_body(self, caplog: pytest.LogCaptureFixture) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, text="plain failure")

        with caplog.at_level(logging.ERROR), pytest.raises(EmailDeliveryFailed):
            make_sender(handler).send(make_message())

        assert "code=400" in caplog.text
        assert "plain failure" in caplog.text


class TestRetry:
    """Tests for retry with exponential backoff."""

    def test_retries_server_error_then_succeeds(self) -> None:
        responses = [httpx.Response(503), httpx.Response(202, headers={"X-Message-Id": "ok"})]
        sleeps: list[float] = []

        def handler(request: httpx.Request) -> httpx.Response:
            return responses.pop(0)

        result = make_sender(handler, sleeps=sleeps).send(make_message())

        assert result.message_id == "ok"
        assert len(sleeps) == 1

    def test_retries_rate_limit(self) -> None:
        responses = [httpx.Response(429), httpx.Response(429), httpx.Response(202)]

        def handler(request: httpx.Request) -> httpx.Response:
            return responses.pop(0)

        result = make_sender(handler).send(make_message())
        assert result.status_code == 202

    def test_retries_transport_errors(self) -> None:
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            if len(attempts) < 3:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(202)

        result = make_sender(handler).send(make_message())

        assert result.status_code == 202
        assert len(attempts) == 3

    def test_gives_up_after_max_retries(self) -> None:
        attempts = []
        sleeps: list[float] = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            return httpx.Response(500, json={"errors": [{"message": "boom"}]})

        with pytest.raises(EmailDeliveryFailed) as exc_info:
            make_sender(handler, sleeps=sleeps, max_retries=3).send(make_message())

        assert len(attempts) == 3
        assert len(sleeps) == 2
        assert "Failed after 3 attempts" in str(exc_info.value)
        assert exc_info.value.status_code == 500

    def test_single_attempt_failure_raises_delivery_error(self) -> None:
        """max_retries below one still makes one attempt and raises cleanly."""
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            raise httpx.ConnectError("connection refused")

        with pytest.raises(EmailDeliveryFailed) as exc_info:
            make_sender(handler, max_retries=0).send(make_message())

        assert len(attempts) == 1
        assert "Failed after 1 attempts" in str(exc_info.value)
        assert "connection refused" in str(exc_info.value)
        assert exc_info.value.status_code is None

    def test_backoff_is_exponential_with_bounded_jitter(self) -> None:
        sleeps: list[float] = []

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502)

        with pytest.raises(EmailDeliveryFailed):
            make_sender(handler, sleeps=sleeps, max_retries=4, base_delay=1.0).send(make_message())

        for wait, base in zip(sleeps, [1.0, 2.0, 4.0], strict=True):
            assert base <= wait <= base * 1.1

    def test_backoff_is_capped(self) -> None:
        sleeps: list[float] = []

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        with pytest.raises(EmailDeliveryFailed):
            make_sender(
                handler, sleeps=sleeps, max_retries=5, base_delay=1.0, max_delay=2.0
            ).send(make_message())

        assert all(wait <= 2.2 for wait in sleeps)

    def test_same_idempotency_key_on_every_attempt(self) -> None:
        keys = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            keys.append(body["personalizations"][0]["custom_args"]["idempotencyKey"])
            return httpx.Response(503) if len(keys) < 3 else httpx.Response(202)

        make_sender(handler).send(make_message())

        assert keys == ["idem-1", "idem-1", "idem-1"]
