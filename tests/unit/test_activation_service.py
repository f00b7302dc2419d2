"""
Unit tests for activation email construction and ActivationService.

Tests verify the message shape handed to the EmailSender port:
recipient, template, headers, categories and custom arguments.
"""

from unittest.mock import Mock

import pytest

from softwarehub.domain.activation import (
    ACTIVATION_SUBJECT,
    ActivationMessage,
    ActivationService,
    SenderIdentity,
    SendResult,
    activation_link,
    build_activation_message,
)
from softwarehub.domain.exceptions import EmailDeliveryFailed

SENDER = SenderIdentity(
    from_email="team@softwarehub.com",
    from_name="SoftwareHub Team",
    base_url="http://localhost:5000/",
    reply_to="support@softwarehub.com",
)


class TestActivationLink:
    """Tests for activation link construction."""

    def test_link_contains_email(self) -> None:
        link = activation_link("http://localhost:5000", "user@example.com")
        assert link == "http://localhost:5000/activate?email=user@example.com"

    def test_trailing_slash_is_dropped(self) -> None:
        link = activation_link("https://hub.example/", "a@b.com")
        assert link == "https://hub.example/activate?email=a@b.com"

    def test_email_is_url_encoded(self) -> None:
        link = activation_link("http://localhost:5000", "user+tag@example.com")
        assert "email=user%2Btag@example.com" in link


class TestBuildActivationMessage:
    """Tests for build_activation_message."""

    def test_recipient_and_sender(self) -> None:
        message = build_activation_message("user@example.com", "Ada", "u1", SENDER)

        assert message.to == "user@example.com"
        assert message.from_email == "team@softwarehub.com"
        assert message.from_name == "SoftwareHub Team"
        assert message.reply_to == "support@softwarehub.com"
        assert message.subject == ACTIVATION_SUBJECT

    def test_html_contains_greeting_and_link(self) -> None:
        message = build_activation_message("user@example.com", "Ada", "u1", SENDER)

        assert "Hi Ada!" in message.html
        assert message.html.count("http://localhost:5000/activate?email=user@example.com") == 2

    def test_name_is_html_escaped(self) -> None:
        message = build_activation_message(
            "user@example.com", "<a href=\"http://evil\">Ada</a>", "u1", SENDER
        )

        assert "<a href=\"http://evil\">" not in message.html
        assert "Hi &lt;a href=&quot;http://evil&quot;&gt;Ada&lt;/a&gt;!" in message.html

    def test_link_cannot_break_out_of_href(self) -> None:
        sender = SenderIdentity(
            from_email="team@softwarehub.com",
            from_name="SoftwareHub Team",
            base_url="https://softwarehub.com/\" onmouseover=\"alert(1)",
        )
        message = build_activation_message("user@example.com", "Ada", "u1", sender)

        assert "\" onmouseover=\"" not in message.html
        assert "&quot; onmouseover=&quot;" in message.html

    def test_headers(self) -> None:
        message = build_activation_message("user@example.com", "Ada", "u1", SENDER)

        assert message.headers == {
            "List-Unsubscribe": "mailto:unsubscribe@softwarehub.com, http://localhost:5000/unsubscribe",
            "X-Priority": "3",
            "X-MSMail-Priority": "Normal",
            "Importance": "Normal",
        }

    def test_categories(self) -> None:
        message = build_activation_message("user@example.com", "Ada", "u1", SENDER)
        assert message.categories == ("welcome", "user-onboarding")

    def test_custom_args(self) -> None:
        message = build_activation_message("user@example.com", "Ada", "u1", SENDER)

        assert message.custom_args["userId"] == "u1"
        assert message.custom_args["campaignType"] == "activation"
        assert message.idempotency_key

    def test_idempotency_key_is_reused_when_given(self) -> None:
        message = build_activation_message(
            "user@example.com", "Ada", "u1", SENDER, idempotency_key="key-1"
        )
        assert message.idempotency_key == "key-1"

    def test_generated_idempotency_keys_differ(self) -> None:
        keys = {
            build_activation_message("user@example.com", "Ada", "u1", SENDER).idempotency_key
            for _ in range(5)
        }
        assert len(keys) == 5


class TestActivationService:
    """Tests for ActivationService orchestration."""

    def test_send_activation_delegates_to_sender(self) -> None:
        sender = Mock()
        sender.send.return_value = SendResult(message_id="abc", status_code=202)
        service = ActivationService(email_sender=sender, sender=SENDER)

        result = service.send_activation("user@example.com", "Ada", "u1")

        assert result == SendResult(message_id="abc", status_code=202)
        message = sender.send.call_args[0][0]
        assert isinstance(message, ActivationMessage)
        assert message.to == "user@example.com"

    def test_email_is_normalized(self) -> None:
        sender = Mock()
        sender.send.return_value = SendResult(message_id="abc", status_code=202)
        service = ActivationService(email_sender=sender, sender=SENDER)

        service.send_activation("  User@Example.COM ", "Ada", "u1")

        assert sender.send.call_args[0][0].to == "user@example.com"

    def test_idempotency_key_forwarded(self) -> None:
        sender = Mock()
        sender.send.return_value = SendResult(message_id="abc", status_code=202)
        service = ActivationService(email_sender=sender, sender=SENDER)

        service.send_activation("user@example.com", "Ada", "u1", idempotency_key="retry-key")

        assert sender.send.call_args[0][0].idempotency_key == "retry-key"

    def test_delivery_failure_propagates(self) -> None:
        sender = Mock()
        sender.send.side_effect = EmailDeliveryFailed("Forbidden", 403, {"errors": []})
        service = ActivationService(email_sender=sender, sender=SENDER)

        with pytest.raises(EmailDeliveryFailed) as exc_info:
            service.send_activation("user@example.com", "Ada", "u1")

        assert exc_info.value.status_code == 403
