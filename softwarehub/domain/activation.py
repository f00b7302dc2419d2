"""
Account activation email - message construction and delivery orchestration.

The domain builds the complete provider-independent message (recipient,
sender, HTML body, headers, categories and custom arguments) and hands it
to the EmailSender port. The idempotency key placed in the custom
arguments is generated once per message, so every delivery attempt of the
same message carries the same key.
"""

import html
import logging
import secrets
from dataclasses import dataclass, field
from urllib.parse import quote

from .ports import EmailSender

logger = logging.getLogger(__name__)

ACTIVATION_SUBJECT = "Welcome to SoftwareHub! Please activate your account"
ACTIVATION_CATEGORIES = ("welcome", "user-onboarding")
ACTIVATION_CAMPAIGN = "activation"

_ACTIVATION_HTML = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); padding: 20px; text-align: center; border-radius: 8px 8px 0 0;">
    <h1 style="color: white; margin: 0; font-size: 24px;">Welcome to SoftwareHub!</h1>
  </div>
  <div style="padding: 30px; background: #f9f9f9; border-radius: 0 0 8px 8px;">
    <h2 style="color: #333; margin-top: 0;">Hi {name}!</h2>
    <p style="color: #666; line-height: 1.6;">Thank you for joining our professional software discovery and management platform.</p>
    <p style="color: #666; line-height: 1.6;">To get started, please click the button below to activate your account:</p>
    <div style="text-align: center; margin: 30px 0;">
      <a href="{link}" style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 15px 30px; text-decoration: none; border-radius: 25px; display: inline-block; font-weight: bold;">Activate Account</a>
    </div>
    <p style="color: #666; font-size: 14px;">If the button doesn't work, copy and paste this link:</p>
    <p style="word-break: break-all; color: #667eea; font-size: 12px;">{link}</p>
    <div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #ddd;">
      <p style="color: #666; font-size: 14px; margin: 0;">
        Best regards,<br>
        <strong>The SoftwareHub Team</strong><br>
        <span style="color: #999; font-size: 12px;">Professional Software Solutions</span>
      </p>
    </div>
  </div>
</div>
"""


@dataclass(frozen=True)
class ActivationMessage:
    """Provider-independent transactional message."""

    to: str
    from_email: str
    from_name: str
    subject: str
    html: str
    reply_to: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    categories: tuple[str, ...] = ()
    custom_args: dict[str, str] = field(default_factory=dict)

    @property
    def idempotency_key(self) -> str | None:
        return self.custom_args.get("idempotencyKey")


@dataclass(frozen=True)
class SendResult:
    """Provider acknowledgement of an accepted message."""

    message_id: str | None
    status_code: int


@dataclass(frozen=True)
class SenderIdentity:
    """Configured From/Reply-To identity and public base URL."""

    from_email: str
    from_name: str
    base_url: str
    reply_to: str | None = None


def activation_link(base_url: str, email: str) -> str:
    return f"{base_url.rstrip('/')}/activate?email={quote(email, safe='@')}"


def build_activation_message(
    email: str,
    name: str,
    user_id: str,
    sender: SenderIdentity,
    idempotency_key: str | None = None,
) -> ActivationMessage:
    """
    Build the account activation message.

    Args:
        email: Recipient address
        name: Display name used in the greeting
        user_id: Account id, forwarded to the provider as a custom argument
        sender: Configured sender identity
        idempotency_key: Reuse a key from an earlier attempt; generated if None

    Returns:
        Complete ActivationMessage
    """
    base_url = sender.base_url.rstrip("/")
    link = activation_link(base_url, email)
    headers = {
        "List-Unsubscribe": f"mailto:unsubscribe@softwarehub.com, {base_url}/unsubscribe",
        "X-Priority": "3",
        "X-MSMail-Priority": "Normal",
        "Importance": "Normal",
    }
    custom_args = {
        "userId": user_id,
        "campaignType": ACTIVATION_CAMPAIGN,
        "idempotencyKey": idempotency_key or secrets.token_urlsafe(16),
    }
    return ActivationMessage(
        to=email,
        from_email=sender.from_email,
        from_name=sender.from_name,
        reply_to=sender.reply_to,
        subject=ACTIVATION_SUBJECT,
        html=_ACTIVATION_HTML.format(name=html.escape(name), link=html.escape(link)),
        headers=headers,
        categories=ACTIVATION_CATEGORIES,
        custom_args=custom_args,
    )


@dataclass
class ActivationService:
    """
    Domain service for account activation emails.

    Builds the message and delegates delivery to the EmailSender port.
    """

    email_sender: EmailSender
    sender: SenderIdentity

    def send_activation(
        self, email: str, name: str, user_id: str, idempotency_key: str | None = None
    ) -> SendResult:
        """
        Send the activation email.

        Raises:
            EmailDeliveryFailed: If the provider does not accept the message
        """
        normalized_email = email.strip().lower()
        message = build_activation_message(
            normalized_email, name, user_id, self.sender, idempotency_key
        )
        result = self.email_sender.send(message)
        logger.info(
            "Activation email accepted for %s (message id %s, status %s)",
            normalized_email,
            result.message_id,
            result.status_code,
        )
        return result
