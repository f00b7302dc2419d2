"""
SendGrid email sender adapter - Implements EmailSender protocol.

Delivers messages through the SendGrid v3 ``mail/send`` endpoint with httpx.

Retry policy:
-------------
Transport errors, 429 and 5xx responses are retried up to ``max_retries``
total attempts. The wait before attempt ``n + 1`` is
``min(base_delay * 2 ** (n - 1), max_delay)`` plus up to 10% random jitter.
Any other 4xx is a permanent rejection and fails immediately.

The payload (including the ``idempotencyKey`` custom argument) is built once
and reused unchanged for every attempt.
"""

import logging
import random
import time
from collections.abc import Callable
from typing import Any

import httpx

from softwarehub.domain.activation import ActivationMessage, SendResult
from softwarehub.domain.exceptions import EmailDeliveryFailed

logger = logging.getLogger(__name__)

SENDGRID_MAIL_SEND_URL = "https://api.sendgrid.com/v3/mail/send"

_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


def build_payload(message: ActivationMessage) -> dict[str, Any]:
    """Translate a domain message into the SendGrid v3 JSON body."""
    personalization: dict[str, Any] = {"to": [{"email": message.to}]}
    if message.custom_args:
        personalization["custom_args"] = dict(message.custom_args)

    payload: dict[str, Any] = {
        "personalizations": [personalization],
        "from": {"email": message.from_email, "name": message.from_name},
        "subject": message.subject,
        "content": [{"type": "text/html", "value": message.html}],
    }
    if message.reply_to:
        payload["reply_to"] = {"email": message.reply_to}
    if message.headers:
        payload["headers"] = dict(message.headers)
    if message.categories:
        payload["categories"] = list(message.categories)
    return payload


def _describe_failure(status_code: int, body: Any) -> str:
    if status_code == 401:
        return "SendGrid Unauthorized - Invalid API key"
    if status_code == 403:
        return "SendGrid Forbidden - Check sender verification and API key permissions"
    if isinstance(body, dict) and body.get("errors"):
        messages = "; ".join(str(err.get("message", err)) for err in body["errors"])
        return f"SendGrid error: {messages}"
    return f"SendGrid send failed with status {status_code}"


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class SendGridEmailSender:
    """
    Implements EmailSender protocol via the SendGrid HTTP API.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        api_key: str,
        *,
        api_url: str = SENDGRID_MAIL_SEND_URL,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize the sender.

        Args:
            api_key: SendGrid API key (expected to start with "SG.")
            api_url: mail/send endpoint
            max_retries: Total attempts per message, including the first
            base_delay: Seconds to wait before the second attempt
            max_delay: Upper bound for a single backoff wait
            timeout: Per-request timeout in seconds
            client: Preconfigured httpx client (tests inject a mock transport)
            sleep: Wait function used between attempts
        """
        if not api_key:
            raise ValueError("SendGrid API key is required")
        if not api_key.startswith("SG."):
            logger.warning("API key does not start with 'SG.' - it might be an invalid SendGrid key")

        self._api_url = api_url
        self._max_retries = max(1, max_retries)
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._sleep = sleep
        self._client = client or httpx.Client(timeout=timeout)
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def send(self, message: ActivationMessage) -> SendResult:
        """
        Deliver a message, retrying transient failures with backoff.

        Args:
            message: Fully built message

        Returns:
            SendResult with the X-Message-Id header and HTTP status

        Raises:
            EmailDeliveryFailed: On permanent rejection or after the last attempt
        """
        payload = build_payload(message)
        last_error = EmailDeliveryFailed("SendGrid send was not attempted")

        for attempt in range(1, self._max_retries + 1):
            try:
                response = self._client.post(self._api_url, json=payload, headers=self._headers)
            except httpx.TransportError as e:
                last_error = EmailDeliveryFailed(f"SendGrid transport error: {e}")
                logger.warning(
                    "Attempt %d/%d to %s failed: %s", attempt, self._max_retries, message.to, e
                )
            else:
                if response.is_success:
                    return SendResult(
                        message_id=response.headers.get("X-Message-Id"),
                        status_code=response.status_code,
                    )

                body = _response_body(response)
                error_message = _describe_failure(response.status_code, body)
                logger.error(
                    "SendGrid rejected message to %s (attempt %d/%d): code=%s message=%s body=%s",
                    message.to,
                    attempt,
                    self._max_retries,
                    response.status_code,
                    error_message,
                    body,
                )
                last_error = EmailDeliveryFailed(error_message, response.status_code, body)
                if response.status_code not in _RETRYABLE_STATUS:
                    raise last_error

            if attempt < self._max_retries:
                wait = self._backoff(attempt)
                logger.info("Retrying in %.0fms...", wait * 1000)
                self._sleep(wait)

        raise EmailDeliveryFailed(
            f"Failed after {self._max_retries} attempts: {last_error}",
            last_error.status_code,
            last_error.body,
        )

    def close(self) -> None:
        self._client.close()

    def _backoff(self, attempt: int) -> float:
        delay = min(self._base_delay * 2 ** (attempt - 1), self._max_delay)
        return delay + random.random() * 0.1 * delay
