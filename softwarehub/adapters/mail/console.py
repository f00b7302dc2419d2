"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging messages to stdout for local development.
"""

import logging
import secrets

from softwarehub.domain.activation import ActivationMessage, SendResult

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - the activation link is visible in logs.
    """

    def send(self, message: ActivationMessage) -> SendResult:
        """
        Log the message to console (simulates email delivery).

        The message is logged at INFO level to be visible in docker-compose logs.

        Args:
            message: Fully built message

        Returns:
            SendResult with a locally generated message id and status 202
        """
        message_id = f"console-{secrets.token_hex(8)}"
        logger.info(
            "[EMAIL] To: %s Subject: %s Categories: %s Id: %s",
            message.to,
            message.subject,
            ",".join(message.categories),
            message_id,
        )
        return SendResult(message_id=message_id, status_code=202)
