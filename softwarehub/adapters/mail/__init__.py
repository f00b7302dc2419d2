"""Mail adapters - EmailSender implementations."""

from .console import ConsoleEmailSender
from .sendgrid import SendGridEmailSender

__all__ = ["ConsoleEmailSender", "SendGridEmailSender"]
