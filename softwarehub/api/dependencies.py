"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Header, Request
from psycopg_pool import ConnectionPool

from softwarehub.adapters.mail.console import ConsoleEmailSender
from softwarehub.adapters.mail.sendgrid import SendGridEmailSender
from softwarehub.adapters.repository.postgres import (
    PostgresReviewRepository,
    PostgresSubmissionRepository,
)
from softwarehub.config.settings import Settings, get_settings
from softwarehub.domain.activation import ActivationService, SenderIdentity
from softwarehub.domain.ports import EmailSender
from softwarehub.domain.reviews import ReviewService
from softwarehub.domain.submissions import SubmissionService


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_review_service(request: Request) -> ReviewService:
    """Create review service with repository and configured rating scale."""
    settings = get_settings()
    repository = PostgresReviewRepository(get_pool(request))
    return ReviewService(repository=repository, max_rating=settings.rating_max)


def get_submission_service(request: Request) -> SubmissionService:
    """Create submission service with repository from app state."""
    repository = PostgresSubmissionRepository(get_pool(request))
    return SubmissionService(repository=repository)


def build_email_sender(settings: Settings) -> EmailSender:
    """Select the EmailSender adapter configured by ``email_backend``."""
    if settings.email_backend == "sendgrid":
        return SendGridEmailSender(
            settings.sendgrid_api_key,
            api_url=settings.sendgrid_api_url,
            max_retries=settings.email_max_retries,
            base_delay=settings.email_retry_base_delay,
            max_delay=settings.email_retry_max_delay,
            timeout=settings.email_timeout,
        )
    return ConsoleEmailSender()


def get_email_sender(request: Request) -> EmailSender:
    """
    Get the email sender (singleton).

    Built once during app lifespan startup and stored in app.state so the
    SendGrid HTTP client is shared between requests.
    """
    return request.app.state.email_sender


def get_activation_service(request: Request) -> ActivationService:
    """
    Create activation service with injected dependencies.

    Wires together the email sender and configured sender identity.
    """
    settings = get_settings()
    identity = SenderIdentity(
        from_email=settings.email_from,
        from_name=settings.email_from_name,
        base_url=settings.app_base_url,
        reply_to=settings.email_reply_to,
    )
    return ActivationService(email_sender=get_email_sender(request), sender=identity)


def get_current_user_id(x_user_id: int = Header(..., description="Acting user id")) -> int:
    """
    Extract the acting user from the X-User-Id header.

    Authentication happens upstream; FastAPI returns 422 when the header
    is missing or not an integer.
    """
    return x_user_id
