"""
Domain exceptions - Semantic error types for the marketplace.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
"""


class MarketplaceError(Exception):
    """Base class for marketplace domain errors."""

    pass


class InvalidRating(MarketplaceError):
    """Committed rating is outside ``1..max``."""

    def __init__(self, rating: int, max_rating: int) -> None:
        super().__init__(f"Rating must be between 1 and {max_rating}, got {rating}")
        self.rating = rating
        self.max_rating = max_rating


class InvalidReview(MarketplaceError):
    """Review payload failed a business rule (e.g. blank comment)."""

    pass


class ReviewNotFound(MarketplaceError):
    """Review does not exist or does not belong to the acting user."""

    pass


class SubmissionNotFound(MarketplaceError):
    """No seller submission exists with the given id."""

    pass


class EmailDeliveryFailed(MarketplaceError):
    """Transactional mail provider rejected or failed to accept a message."""

    def __init__(self, message: str, status_code: int | None = None, body: object = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
