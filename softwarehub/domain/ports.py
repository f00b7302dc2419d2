"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .activation import ActivationMessage, SendResult
    from .reviews import Review
    from .submissions import Submission


class ReviewRepository(Protocol):
    """Port interface for review persistence."""

    def add_review(
        self, user_id: int, target_type: str, target_id: int, rating: int, comment: str
    ) -> "Review":
        """
        Persist a committed review.

        Args:
            user_id: Author of the review
            target_type: Kind of reviewed entity (e.g. "software")
            target_id: Id of the reviewed entity
            rating: Committed rating, already validated by the domain
            comment: Review text

        Returns:
            The stored Review with its id and creation time
        """
        ...

    def list_reviews(self, target_type: str, target_id: int) -> list["Review"]:
        """Return reviews for a target, newest first."""
        ...

    def list_ratings(self, target_type: str, target_id: int) -> list[int]:
        """Return the bare rating values for a target (for aggregation)."""
        ...

    def delete_review(self, review_id: int, user_id: int) -> bool:
        """
        Delete a review owned by ``user_id``.

        Returns:
            True if a row was deleted, False if not found or not owned
        """
        ...


class SubmissionRepository(Protocol):
    """Port interface for seller submission cursor persistence."""

    def create_submission(self, seller_id: int) -> "Submission":
        """Create a submission with its cursor at the first step."""
        ...

    def get_submission(self, submission_id: int) -> "Submission | None":
        """Fetch a submission, or None if it does not exist."""
        ...

    def set_step(self, submission_id: int, seller_id: int, step: int) -> "Submission | None":
        """
        Store a new cursor value on a submission owned by ``seller_id``.

        Returns:
            The updated Submission, or None if not found or not owned
        """
        ...

    def move_step(
        self, submission_id: int, seller_id: int, delta: int, max_step: int
    ) -> "Submission | None":
        """
        Atomically add ``delta`` to the cursor, clamped into ``0..max_step``.

        The read and the write happen in a single statement, so concurrent
        moves on the same submission are never lost.

        Returns:
            The updated Submission, or None if not found or not owned
        """
        ...


class EmailSender(Protocol):
    """Port interface for transactional email delivery."""

    def send(self, message: "ActivationMessage") -> "SendResult":
        """
        Deliver a message through the mail provider.

        Args:
            message: Fully built message (recipient, template, headers, custom args)

        Returns:
            Provider message id and status code

        Raises:
            EmailDeliveryFailed: If the provider rejects the message
        """
        ...
