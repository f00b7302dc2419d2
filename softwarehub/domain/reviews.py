"""
Review domain service - Rating commits and aggregation.

Reviews are the persisted side of the star rating: an interactive
RatingInput commits a value, the service validates it against the
configured scale and stores it. Aggregates are computed from the stored
values and displayed through a read-only RatingInput.
"""

from dataclasses import dataclass, field
from datetime import datetime

from .exceptions import InvalidRating, InvalidReview, ReviewNotFound
from .ports import ReviewRepository
from .rating import DEFAULT_MAX_RATING, RatingDisplay, RatingInput, RatingSize

SOFTWARE_TARGET = "software"


@dataclass(frozen=True)
class Review:
    """A stored review."""

    id: int
    user_id: int
    target_type: str
    target_id: int
    rating: int
    comment: str | None
    created_at: datetime


@dataclass(frozen=True)
class RatingSummary:
    """Aggregate of all ratings for one target."""

    count: int
    average: float
    max_rating: int
    distribution: dict[int, int] = field(default_factory=dict)

    @classmethod
    def from_ratings(cls, ratings: list[int], max_rating: int = DEFAULT_MAX_RATING) -> "RatingSummary":
        """
        Aggregate raw rating values.

        Values outside ``1..max_rating`` still count towards the average but
        are left out of the per-star distribution.
        """
        distribution = {star: 0 for star in range(1, max_rating + 1)}
        for rating in ratings:
            if rating in distribution:
                distribution[rating] += 1
        average = sum(ratings) / len(ratings) if ratings else 0.0
        return cls(
            count=len(ratings),
            average=average,
            max_rating=max_rating,
            distribution=distribution,
        )

    def stars(self, size: RatingSize = RatingSize.MD) -> RatingDisplay:
        """Read-only star display of the average."""
        return RatingInput(value=self.average, max_rating=self.max_rating, size=size).render()


@dataclass
class ReviewService:
    """
    Domain service for software reviews.

    Validates committed ratings and delegates persistence to the repository.
    """

    repository: ReviewRepository
    max_rating: int = DEFAULT_MAX_RATING

    def submit_review(self, user_id: int, target_id: int, rating: int, comment: str) -> Review:
        """
        Store a review for a piece of software.

        Args:
            user_id: Acting user
            target_id: Reviewed software id
            rating: Committed rating
            comment: Review text (required)

        Returns:
            The stored Review

        Raises:
            InvalidRating: If rating is outside 1..max_rating
            InvalidReview: If the comment is blank
        """
        if not 1 <= rating <= self.max_rating:
            raise InvalidRating(rating, self.max_rating)
        comment = comment.strip()
        if not comment:
            raise InvalidReview("Please write a comment for your review")
        return self.repository.add_review(user_id, SOFTWARE_TARGET, target_id, rating, comment)

    def list_reviews(self, target_id: int) -> list[Review]:
        return self.repository.list_reviews(SOFTWARE_TARGET, target_id)

    def delete_review(self, review_id: int, user_id: int) -> None:
        """
        Delete a review authored by ``user_id``.

        Raises:
            ReviewNotFound: If the review is missing or owned by someone else
        """
        if not self.repository.delete_review(review_id, user_id):
            raise ReviewNotFound(review_id)

    def summarize(self, target_id: int) -> RatingSummary:
        ratings = self.repository.list_ratings(SOFTWARE_TARGET, target_id)
        return RatingSummary.from_ratings(ratings, self.max_rating)
