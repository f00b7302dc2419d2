"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from softwarehub.domain.rating import RatingDisplay, RatingSize
from softwarehub.domain.reviews import RatingSummary, Review
from softwarehub.domain.submissions import Submission
from softwarehub.domain.workflow import StepStatus, StepView


class StarsResponse(BaseModel):
    """Rendered star positions."""

    positions: list[bool]
    filled: int
    max_rating: int
    size: RatingSize
    interactive: bool

    @classmethod
    def from_display(cls, display: RatingDisplay) -> "StarsResponse":
        return cls(
            positions=list(display.positions),
            filled=display.filled,
            max_rating=display.max_rating,
            size=display.size,
            interactive=display.interactive,
        )


class RatingSummaryResponse(BaseModel):
    """Aggregate rating of one piece of software."""

    software_id: int
    count: int
    average: float
    distribution: dict[int, int]
    stars: StarsResponse

    @classmethod
    def from_summary(cls, software_id: int, summary: RatingSummary) -> "RatingSummaryResponse":
        return cls(
            software_id=software_id,
            count=summary.count,
            average=round(summary.average, 1),
            distribution=summary.distribution,
            stars=StarsResponse.from_display(summary.stars()),
        )


class ReviewRequest(BaseModel):
    """Request model for submitting a review."""

    rating: int = Field(..., description="Committed star rating (1..rating_max)")
    comment: str = Field(..., description="Review text")


class ReviewResponse(BaseModel):
    """A stored review."""

    id: int
    user_id: int
    target_id: int
    rating: int
    comment: str | None
    created_at: datetime

    @classmethod
    def from_review(cls, review: Review) -> "ReviewResponse":
        return cls(
            id=review.id,
            user_id=review.user_id,
            target_id=review.target_id,
            rating=review.rating,
            comment=review.comment,
            created_at=review.created_at,
        )


class StepResponse(BaseModel):
    """A workflow step as displayed for the current cursor."""

    index: int
    title: str
    description: str | None
    icon: str | None
    status: StepStatus
    connector_completed: bool | None

    @classmethod
    def from_view(cls, view: StepView) -> "StepResponse":
        return cls(
            index=view.index,
            title=view.title,
            description=view.description,
            icon=view.icon,
            status=view.status,
            connector_completed=view.connector_completed,
        )


class SubmissionResponse(BaseModel):
    """Seller submission with its rendered workflow."""

    id: int
    seller_id: int
    current_step: int
    finished: bool
    steps: list[StepResponse]

    @classmethod
    def build(
        cls, submission: Submission, views: list[StepView], finished: bool
    ) -> "SubmissionResponse":
        return cls(
            id=submission.id,
            seller_id=submission.seller_id,
            current_step=submission.current_step,
            finished=finished,
            steps=[StepResponse.from_view(view) for view in views],
        )


class JumpRequest(BaseModel):
    """Request model for moving a submission cursor directly."""

    step: int = Field(..., description="Target step index; clamped into the valid range")


class ActivationEmailRequest(BaseModel):
    """Request model for sending an activation email."""

    email: EmailStr
    name: str = Field(..., min_length=1, description="Display name used in the greeting")
    user_id: str = Field(..., min_length=1, description="Account id forwarded to the provider")
    idempotency_key: str | None = Field(
        default=None, description="Reuse when re-sending the same activation"
    )


class ActivationEmailResponse(BaseModel):
    """Response model for an accepted activation email."""

    message: str
    email: str
    message_id: str | None
    status_code: int


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
