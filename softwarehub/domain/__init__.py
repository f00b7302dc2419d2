"""
Domain layer - Pure business logic with zero framework imports.

This package contains the rating and submission workflow core of the
SoftwareHub marketplace, plus the host services that persist ratings and
step cursors and send activation email. It defines its own port interfaces
for infrastructure abstraction.
"""

from .activation import ActivationMessage, ActivationService, SenderIdentity, SendResult
from .exceptions import (
    EmailDeliveryFailed,
    InvalidRating,
    InvalidReview,
    MarketplaceError,
    ReviewNotFound,
    SubmissionNotFound,
)
from .ports import EmailSender, ReviewRepository, SubmissionRepository
from .rating import RatingDisplay, RatingInput, RatingSize, fill_positions, filled_count
from .reviews import RatingSummary, Review, ReviewService
from .submissions import SELLER_SUBMISSION_STEPS, Submission, SubmissionService
from .workflow import StepDescriptor, StepStatus, StepView, StepWorkflow, step_status

__all__ = [
    "SELLER_SUBMISSION_STEPS",
    "ActivationMessage",
    "ActivationService",
    "EmailDeliveryFailed",
    "EmailSender",
    "InvalidRating",
    "InvalidReview",
    "MarketplaceError",
    "RatingDisplay",
    "RatingInput",
    "RatingSize",
    "RatingSummary",
    "Review",
    "ReviewNotFound",
    "ReviewRepository",
    "ReviewService",
    "SendResult",
    "SenderIdentity",
    "StepDescriptor",
    "StepStatus",
    "StepView",
    "StepWorkflow",
    "Submission",
    "SubmissionNotFound",
    "SubmissionRepository",
    "SubmissionService",
    "fill_positions",
    "filled_count",
    "step_status",
]
