"""
API v1 routes.

Defines REST endpoints for software ratings, seller submissions and
activation emails.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from softwarehub.api.dependencies import (
    get_activation_service,
    get_current_user_id,
    get_review_service,
    get_submission_service,
)
from softwarehub.api.models import (
    ActivationEmailRequest,
    ActivationEmailResponse,
    ErrorResponse,
    JumpRequest,
    MessageResponse,
    RatingSummaryResponse,
    ReviewRequest,
    ReviewResponse,
    SubmissionResponse,
)
from softwarehub.domain.activation import ActivationService
from softwarehub.domain.exceptions import (
    EmailDeliveryFailed,
    InvalidRating,
    InvalidReview,
    ReviewNotFound,
    SubmissionNotFound,
)
from softwarehub.domain.reviews import ReviewService
from softwarehub.domain.submissions import Submission, SubmissionService

router = APIRouter(tags=["v1"])


def _submission_response(service: SubmissionService, submission: Submission) -> SubmissionResponse:
    return SubmissionResponse.build(
        submission, service.view(submission), service.is_finished(submission)
    )


@router.get(
    "/softwares/{software_id}/rating",
    response_model=RatingSummaryResponse,
    summary="Get aggregate rating",
    description="Average, count and per-star distribution of a software's reviews, "
    "with the read-only star display of the average.",
)
def get_rating(
    software_id: int,
    service: ReviewService = Depends(get_review_service),
) -> RatingSummaryResponse:
    summary = service.summarize(software_id)
    return RatingSummaryResponse.from_summary(software_id, summary)


@router.get(
    "/softwares/{software_id}/reviews",
    response_model=list[ReviewResponse],
    summary="List reviews",
)
def list_reviews(
    software_id: int,
    service: ReviewService = Depends(get_review_service),
) -> list[ReviewResponse]:
    """List reviews for a software, newest first."""
    return [ReviewResponse.from_review(review) for review in service.list_reviews(software_id)]


@router.post(
    "/softwares/{software_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse, "description": "Invalid rating or comment"}},
    summary="Submit a review",
    description="Commit a star rating with a comment for a software.",
)
def submit_review(
    software_id: int,
    request_data: ReviewRequest,
    user_id: int = Depends(get_current_user_id),
    service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    """
    Submit a review.

    - **rating**: committed star rating, 1 to the configured maximum
    - **comment**: review text (required)
    """
    try:
        review = service.submit_review(
            user_id, software_id, request_data.rating, request_data.comment
        )
    except (InvalidRating, InvalidReview) as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from None
    return ReviewResponse.from_review(review)


@router.delete(
    "/reviews/{review_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse, "description": "Review not found"}},
    summary="Delete a review",
)
def delete_review(
    review_id: int,
    user_id: int = Depends(get_current_user_id),
    service: ReviewService = Depends(get_review_service),
) -> MessageResponse:
    try:
        service.delete_review(review_id, user_id)
    except ReviewNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Review not found or you don't have permission to delete it",
        ) from None
    return MessageResponse(message="Review deleted successfully")


@router.post(
    "/submissions",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a seller submission",
)
def start_submission(
    seller_id: int = Depends(get_current_user_id),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    submission = service.start(seller_id)
    return _submission_response(service, submission)


@router.get(
    "/submissions/{submission_id}",
    response_model=SubmissionResponse,
    responses={404: {"model": ErrorResponse, "description": "Submission not found"}},
    summary="Get a seller submission",
)
def get_submission(
    submission_id: int,
    seller_id: int = Depends(get_current_user_id),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    try:
        submission = service.get(submission_id, seller_id)
    except SubmissionNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found"
        ) from None
    return _submission_response(service, submission)


@router.post(
    "/submissions/{submission_id}/advance",
    response_model=SubmissionResponse,
    responses={404: {"model": ErrorResponse, "description": "Submission not found"}},
    summary="Advance to the next step",
)
def advance_submission(
    submission_id: int,
    seller_id: int = Depends(get_current_user_id),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    try:
        submission = service.advance(submission_id, seller_id)
    except SubmissionNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found"
        ) from None
    return _submission_response(service, submission)


@router.post(
    "/submissions/{submission_id}/back",
    response_model=SubmissionResponse,
    responses={404: {"model": ErrorResponse, "description": "Submission not found"}},
    summary="Go back to the previous step",
)
def back_submission(
    submission_id: int,
    seller_id: int = Depends(get_current_user_id),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    try:
        submission = service.back(submission_id, seller_id)
    except SubmissionNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found"
        ) from None
    return _submission_response(service, submission)


@router.put(
    "/submissions/{submission_id}/step",
    response_model=SubmissionResponse,
    responses={404: {"model": ErrorResponse, "description": "Submission not found"}},
    summary="Jump to a step",
    description="Move the cursor directly; out-of-range values are clamped.",
)
def jump_submission(
    submission_id: int,
    request_data: JumpRequest,
    seller_id: int = Depends(get_current_user_id),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    try:
        submission = service.jump(submission_id, seller_id, request_data.step)
    except SubmissionNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found"
        ) from None
    return _submission_response(service, submission)


@router.post(
    "/activation-emails",
    response_model=ActivationEmailResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        422: {"description": "Validation error"},
        502: {"model": ErrorResponse, "description": "Mail provider rejected the message"},
    },
    summary="Send an account activation email",
)
def send_activation_email(
    request_data: ActivationEmailRequest,
    service: ActivationService = Depends(get_activation_service),
) -> ActivationEmailResponse:
    """
    Send the account activation email through the mail provider.

    - **email**: recipient address
    - **name**: greeting name
    - **user_id**: account id, forwarded as a provider custom argument
    - **idempotency_key**: optional, reuse when re-sending
    """
    try:
        result = service.send_activation(
            request_data.email,
            request_data.name,
            request_data.user_id,
            request_data.idempotency_key,
        )
    except EmailDeliveryFailed:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Activation email could not be delivered",
        ) from None
    return ActivationEmailResponse(
        message="Activation email sent",
        email=request_data.email.strip().lower(),
        message_id=result.message_id,
        status_code=result.status_code,
    )
