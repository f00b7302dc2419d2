"""
Seller submission domain service - drives the multi-step submission flow.

The service owns the cursor business logic (advance, back, jump) and keeps
the cursor in the repository. Rendering is delegated to StepWorkflow, which
never moves the cursor on its own.

Cursor range is ``0..len(steps)``: ``len(steps)`` is the terminal state
where every step is displayed as completed.
"""

from dataclasses import dataclass, field
from datetime import datetime

from .exceptions import SubmissionNotFound
from .ports import SubmissionRepository
from .workflow import StepDescriptor, StepView, StepWorkflow

SELLER_SUBMISSION_STEPS = (
    StepDescriptor(
        title="Business Information",
        description="Company name, type and product category",
        icon="building",
    ),
    StepDescriptor(
        title="Contact Details",
        description="Primary contact and phone number",
        icon="user",
    ),
    StepDescriptor(
        title="Payment & Verification",
        description="Payout account and identity documents",
        icon="credit-card",
    ),
    StepDescriptor(
        title="Review",
        description="Submission is reviewed by the marketplace team",
        icon="check",
    ),
)


@dataclass(frozen=True)
class Submission:
    """A seller submission and its persisted cursor."""

    id: int
    seller_id: int
    current_step: int
    created_at: datetime
    updated_at: datetime


@dataclass
class SubmissionService:
    """
    Domain service moving and rendering seller submission cursors.

    Every operation is scoped to the owning seller: a submission owned by
    someone else is indistinguishable from a missing one.
    """

    repository: SubmissionRepository
    workflow: StepWorkflow = field(default_factory=lambda: StepWorkflow(SELLER_SUBMISSION_STEPS))

    def start(self, seller_id: int) -> Submission:
        return self.repository.create_submission(seller_id)

    def get(self, submission_id: int, seller_id: int) -> Submission:
        """
        Fetch a submission owned by ``seller_id``.

        Raises:
            SubmissionNotFound: If the submission is missing or owned by another seller
        """
        submission = self.repository.get_submission(submission_id)
        if submission is None or submission.seller_id != seller_id:
            raise SubmissionNotFound(submission_id)
        return submission

    def advance(self, submission_id: int, seller_id: int) -> Submission:
        return self._move(submission_id, seller_id, 1)

    def back(self, submission_id: int, seller_id: int) -> Submission:
        return self._move(submission_id, seller_id, -1)

    def jump(self, submission_id: int, seller_id: int, step: int) -> Submission:
        """Move the cursor to ``step``, clamped into ``0..len(steps)``."""
        clamped = max(0, min(step, len(self.workflow)))
        updated = self.repository.set_step(submission_id, seller_id, clamped)
        if updated is None:
            raise SubmissionNotFound(submission_id)
        return updated

    def view(self, submission: Submission) -> list[StepView]:
        return self.workflow.render(submission.current_step)

    def is_finished(self, submission: Submission) -> bool:
        return self.workflow.is_finished(submission.current_step)

    def _move(self, submission_id: int, seller_id: int, delta: int) -> Submission:
        updated = self.repository.move_step(submission_id, seller_id, delta, len(self.workflow))
        if updated is None:
            raise SubmissionNotFound(submission_id)
        return updated
