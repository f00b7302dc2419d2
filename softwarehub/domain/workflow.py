"""
Step workflow - read model for linear multi-step flows.

The workflow is an ordered, immutable sequence of steps plus a cursor that is
owned and moved by the caller. The workflow itself never moves the cursor;
it only derives a status for every step:

    index <  cursor  -> COMPLETED
    index == cursor  -> ACTIVE
    otherwise        -> PENDING

A cursor at or beyond the last index means every step is completed (terminal
display state). A negative cursor means no step has been reached yet, so
every step is PENDING.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class StepStatus(str, Enum):
    """Derived status of a single step."""

    COMPLETED = "completed"
    ACTIVE = "active"
    PENDING = "pending"


@dataclass(frozen=True)
class StepDescriptor:
    """Declared step: title plus optional description and icon name."""

    title: str
    description: str | None = None
    icon: str | None = None


@dataclass(frozen=True)
class StepView:
    """
    A step as displayed for a given cursor.

    ``connector_completed`` is None for the last step (no connector), and
    otherwise mirrors whether this step is COMPLETED.
    """

    index: int
    title: str
    description: str | None
    icon: str | None
    status: StepStatus
    connector_completed: bool | None


def step_status(index: int, current_step: int) -> StepStatus:
    """Derive the status of step ``index`` for ``current_step``."""
    if index < current_step:
        return StepStatus.COMPLETED
    if index == current_step:
        return StepStatus.ACTIVE
    return StepStatus.PENDING


class StepWorkflow:
    """Ordered steps rendered against a caller-owned cursor."""

    def __init__(self, steps: Iterable[StepDescriptor]) -> None:
        self._steps: tuple[StepDescriptor, ...] = tuple(steps)

    @property
    def steps(self) -> tuple[StepDescriptor, ...]:
        return self._steps

    def __len__(self) -> int:
        return len(self._steps)

    def statuses(self, current_step: int) -> list[StepStatus]:
        return [step_status(index, current_step) for index in range(len(self._steps))]

    def render(self, current_step: int) -> list[StepView]:
        """
        Render every step in declaration order for ``current_step``.

        Never raises: any integer cursor produces a complete view.
        """
        last_index = len(self._steps) - 1
        views = []
        for index, step in enumerate(self._steps):
            status = step_status(index, current_step)
            connector = None if index == last_index else status is StepStatus.COMPLETED
            views.append(
                StepView(
                    index=index,
                    title=step.title,
                    description=step.description,
                    icon=step.icon,
                    status=status,
                    connector_completed=connector,
                )
            )
        return views

    def is_finished(self, current_step: int) -> bool:
        """True once the cursor has moved past the last step."""
        return current_step >= len(self._steps)
