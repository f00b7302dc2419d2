"""
Star rating domain - fill derivation and interactive rating input.

This module holds the two rating building blocks used across the marketplace:

RatingScale (pure derivation)
=============================

Given a value, a maximum and an optional override, every position ``i`` in
``1..max`` is filled iff ``effective >= i`` where ``effective`` is the
override when present, else the value. Out-of-range inputs degrade to
all-empty or all-filled, and ``max <= 0`` yields no positions at all.
Fractional values (e.g. an average of 4.5) fill ``floor(value)`` positions.

RatingInput (controlled widget state)
=====================================

Wraps the scale with a transient hover preview. The committed ``value`` is
owned by the host; the input only reports a commit through ``on_change``
and never writes the value itself.

    read-only:   hover_enter / hover_leave / commit are all no-ops
    interactive: hover_enter(p) -> preview p (latest hover wins)
                 hover_leave()  -> preview cleared
                 commit(p)      -> on_change(p), preview cleared
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

DEFAULT_MAX_RATING = 5


class RatingSize(str, Enum):
    """Display size hint, carried through to the rendered output untouched."""

    SM = "sm"
    MD = "md"
    LG = "lg"


def fill_positions(value: float, max_rating: int, override: float | None = None) -> list[bool]:
    """
    Compute the filled state of each star position, left to right.

    Args:
        value: Committed rating value
        max_rating: Number of positions to render
        override: Hover preview value, replaces ``value`` when not None

    Returns:
        One boolean per position ``1..max_rating``; empty when max_rating <= 0
    """
    effective = override if override is not None else value
    return [effective >= position for position in range(1, max_rating + 1)]


def filled_count(value: float, max_rating: int, override: float | None = None) -> int:
    """Number of filled positions, always within ``[0, max(max_rating, 0)]``."""
    return sum(fill_positions(value, max_rating, override))


@dataclass(frozen=True)
class RatingDisplay:
    """Rendered snapshot of a rating widget."""

    positions: tuple[bool, ...]
    size: RatingSize
    interactive: bool

    @property
    def filled(self) -> int:
        return sum(self.positions)

    @property
    def max_rating(self) -> int:
        return len(self.positions)


@dataclass
class RatingInput:
    """
    Interactive (or read-only) star rating input.

    The host passes the committed ``value`` in and receives commits through
    ``on_change``. Hover state is local to this instance and is never shared
    with another input.
    """

    value: float = 0
    max_rating: int = DEFAULT_MAX_RATING
    interactive: bool = False
    size: RatingSize = RatingSize.MD
    on_change: Callable[[int], None] | None = None
    _hover_preview: int | None = field(default=None, init=False, repr=False)

    def __setattr__(self, name: str, value: object) -> None:
        super().__setattr__(name, value)
        # Leaving interactive mode ends any hover in progress.
        if name == "interactive" and not value:
            super().__setattr__("_hover_preview", None)

    @property
    def hover_preview(self) -> int | None:
        """Current hover preview, or None outside a hover interaction."""
        return self._hover_preview if self.interactive else None

    def hover_enter(self, position: int) -> None:
        """Preview ``position``; re-entrant hovers overwrite the previous one."""
        if not self.interactive:
            return
        self._hover_preview = position

    def hover_leave(self) -> None:
        """End the hover interaction. Safe to call in any mode."""
        if not self.interactive:
            return
        self._hover_preview = None

    def commit(self, position: int) -> bool:
        """
        Report a click on ``position`` to the host.

        Returns:
            True if the commit callback was invoked, False if the input
            rejected the interaction (read-only or no callback configured)
        """
        if not self.interactive or self.on_change is None:
            return False
        self._hover_preview = None
        self.on_change(position)
        return True

    def render(self) -> RatingDisplay:
        """Derive the displayed positions from the value and hover preview."""
        positions = fill_positions(self.value, self.max_rating, self.hover_preview)
        return RatingDisplay(
            positions=tuple(positions),
            size=self.size,
            interactive=self.interactive,
        )
