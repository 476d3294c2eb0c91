"""Rollout timeline for a magnet pilot."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Sequence

from .errors import InvalidInputError

DATE_LABEL_FORMAT = "%b %d, %Y"


@dataclass(frozen=True)
class RolloutStep:
    """A milestone expressed as days after kickoff."""
    name: str
    offset_days: int


@dataclass(frozen=True)
class RolloutMilestone:
    """A milestone pinned to a calendar date."""
    name: str
    offset_days: int
    date: date

    @property
    def label(self) -> str:
        return self.date.strftime(DATE_LABEL_FORMAT)


DEFAULT_ROLLOUT_STEPS = (
    RolloutStep("Kickoff", 0),
    RolloutStep("Design", 4),
    RolloutStep("Sampling", 9),
    RolloutStep("Production", 18),
    RolloutStep("Shipping", 32),
    RolloutStep("Rollout", 40),
    RolloutStep("First review", 60),
)


def build_rollout_timeline(
    start: date, steps: Sequence[RolloutStep] = DEFAULT_ROLLOUT_STEPS
) -> List[RolloutMilestone]:
    """
    Date each rollout step from a kickoff date.

    Args:
        start: Kickoff date
        steps: Milestones in order, offsets must not decrease

    Returns:
        List of dated milestones
    """
    milestones = []
    previous = 0
    for step in steps:
        if step.offset_days < previous:
            raise InvalidInputError(
                f"Rollout step '{step.name}' at day {step.offset_days} comes before day {previous}"
            )
        previous = step.offset_days
        milestones.append(
            RolloutMilestone(
                name=step.name,
                offset_days=step.offset_days,
                date=start + timedelta(days=step.offset_days),
            )
        )
    return milestones
