"""Resolution strategies for unavailability conflicts.

Each strategy computes a complete candidate diff for all conflict dates
and reports whether it is acceptable. Strategies never mix partial diffs
with each other and never modify the schedule they are given.

Strategies, in chain order:
1. Early handoff: the unavailable party hands off during the day itself
2. Extension: the other party's adjoining period runs through the conflict
3. Period shift: flip everything, then batch-validate the whole diff
4. Forced assignment: flip everything, report violations as warnings
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from custodyplanner.domain.models import CustodySchedule, Party, PartyNames
from custodyplanner.domain.policies import DefaultRotationPolicy, RotationPolicy
from custodyplanner.validation.validator import ConsecutiveDayValidator


@dataclass
class StrategyOutcome:
    """Result of one strategy attempt.

    Attributes:
        proposed: Candidate diff (empty when rejected).
        ok: Whether the strategy accepts its diff.
        warnings: Advisory rule violations (terminal strategy only).
        reason: Explanation for a rejection, or the concatenated warnings.
    """

    proposed: dict[date, Party] = field(default_factory=dict)
    ok: bool = True
    warnings: list[str] = field(default_factory=list)
    reason: Optional[str] = None

    @classmethod
    def reject(cls, reason: str) -> "StrategyOutcome":
        return cls(ok=False, reason=reason)


class ResolutionStrategy(ABC):
    """Abstract base class for conflict resolution strategies."""

    name: str = "strategy"

    def __init__(self, policy: Optional[RotationPolicy] = None):
        self.policy = policy or DefaultRotationPolicy()
        self.validator = ConsecutiveDayValidator(self.policy)

    @abstractmethod
    def attempt(
        self,
        schedule: CustodySchedule,
        conflict_dates: list[date],
        names: Optional[PartyNames] = None,
    ) -> StrategyOutcome:
        """Compute a diff resolving every conflict date.

        Args:
            schedule: Schedule with unavailability already marked.
            conflict_dates: Dates flagged by the conflict detector.
            names: Display names for messages.

        Returns:
            StrategyOutcome with the candidate diff and acceptance flag.
        """
        pass

    def _flip_incrementally(
        self,
        schedule: CustodySchedule,
        dates: list[date],
        rule_name: str,
    ) -> StrategyOutcome:
        """Flip dates one at a time, rejecting on the first cap violation.

        Each date is validated against the diff accumulated so far, so the
        processing order affects what later dates see.
        """
        proposed: dict[date, Party] = {}
        max_days = self.policy.max_consecutive_days()

        for day in dates:
            other = schedule.entries[day].assigned_to.other
            candidate = {**proposed, day: other}

            if self.validator.exceeds_max(schedule, candidate, day, other):
                return StrategyOutcome.reject(
                    f"{rule_name} would violate {max_days}-day maximum rule"
                )

            proposed[day] = other

        return StrategyOutcome(proposed=proposed)


class EarlyHandoffStrategy(ResolutionStrategy):
    """Hand custody to the other party on the conflict date itself.

    Dates are processed in the order given. Only the newly assigned
    party's run is checked; shortening the vacating party's run is
    always allowed.
    """

    name = "early_handoff"

    def attempt(self, schedule, conflict_dates, names=None):
        return self._flip_incrementally(schedule, list(conflict_dates), "Early handoff")


class ExtensionStrategy(ResolutionStrategy):
    """Extend the other party's adjoining period through the conflict.

    Same rule as early handoff, but dates are processed chronologically.
    """

    name = "extension"

    def attempt(self, schedule, conflict_dates, names=None):
        return self._flip_incrementally(schedule, sorted(conflict_dates), "Extension")


class PeriodShiftStrategy(ResolutionStrategy):
    """Flip every conflict date, then validate the complete diff in one batch."""

    name = "period_shift"

    def attempt(self, schedule, conflict_dates, names=None):
        proposed = {
            day: schedule.entries[day].assigned_to.other for day in conflict_dates
        }

        validation = self.validator.validate_segment(
            schedule, proposed, list(conflict_dates), names
        )
        if not validation.is_valid:
            return StrategyOutcome.reject("; ".join(validation.violations))

        return StrategyOutcome(proposed=proposed)


class ForcedAssignmentStrategy(ResolutionStrategy):
    """Terminal fallback: always reassign, turning violations into warnings.

    This strategy never rejects. Any date where the other party now
    exceeds the cap yields a warning naming the party and the date.
    """

    name = "forced_assignment"

    def attempt(self, schedule, conflict_dates, names=None):
        names = names or PartyNames()
        max_days = self.policy.max_consecutive_days()
        proposed: dict[date, Party] = {}
        warnings: list[str] = []

        for day in conflict_dates:
            other = schedule.entries[day].assigned_to.other
            proposed[day] = other

            if self.validator.exceeds_max(schedule, proposed, day, other):
                warnings.append(
                    f"{names.name_for(other)} will exceed {max_days} "
                    f"consecutive days including {day.isoformat()}"
                )

        reason = f"Warning: {'; '.join(warnings)}" if warnings else None
        return StrategyOutcome(proposed=proposed, warnings=warnings, reason=reason)


def default_strategies(policy: Optional[RotationPolicy] = None) -> list[ResolutionStrategy]:
    """Build the standard strategy chain in priority order."""
    return [
        EarlyHandoffStrategy(policy),
        ExtensionStrategy(policy),
        PeriodShiftStrategy(policy),
        ForcedAssignmentStrategy(policy),
    ]
