"""Strategy chain for resolving unavailability conflicts.

The resolver runs strategies in fixed priority order and returns the
first acceptable diff as a ScheduleAdjustment, with its handoff count.
"""

import logging
from datetime import date
from typing import Mapping, Optional

from custodyplanner.domain.models import (
    CustodySchedule,
    Party,
    PartyNames,
    ScheduleAdjustment,
)
from custodyplanner.domain.policies import DefaultRotationPolicy, RotationPolicy
from custodyplanner.scheduling.strategies import (
    ResolutionStrategy,
    default_strategies,
)

logger = logging.getLogger(__name__)


def count_handoffs(proposed_changes: Mapping[date, Party]) -> int:
    """Count handoffs implied by a diff.

    This is the number of distinct dates touched, not the number of
    party transitions in the resulting schedule. Re-derive periods with
    PeriodAnalyzer for a true transition count.
    """
    return len(proposed_changes)


class ConflictResolver:
    """Runs the resolution strategy chain.

    The first strategy that accepts its diff wins and later strategies are
    not attempted. With the default chain the last strategy never
    rejects, so resolution always produces a valid adjustment.

    Example:
        >>> resolver = ConflictResolver()
        >>> adjustment = resolver.resolve(schedule, [date(2024, 1, 7)])
        >>> adjustment.strategy
        'early_handoff'
    """

    def __init__(
        self,
        policy: Optional[RotationPolicy] = None,
        strategies: Optional[list[ResolutionStrategy]] = None,
    ):
        self.policy = policy or DefaultRotationPolicy()
        self.strategies = (
            strategies if strategies is not None else default_strategies(self.policy)
        )

    def resolve(
        self,
        schedule: CustodySchedule,
        conflict_dates: list[date],
        names: Optional[PartyNames] = None,
    ) -> ScheduleAdjustment:
        """Resolve conflicts with the first strategy that succeeds.

        Args:
            schedule: Schedule with unavailability already marked (not modified).
            conflict_dates: Dates flagged by the conflict detector.
            names: Display names for warnings and violations.

        Returns:
            ScheduleAdjustment describing the winning diff, or a rejected
            adjustment if a custom chain has no strategy that succeeds.
        """
        if not conflict_dates:
            return ScheduleAdjustment.no_conflicts()

        original = {day: schedule.entries[day].assigned_to for day in conflict_dates}
        last_reason = "No resolution strategy configured"

        for strategy in self.strategies:
            outcome = strategy.attempt(schedule, conflict_dates, names)
            if not outcome.ok:
                logger.debug("Strategy %s rejected: %s", strategy.name, outcome.reason)
                last_reason = outcome.reason or last_reason
                continue

            if outcome.warnings:
                logger.warning(
                    "Strategy %s accepted with %d warning(s): %s",
                    strategy.name, len(outcome.warnings), outcome.reason,
                )
            else:
                logger.debug("Strategy %s accepted", strategy.name)

            return ScheduleAdjustment(
                conflict_dates=list(conflict_dates),
                original_assignments=original,
                proposed_assignments=dict(outcome.proposed),
                handoff_count=count_handoffs(outcome.proposed),
                is_valid=True,
                reason=outcome.reason,
                warnings=list(outcome.warnings),
                strategy=strategy.name,
            )

        return ScheduleAdjustment.rejected(conflict_dates, last_reason)
