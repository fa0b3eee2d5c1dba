"""Main scheduler interface.

This module provides the high-level CustodyScheduler class that
orchestrates calendar generation, conflict detection, strategy-based
resolution and merging of the winning diff into the schedule.
"""

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Mapping, Optional

from custodyplanner.domain.models import (
    CustodySchedule,
    Party,
    PartyNames,
    ScheduleAdjustment,
    ScheduleEntry,
    ScheduleError,
    UnavailabilityRequest,
)
from custodyplanner.domain.policies import DefaultRotationPolicy, RotationPolicy
from custodyplanner.scheduling.conflicts import ConflictDetector
from custodyplanner.scheduling.cpsat_rebalancer import RebalanceResult
from custodyplanner.scheduling.generator import CalendarGenerator
from custodyplanner.scheduling.resolver import ConflictResolver

logger = logging.getLogger(__name__)


class CustodyScheduler:
    """High-level scheduler for custody calendars.

    Schedules are treated as snapshots: every operation returns a new
    CustodySchedule and leaves the one it was given untouched, so a caller
    can discard a result without side effects. Serialising concurrent
    requests against the same stored schedule is the caller's job.

    Example:
        >>> scheduler = CustodyScheduler()
        >>> schedule = scheduler.create_schedule(date(2024, 1, 1), Party.PERSON_A)
        >>> request = UnavailabilityRequest(Party.PERSON_A, [date(2024, 1, 3)])
        >>> schedule, adjustment = scheduler.apply_unavailability(schedule, request)
    """

    def __init__(
        self,
        policy: Optional[RotationPolicy] = None,
        names: Optional[PartyNames] = None,
        resolver: Optional[ConflictResolver] = None,
    ):
        """Initialize scheduler with a rotation policy.

        Args:
            policy: Rotation length and consecutive-night cap.
            names: Default display names for warning messages.
            resolver: Strategy chain; defaults to the standard chain.
        """
        self.policy = policy or DefaultRotationPolicy()
        self.names = names or PartyNames()
        self.generator = CalendarGenerator(self.policy)
        self.detector = ConflictDetector()
        self.resolver = resolver or ConflictResolver(self.policy)

    def create_schedule(
        self,
        start_date: date,
        initial_party: Party,
        number_of_days: int = 90,
    ) -> CustodySchedule:
        """Generate the baseline rotation calendar."""
        return self.generator.generate(start_date, initial_party, number_of_days)

    def apply_unavailability(
        self,
        schedule: CustodySchedule,
        request: UnavailabilityRequest,
        names: Optional[PartyNames] = None,
    ) -> tuple[CustodySchedule, ScheduleAdjustment]:
        """Mark dates unavailable and resolve the resulting conflicts.

        Steps:
        1. Mark each requested date present in the schedule as unavailable
        2. Detect conflicts against the marked entries
        3. Return an empty adjustment if there are none
        4. Otherwise run the strategy chain
        5. Merge a valid proposal, keeping the first recorded original
           assignment of each touched date
        6. Stamp last_updated

        Args:
            schedule: Current schedule (not modified).
            request: The unavailability request.
            names: Display names; defaults to the scheduler's names.

        Returns:
            Tuple of (updated schedule, adjustment).
        """
        names = names or self.names
        entries = dict(schedule.entries)

        for day in request.dates:
            entry = entries.get(day)
            if entry is not None:
                entries[day] = replace(
                    entry, is_unavailable=True, unavailable_by=request.person_id
                )

        marked = replace(schedule, entries=entries)
        conflicts = self.detector.find_conflicts(marked, request)

        if not conflicts:
            logger.info(
                "%s unavailable on %d date(s); no conflicts",
                request.person_id.value, len(request.dates),
            )
            return marked, ScheduleAdjustment.no_conflicts()

        adjustment = self.resolver.resolve(marked, conflicts, names)

        if adjustment.is_valid:
            for day, party in adjustment.proposed_assignments.items():
                entries[day] = self._adjusted_entry(entries[day], party)
            logger.info(
                "Applied %s for %d conflict(s), %d handoff(s)",
                adjustment.strategy, len(conflicts), adjustment.handoff_count,
            )
        else:
            logger.warning("Conflicts left unresolved: %s", adjustment.reason)

        return replace(marked, last_updated=datetime.now()), adjustment

    def remove_unavailability(
        self,
        schedule: CustodySchedule,
        day: date,
    ) -> CustodySchedule:
        """Clear unavailability on a date and restore its original assignment.

        Raises:
            ScheduleError: If the date is absent or not marked unavailable.
        """
        entry = schedule.get(day)
        if entry is None:
            raise ScheduleError(f"Date {day.isoformat()} not found in schedule")
        if not entry.is_unavailable:
            raise ScheduleError(f"Date {day.isoformat()} is not marked as unavailable")

        entries = dict(schedule.entries)
        entries[day] = replace(
            entry,
            assigned_to=entry.original_assigned_to or entry.assigned_to,
            is_unavailable=False,
            unavailable_by=None,
            is_adjusted=False,
            original_assigned_to=None,
        )
        logger.info("Removed unavailability on %s", day)
        return replace(schedule, entries=entries, last_updated=datetime.now())

    def check_request(
        self,
        schedule: CustodySchedule,
        request: UnavailabilityRequest,
        today: Optional[date] = None,
    ) -> list[str]:
        """List structural problems with a request.

        The core skips absent dates silently; callers that want to refuse
        such requests (or requests for past dates) can check first.

        Args:
            schedule: Current schedule.
            request: The request to check.
            today: If given, dates on or before it are reported.

        Returns:
            Human-readable problems; empty if the request is clean.
        """
        problems = []
        for day in request.dates:
            if day not in schedule:
                problems.append(f"Date {day.isoformat()} not found in schedule")
            elif today is not None and day <= today:
                problems.append(f"Cannot modify past date {day.isoformat()}")
        return problems

    def flip_all(self, schedule: CustodySchedule) -> CustodySchedule:
        """Swap the parties on every entry and on the schedule itself."""
        entries = {
            day: replace(
                entry,
                assigned_to=entry.assigned_to.other,
                original_assigned_to=(
                    entry.original_assigned_to.other
                    if entry.original_assigned_to is not None
                    else None
                ),
            )
            for day, entry in schedule.entries.items()
        }
        return replace(
            schedule,
            entries=entries,
            initial_party=schedule.initial_party.other,
            last_updated=datetime.now(),
        )

    def apply_rebalance(
        self,
        schedule: CustodySchedule,
        result: RebalanceResult,
        unavailable: Mapping[date, Party],
    ) -> CustodySchedule:
        """Merge a CP-SAT rebalance into the schedule.

        Unavailable dates are marked the same way apply_unavailability
        marks them, and changed nights are recorded as adjustments. A night
        moved back to its original assignee is no longer marked adjusted.

        Raises:
            ScheduleError: If the rebalance found no feasible solution.
        """
        if not result.is_feasible:
            raise ScheduleError(f"Cannot apply rebalance with status {result.status}")

        entries = dict(schedule.entries)
        for day, party in unavailable.items():
            entry = entries.get(day)
            if entry is not None:
                entries[day] = replace(entry, is_unavailable=True, unavailable_by=party)

        for day, party in result.proposed_assignments.items():
            entry = entries[day]
            if entry.is_adjusted and party is entry.original_assigned_to:
                # Back to the original assignee
                entries[day] = replace(
                    entry, assigned_to=party, is_adjusted=False, original_assigned_to=None
                )
            else:
                entries[day] = self._adjusted_entry(entry, party)

        logger.info("Applied rebalance with %d change(s)", result.changes_count)
        return replace(schedule, entries=entries, last_updated=datetime.now())

    def extend(self, schedule: CustodySchedule, through: date) -> CustodySchedule:
        """Extend the rotation so the schedule covers `through`."""
        return self.generator.extend(schedule, through)

    @staticmethod
    def _adjusted_entry(entry: ScheduleEntry, party: Party) -> ScheduleEntry:
        """Reassign an entry, keeping the first pre-adjustment assignee."""
        original = entry.original_assigned_to if entry.is_adjusted else None
        return replace(
            entry,
            assigned_to=party,
            is_adjusted=True,
            original_assigned_to=original or entry.assigned_to,
        )
