"""Validation of the consecutive-night rule.

This module is the single source of truth for the max-consecutive-days
constraint. Every resolution strategy evaluates its candidate diff here,
and whole schedules can be audited with the same rule.
"""

from datetime import date, timedelta
from typing import Mapping, Optional

from custodyplanner.domain.models import (
    CustodySchedule,
    Party,
    PartyNames,
    ValidationResult,
)
from custodyplanner.domain.policies import DefaultRotationPolicy, RotationPolicy

ONE_DAY = timedelta(days=1)


class EffectiveAssignments:
    """Read-only view of a schedule overlaid with a candidate diff.

    The base schedule is never copied or modified; lookups consult the
    diff first and fall back to the schedule entry.
    """

    def __init__(
        self,
        schedule: CustodySchedule,
        changes: Optional[Mapping[date, Party]] = None,
    ):
        self.schedule = schedule
        self.changes = changes or {}

    def assigned_to(self, day: date) -> Optional[Party]:
        entry = self.schedule.get(day)
        if entry is None:
            # Changes only apply to dates the schedule covers
            return None
        return self.changes.get(day, entry.assigned_to)

    def run_length(self, check_date: date, party: Party) -> int:
        """Length of the run of `party` through check_date.

        check_date itself always counts; neighbours are counted while the
        effective assignee equals `party`.
        """
        length = 1

        current = check_date - ONE_DAY
        while self.assigned_to(current) is party:
            length += 1
            current -= ONE_DAY

        current = check_date + ONE_DAY
        while self.assigned_to(current) is party:
            length += 1
            current += ONE_DAY

        return length


class ConsecutiveDayValidator:
    """Checks assignments against the max-consecutive-days rule.

    The validator is stateless: identical inputs always give identical
    answers.

    Example:
        >>> validator = ConsecutiveDayValidator()
        >>> validator.exceeds_max(schedule, {day: Party.PERSON_B}, day, Party.PERSON_B)
        False
    """

    def __init__(self, policy: Optional[RotationPolicy] = None):
        self.policy = policy or DefaultRotationPolicy()

    def run_length(
        self,
        schedule: CustodySchedule,
        proposed_changes: Mapping[date, Party],
        check_date: date,
        party: Party,
    ) -> int:
        """Run length of `party` through check_date under the proposed changes."""
        view = EffectiveAssignments(schedule, proposed_changes)
        return view.run_length(check_date, party)

    def exceeds_max(
        self,
        schedule: CustodySchedule,
        proposed_changes: Mapping[date, Party],
        check_date: date,
        party: Party,
    ) -> bool:
        """Check if assigning check_date to `party` breaks the cap.

        Args:
            schedule: Current schedule (not modified).
            proposed_changes: Candidate diff overriding schedule entries.
            check_date: Date whose run is measured.
            party: Party whose run is measured.

        Returns:
            True if the run through check_date is longer than the maximum.
        """
        length = self.run_length(schedule, proposed_changes, check_date, party)
        return not self.policy.is_valid_run_length(length)

    def validate_segment(
        self,
        schedule: CustodySchedule,
        proposed_changes: Mapping[date, Party],
        dates_to_check: list[date],
        names: Optional[PartyNames] = None,
    ) -> ValidationResult:
        """Batch-validate a set of dates after applying a whole diff.

        Args:
            schedule: Current schedule (not modified).
            proposed_changes: Complete candidate diff.
            dates_to_check: Dates to examine.
            names: Display names for violation messages.

        Returns:
            ValidationResult with one violation per offending date.
        """
        names = names or PartyNames()
        result = ValidationResult()
        view = EffectiveAssignments(schedule, proposed_changes)
        max_days = self.policy.max_consecutive_days()

        for day in dates_to_check:
            party = view.assigned_to(day)
            if party is None:
                continue

            length = view.run_length(day, party)
            result.record_run(party, length)

            if not self.policy.is_valid_run_length(length):
                result.add_violation(
                    f"{names.name_for(party)} would exceed {max_days} "
                    f"consecutive days including {day.isoformat()}"
                )

        return result

    def validate_schedule(
        self,
        schedule: CustodySchedule,
        names: Optional[PartyNames] = None,
    ) -> ValidationResult:
        """Audit a whole schedule for runs longer than the maximum.

        A gap between dates ends a run.

        Returns:
            ValidationResult with one violation per offending run and the
            longest run per party.
        """
        names = names or PartyNames()
        result = ValidationResult()
        max_days = self.policy.max_consecutive_days()

        run_party: Optional[Party] = None
        run_length = 0
        previous: Optional[date] = None

        def close_run(end: date) -> None:
            result.record_run(run_party, run_length)
            if not self.policy.is_valid_run_length(run_length):
                result.add_violation(
                    f"{names.name_for(run_party)} has {run_length} "
                    f"consecutive days ending {end.isoformat()} "
                    f"(max {max_days})"
                )

        for day in schedule.sorted_dates():
            party = schedule.entries[day].assigned_to
            contiguous = previous is not None and day - previous == ONE_DAY
            if contiguous and party is run_party:
                run_length += 1
            else:
                if run_party is not None:
                    close_run(previous)
                run_party = party
                run_length = 1
            previous = day

        if run_party is not None:
            close_run(previous)

        return result
