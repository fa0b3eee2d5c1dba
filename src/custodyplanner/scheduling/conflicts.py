"""Conflict detection for unavailability requests."""

from datetime import date, timedelta

from custodyplanner.domain.models import CustodySchedule, UnavailabilityRequest


class ConflictDetector:
    """Finds dates where an unavailable party would keep overnight custody.

    Unavailability is flexible: it blocks overnight responsibility but not
    a handoff during the day. A requested date is a conflict when the
    requesting party is assigned to it. That covers both the last night
    of a run (next date belongs to the other party or is outside the
    schedule) and a night inside a longer run, which the resolution
    strategies may shorten.
    """

    def find_conflicts(
        self,
        schedule: CustodySchedule,
        request: UnavailabilityRequest,
    ) -> list[date]:
        """Find conflict dates for a request.

        Dates absent from the schedule are skipped.

        Args:
            schedule: Current schedule.
            request: The unavailability request.

        Returns:
            Conflict dates in request order (not necessarily chronological).
        """
        conflicts = []

        for day in request.dates:
            entry = schedule.get(day)
            if entry is None:
                continue
            if entry.assigned_to is request.person_id:
                conflicts.append(day)

        return conflicts

    def ends_run(self, schedule: CustodySchedule, day: date) -> bool:
        """Check if the run holding `day` ends on that night."""
        entry = schedule.get(day)
        if entry is None:
            return False
        next_entry = schedule.get(day + timedelta(days=1))
        return next_entry is None or next_entry.assigned_to is not entry.assigned_to
