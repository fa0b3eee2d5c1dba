"""Baseline calendar generation.

Produces the periodic rotation used when a schedule is first set up,
and extends an existing schedule forward without disturbing it.
"""

import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Optional

from custodyplanner.domain.models import (
    CustodySchedule,
    Party,
    ScheduleEntry,
    ScheduleError,
)
from custodyplanner.domain.policies import DefaultRotationPolicy, RotationPolicy

logger = logging.getLogger(__name__)


class CalendarGenerator:
    """Generates rotation calendars.

    Starting with the initial party, each party holds custody for
    `rotation_days` consecutive nights before the other party takes over.
    Because the rotation length never exceeds the cap, generated
    calendars are rule-compliant by construction.

    Example:
        >>> generator = CalendarGenerator()
        >>> schedule = generator.generate(date(2024, 1, 1), Party.PERSON_A, 90)
    """

    def __init__(self, policy: Optional[RotationPolicy] = None):
        self.policy = policy or DefaultRotationPolicy()

    def generate(
        self,
        start_date: date,
        initial_party: Party,
        number_of_days: int = 90,
    ) -> CustodySchedule:
        """Generate a new schedule.

        Args:
            start_date: First date of the schedule.
            initial_party: Party holding custody on start_date.
            number_of_days: Number of dates to generate (>= 0).

        Returns:
            CustodySchedule covering [start_date, start_date + number_of_days).
        """
        entries = self._rotation_entries(
            start_date, initial_party, self.policy.rotation_days(), number_of_days
        )
        logger.debug(
            "Generated %d days from %s starting with %s",
            number_of_days, start_date, initial_party.value,
        )
        return CustodySchedule(
            entries=entries,
            start_date=start_date,
            initial_party=initial_party,
            last_updated=datetime.now(),
        )

    def generate_months(
        self,
        start_date: date,
        initial_party: Party,
        month_count: int = 12,
    ) -> CustodySchedule:
        """Generate through the last day of the month_count-th month.

        The month containing start_date counts as the first month.
        """
        end = _last_day_of_month_offset(start_date, month_count - 1)
        return self.generate(start_date, initial_party, (end - start_date).days + 1)

    def extend(self, schedule: CustodySchedule, through: date) -> CustodySchedule:
        """Append rotation entries after the schedule's last date.

        The rotation continues from the trailing run of the last party,
        so a block that was cut off at the end of the schedule is
        completed before the other party takes over. Existing entries are
        never modified.

        Args:
            schedule: Schedule to extend (not modified).
            through: Last date that must be covered.

        Returns:
            A new CustodySchedule; the same object if no extension is needed.
        """
        last = schedule.end_date
        if last is None:
            raise ScheduleError("Cannot extend an empty schedule")
        if through <= last:
            return schedule

        party, remaining = self._rotation_state(schedule)
        rotation = self.policy.rotation_days()
        if remaining == 0:
            party = party.other
            remaining = rotation

        entries = dict(schedule.entries)
        current = last + timedelta(days=1)
        while current <= through:
            entries[current] = ScheduleEntry(date=current, assigned_to=party)
            remaining -= 1
            if remaining == 0:
                party = party.other
                remaining = rotation
            current += timedelta(days=1)

        logger.info("Extended schedule from %s through %s", last, through)
        return CustodySchedule(
            entries=entries,
            start_date=schedule.start_date,
            initial_party=schedule.initial_party,
            last_updated=datetime.now(),
        )

    def needs_extension(
        self,
        schedule: CustodySchedule,
        start: date,
        end: date,
    ) -> bool:
        """Check if any date in [start, end] is missing from the schedule."""
        current = start
        while current <= end:
            if current not in schedule:
                return True
            current += timedelta(days=1)
        return False

    def covers_month(self, schedule: CustodySchedule, year: int, month: int) -> bool:
        """Check if every day of a month is present."""
        last_day = calendar.monthrange(year, month)[1]
        return not self.needs_extension(
            schedule, date(year, month, 1), date(year, month, last_day)
        )

    def _rotation_state(self, schedule: CustodySchedule) -> tuple[Party, int]:
        """Get the last party and the nights left in its rotation block.

        The trailing run is counted backwards from the last date and stops
        at a party change or at a date marked unavailable.
        """
        dates = schedule.sorted_dates()
        last_party = schedule.entries[dates[-1]].assigned_to
        run = 1
        for day in reversed(dates[:-1]):
            entry = schedule.entries[day]
            if entry.assigned_to is not last_party or entry.unavailable_by is not None:
                break
            run += 1

        return last_party, max(self.policy.rotation_days() - run, 0)

    @staticmethod
    def _rotation_entries(
        start_date: date,
        initial_party: Party,
        rotation_days: int,
        number_of_days: int,
    ) -> dict[date, ScheduleEntry]:
        entries: dict[date, ScheduleEntry] = {}
        current_party = initial_party
        consecutive = 0

        for offset in range(number_of_days):
            day = start_date + timedelta(days=offset)
            entries[day] = ScheduleEntry(date=day, assigned_to=current_party)

            consecutive += 1
            if consecutive >= rotation_days:
                current_party = current_party.other
                consecutive = 0

        return entries


def _last_day_of_month_offset(start: date, months_ahead: int) -> date:
    """Last day of the month `months_ahead` months after start's month."""
    month_index = start.month - 1 + months_ahead
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, calendar.monthrange(year, month)[1])
