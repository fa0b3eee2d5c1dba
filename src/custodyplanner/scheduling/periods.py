"""Custody period analysis and schedule statistics.

Reduces a date-indexed schedule to contiguous custody periods. The
analyzer holds no state between calls and can be run repeatedly against
an evolving schedule.
"""

from collections import defaultdict
from datetime import date
from typing import Optional

from custodyplanner.domain.models import (
    CustodyPeriod,
    CustodySchedule,
    Party,
    ScheduleStats,
)


class PeriodAnalyzer:
    """Derives custody periods and summary statistics from a schedule."""

    def get_periods(
        self,
        schedule: CustodySchedule,
        day_range: int = 30,
    ) -> list[CustodyPeriod]:
        """Split the first `day_range` entries into custody periods.

        The range counts entries, not calendar days: the first
        `day_range` dates present in the schedule, in ascending order.

        Args:
            schedule: Schedule to analyse.
            day_range: Number of leading entries to include.

        Returns:
            Periods in chronological order; a single period when the
            party never changes; empty for an empty range.
        """
        dates = schedule.sorted_dates()[:max(day_range, 0)]
        if not dates:
            return []

        periods = []
        run_party = schedule.entries[dates[0]].assigned_to
        run_start = dates[0]
        run_length = 1

        for previous, day in zip(dates, dates[1:]):
            party = schedule.entries[day].assigned_to
            if party is run_party:
                run_length += 1
                continue

            periods.append(CustodyPeriod(run_party, run_start, previous, run_length))
            run_party = party
            run_start = day
            run_length = 1

        periods.append(CustodyPeriod(run_party, run_start, dates[-1], run_length))
        return periods

    def count_transitions(
        self,
        schedule: CustodySchedule,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> int:
        """Count real handoffs: adjacent dates assigned to different parties.

        Args:
            schedule: Schedule to analyse.
            start: First date considered (inclusive); defaults to the first entry.
            end: Last date considered (inclusive); defaults to the last entry.
        """
        dates = [
            day for day in schedule.sorted_dates()
            if (start is None or day >= start) and (end is None or day <= end)
        ]
        return sum(
            1
            for previous, day in zip(dates, dates[1:])
            if schedule.entries[previous].assigned_to
            is not schedule.entries[day].assigned_to
        )

    def get_stats(
        self,
        schedule: CustodySchedule,
        day_range: int = 30,
        as_of: Optional[date] = None,
    ) -> ScheduleStats:
        """Calculate schedule statistics.

        Args:
            schedule: Schedule to analyse.
            day_range: Leading entries used for period statistics.
            as_of: End of the year-to-date split window; defaults to today.

        Returns:
            ScheduleStats for the schedule.
        """
        periods = self.get_periods(schedule, day_range)
        stats = ScheduleStats(periods=periods)

        if periods:
            stats.total_handoffs = len(periods) - 1
            stats.average_period_length = (
                sum(p.day_count for p in periods) / len(periods)
            )

        blocks: dict[Party, list[int]] = defaultdict(list)
        for period in periods:
            blocks[period.person_id].append(period.day_count)
        for party in Party:
            if blocks[party]:
                stats.average_block_length[party] = round(
                    sum(blocks[party]) / len(blocks[party]), 1
                )

        stats.split_percent = self._year_to_date_split(schedule, as_of or date.today())
        stats.monthly_handoffs = self._monthly_handoffs(schedule)
        return stats

    def _year_to_date_split(
        self,
        schedule: CustodySchedule,
        as_of: date,
    ) -> dict[Party, int]:
        """Percentage of nights per party from January 1 through as_of."""
        year_start = date(as_of.year, 1, 1)
        counts = {party: 0 for party in Party}
        for day, entry in schedule.entries.items():
            if year_start <= day <= as_of:
                counts[entry.assigned_to] += 1

        total = sum(counts.values())
        if total == 0:
            return {party: 0 for party in Party}
        return {party: round(count / total * 100) for party, count in counts.items()}

    def _monthly_handoffs(self, schedule: CustodySchedule) -> dict[str, int]:
        """Handoffs within each month covered by the schedule, keyed YYYY-MM."""
        handoffs: dict[str, int] = {}
        previous: Optional[date] = None

        for day in schedule.sorted_dates():
            key = day.strftime("%Y-%m")
            handoffs.setdefault(key, 0)
            if previous is not None and previous.strftime("%Y-%m") == key:
                if schedule.entries[previous].assigned_to is not schedule.entries[day].assigned_to:
                    handoffs[key] += 1
            previous = day

        return handoffs
