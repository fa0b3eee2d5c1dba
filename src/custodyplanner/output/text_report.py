"""Plain-text report output for custody schedules.

This module creates a text listing that shows:
- Day-by-day assignments with unavailable/adjusted markers
- The custody periods derived from those assignments
- Summary handoff counts
"""

from pathlib import Path
from typing import Optional, Union

from custodyplanner.domain.models import CustodySchedule, PartyNames
from custodyplanner.scheduling.periods import PeriodAnalyzer


class TextReportGenerator:
    """Generates human-readable text reports for schedule review."""

    def __init__(self, analyzer: Optional[PeriodAnalyzer] = None):
        self.analyzer = analyzer or PeriodAnalyzer()

    def generate(
        self,
        schedule: CustodySchedule,
        output_path: Union[str, Path],
        names: Optional[PartyNames] = None,
        day_range: int = 30,
    ) -> str:
        """Generate a text report and save to file.

        Args:
            schedule: The schedule to report on.
            output_path: Path to save the text file.
            names: Display names for the parties.
            day_range: Number of leading entries to include.

        Returns:
            The generated text content.
        """
        content = self.generate_to_string(schedule, names, day_range)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(
        self,
        schedule: CustodySchedule,
        names: Optional[PartyNames] = None,
        day_range: int = 30,
    ) -> str:
        """Generate a text report and return it as a string."""
        names = names or PartyNames()
        lines = []
        dates = schedule.sorted_dates()[:max(day_range, 0)]

        # Header
        lines.append("=" * 60)
        lines.append(f"CUSTODY SCHEDULE - from {schedule.start_date.isoformat()}")
        lines.append("=" * 60)
        lines.append(f"Initial party: {names.name_for(schedule.initial_party)}")
        lines.append(f"Last updated: {schedule.last_updated.strftime('%Y-%m-%d %H:%M')}")
        lines.append("")

        # Day-by-day
        lines.append("-" * 60)
        lines.append(f"{'Date':<12} {'Day':<4} {'Assigned':<20} Flags")
        lines.append("-" * 60)
        for day in dates:
            entry = schedule.entries[day]
            flags = []
            if entry.is_unavailable and entry.unavailable_by is not None:
                flags.append(f"unavailable: {names.name_for(entry.unavailable_by)}")
            if entry.is_adjusted:
                flags.append(f"adjusted from {names.name_for(entry.original_assigned_to)}")
            if entry.note:
                flags.append(entry.note)
            lines.append(
                f"{day.isoformat():<12} {day.strftime('%a'):<4} "
                f"{names.name_for(entry.assigned_to)[:20]:<20} {'; '.join(flags)}"
            )
        lines.append("")

        # Periods
        periods = self.analyzer.get_periods(schedule, day_range)
        lines.append("-" * 60)
        lines.append("CUSTODY PERIODS")
        lines.append("-" * 60)
        for period in periods:
            lines.append(
                f"{names.name_for(period.person_id)[:20]:<20} "
                f"{period.start_date.isoformat()} - {period.end_date.isoformat()} "
                f"({period.day_count} night{'s' if period.day_count != 1 else ''})"
            )
        lines.append("")
        lines.append(f"Periods: {len(periods)}")
        lines.append(f"Handoffs: {max(len(periods) - 1, 0)}")

        return "\n".join(lines) + "\n"
