"""Shared fixtures for custody planner tests.

Schedules are written as patterns such as "AAABBB", one letter per
night starting on 2024-01-01, so day n of a test calendar is
date(2024, 1, n).
"""

from datetime import date, datetime, timedelta

import pytest

from custodyplanner.domain.models import CustodySchedule, Party, ScheduleEntry

LETTERS = {"A": Party.PERSON_A, "B": Party.PERSON_B}


def schedule_from_pattern(pattern: str, start: date = date(2024, 1, 1)) -> CustodySchedule:
    entries = {}
    for offset, letter in enumerate(pattern):
        day = start + timedelta(days=offset)
        entries[day] = ScheduleEntry(date=day, assigned_to=LETTERS[letter])
    return CustodySchedule(
        entries=entries,
        start_date=start,
        initial_party=LETTERS[pattern[0]] if pattern else Party.PERSON_A,
        last_updated=datetime(2024, 1, 1, 12, 0),
    )


def pattern_from_schedule(schedule: CustodySchedule) -> str:
    return "".join(
        "A" if entry.assigned_to is Party.PERSON_A else "B" for entry in schedule
    )


@pytest.fixture
def make_schedule():
    """Factory building a schedule from an "AAABBB" pattern."""
    return schedule_from_pattern


@pytest.fixture
def pattern_of():
    """Render a schedule back into its pattern."""
    return pattern_from_schedule
