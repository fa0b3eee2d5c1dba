"""Tests for the consecutive-day validator."""

from datetime import date

import pytest

from custodyplanner.domain.models import Party, PartyNames
from custodyplanner.domain.policies import DefaultRotationPolicy
from custodyplanner.validation.validator import (
    ConsecutiveDayValidator,
    EffectiveAssignments,
)

A = Party.PERSON_A
B = Party.PERSON_B


class TestEffectiveAssignments:
    """Tests for the schedule + diff view."""

    def test_changes_override_schedule(self, make_schedule):
        schedule = make_schedule("AAB")
        view = EffectiveAssignments(schedule, {date(2024, 1, 2): B})
        assert view.assigned_to(date(2024, 1, 1)) is A
        assert view.assigned_to(date(2024, 1, 2)) is B

    def test_changes_outside_schedule_ignored(self, make_schedule):
        """A diff cannot invent dates the schedule does not cover."""
        schedule = make_schedule("AAB")
        view = EffectiveAssignments(schedule, {date(2024, 1, 4): B})
        assert view.assigned_to(date(2024, 1, 4)) is None
        assert view.run_length(date(2024, 1, 3), B) == 1

    def test_run_length_counts_both_directions(self, make_schedule):
        schedule = make_schedule("BAAAB")
        view = EffectiveAssignments(schedule)
        assert view.run_length(date(2024, 1, 3), A) == 3

    def test_check_date_always_counts(self, make_schedule):
        """The checked date counts even if the schedule assigns it elsewhere."""
        schedule = make_schedule("BBABB")
        view = EffectiveAssignments(schedule)
        assert view.run_length(date(2024, 1, 3), B) == 5

    def test_base_schedule_not_modified(self, make_schedule, pattern_of):
        schedule = make_schedule("AAAB")
        EffectiveAssignments(schedule, {date(2024, 1, 1): B}).run_length(date(2024, 1, 1), B)
        assert pattern_of(schedule) == "AAAB"


class TestExceedsMax:
    """Tests for ConsecutiveDayValidator.exceeds_max."""

    @pytest.fixture
    def validator(self):
        return ConsecutiveDayValidator()

    def test_run_at_cap_allowed(self, validator, make_schedule):
        """Flipping the last A night onto a 3-night B block gives exactly 4."""
        schedule = make_schedule("AAABBB")
        assert validator.exceeds_max(schedule, {date(2024, 1, 3): B}, date(2024, 1, 3), B) is False

    def test_run_over_cap_rejected(self, validator, make_schedule):
        """Joining two B blocks gives a 7-night run."""
        schedule = make_schedule("BBBABBB")
        assert validator.exceeds_max(schedule, {date(2024, 1, 4): B}, date(2024, 1, 4), B) is True

    def test_without_changes(self, validator, make_schedule):
        schedule = make_schedule("AAAAA")
        assert validator.exceeds_max(schedule, {}, date(2024, 1, 3), A) is True

    def test_schedule_edges_end_runs(self, validator, make_schedule):
        schedule = make_schedule("ABBB")
        assert validator.exceeds_max(schedule, {date(2024, 1, 1): B}, date(2024, 1, 1), B) is False

    def test_custom_cap(self, make_schedule):
        validator = ConsecutiveDayValidator(DefaultRotationPolicy(max_days=2, rotation_length=2))
        schedule = make_schedule("AABB")
        assert validator.exceeds_max(schedule, {date(2024, 1, 2): B}, date(2024, 1, 2), B) is True

    def test_deterministic(self, validator, make_schedule):
        schedule = make_schedule("BBBABBB")
        changes = {date(2024, 1, 4): B}
        results = {validator.exceeds_max(schedule, changes, date(2024, 1, 4), B) for _ in range(5)}
        assert results == {True}


class TestValidateSegment:
    """Tests for ConsecutiveDayValidator.validate_segment."""

    def test_valid_segment(self, make_schedule):
        schedule = make_schedule("ABBBAAABBB")
        result = ConsecutiveDayValidator().validate_segment(
            schedule, {date(2024, 1, 7): B}, [date(2024, 1, 7)]
        )
        assert result.is_valid
        assert result.violations == []
        assert result.max_consecutive_days[B] == 4

    def test_violation_message(self, make_schedule):
        schedule = make_schedule("BBBABBB")
        result = ConsecutiveDayValidator().validate_segment(
            schedule, {date(2024, 1, 4): B}, [date(2024, 1, 4)], PartyNames("Alex", "Sam")
        )
        assert not result.is_valid
        assert result.violations == [
            "Sam would exceed 4 consecutive days including 2024-01-04"
        ]
        assert result.max_consecutive_days[B] == 7

    def test_whole_diff_applied(self, make_schedule):
        """Every date is checked against the complete diff."""
        schedule = make_schedule("BBAABB")
        changes = {date(2024, 1, 3): B, date(2024, 1, 4): B}
        result = ConsecutiveDayValidator().validate_segment(
            schedule, changes, [date(2024, 1, 3)]
        )
        assert not result.is_valid
        assert len(result.violations) == 1

    def test_absent_dates_skipped(self, make_schedule):
        schedule = make_schedule("AB")
        result = ConsecutiveDayValidator().validate_segment(schedule, {}, [date(2024, 2, 1)])
        assert result.is_valid


class TestValidateSchedule:
    """Tests for whole-schedule audits."""

    def test_valid_schedule(self, make_schedule):
        result = ConsecutiveDayValidator().validate_schedule(make_schedule("AAABBBBAAAAB"))
        assert result.is_valid
        assert result.max_consecutive_days == {A: 4, B: 4}

    def test_long_run_reported(self, make_schedule):
        result = ConsecutiveDayValidator().validate_schedule(make_schedule("AABBBBBA"))
        assert not result.is_valid
        assert result.violations == [
            "Person B has 5 consecutive days ending 2024-01-07 (max 4)"
        ]
        assert result.max_consecutive_days[B] == 5

    def test_gap_breaks_run(self, make_schedule):
        """Missing dates split runs."""
        schedule = make_schedule("AAAAAA")
        del schedule.entries[date(2024, 1, 3)]
        result = ConsecutiveDayValidator().validate_schedule(schedule)
        assert result.is_valid
        assert result.max_consecutive_days[A] == 3

    def test_empty_schedule(self, make_schedule):
        result = ConsecutiveDayValidator().validate_schedule(make_schedule(""))
        assert result.is_valid
        assert result.violations == []
