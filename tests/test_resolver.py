"""Tests for the conflict resolution chain."""

from datetime import date

import pytest

from custodyplanner.domain.models import Party, PartyNames
from custodyplanner.scheduling.resolver import ConflictResolver, count_handoffs
from custodyplanner.scheduling.strategies import (
    EarlyHandoffStrategy,
    ExtensionStrategy,
    PeriodShiftStrategy,
)

A = Party.PERSON_A
B = Party.PERSON_B


class TestConflictResolver:
    """Tests for ConflictResolver.resolve."""

    @pytest.fixture
    def resolver(self):
        return ConflictResolver()

    def test_no_conflicts(self, resolver, make_schedule):
        adjustment = resolver.resolve(make_schedule("AAABBB"), [])
        assert adjustment.is_valid
        assert adjustment.proposed_assignments == {}
        assert adjustment.handoff_count == 0
        assert adjustment.strategy is None

    def test_simple_conflict(self, resolver, make_schedule):
        """A's last night before B's block is handed to B."""
        schedule = make_schedule("ABBBAAABBB")
        adjustment = resolver.resolve(schedule, [date(2024, 1, 7)])

        assert adjustment.is_valid
        assert adjustment.conflict_dates == [date(2024, 1, 7)]
        assert adjustment.original_assignments == {date(2024, 1, 7): A}
        assert adjustment.proposed_assignments == {date(2024, 1, 7): B}
        assert adjustment.handoff_count == 1
        assert adjustment.warnings == []
        assert adjustment.reason is None
        assert adjustment.strategy == "early_handoff"

    def test_end_of_four_night_run(self, resolver, make_schedule):
        schedule = make_schedule("AAAABBBAAA")
        adjustment = resolver.resolve(schedule, [date(2024, 1, 4)])
        assert adjustment.is_valid
        assert adjustment.proposed_assignments == {date(2024, 1, 4): B}
        assert adjustment.warnings == []

    def test_forced_when_every_option_breaks_cap(self, resolver, make_schedule):
        """Joining two B blocks falls through to the forced assignment."""
        schedule = make_schedule("BBBABBB")
        adjustment = resolver.resolve(schedule, [date(2024, 1, 4)], PartyNames("Alex", "Sam"))

        assert adjustment.is_valid
        assert adjustment.strategy == "forced_assignment"
        assert adjustment.proposed_assignments == {date(2024, 1, 4): B}
        assert adjustment.warnings == [
            "Sam will exceed 4 consecutive days including 2024-01-04"
        ]
        assert adjustment.reason == (
            "Warning: Sam will exceed 4 consecutive days including 2024-01-04"
        )
        assert adjustment.has_warnings

    def test_first_success_wins(self, resolver, make_schedule):
        """The diff is exactly what the highest-priority strategy proposes."""
        schedule = make_schedule("AAABBBAAABBBAAABBB")
        conflicts = [date(2024, 1, 9), date(2024, 1, 3)]

        adjustment = resolver.resolve(schedule, conflicts)
        expected = EarlyHandoffStrategy().attempt(schedule, conflicts)

        assert expected.ok
        assert adjustment.strategy == "early_handoff"
        assert adjustment.proposed_assignments == expected.proposed

    def test_proposal_keys_subset_of_conflicts(self, resolver, make_schedule):
        schedule = make_schedule("BBAABB")
        conflicts = [date(2024, 1, 3), date(2024, 1, 4)]
        adjustment = resolver.resolve(schedule, conflicts)
        assert set(adjustment.proposed_assignments) <= set(conflicts)
        assert adjustment.handoff_count == len(adjustment.proposed_assignments)

    def test_custom_chain_without_fallback_rejects(self, make_schedule):
        """Without the forced strategy a chain can fail outright."""
        resolver = ConflictResolver(strategies=[EarlyHandoffStrategy(), ExtensionStrategy()])
        adjustment = resolver.resolve(make_schedule("BBBABBB"), [date(2024, 1, 4)])

        assert not adjustment.is_valid
        assert adjustment.proposed_assignments == {}
        assert adjustment.reason == "Extension would violate 4-day maximum rule"

    def test_custom_chain_period_shift_reason(self, make_schedule):
        resolver = ConflictResolver(strategies=[PeriodShiftStrategy()])
        adjustment = resolver.resolve(make_schedule("BBBABBB"), [date(2024, 1, 4)])
        assert not adjustment.is_valid
        assert adjustment.reason == (
            "Person B would exceed 4 consecutive days including 2024-01-04"
        )

    def test_empty_chain(self, make_schedule):
        adjustment = ConflictResolver(strategies=[]).resolve(
            make_schedule("AAAB"), [date(2024, 1, 1)]
        )
        assert not adjustment.is_valid
        assert adjustment.reason == "No resolution strategy configured"


class TestCountHandoffs:
    def test_counts_touched_dates(self):
        assert count_handoffs({}) == 0
        assert count_handoffs({date(2024, 1, 1): A, date(2024, 1, 2): A}) == 2
