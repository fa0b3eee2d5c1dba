"""Tests for domain models."""

from datetime import date, datetime

from custodyplanner.domain.models import (
    CustodyPeriod,
    CustodySchedule,
    Party,
    PartyNames,
    ScheduleAdjustment,
    ScheduleEntry,
    UnavailabilityRequest,
    ValidationResult,
)


class TestParty:
    """Tests for the Party enum."""

    def test_other(self):
        assert Party.PERSON_A.other is Party.PERSON_B
        assert Party.PERSON_B.other is Party.PERSON_A

    def test_wire_values(self):
        """Party values match the stored identifiers."""
        assert Party.PERSON_A.value == "personA"
        assert Party.PERSON_B.value == "personB"
        assert Party("personB") is Party.PERSON_B


class TestPartyNames:
    """Tests for PartyNames."""

    def test_defaults(self):
        names = PartyNames()
        assert names.name_for(Party.PERSON_A) == "Person A"
        assert names.name_for(Party.PERSON_B) == "Person B"

    def test_custom_names(self):
        names = PartyNames("Alex", "Sam")
        assert names.name_for(Party.PERSON_A) == "Alex"
        assert names.name_for(Party.PERSON_B) == "Sam"


class TestScheduleEntry:
    """Tests for ScheduleEntry."""

    def test_defaults(self):
        """A fresh entry carries no markers."""
        entry = ScheduleEntry(date=date(2024, 1, 1), assigned_to=Party.PERSON_A)
        assert entry.is_unavailable is False
        assert entry.unavailable_by is None
        assert entry.is_adjusted is False
        assert entry.original_assigned_to is None

    def test_to_dict_plain(self):
        entry = ScheduleEntry(date=date(2024, 1, 1), assigned_to=Party.PERSON_A)
        assert entry.to_dict() == {
            "date": "2024-01-01",
            "assignedTo": "personA",
            "isUnavailable": False,
        }

    def test_to_dict_adjusted(self):
        """Adjusted entries report the original assignee."""
        entry = ScheduleEntry(
            date=date(2024, 1, 3),
            assigned_to=Party.PERSON_B,
            is_unavailable=True,
            unavailable_by=Party.PERSON_A,
            is_adjusted=True,
            original_assigned_to=Party.PERSON_A,
            note="school trip",
        )
        data = entry.to_dict()
        assert data["assignedTo"] == "personB"
        assert data["unavailableBy"] == "personA"
        assert data["isAdjusted"] is True
        assert data["originalAssignedTo"] == "personA"
        assert data["note"] == "school trip"


class TestCustodySchedule:
    """Tests for CustodySchedule."""

    def test_lookup_and_iteration(self, make_schedule):
        schedule = make_schedule("AAB")
        assert len(schedule) == 3
        assert date(2024, 1, 2) in schedule
        assert date(2024, 1, 4) not in schedule
        assert schedule.assigned_to(date(2024, 1, 3)) is Party.PERSON_B
        assert schedule.assigned_to(date(2024, 1, 4)) is None
        assert schedule.get(date(2023, 12, 31)) is None
        assert [e.date for e in schedule] == [
            date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)
        ]

    def test_end_date(self, make_schedule):
        assert make_schedule("AAABBB").end_date == date(2024, 1, 6)

    def test_end_date_empty(self):
        schedule = CustodySchedule(
            entries={}, start_date=date(2024, 1, 1), initial_party=Party.PERSON_A
        )
        assert schedule.end_date is None
        assert schedule.sorted_dates() == []

    def test_to_dict(self, make_schedule):
        data = make_schedule("AB").to_dict()
        assert data["startDate"] == "2024-01-01"
        assert data["initialPerson"] == "personA"
        assert data["lastUpdated"] == datetime(2024, 1, 1, 12, 0).isoformat()
        assert list(data["entries"]) == ["2024-01-01", "2024-01-02"]


class TestUnavailabilityRequest:
    """Tests for UnavailabilityRequest."""

    def test_duplicates_removed_in_order(self):
        """Repeated dates are collapsed but caller order is kept."""
        request = UnavailabilityRequest(
            person_id=Party.PERSON_A,
            dates=[date(2024, 1, 5), date(2024, 1, 2), date(2024, 1, 5)],
        )
        assert request.dates == [date(2024, 1, 5), date(2024, 1, 2)]

    def test_reason_optional(self):
        request = UnavailabilityRequest(Party.PERSON_B, [date(2024, 1, 1)])
        assert request.reason is None


class TestScheduleAdjustment:
    """Tests for ScheduleAdjustment."""

    def test_no_conflicts(self):
        adjustment = ScheduleAdjustment.no_conflicts()
        assert adjustment.is_valid is True
        assert adjustment.conflict_dates == []
        assert adjustment.proposed_assignments == {}
        assert adjustment.handoff_count == 0
        assert adjustment.has_warnings is False

    def test_rejected(self):
        adjustment = ScheduleAdjustment.rejected([date(2024, 1, 4)], "no luck")
        assert adjustment.is_valid is False
        assert adjustment.reason == "no luck"
        assert adjustment.proposed_assignments == {}
        assert adjustment.conflict_dates == [date(2024, 1, 4)]

    def test_to_dict(self):
        adjustment = ScheduleAdjustment(
            conflict_dates=[date(2024, 1, 7)],
            original_assignments={date(2024, 1, 7): Party.PERSON_A},
            proposed_assignments={date(2024, 1, 7): Party.PERSON_B},
            handoff_count=1,
            strategy="early_handoff",
        )
        assert adjustment.to_dict() == {
            "conflictDates": ["2024-01-07"],
            "originalAssignments": {"2024-01-07": "personA"},
            "proposedAssignments": {"2024-01-07": "personB"},
            "handoffCount": 1,
            "isValid": True,
            "strategy": "early_handoff",
        }


class TestCustodyPeriod:
    def test_to_dict(self):
        period = CustodyPeriod(Party.PERSON_B, date(2024, 1, 4), date(2024, 1, 6), 3)
        assert period.to_dict() == {
            "personId": "personB",
            "startDate": "2024-01-04",
            "endDate": "2024-01-06",
            "dayCount": 3,
        }


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_add_violation_marks_invalid(self):
        result = ValidationResult()
        assert result.is_valid is True
        result.add_violation("too long")
        assert result.is_valid is False
        assert result.violations == ["too long"]

    def test_record_run_keeps_longest(self):
        result = ValidationResult()
        result.record_run(Party.PERSON_A, 3)
        result.record_run(Party.PERSON_A, 2)
        assert result.max_consecutive_days[Party.PERSON_A] == 3
        assert result.max_consecutive_days[Party.PERSON_B] == 0
