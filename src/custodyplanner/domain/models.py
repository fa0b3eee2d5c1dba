"""Domain models for the custody scheduling system.

This module contains the core data structures used throughout the system:
parties, schedule entries, the custody schedule itself, unavailability
requests, and the results produced by conflict resolution and analysis.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Iterator, Optional


class Party(Enum):
    """One of the two parties sharing overnight custody."""

    PERSON_A = "personA"
    PERSON_B = "personB"

    @property
    def other(self) -> "Party":
        """The party on the other side of a handoff."""
        return Party.PERSON_B if self is Party.PERSON_A else Party.PERSON_A


@dataclass(frozen=True)
class PartyNames:
    """Display names used only for human-readable messages.

    Attributes:
        person_a: Label for Party.PERSON_A.
        person_b: Label for Party.PERSON_B.
    """

    person_a: str = "Person A"
    person_b: str = "Person B"

    def name_for(self, party: Party) -> str:
        return self.person_a if party is Party.PERSON_A else self.person_b


@dataclass
class ScheduleEntry:
    """Overnight assignment for a single calendar date.

    Attributes:
        date: The calendar date.
        assigned_to: Party holding overnight responsibility.
        is_unavailable: True if a party marked this date unavailable.
        unavailable_by: The party that marked the date unavailable.
        is_adjusted: True if conflict resolution changed the assignment.
        original_assigned_to: Assignment before the first adjustment.
            Set if and only if is_adjusted is True.
        note: Optional free-text note for the day.
    """

    date: date
    assigned_to: Party
    is_unavailable: bool = False
    unavailable_by: Optional[Party] = None
    is_adjusted: bool = False
    original_assigned_to: Optional[Party] = None
    note: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "date": self.date.isoformat(),
            "assignedTo": self.assigned_to.value,
            "isUnavailable": self.is_unavailable,
        }
        if self.unavailable_by is not None:
            data["unavailableBy"] = self.unavailable_by.value
        if self.is_adjusted:
            data["isAdjusted"] = True
            data["originalAssignedTo"] = self.original_assigned_to.value
        if self.note:
            data["note"] = self.note
        return data


@dataclass
class CustodySchedule:
    """Date-indexed custody calendar.

    The entries mapping is total over its range: every date from
    start_date through end_date has an entry.

    Attributes:
        entries: Dict mapping dates to schedule entries.
        start_date: First date of the schedule.
        initial_party: Party holding custody on start_date at generation.
        last_updated: Timestamp of the last generation or merge.
    """

    entries: dict[date, ScheduleEntry]
    start_date: date
    initial_party: Party
    last_updated: datetime = field(default_factory=datetime.now)

    def get(self, day: date) -> Optional[ScheduleEntry]:
        """Get the entry for a date, or None if outside the schedule."""
        return self.entries.get(day)

    def assigned_to(self, day: date) -> Optional[Party]:
        """Get the party assigned to a date, or None if outside the schedule."""
        entry = self.entries.get(day)
        return entry.assigned_to if entry else None

    def sorted_dates(self) -> list[date]:
        return sorted(self.entries)

    @property
    def end_date(self) -> Optional[date]:
        """Last date covered by the schedule."""
        return max(self.entries) if self.entries else None

    def __contains__(self, day: date) -> bool:
        return day in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ScheduleEntry]:
        for day in self.sorted_dates():
            yield self.entries[day]

    def to_dict(self) -> dict:
        return {
            "entries": {
                day.isoformat(): entry.to_dict()
                for day, entry in sorted(self.entries.items())
            },
            "startDate": self.start_date.isoformat(),
            "initialPerson": self.initial_party.value,
            "lastUpdated": self.last_updated.isoformat(),
        }


@dataclass
class UnavailabilityRequest:
    """A party's request to be relieved of overnight custody.

    Attributes:
        person_id: The party who is unavailable.
        dates: Requested dates in caller order (need not be contiguous).
        reason: Optional free-text reason.
    """

    person_id: Party
    dates: list[date]
    reason: Optional[str] = None

    def __post_init__(self):
        # Drop duplicates but keep the caller's order
        self.dates = list(dict.fromkeys(self.dates))


@dataclass
class ScheduleAdjustment:
    """Proposed diff produced by conflict resolution.

    proposed_assignments keys are a subset of conflict_dates. When
    is_valid is False, proposed_assignments is empty and reason is set.
    Warnings are advisory; the caller may still apply the proposal.

    Attributes:
        conflict_dates: Dates flagged by the conflict detector.
        original_assignments: Assignment of each conflict date before the change.
        proposed_assignments: New assignment for each changed date.
        handoff_count: Number of dates touched by the diff.
        is_valid: Whether the proposal can be applied.
        reason: Explanation when invalid, or concatenated warnings.
        warnings: Non-fatal rule violations accepted by the proposal.
        strategy: Name of the strategy that produced the proposal.
    """

    conflict_dates: list[date] = field(default_factory=list)
    original_assignments: dict[date, Party] = field(default_factory=dict)
    proposed_assignments: dict[date, Party] = field(default_factory=dict)
    handoff_count: int = 0
    is_valid: bool = True
    reason: Optional[str] = None
    warnings: list[str] = field(default_factory=list)
    strategy: Optional[str] = None

    @classmethod
    def no_conflicts(cls) -> "ScheduleAdjustment":
        """Create the trivially valid, empty adjustment."""
        return cls()

    @classmethod
    def rejected(
        cls,
        conflict_dates: list[date],
        reason: str,
        strategy: Optional[str] = None,
    ) -> "ScheduleAdjustment":
        """Create an invalid adjustment carrying a reason."""
        return cls(
            conflict_dates=list(conflict_dates),
            is_valid=False,
            reason=reason,
            strategy=strategy,
        )

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def to_dict(self) -> dict:
        data = {
            "conflictDates": [d.isoformat() for d in self.conflict_dates],
            "originalAssignments": {
                d.isoformat(): p.value for d, p in self.original_assignments.items()
            },
            "proposedAssignments": {
                d.isoformat(): p.value for d, p in self.proposed_assignments.items()
            },
            "handoffCount": self.handoff_count,
            "isValid": self.is_valid,
        }
        if self.reason:
            data["reason"] = self.reason
        if self.warnings:
            data["warnings"] = list(self.warnings)
        if self.strategy:
            data["strategy"] = self.strategy
        return data


@dataclass(frozen=True)
class CustodyPeriod:
    """A maximal run of consecutive dates assigned to the same party."""

    person_id: Party
    start_date: date
    end_date: date
    day_count: int

    def to_dict(self) -> dict:
        return {
            "personId": self.person_id.value,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "dayCount": self.day_count,
        }


@dataclass
class ValidationResult:
    """Result of checking assignments against the consecutive-day rule."""

    is_valid: bool = True
    violations: list[str] = field(default_factory=list)
    max_consecutive_days: dict[Party, int] = field(
        default_factory=lambda: {party: 0 for party in Party}
    )

    def add_violation(self, message: str) -> None:
        """Add a violation and mark as invalid."""
        self.violations.append(message)
        self.is_valid = False

    def record_run(self, party: Party, length: int) -> None:
        """Track the longest run seen for a party."""
        if length > self.max_consecutive_days.get(party, 0):
            self.max_consecutive_days[party] = length


@dataclass
class ScheduleStats:
    """Summary statistics for a custody schedule.

    Attributes:
        periods: Custody periods in the analysed range.
        total_handoffs: Transitions between consecutive periods.
        average_period_length: Mean period length in days.
        average_block_length: Mean period length per party (1 decimal).
        split_percent: Share of nights per party in the split window.
        monthly_handoffs: Handoffs per month, keyed "YYYY-MM".
    """

    periods: list[CustodyPeriod] = field(default_factory=list)
    total_handoffs: int = 0
    average_period_length: float = 0.0
    average_block_length: dict[Party, float] = field(
        default_factory=lambda: {party: 0.0 for party in Party}
    )
    split_percent: dict[Party, int] = field(
        default_factory=lambda: {party: 0 for party in Party}
    )
    monthly_handoffs: dict[str, int] = field(default_factory=dict)


class ScheduleError(Exception):
    """Raised when an operation does not fit the schedule it targets."""
