"""Domain models and business rules for custody scheduling."""

from custodyplanner.domain.models import (
    CustodyPeriod,
    CustodySchedule,
    Party,
    PartyNames,
    ScheduleAdjustment,
    ScheduleEntry,
    ScheduleError,
    ScheduleStats,
    UnavailabilityRequest,
    ValidationResult,
)
from custodyplanner.domain.policies import (
    DEFAULT_ROTATION_DAYS,
    MAX_CONSECUTIVE_DAYS,
    DefaultRotationPolicy,
    RotationPolicy,
)

__all__ = [
    # Models
    "CustodyPeriod",
    "CustodySchedule",
    "Party",
    "PartyNames",
    "ScheduleAdjustment",
    "ScheduleEntry",
    "ScheduleError",
    "ScheduleStats",
    "UnavailabilityRequest",
    "ValidationResult",
    # Policies
    "DEFAULT_ROTATION_DAYS",
    "MAX_CONSECUTIVE_DAYS",
    "DefaultRotationPolicy",
    "RotationPolicy",
]
