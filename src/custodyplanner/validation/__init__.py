"""Validation module for the consecutive-night rule."""

from custodyplanner.validation.validator import (
    ConsecutiveDayValidator,
    EffectiveAssignments,
)

__all__ = [
    "ConsecutiveDayValidator",
    "EffectiveAssignments",
]
