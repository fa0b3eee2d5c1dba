"""Policy definitions for custody rotation rules.

Policies are kept separate from the scheduling engine so that the
rotation length and the consecutive-night cap can be changed and tested
independently of the algorithms that consume them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

MAX_CONSECUTIVE_DAYS = 4
DEFAULT_ROTATION_DAYS = 3


class RotationPolicy(ABC):
    """Abstract base class for rotation policies."""

    @abstractmethod
    def max_consecutive_days(self) -> int:
        """Maximum consecutive nights a single party may hold."""
        pass

    @abstractmethod
    def rotation_days(self) -> int:
        """Length of a rotation block in the baseline calendar."""
        pass

    @abstractmethod
    def is_valid_run_length(self, run_length: int) -> bool:
        """Check if a run of consecutive nights respects the cap."""
        pass


@dataclass
class DefaultRotationPolicy(RotationPolicy):
    """Default rotation policy.

    - Baseline rotation: 3 nights on, 3 nights off
    - Cap: no more than 4 consecutive nights for either party
    """

    max_days: int = MAX_CONSECUTIVE_DAYS
    rotation_length: int = DEFAULT_ROTATION_DAYS

    def __post_init__(self):
        if self.rotation_length < 1:
            raise ValueError("rotation_length must be at least 1")
        if self.rotation_length > self.max_days:
            raise ValueError(
                f"rotation_length {self.rotation_length} exceeds "
                f"max_days {self.max_days}"
            )

    def max_consecutive_days(self) -> int:
        return self.max_days

    def rotation_days(self) -> int:
        return self.rotation_length

    def is_valid_run_length(self, run_length: int) -> bool:
        return run_length <= self.max_days
