"""Scheduling engine for generating and adjusting custody calendars."""

from custodyplanner.scheduling.conflicts import ConflictDetector
from custodyplanner.scheduling.cpsat_rebalancer import (
    CPSATRebalancer,
    RebalanceConfig,
    RebalanceResult,
)
from custodyplanner.scheduling.generator import CalendarGenerator
from custodyplanner.scheduling.periods import PeriodAnalyzer
from custodyplanner.scheduling.resolver import ConflictResolver, count_handoffs
from custodyplanner.scheduling.scheduler import CustodyScheduler
from custodyplanner.scheduling.strategies import (
    EarlyHandoffStrategy,
    ExtensionStrategy,
    ForcedAssignmentStrategy,
    PeriodShiftStrategy,
    ResolutionStrategy,
    StrategyOutcome,
    default_strategies,
)

__all__ = [
    # Core scheduler
    "CustodyScheduler",
    "CalendarGenerator",
    "ConflictDetector",
    "PeriodAnalyzer",
    # Strategy chain
    "ConflictResolver",
    "count_handoffs",
    "ResolutionStrategy",
    "StrategyOutcome",
    "EarlyHandoffStrategy",
    "ExtensionStrategy",
    "PeriodShiftStrategy",
    "ForcedAssignmentStrategy",
    "default_strategies",
    # Optimisation
    "CPSATRebalancer",
    "RebalanceConfig",
    "RebalanceResult",
]
