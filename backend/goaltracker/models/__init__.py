"""Database models for the annual goals tracker."""

from goaltracker.models.base import Base
from goaltracker.models.sport import Sport
from goaltracker.models.goal import Goal, GoalHistory, MetricType, ScopeType
from goaltracker.models.activity import Activity

__all__ = [
    "Base",
    "Sport",
    "Goal",
    "GoalHistory",
    "MetricType",
    "ScopeType",
    "Activity",
]
