"""Pydantic schemas package for API request/response models."""

from goaltracker.schemas.common import ErrorResponse, Paginated
from goaltracker.schemas.activity import (
    ActivityDistribution,
    ActivityListQuery,
    ActivityResponse,
    GenerateActivitiesRequest,
    GenerateActivitiesResponse,
)
from goaltracker.schemas.auth import (
    AccountDeletedResponse,
    MessageResponse,
    PasswordRecoveryRequest,
)
from goaltracker.schemas.dashboard import BreakdownItem, DashboardMetrics
from goaltracker.schemas.goal import (
    GoalCreate,
    GoalHistoryQuery,
    GoalHistoryResponse,
    GoalListQuery,
    GoalResponse,
    GoalUpdate,
)
from goaltracker.schemas.progress import (
    ProgressAnnualRequest,
    ProgressAnnualResponse,
    ProgressHistoryItem,
    ProgressHistoryRequest,
    ProgressHistoryResponse,
    ProgressSeriesPoint,
    ProgressSummary,
)
from goaltracker.schemas.sport import SportCreate, SportProfile, SportResponse

__all__ = [
    # Common
    "ErrorResponse",
    "Paginated",
    # Activity schemas
    "ActivityDistribution",
    "ActivityListQuery",
    "ActivityResponse",
    "GenerateActivitiesRequest",
    "GenerateActivitiesResponse",
    # Auth schemas
    "AccountDeletedResponse",
    "MessageResponse",
    "PasswordRecoveryRequest",
    # Dashboard schemas
    "BreakdownItem",
    "DashboardMetrics",
    # Goal schemas
    "GoalCreate",
    "GoalHistoryQuery",
    "GoalHistoryResponse",
    "GoalListQuery",
    "GoalResponse",
    "GoalUpdate",
    # Progress schemas
    "ProgressAnnualRequest",
    "ProgressAnnualResponse",
    "ProgressHistoryItem",
    "ProgressHistoryRequest",
    "ProgressHistoryResponse",
    "ProgressSeriesPoint",
    "ProgressSummary",
    # Sport schemas
    "SportCreate",
    "SportProfile",
    "SportResponse",
]
