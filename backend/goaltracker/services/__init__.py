"""Business logic services package."""

from goaltracker.services.activities_service import ActivitiesServiceError, activities_service
from goaltracker.services.auth_service import AuthServiceError, get_current_user_id
from goaltracker.services.dashboard_service import DashboardServiceError, dashboard_service
from goaltracker.services.goals_service import GoalsServiceError, goals_service
from goaltracker.services.progress_service import ProgressServiceError, progress_service
from goaltracker.services.sports_service import SportsServiceError, sports_service
from goaltracker.services.supabase_admin import SupabaseAdminError, supabase_admin

__all__ = [
    "ActivitiesServiceError",
    "activities_service",
    "AuthServiceError",
    "get_current_user_id",
    "DashboardServiceError",
    "dashboard_service",
    "GoalsServiceError",
    "goals_service",
    "ProgressServiceError",
    "progress_service",
    "SportsServiceError",
    "sports_service",
    "SupabaseAdminError",
    "supabase_admin",
]
