"""API routers package."""

from goaltracker.routers import activities, auth, dashboard, goal_history, goals, progress, sports

__all__ = ["activities", "auth", "dashboard", "goal_history", "goals", "progress", "sports"]
