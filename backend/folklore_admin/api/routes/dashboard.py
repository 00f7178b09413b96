"""Dashboard routes."""

from fastapi import APIRouter

from folklore_admin.core.rbac import CurrentUser
from folklore_admin.db.session import DbSession
from folklore_admin.schemas.dashboard import DashboardStats
from folklore_admin.services.dashboard_service import dashboard_stats

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: DbSession, current_user: CurrentUser):
    """Headline figures for the landing page."""
    return dashboard_stats(db)
