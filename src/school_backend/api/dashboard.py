from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from school_backend.database import get_db
from school_backend.interface.dashboard import DashboardStats, TeacherDashboardStats
from school_backend.permissions.auth import get_current_principal
from school_backend.permissions.principal import Principal
from school_backend.services.dashboard import DashboardService

dashboard_router = APIRouter()


@dashboard_router.get("/stats", response_model=DashboardStats)
def dashboard_stats(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Session = Depends(get_db)
):
    """School-wide totals; any signed-in user may read them"""
    return DashboardService(db).stats()


@dashboard_router.get("/teacher-stats", response_model=TeacherDashboardStats)
def teacher_dashboard_stats(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Session = Depends(get_db)
):
    return DashboardService(db).teacher_stats(principal.get_user_id_or_throw())
