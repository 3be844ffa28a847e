from datetime import date
from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from school_backend.database import get_db
from school_backend.interface.attendance import AttendanceHistoryItem, AttendanceSessionGet, AttendanceSubmit
from school_backend.permissions.auth import require_permission
from school_backend.permissions.principal import Principal
from school_backend.permissions.registry import ATTENDANCE_READ, ATTENDANCE_SUBMIT
from school_backend.services.attendance import AttendanceService

attendance_router = APIRouter()


@attendance_router.post("", response_model=AttendanceSessionGet)
def submit_attendance(
    payload: AttendanceSubmit,
    principal: Annotated[Principal, Depends(require_permission(ATTENDANCE_SUBMIT))],
    db: Session = Depends(get_db)
):
    """Create the session for (schedule, date) or replace it if it already exists"""
    return AttendanceService(db).submit(payload)


@attendance_router.get("/sheet", response_model=AttendanceSessionGet)
def attendance_sheet(
    schedule_id: str,
    date: date,
    principal: Annotated[Principal, Depends(require_permission(ATTENDANCE_READ))],
    db: Session = Depends(get_db)
):
    """Saved session, or the classroom's students when nothing was submitted yet"""
    return AttendanceService(db).session_or_class_list(schedule_id, date)


@attendance_router.get("/history", response_model=List[AttendanceHistoryItem])
def attendance_history(
    principal: Annotated[Principal, Depends(require_permission(ATTENDANCE_READ))],
    teaching_assignment_id: Optional[str] = None,
    mine: bool = False,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    teacher_user_id = principal.get_user_id_or_throw() if mine else None
    return AttendanceService(db).history(teaching_assignment_id, teacher_user_id, skip, limit)


@attendance_router.get("/{session_id}", response_model=AttendanceSessionGet)
def get_attendance_session(
    session_id: str,
    principal: Annotated[Principal, Depends(require_permission(ATTENDANCE_READ))],
    db: Session = Depends(get_db)
):
    return AttendanceService(db).detail(session_id)


@attendance_router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_attendance_session(
    session_id: str,
    principal: Annotated[Principal, Depends(require_permission(ATTENDANCE_SUBMIT))],
    db: Session = Depends(get_db)
):
    AttendanceService(db).delete(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
