"""
Service layer for business logic.

Each service wraps one domain, takes a SQLAlchemy session and raises the
HTTP exceptions from ``api.exceptions``.
"""

from .auth import AuthService
from .users import UserService
from .roles import RoleService
from .permissions import PermissionService
from .students import StudentService
from .parents import ParentService
from .guardians import GuardianService
from .employees import EmployeeService
from .academic import (
    AcademicYearService,
    SubjectService,
    ClassroomService,
    TeachingAssignmentService,
    ScheduleService
)
from .attendance import AttendanceService
from .grades import GradeService
from .finance import FinanceService
from .violations import ViolationService

__all__ = [
    "AuthService",
    "UserService",
    "RoleService",
    "PermissionService",
    "StudentService",
    "ParentService",
    "GuardianService",
    "EmployeeService",
    "AcademicYearService",
    "SubjectService",
    "ClassroomService",
    "TeachingAssignmentService",
    "ScheduleService",
    "AttendanceService",
    "GradeService",
    "FinanceService",
    "ViolationService"
]
