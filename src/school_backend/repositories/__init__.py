"""
Repository pattern implementation for direct database access.

One repository per aggregate; services compose them.
"""

from .base import (
    BaseRepository,
    RepositoryError,
    NotFoundError,
    DuplicateError
)
from .users import UserRepository, RoleRepository, PermissionRepository
from .people import StudentRepository, ParentRepository, GuardianRepository, EmployeeRepository
from .academic import (
    AcademicYearRepository,
    SubjectRepository,
    ClassroomRepository,
    TeachingAssignmentRepository,
    ScheduleRepository
)
from .attendance import AttendanceSessionRepository
from .grade import AssessmentRepository, StudentScoreRepository
from .finance import DonorRepository, DonationRepository
from .violation import ViolationCategoryRepository, ViolationTypeRepository, StudentViolationRepository
from .dashboard import DashboardRepository

__all__ = [
    "BaseRepository",
    "RepositoryError",
    "NotFoundError",
    "DuplicateError",
    "UserRepository",
    "RoleRepository",
    "PermissionRepository",
    "StudentRepository",
    "ParentRepository",
    "GuardianRepository",
    "EmployeeRepository",
    "AcademicYearRepository",
    "SubjectRepository",
    "ClassroomRepository",
    "TeachingAssignmentRepository",
    "ScheduleRepository",
    "AttendanceSessionRepository",
    "AssessmentRepository",
    "StudentScoreRepository",
    "DonorRepository",
    "DonationRepository",
    "ViolationCategoryRepository",
    "ViolationTypeRepository",
    "StudentViolationRepository",
    "DashboardRepository"
]
