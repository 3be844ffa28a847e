from .base import Base, metadata
from .auth import User, UserRole, UserPermission
from .role import Role, Permission, RolePermission
from .people import Student, Parent, Guardian, StudentParent, Employee
from .academic import AcademicYear, Subject, Classroom, StudentClassroom, TeachingAssignment, Schedule
from .attendance import AttendanceSession, AttendanceDetail
from .grade import Assessment, StudentScore
from .finance import Donor, Donation, DonationItem
from .violation import ViolationCategory, ViolationType, StudentViolation

# Import all models to ensure relationships are properly set up
from . import auth, role, people, academic, attendance, grade, finance, violation

__all__ = [
    'Base',
    'metadata',
    # Auth models
    'User',
    'UserRole',
    'UserPermission',
    # Role/Permission models
    'Role',
    'Permission',
    'RolePermission',
    # People
    'Student',
    'Parent',
    'Guardian',
    'StudentParent',
    'Employee',
    # Academic
    'AcademicYear',
    'Subject',
    'Classroom',
    'StudentClassroom',
    'TeachingAssignment',
    'Schedule',
    # Attendance
    'AttendanceSession',
    'AttendanceDetail',
    # Grades
    'Assessment',
    'StudentScore',
    # Finance
    'Donor',
    'Donation',
    'DonationItem',
    # Violations
    'ViolationCategory',
    'ViolationType',
    'StudentViolation',
]
