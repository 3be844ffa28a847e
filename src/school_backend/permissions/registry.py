"""
Registry of every permission name the backend checks.

Routes reference these constants rather than bare strings, and the seeder
creates exactly this set. Roles and direct grants loaded from the database
may only point at names that exist here.
"""

from typing import Dict, List

# Users and access control
USERS_READ = "users.read"
USERS_CREATE = "users.create"
USERS_UPDATE = "users.update"
USERS_DELETE = "users.delete"
USERS_CHANGE_PASSWORD_OTHERS = "users.change_password.others"
USERS_MANAGE_ROLES = "users.manage_roles"
USERS_MANAGE_PERMISSIONS = "users.manage_permissions"
ROLES_MANAGE = "roles.manage"
PERMISSIONS_MANAGE = "permissions.manage"
PROFILE_READ = "profile.read"
PROFILE_UPDATE = "profile.update"
AUTH_LOGOUT = "auth.logout"

# People
STUDENTS_READ = "students.read"
STUDENTS_CREATE = "students.create"
STUDENTS_UPDATE = "students.update"
STUDENTS_DELETE = "students.delete"
STUDENTS_MANAGE_GUARDIAN = "students.manage_guardian"
STUDENTS_MANAGE_PARENTS = "students.manage_parents"
STUDENTS_MANAGE_ACCOUNT = "students.manage_account"
PARENTS_READ = "parents.read"
PARENTS_CREATE = "parents.create"
PARENTS_UPDATE = "parents.update"
PARENTS_DELETE = "parents.delete"
PARENTS_MANAGE_ACCOUNT = "parents.manage_account"
GUARDIANS_READ = "guardians.read"
GUARDIANS_CREATE = "guardians.create"
GUARDIANS_UPDATE = "guardians.update"
GUARDIANS_DELETE = "guardians.delete"
EMPLOYEES_READ = "employees.read"
EMPLOYEES_CREATE = "employees.create"
EMPLOYEES_UPDATE = "employees.update"
EMPLOYEES_DELETE = "employees.delete"
EMPLOYEES_MANAGE_ACCOUNT = "employees.manage_account"

# Academic
ACADEMIC_READ = "academic.read"
ACADEMIC_YEARS_MANAGE = "academic_years.manage"
SUBJECTS_MANAGE = "subjects.manage"
CLASSROOMS_MANAGE = "classrooms.manage"
CLASSROOMS_MANAGE_STUDENTS = "classrooms.manage_students"
ASSIGNMENTS_MANAGE = "assignments.manage"
SCHEDULES_MANAGE = "schedules.manage"
ATTENDANCE_READ = "attendance.read"
ATTENDANCE_SUBMIT = "attendance.submit"
ASSESSMENTS_READ = "assessments.read"
GRADES_WRITE = "grades.write"

# Finance
FINANCE_DONATIONS_READ = "finance_donations.read"
FINANCE_DONATIONS_CREATE = "finance_donations.create"
FINANCE_DONATIONS_UPDATE = "finance_donations.update"
FINANCE_DONORS_READ = "finance_donors.read"
FINANCE_DONORS_UPDATE = "finance_donors.update"

# Conduct
VIOLATION_CATEGORY_READ = "violation_category.read"
VIOLATION_CATEGORY_MANAGE = "violation_category.manage"
VIOLATION_TYPE_READ = "violation_type.read"
VIOLATION_TYPE_MANAGE = "violation_type.manage"
VIOLATION_RECORD_READ = "violation_record.read"
VIOLATION_RECORD_READ_ALL = "violation_record.read_all"
VIOLATION_RECORD_CREATE = "violation_record.create"
VIOLATION_RECORD_UPDATE = "violation_record.update"
VIOLATION_RECORD_DELETE = "violation_record.delete"


PERMISSION_DESCRIPTIONS: Dict[str, str] = {
    USERS_READ: "View users",
    USERS_CREATE: "Create users",
    USERS_UPDATE: "Update users",
    USERS_DELETE: "Delete users",
    USERS_CHANGE_PASSWORD_OTHERS: "Reset another user's password",
    USERS_MANAGE_ROLES: "Assign roles to users",
    USERS_MANAGE_PERMISSIONS: "Grant permissions directly to users",
    ROLES_MANAGE: "Create, update and delete roles",
    PERMISSIONS_MANAGE: "Create, update and delete permissions",
    PROFILE_READ: "View own profile",
    PROFILE_UPDATE: "Update own profile",
    AUTH_LOGOUT: "Log out",
    STUDENTS_READ: "View students",
    STUDENTS_CREATE: "Create students",
    STUDENTS_UPDATE: "Update students",
    STUDENTS_DELETE: "Delete students",
    STUDENTS_MANAGE_GUARDIAN: "Set or remove a student's guardian",
    STUDENTS_MANAGE_PARENTS: "Link parents to a student",
    STUDENTS_MANAGE_ACCOUNT: "Link a user account to a student",
    PARENTS_READ: "View parents",
    PARENTS_CREATE: "Create parents",
    PARENTS_UPDATE: "Update parents",
    PARENTS_DELETE: "Delete parents",
    PARENTS_MANAGE_ACCOUNT: "Link a user account to a parent",
    GUARDIANS_READ: "View guardians",
    GUARDIANS_CREATE: "Create guardians",
    GUARDIANS_UPDATE: "Update guardians",
    GUARDIANS_DELETE: "Delete guardians",
    EMPLOYEES_READ: "View employees",
    EMPLOYEES_CREATE: "Create employees",
    EMPLOYEES_UPDATE: "Update employees",
    EMPLOYEES_DELETE: "Delete employees",
    EMPLOYEES_MANAGE_ACCOUNT: "Link a user account to an employee",
    ACADEMIC_READ: "View academic years, subjects, classrooms, assignments and schedules",
    ACADEMIC_YEARS_MANAGE: "Manage academic years",
    SUBJECTS_MANAGE: "Manage subjects",
    CLASSROOMS_MANAGE: "Manage classrooms",
    CLASSROOMS_MANAGE_STUDENTS: "Add or remove classroom students",
    ASSIGNMENTS_MANAGE: "Manage teaching assignments and assessments",
    SCHEDULES_MANAGE: "Manage schedules",
    ATTENDANCE_READ: "View attendance",
    ATTENDANCE_SUBMIT: "Submit attendance",
    ASSESSMENTS_READ: "View assessments and scores",
    GRADES_WRITE: "Submit student scores",
    FINANCE_DONATIONS_READ: "View donations",
    FINANCE_DONATIONS_CREATE: "Record donations",
    FINANCE_DONATIONS_UPDATE: "Update donations",
    FINANCE_DONORS_READ: "View donors",
    FINANCE_DONORS_UPDATE: "Update donors",
    VIOLATION_CATEGORY_READ: "View violation categories",
    VIOLATION_CATEGORY_MANAGE: "Manage violation categories",
    VIOLATION_TYPE_READ: "View violation types",
    VIOLATION_TYPE_MANAGE: "Manage violation types",
    VIOLATION_RECORD_READ: "View a student's violations",
    VIOLATION_RECORD_READ_ALL: "View all violations",
    VIOLATION_RECORD_CREATE: "Record violations",
    VIOLATION_RECORD_UPDATE: "Update violations",
    VIOLATION_RECORD_DELETE: "Delete violations",
}

ALL_PERMISSIONS: List[str] = list(PERMISSION_DESCRIPTIONS.keys())

ADMIN_ROLE = "admin"
DEFAULT_ROLE = "user"

# Role name -> (description, is_default, permissions)
BUILTIN_ROLES = {
    ADMIN_ROLE: ("Administrator with full access", False, ALL_PERMISSIONS),
    DEFAULT_ROLE: ("Default role for self-registered users", True, [PROFILE_READ, PROFILE_UPDATE, AUTH_LOGOUT]),
}


def is_registered(name: str) -> bool:
    return name in PERMISSION_DESCRIPTIONS
