from pydantic import BaseModel


class StudentGenderCount(BaseModel):
    male: int = 0
    female: int = 0


class DashboardStats(BaseModel):
    total_students: int
    total_employees: int
    total_parents: int
    total_users: int
    student_gender: StudentGenderCount


class TeacherDashboardStats(BaseModel):
    total_classes_today: int
    pending_attendance: int
    total_students: int
