from sqlalchemy import (
    CheckConstraint, Column, Date, ForeignKey, Index, Integer, String, Text, UniqueConstraint
)
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, generate_uuid


class AcademicYear(TimestampMixin, Base):
    __tablename__ = 'academic_years'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(50), nullable=False)
    status = Column(String(10), nullable=False, default="INACTIVE", server_default="INACTIVE")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    classrooms = relationship("Classroom", back_populates="academic_year", cascade="all, delete")


class Subject(TimestampMixin, Base):
    __tablename__ = 'subjects'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    code = Column(String(20), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    type = Column(String(50))
    description = Column(Text)


class Classroom(TimestampMixin, Base):
    __tablename__ = 'classrooms'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    academic_year_id = Column(ForeignKey('academic_years.id', ondelete='CASCADE'), nullable=False, index=True)
    homeroom_teacher_id = Column(ForeignKey('employees.id', ondelete='SET NULL'), index=True)
    name = Column(String(50), nullable=False)
    level = Column(String(10), nullable=False)
    major = Column(String(50))
    description = Column(Text)

    academic_year = relationship("AcademicYear", back_populates="classrooms")
    homeroom_teacher = relationship("Employee", lazy="joined")
    students = relationship("Student", secondary="student_classroom", back_populates="classrooms")


class StudentClassroom(Base):
    __tablename__ = 'student_classroom'

    student_id = Column(ForeignKey('students.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    classroom_id = Column(ForeignKey('classrooms.id', ondelete='CASCADE'), primary_key=True, nullable=False)


class TeachingAssignment(TimestampMixin, Base):
    __tablename__ = 'teaching_assignments'
    __table_args__ = (
        UniqueConstraint('classroom_id', 'subject_id', name='uq_teaching_assignment_classroom_subject'),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    classroom_id = Column(ForeignKey('classrooms.id', ondelete='CASCADE'), nullable=False, index=True)
    subject_id = Column(ForeignKey('subjects.id', ondelete='CASCADE'), nullable=False, index=True)
    teacher_id = Column(ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, index=True)

    classroom = relationship("Classroom", lazy="joined")
    subject = relationship("Subject", lazy="joined")
    teacher = relationship("Employee", lazy="joined")
    schedules = relationship("Schedule", back_populates="teaching_assignment", cascade="all, delete")


class Schedule(TimestampMixin, Base):
    __tablename__ = 'schedules'
    __table_args__ = (
        CheckConstraint('day_of_week BETWEEN 1 AND 7', name='ck_schedule_day_of_week'),
        Index('idx_schedule_day', 'day_of_week'),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    teaching_assignment_id = Column(ForeignKey('teaching_assignments.id', ondelete='CASCADE'), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 1 = Monday ... 7 = Sunday
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)

    teaching_assignment = relationship("TeachingAssignment", back_populates="schedules", lazy="joined")
