from sqlalchemy import (
    CheckConstraint, Column, Date, DateTime, ForeignKey, Index, String, Text, func
)
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, generate_uuid


GUARDIAN_TYPE_PARENT = "parent"
GUARDIAN_TYPE_GUARDIAN = "guardian"


class AddressMixin:
    address = Column(Text)
    rt = Column(String(5))
    rw = Column(String(5))
    sub_district = Column(String(255))
    district = Column(String(255))
    city = Column(String(255))
    province = Column(String(255))
    postal_code = Column(String(10))


class Student(AddressMixin, TimestampMixin, Base):
    __tablename__ = 'students'
    __table_args__ = (
        CheckConstraint(
            "(guardian_id IS NULL AND guardian_type IS NULL) OR "
            "(guardian_id IS NOT NULL AND guardian_type IN ('parent', 'guardian'))",
            name='ck_student_guardian_ref'
        ),
        Index('idx_student_guardian', 'guardian_id', 'guardian_type'),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(ForeignKey('users.id', ondelete='SET NULL'), unique=True)
    full_name = Column(String(255), nullable=False)
    # Ciphertext (base64), see school_backend.encryption
    no_kk = Column(Text)
    nik = Column(Text)
    nik_hash = Column(String(64), unique=True)
    nisn = Column(String(20), unique=True)
    nim = Column(String(20), unique=True)
    gender = Column(String(10))
    place_of_birth = Column(String(255))
    date_of_birth = Column(Date)

    # Polymorphic pointer into parents or guardians, both NULL when unset
    guardian_id = Column(String(36))
    guardian_type = Column(String(20))

    user = relationship("User", lazy="select")
    parents = relationship("StudentParent", back_populates="student", cascade="all, delete", lazy="selectin")
    classrooms = relationship("Classroom", secondary="student_classroom", back_populates="students")


class Parent(AddressMixin, TimestampMixin, Base):
    __tablename__ = 'parents'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(ForeignKey('users.id', ondelete='SET NULL'), unique=True)
    full_name = Column(String(255), nullable=False)
    nik = Column(Text)
    nik_hash = Column(String(64), unique=True)
    gender = Column(String(10))
    place_of_birth = Column(String(255))
    date_of_birth = Column(Date)
    life_status = Column(String(20), nullable=False, default="alive", server_default="alive")
    marital_status = Column(String(20))
    phone_number = Column(String(20), unique=True)
    email = Column(String(320), unique=True)
    education_level = Column(String(50))
    occupation = Column(String(255))
    income_range = Column(String(50))

    user = relationship("User", lazy="select")
    children = relationship("StudentParent", back_populates="parent", cascade="all, delete")


class Guardian(AddressMixin, TimestampMixin, Base):
    __tablename__ = 'guardians'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(ForeignKey('users.id', ondelete='SET NULL'), unique=True)
    full_name = Column(String(255), nullable=False)
    nik = Column(Text)
    nik_hash = Column(String(64), unique=True)
    gender = Column(String(10))
    phone_number = Column(String(20), unique=True, nullable=False)
    email = Column(String(320), unique=True)
    relationship_to_student = Column(String(50))

    user = relationship("User", lazy="select")


class StudentParent(Base):
    __tablename__ = 'student_parent'

    student_id = Column(ForeignKey('students.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    parent_id = Column(ForeignKey('parents.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    relationship_type = Column(String(20), nullable=False)
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())

    student = relationship("Student", back_populates="parents")
    parent = relationship("Parent", back_populates="children", lazy="joined")


class Employee(TimestampMixin, Base):
    __tablename__ = 'employees'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(ForeignKey('users.id', ondelete='SET NULL'), unique=True)
    full_name = Column(String(255), nullable=False)
    nip = Column(String(30), unique=True)
    job_title = Column(String(255), nullable=False)
    nik = Column(Text)
    nik_hash = Column(String(64), unique=True)
    gender = Column(String(10))
    phone_number = Column(String(20), unique=True)
    address = Column(Text)
    date_of_birth = Column(Date)
    join_date = Column(Date)
    employment_status = Column(String(20))

    user = relationship("User", lazy="select")
