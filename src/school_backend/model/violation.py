from sqlalchemy import Column, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, generate_uuid


class ViolationCategory(TimestampMixin, Base):
    __tablename__ = 'violation_categories'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    description = Column(Text)

    types = relationship("ViolationType", back_populates="category", cascade="all, delete")


class ViolationType(TimestampMixin, Base):
    __tablename__ = 'violation_types'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    category_id = Column(ForeignKey('violation_categories.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    default_points = Column(Integer, nullable=False, default=0)

    category = relationship("ViolationCategory", back_populates="types", lazy="joined")


class StudentViolation(TimestampMixin, Base):
    __tablename__ = 'student_violations'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    student_id = Column(ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True)
    violation_type_id = Column(ForeignKey('violation_types.id', ondelete='CASCADE'), nullable=False, index=True)
    violation_date = Column(Date, nullable=False)
    # Snapshot of violation_type.default_points at recording time
    points = Column(Integer, nullable=False)
    action_taken = Column(Text)
    notes = Column(Text)

    student = relationship("Student", lazy="joined")
    violation_type = relationship("ViolationType", lazy="joined")
