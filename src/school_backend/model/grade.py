from sqlalchemy import Column, Date, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, generate_uuid


ASSESSMENT_TYPES = ("ASSIGNMENT", "MID_EXAM", "FINAL_EXAM", "QUIZ")


class Assessment(TimestampMixin, Base):
    __tablename__ = 'assessments'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    teaching_assignment_id = Column(ForeignKey('teaching_assignments.id', ondelete='CASCADE'), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)
    max_score = Column(Integer, nullable=False, default=100)
    date = Column(Date, nullable=False)
    description = Column(Text)

    teaching_assignment = relationship("TeachingAssignment", lazy="joined")
    scores = relationship("StudentScore", back_populates="assessment", cascade="all, delete", lazy="selectin")


class StudentScore(TimestampMixin, Base):
    __tablename__ = 'student_scores'
    __table_args__ = (
        UniqueConstraint('assessment_id', 'student_id', name='uq_student_score_assessment_student'),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    assessment_id = Column(ForeignKey('assessments.id', ondelete='CASCADE'), nullable=False, index=True)
    student_id = Column(ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True)
    score = Column(Float, nullable=False, default=0)
    feedback = Column(Text)

    assessment = relationship("Assessment", back_populates="scores")
    student = relationship("Student", lazy="joined")
