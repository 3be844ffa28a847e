from sqlalchemy import Column, Date, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, generate_uuid


ATTENDANCE_STATUSES = ("PRESENT", "SICK", "PERMISSION", "ABSENT")


class AttendanceSession(TimestampMixin, Base):
    __tablename__ = 'attendance_sessions'
    __table_args__ = (
        UniqueConstraint('schedule_id', 'date', name='uq_attendance_session_schedule_date'),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    schedule_id = Column(ForeignKey('schedules.id', ondelete='CASCADE'), nullable=False, index=True)
    date = Column(Date, nullable=False)
    topic = Column(String(255))
    notes = Column(Text)

    schedule = relationship("Schedule", lazy="joined")
    details = relationship("AttendanceDetail", back_populates="session", cascade="all, delete", lazy="selectin")


class AttendanceDetail(TimestampMixin, Base):
    __tablename__ = 'attendance_details'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    attendance_session_id = Column(ForeignKey('attendance_sessions.id', ondelete='CASCADE'), nullable=False, index=True)
    student_id = Column(ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True)
    status = Column(String(10), nullable=False)
    notes = Column(Text)

    session = relationship("AttendanceSession", back_populates="details")
    student = relationship("Student", lazy="joined")
