from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, generate_uuid


DONATION_TYPES = ("MONEY", "GOODS", "MIXED")
PAYMENT_METHODS = ("CASH", "TRANSFER", "QRIS", "GOODS")


class Donor(TimestampMixin, Base):
    __tablename__ = 'finance_donors'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False, index=True)
    phone = Column(String(20), index=True)
    email = Column(String(320))
    address = Column(Text)
    notes = Column(Text)

    donations = relationship("Donation", back_populates="donor")


class Donation(TimestampMixin, Base):
    __tablename__ = 'finance_donations'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    donor_id = Column(ForeignKey('finance_donors.id', ondelete='RESTRICT'), nullable=False, index=True)
    employee_id = Column(ForeignKey('employees.id', ondelete='RESTRICT'), nullable=False, index=True)
    date = Column(DateTime(True), nullable=False, server_default=func.now(), index=True)
    type = Column(String(10), nullable=False)
    payment_method = Column(String(10), nullable=False)
    total_amount = Column(Numeric(15, 2), nullable=False, default=0)
    description = Column(Text)

    donor = relationship("Donor", back_populates="donations", lazy="joined")
    employee = relationship("Employee", lazy="joined")
    items = relationship("DonationItem", back_populates="donation", cascade="all, delete", lazy="selectin")


class DonationItem(TimestampMixin, Base):
    __tablename__ = 'finance_donation_items'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    donation_id = Column(ForeignKey('finance_donations.id', ondelete='CASCADE'), nullable=False, index=True)
    item_name = Column(String(255), nullable=False)
    quantity = Column(Numeric(10, 2), nullable=False, default=1)
    unit = Column(String(50), nullable=False)
    estimated_value = Column(Numeric(15, 2), nullable=False, default=0)
    notes = Column(Text)

    donation = relationship("Donation", back_populates="items")
