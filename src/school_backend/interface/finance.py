from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .base import BaseEntityGet, ListQuery, not_null

DonationType = Literal["MONEY", "GOODS", "MIXED"]
PaymentMethod = Literal["CASH", "TRANSFER", "QRIS", "GOODS"]


class DonorUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    check_required = not_null("name")


class DonorGet(BaseEntityGet):
    id: str
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class DonationItemInput(BaseModel):
    item_name: str = Field(min_length=1, max_length=255)
    quantity: Decimal = Field(Decimal("1"), gt=0)
    unit: str = Field(min_length=1, max_length=50)
    estimated_value: Decimal = Field(Decimal("0"), ge=0)
    notes: Optional[str] = None


class DonationItemGet(DonationItemInput):
    id: str

    model_config = ConfigDict(from_attributes=True)


class DonationCreate(BaseModel):
    donor_name: str = Field(min_length=1, max_length=255)
    donor_phone: Optional[str] = Field(None, max_length=20, description="Used to find a returning donor")
    donor_email: Optional[EmailStr] = None
    donor_address: Optional[str] = None
    type: DonationType
    payment_method: PaymentMethod
    total_amount: Decimal = Field(Decimal("0"), ge=0)
    description: Optional[str] = None
    items: List[DonationItemInput] = Field(default_factory=list)


class DonationUpdate(BaseModel):
    date: Optional[datetime] = None
    type: Optional[DonationType] = None
    payment_method: Optional[PaymentMethod] = None
    total_amount: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = None
    items: Optional[List[DonationItemInput]] = Field(None, description="Replaces all items when given")


class DonationGet(BaseEntityGet):
    id: str
    donor_id: str
    employee_id: str
    date: datetime
    type: str
    payment_method: str
    total_amount: Decimal
    description: Optional[str] = None
    donor: Optional[DonorGet] = None
    items: List[DonationItemGet] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class DonationQuery(ListQuery):
    donor_id: Optional[str] = None
    type: Optional[DonationType] = None
