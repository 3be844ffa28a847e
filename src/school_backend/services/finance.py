"""
Donations received by the school and the donors who made them.
"""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from ..api.exceptions import UnauthorizedException
from ..database import transaction
from ..interface.finance import DonationCreate, DonationItemInput, DonationUpdate, DonorUpdate
from ..model.finance import Donation, DonationItem, Donor
from ..repositories.finance import DonationRepository, DonorRepository
from ..repositories.people import EmployeeRepository
from .base import get_or_404, patch_fields, repository_errors

logger = logging.getLogger(__name__)


def _items(entries: List[DonationItemInput]) -> List[DonationItem]:
    return [DonationItem(**entry.model_dump()) for entry in entries]


class FinanceService:

    def __init__(self, db: Session):
        self.db = db
        self.donors = DonorRepository(db)
        self.donations = DonationRepository(db)
        self.employees = EmployeeRepository(db)

    # Donors

    def list_donors(self, search: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[Donor]:
        return self.donors.search(search, limit=limit, offset=skip)

    def get_donor(self, donor_id: str) -> Donor:
        return get_or_404(self.donors, donor_id, "donor not found")

    def update_donor(self, donor_id: str, payload: DonorUpdate) -> Donor:
        donor = self.get_donor(donor_id)
        with repository_errors():
            return self.donors.save(donor, patch_fields(payload))

    # Donations

    def create_donation(self, user_id: str, payload: DonationCreate) -> Donation:
        """
        Record a donation received by the employee linked to user_id.

        A returning donor is matched by phone and name, then by exact name;
        otherwise a new donor is created.
        """
        employee = self.employees.find_by_user_id(user_id)
        if employee is None:
            raise UnauthorizedException("user is not associated with an employee record")

        with repository_errors(), transaction(self.db):
            donor = self._find_or_create_donor(payload)
            donation = Donation(
                donor_id=donor.id,
                employee_id=employee.id,
                type=payload.type,
                payment_method=payload.payment_method,
                total_amount=payload.total_amount,
                description=payload.description
            )
            donation.items = _items(payload.items)
            self.donations.add(donation)

        self.db.refresh(donation)
        logger.info(f"Donation {donation.id} recorded by employee {employee.id}")
        return donation

    def list_donations(self, donor_id: Optional[str] = None, type: Optional[str] = None,
                       skip: int = 0, limit: int = 100) -> List[Donation]:
        return self.donations.search(donor_id=donor_id, type=type, limit=limit, offset=skip)

    def get_donation(self, donation_id: str) -> Donation:
        return get_or_404(self.donations, donation_id, "donation not found")

    def update_donation(self, donation_id: str, payload: DonationUpdate) -> Donation:
        donation = self.get_donation(donation_id)
        updates = {key: value for key, value in patch_fields(payload).items() if value is not None}
        items = updates.pop("items", None)

        with repository_errors(), transaction(self.db):
            for key, value in updates.items():
                setattr(donation, key, value)
            if items is not None:
                self.db.query(DonationItem).filter(
                    DonationItem.donation_id == donation.id
                ).delete(synchronize_session="fetch")
                for entry in payload.items:
                    self.db.add(DonationItem(donation_id=donation.id, **entry.model_dump()))
                self.db.flush()
                self.db.expire(donation, ["items"])

        self.db.refresh(donation)
        return donation

    def _find_or_create_donor(self, payload: DonationCreate) -> Donor:
        donor = None
        if payload.donor_phone:
            donor = self.donors.find_by_phone_and_name(payload.donor_phone, payload.donor_name)
        if donor is None:
            donor = self.donors.find_by_name(payload.donor_name)
        if donor is None:
            donor = self.donors.add(Donor(
                name=payload.donor_name,
                phone=payload.donor_phone,
                email=payload.donor_email,
                address=payload.donor_address
            ))
            self.donors.flush()
        return donor
