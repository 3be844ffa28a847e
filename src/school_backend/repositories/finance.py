"""
Donor and donation repositories.
"""

from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from .base import BaseRepository
from ..model.finance import Donation, Donor


class DonorRepository(BaseRepository[Donor]):

    def __init__(self, db: Session):
        super().__init__(db, Donor)

    def find_by_phone_and_name(self, phone: str, name: str) -> Optional[Donor]:
        return self.find_one_by(phone=phone, name=name)

    def find_by_name(self, name: str) -> Optional[Donor]:
        return self.find_one_by(name=name)

    def search(self, search: Optional[str] = None, limit: Optional[int] = None, offset: Optional[int] = None) -> List[Donor]:
        query = self.db.query(Donor)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Donor.name.ilike(pattern), Donor.phone.ilike(pattern)))
        query = query.order_by(Donor.name)
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()


class DonationRepository(BaseRepository[Donation]):

    def __init__(self, db: Session):
        super().__init__(db, Donation)

    def search(self, donor_id: Optional[str] = None, type: Optional[str] = None,
               limit: Optional[int] = None, offset: Optional[int] = None) -> List[Donation]:
        query = self.db.query(Donation)
        if donor_id:
            query = query.filter(Donation.donor_id == donor_id)
        if type:
            query = query.filter(Donation.type == type)
        query = query.order_by(Donation.date.desc())
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()
