"""
Repositories for students, parents, guardians and employees.

All four entities store their national ID (NIK) encrypted and look it up
through the ``nik_hash`` blind index column.
"""

from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from .base import BaseRepository
from ..model.people import Employee, Guardian, Parent, Student, StudentParent


class _PersonRepository(BaseRepository):

    def find_by_nik_hash(self, nik_hash: str) -> Optional[object]:
        return self.find_one_by(nik_hash=nik_hash)

    def find_by_user_id(self, user_id: str) -> Optional[object]:
        return self.find_one_by(user_id=user_id)

    def search(self, search: Optional[str] = None, limit: Optional[int] = None, offset: Optional[int] = None) -> List:
        query = self.db.query(self.model)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(*[
                getattr(self.model, column).ilike(pattern)
                for column in self.search_columns
            ]))
        query = query.order_by(self.model.full_name)
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()


class StudentRepository(_PersonRepository):
    """Repository for Student entity database operations."""

    search_columns = ("full_name", "nisn", "nim")

    def __init__(self, db: Session):
        super().__init__(db, Student)

    def find_by_nisn(self, nisn: str) -> Optional[Student]:
        return self.find_one_by(nisn=nisn)

    def find_by_nim(self, nim: str) -> Optional[Student]:
        return self.find_one_by(nim=nim)

    def replace_parents(self, student: Student, links: List[StudentParent]) -> None:
        """Swap the full parent link set of a student (not committed)."""
        self.db.query(StudentParent).filter(
            StudentParent.student_id == student.id
        ).delete(synchronize_session="fetch")
        for link in links:
            self.db.add(link)
        self.db.flush()
        self.db.expire(student, ["parents"])


class ParentRepository(_PersonRepository):
    """Repository for Parent entity database operations."""

    search_columns = ("full_name", "phone_number", "email")

    def __init__(self, db: Session):
        super().__init__(db, Parent)

    def find_by_phone(self, phone_number: str) -> Optional[Parent]:
        return self.find_one_by(phone_number=phone_number)

    def find_by_email(self, email: str) -> Optional[Parent]:
        return self.find_one_by(email=email)

    def find_by_ids(self, ids: List[str]) -> List[Parent]:
        if not ids:
            return []
        return self.db.query(Parent).filter(Parent.id.in_(ids)).all()


class GuardianRepository(_PersonRepository):
    """Repository for Guardian entity database operations."""

    search_columns = ("full_name", "phone_number", "email")

    def __init__(self, db: Session):
        super().__init__(db, Guardian)

    def find_by_phone(self, phone_number: str) -> Optional[Guardian]:
        return self.find_one_by(phone_number=phone_number)

    def find_by_email(self, email: str) -> Optional[Guardian]:
        return self.find_one_by(email=email)


class EmployeeRepository(_PersonRepository):
    """Repository for Employee entity database operations."""

    search_columns = ("full_name", "nip", "job_title")

    def __init__(self, db: Session):
        super().__init__(db, Employee)

    def find_by_nip(self, nip: str) -> Optional[Employee]:
        return self.find_one_by(nip=nip)

    def find_by_phone(self, phone_number: str) -> Optional[Employee]:
        return self.find_one_by(phone_number=phone_number)
