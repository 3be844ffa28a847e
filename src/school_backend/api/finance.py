from typing import Annotated, List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from school_backend.database import get_db
from school_backend.interface.base import ListQuery
from school_backend.interface.finance import (
    DonationCreate,
    DonationGet,
    DonationQuery,
    DonationUpdate,
    DonorGet,
    DonorUpdate
)
from school_backend.permissions.auth import require_permission
from school_backend.permissions.principal import Principal
from school_backend.permissions.registry import (
    FINANCE_DONATIONS_CREATE,
    FINANCE_DONATIONS_READ,
    FINANCE_DONATIONS_UPDATE,
    FINANCE_DONORS_READ,
    FINANCE_DONORS_UPDATE
)
from school_backend.services.finance import FinanceService

finance_router = APIRouter()


@finance_router.post("/donations", response_model=DonationGet, status_code=status.HTTP_201_CREATED)
def create_donation(
    payload: DonationCreate,
    principal: Annotated[Principal, Depends(require_permission(FINANCE_DONATIONS_CREATE))],
    db: Session = Depends(get_db)
):
    """Record a donation received by the calling employee"""
    return FinanceService(db).create_donation(principal.get_user_id_or_throw(), payload)


@finance_router.get("/donations", response_model=List[DonationGet])
def list_donations(
    principal: Annotated[Principal, Depends(require_permission(FINANCE_DONATIONS_READ))],
    params: DonationQuery = Depends(),
    db: Session = Depends(get_db)
):
    return FinanceService(db).list_donations(params.donor_id, params.type, params.skip, params.limit)


@finance_router.get("/donations/{donation_id}", response_model=DonationGet)
def get_donation(
    donation_id: str,
    principal: Annotated[Principal, Depends(require_permission(FINANCE_DONATIONS_READ))],
    db: Session = Depends(get_db)
):
    return FinanceService(db).get_donation(donation_id)


@finance_router.patch("/donations/{donation_id}", response_model=DonationGet)
def update_donation(
    donation_id: str,
    payload: DonationUpdate,
    principal: Annotated[Principal, Depends(require_permission(FINANCE_DONATIONS_UPDATE))],
    db: Session = Depends(get_db)
):
    return FinanceService(db).update_donation(donation_id, payload)


@finance_router.get("/donors", response_model=List[DonorGet])
def list_donors(
    principal: Annotated[Principal, Depends(require_permission(FINANCE_DONORS_READ))],
    params: ListQuery = Depends(),
    db: Session = Depends(get_db)
):
    return FinanceService(db).list_donors(params.search, params.skip, params.limit)


@finance_router.get("/donors/{donor_id}", response_model=DonorGet)
def get_donor(
    donor_id: str,
    principal: Annotated[Principal, Depends(require_permission(FINANCE_DONORS_READ))],
    db: Session = Depends(get_db)
):
    return FinanceService(db).get_donor(donor_id)


@finance_router.patch("/donors/{donor_id}", response_model=DonorGet)
def update_donor(
    donor_id: str,
    payload: DonorUpdate,
    principal: Annotated[Principal, Depends(require_permission(FINANCE_DONORS_UPDATE))],
    db: Session = Depends(get_db)
):
    return FinanceService(db).update_donor(donor_id, payload)
