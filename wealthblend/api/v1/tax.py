"""/api/tax - Tax record endpoints"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from wealthblend.api.dependencies import Clock, get_clock, get_current_user_id, get_request_id
from wealthblend.api.errors import domain_errors
from wealthblend.api.v1.schemas import TaxRecordCreate, TaxRecordResponse, TaxRecordUpdate
from wealthblend.domain.models import TaxRecord, TaxStatus
from wealthblend.domain.tax import total_income
from wealthblend.infrastructure.database.repositories import TaxRecordRepository, commit
from wealthblend.infrastructure.database.session import get_db
from wealthblend.services.tax import create_tax_record, list_tax_records, update_tax_record
from wealthblend.utils.serialization import dump

router = APIRouter()


def present_tax_record(record: TaxRecord) -> dict:
    return {**dump(record), "total_income": total_income(record.income)}


@router.post("/tax", response_model=TaxRecordResponse, status_code=201)
def create_tax(
    body: TaxRecordCreate,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    """Create a tax record; taxable income and refund/owed are derived"""
    request_id = get_request_id(request)
    with domain_errors(db, request_id):
        record = create_tax_record(
            TaxRecordRepository(db),
            user_id,
            body.model_dump(mode="json", exclude_unset=True),
            clock(),
            request_id,
        )
        commit(db)
    return present_tax_record(record)


@router.get("/tax", response_model=List[TaxRecordResponse])
def list_tax(
    request: Request,
    tax_year: Optional[int] = Query(None, description="Filter by tax year"),
    status: Optional[TaxStatus] = Query(None, description="Filter by filing status"),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    with domain_errors(db, get_request_id(request)):
        records = list_tax_records(TaxRecordRepository(db), user_id, tax_year=tax_year, status=status)
    return [present_tax_record(r) for r in records]


@router.get("/tax/{record_id}", response_model=TaxRecordResponse)
def get_tax(
    record_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    with domain_errors(db, get_request_id(request)):
        record = TaxRecordRepository(db).get(record_id, user_id)
    return present_tax_record(record)


@router.patch("/tax/{record_id}", response_model=TaxRecordResponse)
def update_tax(
    record_id: str,
    body: TaxRecordUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    """Apply a partial update and re-derive"""
    request_id = get_request_id(request)
    with domain_errors(db, request_id):
        record = update_tax_record(
            TaxRecordRepository(db),
            record_id,
            user_id,
            body.model_dump(mode="json", exclude_unset=True),
            clock(),
            request_id,
        )
        commit(db)
    return present_tax_record(record)
