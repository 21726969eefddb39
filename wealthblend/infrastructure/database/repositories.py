"""Data access layer for financial records"""

from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from wealthblend.domain.exceptions import NotFoundError, StoreUnavailableError, ValidationError
from wealthblend.domain.models import Budget, BudgetStatus, EstatePlan, EstatePlanStatus, TaxRecord
from wealthblend.infrastructure.database.mappers import (
    apply_budget,
    apply_estate_plan,
    apply_tax_record,
    budget_from_row,
    estate_plan_from_row,
    tax_record_from_row,
)
from wealthblend.infrastructure.database.models import BudgetRow, EstatePlanRow, TaxRecordRow


@contextmanager
def store_errors() -> Iterator[None]:
    """Translate driver failures into domain exceptions"""
    try:
        yield
    except IntegrityError as e:
        raise ValidationError("record", f"violates a store constraint: {e.orig}") from e
    except OperationalError as e:
        raise StoreUnavailableError(f"Record store unavailable: {e.orig}") from e


def commit(db: Session) -> None:
    """Commit the unit of work, with driver failures translated like any other store call"""
    with store_errors():
        db.commit()


def _filter_value(value):
    return getattr(value, "value", value)


class TaxRecordRepository:
    """Repository for tax records"""

    record_type = "tax_record"

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, record_id: str, user_id: Optional[str] = None) -> TaxRecordRow:
        with store_errors():
            row = self.db.get(TaxRecordRow, record_id)
        # Another user's record is indistinguishable from a missing one
        if row is None or (user_id is not None and row.user_id != user_id):
            raise NotFoundError(self.record_type, record_id)
        return row

    def get(self, record_id: str, user_id: Optional[str] = None) -> TaxRecord:
        return tax_record_from_row(self._get_row(record_id, user_id))

    def save(self, record: TaxRecord, now: datetime) -> TaxRecord:
        """Insert or update; derived fields are stored exactly as given"""
        with store_errors():
            if record.id is not None:
                row = self._get_row(record.id)
            else:
                row = TaxRecordRow(user_id=record.user_id, created_at=now)
                self.db.add(row)
            apply_tax_record(row, record)
            row.updated_at = now
            self.db.flush()
            return tax_record_from_row(row)

    def list_for_user(
        self,
        user_id: str,
        tax_year: Optional[int] = None,
        status: Optional[str] = None,
    ) -> List[TaxRecord]:
        """Fetch a user's tax records, most recent year first"""
        with store_errors():
            query = self.db.query(TaxRecordRow).filter(TaxRecordRow.user_id == user_id)
            if tax_year is not None:
                query = query.filter(TaxRecordRow.tax_year == tax_year)
            if status is not None:
                query = query.filter(TaxRecordRow.status == _filter_value(status))
            rows = query.order_by(TaxRecordRow.tax_year.desc()).all()
        return [tax_record_from_row(row) for row in rows]


class BudgetRepository:
    """Repository for budgets and their transactions"""

    record_type = "budget"

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, record_id: str, user_id: Optional[str] = None) -> BudgetRow:
        with store_errors():
            row = self.db.get(BudgetRow, record_id)
        if row is None or (user_id is not None and row.user_id != user_id):
            raise NotFoundError(self.record_type, record_id)
        return row

    def get(self, record_id: str, user_id: Optional[str] = None) -> Budget:
        return budget_from_row(self._get_row(record_id, user_id))

    def save(self, budget: Budget, now: datetime) -> Budget:
        with store_errors():
            if budget.id is not None:
                row = self._get_row(budget.id)
            else:
                row = BudgetRow(user_id=budget.user_id, created_at=now)
                self.db.add(row)
            apply_budget(row, budget)
            row.updated_at = now
            self.db.flush()
            return budget_from_row(row)

    def list_for_user(
        self,
        user_id: str,
        year: Optional[int] = None,
        month: Optional[int] = None,
        category: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Budget]:
        """Fetch a user's budgets, most recent period first"""
        with store_errors():
            query = self.db.query(BudgetRow).filter(BudgetRow.user_id == user_id)
            if year is not None:
                query = query.filter(BudgetRow.year == year)
            if month is not None:
                query = query.filter(BudgetRow.month == month)
            if category is not None:
                query = query.filter(BudgetRow.category == _filter_value(category))
            if status is not None:
                query = query.filter(BudgetRow.status == _filter_value(status))
            rows = query.order_by(BudgetRow.year.desc(), BudgetRow.month.desc()).all()
        return [budget_from_row(row) for row in rows]

    def find_needing_alerts(self) -> List[Budget]:
        """Active budgets with alerts enabled, across all users"""
        with store_errors():
            rows = (
                self.db.query(BudgetRow)
                .filter(BudgetRow.alerts_enabled.is_(True))
                .filter(BudgetRow.status == BudgetStatus.ACTIVE.value)
                .filter(BudgetRow.actual_amount >= 0)  # always true for derived budgets
                .all()
            )
        return [budget_from_row(row) for row in rows]

    def find_overdue_recurring(self, now: datetime) -> List[Budget]:
        """Recurring budgets whose next due date is at or before `now`"""
        with store_errors():
            rows = (
                self.db.query(BudgetRow)
                .filter(BudgetRow.is_recurring.is_(True))
                .filter(BudgetRow.next_due_date <= now)
                .order_by(BudgetRow.next_due_date)
                .all()
            )
        return [budget_from_row(row) for row in rows]


class EstatePlanRepository:
    """Repository for estate plans and their assets"""

    record_type = "estate_plan"

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, record_id: str, user_id: Optional[str] = None) -> EstatePlanRow:
        with store_errors():
            row = self.db.get(EstatePlanRow, record_id)
        if row is None or (user_id is not None and row.user_id != user_id):
            raise NotFoundError(self.record_type, record_id)
        return row

    def get(self, record_id: str, user_id: Optional[str] = None) -> EstatePlan:
        return estate_plan_from_row(self._get_row(record_id, user_id))

    def save(self, plan: EstatePlan, now: datetime) -> EstatePlan:
        with store_errors():
            if plan.id is not None:
                row = self._get_row(plan.id)
            else:
                row = EstatePlanRow(user_id=plan.user_id, created_at=now)
                self.db.add(row)
            apply_estate_plan(row, plan)
            row.updated_at = now
            self.db.flush()
            return estate_plan_from_row(row)

    def list_for_user(self, user_id: str, status: Optional[str] = None) -> List[EstatePlan]:
        with store_errors():
            query = self.db.query(EstatePlanRow).filter(EstatePlanRow.user_id == user_id)
            if status is not None:
                query = query.filter(EstatePlanRow.status == _filter_value(status))
            rows = query.order_by(EstatePlanRow.created_at.desc()).all()
        return [estate_plan_from_row(row) for row in rows]

    def find_needing_review(self, now: datetime) -> List[EstatePlan]:
        """Non-draft plans whose next review date has arrived"""
        with store_errors():
            rows = (
                self.db.query(EstatePlanRow)
                .filter(EstatePlanRow.next_review_date <= now)
                .filter(EstatePlanRow.status != EstatePlanStatus.DRAFT.value)
                .order_by(EstatePlanRow.next_review_date)
                .all()
            )
        return [estate_plan_from_row(row) for row in rows]
