"""/api/budget - Budget endpoints, transactions and alert checks"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from wealthblend.api.dependencies import Clock, get_clock, get_current_user_id, get_request_id
from wealthblend.api.errors import domain_errors
from wealthblend.api.v1.schemas import (
    AlertCheckResponse,
    BudgetCreate,
    BudgetResponse,
    BudgetTransactionSchema,
    BudgetUpdate,
)
from wealthblend.domain.budget import (
    budget_percentage_used,
    is_overdue_recurring,
    needs_alert,
    remaining_amount,
    should_alert,
    total_transactions,
    usage_status,
)
from wealthblend.domain.models import Budget, BudgetCategory, BudgetStatus
from wealthblend.infrastructure.database.repositories import BudgetRepository, commit
from wealthblend.infrastructure.database.session import get_db
from wealthblend.services.budget import (
    add_budget_transaction,
    check_budget_alert,
    create_budget,
    list_budgets,
    suppression_window,
    update_budget,
)
from wealthblend.utils.serialization import dump

router = APIRouter()


def present_budget(budget: Budget) -> dict:
    return {
        **dump(budget),
        "remaining_amount": remaining_amount(budget),
        "percentage_used": budget_percentage_used(budget),
        "usage_status": usage_status(budget).value,
        "total_transactions": total_transactions(budget),
    }


@router.post("/budget", response_model=BudgetResponse, status_code=201)
def create(
    body: BudgetCreate,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    """
    Create a budget.

    Period anchors, actual amount, status and the first recurring due date
    are derived from the clock and the transaction list.
    """
    request_id = get_request_id(request)
    with domain_errors(db, request_id):
        budget = create_budget(
            BudgetRepository(db),
            user_id,
            body.model_dump(mode="json", exclude_unset=True),
            clock(),
            request_id,
        )
        commit(db)
    return present_budget(budget)


@router.get("/budget", response_model=List[BudgetResponse])
def list_all(
    request: Request,
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    category: Optional[BudgetCategory] = Query(None),
    status: Optional[BudgetStatus] = Query(None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    with domain_errors(db, get_request_id(request)):
        budgets = list_budgets(
            BudgetRepository(db), user_id, year=year, month=month, category=category, status=status
        )
    return [present_budget(b) for b in budgets]


@router.get("/budget/alerts/pending", response_model=List[BudgetResponse])
def list_pending_alerts(
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    """Caller's budgets the next alert sweep would notify about"""
    now = clock()
    window = suppression_window()
    with domain_errors(db, get_request_id(request)):
        budgets = list_budgets(BudgetRepository(db), user_id)
    return [present_budget(b) for b in budgets if needs_alert(b) and should_alert(b, now, window)]


@router.get("/budget/recurring/overdue", response_model=List[BudgetResponse])
def list_overdue_recurring(
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    now = clock()
    with domain_errors(db, get_request_id(request)):
        budgets = list_budgets(BudgetRepository(db), user_id)
    return [present_budget(b) for b in budgets if is_overdue_recurring(b, now)]


@router.get("/budget/{budget_id}", response_model=BudgetResponse)
def get_one(
    budget_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    with domain_errors(db, get_request_id(request)):
        budget = BudgetRepository(db).get(budget_id, user_id)
    return present_budget(budget)


@router.patch("/budget/{budget_id}", response_model=BudgetResponse)
def update(
    budget_id: str,
    body: BudgetUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    request_id = get_request_id(request)
    with domain_errors(db, request_id):
        budget = update_budget(
            BudgetRepository(db),
            budget_id,
            user_id,
            body.model_dump(mode="json", exclude_unset=True),
            clock(),
            request_id,
        )
        commit(db)
    return present_budget(budget)


@router.post("/budget/{budget_id}/transactions", response_model=BudgetResponse, status_code=201)
def add_transaction(
    budget_id: str,
    body: BudgetTransactionSchema,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    """Append a transaction; actual amount and status are re-derived"""
    request_id = get_request_id(request)
    with domain_errors(db, request_id):
        budget = add_budget_transaction(
            BudgetRepository(db),
            budget_id,
            user_id,
            body.model_dump(mode="json", exclude_unset=True),
            clock(),
            request_id,
        )
        commit(db)
    return present_budget(budget)


@router.get("/budget/{budget_id}/alert", response_model=AlertCheckResponse)
def get_alert_status(
    budget_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    """Whether an alert is due; does not stamp last_alert_sent"""
    with domain_errors(db, get_request_id(request)):
        budget, due = check_budget_alert(BudgetRepository(db), budget_id, user_id, clock())
    return AlertCheckResponse(
        budget_id=budget.id,
        should_alert=due,
        percentage_used=budget_percentage_used(budget),
        usage_status=usage_status(budget),
        last_alert_sent=budget.alerts.last_alert_sent,
    )
