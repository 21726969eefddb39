"""/api/estate - Estate plan endpoints"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from wealthblend.api.dependencies import Clock, get_clock, get_current_user_id, get_request_id
from wealthblend.api.errors import domain_errors
from wealthblend.api.v1.schemas import (
    EstatePlanCreate,
    EstatePlanResponse,
    EstatePlanUpdate,
    ReviewCheckResponse,
)
from wealthblend.domain.estate import is_due_for_review
from wealthblend.domain.models import EstatePlanStatus
from wealthblend.infrastructure.database.repositories import EstatePlanRepository, commit
from wealthblend.infrastructure.database.session import get_db
from wealthblend.services.estate import (
    check_estate_review,
    create_estate_plan,
    list_estate_plans,
    update_estate_plan,
)
from wealthblend.utils.serialization import dump

router = APIRouter()


@router.post("/estate", response_model=EstatePlanResponse, status_code=201)
def create_estate(
    body: EstatePlanCreate,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    """Create an estate plan; total value and first review date are derived"""
    request_id = get_request_id(request)
    with domain_errors(db, request_id):
        plan = create_estate_plan(
            EstatePlanRepository(db),
            user_id,
            body.model_dump(mode="json", exclude_unset=True),
            clock(),
            request_id,
        )
        commit(db)
    return dump(plan)


@router.get("/estate", response_model=List[EstatePlanResponse])
def list_estate(
    request: Request,
    status: Optional[EstatePlanStatus] = Query(None, description="Filter by plan status"),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    with domain_errors(db, get_request_id(request)):
        plans = list_estate_plans(EstatePlanRepository(db), user_id, status=status)
    return [dump(p) for p in plans]


@router.get("/estate/reviews/due", response_model=List[EstatePlanResponse])
def list_reviews_due(
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    """Caller's non-draft plans whose review date has arrived"""
    now = clock()
    with domain_errors(db, get_request_id(request)):
        plans = list_estate_plans(EstatePlanRepository(db), user_id)
    return [dump(p) for p in plans if is_due_for_review(p, now)]


@router.get("/estate/{plan_id}", response_model=EstatePlanResponse)
def get_estate(
    plan_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    with domain_errors(db, get_request_id(request)):
        plan = EstatePlanRepository(db).get(plan_id, user_id)
    return dump(plan)


@router.patch("/estate/{plan_id}", response_model=EstatePlanResponse)
def update_estate(
    plan_id: str,
    body: EstatePlanUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    request_id = get_request_id(request)
    with domain_errors(db, request_id):
        plan = update_estate_plan(
            EstatePlanRepository(db),
            plan_id,
            user_id,
            body.model_dump(mode="json", exclude_unset=True),
            clock(),
            request_id,
        )
        commit(db)
    return dump(plan)


@router.get("/estate/{plan_id}/review", response_model=ReviewCheckResponse)
def get_review_status(
    plan_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    with domain_errors(db, get_request_id(request)):
        plan, due = check_estate_review(EstatePlanRepository(db), plan_id, user_id, clock())
    return ReviewCheckResponse(
        plan_id=plan.id,
        needs_review=due,
        next_review_date=plan.next_review_date,
        last_review_date=plan.last_review_date,
    )
