"""Estate plan pipelines and the review sweep"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from wealthblend.config import settings
from wealthblend.domain.estate import derive_estate, needs_review
from wealthblend.domain.exceptions import ValidationError
from wealthblend.domain.models import EstatePlan
from wealthblend.domain.validation import validate_estate_plan
from wealthblend.infrastructure.database.repositories import EstatePlanRepository
from wealthblend.infrastructure.observability.logging import log_record_saved
from wealthblend.infrastructure.observability.metrics import record_saved, validation_failures_counter
from wealthblend.services.common import build_record, merge_patch

RECORD_TYPE = "estate_plan"
DERIVED_FIELDS = ("total_estate_value",)


def _persist(
    repo: EstatePlanRepository,
    plan: EstatePlan,
    now: datetime,
    operation: str,
    request_id: Optional[str],
) -> EstatePlan:
    plan.plan_name = plan.plan_name.strip() if plan.plan_name else plan.plan_name
    for beneficiary in plan.beneficiaries:
        beneficiary.full_name = beneficiary.full_name.strip()
    for document in plan.documents:
        if document.date_created is None:
            document.date_created = now

    validate_estate_plan(plan)
    saved = repo.save(derive_estate(plan, now, settings.review_interval_years), now)

    record_saved(RECORD_TYPE, operation)
    log_record_saved(RECORD_TYPE, saved.id, saved.user_id, operation, request_id)
    return saved


def create_estate_plan(
    repo: EstatePlanRepository,
    user_id: str,
    raw: Dict[str, Any],
    now: datetime,
    request_id: Optional[str] = None,
) -> EstatePlan:
    try:
        plan = build_record(EstatePlan, user_id, raw, DERIVED_FIELDS)
        return _persist(repo, plan, now, "create", request_id)
    except ValidationError:
        validation_failures_counter.labels(record_type=RECORD_TYPE).inc()
        raise


def update_estate_plan(
    repo: EstatePlanRepository,
    plan_id: str,
    user_id: str,
    patch: Dict[str, Any],
    now: datetime,
    request_id: Optional[str] = None,
) -> EstatePlan:
    current = repo.get(plan_id, user_id)
    try:
        plan = merge_patch(current, patch, DERIVED_FIELDS)
        return _persist(repo, plan, now, "update", request_id)
    except ValidationError:
        validation_failures_counter.labels(record_type=RECORD_TYPE).inc()
        raise


def list_estate_plans(repo: EstatePlanRepository, user_id: str, status: Optional[str] = None) -> List[EstatePlan]:
    return repo.list_for_user(user_id, status=status)


def check_estate_review(
    repo: EstatePlanRepository,
    plan_id: str,
    user_id: str,
    now: datetime,
) -> Tuple[EstatePlan, bool]:
    plan = repo.get(plan_id, user_id)
    return plan, needs_review(plan, now)


def find_plans_due_for_review(repo: EstatePlanRepository, now: datetime) -> List[EstatePlan]:
    """Review sweep: non-draft plans whose review date has arrived"""
    return repo.find_needing_review(now)
