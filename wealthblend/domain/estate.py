"""Estate plan derivations: asset valuation and review scheduling"""

import copy
from datetime import datetime

from wealthblend.domain.models import EstatePlan, EstatePlanStatus
from wealthblend.utils.date_utils import add_years


def calculated_estate_value(plan: EstatePlan) -> float:
    return sum(asset.estimated_value or 0 for asset in plan.assets)


def derive_estate(plan: EstatePlan, now: datetime, review_interval_years: int = 1) -> EstatePlan:
    """Total the assets and schedule the first review if none is set"""
    plan = copy.deepcopy(plan)
    plan.total_estate_value = calculated_estate_value(plan)

    if not plan.next_review_date:
        plan.next_review_date = add_years(now, review_interval_years)

    return plan


def needs_review(plan: EstatePlan, now: datetime) -> bool:
    return plan.next_review_date is not None and plan.next_review_date <= now


def is_due_for_review(plan: EstatePlan, now: datetime) -> bool:
    """In-memory twin of the review sweep query: drafts are never reviewed"""
    return needs_review(plan, now) and plan.status != EstatePlanStatus.DRAFT
