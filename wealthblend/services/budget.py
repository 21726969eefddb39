"""Budget pipelines plus the alert and recurring-rollover sweeps"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

from wealthblend.config import settings
from wealthblend.domain.budget import (
    add_transaction,
    budget_percentage_used,
    derive_budget,
    roll_forward,
    should_alert,
    usage_status,
)
from wealthblend.domain.exceptions import AlertDeliveryError, ValidationError
from wealthblend.domain.models import Budget, BudgetTransaction
from wealthblend.domain.validation import validate_budget
from wealthblend.infrastructure.clients.alerts import AlertClient
from wealthblend.infrastructure.database.repositories import BudgetRepository
from wealthblend.infrastructure.observability.logging import (
    log_alert_dispatched,
    log_record_saved,
    log_status_transition,
)
from wealthblend.infrastructure.observability.metrics import (
    budget_alert_counter,
    record_saved,
    record_status_transition,
    validation_failures_counter,
)
from wealthblend.services.common import build_record, merge_patch
from wealthblend.utils.serialization import load

RECORD_TYPE = "budget"
DERIVED_FIELDS = ("actual_amount",)
APPEND_ONLY_FIELDS = ("transactions",)


def suppression_window() -> timedelta:
    return timedelta(hours=settings.alert_suppression_hours)


def _normalize(budget: Budget, now: datetime) -> None:
    budget.name = budget.name.strip() if budget.name else budget.name

    # Tags behave as a set: trimmed, blanks dropped, first occurrence wins
    tags: List[str] = []
    for tag in budget.tags:
        tag = tag.strip()
        if tag and tag not in tags:
            tags.append(tag)
    budget.tags = tags

    for txn in budget.transactions:
        if txn.date is None:
            txn.date = now


def _save(
    repo: BudgetRepository,
    previous_status: Optional[str],
    budget: Budget,
    now: datetime,
    operation: str,
    request_id: Optional[str],
) -> Budget:
    saved = repo.save(budget, now)

    new_status = saved.status.value
    if previous_status is not None and previous_status != new_status:
        record_status_transition(previous_status, new_status)
        log_status_transition(saved.id, saved.user_id, previous_status, new_status)

    record_saved(RECORD_TYPE, operation)
    log_record_saved(RECORD_TYPE, saved.id, saved.user_id, operation, request_id)
    return saved


def create_budget(
    repo: BudgetRepository,
    user_id: str,
    raw: Dict[str, Any],
    now: datetime,
    request_id: Optional[str] = None,
) -> Budget:
    try:
        budget = build_record(Budget, user_id, raw, DERIVED_FIELDS)
        _normalize(budget, now)
        validate_budget(budget)
    except ValidationError:
        validation_failures_counter.labels(record_type=RECORD_TYPE).inc()
        raise

    return _save(repo, None, derive_budget(budget, now), now, "create", request_id)


def update_budget(
    repo: BudgetRepository,
    budget_id: str,
    user_id: str,
    patch: Dict[str, Any],
    now: datetime,
    request_id: Optional[str] = None,
) -> Budget:
    current = repo.get(budget_id, user_id)
    try:
        budget = merge_patch(current, patch, DERIVED_FIELDS, immutable=APPEND_ONLY_FIELDS)
        _normalize(budget, now)
        validate_budget(budget)
    except ValidationError:
        validation_failures_counter.labels(record_type=RECORD_TYPE).inc()
        raise

    return _save(repo, current.status.value, derive_budget(budget, now), now, "update", request_id)


def add_budget_transaction(
    repo: BudgetRepository,
    budget_id: str,
    user_id: str,
    raw_transaction: Dict[str, Any],
    now: datetime,
    request_id: Optional[str] = None,
) -> Budget:
    """Append one transaction, re-derive actual amount and status, persist"""
    current = repo.get(budget_id, user_id)
    try:
        txn = load(BudgetTransaction, raw_transaction)
        updated = add_transaction(current, txn, now)
    except ValidationError:
        validation_failures_counter.labels(record_type=RECORD_TYPE).inc()
        raise

    return _save(repo, current.status.value, updated, now, "add_transaction", request_id)


def list_budgets(
    repo: BudgetRepository,
    user_id: str,
    year: Optional[int] = None,
    month: Optional[int] = None,
    category: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Budget]:
    return repo.list_for_user(user_id, year=year, month=month, category=category, status=status)


def check_budget_alert(
    repo: BudgetRepository,
    budget_id: str,
    user_id: str,
    now: datetime,
) -> Tuple[Budget, bool]:
    budget = repo.get(budget_id, user_id)
    return budget, should_alert(budget, now, suppression_window())


def find_pending_alerts(repo: BudgetRepository, now: datetime) -> List[Budget]:
    """Budgets the next alert sweep would notify about"""
    window = suppression_window()
    return [budget for budget in repo.find_needing_alerts() if should_alert(budget, now, window)]


def alert_payload(budget: Budget, now: datetime) -> Dict[str, Any]:
    return {
        "event": "BUDGET_ALERT",
        "budget_id": budget.id,
        "user_id": budget.user_id,
        "budget_name": budget.name,
        "percentage_used": budget_percentage_used(budget),
        "usage_status": usage_status(budget).value,
        "sent_at": now.isoformat(),
    }


async def run_alert_sweep(
    repo: BudgetRepository,
    client: AlertClient,
    now: datetime,
    checkpoint: Optional[Callable[[], None]] = None,
) -> List[str]:
    """
    Notify every budget that should alert, stamping `last_alert_sent` on success.

    A failed delivery leaves the budget unstamped so the next sweep retries it.
    `checkpoint` runs after each stamp so a later failure cannot undo it.

    Returns:
        Ids of budgets whose alert was delivered
    """
    delivered: List[str] = []
    for budget in find_pending_alerts(repo, now):
        percentage = budget_percentage_used(budget)
        try:
            await client.send_budget_alert(alert_payload(budget, now))
        except AlertDeliveryError as e:
            budget_alert_counter.labels(outcome="failed").inc()
            log_alert_dispatched(budget.id, budget.user_id, percentage, delivered=False)
            logging.warning(f"Budget alert not delivered: {e}", extra={"record_id": budget.id})
            continue

        budget.alerts.last_alert_sent = now
        repo.save(budget, now)
        if checkpoint is not None:
            checkpoint()

        budget_alert_counter.labels(outcome="delivered").inc()
        log_alert_dispatched(budget.id, budget.user_id, percentage, delivered=True)
        delivered.append(budget.id)

    return delivered


def run_recurring_rollover(repo: BudgetRepository, now: datetime) -> List[Budget]:
    """Advance every overdue recurring budget past `now`"""
    rolled: List[Budget] = []
    for budget in repo.find_overdue_recurring(now):
        saved = repo.save(roll_forward(budget, now), now)
        record_saved(RECORD_TYPE, "rollover")
        rolled.append(saved)
    return rolled
