"""Budget derivation engine - actual spend, usage tiers, alerts and recurrence"""

import copy
from datetime import datetime, timedelta
from typing import Optional

from wealthblend.domain.models import (
    Budget,
    BudgetStatus,
    BudgetTransaction,
    Period,
    TransactionType,
    UsageStatus,
)
from wealthblend.domain.money import percentage_used
from wealthblend.domain.validation import validate_transaction
from wealthblend.utils.date_utils import add_frequency, quarter_of, week_of_year

ALERT_SUPPRESSION_WINDOW = timedelta(hours=24)


def total_transactions(budget: Budget) -> float:
    """Expenses add to spend, income transactions offset it"""
    total = 0
    for txn in budget.transactions:
        if txn.type == TransactionType.EXPENSE:
            total += txn.amount
        else:
            total -= txn.amount
    return total


def budget_percentage_used(budget: Budget) -> int:
    return percentage_used(budget.actual_amount, budget.budgeted_amount)


def remaining_amount(budget: Budget) -> float:
    return budget.budgeted_amount - budget.actual_amount


def usage_status(budget: Budget) -> UsageStatus:
    """
    Classify usage against the alert thresholds.

    Tiers, first match wins:
    - exceeded: 100% or more
    - critical: at or above the critical threshold
    - warning:  at or above the warning threshold
    - good:     everything else
    """
    percentage = budget_percentage_used(budget)
    if percentage >= 100:
        return UsageStatus.EXCEEDED
    if percentage >= budget.alerts.critical:
        return UsageStatus.CRITICAL
    if percentage >= budget.alerts.warning:
        return UsageStatus.WARNING
    return UsageStatus.GOOD


def initial_due_date(now: datetime, frequency: Optional[Period]) -> datetime:
    """First due date of a recurring budget; without a frequency it is due immediately"""
    if frequency is None:
        return now
    return add_frequency(now, Period(frequency).value)


def _default_period_fields(budget: Budget, now: datetime) -> None:
    if not budget.year:
        budget.year = now.year

    if budget.period == Period.MONTHLY and not budget.month:
        budget.month = now.month
    elif budget.period == Period.QUARTERLY and not budget.quarter:
        budget.quarter = quarter_of(now.month)
    elif budget.period == Period.WEEKLY and not budget.week:
        # Counted from Jan 1 of the record's year, not of `now`. A record year
        # other than now's can push the count outside 1..53, the range
        # validate_budget accepts, so it is clamped to that range.
        budget.week = min(max(week_of_year(now, budget.year), 1), 53)


def _apply_status_transition(budget: Budget) -> None:
    if budget_percentage_used(budget) >= 100:
        budget.status = BudgetStatus.EXCEEDED
    elif budget.status == BudgetStatus.EXCEEDED:
        budget.status = BudgetStatus.ACTIVE


def derive_budget(budget: Budget, now: datetime) -> Budget:
    """
    Recompute every derived field of a budget.

    Steps:
    1. Default `year` and the anchor field matching `period` (only if absent)
    2. `actual_amount` from the transaction list
    3. Auto transition to/from `exceeded` based on usage
    4. Default the first recurring due date (only if absent)

    Returns a new Budget; the input is not modified.
    """
    budget = copy.deepcopy(budget)

    _default_period_fields(budget, now)

    budget.actual_amount = total_transactions(budget)

    _apply_status_transition(budget)

    recurring = budget.recurring_settings
    if recurring.is_recurring and not recurring.next_due_date:
        recurring.next_due_date = initial_due_date(now, recurring.frequency)

    return budget


def add_transaction(budget: Budget, txn: BudgetTransaction, now: datetime) -> Budget:
    """Append a validated transaction and re-derive"""
    validate_transaction(txn)

    budget = copy.deepcopy(budget)
    txn = copy.deepcopy(txn)
    if txn.date is None:
        txn.date = now
    budget.transactions.append(txn)

    return derive_budget(budget, now)


def should_alert(
    budget: Budget,
    now: datetime,
    suppression_window: timedelta = ALERT_SUPPRESSION_WINDOW,
) -> bool:
    """
    Whether a usage alert should go out now.

    At most one alert per suppression window: an alert sent less than the
    window ago suppresses; exactly the window ago no longer does. The caller
    stamps `alerts.last_alert_sent` after dispatching.
    """
    alerts = budget.alerts
    if not alerts.enabled:
        return False

    if alerts.last_alert_sent and (now - alerts.last_alert_sent) < suppression_window:
        return False

    return budget_percentage_used(budget) >= alerts.warning


def needs_alert(budget: Budget) -> bool:
    """In-memory twin of the alert sweep query"""
    return (
        budget.alerts.enabled
        and budget.status == BudgetStatus.ACTIVE
        and budget.actual_amount >= 0  # always true for derived budgets
    )


def is_overdue_recurring(budget: Budget, now: datetime) -> bool:
    recurring = budget.recurring_settings
    return (
        recurring.is_recurring
        and recurring.next_due_date is not None
        and recurring.next_due_date <= now
    )


def roll_forward(budget: Budget, now: datetime) -> Budget:
    """
    Advance an overdue recurring budget to its next due date after `now`.

    Steps by whole frequencies (falling back to the budget period). If the
    next due date would land after `end_date`, recurrence ends and the due
    date is left where it was.
    """
    budget = copy.deepcopy(budget)
    if not is_overdue_recurring(budget, now):
        return budget

    recurring = budget.recurring_settings
    frequency = Period(recurring.frequency or budget.period).value

    due = recurring.next_due_date
    while due <= now:
        due = add_frequency(due, frequency)

    if recurring.end_date is not None and due > recurring.end_date:
        recurring.is_recurring = False
    else:
        recurring.next_due_date = due

    return budget
