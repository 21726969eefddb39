"""
Input validation for financial records.

Every check raises ValidationError naming the offending field (as a dotted
path, e.g. ``transactions[2].amount``) and the constraint it violates.
Validation runs before any derivation; nothing here coerces values.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Type

from wealthblend.domain.exceptions import ValidationError
from wealthblend.domain.models import (
    AssetType,
    Budget,
    BudgetCategory,
    BudgetStatus,
    BudgetTransaction,
    EstateDocumentStatus,
    EstateDocumentType,
    EstatePlan,
    EstatePlanStatus,
    FilingStatus,
    Period,
    PlanType,
    Relationship,
    TaxRecord,
    TaxStatus,
    TransactionType,
)
from wealthblend.domain.money import require_finite, validate_percentage

MIN_YEAR = 2000

TAX_NOTES_MAX = 1000
BUDGET_NAME_MAX = 200
BUDGET_DESCRIPTION_MAX = 500
TAG_MAX = 50
TRANSACTION_DESCRIPTION_MAX = 200
TRANSACTION_NOTES_MAX = 300
PLAN_NAME_MAX = 200
ASSET_DESCRIPTION_MAX = 500
ESTATE_NOTES_MAX = 2000


def _require_enum(field: str, value: Any, enum_cls: Type[Enum]) -> None:
    allowed = [member.value for member in enum_cls]
    if value is None:
        raise ValidationError(field, "is required")
    raw = value.value if isinstance(value, Enum) else value
    if raw not in allowed:
        raise ValidationError(field, f"must be one of: {', '.join(allowed)}")


def _require_text(field: str, value: Optional[str], max_length: Optional[int] = None) -> None:
    if value is None or not str(value).strip():
        raise ValidationError(field, "is required")
    _max_length(field, value, max_length)


def _max_length(field: str, value: Optional[str], max_length: Optional[int]) -> None:
    if value is not None and max_length is not None and len(value) > max_length:
        raise ValidationError(field, f"cannot exceed {max_length} characters")


def _non_negative(field: str, value: Optional[float]) -> None:
    require_finite(field, value)
    if value is not None and value < 0:
        raise ValidationError(field, "cannot be negative")


def _in_range(field: str, value: Optional[int], low: int, high: int) -> None:
    if value is not None and not low <= value <= high:
        raise ValidationError(field, f"must be between {low} and {high}")


def validate_tax_record(record: TaxRecord, now: datetime) -> None:
    """Tax years run from 2000 through next calendar year"""
    if record.tax_year is None:
        raise ValidationError("tax_year", "is required")
    _in_range("tax_year", record.tax_year, MIN_YEAR, now.year + 1)

    _require_enum("filing_status", record.filing_status, FilingStatus)
    _require_enum("status", record.status, TaxStatus)

    for name in ("wages", "dividends", "capital_gains", "business_income", "other_income"):
        _non_negative(f"income.{name}", getattr(record.income, name))
    for name in ("standard_deduction", "itemized_deductions", "total_deductions"):
        require_finite(f"deductions.{name}", getattr(record.deductions, name))
    require_finite("tax_owed", record.tax_owed)
    require_finite("tax_paid", record.tax_paid)

    _max_length("notes", record.notes, TAX_NOTES_MAX)


def validate_transaction(txn: BudgetTransaction, field: str = "transaction") -> None:
    _require_text(f"{field}.description", txn.description, TRANSACTION_DESCRIPTION_MAX)
    if txn.amount is None:
        raise ValidationError(f"{field}.amount", "is required")
    _non_negative(f"{field}.amount", txn.amount)
    _require_enum(f"{field}.type", txn.type, TransactionType)
    _max_length(f"{field}.notes", txn.notes, TRANSACTION_NOTES_MAX)


def validate_budget(budget: Budget) -> None:
    _require_text("name", budget.name, BUDGET_NAME_MAX)
    _require_enum("category", budget.category, BudgetCategory)

    if budget.budgeted_amount is None:
        raise ValidationError("budgeted_amount", "is required")
    _non_negative("budgeted_amount", budget.budgeted_amount)

    _require_enum("period", budget.period, Period)
    _require_enum("status", budget.status, BudgetStatus)

    if budget.year is not None and budget.year < MIN_YEAR:
        raise ValidationError("year", f"must be {MIN_YEAR} or later")
    _in_range("month", budget.month, 1, 12)
    _in_range("week", budget.week, 1, 53)
    _in_range("quarter", budget.quarter, 1, 4)

    _max_length("description", budget.description, BUDGET_DESCRIPTION_MAX)
    for i, tag in enumerate(budget.tags):
        _max_length(f"tags[{i}]", tag, TAG_MAX)

    for i, txn in enumerate(budget.transactions):
        validate_transaction(txn, field=f"transactions[{i}]")

    validate_percentage("alerts.warning", budget.alerts.warning)
    validate_percentage("alerts.critical", budget.alerts.critical)

    frequency = budget.recurring_settings.frequency
    if frequency is not None:
        _require_enum("recurring_settings.frequency", frequency, Period)


def validate_estate_plan(plan: EstatePlan) -> None:
    _require_text("plan_name", plan.plan_name, PLAN_NAME_MAX)
    _require_enum("plan_type", plan.plan_type, PlanType)
    _require_enum("status", plan.status, EstatePlanStatus)

    for i, asset in enumerate(plan.assets):
        prefix = f"assets[{i}]"
        _require_enum(f"{prefix}.type", asset.type, AssetType)
        _require_text(f"{prefix}.description", asset.description, ASSET_DESCRIPTION_MAX)
        if asset.estimated_value is None:
            raise ValidationError(f"{prefix}.estimated_value", "is required")
        _non_negative(f"{prefix}.estimated_value", asset.estimated_value)
        for j, heir in enumerate(asset.beneficiaries):
            _require_text(f"{prefix}.beneficiaries[{j}].name", heir.name)
            validate_percentage(f"{prefix}.beneficiaries[{j}].percentage", heir.percentage)

    for i, beneficiary in enumerate(plan.beneficiaries):
        prefix = f"beneficiaries[{i}]"
        _require_text(f"{prefix}.full_name", beneficiary.full_name)
        _require_enum(f"{prefix}.relationship", beneficiary.relationship, Relationship)
        validate_percentage(f"{prefix}.percentage", beneficiary.percentage)

    for i, document in enumerate(plan.documents):
        prefix = f"documents[{i}]"
        _require_enum(f"{prefix}.type", document.type, EstateDocumentType)
        _require_text(f"{prefix}.name", document.name)
        _require_enum(f"{prefix}.status", document.status, EstateDocumentStatus)

    require_finite("estimated_tax_liability", plan.estimated_tax_liability)
    _max_length("notes", plan.notes, ESTATE_NOTES_MAX)
