"""Unit tests for record validation"""

import math
import pytest
from wealthblend.domain.exceptions import ValidationError
from wealthblend.domain.models import (
    AlertSettings,
    Asset,
    AssetBeneficiary,
    AssetType,
    Beneficiary,
    BudgetTransaction,
    Deductions,
    EstateDocument,
    EstateDocumentType,
    EstatePlan,
    FilingStatus,
    Income,
    RecurringSettings,
    Relationship,
    TaxRecord,
)
from wealthblend.domain.validation import validate_budget, validate_estate_plan, validate_tax_record


def field_of(fn, *args) -> str:
    with pytest.raises(ValidationError) as exc:
        fn(*args)
    return exc.value.field


def make_tax_record(**kwargs) -> TaxRecord:
    defaults = dict(user_id="user_alice", tax_year=2023, filing_status=FilingStatus.SINGLE)
    defaults.update(kwargs)
    return TaxRecord(**defaults)


def test_valid_tax_record_passes(now):
    validate_tax_record(make_tax_record(income=Income(wages=50000)), now)


@pytest.mark.parametrize("year", [2000, 2024, 2025])
def test_tax_year_bounds_accept(now, year):
    validate_tax_record(make_tax_record(tax_year=year), now)


@pytest.mark.parametrize("year", [1999, 2026])
def test_tax_year_bounds_reject(now, year):
    assert field_of(validate_tax_record, make_tax_record(tax_year=year), now) == "tax_year"


def test_tax_year_upper_bound_moves_with_clock(now):
    later = now.replace(year=2025)
    validate_tax_record(make_tax_record(tax_year=2026), later)


def test_unknown_filing_status_rejected(now):
    record = make_tax_record(filing_status="head_of_castle")
    assert field_of(validate_tax_record, record, now) == "filing_status"


def test_negative_income_component_rejected(now):
    record = make_tax_record(income=Income(dividends=-5))
    assert field_of(validate_tax_record, record, now) == "income.dividends"


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_non_finite_tax_amounts_rejected(now, value):
    assert field_of(validate_tax_record, make_tax_record(income=Income(wages=value)), now) == "income.wages"
    assert field_of(validate_tax_record, make_tax_record(deductions=Deductions(total_deductions=value)), now) == (
        "deductions.total_deductions"
    )
    assert field_of(validate_tax_record, make_tax_record(tax_paid=value), now) == "tax_paid"


def test_tax_notes_length_limit(now):
    validate_tax_record(make_tax_record(notes="n" * 1000), now)
    assert field_of(validate_tax_record, make_tax_record(notes="n" * 1001), now) == "notes"


def test_valid_budget_passes(sample_budget):
    validate_budget(sample_budget)


def test_budget_name_required(sample_budget):
    sample_budget.name = "  "
    assert field_of(validate_budget, sample_budget) == "name"


def test_budget_name_length_limit(sample_budget):
    sample_budget.name = "x" * 201
    assert field_of(validate_budget, sample_budget) == "name"


def test_unknown_category_rejected(sample_budget):
    sample_budget.category = "yachts"
    assert field_of(validate_budget, sample_budget) == "category"


def test_negative_budgeted_amount_rejected(sample_budget):
    sample_budget.budgeted_amount = -1
    assert field_of(validate_budget, sample_budget) == "budgeted_amount"


@pytest.mark.parametrize(
    "field,value",
    [
        ("year", 1999),
        ("month", 0),
        ("month", 13),
        ("week", 54),
        ("quarter", 5),
    ],
)
def test_period_anchor_ranges(sample_budget, field, value):
    setattr(sample_budget, field, value)
    assert field_of(validate_budget, sample_budget) == field


def test_tag_length_limit(sample_budget):
    sample_budget.tags = ["weekly", "t" * 51]
    assert field_of(validate_budget, sample_budget) == "tags[1]"


def test_embedded_transaction_errors_name_their_index(sample_budget):
    sample_budget.transactions = [
        BudgetTransaction(description="Rent", amount=900),
        BudgetTransaction(description="Oops", amount=-3),
    ]
    assert field_of(validate_budget, sample_budget) == "transactions[1].amount"


@pytest.mark.parametrize("warning", [-1, 101])
def test_alert_threshold_range(sample_budget, warning):
    sample_budget.alerts = AlertSettings(warning=warning)
    assert field_of(validate_budget, sample_budget) == "alerts.warning"


@pytest.mark.parametrize("value", [math.nan, math.inf])
def test_non_finite_budget_amounts_rejected(sample_budget, value):
    sample_budget.budgeted_amount = value
    assert field_of(validate_budget, sample_budget) == "budgeted_amount"

    sample_budget.budgeted_amount = 100
    sample_budget.transactions = [BudgetTransaction(description="Shop", amount=value)]
    assert field_of(validate_budget, sample_budget) == "transactions[0].amount"


def test_nan_alert_threshold_rejected(sample_budget):
    sample_budget.alerts = AlertSettings(critical=math.nan)
    assert field_of(validate_budget, sample_budget) == "alerts.critical"


def test_unknown_recurring_frequency_rejected(sample_budget):
    sample_budget.recurring_settings = RecurringSettings(is_recurring=True, frequency="fortnightly")
    assert field_of(validate_budget, sample_budget) == "recurring_settings.frequency"


def make_plan(**kwargs) -> EstatePlan:
    return EstatePlan(user_id="user_alice", plan_name="Family plan", **kwargs)


def test_valid_estate_plan_passes():
    plan = make_plan(
        assets=[
            Asset(
                type=AssetType.REAL_ESTATE,
                description="House",
                estimated_value=400000,
                beneficiaries=[AssetBeneficiary(name="Sam", percentage=100)],
            )
        ],
        beneficiaries=[Beneficiary(full_name="Sam Doe", relationship=Relationship.CHILD, percentage=50)],
        documents=[EstateDocument(type=EstateDocumentType.WILL, name="Last will")],
    )
    validate_estate_plan(plan)


def test_plan_name_required():
    plan = make_plan()
    plan.plan_name = ""
    assert field_of(validate_estate_plan, plan) == "plan_name"


def test_negative_asset_value_rejected():
    plan = make_plan(assets=[Asset(type=AssetType.PERSONAL_PROPERTY, description="Car", estimated_value=-10)])
    assert field_of(validate_estate_plan, plan) == "assets[0].estimated_value"


@pytest.mark.parametrize("value", [math.nan, math.inf])
def test_non_finite_estate_amounts_rejected(value):
    plan = make_plan(assets=[Asset(type=AssetType.BUSINESS, description="Shop", estimated_value=value)])
    assert field_of(validate_estate_plan, plan) == "assets[0].estimated_value"
    assert field_of(validate_estate_plan, make_plan(estimated_tax_liability=value)) == "estimated_tax_liability"


def test_asset_beneficiary_percentage_range():
    plan = make_plan(
        assets=[
            Asset(
                type=AssetType.BANK_ACCOUNT,
                description="Savings",
                estimated_value=100,
                beneficiaries=[AssetBeneficiary(name="Sam", percentage=120)],
            )
        ]
    )
    assert field_of(validate_estate_plan, plan) == "assets[0].beneficiaries[0].percentage"


def test_unknown_beneficiary_relationship_rejected():
    plan = make_plan(beneficiaries=[Beneficiary(full_name="Pat", relationship="neighbor")])
    assert field_of(validate_estate_plan, plan) == "beneficiaries[0].relationship"


def test_unknown_document_type_rejected():
    plan = make_plan(documents=[EstateDocument(type="napkin", name="Scribbles")])
    assert field_of(validate_estate_plan, plan) == "documents[0].type"


def test_estate_notes_length_limit():
    validate_estate_plan(make_plan(notes="n" * 2000))
    assert field_of(validate_estate_plan, make_plan(notes="n" * 2001)) == "notes"
