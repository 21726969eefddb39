"""Unit tests for tax derivations"""

import pytest
from wealthblend.domain.models import Deductions, FilingStatus, Income, TaxRecord
from wealthblend.domain.tax import derive_tax, total_income


def make_record(income: Income, total_deductions: float = 0, tax_paid: float = 0, tax_owed: float = 0) -> TaxRecord:
    return TaxRecord(
        user_id="user_alice",
        tax_year=2023,
        filing_status=FilingStatus.SINGLE,
        income=income,
        deductions=Deductions(total_deductions=total_deductions),
        tax_paid=tax_paid,
        tax_owed=tax_owed,
    )


def test_refund_scenario():
    """80k income, 20k deductions, 15k paid vs 12k owed -> 3k refund"""
    record = make_record(
        Income(wages=70000, dividends=5000, capital_gains=5000),
        total_deductions=20000,
        tax_paid=15000,
        tax_owed=12000,
    )

    derived = derive_tax(record)

    assert total_income(derived.income) == 80000
    assert derived.taxable_income == 60000
    assert derived.refund_or_owed == 3000


def test_amount_owed_is_negative():
    derived = derive_tax(make_record(Income(wages=50000), tax_paid=4000, tax_owed=6500))
    assert derived.refund_or_owed == -2500


@pytest.mark.parametrize(
    "income,deductions",
    [
        (Income(), 0),
        (Income(wages=1), 0),
        (Income(wages=55000, business_income=12000.5), 13850),
        (Income(other_income=900), 13850),  # deductions larger than income
        (Income(wages=1e6, dividends=2e5, capital_gains=3e5, business_income=4e5, other_income=5e4), 27700),
    ],
)
def test_taxable_income_invariant(income, deductions):
    derived = derive_tax(make_record(income, total_deductions=deductions))
    assert derived.taxable_income == total_income(income) - deductions


def test_caller_supplied_derived_fields_are_overwritten():
    record = make_record(Income(wages=1000), total_deductions=200)
    record.taxable_income = 999999
    record.refund_or_owed = -1

    derived = derive_tax(record)

    assert derived.taxable_income == 800
    assert derived.refund_or_owed == 0


def test_missing_income_components_count_as_zero():
    income = Income(wages=100)
    income.dividends = None
    assert total_income(income) == 100


def test_derive_tax_is_idempotent_and_does_not_mutate_input():
    record = make_record(Income(wages=42000), total_deductions=2000, tax_paid=10, tax_owed=5)

    once = derive_tax(record)
    twice = derive_tax(once)

    assert once == twice
    assert record.taxable_income == 0  # input untouched
