"""Tax record derivations: income totals, taxable income, refund/owed"""

import copy

from wealthblend.domain.models import Income, TaxRecord


def total_income(income: Income) -> float:
    return (
        (income.wages or 0)
        + (income.dividends or 0)
        + (income.capital_gains or 0)
        + (income.business_income or 0)
        + (income.other_income or 0)
    )


def derive_tax(record: TaxRecord) -> TaxRecord:
    """
    Recompute the derived fields of a tax record.

    Caller-supplied `taxable_income` and `refund_or_owed` are always
    overwritten. A positive `refund_or_owed` is a refund, negative is owed.
    """
    record = copy.deepcopy(record)
    record.taxable_income = total_income(record.income) - (record.deductions.total_deductions or 0)
    record.refund_or_owed = (record.tax_paid or 0) - (record.tax_owed or 0)
    return record
