"""Mapping between ORM rows and domain records"""

from enum import Enum
from typing import Any, List

from wealthblend.domain.models import (
    AlertSettings,
    Asset,
    AssetBeneficiary,
    AssetType,
    AttorneyInfo,
    Beneficiary,
    Budget,
    BudgetCategory,
    BudgetStatus,
    BudgetTransaction,
    Deductions,
    EstateDocument,
    EstatePlan,
    EstatePlanStatus,
    Executor,
    FilingStatus,
    Guardianship,
    Income,
    Period,
    PlanType,
    RecurringSettings,
    TaxDocument,
    TaxRecord,
    TaxStatus,
    TransactionType,
)
from wealthblend.infrastructure.database.models import (
    BudgetRow,
    BudgetTransactionRow,
    EstateAssetRow,
    EstatePlanRow,
    TaxRecordRow,
)
from wealthblend.utils.serialization import dump, load


def _value(member: Any) -> Any:
    return member.value if isinstance(member, Enum) else member


def tax_record_from_row(row: TaxRecordRow) -> TaxRecord:
    return TaxRecord(
        id=row.id,
        user_id=row.user_id,
        tax_year=row.tax_year,
        filing_status=FilingStatus(row.filing_status),
        income=load(Income, row.income or {}),
        deductions=load(Deductions, row.deductions or {}),
        taxable_income=row.taxable_income,
        tax_owed=row.tax_owed,
        tax_paid=row.tax_paid,
        refund_or_owed=row.refund_or_owed,
        filing_date=row.filing_date,
        status=TaxStatus(row.status),
        documents=load(List[TaxDocument], row.documents or []),
        notes=row.notes,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def apply_tax_record(row: TaxRecordRow, record: TaxRecord) -> None:
    row.tax_year = record.tax_year
    row.filing_status = _value(record.filing_status)
    row.income = dump(record.income)
    row.deductions = dump(record.deductions)
    row.taxable_income = record.taxable_income
    row.tax_owed = record.tax_owed
    row.tax_paid = record.tax_paid
    row.refund_or_owed = record.refund_or_owed
    row.filing_date = record.filing_date
    row.status = _value(record.status)
    row.documents = dump(record.documents, List[TaxDocument])
    row.notes = record.notes


def budget_from_row(row: BudgetRow) -> Budget:
    return Budget(
        id=row.id,
        user_id=row.user_id,
        name=row.name,
        category=BudgetCategory(row.category),
        budgeted_amount=row.budgeted_amount,
        actual_amount=row.actual_amount,
        period=Period(row.period),
        year=row.year,
        month=row.month,
        week=row.week,
        quarter=row.quarter,
        status=BudgetStatus(row.status),
        description=row.description,
        tags=list(row.tags or []),
        transactions=[
            BudgetTransaction(
                description=txn.description,
                amount=txn.amount,
                date=txn.date,
                type=TransactionType(txn.type),
                category=txn.category,
                notes=txn.notes,
            )
            for txn in row.transactions
        ],
        alerts=AlertSettings(
            enabled=row.alerts_enabled,
            warning=row.alert_warning,
            critical=row.alert_critical,
            last_alert_sent=row.last_alert_sent,
        ),
        recurring_settings=RecurringSettings(
            is_recurring=row.is_recurring,
            frequency=Period(row.recurring_frequency) if row.recurring_frequency else None,
            end_date=row.recurring_end_date,
            next_due_date=row.next_due_date,
        ),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def apply_budget(row: BudgetRow, budget: Budget) -> None:
    row.name = budget.name
    row.category = _value(budget.category)
    row.budgeted_amount = budget.budgeted_amount
    row.actual_amount = budget.actual_amount
    row.period = _value(budget.period)
    row.year = budget.year
    row.month = budget.month
    row.week = budget.week
    row.quarter = budget.quarter
    row.status = _value(budget.status)
    row.description = budget.description
    row.tags = list(budget.tags)

    row.alerts_enabled = budget.alerts.enabled
    row.alert_warning = budget.alerts.warning
    row.alert_critical = budget.alerts.critical
    row.last_alert_sent = budget.alerts.last_alert_sent

    recurring = budget.recurring_settings
    row.is_recurring = recurring.is_recurring
    row.recurring_frequency = _value(recurring.frequency)
    row.recurring_end_date = recurring.end_date
    row.next_due_date = recurring.next_due_date

    # Transactions are append-only, so only new ones need rows
    for position in range(len(row.transactions), len(budget.transactions)):
        txn = budget.transactions[position]
        row.transactions.append(
            BudgetTransactionRow(
                position=position,
                description=txn.description,
                amount=txn.amount,
                date=txn.date,
                type=_value(txn.type),
                category=txn.category,
                notes=txn.notes,
            )
        )


def estate_plan_from_row(row: EstatePlanRow) -> EstatePlan:
    return EstatePlan(
        id=row.id,
        user_id=row.user_id,
        plan_name=row.plan_name,
        plan_type=PlanType(row.plan_type),
        assets=[
            Asset(
                type=AssetType(asset.type),
                description=asset.description,
                estimated_value=asset.estimated_value,
                location=asset.location,
                account_number=asset.account_number,
                beneficiaries=load(List[AssetBeneficiary], asset.beneficiaries or []),
            )
            for asset in row.assets
        ],
        beneficiaries=load(List[Beneficiary], row.beneficiaries or []),
        executor=load(Executor, row.executor or {}),
        guardianship=load(Guardianship, row.guardianship or {}),
        documents=load(List[EstateDocument], row.documents or []),
        total_estate_value=row.total_estate_value,
        estimated_tax_liability=row.estimated_tax_liability,
        last_review_date=row.last_review_date,
        next_review_date=row.next_review_date,
        status=EstatePlanStatus(row.status),
        notes=row.notes,
        attorney_info=load(AttorneyInfo, row.attorney_info or {}),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def apply_estate_plan(row: EstatePlanRow, plan: EstatePlan) -> None:
    row.plan_name = plan.plan_name
    row.plan_type = _value(plan.plan_type)
    row.beneficiaries = dump(plan.beneficiaries, List[Beneficiary])
    row.executor = dump(plan.executor)
    row.guardianship = dump(plan.guardianship)
    row.documents = dump(plan.documents, List[EstateDocument])
    row.total_estate_value = plan.total_estate_value
    row.estimated_tax_liability = plan.estimated_tax_liability
    row.last_review_date = plan.last_review_date
    row.next_review_date = plan.next_review_date
    row.status = _value(plan.status)
    row.notes = plan.notes
    row.attorney_info = dump(plan.attorney_info)

    # Assets can be edited or removed, so the child rows are rebuilt
    row.assets = [
        EstateAssetRow(
            position=position,
            type=_value(asset.type),
            description=asset.description,
            estimated_value=asset.estimated_value,
            location=asset.location,
            account_number=asset.account_number,
            beneficiaries=dump(asset.beneficiaries, List[AssetBeneficiary]),
        )
        for position, asset in enumerate(plan.assets)
    ]
