"""Unit tests for the record store adapter"""

import pytest
from datetime import datetime, timedelta
from unittest.mock import patch
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from wealthblend.domain.budget import derive_budget
from wealthblend.domain.estate import derive_estate
from wealthblend.domain.exceptions import NotFoundError, StoreUnavailableError
from wealthblend.domain.models import (
    Asset,
    AssetType,
    Beneficiary,
    Budget,
    BudgetCategory,
    BudgetStatus,
    BudgetTransaction,
    EstatePlan,
    EstatePlanStatus,
    FilingStatus,
    Income,
    Period,
    RecurringSettings,
    Relationship,
    TaxRecord,
    TaxStatus,
    TransactionType,
)
from wealthblend.domain.tax import derive_tax
from wealthblend.infrastructure.database.repositories import (
    BudgetRepository,
    EstatePlanRepository,
    TaxRecordRepository,
    commit,
)


def make_budget(now: datetime, user_id: str = "user_alice", **kwargs) -> Budget:
    defaults = dict(user_id=user_id, name="Groceries", category=BudgetCategory.FOOD, budgeted_amount=100)
    defaults.update(kwargs)
    return derive_budget(Budget(**defaults), now)


def test_tax_record_round_trip(db: Session, now):
    repo = TaxRecordRepository(db)
    record = derive_tax(
        TaxRecord(
            user_id="user_alice",
            tax_year=2023,
            filing_status=FilingStatus.MARRIED_FILING_JOINTLY,
            income=Income(wages=80000, dividends=1200),
            tax_paid=9000,
            tax_owed=8500,
        )
    )

    saved = repo.save(record, now)

    assert saved.id is not None
    assert saved.created_at == now
    assert saved.updated_at == now

    loaded = repo.get(saved.id, "user_alice")
    assert loaded.income.dividends == 1200
    assert loaded.taxable_income == 81200
    assert loaded.refund_or_owed == 500
    assert loaded.filing_status == FilingStatus.MARRIED_FILING_JOINTLY


def test_update_keeps_created_at(db: Session, now):
    repo = TaxRecordRepository(db)
    saved = repo.save(TaxRecord(user_id="user_alice", tax_year=2023, filing_status=FilingStatus.SINGLE), now)

    later = now + timedelta(hours=3)
    saved.notes = "Waiting on 1099"
    updated = repo.save(saved, later)

    assert updated.id == saved.id
    assert updated.created_at == now
    assert updated.updated_at == later
    assert updated.notes == "Waiting on 1099"


def test_other_users_record_is_not_found(db: Session, now):
    repo = TaxRecordRepository(db)
    saved = repo.save(TaxRecord(user_id="user_alice", tax_year=2023, filing_status=FilingStatus.SINGLE), now)

    with pytest.raises(NotFoundError):
        repo.get(saved.id, "user_bob")


def test_missing_record_is_not_found(db: Session):
    with pytest.raises(NotFoundError):
        TaxRecordRepository(db).get("does-not-exist")


def test_tax_records_list_newest_year_first(db: Session, now):
    repo = TaxRecordRepository(db)
    for year in (2021, 2023, 2022):
        repo.save(TaxRecord(user_id="user_alice", tax_year=year, filing_status=FilingStatus.SINGLE), now)
    repo.save(TaxRecord(user_id="user_bob", tax_year=2023, filing_status=FilingStatus.SINGLE), now)

    records = repo.list_for_user("user_alice")

    assert [r.tax_year for r in records] == [2023, 2022, 2021]


def test_tax_records_filter_by_status(db: Session, now):
    repo = TaxRecordRepository(db)
    repo.save(TaxRecord(user_id="user_alice", tax_year=2022, filing_status=FilingStatus.SINGLE, status=TaxStatus.FILED), now)
    repo.save(TaxRecord(user_id="user_alice", tax_year=2023, filing_status=FilingStatus.SINGLE), now)

    filed = repo.list_for_user("user_alice", status=TaxStatus.FILED)

    assert [r.tax_year for r in filed] == [2022]


def test_budget_transactions_round_trip_in_order(db: Session, now):
    repo = BudgetRepository(db)
    budget = make_budget(
        now,
        transactions=[
            BudgetTransaction(description="Market", amount=30, date=now),
            BudgetTransaction(description="Return", amount=5, date=now, type=TransactionType.INCOME),
        ],
    )

    saved = repo.save(budget, now)
    saved.transactions.append(BudgetTransaction(description="Bakery", amount=7, date=now))
    saved = repo.save(derive_budget(saved, now), now)

    loaded = repo.get(saved.id)
    assert [t.description for t in loaded.transactions] == ["Market", "Return", "Bakery"]
    assert loaded.transactions[1].type == TransactionType.INCOME
    assert loaded.actual_amount == 32


def test_budget_settings_round_trip(db: Session, now):
    repo = BudgetRepository(db)
    budget = make_budget(
        now,
        tags=["household", "weekly-shop"],
        recurring_settings=RecurringSettings(is_recurring=True, frequency=Period.QUARTERLY),
    )

    loaded = repo.get(repo.save(budget, now).id)

    assert loaded.tags == ["household", "weekly-shop"]
    assert loaded.recurring_settings.frequency == Period.QUARTERLY
    assert loaded.recurring_settings.next_due_date == datetime(2024, 4, 15, 12, 0)
    assert loaded.alerts.warning == 80


def test_budget_list_filters(db: Session, now):
    repo = BudgetRepository(db)
    repo.save(make_budget(now), now)
    repo.save(make_budget(now, category=BudgetCategory.HOUSING, name="Rent"), now)
    repo.save(make_budget(now, month=2, name="February food"), now)
    repo.save(make_budget(now, user_id="user_bob"), now)

    assert len(repo.list_for_user("user_alice")) == 3
    assert [b.name for b in repo.list_for_user("user_alice", category=BudgetCategory.HOUSING)] == ["Rent"]
    assert [b.name for b in repo.list_for_user("user_alice", month=2)] == ["February food"]
    assert repo.list_for_user("user_alice", year=2023) == []


def test_find_needing_alerts_spans_users_and_skips_inactive(db: Session, now):
    repo = BudgetRepository(db)
    alice = repo.save(make_budget(now), now)
    bob = repo.save(make_budget(now, user_id="user_bob"), now)
    repo.save(make_budget(now, status=BudgetStatus.PAUSED), now)
    repo.save(make_budget(now, transactions=[BudgetTransaction(description="Feast", amount=150, date=now)]), now)

    found = {b.id for b in repo.find_needing_alerts()}

    # The exceeded budget is no longer active, so the sweep skips it
    assert found == {alice.id, bob.id}


def test_find_overdue_recurring(db: Session, now):
    repo = BudgetRepository(db)
    overdue = repo.save(
        make_budget(now, recurring_settings=RecurringSettings(is_recurring=True, next_due_date=now - timedelta(days=1))),
        now,
    )
    repo.save(
        make_budget(now, recurring_settings=RecurringSettings(is_recurring=True, next_due_date=now + timedelta(days=1))),
        now,
    )
    repo.save(make_budget(now), now)

    assert [b.id for b in repo.find_overdue_recurring(now)] == [overdue.id]


def make_plan(now: datetime, user_id: str = "user_alice", **kwargs) -> EstatePlan:
    return derive_estate(EstatePlan(user_id=user_id, plan_name="Family plan", **kwargs), now)


def test_estate_plan_round_trip(db: Session, now):
    repo = EstatePlanRepository(db)
    plan = make_plan(
        now,
        assets=[
            Asset(type=AssetType.REAL_ESTATE, description="House", estimated_value=300000),
            Asset(type=AssetType.RETIREMENT_ACCOUNT, description="401k", estimated_value=120000),
        ],
        beneficiaries=[Beneficiary(full_name="Sam Doe", relationship=Relationship.CHILD, percentage=100)],
    )

    loaded = repo.get(repo.save(plan, now).id, "user_alice")

    assert loaded.total_estate_value == 420000
    assert [a.type for a in loaded.assets] == [AssetType.REAL_ESTATE, AssetType.RETIREMENT_ACCOUNT]
    assert loaded.beneficiaries[0].relationship == Relationship.CHILD
    assert loaded.beneficiaries[0].address.country == "United States"
    assert loaded.next_review_date == datetime(2025, 1, 15, 12, 0)


def test_estate_assets_are_replaced_on_update(db: Session, now):
    repo = EstatePlanRepository(db)
    saved = repo.save(
        make_plan(now, assets=[Asset(type=AssetType.INVESTMENT, description="Brokerage", estimated_value=50000)]),
        now,
    )

    saved.assets = [Asset(type=AssetType.BUSINESS, description="Shop", estimated_value=90000)]
    updated = repo.save(derive_estate(saved, now), now)

    assert [a.description for a in repo.get(updated.id).assets] == ["Shop"]
    assert updated.total_estate_value == 90000


def test_find_needing_review_skips_drafts(db: Session, now):
    repo = EstatePlanRepository(db)
    past = now - timedelta(days=1)
    due = repo.save(make_plan(now, next_review_date=past, status=EstatePlanStatus.COMPLETED), now)
    repo.save(make_plan(now, next_review_date=past), now)
    repo.save(make_plan(now, status=EstatePlanStatus.IN_PROGRESS), now)

    assert [p.id for p in repo.find_needing_review(now)] == [due.id]


def locked_database() -> OperationalError:
    return OperationalError("INSERT INTO tax_records", {}, Exception("database is locked"))


def test_driver_failure_on_save_is_store_unavailable(db: Session):
    repo = TaxRecordRepository(db)
    record = TaxRecord(user_id="user_alice", tax_year=2023, filing_status=FilingStatus.SINGLE)

    with patch.object(db, "flush", side_effect=locked_database()):
        with pytest.raises(StoreUnavailableError) as exc:
            repo.save(record, datetime(2024, 1, 15))

    assert "database is locked" in str(exc.value)


def test_driver_failure_on_commit_is_store_unavailable(db: Session):
    with patch.object(db, "commit", side_effect=locked_database()):
        with pytest.raises(StoreUnavailableError):
            commit(db)
