"""SQLAlchemy ORM models for tax records, budgets and estate plans"""

import uuid

from sqlalchemy import Column, String, Boolean, Float, DateTime, Integer, ForeignKey, Text, JSON, Index
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class TaxRecordRow(Base):
    """One filing year for one user"""

    __tablename__ = "tax_record"
    __table_args__ = (Index("ix_tax_record_user_year", "user_id", "tax_year"),)

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    tax_year = Column(Integer, nullable=False)
    filing_status = Column(Text, nullable=False)
    income = Column(JSON, nullable=False, default=dict)
    deductions = Column(JSON, nullable=False, default=dict)
    taxable_income = Column(Float, nullable=False, default=0)
    tax_owed = Column(Float, nullable=False, default=0)
    tax_paid = Column(Float, nullable=False, default=0)
    refund_or_owed = Column(Float, nullable=False, default=0)
    filing_date = Column(DateTime, nullable=True)
    status = Column(Text, nullable=False, default="draft", index=True)
    documents = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)


class BudgetRow(Base):
    """Spending envelope; alert and recurrence settings are flattened for querying"""

    __tablename__ = "budget"
    __table_args__ = (
        Index("ix_budget_user_period", "user_id", "year", "month"),
        Index("ix_budget_user_category", "user_id", "category"),
        Index("ix_budget_user_status", "user_id", "status"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    category = Column(Text, nullable=False)
    budgeted_amount = Column(Float, nullable=False)
    actual_amount = Column(Float, nullable=False, default=0)
    period = Column(Text, nullable=False, default="monthly")
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=True)
    week = Column(Integer, nullable=True)
    quarter = Column(Integer, nullable=True)
    status = Column(Text, nullable=False, default="active")
    description = Column(String(500), nullable=True)
    tags = Column(JSON, nullable=False, default=list)

    alerts_enabled = Column(Boolean, nullable=False, default=True)
    alert_warning = Column(Float, nullable=False, default=80)
    alert_critical = Column(Float, nullable=False, default=95)
    last_alert_sent = Column(DateTime, nullable=True)

    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_frequency = Column(Text, nullable=True)
    recurring_end_date = Column(DateTime, nullable=True)
    next_due_date = Column(DateTime, nullable=True, index=True)

    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    transactions = relationship(
        "BudgetTransactionRow",
        back_populates="budget",
        cascade="all, delete-orphan",
        order_by="BudgetTransactionRow.position",
    )


class BudgetTransactionRow(Base):
    """Append-only spend or income entry within a budget"""

    __tablename__ = "budget_transaction"

    id = Column(Integer, primary_key=True, autoincrement=True)
    budget_id = Column(String(36), ForeignKey("budget.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    description = Column(String(200), nullable=False)
    amount = Column(Float, nullable=False)
    date = Column(DateTime, nullable=False)
    type = Column(Text, nullable=False, default="expense")
    category = Column(Text, nullable=True)
    notes = Column(String(300), nullable=True)

    budget = relationship("BudgetRow", back_populates="transactions")


class EstatePlanRow(Base):
    """Estate plan; people and documents are stored as JSON documents"""

    __tablename__ = "estate_plan"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    plan_name = Column(String(200), nullable=False)
    plan_type = Column(Text, nullable=False, default="basic")
    beneficiaries = Column(JSON, nullable=False, default=list)
    executor = Column(JSON, nullable=False, default=dict)
    guardianship = Column(JSON, nullable=False, default=dict)
    documents = Column(JSON, nullable=False, default=list)
    total_estate_value = Column(Float, nullable=False, default=0)
    estimated_tax_liability = Column(Float, nullable=False, default=0)
    last_review_date = Column(DateTime, nullable=True)
    next_review_date = Column(DateTime, nullable=True, index=True)
    status = Column(Text, nullable=False, default="draft", index=True)
    notes = Column(Text, nullable=True)
    attorney_info = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    assets = relationship(
        "EstateAssetRow",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="EstateAssetRow.position",
    )


class EstateAssetRow(Base):
    """Single valued asset within an estate plan"""

    __tablename__ = "estate_asset"

    id = Column(Integer, primary_key=True, autoincrement=True)
    plan_id = Column(String(36), ForeignKey("estate_plan.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    type = Column(Text, nullable=False)
    description = Column(String(500), nullable=False)
    estimated_value = Column(Float, nullable=False)
    location = Column(Text, nullable=True)
    account_number = Column(Text, nullable=True)
    beneficiaries = Column(JSON, nullable=False, default=list)

    plan = relationship("EstatePlanRow", back_populates="assets")
