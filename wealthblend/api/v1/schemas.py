"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, Field

from wealthblend.domain.models import (
    AssetType,
    BudgetCategory,
    BudgetStatus,
    EstateDocumentStatus,
    EstateDocumentType,
    EstatePlanStatus,
    FilingStatus,
    Period,
    PlanType,
    Relationship,
    TaxStatus,
    TransactionType,
    UsageStatus,
)
from wealthblend.utils.date_utils import to_naive_utc

# Incoming timestamps may carry an offset; the core works in naive UTC
UTCDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]


class IncomeSchema(BaseModel):
    wages: float = 0
    dividends: float = 0
    capital_gains: float = 0
    business_income: float = 0
    other_income: float = 0


class DeductionsSchema(BaseModel):
    standard_deduction: float = 0
    itemized_deductions: float = 0
    total_deductions: float = 0


class TaxDocumentSchema(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None
    upload_date: Optional[UTCDateTime] = None


class TaxRecordCreate(BaseModel):
    """Request body for POST /api/tax"""

    tax_year: int
    filing_status: FilingStatus
    income: IncomeSchema = Field(default_factory=IncomeSchema)
    deductions: DeductionsSchema = Field(default_factory=DeductionsSchema)
    tax_owed: float = 0
    tax_paid: float = 0
    filing_date: Optional[UTCDateTime] = None
    status: TaxStatus = TaxStatus.DRAFT
    documents: List[TaxDocumentSchema] = Field(default_factory=list)
    notes: Optional[str] = None


class TaxRecordUpdate(BaseModel):
    """Request body for PATCH /api/tax/{record_id}; only sent fields change"""

    tax_year: Optional[int] = None
    filing_status: Optional[FilingStatus] = None
    income: Optional[IncomeSchema] = None
    deductions: Optional[DeductionsSchema] = None
    tax_owed: Optional[float] = None
    tax_paid: Optional[float] = None
    filing_date: Optional[UTCDateTime] = None
    status: Optional[TaxStatus] = None
    documents: Optional[List[TaxDocumentSchema]] = None
    notes: Optional[str] = None


class TaxRecordResponse(TaxRecordCreate):
    """Tax record with derived totals"""

    id: str
    user_id: str
    total_income: float
    taxable_income: float
    refund_or_owed: float
    created_at: datetime
    updated_at: datetime


class BudgetTransactionSchema(BaseModel):
    """Request body for POST /api/budget/{budget_id}/transactions"""

    description: str
    amount: float
    date: Optional[UTCDateTime] = None
    type: TransactionType = TransactionType.EXPENSE
    category: Optional[str] = None
    notes: Optional[str] = None


class AlertSettingsSchema(BaseModel):
    enabled: bool = True
    warning: float = 80
    critical: float = 95
    last_alert_sent: Optional[UTCDateTime] = None


class RecurringSettingsSchema(BaseModel):
    is_recurring: bool = False
    frequency: Optional[Period] = None
    end_date: Optional[UTCDateTime] = None
    next_due_date: Optional[UTCDateTime] = None


class BudgetCreate(BaseModel):
    """Request body for POST /api/budget"""

    name: str
    category: BudgetCategory
    budgeted_amount: float
    period: Period = Period.MONTHLY
    year: Optional[int] = None
    month: Optional[int] = None
    week: Optional[int] = None
    quarter: Optional[int] = None
    status: BudgetStatus = BudgetStatus.ACTIVE
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    transactions: List[BudgetTransactionSchema] = Field(default_factory=list)
    alerts: AlertSettingsSchema = Field(default_factory=AlertSettingsSchema)
    recurring_settings: RecurringSettingsSchema = Field(default_factory=RecurringSettingsSchema)


class BudgetUpdate(BaseModel):
    """Request body for PATCH /api/budget/{budget_id}; transactions are append-only"""

    name: Optional[str] = None
    category: Optional[BudgetCategory] = None
    budgeted_amount: Optional[float] = None
    period: Optional[Period] = None
    year: Optional[int] = None
    month: Optional[int] = None
    week: Optional[int] = None
    quarter: Optional[int] = None
    status: Optional[BudgetStatus] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    alerts: Optional[AlertSettingsSchema] = None
    recurring_settings: Optional[RecurringSettingsSchema] = None


class BudgetResponse(BudgetCreate):
    """Budget with derived usage figures"""

    id: str
    user_id: str
    actual_amount: float
    remaining_amount: float
    percentage_used: int
    usage_status: UsageStatus
    total_transactions: float
    created_at: datetime
    updated_at: datetime


class AlertCheckResponse(BaseModel):
    """Response for GET /api/budget/{budget_id}/alert"""

    budget_id: str
    should_alert: bool
    percentage_used: int
    usage_status: UsageStatus
    last_alert_sent: Optional[datetime] = None


class AddressSchema(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = "United States"


class ContactInfoSchema(BaseModel):
    phone: Optional[str] = None
    email: Optional[str] = None


class AssetBeneficiarySchema(BaseModel):
    name: str
    relationship: Optional[str] = None
    percentage: Optional[float] = None
    contingent: bool = False


class AssetSchema(BaseModel):
    type: AssetType
    description: str
    estimated_value: float
    location: Optional[str] = None
    account_number: Optional[str] = None
    beneficiaries: List[AssetBeneficiarySchema] = Field(default_factory=list)


class BeneficiarySchema(BaseModel):
    full_name: str
    relationship: Relationship
    date_of_birth: Optional[date] = None
    address: AddressSchema = Field(default_factory=AddressSchema)
    contact_info: ContactInfoSchema = Field(default_factory=ContactInfoSchema)
    is_primary: bool = False
    is_contingent: bool = False
    percentage: Optional[float] = None


class PersonSchema(BaseModel):
    full_name: Optional[str] = None
    relationship: Optional[str] = None
    contact_info: ContactInfoSchema = Field(default_factory=ContactInfoSchema)


class ExecutorSchema(BaseModel):
    full_name: Optional[str] = None
    relationship: Optional[str] = None
    address: AddressSchema = Field(default_factory=AddressSchema)
    contact_info: ContactInfoSchema = Field(default_factory=ContactInfoSchema)
    alternate_executor: PersonSchema = Field(default_factory=PersonSchema)


class MinorChildSchema(BaseModel):
    name: Optional[str] = None
    date_of_birth: Optional[date] = None
    guardian: PersonSchema = Field(default_factory=PersonSchema)
    alternate_guardian: PersonSchema = Field(default_factory=PersonSchema)


class GuardianshipSchema(BaseModel):
    minor_children: List[MinorChildSchema] = Field(default_factory=list)


class EstateDocumentSchema(BaseModel):
    type: EstateDocumentType
    name: str
    url: Optional[str] = None
    date_created: Optional[UTCDateTime] = None
    last_updated: Optional[UTCDateTime] = None
    status: EstateDocumentStatus = EstateDocumentStatus.DRAFT


class AttorneyInfoSchema(BaseModel):
    name: Optional[str] = None
    firm: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: AddressSchema = Field(default_factory=lambda: AddressSchema(country=None))


class EstatePlanCreate(BaseModel):
    """Request body for POST /api/estate"""

    plan_name: str
    plan_type: PlanType = PlanType.BASIC
    assets: List[AssetSchema] = Field(default_factory=list)
    beneficiaries: List[BeneficiarySchema] = Field(default_factory=list)
    executor: ExecutorSchema = Field(default_factory=ExecutorSchema)
    guardianship: GuardianshipSchema = Field(default_factory=GuardianshipSchema)
    documents: List[EstateDocumentSchema] = Field(default_factory=list)
    estimated_tax_liability: float = 0
    last_review_date: Optional[UTCDateTime] = None
    next_review_date: Optional[UTCDateTime] = None
    status: EstatePlanStatus = EstatePlanStatus.DRAFT
    notes: Optional[str] = None
    attorney_info: AttorneyInfoSchema = Field(default_factory=AttorneyInfoSchema)


class EstatePlanUpdate(BaseModel):
    """Request body for PATCH /api/estate/{plan_id}"""

    plan_name: Optional[str] = None
    plan_type: Optional[PlanType] = None
    assets: Optional[List[AssetSchema]] = None
    beneficiaries: Optional[List[BeneficiarySchema]] = None
    executor: Optional[ExecutorSchema] = None
    guardianship: Optional[GuardianshipSchema] = None
    documents: Optional[List[EstateDocumentSchema]] = None
    estimated_tax_liability: Optional[float] = None
    last_review_date: Optional[UTCDateTime] = None
    next_review_date: Optional[UTCDateTime] = None
    status: Optional[EstatePlanStatus] = None
    notes: Optional[str] = None
    attorney_info: Optional[AttorneyInfoSchema] = None


class EstatePlanResponse(EstatePlanCreate):
    """Estate plan with derived valuation"""

    id: str
    user_id: str
    total_estate_value: float
    created_at: datetime
    updated_at: datetime


class ReviewCheckResponse(BaseModel):
    """Response for GET /api/estate/{plan_id}/review"""

    plan_id: str
    needs_review: bool
    next_review_date: Optional[datetime] = None
    last_review_date: Optional[datetime] = None
