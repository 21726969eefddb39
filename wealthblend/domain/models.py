"""Domain models - pure Python dataclasses representing financial records"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional


class FilingStatus(str, Enum):
    SINGLE = "single"
    MARRIED_FILING_JOINTLY = "married_filing_jointly"
    MARRIED_FILING_SEPARATELY = "married_filing_separately"
    HEAD_OF_HOUSEHOLD = "head_of_household"
    QUALIFYING_WIDOW = "qualifying_widow"


class TaxStatus(str, Enum):
    DRAFT = "draft"
    FILED = "filed"
    PROCESSED = "processed"
    AMENDED = "amended"


class BudgetCategory(str, Enum):
    HOUSING = "housing"
    TRANSPORTATION = "transportation"
    FOOD = "food"
    UTILITIES = "utilities"
    INSURANCE = "insurance"
    HEALTHCARE = "healthcare"
    SAVINGS = "savings"
    DEBT_PAYMENTS = "debt_payments"
    ENTERTAINMENT = "entertainment"
    PERSONAL_CARE = "personal_care"
    CLOTHING = "clothing"
    EDUCATION = "education"
    GIFTS_DONATIONS = "gifts_donations"
    MISCELLANEOUS = "miscellaneous"
    INVESTMENTS = "investments"
    EMERGENCY_FUND = "emergency_fund"


class Period(str, Enum):
    """Budget period granularity, also used as the recurrence frequency"""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class BudgetStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"
    EXCEEDED = "exceeded"


class TransactionType(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"


class UsageStatus(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"
    EXCEEDED = "exceeded"


class PlanType(str, Enum):
    BASIC = "basic"
    COMPREHENSIVE = "comprehensive"
    TRUST_BASED = "trust_based"
    BUSINESS_SUCCESSION = "business_succession"


class AssetType(str, Enum):
    REAL_ESTATE = "real_estate"
    BANK_ACCOUNT = "bank_account"
    INVESTMENT = "investment"
    BUSINESS = "business"
    PERSONAL_PROPERTY = "personal_property"
    INSURANCE = "insurance"
    RETIREMENT_ACCOUNT = "retirement_account"


class Relationship(str, Enum):
    SPOUSE = "spouse"
    CHILD = "child"
    PARENT = "parent"
    SIBLING = "sibling"
    FRIEND = "friend"
    CHARITY = "charity"
    OTHER = "other"


class EstateDocumentType(str, Enum):
    WILL = "will"
    TRUST = "trust"
    POWER_OF_ATTORNEY = "power_of_attorney"
    HEALTHCARE_DIRECTIVE = "healthcare_directive"
    BENEFICIARY_DESIGNATION = "beneficiary_designation"
    OTHER = "other"


class EstateDocumentStatus(str, Enum):
    DRAFT = "draft"
    EXECUTED = "executed"
    NEEDS_UPDATE = "needs_update"


class EstatePlanStatus(str, Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    NEEDS_UPDATE = "needs_update"


@dataclass
class Income:
    wages: float = 0
    dividends: float = 0
    capital_gains: float = 0
    business_income: float = 0
    other_income: float = 0


@dataclass
class Deductions:
    standard_deduction: float = 0
    itemized_deductions: float = 0
    total_deductions: float = 0


@dataclass
class TaxDocument:
    name: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None
    upload_date: Optional[datetime] = None


@dataclass
class TaxRecord:
    """One user's filing for one tax year"""

    user_id: str
    tax_year: int
    filing_status: FilingStatus
    income: Income = field(default_factory=Income)
    deductions: Deductions = field(default_factory=Deductions)
    taxable_income: float = 0  # derived
    tax_owed: float = 0
    tax_paid: float = 0
    refund_or_owed: float = 0  # derived
    filing_date: Optional[datetime] = None
    status: TaxStatus = TaxStatus.DRAFT
    documents: List[TaxDocument] = field(default_factory=list)
    notes: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class BudgetTransaction:
    description: str
    amount: float
    date: Optional[datetime] = None
    type: TransactionType = TransactionType.EXPENSE
    category: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class AlertSettings:
    enabled: bool = True
    warning: float = 80
    critical: float = 95
    last_alert_sent: Optional[datetime] = None


@dataclass
class RecurringSettings:
    is_recurring: bool = False
    frequency: Optional[Period] = None
    end_date: Optional[datetime] = None
    next_due_date: Optional[datetime] = None


@dataclass
class Budget:
    """Spending envelope for one category over one period"""

    user_id: str
    name: str
    category: BudgetCategory
    budgeted_amount: float
    actual_amount: float = 0  # derived
    period: Period = Period.MONTHLY
    year: Optional[int] = None
    month: Optional[int] = None
    week: Optional[int] = None
    quarter: Optional[int] = None
    status: BudgetStatus = BudgetStatus.ACTIVE
    description: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    transactions: List[BudgetTransaction] = field(default_factory=list)
    alerts: AlertSettings = field(default_factory=AlertSettings)
    recurring_settings: RecurringSettings = field(default_factory=RecurringSettings)
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Address:
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = "United States"


@dataclass
class ContactInfo:
    phone: Optional[str] = None
    email: Optional[str] = None


@dataclass
class AssetBeneficiary:
    name: str
    relationship: Optional[str] = None
    percentage: Optional[float] = None
    contingent: bool = False


@dataclass
class Asset:
    type: AssetType
    description: str
    estimated_value: float
    location: Optional[str] = None
    account_number: Optional[str] = None
    beneficiaries: List[AssetBeneficiary] = field(default_factory=list)


@dataclass
class Beneficiary:
    full_name: str
    relationship: Relationship
    date_of_birth: Optional[date] = None
    address: Address = field(default_factory=Address)
    contact_info: ContactInfo = field(default_factory=ContactInfo)
    is_primary: bool = False
    is_contingent: bool = False
    percentage: Optional[float] = None


@dataclass
class Person:
    """Named contact used for alternate executors and guardians"""

    full_name: Optional[str] = None
    relationship: Optional[str] = None
    contact_info: ContactInfo = field(default_factory=ContactInfo)


@dataclass
class Executor:
    full_name: Optional[str] = None
    relationship: Optional[str] = None
    address: Address = field(default_factory=Address)
    contact_info: ContactInfo = field(default_factory=ContactInfo)
    alternate_executor: Person = field(default_factory=Person)


@dataclass
class MinorChild:
    name: Optional[str] = None
    date_of_birth: Optional[date] = None
    guardian: Person = field(default_factory=Person)
    alternate_guardian: Person = field(default_factory=Person)


@dataclass
class Guardianship:
    minor_children: List[MinorChild] = field(default_factory=list)


@dataclass
class EstateDocument:
    type: EstateDocumentType
    name: str
    url: Optional[str] = None
    date_created: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    status: EstateDocumentStatus = EstateDocumentStatus.DRAFT


@dataclass
class AttorneyInfo:
    name: Optional[str] = None
    firm: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Address = field(default_factory=lambda: Address(country=None))


@dataclass
class EstatePlan:
    """A user's estate plan: assets, heirs, fiduciaries and documents"""

    user_id: str
    plan_name: str
    plan_type: PlanType = PlanType.BASIC
    assets: List[Asset] = field(default_factory=list)
    beneficiaries: List[Beneficiary] = field(default_factory=list)
    executor: Executor = field(default_factory=Executor)
    guardianship: Guardianship = field(default_factory=Guardianship)
    documents: List[EstateDocument] = field(default_factory=list)
    total_estate_value: float = 0  # derived
    estimated_tax_liability: float = 0
    last_review_date: Optional[datetime] = None
    next_review_date: Optional[datetime] = None
    status: EstatePlanStatus = EstatePlanStatus.DRAFT
    notes: Optional[str] = None
    attorney_info: AttorneyInfo = field(default_factory=AttorneyInfo)
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
