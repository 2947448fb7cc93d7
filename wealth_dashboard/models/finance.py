"""
Core Data Models for Wealth Dashboard

These models define the schemas for everything that flows between the
UI, the mutation actions and the repositories.

Two families live here:
1. Records - transient copies of stored rows (id and timestamps included)
2. Inputs  - payloads accepted by mutation actions (id, owner and
             timestamps are never accepted from callers)

DESIGN DECISION: Input models forbid unknown fields. A typo in a payload
is a validation failure, not a silently ignored key.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class EntityKind(str, Enum):
    """Entities that can be mutated through the gateway."""
    CATEGORY = "category"
    ACCOUNT = "account"
    INVESTMENT = "investment"
    TRANSACTION = "transaction"
    BUDGET = "budget"
    RECURRING_SERIES = "recurring_series"


class AccountType(str, Enum):
    """Supported account types."""
    PAYROLL = "payroll"
    CASH = "cash"
    SAVINGS = "savings"
    INVESTMENTS = "investments"


class TransactionType(str, Enum):
    """Direction of money movement."""
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class BudgetPeriod(str, Enum):
    """How often a budget resets."""
    MONTHLY = "monthly"
    ANNUALLY = "annually"


class RecurrenceFrequency(str, Enum):
    """How often a recurring series falls due."""
    ONCE = "once"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


# =============================================================================
# RECORDS
# =============================================================================

class EntityRecord(BaseModel):
    """
    Fields shared by every stored record.

    Owned by the persistence layer; the application only holds copies.
    """
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str
    created_at: datetime
    updated_at: datetime


class Category(EntityRecord):
    """A spending/income category, optionally shared with a group."""

    label: str
    key: str
    icon: str
    color: str
    group_id: Optional[str] = None


class Account(EntityRecord):
    """A bank account, wallet or savings pot."""

    name: str
    type: AccountType
    balance: Decimal = Decimal("0")
    group_id: Optional[str] = None


class Investment(EntityRecord):
    """A position bought in a listed share or fund."""

    name: str
    symbol: str
    amount: Decimal
    shares_acquired: Decimal
    currency: str
    currency_rate: Decimal = Decimal("1")
    tax_paid: Decimal = Decimal("0")
    net_earn: Decimal = Decimal("0")


class Transaction(EntityRecord):
    """A single income, expense or transfer."""

    description: str
    amount: Decimal
    type: TransactionType
    category: str
    occurred_on: date
    account_id: UUID
    to_account_id: Optional[UUID] = None


class Budget(EntityRecord):
    """A spending limit over a set of categories."""

    description: Optional[str] = None
    amount: Decimal
    period: BudgetPeriod
    categories: list[str] = Field(default_factory=list)


class RecurringSeries(EntityRecord):
    """
    A transaction that repeats on a schedule (rent, salary, subscriptions).

    due_date is the next date the series falls due; it starts at start_date
    and moves forward by one frequency step per execution.
    """

    description: str
    amount: Decimal
    type: TransactionType
    category: str
    frequency: RecurrenceFrequency
    account_id: UUID
    start_date: date
    end_date: Optional[date] = None
    due_date: date
    is_active: bool = True
    total_executions: int = 0


# =============================================================================
# INPUTS
# =============================================================================

class MutationInput(BaseModel):
    """
    Base for every action payload.

    Enum values are stored as plain strings so the ORM never sees
    Enum instances.
    """
    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        use_enum_values=True,
        validate_default=True,
    )


class CategoryCreate(MutationInput):
    label: str
    key: str
    icon: str
    color: str
    group_id: Optional[str] = None

    @field_validator('key')
    @classmethod
    def normalize_key(cls, v: str) -> str:
        return v.lower()

    @field_validator('color')
    @classmethod
    def normalize_color(cls, v: str) -> str:
        return v.upper()


class CategoryUpdate(MutationInput):
    label: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None

    @field_validator('color')
    @classmethod
    def normalize_color(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v is not None else v


class AccountCreate(MutationInput):
    name: str
    type: AccountType
    balance: Decimal = Decimal("0")
    group_id: Optional[str] = None


class AccountUpdate(MutationInput):
    name: Optional[str] = None
    type: Optional[AccountType] = None
    balance: Optional[Decimal] = None
    group_id: Optional[str] = None


class InvestmentCreate(MutationInput):
    name: str
    symbol: str
    amount: Decimal
    shares_acquired: Decimal
    currency: str = "EUR"
    currency_rate: Decimal = Decimal("1")
    tax_paid: Decimal = Decimal("0")
    net_earn: Decimal = Decimal("0")

    @field_validator('symbol', 'currency')
    @classmethod
    def uppercase(cls, v: str) -> str:
        return v.upper()


class InvestmentUpdate(MutationInput):
    name: Optional[str] = None
    amount: Optional[Decimal] = None
    shares_acquired: Optional[Decimal] = None
    currency_rate: Optional[Decimal] = None
    tax_paid: Optional[Decimal] = None
    net_earn: Optional[Decimal] = None


class TransactionCreate(MutationInput):
    description: str
    amount: Decimal
    type: TransactionType
    category: str
    occurred_on: date
    account_id: UUID
    to_account_id: Optional[UUID] = None


class TransactionUpdate(MutationInput):
    description: Optional[str] = None
    amount: Optional[Decimal] = None
    type: Optional[TransactionType] = None
    category: Optional[str] = None
    occurred_on: Optional[date] = None
    account_id: Optional[UUID] = None
    to_account_id: Optional[UUID] = None


class BudgetCreate(MutationInput):
    description: Optional[str] = None
    amount: Decimal
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    categories: list[str] = Field(default_factory=list)


class BudgetUpdate(MutationInput):
    description: Optional[str] = None
    amount: Optional[Decimal] = None
    period: Optional[BudgetPeriod] = None
    categories: Optional[list[str]] = None


class RecurringSeriesCreate(MutationInput):
    description: str
    amount: Decimal
    type: TransactionType
    category: str
    frequency: RecurrenceFrequency = RecurrenceFrequency.MONTHLY
    account_id: UUID
    start_date: date
    end_date: Optional[date] = None


class RecurringSeriesUpdate(MutationInput):
    description: Optional[str] = None
    amount: Optional[Decimal] = None
    type: Optional[TransactionType] = None
    category: Optional[str] = None
    frequency: Optional[RecurrenceFrequency] = None
    account_id: Optional[UUID] = None
    end_date: Optional[date] = None
    due_date: Optional[date] = None
    is_active: Optional[bool] = None
