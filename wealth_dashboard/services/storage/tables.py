"""
SQLAlchemy table definitions.

One table per entity plus the append-only audit log. Column types are
portable between PostgreSQL and SQLite (Uuid, JSON, Numeric).
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import declarative_base


def now_utc():
    """Return an aware UTC datetime for default/updated timestamps."""
    return datetime.now(timezone.utc)


Base = declarative_base()


class TimestampedRow:
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)


class CategoryRow(TimestampedRow, Base):
    __tablename__ = 'categories'
    label = Column(String(255), nullable=False)
    key = Column(String(255), nullable=False)
    icon = Column(String(64), nullable=False)
    color = Column(String(7), nullable=False)
    group_id = Column(String(255), nullable=True)

    __table_args__ = (
        Index('ix_categories_user_key', 'user_id', 'key', unique=True),
    )


class AccountRow(TimestampedRow, Base):
    __tablename__ = 'accounts'
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)
    balance = Column(Numeric(15, 2), nullable=False, default=0)
    group_id = Column(String(255), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "type in ('payroll','cash','savings','investments')",
            name='ck_accounts_type',
        ),
    )


class InvestmentRow(TimestampedRow, Base):
    __tablename__ = 'investments'
    name = Column(String(255), nullable=False)
    symbol = Column(String(32), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    shares_acquired = Column(Numeric(18, 6), nullable=False)
    currency = Column(String(3), nullable=False)
    currency_rate = Column(Numeric(12, 6), nullable=False, default=1)
    tax_paid = Column(Numeric(15, 2), nullable=False, default=0)
    net_earn = Column(Numeric(15, 2), nullable=False, default=0)


class TransactionRow(TimestampedRow, Base):
    __tablename__ = 'transactions'
    description = Column(Text, nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    type = Column(String(10), nullable=False)
    category = Column(String(255), nullable=False)
    occurred_on = Column(Date, nullable=False)
    account_id = Column(Uuid, ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False)
    to_account_id = Column(Uuid, ForeignKey('accounts.id', ondelete='SET NULL'), nullable=True)

    __table_args__ = (
        Index('ix_transactions_account_id', 'account_id'),
        Index('ix_transactions_occurred_on', 'occurred_on'),
        CheckConstraint(
            "type in ('income','expense','transfer')",
            name='ck_transactions_type',
        ),
    )


class BudgetRow(TimestampedRow, Base):
    __tablename__ = 'budgets'
    description = Column(Text, nullable=True)
    amount = Column(Numeric(15, 2), nullable=False)
    period = Column(String(10), nullable=False)
    categories = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        CheckConstraint("period in ('monthly','annually')", name='ck_budgets_period'),
    )


class AuditLogRow(Base):
    __tablename__ = 'audit_log'
    event_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    timestamp = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    event_type = Column(String(64), nullable=False)
    severity = Column(String(16), nullable=False)
    entity_type = Column(String(32), nullable=True)
    entity_id = Column(String(64), nullable=True)
    user_id = Column(String(255), nullable=True)
    correlation_id = Column(Uuid, nullable=True)
    description = Column(String(500), nullable=False)
    details = Column(JSON, nullable=False, default=dict)
    error_message = Column(Text, nullable=True)

    __table_args__ = (
        Index('ix_audit_log_entity', 'entity_type', 'entity_id'),
        Index('ix_audit_log_timestamp', 'timestamp'),
    )


class RecurringSeriesRow(TimestampedRow, Base):
    __tablename__ = 'recurring_series'
    description = Column(Text, nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    type = Column(String(10), nullable=False)
    category = Column(String(255), nullable=False)
    frequency = Column(String(10), nullable=False)
    account_id = Column(Uuid, ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    total_executions = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index('ix_recurring_series_due_date', 'due_date'),
        CheckConstraint("type in ('income','expense')", name='ck_recurring_series_type'),
        CheckConstraint(
            "frequency in ('once','weekly','biweekly','monthly','yearly')",
            name='ck_recurring_series_frequency',
        ),
    )
