"""
Shared fixtures.

Every test gets its own in-memory SQLite database. StaticPool keeps the
single connection alive so the schema survives across sessions.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from wealth_dashboard.actions import ActionContext, RecordingInvalidator
from wealth_dashboard.audit import AuditLogger
from wealth_dashboard.models import (
    Account,
    AccountType,
    Investment,
    RecurringSeries,
    Transaction,
    TransactionType,
)
from wealth_dashboard.services.storage import DatabaseClient, RepositorySet, SQLAuditStorage

USER_ID = "user-1"


@pytest.fixture
def database():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    client = DatabaseClient(engine=engine, connect_retries=1)
    client.create_schema()
    yield client
    engine.dispose()


@pytest.fixture
def repositories(database):
    return RepositorySet(database)


@pytest.fixture
def audit_storage(database):
    return SQLAuditStorage(database)


@pytest.fixture
def invalidator():
    return RecordingInvalidator()


@pytest.fixture
def ctx(repositories, invalidator, audit_storage):
    return ActionContext(
        user_id=USER_ID,
        repositories=repositories,
        invalidator=invalidator,
        audit_logger=AuditLogger(audit_storage),
    )


def _stamps():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return {"id": uuid4(), "created_at": now, "updated_at": now}


def make_account(name="Main", user_id=USER_ID, balance="0", account_type=AccountType.PAYROLL):
    return Account(
        user_id=user_id,
        name=name,
        type=account_type,
        balance=Decimal(balance),
        **_stamps(),
    )


def make_transaction(
    amount,
    tx_type,
    account_id,
    to_account_id=None,
    category="groceries",
    user_id=USER_ID,
):
    return Transaction(
        user_id=user_id,
        description=f"{tx_type} {amount}",
        amount=Decimal(amount),
        type=TransactionType(tx_type),
        category=category,
        occurred_on=date(2024, 3, 1),
        account_id=account_id,
        to_account_id=to_account_id,
        **_stamps(),
    )


def make_investment(symbol="VWCE", amount="1000", shares="10"):
    return Investment(
        user_id=USER_ID,
        name=f"{symbol} fund",
        symbol=symbol,
        amount=Decimal(amount),
        shares_acquired=Decimal(shares),
        currency="EUR",
        **_stamps(),
    )


def make_series(
    amount,
    frequency="monthly",
    tx_type="expense",
    due_date=date(2024, 3, 1),
    is_active=True,
):
    return RecurringSeries(
        user_id=USER_ID,
        description=f"{frequency} {amount}",
        amount=Decimal(amount),
        type=TransactionType(tx_type),
        category="bills",
        frequency=frequency,
        account_id=uuid4(),
        start_date=date(2024, 1, 1),
        due_date=due_date,
        is_active=is_active,
        **_stamps(),
    )
