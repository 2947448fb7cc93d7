"""Tests for the SQLAlchemy repositories and the database client."""

import asyncio
from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import create_engine

from wealth_dashboard.errors import NotFoundError, PersistenceError
from wealth_dashboard.models import AccountType, EntityKind
from wealth_dashboard.services.storage import DatabaseClient, RequestCache

USER_ID = "user-1"


def category_data(key="food", user_id=USER_ID):
    return {"user_id": user_id, "label": key.title(), "key": key, "icon": "🏷️", "color": "#3B82F6"}


def account_data(name="Main", user_id=USER_ID):
    return {"user_id": user_id, "name": name, "type": "payroll", "balance": Decimal("10.00")}


class TestDatabaseClient:
    """Connection and schema management."""

    def test_connect_returns_engine(self, database):
        assert database.connect() is database.engine

    def test_connect_failure_raises_persistence_error(self, tmp_path):
        # A directory cannot be opened as a SQLite database file
        engine = create_engine(f"sqlite:///{tmp_path}")
        client = DatabaseClient(engine=engine, connect_retries=1)
        with pytest.raises(PersistenceError, match="Failed to connect"):
            client.connect()

    def test_session_translates_orm_errors(self, database, repositories):
        asyncio.run(repositories.categories.create(category_data()))
        with pytest.raises(PersistenceError):
            asyncio.run(repositories.categories.create(category_data()))


class TestCrud:
    """Create, update, delete and read through one repository."""

    def test_create_assigns_id_and_timestamps(self, repositories):
        record = asyncio.run(repositories.accounts.create(account_data()))
        assert record.id is not None
        assert record.user_id == USER_ID
        assert record.type == AccountType.PAYROLL
        assert record.balance == Decimal("10.00")
        assert record.created_at is not None
        assert record.updated_at is not None

    def test_get_by_id(self, repositories):
        created = asyncio.run(repositories.accounts.create(account_data()))
        fetched = asyncio.run(repositories.accounts.get_by_id(created.id))
        assert fetched.id == created.id
        assert fetched.name == "Main"

    def test_get_by_id_missing_returns_none(self, repositories):
        assert asyncio.run(repositories.accounts.get_by_id(uuid4())) is None

    def test_update_merges_fields(self, repositories):
        created = asyncio.run(repositories.categories.create(category_data()))
        updated = asyncio.run(repositories.categories.update(created.id, {"color": "#000000"}, USER_ID))
        assert updated.id == created.id
        assert updated.color == "#000000"
        assert updated.label == "Food"

    def test_update_missing_raises_not_found(self, repositories):
        with pytest.raises(NotFoundError, match="Category not found"):
            asyncio.run(repositories.categories.update(uuid4(), {"label": "x"}, USER_ID))

    def test_delete_returns_id(self, repositories):
        created = asyncio.run(repositories.budgets.create({
            "user_id": USER_ID, "amount": Decimal("200"), "period": "monthly", "categories": ["food"],
        }))
        assert asyncio.run(repositories.budgets.delete(created.id, USER_ID)) == created.id
        assert asyncio.run(repositories.budgets.get_by_id(created.id)) is None

    def test_delete_is_not_idempotent(self, repositories):
        created = asyncio.run(repositories.accounts.create(account_data()))
        asyncio.run(repositories.accounts.delete(created.id, USER_ID))
        with pytest.raises(NotFoundError):
            asyncio.run(repositories.accounts.delete(created.id, USER_ID))

    def test_update_of_another_users_record_raises_not_found(self, repositories):
        created = asyncio.run(repositories.categories.create(category_data()))
        with pytest.raises(NotFoundError, match="Category not found"):
            asyncio.run(repositories.categories.update(created.id, {"label": "x"}, "user-2"))
        assert asyncio.run(repositories.categories.get_by_id(created.id)).label == "Food"

    def test_delete_of_another_users_record_raises_not_found(self, repositories):
        created = asyncio.run(repositories.accounts.create(account_data()))
        with pytest.raises(NotFoundError, match="Account not found"):
            asyncio.run(repositories.accounts.delete(created.id, "user-2"))
        assert asyncio.run(repositories.accounts.get_by_id(created.id)) is not None

    def test_budget_categories_round_trip_as_list(self, repositories):
        created = asyncio.run(repositories.budgets.create({
            "user_id": USER_ID, "amount": Decimal("50"), "period": "annually",
            "categories": ["food", "fun"],
        }))
        fetched = asyncio.run(repositories.budgets.get_by_id(created.id))
        assert fetched.categories == ["food", "fun"]


class TestQueries:
    """Per-user and entity-specific reads."""

    def test_get_by_user_only_returns_owned_records(self, repositories):
        asyncio.run(repositories.accounts.create(account_data("Mine")))
        asyncio.run(repositories.accounts.create(account_data("Theirs", user_id="user-2")))
        names = [a.name for a in asyncio.run(repositories.accounts.get_by_user(USER_ID))]
        assert names == ["Mine"]

    def test_get_by_key_normalizes(self, repositories):
        asyncio.run(repositories.categories.create(category_data("groceries")))
        found = asyncio.run(repositories.categories.get_by_key(USER_ID, "  Groceries "))
        assert found is not None
        assert found.key == "groceries"
        assert asyncio.run(repositories.categories.get_by_key("user-2", "groceries")) is None

    def test_transactions_by_account_include_incoming_transfers(self, repositories):
        main = asyncio.run(repositories.accounts.create(account_data("Main")))
        savings = asyncio.run(repositories.accounts.create(account_data("Savings")))

        def tx(amount, tx_type, account_id, to_account_id=None):
            return asyncio.run(repositories.transactions.create({
                "user_id": USER_ID,
                "description": tx_type,
                "amount": Decimal(amount),
                "type": tx_type,
                "category": "misc",
                "occurred_on": date(2024, 1, 1),
                "account_id": account_id,
                "to_account_id": to_account_id,
            }))

        tx("5", "expense", main.id)
        transfer = tx("50", "transfer", main.id, savings.id)

        savings_history = asyncio.run(repositories.transactions.get_by_account(savings.id))
        assert [t.id for t in savings_history] == [transfer.id]
        assert len(asyncio.run(repositories.transactions.get_by_account(main.id))) == 2

    def test_for_entity(self, repositories):
        assert repositories.for_entity(EntityKind.BUDGET) is repositories.budgets
        assert repositories.for_entity(EntityKind.CATEGORY) is repositories.categories
        assert repositories.for_entity(EntityKind.RECURRING_SERIES) is repositories.recurring_series


class TestRecurringSeriesRepository:
    """Schedule bookkeeping on the recurring_series table."""

    def _create(self, repositories, **overrides):
        account = asyncio.run(repositories.accounts.create(account_data()))
        data = {
            "user_id": USER_ID,
            "description": "Gym",
            "amount": Decimal("30"),
            "type": "expense",
            "category": "health",
            "frequency": "weekly",
            "account_id": account.id,
            "start_date": date(2024, 4, 1),
        }
        data.update(overrides)
        return asyncio.run(repositories.recurring_series.create(data))

    def test_first_due_date_is_the_start_date(self, repositories):
        series = self._create(repositories)
        assert series.due_date == date(2024, 4, 1)
        assert series.is_active is True
        assert series.total_executions == 0

    def test_advance_weekly(self, repositories):
        series = self._create(repositories)
        advanced = asyncio.run(repositories.recurring_series.advance(series.id, USER_ID))
        assert advanced.due_date == date(2024, 4, 8)
        assert advanced.total_executions == 1

    def test_advance_requires_ownership(self, repositories):
        series = self._create(repositories)
        with pytest.raises(NotFoundError, match="Recurring series not found"):
            asyncio.run(repositories.recurring_series.advance(series.id, "user-2"))

    def test_listed_by_due_date(self, repositories):
        later = self._create(repositories, start_date=date(2024, 5, 1))
        sooner = self._create(repositories, start_date=date(2024, 4, 1))
        listed = asyncio.run(repositories.recurring_series.get_by_user(USER_ID))
        assert [s.id for s in listed] == [sooner.id, later.id]

    def test_unknown_account_is_rejected(self, repositories):
        with pytest.raises(NotFoundError, match="Account not found"):
            self._create(repositories, account_id=uuid4())


class TestRequestCache:
    """Per-request memoization of per-user reads."""

    def test_repeated_reads_hit_the_cache(self, repositories):
        cache = RequestCache()
        asyncio.run(repositories.accounts.create(account_data("First")))

        first = asyncio.run(repositories.accounts.get_by_user(USER_ID, cache))
        asyncio.run(repositories.accounts.create(account_data("Second")))
        second = asyncio.run(repositories.accounts.get_by_user(USER_ID, cache))

        assert [a.name for a in second] == [a.name for a in first] == ["First"]
        assert cache.hits == 1
        assert cache.misses == 1

    def test_new_request_sees_fresh_data(self, repositories):
        asyncio.run(repositories.accounts.get_by_user(USER_ID, RequestCache()))
        asyncio.run(repositories.accounts.create(account_data("Later")))
        fresh = asyncio.run(repositories.accounts.get_by_user(USER_ID, RequestCache()))
        assert [a.name for a in fresh] == ["Later"]

    def test_cache_is_keyed_per_entity_and_user(self, repositories):
        cache = RequestCache()
        asyncio.run(repositories.accounts.get_by_user(USER_ID, cache))
        asyncio.run(repositories.categories.get_by_user(USER_ID, cache))
        asyncio.run(repositories.accounts.get_by_user("user-2", cache))
        assert len(cache) == 3
        assert ("account", USER_ID) in cache

    def test_clear(self):
        cache = RequestCache()

        async def load():
            return 42

        assert asyncio.run(cache.get_or_load("k", load)) == 42
        cache.clear()
        assert "k" not in cache
        assert len(cache) == 0
