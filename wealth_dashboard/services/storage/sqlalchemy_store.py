"""
SQLAlchemy Storage Implementation

DESIGN DECISION: A relational database behind SQLAlchemy is the storage
backend because:
1. The same code runs against PostgreSQL (production) and SQLite (local, tests)
2. Per-user queries and key lookups are indexed instead of filtered in Python
3. Foreign keys tie transactions to accounts

TRADEOFFS:
- Repositories are async but the ORM session is synchronous. Each call is
  short (one statement, one commit), so we accept blocking the loop.
- No optimistic concurrency: the last write wins.

The implementation follows the abstract interface, so actions never import
SQLAlchemy.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional
from uuid import UUID

from sqlalchemy import create_engine, event, or_, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from tenacity import RetryError, Retrying, stop_after_attempt, wait_exponential

from wealth_dashboard.config import get_settings
from wealth_dashboard.errors import NotFoundError, PersistenceError, ValidationError
from wealth_dashboard.models.audit import AuditEvent
from wealth_dashboard.models.finance import (
    Account,
    Budget,
    Category,
    EntityKind,
    Investment,
    RecurringSeries,
    Transaction,
    TransactionType,
)
from wealth_dashboard.services.storage.interface import (
    AuditStorageInterface,
    RecordT,
    Repository,
)
from wealth_dashboard.services.storage.request_cache import RequestCache
from wealth_dashboard.services.storage.tables import (
    AccountRow,
    AuditLogRow,
    Base,
    BudgetRow,
    CategoryRow,
    InvestmentRow,
    RecurringSeriesRow,
    TransactionRow,
    now_utc,
)
from wealth_dashboard.validation import validate_recurring_state, validate_transaction_state
from wealth_dashboard.views.recurring import next_due_date


def _engine_for(url: str, echo: bool) -> Engine:
    """Build an engine; in-memory SQLite shares one connection across threads."""
    if url.startswith("sqlite"):
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=echo, **kwargs)

        # SQLite leaves foreign keys off per connection
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine
    return create_engine(url, echo=echo, pool_pre_ping=True)


class DatabaseClient:
    """
    Low-level database wrapper.

    Owns the engine and the session factory, and provides retry logic for
    the initial connection.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        engine: Optional[Engine] = None,
        connect_retries: Optional[int] = None,
    ):
        if engine is None or connect_retries is None:
            settings = get_settings().database
            url = url or settings.url
            connect_retries = connect_retries or settings.connect_retries
            engine = engine or _engine_for(url, settings.echo)
        self._engine = engine
        self._connect_retries = connect_retries
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    @property
    def engine(self) -> Engine:
        return self._engine

    def connect(self) -> Engine:
        """
        Check that the database answers.

        Retries with exponential backoff before giving up.
        """
        try:
            for attempt in Retrying(
                stop=stop_after_attempt(self._connect_retries),
                wait=wait_exponential(multiplier=1, min=2, max=10),
            ):
                with attempt:
                    with self._engine.connect() as conn:
                        conn.execute(text("SELECT 1"))
        except RetryError as e:
            cause = e.last_attempt.exception()
            raise PersistenceError(f"Failed to connect to database: {cause}") from cause
        return self._engine

    def create_schema(self) -> None:
        """Create every table that does not exist yet."""
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to create schema: {e}") from e

    @contextmanager
    def session(self) -> Iterator[Session]:
        """One session, one commit. ORM errors surface as PersistenceError."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Database operation failed: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


class SQLRepository(Repository[RecordT]):
    """
    Generic repository over one table.

    Subclasses only declare which row class and record model they map.
    Rows never leave this module; callers receive pydantic records.

    Updates and deletes match on id AND owner. A record owned by someone
    else is reported exactly like a missing one.
    """

    entity: EntityKind
    row_class: type
    record_class: type

    def __init__(self, client: DatabaseClient):
        self._client = client

    def _to_record(self, row) -> RecordT:
        return self.record_class.model_validate(row)

    def _not_found(self, record_id: UUID) -> NotFoundError:
        label = self.entity.value.replace("_", " ").capitalize()
        return NotFoundError(f"{label} not found: {record_id}")

    def _order_by(self):
        return (self.row_class.created_at,)

    def _owned_row(self, session: Session, record_id: UUID, user_id: str):
        stmt = select(self.row_class).where(
            self.row_class.id == record_id,
            self.row_class.user_id == user_id,
        )
        row = session.scalars(stmt).first()
        if row is None:
            raise self._not_found(record_id)
        return row

    def _prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        return data

    def _apply_changes(self, row, data: Mapping[str, Any]) -> None:
        for field, value in data.items():
            setattr(row, field, value)

    def _check_write(self, session: Session, row) -> None:
        """Checks on the final row state, run before it is flushed."""

    async def create(self, data: Mapping[str, Any]) -> RecordT:
        with self._client.session() as session:
            row = self.row_class(**self._prepare_create(dict(data)))
            self._check_write(session, row)
            session.add(row)
            session.flush()
            return self._to_record(row)

    async def update(self, record_id: UUID, data: Mapping[str, Any], user_id: str) -> RecordT:
        with self._client.session() as session:
            row = self._owned_row(session, record_id, user_id)
            with session.no_autoflush:
                self._apply_changes(row, data)
                self._check_write(session, row)
            row.updated_at = now_utc()
            session.flush()
            return self._to_record(row)

    async def delete(self, record_id: UUID, user_id: str) -> UUID:
        with self._client.session() as session:
            row = self._owned_row(session, record_id, user_id)
            session.delete(row)
            return record_id

    async def get_by_id(self, record_id: UUID) -> Optional[RecordT]:
        with self._client.session() as session:
            row = session.get(self.row_class, record_id)
            return self._to_record(row) if row is not None else None

    async def get_by_user(
        self,
        user_id: str,
        cache: Optional[RequestCache] = None,
    ) -> list[RecordT]:
        if cache is None:
            return await self._load_by_user(user_id)
        return await cache.get_or_load(
            (self.entity.value, user_id),
            lambda: self._load_by_user(user_id),
        )

    async def _load_by_user(self, user_id: str) -> list[RecordT]:
        stmt = (
            select(self.row_class)
            .where(self.row_class.user_id == user_id)
            .order_by(*self._order_by())
        )
        with self._client.session() as session:
            return [self._to_record(row) for row in session.scalars(stmt)]


class CategoryRepository(SQLRepository[Category]):
    entity = EntityKind.CATEGORY
    row_class = CategoryRow
    record_class = Category

    async def get_by_key(self, user_id: str, key: str) -> Optional[Category]:
        """Look up a category by its normalized key."""
        stmt = select(CategoryRow).where(
            CategoryRow.user_id == user_id,
            CategoryRow.key == key.strip().lower(),
        )
        with self._client.session() as session:
            row = session.scalars(stmt).first()
            return self._to_record(row) if row is not None else None


class AccountRepository(SQLRepository[Account]):
    entity = EntityKind.ACCOUNT
    row_class = AccountRow
    record_class = Account

    def _order_by(self):
        return (AccountRow.name, AccountRow.created_at)


class InvestmentRepository(SQLRepository[Investment]):
    entity = EntityKind.INVESTMENT
    row_class = InvestmentRow
    record_class = Investment


def _check_accounts_owned(session: Session, user_id: str, *account_ids: Optional[UUID]) -> None:
    """Every referenced account must belong to the writing user."""
    wanted = {account_id for account_id in account_ids if account_id is not None}
    if not wanted:
        return
    stmt = select(AccountRow.id).where(
        AccountRow.id.in_(wanted),
        AccountRow.user_id == user_id,
    )
    missing = wanted - set(session.scalars(stmt))
    if missing:
        raise NotFoundError(f"Account not found: {sorted(str(m) for m in missing)[0]}")


class TransactionRepository(SQLRepository[Transaction]):
    entity = EntityKind.TRANSACTION
    row_class = TransactionRow
    record_class = Transaction

    def _order_by(self):
        # Newest first
        return (TransactionRow.occurred_on.desc(), TransactionRow.created_at.desc())

    def _apply_changes(self, row, data: Mapping[str, Any]) -> None:
        super()._apply_changes(row, data)
        # A type change away from transfer drops the old destination
        if "type" in data and "to_account_id" not in data and row.type != TransactionType.TRANSFER:
            row.to_account_id = None

    def _check_write(self, session: Session, row) -> None:
        validate_transaction_state(row.type, row.account_id, row.to_account_id)
        _check_accounts_owned(session, row.user_id, row.account_id, row.to_account_id)

    async def get_by_account(self, account_id: UUID) -> list[Transaction]:
        """Transactions that move money out of or into an account."""
        stmt = (
            select(TransactionRow)
            .where(or_(
                TransactionRow.account_id == account_id,
                TransactionRow.to_account_id == account_id,
            ))
            .order_by(*self._order_by())
        )
        with self._client.session() as session:
            return [self._to_record(row) for row in session.scalars(stmt)]


class BudgetRepository(SQLRepository[Budget]):
    entity = EntityKind.BUDGET
    row_class = BudgetRow
    record_class = Budget


class RecurringSeriesRepository(SQLRepository[RecurringSeries]):
    entity = EntityKind.RECURRING_SERIES
    row_class = RecurringSeriesRow
    record_class = RecurringSeries

    def _order_by(self):
        return (RecurringSeriesRow.due_date, RecurringSeriesRow.created_at)

    def _prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data.setdefault("due_date", data.get("start_date"))
        return data

    def _check_write(self, session: Session, row) -> None:
        validate_recurring_state(row.type, row.start_date, row.end_date)
        _check_accounts_owned(session, row.user_id, row.account_id)

    async def advance(self, record_id: UUID, user_id: str) -> RecurringSeries:
        """
        Record one execution and move due_date forward by one step.

        A one-off series, or one whose next date falls after end_date, is
        deactivated instead and keeps its last due_date.
        """
        with self._client.session() as session:
            row = self._owned_row(session, record_id, user_id)
            if not row.is_active:
                raise ValidationError("Recurring series is not active")
            following = next_due_date(row.due_date, row.frequency)
            row.total_executions += 1
            if following is None or (row.end_date is not None and following > row.end_date):
                row.is_active = False
            else:
                row.due_date = following
            row.updated_at = now_utc()
            session.flush()
            return self._to_record(row)


class SQLAuditStorage(AuditStorageInterface):
    """
    Audit log stored in the `audit_log` table.

    Append-only: rows are inserted and read, never updated.
    """

    def __init__(self, client: DatabaseClient):
        self._client = client

    async def append_event(self, event: AuditEvent) -> bool:
        with self._client.session() as session:
            session.add(AuditLogRow(
                event_id=event.event_id,
                timestamp=event.timestamp,
                event_type=event.event_type.value,
                severity=event.severity.value,
                entity_type=event.entity_type,
                entity_id=event.entity_id,
                user_id=event.user_id,
                correlation_id=event.correlation_id,
                description=event.description,
                details=event.details,
                error_message=event.error_message,
            ))
        return True

    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        stmt = (
            select(AuditLogRow)
            .where(
                AuditLogRow.entity_type == entity_type,
                AuditLogRow.entity_id == entity_id,
            )
            .order_by(AuditLogRow.timestamp)
        )
        with self._client.session() as session:
            return [AuditEvent.model_validate(row) for row in session.scalars(stmt)]

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        stmt = select(AuditLogRow).order_by(AuditLogRow.timestamp.desc()).limit(limit)
        with self._client.session() as session:
            return [AuditEvent.model_validate(row) for row in session.scalars(stmt)]


class RepositorySet:
    """The entity repositories over one client."""

    def __init__(self, client: DatabaseClient):
        self.categories = CategoryRepository(client)
        self.accounts = AccountRepository(client)
        self.investments = InvestmentRepository(client)
        self.transactions = TransactionRepository(client)
        self.budgets = BudgetRepository(client)
        self.recurring_series = RecurringSeriesRepository(client)

    def for_entity(self, entity: EntityKind) -> SQLRepository:
        return {
            EntityKind.CATEGORY: self.categories,
            EntityKind.ACCOUNT: self.accounts,
            EntityKind.INVESTMENT: self.investments,
            EntityKind.TRANSACTION: self.transactions,
            EntityKind.BUDGET: self.budgets,
            EntityKind.RECURRING_SERIES: self.recurring_series,
        }[entity]
