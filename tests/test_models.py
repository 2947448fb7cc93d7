"""
Tests for Wealth Dashboard models

Test strategy:
1. Unit tests for individual components (models, validators, views)
2. Integration tests for actions against an in-memory SQLite database
3. No external services in tests
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from wealth_dashboard.models import (
    AccountCreate,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    BudgetCreate,
    BudgetPeriod,
    CategoryCreate,
    CategoryUpdate,
    InvestmentCreate,
    MutationResult,
    TransactionCreate,
    ValidationIssue,
    ValidationResult,
)


class TestInputModels:
    """Tests for mutation payload models."""

    def test_category_create_normalizes_key_and_color(self):
        """Keys are lowercased, colors uppercased, whitespace stripped."""
        payload = CategoryCreate(label="  Food ", key=" Groceries ", icon="🛒", color="#ff00aa")
        assert payload.label == "Food"
        assert payload.key == "groceries"
        assert payload.color == "#FF00AA"

    def test_category_update_leaves_missing_color_alone(self):
        payload = CategoryUpdate(label="Food")
        assert payload.color is None
        assert payload.model_dump(exclude_unset=True) == {"label": "Food"}

    def test_inputs_reject_unknown_fields(self):
        """Owner and id are never accepted from callers."""
        with pytest.raises(ValidationError):
            CategoryCreate(label="Food", key="food", icon="x", color="#FFF", user_id="someone")
        with pytest.raises(ValidationError):
            AccountCreate(name="Main", type="cash", id=str(uuid4()))

    def test_enum_fields_dump_as_strings(self):
        payload = AccountCreate(name="Main", type="savings")
        assert payload.model_dump()["type"] == "savings"

    def test_invalid_enum_value_rejected(self):
        with pytest.raises(ValidationError):
            AccountCreate(name="Main", type="crypto")

    def test_investment_symbol_uppercased(self):
        payload = InvestmentCreate(
            name="World",
            symbol="vwce",
            amount=Decimal("100"),
            shares_acquired=Decimal("1"),
            currency="eur",
        )
        assert payload.symbol == "VWCE"
        assert payload.currency == "EUR"

    def test_budget_defaults_to_monthly(self):
        payload = BudgetCreate(amount=Decimal("300"), categories=["food"])
        assert payload.period == BudgetPeriod.MONTHLY.value

    def test_transaction_parses_date_and_ids(self):
        account_id = uuid4()
        payload = TransactionCreate(
            description="Rent",
            amount="850.00",
            type="expense",
            category="housing",
            occurred_on="2024-02-01",
            account_id=str(account_id),
        )
        assert payload.occurred_on == date(2024, 2, 1)
        assert payload.account_id == account_id
        assert payload.amount == Decimal("850.00")


class TestMutationResult:
    """Tests for the uniform action result."""

    def test_ok(self):
        result = MutationResult.ok({"id": "x"})
        assert result.success is True
        assert result.data == {"id": "x"}
        assert result.error is None

    def test_failure(self):
        result = MutationResult.failure("Record not found")
        assert result.success is False
        assert result.data is None
        assert result.error == "Record not found"


class TestAuditModels:
    """Tests for audit models."""

    def test_audit_event_creation(self):
        """Test AuditEvent creation."""
        event = AuditEvent(
            event_type=AuditEventType.ENTITY_CREATED,
            description="Category created",
        )
        assert event.event_type == AuditEventType.ENTITY_CREATED
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        correlation_id = uuid4()
        event = AuditEvent(
            event_type=AuditEventType.MUTATION_FAILED,
            severity=AuditSeverity.ERROR,
            description="UpdateCategory failed",
            correlation_id=correlation_id,
            error_message="Category not found",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "mutation_failed"
        assert log_dict["severity"] == "error"
        assert log_dict["correlation_id"] == str(correlation_id)
        assert log_dict["error_message"] == "Category not found"

    def test_builder_entity_deleted_is_warning(self):
        event = AuditEventBuilder.entity_deleted("account", "abc", "user-1")
        assert event.event_type == AuditEventType.ENTITY_DELETED
        assert event.severity == AuditSeverity.WARNING
        assert event.description == "Account deleted"

    def test_builder_entity_updated_records_fields(self):
        event = AuditEventBuilder.entity_updated("category", "abc", "user-1", ["color", "label"])
        assert event.details == {"fields": ["color", "label"]}

    def test_builder_cache_invalidated(self):
        event = AuditEventBuilder.cache_invalidated("budget", ["budgets", "dashboard"])
        assert event.details["tags"] == ["budgets", "dashboard"]
        assert event.description == "Invalidated 2 cached views"


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_validation_result_has_errors(self):
        result = ValidationResult(issues=[
            ValidationIssue(field="label", issue_type="empty", message="Label is required"),
            ValidationIssue(field="balance", issue_type="suspicious_value", message="x", severity="warning"),
        ])
        assert result.has_errors is True
        assert result.error_count == 1
        assert result.first_error.field == "label"

    def test_validation_result_warnings_only(self):
        result = ValidationResult(issues=[
            ValidationIssue(field="balance", issue_type="suspicious_value", message="x", severity="warning"),
        ])
        assert result.has_errors is False
        assert result.first_error is None

    def test_issue_severity_is_constrained(self):
        with pytest.raises(ValidationError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")
