"""
Payload Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION (pydantic input models):
- Type checking
- Required field presence
- Unknown field rejection

STAGE 2 - RULE VALIDATION (this module):
- Blank strings where a value is required
- Hex colors, ticker symbols, currency codes
- Positive amounts
- Transfer consistency

Stage 2 runs on an already-parsed input model and never touches storage,
so every rule here is checked before any persistence call.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them; the action turns errors into a failed result.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from wealth_dashboard.errors import ValidationError
from wealth_dashboard.models.finance import (
    AccountCreate,
    AccountUpdate,
    BudgetCreate,
    BudgetUpdate,
    CategoryCreate,
    CategoryUpdate,
    InvestmentCreate,
    InvestmentUpdate,
    MutationInput,
    RecurringSeriesCreate,
    RecurringSeriesUpdate,
    TransactionCreate,
    TransactionType,
    TransactionUpdate,
)
from wealth_dashboard.models.results import ValidationIssue, ValidationResult
from wealth_dashboard.validation.rules import (
    is_non_empty,
    is_valid_color,
    is_valid_currency,
    is_valid_symbol,
)


def _label(field: str) -> str:
    return field.replace("_", " ").capitalize()


def _present(payload: MutationInput, field: str) -> bool:
    """Whether the caller supplied this field (always true for required fields)."""
    return field in payload.model_fields_set


def _required_text(payload: MutationInput, fields: Iterable[str]) -> list[ValidationIssue]:
    issues = []
    for field in fields:
        if not _present(payload, field):
            continue
        value = getattr(payload, field)
        if value is None or not is_non_empty(value):
            issues.append(ValidationIssue(
                field=field,
                issue_type="empty",
                message=f"{_label(field)} is required",
            ))
    return issues


def _required_value(payload: MutationInput, fields: Iterable[str]) -> list[ValidationIssue]:
    issues = []
    for field in fields:
        if _present(payload, field) and getattr(payload, field) is None:
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{_label(field)} is required",
            ))
    return issues


def _positive(payload: MutationInput, fields: Iterable[str]) -> list[ValidationIssue]:
    issues = []
    for field in fields:
        if not _present(payload, field):
            continue
        value: Optional[Decimal] = getattr(payload, field)
        if value is None or value <= 0:
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_value",
                message=f"{_label(field)} must be greater than zero",
            ))
    return issues


def _missing_destination() -> ValidationIssue:
    return ValidationIssue(
        field="to_account_id",
        issue_type="missing",
        message="Destination account is required for transfers",
    )


def _same_accounts() -> ValidationIssue:
    return ValidationIssue(
        field="to_account_id",
        issue_type="inconsistent",
        message="Source and destination accounts must be different",
    )


def _destination_on_non_transfer() -> ValidationIssue:
    return ValidationIssue(
        field="to_account_id",
        issue_type="inconsistent",
        message="Only transfers can have a destination account",
    )


def transfer_issues(
    tx_type: Optional[str],
    account_id: Optional[UUID],
    to_account_id: Optional[UUID],
) -> list[ValidationIssue]:
    """Rules linking a transaction's type to its source and destination."""
    issues = []
    if tx_type == TransactionType.TRANSFER and to_account_id is None:
        issues.append(_missing_destination())
    if to_account_id is not None:
        if to_account_id == account_id:
            issues.append(_same_accounts())
        if tx_type != TransactionType.TRANSFER:
            issues.append(_destination_on_non_transfer())
    return issues


def schedule_issues(
    tx_type: Optional[str],
    start_date: Optional[date],
    end_date: Optional[date],
) -> list[ValidationIssue]:
    """Rules for a recurring series' type and date range."""
    issues = []
    if tx_type == TransactionType.TRANSFER:
        issues.append(ValidationIssue(
            field="type",
            issue_type="invalid_value",
            message="Recurring series must be income or expense",
        ))
    if start_date is not None and end_date is not None and end_date < start_date:
        issues.append(ValidationIssue(
            field="end_date",
            issue_type="inconsistent",
            message="End date cannot be before the start date",
        ))
    return issues


class PayloadValidator:
    """
    Rule validation for mutation payloads.

    One method per entity; each accepts the create or the update model
    and returns every issue found, errors and warnings alike.
    """

    def validate_category(
        self,
        payload: CategoryCreate | CategoryUpdate,
    ) -> list[ValidationIssue]:
        issues = _required_text(payload, ("label", "key", "icon", "color"))

        color = getattr(payload, "color", None)
        if is_non_empty(color) and not is_valid_color(color):
            issues.append(ValidationIssue(
                field="color",
                issue_type="invalid_format",
                message=f"Color must be a hex code like #3B82F6, got {color!r}",
                suggested_fix="Pick a color from the palette",
            ))

        return issues

    def validate_account(
        self,
        payload: AccountCreate | AccountUpdate,
    ) -> list[ValidationIssue]:
        issues = _required_text(payload, ("name",))
        issues.extend(_required_value(payload, ("type", "balance")))

        balance = payload.balance
        if balance is not None and balance < 0:
            issues.append(ValidationIssue(
                field="balance",
                issue_type="suspicious_value",
                message="Account starts with a negative balance",
                severity="warning",
            ))

        return issues

    def validate_investment(
        self,
        payload: InvestmentCreate | InvestmentUpdate,
    ) -> list[ValidationIssue]:
        issues = _required_text(payload, ("name", "symbol", "currency"))
        issues.extend(_positive(payload, ("amount", "shares_acquired", "currency_rate")))
        issues.extend(_required_value(payload, ("tax_paid", "net_earn")))

        symbol = getattr(payload, "symbol", None)
        if is_non_empty(symbol) and not is_valid_symbol(symbol):
            issues.append(ValidationIssue(
                field="symbol",
                issue_type="invalid_format",
                message=f"Invalid ticker symbol: {symbol}",
                suggested_fix="Use the exchange ticker, e.g. VWCE",
            ))

        currency = getattr(payload, "currency", None)
        if is_non_empty(currency) and not is_valid_currency(currency):
            issues.append(ValidationIssue(
                field="currency",
                issue_type="invalid_format",
                message="Currency must be a valid ISO 4217 code (e.g., EUR, USD)",
            ))

        tax_paid = payload.tax_paid
        if tax_paid is not None and tax_paid < 0:
            issues.append(ValidationIssue(
                field="tax_paid",
                issue_type="invalid_value",
                message="Tax paid cannot be negative",
            ))

        return issues

    def validate_transaction(
        self,
        payload: TransactionCreate | TransactionUpdate,
    ) -> list[ValidationIssue]:
        issues = _required_text(payload, ("description", "category"))
        issues.extend(_positive(payload, ("amount",)))
        issues.extend(_required_value(payload, ("type", "occurred_on", "account_id")))

        if isinstance(payload, TransactionCreate):
            issues.extend(transfer_issues(payload.type, payload.account_id, payload.to_account_id))
            return issues

        # Partial update: only what the payload alone decides. The stored
        # row is checked again after the merge.
        if (
            payload.type == TransactionType.TRANSFER
            and _present(payload, "to_account_id")
            and payload.to_account_id is None
        ):
            issues.append(_missing_destination())
        if payload.to_account_id is not None:
            if payload.to_account_id == payload.account_id:
                issues.append(_same_accounts())
            if payload.type is not None and payload.type != TransactionType.TRANSFER:
                issues.append(_destination_on_non_transfer())

        return issues

    def validate_budget(
        self,
        payload: BudgetCreate | BudgetUpdate,
    ) -> list[ValidationIssue]:
        issues = _positive(payload, ("amount",))
        issues.extend(_required_value(payload, ("period",)))

        description = payload.description
        if description is not None and len(description.strip()) < 2:
            issues.append(ValidationIssue(
                field="description",
                issue_type="invalid_value",
                message="Description must be at least 2 characters",
            ))

        checks_categories = isinstance(payload, BudgetCreate) or _present(payload, "categories")
        if checks_categories and not [c for c in payload.categories or [] if is_non_empty(c)]:
            issues.append(ValidationIssue(
                field="categories",
                issue_type="empty",
                message="At least one category is required",
                suggested_fix="Pick the categories this budget tracks",
            ))

        return issues

    def validate_recurring_series(
        self,
        payload: RecurringSeriesCreate | RecurringSeriesUpdate,
    ) -> list[ValidationIssue]:
        issues = _required_text(payload, ("description", "category"))
        issues.extend(_positive(payload, ("amount",)))
        issues.extend(_required_value(
            payload, ("type", "frequency", "account_id", "due_date", "is_active"),
        ))

        start_date = getattr(payload, "start_date", None)
        issues.extend(schedule_issues(payload.type, start_date, payload.end_date))

        return issues

    def validate(self, payload: MutationInput) -> ValidationResult:
        """
        Dispatch to the rule set for the payload's entity.

        Returns:
            ValidationResult with all issues found
        """
        if isinstance(payload, (CategoryCreate, CategoryUpdate)):
            issues = self.validate_category(payload)
        elif isinstance(payload, (AccountCreate, AccountUpdate)):
            issues = self.validate_account(payload)
        elif isinstance(payload, (InvestmentCreate, InvestmentUpdate)):
            issues = self.validate_investment(payload)
        elif isinstance(payload, (TransactionCreate, TransactionUpdate)):
            issues = self.validate_transaction(payload)
        elif isinstance(payload, (BudgetCreate, BudgetUpdate)):
            issues = self.validate_budget(payload)
        elif isinstance(payload, (RecurringSeriesCreate, RecurringSeriesUpdate)):
            issues = self.validate_recurring_series(payload)
        else:
            raise TypeError(f"No validation rules for {type(payload).__name__}")
        return ValidationResult(issues=issues)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        Summarize issues for display next to a form.
        """
        if not result.issues:
            return "✅ All checks passed."

        lines = []
        errors = [i for i in result.issues if i.severity == "error"]
        warnings = [i for i in result.issues if i.severity == "warning"]

        if errors:
            lines.append("❌ Please fix the following:")
            for issue in errors:
                lines.append(f"  • {issue.message}")
        if warnings:
            lines.append("⚠️ Please double-check:")
            for issue in warnings:
                lines.append(f"  • {issue.message}")

        return "\n".join(lines)


def raise_for_issues(result: ValidationResult) -> None:
    """Raise ValidationError carrying the first error-level message, if any."""
    issue = result.first_error
    if issue is not None:
        raise ValidationError(issue.message)


_default_validator = PayloadValidator()


def validate_payload(payload: MutationInput) -> ValidationResult:
    """Validate with the shared validator and raise on the first error."""
    result = _default_validator.validate(payload)
    raise_for_issues(result)
    return result


def validate_transaction_state(
    tx_type: Optional[str],
    account_id: Optional[UUID],
    to_account_id: Optional[UUID],
) -> None:
    """Check a transaction as it will be stored, after a partial update."""
    raise_for_issues(ValidationResult(issues=transfer_issues(tx_type, account_id, to_account_id)))


def validate_recurring_state(
    tx_type: Optional[str],
    start_date: Optional[date],
    end_date: Optional[date],
) -> None:
    """Check a recurring series as it will be stored, after a partial update."""
    raise_for_issues(ValidationResult(issues=schedule_issues(tx_type, start_date, end_date)))
