"""
Recurring series schedule and the figures shown on the Recurring page.

DESIGN DECISION: Month arithmetic clamps to the last day of the month.
A series due on Jan 31 falls due next on Feb 28 (29 in leap years), then
on Mar 28; it never skips a month.
"""

import calendar
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from wealth_dashboard.models.finance import (
    RecurrenceFrequency,
    RecurringSeries,
    TransactionType,
)

DEFAULT_MAX_DAYS_OVERDUE = 7

# Occurrences per month, for the monthly-equivalent totals
_PER_MONTH = {
    RecurrenceFrequency.ONCE: Decimal("0"),
    RecurrenceFrequency.WEEKLY: Decimal("52") / Decimal("12"),
    RecurrenceFrequency.BIWEEKLY: Decimal("26") / Decimal("12"),
    RecurrenceFrequency.MONTHLY: Decimal("1"),
    RecurrenceFrequency.YEARLY: Decimal("1") / Decimal("12"),
}


class RecurringSummary(BaseModel):
    active_count: int = 0
    monthly_income: Decimal = Decimal("0")
    monthly_expense: Decimal = Decimal("0")
    due: list[RecurringSeries] = Field(
        default_factory=list,
        description="Active series due today or overdue by at most a week"
    )

    @property
    def monthly_net(self) -> Decimal:
        return self.monthly_income - self.monthly_expense


def add_months(day: date, months: int) -> date:
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def next_due_date(current: date, frequency: RecurrenceFrequency | str) -> Optional[date]:
    """
    The date after `current` on which the series falls due again.

    Returns None for one-off series.
    """
    frequency = RecurrenceFrequency(frequency)
    if frequency == RecurrenceFrequency.WEEKLY:
        return current + timedelta(days=7)
    if frequency == RecurrenceFrequency.BIWEEKLY:
        return current + timedelta(days=14)
    if frequency == RecurrenceFrequency.MONTHLY:
        return add_months(current, 1)
    if frequency == RecurrenceFrequency.YEARLY:
        return add_months(current, 12)
    return None


def due_series(
    series: Iterable[RecurringSeries],
    today: date,
    max_days_overdue: int = DEFAULT_MAX_DAYS_OVERDUE,
) -> list[RecurringSeries]:
    """Active series due today or at most max_days_overdue days late, oldest first."""
    due = [
        s for s in series
        if s.is_active and 0 <= (today - s.due_date).days <= max_days_overdue
    ]
    return sorted(due, key=lambda s: s.due_date)


def summarize_recurring(
    series: Iterable[RecurringSeries],
    today: Optional[date] = None,
) -> RecurringSummary:
    series = list(series)
    today = today or date.today()
    income = Decimal("0")
    expense = Decimal("0")
    active = [s for s in series if s.is_active]
    for s in active:
        monthly = s.amount * _PER_MONTH[RecurrenceFrequency(s.frequency)]
        if s.type == TransactionType.INCOME:
            income += monthly
        else:
            expense += monthly

    cents = Decimal("0.01")
    return RecurringSummary(
        active_count=len(active),
        monthly_income=income.quantize(cents, rounding=ROUND_HALF_UP),
        monthly_expense=expense.quantize(cents, rounding=ROUND_HALF_UP),
        due=due_series(active, today),
    )
