"""
Report calculations.

Overview totals and category breakdowns over a list of transactions.
Everything here is a single pass over plain records.
"""

from collections import OrderedDict
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from pydantic import BaseModel

from wealth_dashboard.models.finance import Transaction, TransactionType


class OverviewMetrics(BaseModel):
    total_earned: Decimal = Decimal("0")
    total_spent: Decimal = Decimal("0")
    total_transferred: Decimal = Decimal("0")
    total_balance: Decimal = Decimal("0")


class CategoryBreakdownItem(BaseModel):
    category: str
    spent: Decimal = Decimal("0")
    received: Decimal = Decimal("0")
    net: Decimal = Decimal("0")
    percentage: Decimal = Decimal("0")
    count: int = 0


def calculate_overview_metrics(
    transactions: Iterable[Transaction],
    account_ids: Iterable[UUID],
    user_id: Optional[str] = None,
) -> OverviewMetrics:
    """
    Earned, spent and transferred totals for a set of accounts.

    Transfers between two of the given accounts only count as transferred.
    A transfer leaving the set counts as spent, one entering it as earned.
    """
    accounts = {str(account_id) for account_id in account_ids}
    earned = Decimal("0")
    spent = Decimal("0")
    transferred = Decimal("0")

    for t in transactions:
        if user_id and t.user_id != user_id:
            continue

        from_ours = str(t.account_id) in accounts
        if t.type == TransactionType.INCOME and from_ours:
            earned += t.amount
        elif t.type == TransactionType.EXPENSE and from_ours:
            spent += t.amount
        elif t.type == TransactionType.TRANSFER:
            to_ours = t.to_account_id is not None and str(t.to_account_id) in accounts
            if from_ours:
                transferred += t.amount
            if from_ours and to_ours:
                continue
            if from_ours:
                spent += t.amount
            elif to_ours:
                earned += t.amount

    return OverviewMetrics(
        total_earned=earned,
        total_spent=spent,
        total_transferred=transferred,
        total_balance=earned - spent,
    )


def category_breakdown(transactions: Iterable[Transaction]) -> list[CategoryBreakdownItem]:
    """
    Net spending per category, largest absolute net first.

    Transfers are ignored. `percentage` is each category's share of total
    net spending and is zero for categories that net out as income.
    """
    items: "OrderedDict[str, CategoryBreakdownItem]" = OrderedDict()

    for t in transactions:
        if t.type == TransactionType.TRANSFER:
            continue
        item = items.setdefault(t.category, CategoryBreakdownItem(category=t.category))
        if t.type == TransactionType.EXPENSE:
            item.spent += t.amount
        else:
            item.received += t.amount
        item.count += 1

    for item in items.values():
        item.net = item.spent - item.received

    total_net_spending = sum((i.net for i in items.values() if i.net > 0), Decimal("0"))
    for item in items.values():
        if item.net > 0 and total_net_spending > 0:
            item.percentage = item.net / total_net_spending * 100

    return sorted(items.values(), key=lambda i: abs(i.net), reverse=True)
