"""
Accounts view model.

Turns accounts plus a balance map into the figures shown on the
accounts page. Pure: no I/O, inputs are never mutated.
"""

from decimal import Decimal
from typing import Iterable, Mapping, Optional

from pydantic import BaseModel, Field

from wealth_dashboard.models.finance import Account, Transaction, TransactionType


def _as_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


class AccountsViewModel(BaseModel):
    """Counts and ordering for the accounts page."""

    total_accounts: int = 0
    positive_accounts: int = 0
    negative_accounts: int = 0
    total_balance: Decimal = Decimal("0")
    sorted_accounts: list[Account] = Field(default_factory=list)


def create_accounts_view_model(
    accounts: Iterable[Account],
    balances: Mapping[str, Decimal],
    selected_user_id: Optional[str] = None,
) -> AccountsViewModel:
    """
    Build the accounts page view model.

    Args:
        accounts: Accounts to show
        balances: Balance per account id (as a string)
        selected_user_id: When set, only that member's accounts are shown

    Accounts are sorted by balance, highest first; ties keep their input
    order. An account with no entry in `balances` sorts as zero and is
    counted neither positive nor negative.
    """
    visible = [
        account for account in accounts
        if selected_user_id is None or account.user_id == selected_user_id
    ]

    def balance_of(account: Account) -> Decimal:
        return _as_decimal(balances.get(str(account.id), 0))

    positive = 0
    negative = 0
    total = Decimal("0")
    for account in visible:
        key = str(account.id)
        if key not in balances:
            continue
        balance = _as_decimal(balances[key])
        total += balance
        if balance > 0:
            positive += 1
        elif balance < 0:
            negative += 1

    return AccountsViewModel(
        total_accounts=len(visible),
        positive_accounts=positive,
        negative_accounts=negative,
        total_balance=total,
        # sorted() is stable, so equal balances keep input order
        sorted_accounts=sorted(visible, key=balance_of, reverse=True),
    )


def calculate_account_balances(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
) -> dict[str, Decimal]:
    """
    Current balance per account: opening balance plus every transaction.

    Transfers move money out of account_id and into to_account_id; a side
    that is not in `accounts` is ignored. Rounded to cents.
    """
    balances = {str(account.id): _as_decimal(account.balance) for account in accounts}

    for t in transactions:
        source = str(t.account_id)
        if t.to_account_id is not None:
            destination = str(t.to_account_id)
            if source in balances:
                balances[source] -= t.amount
            if destination in balances:
                balances[destination] += t.amount
        elif source in balances:
            if t.type == TransactionType.INCOME:
                balances[source] += t.amount
            elif t.type == TransactionType.EXPENSE:
                balances[source] -= t.amount

    return {key: value.quantize(Decimal("0.01")) for key, value in balances.items()}
