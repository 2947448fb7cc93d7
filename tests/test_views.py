"""Tests for the view models."""

from datetime import date
from decimal import Decimal

import pytest

from conftest import make_account, make_investment, make_series, make_transaction
from wealth_dashboard.views import (
    add_months,
    calculate_account_balances,
    calculate_forecast,
    calculate_overview_metrics,
    category_breakdown,
    create_accounts_view_model,
    due_series,
    next_due_date,
    summarize_portfolio,
    summarize_recurring,
)


class TestAccountsViewModel:
    """Counts and ordering on the accounts page."""

    def test_empty(self):
        view = create_accounts_view_model([], {})
        assert view.total_accounts == 0
        assert view.positive_accounts == 0
        assert view.negative_accounts == 0
        assert view.sorted_accounts == []

    def test_counts_and_order(self):
        a, b, c = make_account("a"), make_account("b"), make_account("c")
        balances = {str(a.id): 100, str(b.id): -50, str(c.id): 0}

        view = create_accounts_view_model([a, b, c], balances)

        assert view.total_accounts == 3
        assert view.positive_accounts == 1
        assert view.negative_accounts == 1
        assert [acc.name for acc in view.sorted_accounts] == ["a", "c", "b"]
        assert view.total_balance == Decimal("50")

    def test_ties_keep_input_order(self):
        accounts = [make_account(name) for name in ("x", "y", "z")]
        balances = {str(acc.id): Decimal("10") for acc in accounts}
        view = create_accounts_view_model(accounts, balances)
        assert [acc.name for acc in view.sorted_accounts] == ["x", "y", "z"]

    def test_account_without_balance_sorts_as_zero_and_is_not_counted(self):
        rich, unknown, poor = make_account("rich"), make_account("unknown"), make_account("poor")
        balances = {str(rich.id): 5, str(poor.id): -5}

        view = create_accounts_view_model([poor, unknown, rich], balances)

        assert [acc.name for acc in view.sorted_accounts] == ["rich", "unknown", "poor"]
        assert view.positive_accounts == 1
        assert view.negative_accounts == 1

    def test_selected_user_filters_accounts(self):
        mine = make_account("mine", user_id="user-1")
        theirs = make_account("theirs", user_id="user-2")
        view = create_accounts_view_model([mine, theirs], {}, selected_user_id="user-2")
        assert [acc.name for acc in view.sorted_accounts] == ["theirs"]

    def test_inputs_are_not_mutated(self):
        accounts = [make_account("low"), make_account("high")]
        balances = {str(accounts[0].id): 1, str(accounts[1].id): 2}
        create_accounts_view_model(accounts, balances)
        assert [acc.name for acc in accounts] == ["low", "high"]


class TestAccountBalances:
    def test_opening_balance_plus_transactions(self):
        main = make_account("main", balance="100")
        pot = make_account("pot")
        transactions = [
            make_transaction("1000", "income", main.id),
            make_transaction("250.505", "expense", main.id),
            make_transaction("300", "transfer", main.id, pot.id),
        ]
        balances = calculate_account_balances([main, pot], transactions)
        assert balances[str(main.id)] == Decimal("549.50")
        assert balances[str(pot.id)] == Decimal("300.00")

    def test_transfer_to_unknown_account_only_debits_source(self):
        main = make_account("main")
        outside = make_account("outside")
        balances = calculate_account_balances(
            [main], [make_transaction("40", "transfer", main.id, outside.id)],
        )
        assert balances == {str(main.id): Decimal("-40.00")}


class TestPortfolio:
    def test_summary(self):
        priced = make_investment("VWCE", amount="1000", shares="10")
        unpriced = make_investment("XYZ", amount="500", shares="5")

        summary = summarize_portfolio([priced, unpriced], {"VWCE": Decimal("120")})

        assert summary.total_invested == Decimal("1500")
        assert summary.total_current_value == Decimal("1200")
        assert summary.total_return == Decimal("-300")
        assert summary.total_return_percent == Decimal("-20")
        assert summary.positions[1].current_value == 0

    def test_nothing_invested(self):
        summary = summarize_portfolio([], {})
        assert summary.total_return_percent == 0
        assert summary.positions == []


class TestForecast:
    def test_compounds_yearly(self):
        points = calculate_forecast(1000, years=2, rate=0.1, start_year=2024)
        assert [(p.year, p.amount) for p in points] == [(2024, 1000), (2025, 1100), (2026, 1210)]

    def test_default_horizon(self):
        points = calculate_forecast(100, start_year=2030)
        assert len(points) == 11
        assert points[-1].year == 2040
        assert points[-1].amount == 197


class TestReports:
    def test_overview_metrics(self):
        a, b, outside = make_account("a"), make_account("b"), make_account("outside")
        transactions = [
            make_transaction("100", "income", a.id),
            make_transaction("40", "expense", a.id),
            make_transaction("50", "transfer", a.id, b.id),
            make_transaction("30", "transfer", a.id, outside.id),
            make_transaction("20", "transfer", outside.id, a.id),
            make_transaction("999", "expense", outside.id),
        ]

        metrics = calculate_overview_metrics(transactions, [a.id, b.id])

        assert metrics.total_earned == Decimal("120")
        assert metrics.total_spent == Decimal("70")
        assert metrics.total_transferred == Decimal("80")
        assert metrics.total_balance == Decimal("50")

    def test_overview_filters_by_user(self):
        a = make_account("a")
        transactions = [
            make_transaction("100", "income", a.id, user_id="user-1"),
            make_transaction("60", "income", a.id, user_id="user-2"),
        ]
        metrics = calculate_overview_metrics(transactions, [a.id], user_id="user-2")
        assert metrics.total_earned == Decimal("60")

    def test_category_breakdown(self):
        a = make_account("a")
        transactions = [
            make_transaction("60", "expense", a.id, category="groceries"),
            make_transaction("40", "expense", a.id, category="groceries"),
            make_transaction("10", "income", a.id, category="groceries"),
            make_transaction("1000", "income", a.id, category="salary"),
            make_transaction("5", "transfer", a.id, make_account("b").id, category="moves"),
        ]

        breakdown = category_breakdown(transactions)

        assert [item.category for item in breakdown] == ["salary", "groceries"]
        groceries = breakdown[1]
        assert groceries.spent == Decimal("100")
        assert groceries.received == Decimal("10")
        assert groceries.net == Decimal("90")
        assert groceries.count == 3
        assert groceries.percentage == Decimal("100")
        assert breakdown[0].percentage == 0

    def test_empty_breakdown(self):
        assert category_breakdown([]) == []


class TestRecurringSchedule:
    """Next due dates and the Recurring page figures."""

    @pytest.mark.parametrize("frequency, expected", [
        ("weekly", date(2024, 1, 8)),
        ("biweekly", date(2024, 1, 15)),
        ("monthly", date(2024, 2, 1)),
        ("yearly", date(2025, 1, 1)),
    ])
    def test_next_due_date(self, frequency, expected):
        assert next_due_date(date(2024, 1, 1), frequency) == expected

    def test_one_off_has_no_next_date(self):
        assert next_due_date(date(2024, 1, 1), "once") is None

    def test_month_end_is_clamped(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
        assert add_months(date(2024, 2, 29), 12) == date(2025, 2, 28)

    def test_months_roll_into_next_year(self):
        assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)

    def test_due_window(self):
        today = date(2024, 3, 10)
        on_time = make_series("10", due_date=date(2024, 3, 10))
        late = make_series("20", due_date=date(2024, 3, 3))
        too_late = make_series("30", due_date=date(2024, 3, 2))
        upcoming = make_series("40", due_date=date(2024, 3, 11))
        paused = make_series("50", due_date=date(2024, 3, 9), is_active=False)

        due = due_series([on_time, late, too_late, upcoming, paused], today)

        assert [s.id for s in due] == [late.id, on_time.id]

    def test_monthly_equivalents(self):
        series = [
            make_series("1200", "monthly", tx_type="income"),
            make_series("120", "yearly", tx_type="income"),
            make_series("30", "weekly"),
            make_series("100", "biweekly"),
            make_series("500", "once"),
            make_series("999", "monthly", is_active=False),
        ]

        summary = summarize_recurring(series, today=date(2024, 3, 1))

        assert summary.active_count == 5
        assert summary.monthly_income == Decimal("1210.00")
        # 30 * 52 / 12 + 100 * 26 / 12
        assert summary.monthly_expense == Decimal("346.67")
        assert summary.monthly_net == Decimal("863.33")
        assert len(summary.due) == 5

    def test_empty_summary(self):
        summary = summarize_recurring([], today=date(2024, 1, 1))
        assert summary.active_count == 0
        assert summary.monthly_net == 0
        assert summary.due == []
