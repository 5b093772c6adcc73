"""Tests for the balance aggregator and dashboard totals."""

import uuid
from datetime import date
from decimal import Decimal

import pytest

from splitter.database.models import Expense, Profile, Repayment
from splitter.services.calculation_service import (
    CalculationService,
    balance_status,
    compute_dashboard_stats,
    compute_user_balances,
)
from splitter.services.expense_service import ExpenseService
from splitter.services.repayment_service import RepaymentService
from splitter.utils.constants import SettlementScheme


def make_profiles(*names):
    return [Profile(id=uuid.uuid4(), name=name) for name in names]


def make_expense(amount, paid_by=None, day=date(2024, 5, 10)):
    return Expense(
        id=uuid.uuid4(),
        description="Groceries",
        amount=Decimal(amount),
        expense_date=day,
        paid_by_id=paid_by.id if paid_by else None,
    )


def make_repayment(amount, from_profile, to_profile=None):
    to_profile = to_profile or from_profile
    return Repayment(
        id=uuid.uuid4(),
        amount=Decimal(amount),
        from_user_id=from_profile.id,
        to_user_id=to_profile.id,
    )


def by_name(balances):
    return {b["name"]: b for b in balances}


class TestComputeUserBalances:
    """Equal-split balance aggregation."""

    def test_single_expense_split_three_ways(self):
        alice, bob, carol = make_profiles("Alice", "Bob", "Carol")

        result = by_name(compute_user_balances(
            [make_expense("90", alice)], [alice, bob, carol], []
        ))

        assert result["Alice"]["paid"] == Decimal("90")
        assert result["Alice"]["owes"] == Decimal("30")
        assert result["Alice"]["balance"] == Decimal("60")
        assert result["Bob"]["balance"] == Decimal("-30")
        assert result["Carol"]["balance"] == Decimal("-30")

    def test_owes_is_same_for_everyone(self):
        alice, bob, carol = make_profiles("Alice", "Bob", "Carol")
        expenses = [make_expense("90", alice), make_expense("45", bob), make_expense("15")]

        result = compute_user_balances(expenses, [alice, bob, carol], [])

        assert {b["owes"] for b in result} == {Decimal("50")}

    def test_paid_sums_to_total_when_everyone_is_a_profile(self):
        alice, bob, carol = make_profiles("Alice", "Bob", "Carol")
        expenses = [make_expense("90", alice), make_expense("45", bob), make_expense("15", carol)]

        result = compute_user_balances(expenses, [alice, bob, carol], [])

        assert sum(b["paid"] for b in result) == Decimal("150")
        assert sum(b["balance"] for b in result) == Decimal("0")

    def test_uneven_split_sums_to_settlements_in_cents(self):
        alice, bob, carol = make_profiles("Alice", "Bob", "Carol")
        expenses = [make_expense("100", alice)]
        repayments = [make_repayment("10", bob)]

        result = compute_user_balances(expenses, [alice, bob, carol], repayments)
        total = sum(b["balance"] for b in result)
        credits = sum(b["settlements_amount"] for b in result)

        assert result[1]["owes"].quantize(Decimal("0.01")) == Decimal("33.33")
        assert total.quantize(Decimal("0.01")) == credits.quantize(Decimal("0.01"))

    def test_anonymous_expense_counts_towards_share_only(self):
        alice, bob = make_profiles("Alice", "Bob")

        result = by_name(compute_user_balances([make_expense("30")], [alice, bob], []))

        assert result["Alice"]["paid"] == Decimal("0")
        assert result["Alice"]["owes"] == Decimal("10")
        assert result["Alice"]["balance"] == Decimal("-10")

    def test_missing_amount_is_zero(self):
        alice, = make_profiles("Alice")
        expense = make_expense("0", alice)
        expense.amount = None

        result = compute_user_balances([expense], [alice], [])

        assert result[0]["paid"] == Decimal("0")
        assert result[0]["balance"] == Decimal("0")

    def test_self_settlement_reduces_debt(self):
        alice, bob, carol = make_profiles("Alice", "Bob", "Carol")
        expenses = [make_expense("90", alice)]
        repayments = [make_repayment("30", bob)]

        result = by_name(compute_user_balances(expenses, [alice, bob, carol], repayments))

        assert result["Bob"]["settlements_amount"] == Decimal("30")
        assert result["Bob"]["balance"] == Decimal("0")
        assert result["Carol"]["balance"] == Decimal("-30")
        assert result["Alice"]["balance"] == Decimal("60")

    def test_self_scheme_ignores_peer_transfers(self):
        alice, bob, carol = make_profiles("Alice", "Bob", "Carol")
        repayments = [make_repayment("30", bob, alice)]

        result = by_name(compute_user_balances(
            [make_expense("90", alice)], [alice, bob, carol], repayments
        ))

        assert result["Bob"]["repayments_made"] == Decimal("30")
        assert result["Alice"]["repayments_received"] == Decimal("30")
        assert result["Bob"]["balance"] == Decimal("-30")
        assert result["Alice"]["balance"] == Decimal("60")

    def test_peer_transfer_is_zero_sum(self):
        alice, bob, carol = make_profiles("Alice", "Bob", "Carol")
        repayments = [make_repayment("30", bob, alice)]

        result = by_name(compute_user_balances(
            [make_expense("90", alice)],
            [alice, bob, carol],
            repayments,
            scheme=SettlementScheme.PEER
        ))

        assert result["Bob"]["balance"] == Decimal("0")
        assert result["Alice"]["balance"] == Decimal("30")
        assert result["Carol"]["balance"] == Decimal("-30")
        assert sum(b["balance"] for b in result.values()) == Decimal("0")

    def test_custom_group_size(self):
        alice, bob = make_profiles("Alice", "Bob")

        result = by_name(compute_user_balances(
            [make_expense("100", alice)], [alice, bob], [], group_size=4
        ))

        assert result["Alice"]["owes"] == Decimal("25")
        assert result["Bob"]["balance"] == Decimal("-25")

    def test_no_expenses(self):
        alice, bob = make_profiles("Alice", "Bob")

        result = compute_user_balances([], [alice, bob], [])

        assert [b["balance"] for b in result] == [Decimal("0"), Decimal("0")]

    def test_keeps_profile_order(self):
        profiles = make_profiles("Zed", "Amy", "Max")

        result = compute_user_balances([], profiles, [])

        assert [b["name"] for b in result] == ["Zed", "Amy", "Max"]
        assert [b["profile_id"] for b in result] == [p.id for p in profiles]

    @pytest.mark.parametrize("group_size", [0, -3])
    def test_rejects_non_positive_group_size(self, group_size):
        with pytest.raises(ValueError):
            compute_user_balances([], make_profiles("Alice"), [], group_size=group_size)


class TestBalanceStatus:
    """Labels for the balance sign."""

    def test_labels(self):
        assert balance_status(Decimal("5")) == "Gets back"
        assert balance_status(Decimal("-0.01")) == "Owes"
        assert balance_status(Decimal("0")) == "Even"


class TestDashboardStats:
    """Totals shown on the dashboard."""

    def test_totals(self):
        expenses = [
            make_expense("90", day=date(2024, 5, 3)),
            make_expense("30", day=date(2024, 5, 28)),
            make_expense("60", day=date(2024, 4, 30)),
        ]

        stats = compute_dashboard_stats(expenses, group_size=3, today=date(2024, 5, 31))

        assert stats["total_expenses"] == Decimal("180")
        assert stats["monthly_total"] == Decimal("120")
        assert stats["expense_count"] == 3
        assert stats["per_person"] == Decimal("60")

    def test_same_month_of_other_year_is_not_current(self):
        stats = compute_dashboard_stats(
            [make_expense("10", day=date(2023, 5, 3))],
            today=date(2024, 5, 31)
        )

        assert stats["monthly_total"] == Decimal("0")

    def test_empty(self):
        stats = compute_dashboard_stats([], today=date(2024, 5, 31))

        assert stats["total_expenses"] == Decimal("0")
        assert stats["expense_count"] == 0


class TestCalculationService:
    """Balances computed from stored rows."""

    async def test_balances_from_database(self, session, roommates):
        alice, bob, carol = roommates
        await ExpenseService(session).create_expense(
            description="Rent",
            amount=Decimal("300.00"),
            expense_date=date(2024, 5, 1),
            paid_by_id=alice.id
        )
        await RepaymentService(session).add_repayment(bob, Decimal("100.00"))

        balances = by_name(await CalculationService(
            session, group_size=3, scheme=SettlementScheme.SELF
        ).get_user_balances())

        assert balances["Alice"]["balance"] == Decimal("200")
        assert balances["Bob"]["balance"] == Decimal("0")
        assert balances["Carol"]["balance"] == Decimal("-100")

    async def test_dashboard_stats_from_database(self, session, roommates):
        await ExpenseService(session).create_expense(
            description="Internet",
            amount=Decimal("45.00"),
            expense_date=date(2024, 5, 1),
            paid_by_id=roommates[0].id
        )

        stats = await CalculationService(session, group_size=3).get_dashboard_stats(
            today=date(2024, 5, 20)
        )

        assert stats["expense_count"] == 1
        assert stats["monthly_total"] == Decimal("45")
        assert stats["per_person"] == Decimal("15")
