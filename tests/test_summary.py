#!/usr/bin/env python3
"""
Group summary tests: the numbers the summary page shows for a small trip.
"""
from decimal import Decimal
from datetime import date

import pytest

from trip_ledger.datatypes import ExpenseRecord, Member, ShareRecord
from trip_ledger.errors import MissingMemberError
from trip_ledger.settlement import apply_transfers
from trip_ledger.summary import build_summary, shares_to_dict, summary_to_dict

MEMBERS = [Member("u1", "Asha"), Member("u2", "Bo"), Member("u3", "Cy")]


@pytest.fixture()
def trip_expenses():
    return [
        ExpenseRecord(
            id="e1", title="Hotel", amount=Decimal("300.00"), payer_id="u1", category="accommodation",
            date=date(2025, 6, 1),
            shares=(ShareRecord("u1", Decimal("100.00")), ShareRecord("u2", Decimal("100.00")),
                    ShareRecord("u3", Decimal("100.00"))),
        ),
        ExpenseRecord(
            id="e2", title="Taxi", amount=Decimal("60.00"), payer_id="u2", category="transportation",
            date=date(2025, 6, 2),
            shares=(ShareRecord("u2", Decimal("30.00")), ShareRecord("u3", Decimal("30.00"))),
        ),
        ExpenseRecord(
            id="e3", title="Lunch", amount=Decimal("40.00"), payer_id="u3", category="food",
            date=date(2025, 6, 2), self_paid=True,
            shares=(ShareRecord("u1", Decimal("20.00")), ShareRecord("u3", Decimal("20.00"))),
        ),
    ]


def test_summary_numbers(trip_expenses):
    summary = build_summary(MEMBERS, trip_expenses, current_user_id="u1")

    assert summary.total_expenses == Decimal("400.00")
    assert summary.current_user_expenses == Decimal("120.00")
    assert {m: b.net for m, b in summary.balances.items()} == {
        "u1": Decimal("180.00"),
        "u2": Decimal("-70.00"),
        "u3": Decimal("-150.00"),
    }
    assert [c.category for c in summary.category_breakdown] == ["accommodation", "transportation", "food"]


def test_self_paid_expense_leaves_debt_nobody_collects(trip_expenses):
    summary = build_summary(MEMBERS, trip_expenses)
    leftover = apply_transfers(summary.balances, summary.settlements)
    # the self-paid lunch credits nobody, so 40 of debt has no creditor
    assert leftover == {"u1": Decimal("0.00"), "u2": Decimal("-40.00"), "u3": Decimal("0.00")}
    assert summary.current_user_expenses == 0


def test_summary_to_dict(trip_expenses):
    summary = build_summary(MEMBERS, trip_expenses, current_user_id="u2")
    out = summary_to_dict(summary, MEMBERS)

    assert out["totalExpenses"] == 400.0
    assert out["currentUserExpenses"] == 130.0
    assert out["settlements"] == [
        {"from": {"id": "u3", "name": "Cy"}, "to": {"id": "u1", "name": "Asha"}, "amount": 150.0},
        {"from": {"id": "u2", "name": "Bo"}, "to": {"id": "u1", "name": "Asha"}, "amount": 30.0},
    ]
    assert out["categoryBreakdown"][0] == {"category": "accommodation", "amount": 300.0, "percentage": 75.0}
    assert out["categoryBreakdown"][2] == {"category": "food", "amount": 40.0, "percentage": 10.0}


def test_percentages_rounded_for_display_only():
    expenses = [
        ExpenseRecord(id=f"e{i}", title="x", amount=Decimal("10.00"), payer_id="u1", category=c,
                      shares=(ShareRecord("u1", Decimal("10.00")),))
        for i, c in enumerate(["food", "gear", "shopping"])
    ]
    summary = build_summary(MEMBERS, expenses)
    out = summary_to_dict(summary, MEMBERS)
    assert [c["percentage"] for c in out["categoryBreakdown"]] == [33.3, 33.3, 33.3]
    assert summary.category_breakdown[0].percentage > Decimal("33.33")


def test_summary_fails_on_unknown_member(trip_expenses):
    with pytest.raises(MissingMemberError):
        build_summary(MEMBERS[:2], trip_expenses)


def test_shares_to_dict():
    out = shares_to_dict([ShareRecord("u1", Decimal("33.333")), ShareRecord("u2", Decimal("0"))])
    assert out == {"shares": [{"userId": "u1", "amount": 33.33}, {"userId": "u2", "amount": 0.0}]}
