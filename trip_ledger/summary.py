"""
Group summary: everything the summary page shows, computed from one snapshot
of a group's members and expenses.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional

from .balances import compute_balances
from .categories import category_breakdown
from .datatypes import Balance, CategoryTotal, ExpenseRecord, Member, Money, ShareRecord, Transfer
from .money import round2
from .settlement import resolve_settlements

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class GroupSummary:
    total_expenses: Money
    current_user_expenses: Money
    balances: Dict[str, Balance]
    settlements: List[Transfer]
    category_breakdown: List[CategoryTotal]

def build_summary(members: Iterable[Member], expenses: Iterable[ExpenseRecord],
                  current_user_id: Optional[str] = None) -> GroupSummary:
    members = list(members)
    expenses = list(expenses)

    balances = compute_balances(members, expenses)
    settlements = resolve_settlements(balances)
    breakdown = category_breakdown(expenses)

    total = sum((e.amount for e in expenses), Decimal('0'))
    mine = Decimal('0')
    if current_user_id is not None:
        for expense in expenses:
            share = expense.share_for(current_user_id)
            if share is not None:
                mine += share.amount

    logger.info(f"Summary: {len(expenses)} expenses, total {total:.2f}, {len(settlements)} settlements")
    return GroupSummary(
        total_expenses=total,
        current_user_expenses=mine,
        balances=balances,
        settlements=settlements,
        category_breakdown=breakdown,
    )

def summary_to_dict(summary: GroupSummary, members: Iterable[Member]) -> Dict[str, Any]:
    """Render a GroupSummary in the shape the summary endpoint returns"""
    names = {m.id: m.name for m in members}
    return {
        'totalExpenses': _money(summary.total_expenses),
        'currentUserExpenses': _money(summary.current_user_expenses),
        'settlements': [
            {
                'from': {'id': t.from_member_id, 'name': names.get(t.from_member_id, t.from_member_id)},
                'to': {'id': t.to_member_id, 'name': names.get(t.to_member_id, t.to_member_id)},
                'amount': _money(t.amount),
            }
            for t in summary.settlements
        ],
        'categoryBreakdown': [
            {
                'category': c.category,
                'amount': _money(c.amount),
                'percentage': _percentage(c.percentage),
            }
            for c in summary.category_breakdown
        ],
    }

def shares_to_dict(shares: Iterable[ShareRecord]) -> Dict[str, Any]:
    """Validated shares, shaped like the expense-creation payload"""
    return {'shares': [{'userId': s.member_id, 'amount': _money(s.amount)} for s in shares]}

def _money(x) -> float:
    return float(round2(x))

def _percentage(x) -> float:
    return float(Decimal(x).quantize(Decimal('0.1'), ROUND_HALF_UP))
