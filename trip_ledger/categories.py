from decimal import Decimal
from typing import Dict, Iterable, List

from .datatypes import DEFAULT_CATEGORY, CategoryTotal, ExpenseRecord

def category_breakdown(expenses: Iterable[ExpenseRecord]) -> List[CategoryTotal]:
    """
    Total spend per category, biggest first.

    Percentages are left unrounded; round them only when displaying.
    Categories with equal totals keep the order they were first seen in.
    """
    totals: Dict[str, Decimal] = {}
    for expense in expenses:
        category = (expense.category or '').strip() or DEFAULT_CATEGORY
        totals[category] = totals.get(category, Decimal('0')) + expense.amount

    grand_total = sum(totals.values(), Decimal('0'))

    breakdown = [
        CategoryTotal(
            category=category,
            amount=amount,
            percentage=(amount / grand_total * 100) if grand_total > 0 else Decimal('0'),
        )
        for category, amount in totals.items()
    ]
    # sorted() is stable, ties stay in encounter order
    return sorted(breakdown, key=lambda c: c.amount, reverse=True)
