import logging
from decimal import Decimal
from typing import Dict, Iterable

from .datatypes import Balance, ExpenseRecord, Member
from .errors import MissingMemberError

logger = logging.getLogger(__name__)

def compute_balances(members: Iterable[Member], expenses: Iterable[ExpenseRecord]) -> Dict[str, Balance]:
    """
    Calculate the net position of every member across a group's expenses.

    Positive net = the group owes this member
    Negative net = this member owes the group

    Self-paid expenses only debit the shares; the payer isn't credited for them.

    Returns:
        Dict mapping member ids to their Balance, in the order members were given.
        Members without any activity are still listed with a zero balance.

    Raises:
        MissingMemberError if a payer or share refers to someone outside `members`.
    """
    net: Dict[str, Decimal] = {}
    for member in members:
        net[member.id] = Decimal('0')

    expense_count = 0
    for expense in expenses:
        expense_count += 1
        if expense.payer_id not in net:
            raise MissingMemberError(expense.payer_id, expense.id)

        if not expense.self_paid:
            net[expense.payer_id] += expense.amount

        for share in expense.shares:
            if share.member_id not in net:
                raise MissingMemberError(share.member_id, expense.id)
            net[share.member_id] -= share.amount

    logger.debug(f"Computed balances for {len(net)} members over {expense_count} expenses")
    return {member_id: Balance(member_id=member_id, net=amount) for member_id, amount in net.items()}
