"""
Error taxonomy for the ledger engine.

AllocationError covers everything rejected while an expense is being composed.
MissingMemberError means the caller handed over an inconsistent snapshot and the
whole computation was aborted.
"""
from decimal import Decimal


class LedgerError(Exception):
    """Base class for every error raised by trip_ledger"""


class AllocationError(LedgerError):
    """An expense draft could not be turned into shares"""


class ValidationError(AllocationError):
    """Bad author-time input (missing total, no members, negative share...)"""


class SumMismatchError(AllocationError):
    """Included shares don't add up to the total. Callers may choose to ignore it."""

    def __init__(self, shares_total: Decimal, total: Decimal):
        self.shares_total = shares_total
        self.total = total
        super().__init__(
            f"The sum of individual shares ({shares_total:.2f}) "
            f"doesn't match the total amount ({total:.2f})"
        )


class MissingMemberError(LedgerError, KeyError):
    """A payer or share points at a member that isn't in the supplied member set"""

    def __init__(self, member_id: str, expense_id: str = None):
        self.member_id = member_id
        self.expense_id = expense_id
        where = f" (expense {expense_id})" if expense_id else ""
        super().__init__(f"Member {member_id} not in group{where}")

    def __str__(self):
        # KeyError would otherwise repr() the message
        return self.args[0]
