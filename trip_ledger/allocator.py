"""
Share allocation for an expense that is being composed.

A ShareAllocator holds one DraftShare per group member and reacts to edits
while a bill is being split: a new total, a member ticked in or out, or a share
overwritten by hand. Amounts are rounded to cents one member at a time, so an
even split may miss the total by a cent or two; that is left for validate() to
report.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from .datatypes import DEFAULT_CATEGORY, DraftShare, ExpenseRecord, Money, ShareRecord
from .errors import SumMismatchError, ValidationError
from .money import ZERO, round2, to_money, within_tolerance

logger = logging.getLogger(__name__)


class ShareAllocator:

    def __init__(self, member_ids: Iterable[str], total=None, auto_split: bool = True):
        self.shares: List[DraftShare] = []
        seen = set()
        for member_id in member_ids:
            if member_id in seen:
                raise ValidationError(f"Member {member_id} listed twice")
            seen.add(member_id)
            self.shares.append(DraftShare(member_id=member_id))

        self.auto_split = auto_split
        self.total: Optional[Money] = None
        if total is not None:
            self.set_total(total)

    # -------------------- events --------------------

    def set_total(self, total) -> None:
        """Record a new total and, with auto-split on, spread it evenly."""
        self.total = to_money(total)

        if self.total is None:
            for share in self.shares:
                share.amount = None
            return

        if self.auto_split:
            self._split_evenly()

    def toggle_inclusion(self, member_id: str) -> None:
        share = self._draft(member_id)
        share.included = not share.included

        if share.included:
            share.amount = None
        else:
            share.amount = ZERO
            share.manually_edited = False

        if self.auto_split and self.total is not None:
            self._split_evenly()

    def set_manual_amount(self, member_id: str, amount) -> None:
        """
        Overwrite one member's share by hand.

        With auto-split on, whatever is left of the total after every manually
        edited share is spread over the remaining auto members. Nothing is
        redistributed once the manual shares reach or pass the total.
        """
        share = self._draft(member_id)
        share.amount = to_money(amount)
        share.manually_edited = True

        if not self.auto_split or self.total is None:
            return

        edited_total = sum(
            (s.amount or ZERO for s in self.shares if s.included and s.manually_edited),
            ZERO,
        )
        remaining = self.total - edited_total
        auto_members = [s for s in self.shares if s.included and not s.manually_edited]

        if not auto_members:
            return
        if remaining <= 0:
            logger.debug(f"Manual shares {edited_total} cover total {self.total}, leaving auto shares as they are")
            return

        per_member = round2(remaining / Decimal(len(auto_members)))
        for s in auto_members:
            s.amount = per_member

    def set_auto_split(self, enabled: bool) -> None:
        self.auto_split = enabled
        if enabled and self.total is not None:
            self._split_evenly()

    # -------------------- queries --------------------

    @property
    def included(self) -> List[DraftShare]:
        return [s for s in self.shares if s.included]

    def shares_total(self) -> Money:
        return sum((s.amount or ZERO for s in self.included), ZERO)

    def has_mismatch(self) -> bool:
        """True when a total is set and the included shares drift more than a cent from it"""
        if self.total is None:
            return False
        return not within_tolerance(self.shares_total(), self.total)

    def validate(self, ignore_mismatch: bool = False) -> List[ShareRecord]:
        return validate(self.total, self.shares, ignore_mismatch=ignore_mismatch)

    # -------------------- helpers --------------------

    def _draft(self, member_id: str) -> DraftShare:
        for share in self.shares:
            if share.member_id == member_id:
                return share
        raise ValidationError(f"Member {member_id} is not part of this split")

    def _split_evenly(self) -> None:
        included = self.included
        if not included:
            return
        if self.total < 0:
            logger.debug(f"Not splitting negative total {self.total}")
            return

        per_member = round2(self.total / Decimal(len(included)))
        for share in self.shares:
            share.amount = per_member if share.included else ZERO
            share.manually_edited = False


def validate(total, shares: Iterable[DraftShare], ignore_mismatch: bool = False) -> List[ShareRecord]:
    """
    Check a draft before it becomes an expense and return the included shares.

    `ignore_mismatch` only waives the sum check; every other failure still raises.
    """
    total = to_money(total)
    if total is None or total <= 0:
        raise ValidationError("Please enter a valid total amount")

    included = [s for s in shares if s.included]
    if not included:
        raise ValidationError("Please include at least one member in the split")

    invalid = [s.member_id for s in included if s.amount is None or s.amount < 0]
    if invalid:
        raise ValidationError(f"All included members must have valid amounts (check {', '.join(invalid)})")

    shares_total = sum((s.amount for s in included), ZERO)
    if not within_tolerance(shares_total, total):
        if not ignore_mismatch:
            raise SumMismatchError(shares_total, total)
        logger.warning(f"Share total {shares_total:.2f} doesn't match {total:.2f}, saving anyway")

    return [ShareRecord(member_id=s.member_id, amount=s.amount) for s in included]


def compose_expense(expense_id: str, title: str, total, category: str, payer_id: str,
                    shares: Iterable[DraftShare], expense_date: date = None,
                    self_paid: bool = False, ignore_mismatch: bool = False) -> ExpenseRecord:
    """Run the form-level checks and build the record that gets persisted"""
    if not title or not title.strip():
        raise ValidationError("Please enter an expense title")
    if not category or not category.strip():
        raise ValidationError("Please select a category")
    if not payer_id:
        raise ValidationError("Please select who paid")

    records = validate(total, shares, ignore_mismatch=ignore_mismatch)

    return ExpenseRecord(
        id=expense_id,
        title=title.strip(),
        amount=to_money(total),
        category=category or DEFAULT_CATEGORY,
        date=expense_date or date.today(),
        payer_id=payer_id,
        self_paid=self_paid,
        shares=tuple(records),
    )
