from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple, Optional
from datetime import date

Money = Decimal       # keep full-precision cents

DEFAULT_CATEGORY = 'Other'

@dataclass(frozen=True)
class Member:
    id: str                      # opaque, unique within a group
    name: str                    # display name

@dataclass(frozen=True)
class ShareRecord:
    member_id: str
    amount: Money                # >= 0

@dataclass(frozen=True)
class ExpenseRecord:
    id: str
    title: str
    amount: Money                # > 0
    payer_id: str
    shares: Tuple[ShareRecord, ...] = ()
    category: str = DEFAULT_CATEGORY
    date: Optional[date] = None
    self_paid: bool = False      # everyone paid their own share

    def __post_init__(self):
        # frozen, so normalise through object.__setattr__
        object.__setattr__(self, 'shares', tuple(self.shares))
        category = (self.category or '').strip()
        object.__setattr__(self, 'category', category or DEFAULT_CATEGORY)

    def share_for(self, member_id: str) -> Optional[ShareRecord]:
        for share in self.shares:
            if share.member_id == member_id:
                return share
        return None

@dataclass(frozen=True)
class Balance:
    member_id: str
    net: Money                   # + is owed, - owes

@dataclass(frozen=True)
class Transfer:
    from_member_id: str
    to_member_id: str
    amount: Money                # > 0

@dataclass(frozen=True)
class CategoryTotal:
    category: str
    amount: Money
    percentage: Decimal          # 0-100, unrounded

@dataclass
class DraftShare:
    member_id: str
    amount: Optional[Money] = None      # None = not entered yet
    included: bool = True
    manually_edited: bool = False
