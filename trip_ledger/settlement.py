"""
Settle a group's balances with a list of direct payments.

Greedy matching: the biggest debtor pays the biggest creditor as much as either
of them needs, then whichever side is squared moves on. This isn't guaranteed
to find the fewest payments, but for a given set of balances it always gives
the same answer.
"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Union

from .datatypes import Balance, Transfer
from .money import TOLERANCE, round2

logger = logging.getLogger(__name__)

Balances = Union[Mapping[str, Balance], Iterable[Balance]]


def resolve_settlements(balances: Balances) -> List[Transfer]:
    # work on [member_id, net] pairs so the caller's Balances stay untouched
    debtors = []
    creditors = []
    for balance in _as_list(balances):
        if balance.net < -TOLERANCE:
            debtors.append([balance.member_id, balance.net])
        elif balance.net > TOLERANCE:
            creditors.append([balance.member_id, balance.net])

    debtors.sort(key=lambda d: d[1])                  # most negative first
    creditors.sort(key=lambda c: c[1], reverse=True)  # largest first

    transfers = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amount = round2(min(-debtor[1], creditor[1]))
        transfers.append(Transfer(from_member_id=debtor[0], to_member_id=creditor[0], amount=amount))

        debtor[1] += amount
        creditor[1] -= amount

        if abs(debtor[1]) < TOLERANCE:
            i += 1
        if creditor[1] < TOLERANCE:
            j += 1

    logger.debug(f"Settled {len(debtors)} debtors and {len(creditors)} creditors with {len(transfers)} transfers")
    return transfers


def apply_transfers(balances: Balances, transfers: Iterable[Transfer]) -> Dict[str, Decimal]:
    """Net position of every member once all the transfers have been paid"""
    net = {b.member_id: b.net for b in _as_list(balances)}
    for t in transfers:
        net[t.from_member_id] += t.amount
        net[t.to_member_id] -= t.amount
    return net


def _as_list(balances: Balances) -> List[Balance]:
    if isinstance(balances, Mapping):
        return list(balances.values())
    return list(balances)
