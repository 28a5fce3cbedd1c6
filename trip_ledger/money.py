from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from .datatypes import Money
from .errors import ValidationError

CENT = Decimal('0.01')
TOLERANCE = Decimal('0.01')     # accepted rounding slack wherever sums are compared
ZERO = Decimal('0.00')

_STRIP = ('$', '₹', ',', ' ')

def round2(x) -> Money:  # round 2dp HALF_UP
    return Decimal(x).quantize(CENT, ROUND_HALF_UP)

def to_money(value) -> Optional[Money]:
    """
    Parse user or file input into Money.

    Returns None for empty input (nothing entered), raises ValidationError when
    the value can't be read as a number.
    """
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValidationError(f"Invalid amount: {value!r}")
    if isinstance(value, (int, float)):
        # go through str so 0.1 stays 0.1
        return Decimal(str(value))

    clean_str = str(value)
    for ch in _STRIP:
        clean_str = clean_str.replace(ch, '')
    clean_str = clean_str.strip()
    if clean_str == '':
        return None

    try:
        amount = Decimal(clean_str)
    except InvalidOperation:
        raise ValidationError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    return amount

def format_money(amount) -> str:
    """Format with exactly two fractional digits"""
    return f'{round2(amount):.2f}'

def within_tolerance(a, b) -> bool:
    return abs(Decimal(a) - Decimal(b)) <= TOLERANCE

_COMPACT_UNITS = [
    (Decimal('1000000000000'), 'T'),
    (Decimal('1000000000'), 'B'),
    (Decimal('1000000'), 'M'),
    (Decimal('1000'), 'K'),
]

def format_compact(amount) -> str:
    """Short form for display: 1250 → '1.25K', 3400000 → '3.40M'"""
    amount = Decimal(amount)
    for size, suffix in _COMPACT_UNITS:
        if abs(amount) >= size:
            return f'{round2(amount / size):.2f}{suffix}'
    return format_money(amount)
