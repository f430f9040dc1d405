"""
Money Value Type
================

Lossless conversion between user-facing decimal amounts and integer
"minor units" (cents, or whole currency units for zero-decimal currencies).

Every calculation that decides money correctness (subtotals, discounts,
totals, paid amounts, balances, refund limits) is done on ``int`` values
produced by :func:`to_minor`. Decimal strings are parsed digit by digit and
never pass through binary floating point.

Example::

    >>> to_minor('1,234.5', 2)
    123450
    >>> to_minor('12.345', 2)      # half-up on the first dropped digit
    1235
    >>> minor_to_decimal_string(1235, 2)
    '12.35'
    >>> to_minor('12.5', 0)
    13
"""

import math
import re
from decimal import Decimal

# Precision and scale of every DecimalField that stores money.
DB_MONEY_DIGITS = 12
DB_MONEY_SCALE = 2

# Largest quantity accepted on a service line, part or purchase line.
MAX_QTY = 10000

ZERO_DECIMAL_CURRENCIES = frozenset({
    'CLP', 'ISK', 'JPY', 'KHR', 'KRW', 'PYG', 'UGX', 'VND', 'XAF', 'XOF',
})

_NON_DIGITS = re.compile(r'[^0-9]')


def currency_decimals(currency):
    """Return the number of fractional digits used for ``currency``."""
    return 0 if (currency or '').upper() in ZERO_DECIMAL_CURRENCIES else 2


def money_decimals():
    """Return the deployment-wide ``MONEY_DECIMALS`` setting."""
    from django.conf import settings

    return getattr(settings, 'MONEY_DECIMALS', DB_MONEY_SCALE)


def _scale(decimals):
    return 10 ** decimals if decimals > 0 else 1


def _parse_minor(text, decimals):
    s = text.strip()
    if not s:
        return 0

    negative = s.startswith('-')
    if negative:
        s = s[1:]

    s = ''.join(s.replace(',', '').split())
    int_raw, _, frac_raw = s.partition('.')

    int_digits = _NON_DIGITS.sub('', int_raw) or '0'
    frac_digits = _NON_DIGITS.sub('', frac_raw)

    minor = int(int_digits) * _scale(decimals)
    if decimals > 0:
        minor += int(frac_digits[:decimals].ljust(decimals, '0'))
        dropped = frac_digits[decimals:]
    else:
        dropped = frac_digits

    # Round half-up on magnitude: the sign is applied afterwards.
    if dropped and dropped[0] >= '5':
        minor += 1

    return -minor if negative else minor


def to_minor(value, decimals=DB_MONEY_SCALE):
    """
    Convert a user-facing amount into signed integer minor units.

    Args:
        value: ``None``, ``int``, ``float``, ``Decimal`` or ``str``. Strings may
            carry thousands separators, whitespace and a leading minus sign.
            Integers are whole currency units, not minor units.
        decimals: Fractional digits of the configured currency (0 or 2).

    Returns:
        int: The amount in minor units. ``None``, empty strings and
        non-finite numbers yield 0.
    """
    if value is None:
        return 0

    if isinstance(value, bool):
        value = int(value)

    if isinstance(value, int):
        return value * _scale(decimals)

    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return _parse_minor(format(Decimal(repr(value)), 'f'), decimals)

    if isinstance(value, Decimal):
        if not value.is_finite():
            return 0
        return _parse_minor(format(value, 'f'), decimals)

    return _parse_minor(str(value), decimals)


def _as_int(minor):
    if isinstance(minor, float):
        return math.trunc(minor) if math.isfinite(minor) else 0
    if isinstance(minor, Decimal):
        return int(minor) if minor.is_finite() else 0
    if minor is None:
        return 0
    return int(minor)


def minor_to_decimal_string(minor, decimals=DB_MONEY_SCALE):
    """
    Convert integer minor units into a canonical decimal string.

    ``1234`` with ``decimals=2`` becomes ``'12.34'``; ``-5`` becomes
    ``'-0.05'``. No thousands separators are emitted. Floats are truncated
    toward zero and non-finite input is treated as 0.
    """
    m = _as_int(minor)
    negative = m < 0
    int_part, frac_part = divmod(abs(m), _scale(decimals))

    if decimals <= 0:
        out = str(int_part)
    else:
        out = f'{int_part}.{frac_part:0{decimals}d}'
    return f'-{out}' if negative else out


def minor_to_decimal(minor, decimals=DB_MONEY_SCALE):
    """Return ``minor`` as a ``Decimal`` ready for a money DecimalField."""
    return Decimal(minor_to_decimal_string(minor, decimals))


def clamp_minor_non_negative(minor):
    """Return 0 for negative or non-finite input, else ``minor`` unchanged."""
    if isinstance(minor, float) and not math.isfinite(minor):
        return 0
    if isinstance(minor, Decimal) and not minor.is_finite():
        return 0
    return 0 if minor < 0 else minor


def max_money_minor(decimals=DB_MONEY_SCALE):
    """
    Largest amount, in minor units, that fits a money column.

    With ``DecimalField(12, 2)`` that is 9,999,999,999.99, i.e.
    ``999999999999`` at 2 decimals and ``9999999999`` at 0 decimals.
    """
    return 10 ** (DB_MONEY_DIGITS - DB_MONEY_SCALE + max(decimals, 0)) - 1


def fits_money_column(minor, decimals=DB_MONEY_SCALE):
    """Return True when ``abs(minor)`` can be stored in a money column."""
    return abs(minor) <= max_money_minor(decimals)
