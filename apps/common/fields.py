"""DRF serializer fields for money input."""

import re
from decimal import Decimal

from rest_framework import serializers

from .money import max_money_minor, minor_to_decimal_string, money_decimals, to_minor

_AMOUNT_RE = re.compile(r'^-?[\d,\s]*(\.\d*)?$')


class MoneyField(serializers.Field):
    """
    Accept an amount in major units ("1,250.50", 1250.5, "1250") and
    normalize it to a canonical decimal string using the configured
    ``MONEY_DECIMALS``. Services convert the string to minor units.
    """

    default_error_messages = {
        'invalid': 'Enter a valid amount.',
        'negative': 'Amount cannot be negative.',
        'not_positive': 'Amount must be greater than zero.',
        'max_value': 'Ensure this amount is no greater than {max_value}.',
    }

    def __init__(self, *, allow_negative=False, positive=False, **kwargs):
        self.allow_negative = allow_negative
        self.positive = positive
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if isinstance(data, bool) or not isinstance(data, (str, int, float, Decimal)):
            self.fail('invalid')

        text = str(data).strip()
        if not text or not _AMOUNT_RE.match(text) or not any(c.isdigit() for c in text):
            self.fail('invalid')

        decimals = money_decimals()
        minor = to_minor(data, decimals)
        if minor < 0 and not self.allow_negative:
            self.fail('negative')
        if minor <= 0 and self.positive:
            self.fail('not_positive')
        limit = max_money_minor(decimals)
        if abs(minor) > limit:
            self.fail('max_value', max_value=minor_to_decimal_string(limit, decimals))
        return minor_to_decimal_string(minor, decimals)

    def to_representation(self, value):
        decimals = money_decimals()
        return minor_to_decimal_string(to_minor(value, decimals), decimals)
