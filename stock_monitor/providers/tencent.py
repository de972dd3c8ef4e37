"""Tencent quote provider.

Replies in GBK with one line per symbol::

    v_sh600000="1~Name~600000~price~...~time~change~change%~high~low~...";
"""

import re

from ..errors import PartialQuoteError
from ..models import Quote
from .base import QuoteProvider, to_decimal

MIN_FIELDS = 35
NAME, PRICE, TIME, CHANGE, CHANGE_PERCENT, HIGH, LOW = 1, 3, 30, 31, 32, 33, 34


class TencentQuoteProvider(QuoteProvider):
    """Tilde-separated feed with change figures computed upstream."""

    LINE_PATTERN = re.compile(r'v_(\w+)="(.*)"')

    def build_url(self, codes: list[str]) -> str:
        return self.config.TENCENT_URL + ",".join(codes)

    def parse_record(self, symbol: str, payload: str) -> Quote:
        fields = payload.split("~")
        if len(fields) < MIN_FIELDS:
            raise PartialQuoteError(f"expected {MIN_FIELDS} fields, got {len(fields)}")
        if not fields[NAME]:
            raise PartialQuoteError("empty name")

        return Quote(
            symbol=symbol,
            name=fields[NAME],
            price=to_decimal(fields[PRICE]),
            change=to_decimal(fields[CHANGE]),
            change_percent=to_decimal(fields[CHANGE_PERCENT]),
            high=to_decimal(fields[HIGH]),
            low=to_decimal(fields[LOW]),
            time=fields[TIME],
        )
