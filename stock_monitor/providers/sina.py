"""Sina quote provider.

Replies with one line per symbol::

    var hq_str_sh600000="Name,open,prev_close,price,high,low,...,date,time,...";
"""

import re
from decimal import ROUND_HALF_UP, Decimal

from ..errors import PartialQuoteError
from ..models import Quote
from .base import QuoteProvider, to_decimal

MIN_FIELDS = 32
NAME, PREV_CLOSE, PRICE, HIGH, LOW, TIME = 0, 2, 3, 4, 5, 31


class SinaQuoteProvider(QuoteProvider):
    """Comma-separated feed; change figures are derived from the previous close."""

    LINE_PATTERN = re.compile(r'var hq_str_(\w+)="(.*)";')

    def build_url(self, codes: list[str]) -> str:
        return self.config.SINA_URL + ",".join(codes)

    def headers(self) -> dict[str, str]:
        return {**super().headers(), "Referer": self.config.SINA_REFERER}

    def parse_record(self, symbol: str, payload: str) -> Quote:
        fields = payload.split(",")
        if len(fields) < MIN_FIELDS:
            raise PartialQuoteError(f"expected {MIN_FIELDS} fields, got {len(fields)}")
        if not fields[NAME]:
            raise PartialQuoteError("empty name")

        price = to_decimal(fields[PRICE])
        prev_close = to_decimal(fields[PREV_CLOSE])
        change = price - prev_close
        if prev_close > 0:
            change_percent = (change / prev_close * 100).quantize(
                Decimal("0.01"), rounding=ROUND_HALF_UP
            )
        else:
            change_percent = Decimal("0.00")

        return Quote(
            symbol=symbol,
            name=fields[NAME],
            price=price,
            change=change,
            change_percent=change_percent,
            high=to_decimal(fields[HIGH]),
            low=to_decimal(fields[LOW]),
            time=fields[TIME],
        )
