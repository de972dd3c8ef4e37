"""Abstract base class for quote providers."""

import logging
import re
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from http.client import HTTPException
from typing import Iterable, Optional
from urllib.request import Request, urlopen

from ..config import ProviderConfig
from ..errors import FetchError, PartialQuoteError
from ..models import Quote

logger = logging.getLogger(__name__)


class QuoteProvider(ABC):
    """Fetches a batch of symbols in one request and parses the reply.

    Subclasses supply the endpoint, the line pattern, and how one record's
    fields map onto a ``Quote``.
    """

    LINE_PATTERN: re.Pattern[str]

    def __init__(self, config: Optional[ProviderConfig] = None) -> None:
        self.config = config or ProviderConfig()

    @abstractmethod
    def build_url(self, codes: list[str]) -> str:
        pass

    @abstractmethod
    def parse_record(self, symbol: str, payload: str) -> Quote:
        """Build a quote from one record.

        Raises:
            PartialQuoteError: If the record has too few fields or no name.
        """
        pass

    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.config.USER_AGENT}

    def fetch(self, codes: Iterable[str]) -> dict[str, Quote]:
        """Fetch quotes for ``codes``; an empty dict means the request failed."""
        unique = list(dict.fromkeys(codes))
        if not unique:
            return {}

        try:
            text = self._request(self.build_url(unique))
        except FetchError as e:
            logger.warning("Quote request to %s failed: %s", type(self).__name__, e)
            return {}

        return self.parse(text)

    def parse(self, text: str) -> dict[str, Quote]:
        """Parse a decoded response body; malformed records are dropped."""
        quotes: dict[str, Quote] = {}
        for line in text.splitlines():
            match = self.LINE_PATTERN.search(line)
            if not match:
                continue
            symbol, payload = match.group(1), match.group(2)
            try:
                quotes[symbol] = self.parse_record(symbol, payload)
            except PartialQuoteError as e:
                logger.debug("Dropping record for %s: %s", symbol, e)
        return quotes

    def _request(self, url: str) -> str:
        try:
            req = Request(url, headers=self.headers())
            with urlopen(req, timeout=self.config.REQUEST_TIMEOUT_S) as response:
                body = response.read()
        # ValueError covers malformed URLs and non-ASCII symbols in the request line
        except (OSError, HTTPException, ValueError) as e:
            raise FetchError(str(e)) from e
        return body.decode(self.config.RESPONSE_ENCODING, errors="replace")


def to_decimal(text: str) -> Decimal:
    """Parse a numeric field, reading blanks and garbage as zero."""
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        return Decimal("0")
    return value if value.is_finite() else Decimal("0")
