"""Data models for the stock monitor."""

from dataclasses import dataclass, field
from decimal import Decimal

from .config import (
    DEFAULT_INTERVAL_S,
    DEFAULT_SOURCE,
    DEFAULT_TIMEZONE,
    ColorScheme,
    QuoteSource,
)


@dataclass(frozen=True)
class Holding:
    """A tracked position: shares held at a weighted-average cost."""

    symbol: str
    shares: Decimal
    cost: Decimal
    name: str = ""


@dataclass(frozen=True)
class Settings:
    """Monitor settings parsed from the config file."""

    source: QuoteSource = DEFAULT_SOURCE
    refresh_interval: int = DEFAULT_INTERVAL_S
    trading_hours_only: bool = False
    timezone: str = DEFAULT_TIMEZONE
    webhook_url: str = ""
    buy_lots: int = 1
    sell_lots: int = 1
    colors: ColorScheme = field(default_factory=ColorScheme)


@dataclass(frozen=True)
class Quote:
    """Point-in-time price snapshot for one symbol."""

    symbol: str
    name: str
    price: Decimal
    change: Decimal
    change_percent: Decimal
    high: Decimal
    low: Decimal
    time: str


@dataclass(frozen=True)
class ProfitFigures:
    market_value: Decimal
    profit: Decimal
    profit_rate: Decimal


@dataclass(frozen=True)
class ReportRow:
    """A holding joined with its quote and the figures derived from both."""

    holding: Holding
    quote: Quote
    figures: ProfitFigures
    cost_after_buy: Decimal
    cost_after_sell: Decimal


@dataclass(frozen=True)
class ReportTotals:
    row_count: int
    market_value: Decimal
    cost: Decimal
    profit: Decimal
    profit_rate: Decimal


@dataclass(frozen=True)
class Report:
    """Everything one refresh cycle draws.

    ``rows`` are sorted by change percent, ``failed`` lists holdings the
    provider returned nothing for, and ``idle`` lists holdings shown while the
    market is closed.
    """

    rows: tuple[ReportRow, ...]
    failed: tuple[Holding, ...]
    idle: tuple[Holding, ...]
    totals: ReportTotals
    market_open: bool = True
    fetch_failed: bool = False


@dataclass(frozen=True)
class NotifyResult:
    """Outcome of a webhook notification."""

    success: bool
    message: str
    configured: bool = True

    def __str__(self) -> str:
        return self.message
