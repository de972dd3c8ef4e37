"""Configuration constants for the stock monitor."""

from dataclasses import dataclass
from enum import Enum


class QuoteSource(Enum):
    """Available quote providers."""

    SINA = "sina"
    TENCENT = "tencent"


@dataclass(frozen=True)
class ProviderConfig:
    """Endpoints and transport settings for the quote providers."""

    SINA_URL: str = "http://hq.sinajs.cn/list="
    SINA_REFERER: str = "https://finance.sina.com.cn"
    TENCENT_URL: str = "http://qt.gtimg.cn/q="
    RESPONSE_ENCODING: str = "gbk"
    USER_AGENT: str = "Mozilla/5.0"
    REQUEST_TIMEOUT_S: int = 10


@dataclass(frozen=True)
class ColorScheme:
    """Row colors by price direction, plus the portfolio summary colors.

    Row defaults follow the mainland China convention (up is red, down is
    green), which is the reverse of most Western terminals. The summary line
    keeps the opposite pairing: profit is green and loss is red.
    """

    up: str = "red"
    down: str = "green"
    flat: str = "white"
    profit: str = "green"
    loss: str = "red"


@dataclass(frozen=True)
class TradingSession:
    """Exchange session bounds as minutes since midnight, inclusive."""

    MORNING_OPEN: int = 9 * 60 + 30
    MORNING_CLOSE: int = 11 * 60 + 30
    AFTERNOON_OPEN: int = 13 * 60
    AFTERNOON_CLOSE: int = 15 * 60
    FIRST_WEEKEND_DAY: int = 6  # ISO weekday of Saturday

    def describe(self) -> str:
        return (
            f"Mon-Fri {_hhmm(self.MORNING_OPEN)}-{_hhmm(self.MORNING_CLOSE)}, "
            f"{_hhmm(self.AFTERNOON_OPEN)}-{_hhmm(self.AFTERNOON_CLOSE)}"
        )


def _hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


LOT_SIZE = 100
DEFAULT_SOURCE = QuoteSource.SINA
DEFAULT_INTERVAL_S = 5
DEFAULT_TIMEZONE = "Asia/Shanghai"
DEFAULT_CONFIG_FILE = "stocks_config.txt"

WIDTH_CACHE_LIMIT = 500
FORMAT_CACHE_LIMIT = 1000

