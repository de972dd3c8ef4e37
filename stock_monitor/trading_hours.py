"""Trading-session gate and the clock it reads."""

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .config import DEFAULT_TIMEZONE, TradingSession
from .errors import ConfigError

SESSION = TradingSession()


class Clock:
    """Wall clock pinned to one timezone for the lifetime of a monitor."""

    def __init__(self, timezone: str = DEFAULT_TIMEZONE) -> None:
        try:
            self.zone = ZoneInfo(timezone)
        # names of zone directories such as "Asia" surface as OSError
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            raise ConfigError(f"Unknown timezone: '{timezone}'") from e
        self.timezone = timezone

    def now(self) -> datetime:
        return datetime.now(self.zone)

    def __repr__(self) -> str:
        return f"Clock(timezone={self.timezone!r})"


def is_trading_time(now: datetime, session: Optional[TradingSession] = None) -> bool:
    """Whether ``now`` falls inside a weekday trading session (bounds inclusive)."""
    session = session or SESSION
    if now.isoweekday() >= session.FIRST_WEEKEND_DAY:
        return False

    minute = now.hour * 60 + now.minute
    return (
        session.MORNING_OPEN <= minute <= session.MORNING_CLOSE
        or session.AFTERNOON_OPEN <= minute <= session.AFTERNOON_CLOSE
    )
