"""The refresh loop: reload, fetch, compute, draw, notify, wait, repeat."""

import logging
import sys
import time
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, TextIO

from .config import ProviderConfig, QuoteSource
from .errors import ConfigError
from .formatting import prune_caches
from .loaders import load_config
from .models import Holding, NotifyResult, Report, Settings
from .notifier import WebhookNotifier
from .providers import QuoteProvider, get_provider
from .report import build_report, render_frame, render_notify_status, render_plain_table
from .trading_hours import Clock, is_trading_time

logger = logging.getLogger(__name__)

# ANSI escape codes for terminal control
ANSI_CLEAR_SCREEN = "\033[H\033[J"
ANSI_GRAY = "\033[90m"
ANSI_CYAN = "\033[36m"
ANSI_RESET = "\033[0m"

COUNTDOWN_CLEAR_WIDTH = 100
FAREWELL = "  Monitor stopped, goodbye!"


class MonitorState(Enum):
    LOADING = "loading"
    OPEN = "open"
    CLOSED = "closed"
    RENDERING = "rendering"
    NOTIFYING = "notifying"
    WAITING = "waiting"
    SHUTTING_DOWN = "shutting-down"


class StockMonitor:
    """Single-threaded dashboard loop.

    The config file is re-read after every countdown, so edits take effect
    within one interval. The timezone is fixed when the monitor starts.
    """

    def __init__(
        self,
        config_path: str | Path,
        default_source: QuoteSource = QuoteSource.SINA,
        out: Optional[TextIO] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Optional[Clock] = None,
        provider_config: Optional[ProviderConfig] = None,
        width: Optional[int] = None,
    ) -> None:
        self.config_path = Path(config_path)
        self.default_source = default_source
        self.out = out or sys.stdout
        self.sleep = sleep
        self.provider_config = provider_config
        self.width = width
        self.state = MonitorState.LOADING
        self.settings: Optional[Settings] = None
        self.holdings: list[Holding] = []
        self.last_report: Optional[Report] = None
        self.last_notify: Optional[NotifyResult] = None
        self._providers: dict[QuoteSource, QuoteProvider] = {}
        self._stopped = False

        self.reload()
        self.clock = clock or Clock(self.settings.timezone)

    def reload(self) -> None:
        """Re-read the config file.

        Raises:
            ConfigError: If the file is gone or lists no holdings.
        """
        self.state = MonitorState.LOADING
        settings, holdings = load_config(self.config_path, self.default_source)
        prune_caches()

        if self.settings is not None and settings.timezone != self.settings.timezone:
            logger.warning(
                "Timezone changed to %s; restart the monitor to apply it", settings.timezone
            )
        self.settings, self.holdings = settings, holdings

    def provider(self) -> QuoteProvider:
        source = self.settings.source
        if source not in self._providers:
            self._providers[source] = get_provider(source, self.provider_config)
        return self._providers[source]

    def market_open(self, now: Optional[datetime] = None) -> bool:
        if not self.settings.trading_hours_only:
            return True
        return is_trading_time(now or self.clock.now())

    def run_cycle(self) -> Report:
        """Fetch, compute and draw one frame, then send the notification."""
        now = self.clock.now()
        market_open = self.market_open(now)
        self.state = MonitorState.OPEN if market_open else MonitorState.CLOSED

        quotes = {}
        if market_open:
            quotes = self.provider().fetch([h.symbol for h in self.holdings])

        self.state = MonitorState.RENDERING
        report = build_report(self.holdings, quotes, self.settings, market_open)
        if report.fetch_failed:
            logger.warning("No quotes returned for %d holdings", len(self.holdings))
        self._write(ANSI_CLEAR_SCREEN + render_frame(report, self.settings, now, self.width))

        self.last_notify = None
        if report.rows:
            self.state = MonitorState.NOTIFYING
            notifier = WebhookNotifier(self.settings.webhook_url, self.provider_config)
            self.last_notify = notifier.send(render_plain_table(report, now))
            self._write(render_notify_status(self.last_notify, self.width))

        self.last_report = report
        return report

    def countdown(self, seconds: int, status: str = "") -> None:
        """Show a per-second countdown; this is the loop's only sleep."""
        self.state = MonitorState.WAITING
        prefix = f"{status} " if status else ""
        for remaining in range(seconds, 0, -1):
            self._write(f"{ANSI_GRAY}{prefix}next refresh in {remaining}s{ANSI_RESET}\r")
            self.sleep(1)
        self._write(" " * COUNTDOWN_CLEAR_WIDTH + "\r")

    def _status(self) -> str:
        if not self.settings.trading_hours_only:
            return ""
        # reuse the gate decided for the frame just drawn
        return "trading" if self.last_report.market_open else "closed"

    def run(self, max_cycles: Optional[int] = None) -> None:
        """Loop until interrupted, or for ``max_cycles`` cycles when given.

        Raises:
            ConfigError: If a reload fails; the screen is cleaned up first.
        """
        try:
            cycles = 0
            while True:
                self.run_cycle()
                cycles += 1
                if max_cycles is not None and cycles >= max_cycles:
                    return
                self.countdown(self.settings.refresh_interval, self._status())
                self.reload()
        except KeyboardInterrupt:
            logger.info("Monitor interrupted")
            self.shutdown()
        except ConfigError:
            self.shutdown()
            raise

    def shutdown(self) -> None:
        """Clear the screen and say goodbye; runs at most once."""
        if self._stopped:
            return
        self._stopped = True
        self.state = MonitorState.SHUTTING_DOWN
        self._write(f"{ANSI_CLEAR_SCREEN}\n{ANSI_CYAN}{FAREWELL}{ANSI_RESET}\n\n")

    def _write(self, text: str) -> None:
        self.out.write(text)
        self.out.flush()
