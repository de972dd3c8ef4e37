"""
Stock Monitor - A refreshing terminal dashboard for a portfolio of equity positions.

Exports:
    Holding: Dataclass representing a tracked position
    Quote: Dataclass representing a provider price snapshot
    Settings: Dataclass holding the monitor settings
    StockMonitor: The refresh loop
    load_config: Parse the holdings/settings file
    get_provider: Instantiate a quote provider by source
    WebhookNotifier: Posts the plain-text table to a bot webhook
"""

from .config import QuoteSource
from .errors import ConfigError, FetchError, MonitorError, NotifyError, PartialQuoteError
from .loaders import load_config
from .models import Holding, NotifyResult, ProfitFigures, Quote, Report, Settings
from .monitor import MonitorState, StockMonitor
from .notifier import WebhookNotifier
from .providers import QuoteProvider, get_provider

__all__ = [
    "QuoteSource",
    "ConfigError",
    "FetchError",
    "MonitorError",
    "NotifyError",
    "PartialQuoteError",
    "load_config",
    "Holding",
    "NotifyResult",
    "ProfitFigures",
    "Quote",
    "Report",
    "Settings",
    "MonitorState",
    "StockMonitor",
    "WebhookNotifier",
    "QuoteProvider",
    "get_provider",
]
