"""Exceptions raised by the stock monitor.

Only ``ConfigError`` ends the process. The others are raised and handled
within a single refresh cycle and show up as annotations in the next frame.
"""


class MonitorError(Exception):
    """Base class for stock monitor errors."""


class ConfigError(MonitorError):
    """The holdings file is missing or contains no usable holdings."""


class FetchError(MonitorError):
    """A quote provider request failed at the transport level."""


class PartialQuoteError(MonitorError):
    """A single provider record is malformed and was dropped."""


class NotifyError(MonitorError):
    """The webhook rejected a notification."""
