"""Loader for the holdings/settings file.

The file is plain UTF-8 text, re-read on every refresh so edits take effect
within one interval::

    # provider line
    tencent
    interval=10
    trading_time=true
    sh600000|1000|10.52
    sz000001|Ping An Bank|500|12.80
"""

import logging
from dataclasses import replace
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, Optional

from rich.errors import StyleSyntaxError
from rich.style import Style

from .config import ColorScheme, QuoteSource
from .errors import ConfigError
from .models import Holding, Settings
from .trading_hours import Clock

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"
FIELD_SEPARATOR = "|"
TRUE_VALUES = ("true", "1")


def load_config(
    path: str | Path,
    default_source: QuoteSource = QuoteSource.SINA,
) -> tuple[Settings, list[Holding]]:
    """Read and parse the config file.

    Args:
        path: Path to the holdings file.
        default_source: Provider used when the file does not name one.

    Returns:
        Tuple of (settings, holdings in file order).

    Raises:
        ConfigError: If the file cannot be read or lists no valid holdings.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    settings, holdings = parse_config_lines(text.splitlines(), default_source)
    if not holdings:
        raise ConfigError(f"No valid holdings in config file: {path}")
    return settings, holdings


def parse_config_lines(
    lines: Iterable[str],
    default_source: QuoteSource = QuoteSource.SINA,
) -> tuple[Settings, list[Holding]]:
    """Parse config lines into settings and holdings, without validation of the result."""
    settings = Settings(source=default_source)
    holdings: list[Holding] = []
    sources = {s.value: s for s in QuoteSource}

    for raw in lines:
        line = raw.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue

        if line.lower() in sources:
            settings = replace(settings, source=sources[line.lower()])
            continue

        if "=" in line:
            key, value = (part.strip() for part in line.split("=", 1))
            settings = _apply_setting(settings, key.lower(), value)
            continue

        holding = _parse_holding(line)
        if holding is not None:
            holdings.append(holding)

    return settings, holdings


def _apply_setting(settings: Settings, key: str, value: str) -> Settings:
    if key == "interval":
        return replace(settings, refresh_interval=_parse_count(value))
    if key == "trading_time":
        return replace(settings, trading_hours_only=value.lower() in TRUE_VALUES)
    if key == "timezone":
        Clock(value)  # rejects unknown zones with ConfigError
        return replace(settings, timezone=value)
    if key == "wechat_webhook":
        return replace(settings, webhook_url=value)
    if key == "buy_lots":
        return replace(settings, buy_lots=_parse_count(value))
    if key == "sell_lots":
        return replace(settings, sell_lots=_parse_count(value))
    if key == "up_color":
        return replace(
            settings, colors=replace(settings.colors, up=_parse_color(value, ColorScheme.up))
        )
    if key == "down_color":
        return replace(
            settings, colors=replace(settings.colors, down=_parse_color(value, ColorScheme.down))
        )

    logger.debug("Ignoring unknown setting %r", key)
    return settings


def _parse_count(value: str) -> int:
    """Parse a positive integer setting, flooring at 1."""
    try:
        return max(1, int(value))
    except ValueError:
        logger.warning("Invalid integer setting %r, using 1", value)
        return 1


def _parse_color(value: str, default: str) -> str:
    """Validate a rich color or style string, keeping the default when it does not parse."""
    if not value:
        return default
    try:
        Style.parse(value)
    except StyleSyntaxError:
        logger.warning("Invalid color setting %r, using %s", value, default)
        return default
    return value


def _parse_holding(line: str) -> Optional[Holding]:
    parts = [part.strip() for part in line.split(FIELD_SEPARATOR)]
    if len(parts) == 3:
        code, shares, cost = parts
        name = ""
    elif len(parts) == 4:
        code, name, shares, cost = parts
    else:
        return None

    parsed_shares = _parse_amount(shares)
    parsed_cost = _parse_amount(cost)
    if not code or parsed_shares is None or parsed_cost is None:
        logger.warning("Skipping invalid holding line: %r", line)
        return None

    return Holding(symbol=code, shares=parsed_shares, cost=parsed_cost, name=name)


def _parse_amount(text: str) -> Optional[Decimal]:
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite() or value < 0:
        return None
    return value
