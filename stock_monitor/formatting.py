"""Width-aware padding and number formatting for table cells.

Both lookups are memoized in plain dicts that are reset once they grow past
a fixed size, which keeps a long-running monitor's memory flat.
"""

from decimal import Decimal

from rich.cells import cell_len

from .config import FORMAT_CACHE_LIMIT, WIDTH_CACHE_LIMIT

_width_cache: dict[str, int] = {}
_format_cache: dict[tuple[Decimal, int], str] = {}


def display_width(text: str) -> int:
    """Terminal columns ``text`` occupies; wide (CJK) characters count as two."""
    width = _width_cache.get(text)
    if width is None:
        if len(_width_cache) >= WIDTH_CACHE_LIMIT:
            _width_cache.clear()
        width = _width_cache[text] = cell_len(text)
    return width


def pad_right(text: str, width: int) -> str:
    return text + " " * max(0, width - display_width(text))


def format_number(value: Decimal, places: int = 3) -> str:
    """Format with thousands separators and a fixed number of places."""
    key = (value, places)
    text = _format_cache.get(key)
    if text is None:
        if len(_format_cache) >= FORMAT_CACHE_LIMIT:
            _format_cache.clear()
        text = _format_cache[key] = f"{value:,.{places}f}"
    return text


def format_signed(value: Decimal, places: int = 3) -> str:
    """Like ``format_number`` but with an explicit ``+`` on positive values."""
    return ("+" if value > 0 else "") + format_number(value, places)


def format_percent(value: Decimal, places: int = 3) -> str:
    return format_number(value, places) + "%"


def prune_caches() -> None:
    """Drop the memo tables if either has outgrown its limit."""
    if len(_width_cache) > WIDTH_CACHE_LIMIT:
        _width_cache.clear()
    if len(_format_cache) > FORMAT_CACHE_LIMIT:
        _format_cache.clear()


def cache_sizes() -> tuple[int, int]:
    return len(_width_cache), len(_format_cache)
