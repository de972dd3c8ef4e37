"""Joins holdings with quotes and renders the dashboard frame.

Two renderings come out of the same ``Report``: the full ANSI-colored grid
for the terminal and a reduced plain-text grid for the webhook.
"""

from datetime import datetime
from decimal import Decimal
from io import StringIO
from typing import Iterable, Mapping, Optional

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import ColorScheme, QuoteSource
from .finance import (
    HUNDRED,
    calculate_profit,
    cost_after_buy,
    cost_after_sell,
    cost_value,
    quantize,
)
from .formatting import (
    display_width,
    format_number,
    format_percent,
    format_signed,
    pad_right,
)
from .models import (
    Holding,
    NotifyResult,
    Quote,
    Report,
    ReportRow,
    ReportTotals,
    Settings,
)
from .trading_hours import SESSION

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
MIN_FRAME_WIDTH = 200

BORDER_STYLE = "bright_black"
HEADER_STYLE = "cyan"
FAILED_STYLE = "yellow"
IDLE_STYLE = "bright_black"

FAILED_LABEL = "Request failed"
FAILED_CELL = "-"
IDLE_CELL = "--"

SOURCE_LABELS: dict[QuoteSource, str] = {
    QuoteSource.SINA: "Sina",
    QuoteSource.TENCENT: "Tencent",
}

PLAIN_HEADERS = ("Name", "Change", "Chg%", "Price", "Cost")
PLAIN_MIN_WIDTHS = (14, 8, 8, 8, 8)


def build_report(
    holdings: Iterable[Holding],
    quotes: Mapping[str, Quote],
    settings: Settings,
    market_open: bool = True,
) -> Report:
    """Join holdings with quotes, sort by change percent and total up.

    Holdings without a quote land in ``failed``. When the market is closed
    nothing is joined and every holding is listed as ``idle``.
    """
    holdings = list(holdings)
    if not market_open:
        return Report(
            rows=(),
            failed=(),
            idle=tuple(holdings),
            totals=_totals([], len(holdings)),
            market_open=False,
        )

    rows: list[ReportRow] = []
    failed: list[Holding] = []
    for holding in holdings:
        quote = quotes.get(holding.symbol)
        if quote is None:
            failed.append(holding)
            continue
        rows.append(
            ReportRow(
                holding=holding,
                quote=quote,
                figures=calculate_profit(holding, quote.price),
                cost_after_buy=cost_after_buy(holding, quote.price, settings.buy_lots),
                cost_after_sell=cost_after_sell(holding, quote.price, settings.sell_lots),
            )
        )

    # sorted() is stable, so ties keep config order
    rows = sorted(rows, key=lambda r: r.quote.change_percent, reverse=True)

    return Report(
        rows=tuple(rows),
        failed=tuple(failed),
        idle=(),
        totals=_totals(rows, len(rows) + len(failed)),
        market_open=True,
        fetch_failed=bool(holdings) and not quotes,
    )


def _totals(rows: list[ReportRow], row_count: int) -> ReportTotals:
    market_value = sum((r.figures.market_value for r in rows), start=Decimal("0"))
    cost = sum((cost_value(r.holding) for r in rows), start=Decimal("0"))
    profit = quantize(market_value - cost)
    if cost > 0:
        profit_rate = quantize(quantize(profit * HUNDRED) / cost)
    else:
        profit_rate = quantize(Decimal("0"))
    return ReportTotals(
        row_count=row_count,
        market_value=quantize(market_value),
        cost=quantize(cost),
        profit=profit,
        profit_rate=profit_rate,
    )


def row_color(change_percent: Decimal, colors: ColorScheme) -> str:
    """Color for a row by direction of the day's move."""
    if change_percent < 0:
        return colors.down
    if change_percent > 0:
        return colors.up
    return colors.flat


def table_headers(settings: Settings) -> list[str]:
    return [
        "Code",
        "Name",
        "Change",
        "Chg%",
        "High",
        "Low",
        "Price",
        "Cost",
        f"Cost +{settings.buy_lots} lot",
        f"Cost -{settings.sell_lots} lot",
        "Shares",
        "Value",
        "P/L",
        "P/L%",
    ]


def _row_cells(row: ReportRow) -> list[str]:
    quote, holding, figures = row.quote, row.holding, row.figures
    return [
        holding.symbol,
        quote.name,
        format_signed(quote.change),
        format_percent(quote.change_percent),
        format_number(quote.high),
        format_number(quote.low),
        format_number(quote.price),
        format_number(holding.cost),
        format_number(row.cost_after_buy),
        format_number(row.cost_after_sell),
        format_number(holding.shares, 0),
        format_number(figures.market_value),
        format_signed(figures.profit),
        format_percent(figures.profit_rate),
    ]


def _failed_cells(holding: Holding) -> list[str]:
    return [holding.symbol, FAILED_LABEL] + [FAILED_CELL] * 12


def _idle_cells(holding: Holding) -> list[str]:
    return (
        [holding.symbol, holding.name or IDLE_CELL]
        + [IDLE_CELL] * 5
        + [format_number(holding.cost), IDLE_CELL, IDLE_CELL]
        + [format_number(holding.shares, 0)]
        + [IDLE_CELL] * 3
    )


def holdings_table(report: Report, settings: Settings) -> Table:
    """Build the ASCII grid of holdings, failures and totals."""
    t = Table(
        box=box.ASCII2,
        border_style=BORDER_STYLE,
        header_style=HEADER_STYLE,
        show_edge=True,
    )
    for i, header in enumerate(table_headers(settings)):
        t.add_column(header, no_wrap=True, justify="left" if i < 2 else "right")

    for row in report.rows:
        t.add_row(*_row_cells(row), style=row_color(row.quote.change_percent, settings.colors))
    for holding in report.failed:
        t.add_row(*_failed_cells(holding), style=FAILED_STYLE)
    for holding in report.idle:
        t.add_row(*_idle_cells(holding), style=IDLE_STYLE)

    totals = report.totals
    t.add_section()
    t.add_row(
        *[""] * 10,
        Text(f"Total ({totals.row_count})", style="yellow"),
        format_number(totals.market_value),
        format_signed(totals.profit),
        format_percent(totals.profit_rate),
        style=BORDER_STYLE,
    )
    return t


def _title(settings: Settings, now: datetime) -> Text:
    title = Text()
    title.append(" Portfolio monitor", style="cyan")
    title.append(f" ({SOURCE_LABELS[settings.source]} feed)", style="yellow")
    if settings.trading_hours_only:
        title.append(" (trading hours)", style=BORDER_STYLE)
    title.append(f" - {now.strftime(TIMESTAMP_FORMAT)}", style="white")
    title.append(
        f"  interval: {settings.refresh_interval}s (Ctrl+C to quit)", style=BORDER_STYLE
    )
    return title


def _summary(totals: ReportTotals, colors: ColorScheme) -> Text:
    amount = f"{format_signed(totals.profit)} ({format_percent(totals.profit_rate)})"
    if totals.profit > 0:
        return Text(f"  Profit: {amount}", style=colors.profit)
    if totals.profit < 0:
        return Text(f"  Loss: {amount}", style=colors.loss)
    return Text("  Flat: 0.000 (0.000%)", style=colors.flat)


def notify_style(result: NotifyResult) -> str:
    if result.success:
        return "green"
    return "yellow" if not result.configured else "red"


def _console(buf: StringIO, width: Optional[int]) -> Console:
    return Console(
        file=buf,
        width=max(width or 0, MIN_FRAME_WIDTH),
        force_terminal=True,
        color_system="standard",
        markup=False,
        emoji=False,
        highlight=False,
    )


def render_frame(
    report: Report,
    settings: Settings,
    now: datetime,
    width: Optional[int] = None,
) -> str:
    """Render one dashboard frame as a string with ANSI color codes."""
    buf = StringIO()
    console = _console(buf, width)

    console.print()
    console.print(_title(settings, now))
    console.print()
    console.print(holdings_table(report, settings))
    console.print()

    if report.failed:
        console.print(
            Text("  Quote request failed, check the network or switch provider", style="yellow")
        )
    console.print(_summary(report.totals, settings.colors))
    if not report.market_open:
        console.print(
            Text(
                f"  Market closed, updates paused. Trading hours: {SESSION.describe()}",
                style="yellow",
            )
        )
    return buf.getvalue()


def render_notify_status(result: NotifyResult, width: Optional[int] = None) -> str:
    """Render the one-line notifier outcome shown under the table."""
    if not result.message:
        return ""
    buf = StringIO()
    _console(buf, width).print(Text(f"  {result.message}", style=notify_style(result)))
    return buf.getvalue()


def render_plain_table(report: Report, now: datetime) -> str:
    """Render the reduced plain-text table sent to the webhook."""
    rows = [
        [
            row.quote.name,
            format_signed(row.quote.change),
            format_percent(row.quote.change_percent),
            format_number(row.quote.price),
            format_number(row.holding.cost),
        ]
        for row in report.rows
    ]
    widths = [
        max([minimum] + [display_width(cells[i]) for cells in rows])
        for i, minimum in enumerate(PLAIN_MIN_WIDTHS)
    ]

    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+\n"
    lines = [f"Portfolio monitor - {now.strftime(TIMESTAMP_FORMAT)}\n\n", border]
    lines.append(_plain_row(PLAIN_HEADERS, widths))
    lines.append(border)
    lines.extend(_plain_row(cells, widths) for cells in rows)
    lines.append(border)
    return "".join(lines)


def _plain_row(cells: Iterable[str], widths: list[int]) -> str:
    return "|" + "".join(f" {pad_right(c, w)} |" for c, w in zip(cells, widths)) + "\n"
