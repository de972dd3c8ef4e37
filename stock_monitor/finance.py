"""Decimal-exact profit and cost-basis calculations.

Every intermediate result is quantized to three places so that repeated
cost-basis projections never drift the way binary floats would.
"""

from decimal import ROUND_HALF_UP, Decimal

from .config import LOT_SIZE
from .models import Holding, ProfitFigures

MONEY_PLACES = 3
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def quantize(value: Decimal, places: int = MONEY_PLACES) -> Decimal:
    """Round half-up to a fixed number of decimal places."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def cost_value(holding: Holding) -> Decimal:
    return quantize(holding.shares * holding.cost)


def calculate_profit(holding: Holding, price: Decimal) -> ProfitFigures:
    """Market value, profit and profit rate (percent) at the given price."""
    market_value = quantize(holding.shares * price)
    invested = cost_value(holding)
    profit = quantize(market_value - invested)
    if invested > 0:
        profit_rate = quantize(quantize(profit * HUNDRED) / invested)
    else:
        profit_rate = quantize(ZERO)
    return ProfitFigures(market_value=market_value, profit=profit, profit_rate=profit_rate)


def cost_after_buy(holding: Holding, price: Decimal, lots: int) -> Decimal:
    """Average cost after buying ``lots`` more lots at ``price``."""
    bought = Decimal(lots * LOT_SIZE)
    new_shares = holding.shares + bought
    if new_shares <= 0:
        return quantize(ZERO)
    new_cost_value = quantize(cost_value(holding) + quantize(bought * price))
    return quantize(new_cost_value / new_shares)


def cost_after_sell(holding: Holding, price: Decimal, lots: int) -> Decimal:
    """Cost per remaining share after selling ``lots`` lots.

    The whole original outlay is spread over the shares left, so ``price``
    does not enter the result. Selling everything yields 0.
    """
    sold = Decimal(lots * LOT_SIZE)
    remaining = max(ZERO, holding.shares - sold)
    if remaining <= 0:
        return quantize(ZERO)
    return quantize(cost_value(holding) / remaining)
