"""
Investment portfolio figures and the compound-interest sandbox.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Optional

from pydantic import BaseModel, Field

from wealth_dashboard.models.finance import Investment


class InvestmentPosition(BaseModel):
    """One investment valued at the latest known price."""

    investment: Investment
    current_price: Decimal = Field(
        default=Decimal("0"),
        description="Latest price per share; 0 when no quote is available"
    )
    current_value: Decimal = Decimal("0")


class PortfolioSummary(BaseModel):
    positions: list[InvestmentPosition] = Field(default_factory=list)
    total_invested: Decimal = Decimal("0")
    total_current_value: Decimal = Decimal("0")
    total_return: Decimal = Decimal("0")
    total_return_percent: Decimal = Decimal("0")


class ForecastPoint(BaseModel):
    year: int
    amount: int


def summarize_portfolio(
    investments: Iterable[Investment],
    prices: Mapping[str, Decimal],
) -> PortfolioSummary:
    """
    Value every position at its symbol's price and total the portfolio.

    A symbol without a quote is valued at zero. The return percentage is
    zero when nothing has been invested.
    """
    positions = []
    total_invested = Decimal("0")
    total_current_value = Decimal("0")

    for investment in investments:
        price = prices.get(investment.symbol)
        if price:
            current_price = Decimal(str(price))
            current_value = current_price * investment.shares_acquired
        else:
            current_price = Decimal("0")
            current_value = Decimal("0")

        total_invested += investment.amount
        total_current_value += current_value
        positions.append(InvestmentPosition(
            investment=investment,
            current_price=current_price,
            current_value=current_value,
        ))

    total_return = total_current_value - total_invested
    if total_invested > 0:
        total_return_percent = total_return / total_invested * 100
    else:
        total_return_percent = Decimal("0")

    return PortfolioSummary(
        positions=positions,
        total_invested=total_invested,
        total_current_value=total_current_value,
        total_return=total_return,
        total_return_percent=total_return_percent,
    )


def calculate_forecast(
    amount: float,
    years: int = 10,
    rate: float = 0.07,
    start_year: Optional[int] = None,
) -> list[ForecastPoint]:
    """
    Compound `amount` yearly at `rate`.

    Returns years + 1 points, starting with the current year at the
    unchanged amount. Amounts are rounded to whole units.
    """
    if years < 0:
        raise ValueError("years must be >= 0")

    start_year = start_year or date.today().year
    current = Decimal(str(amount))
    growth = 1 + Decimal(str(rate))

    points = []
    for offset in range(years + 1):
        points.append(ForecastPoint(
            year=start_year + offset,
            amount=int(current.quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
        ))
        current *= growth
    return points
