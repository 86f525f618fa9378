"""Weekly and monthly spending summaries."""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, Literal, Optional, Union

from expenses.models import Expense
from reports.aggregator import category_totals, month_bounds, total_spent, week_bounds, within
from shared.exceptions import ValidationError
from shared.models import CamelModel

SummaryPeriod = Literal['weekly', 'monthly']


class PeriodSummary(CamelModel):
    """Spending within the current week or month."""

    period: SummaryPeriod
    start_date: date
    end_date: date
    total_spent: Decimal
    category_breakdown: Dict[str, Decimal]
    expense_count: int


def summarize(
    expenses: Iterable[Expense],
    period: str = 'monthly',
    now: Optional[Union[date, datetime]] = None
) -> PeriodSummary:
    """
    Summarize expenses dated within the current period.

    Weeks run Sunday through Saturday; months are calendar months.

    Raises:
        ValidationError: If the period is not weekly or monthly
    """
    now = now or date.today()

    if period == 'weekly':
        start, end = week_bounds(now)
    elif period == 'monthly':
        start, end = month_bounds(now)
    else:
        raise ValidationError("Period must be 'weekly' or 'monthly'")

    in_period = [expense for expense in expenses if within(expense, start, end)]

    return PeriodSummary(
        period=period,
        start_date=start,
        end_date=end,
        total_spent=total_spent(in_period),
        category_breakdown=category_totals(in_period),
        expense_count=len(in_period)
    )


def weekly_summary(expenses: Iterable[Expense], now=None) -> PeriodSummary:
    return summarize(expenses, 'weekly', now)


def monthly_summary(expenses: Iterable[Expense], now=None) -> PeriodSummary:
    return summarize(expenses, 'monthly', now)
