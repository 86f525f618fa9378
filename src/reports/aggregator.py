"""Expense filtering and aggregation.

Everything here is pure: the same expenses, criteria and ``now`` always give
the same result.
"""

import calendar
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Literal, Optional, Sequence, Tuple, Union

from expenses.models import Expense
from shared.models import CamelModel
from shared.validators import validate_period_mode

ALL_CATEGORIES = 'all'

PeriodMode = Literal['month', 'all']


class ExpenseFilter(CamelModel):
    """Dashboard filter criteria."""

    search_term: str = ''
    selected_category: str = ALL_CATEGORIES
    period_mode: PeriodMode = 'month'

    @classmethod
    def from_query(cls, query_params: Optional[Dict[str, str]]) -> "ExpenseFilter":
        """Build criteria from ``search``, ``category`` and ``period`` query parameters."""
        query_params = query_params or {}

        return cls(
            search_term=query_params.get('search') or '',
            selected_category=query_params.get('category') or ALL_CATEGORIES,
            period_mode=validate_period_mode(query_params.get('period'))
        )


class AggregateResult(CamelModel):
    """Filtered expenses with their total and per-category breakdown."""

    filtered_expenses: List[Expense]
    total_spent: Decimal
    category_totals: Dict[str, Decimal]


def _as_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def month_bounds(now: Union[date, datetime]) -> Tuple[date, date]:
    """First and last day of the month containing ``now``."""
    today = _as_date(now)
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def week_bounds(now: Union[date, datetime]) -> Tuple[date, date]:
    """Sunday through Saturday of the week containing ``now``."""
    today = _as_date(now)
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def matches_search(expense: Expense, search_term: str) -> bool:
    """Case-insensitive substring match on description or category."""
    term = search_term.lower()
    return term in expense.description.lower() or term in expense.category.lower()


def matches_category(expense: Expense, selected_category: str) -> bool:
    return selected_category == ALL_CATEGORIES or expense.category == selected_category


def within(expense: Expense, start: date, end: date) -> bool:
    """Whether the expense date falls in [start, end]."""
    return start <= expense.date <= end


def filter_expenses(
    expenses: Iterable[Expense],
    criteria: ExpenseFilter,
    now: Union[date, datetime]
) -> List[Expense]:
    """Apply search, category and period filters, keeping the input order."""
    start, end = month_bounds(now)

    return [
        expense for expense in expenses
        if matches_search(expense, criteria.search_term)
        and matches_category(expense, criteria.selected_category)
        and (criteria.period_mode == 'all' or within(expense, start, end))
    ]


def total_spent(expenses: Iterable[Expense]) -> Decimal:
    return sum((expense.amount for expense in expenses), Decimal('0'))


def category_totals(expenses: Iterable[Expense]) -> Dict[str, Decimal]:
    """Sum amounts per category name, in first-seen order."""
    totals: Dict[str, Decimal] = {}

    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, Decimal('0')) + expense.amount

    return totals


def aggregate_expenses(
    expenses: Sequence[Expense],
    criteria: Optional[ExpenseFilter] = None,
    now: Optional[Union[date, datetime]] = None
) -> AggregateResult:
    """
    Filter expenses and compute the total and category breakdown.

    Args:
        expenses: Expenses to aggregate
        criteria: Filter criteria (defaults to everything this month)
        now: Reference date for the month filter (defaults to today)

    Returns:
        Aggregate result
    """
    criteria = criteria or ExpenseFilter()
    now = now or date.today()

    filtered = filter_expenses(expenses, criteria, now)

    return AggregateResult(
        filtered_expenses=filtered,
        total_spent=total_spent(filtered),
        category_totals=category_totals(filtered)
    )
