"""Budget progress evaluation."""

from decimal import Decimal
from typing import Any, Iterable, List, Mapping

from budgets.models import Budget, BudgetCard, BudgetStatus
from categories.models import Category, DEFAULT_CATEGORY_COLOR, DEFAULT_CATEGORY_ICON
from categories.service import find_category_by_id

ZERO = Decimal('0')
HUNDRED = Decimal('100')

# Percentage above which a budget is flagged before it is exceeded
WARNING_PERCENTAGE = Decimal('80')


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def evaluate_budget(budget: Budget, spent: Any) -> BudgetStatus:
    """
    Evaluate a budget against the amount spent in its category.

    A zero budget always reports 0% and is never over budget.

    Args:
        budget: Budget to evaluate
        spent: Amount spent in the budget's category

    Returns:
        Budget status
    """
    amount = budget.amount
    spent = _to_decimal(spent)

    percentage = spent / amount * HUNDRED if amount > 0 else ZERO
    is_over_budget = percentage > HUNDRED

    if is_over_budget:
        progress_level = 'over'
    elif percentage > WARNING_PERCENTAGE:
        progress_level = 'warning'
    else:
        progress_level = 'ok'

    return BudgetStatus(
        percentage=percentage,
        is_over_budget=is_over_budget,
        remaining=max(ZERO, amount - spent),
        overspend_amount=max(ZERO, spent - amount),
        progress_level=progress_level,
        bar_width=min(percentage, HUNDRED)
    )


def budget_overview(
    budgets: Iterable[Budget],
    categories: Iterable[Category],
    category_totals: Mapping[str, Any]
) -> List[BudgetCard]:
    """
    Evaluate every budget against the current category totals.

    Budgets point at categories by id while totals are keyed by category
    name. A budget whose category is missing gets the default appearance
    and zero spending.
    """
    categories = list(categories)
    cards = []

    for budget in budgets:
        category = find_category_by_id(categories, budget.category_id)

        if category is None:
            spent = ZERO
        else:
            spent = _to_decimal(category_totals.get(category.name, ZERO))

        cards.append(BudgetCard(
            budget=budget,
            category_name=category.name if category else None,
            color=category.color if category else DEFAULT_CATEGORY_COLOR,
            icon=category.icon if category else DEFAULT_CATEGORY_ICON,
            spent=spent,
            status=evaluate_budget(budget, spent)
        ))

    return cards
