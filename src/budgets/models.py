"""Budget data models."""

from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field

from shared.models import CamelModel


BudgetPeriod = Literal['weekly', 'monthly', 'yearly']

ProgressLevel = Literal['ok', 'warning', 'over']


class Budget(CamelModel):
    """Budget model.

    Spending is never stored on the budget; see ``budgets.evaluator``.
    """

    id: str
    category_id: str = Field(..., description="Category.id this budget limits")
    amount: Decimal = Field(..., ge=0)
    period: BudgetPeriod = 'monthly'


class BudgetStatus(CamelModel):
    """Progress of a budget against the spent amount."""

    percentage: Decimal
    is_over_budget: bool
    remaining: Decimal
    overspend_amount: Decimal
    progress_level: ProgressLevel
    bar_width: Decimal


class BudgetCard(CamelModel):
    """A budget joined with its category and evaluated spending."""

    budget: Budget
    category_name: Optional[str] = None
    color: str
    icon: str
    spent: Decimal
    status: BudgetStatus
