"""Dashboard loading and composition."""

import asyncio
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional, Union

from budgets.evaluator import budget_overview
from budgets.models import Budget, BudgetCard
from budgets.service import BudgetService
from categories.models import Category, CategoryAppearance
from categories.service import CategoryService, category_appearance
from expenses.models import Expense
from expenses.service import ExpenseService
from reports.aggregator import AggregateResult, ExpenseFilter, aggregate_expenses
from shared.exceptions import LoadError
from shared.models import CamelModel

logger = logging.getLogger(__name__)

RECENT_EXPENSES_LIMIT = 5


class Workspace(CamelModel):
    """Everything the dashboard needs, loaded together."""

    expenses: List[Expense]
    categories: List[Category]
    budgets: List[Budget]


class SummaryCards(CamelModel):
    total_spent: Decimal
    transaction_count: int
    active_categories: int


class ChartData(CamelModel):
    """Spending breakdown series, one entry per category."""

    labels: List[str]
    series: List[Decimal]


class RecentExpense(CamelModel):
    expense: Expense
    appearance: CategoryAppearance


class DashboardView(CamelModel):
    filter: ExpenseFilter
    summary: SummaryCards
    chart: ChartData
    recent_expenses: List[RecentExpense]
    budgets: List[BudgetCard]
    filtered_expenses: List[Expense]
    category_totals: Dict[str, Decimal]


async def load_workspace(
    expense_service: ExpenseService,
    category_service: CategoryService,
    budget_service: BudgetService
) -> Workspace:
    """
    Load expenses, categories and budgets concurrently.

    The three loads succeed or fail together.

    Raises:
        LoadError: If any of the loads fails
    """
    try:
        expenses, categories, budgets = await asyncio.gather(
            expense_service.list_expenses(),
            category_service.list_categories(),
            budget_service.list_budgets()
        )
    except Exception as e:
        logger.error(f"Failed to load data: {str(e)}", exc_info=True)
        raise LoadError(f"Failed to load data: {str(e)}") from e

    return Workspace(expenses=expenses, categories=categories, budgets=budgets)


def build_dashboard(
    workspace: Workspace,
    criteria: Optional[ExpenseFilter] = None,
    now: Optional[Union[date, datetime]] = None
) -> DashboardView:
    """
    Compose the dashboard for the given filter.

    Budget progress is computed from the filtered totals on every call.
    """
    criteria = criteria or ExpenseFilter()
    result: AggregateResult = aggregate_expenses(workspace.expenses, criteria, now)

    recent = [
        RecentExpense(
            expense=expense,
            appearance=category_appearance(workspace.categories, expense.category)
        )
        for expense in result.filtered_expenses[:RECENT_EXPENSES_LIMIT]
    ]

    return DashboardView(
        filter=criteria,
        summary=SummaryCards(
            total_spent=result.total_spent,
            transaction_count=len(result.filtered_expenses),
            active_categories=len(result.category_totals)
        ),
        chart=ChartData(
            labels=list(result.category_totals.keys()),
            series=list(result.category_totals.values())
        ),
        recent_expenses=recent,
        budgets=budget_overview(workspace.budgets, workspace.categories, result.category_totals),
        filtered_expenses=result.filtered_expenses,
        category_totals=result.category_totals
    )


class DashboardService:
    """Loads records and builds dashboard views."""

    def __init__(
        self,
        expense_service: Optional[ExpenseService] = None,
        category_service: Optional[CategoryService] = None,
        budget_service: Optional[BudgetService] = None
    ):
        self.expense_service = expense_service or ExpenseService()
        self.category_service = category_service or CategoryService()
        self.budget_service = budget_service or BudgetService()

    async def load(self) -> Workspace:
        return await load_workspace(
            self.expense_service,
            self.category_service,
            self.budget_service
        )

    async def dashboard(
        self,
        criteria: Optional[ExpenseFilter] = None,
        now: Optional[Union[date, datetime]] = None
    ) -> DashboardView:
        workspace = await self.load()
        return build_dashboard(workspace, criteria, now)
