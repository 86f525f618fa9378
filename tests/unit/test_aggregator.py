"""Unit tests for expense aggregation."""

import pytest
from datetime import date, datetime
from decimal import Decimal
import sys
import os

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from expenses.models import Expense
from reports.aggregator import (
    ExpenseFilter,
    aggregate_expenses,
    category_totals,
    filter_expenses,
    month_bounds,
    week_bounds
)
from shared.exceptions import ValidationError


NOW = date(2024, 1, 20)


def make_expense(expense_id, amount, category, description='', day=date(2024, 1, 15)):
    return Expense(
        id=expense_id,
        amount=Decimal(str(amount)),
        category=category,
        description=description,
        date=day
    )


class TestAggregator:
    """Test cases for expense filtering and aggregation."""

    @pytest.fixture
    def sample_expenses(self):
        """Sample expenses, two of them outside January 2024."""
        return [
            make_expense('1', '45.67', 'Groceries', 'Weekly shop at Walmart'),
            make_expense('2', '25.00', 'Food & Dining', 'Coffee with Sam', date(2024, 1, 16)),
            make_expense('3', '30.00', 'Groceries', 'Farmers market', date(2024, 1, 31)),
            make_expense('4', '12.50', 'Transportation', 'Bus pass', date(2023, 12, 31)),
            make_expense('5', '99.99', 'Shopping', 'New shoes', date(2024, 2, 1)),
        ]

    def test_single_expense_this_month(self):
        """Test the basic dashboard scenario."""
        expenses = [make_expense('1', 50, 'Food', day=date(2024, 1, 10))]

        result = aggregate_expenses(expenses, ExpenseFilter(), NOW)

        assert result.total_spent == Decimal('50')
        assert result.category_totals == {'Food': Decimal('50')}
        assert [e.id for e in result.filtered_expenses] == ['1']

    def test_month_filter_is_inclusive(self, sample_expenses):
        """Test that the first and last day of the month are included."""
        result = aggregate_expenses(sample_expenses, ExpenseFilter(period_mode='month'), NOW)

        assert [e.id for e in result.filtered_expenses] == ['1', '2', '3']
        assert result.total_spent == Decimal('100.67')

    def test_all_period_keeps_everything(self, sample_expenses):
        """Test that period mode 'all' does not filter by date."""
        result = aggregate_expenses(sample_expenses, ExpenseFilter(period_mode='all'), NOW)

        assert len(result.filtered_expenses) == 5
        assert result.total_spent == Decimal('213.16')

    def test_search_matches_description_case_insensitively(self, sample_expenses):
        """Test searching by description."""
        criteria = ExpenseFilter(search_term='WALMART', period_mode='all')

        result = aggregate_expenses(sample_expenses, criteria, NOW)

        assert [e.id for e in result.filtered_expenses] == ['1']

    def test_search_matches_category(self, sample_expenses):
        """Test searching by category name."""
        criteria = ExpenseFilter(search_term='grocer', period_mode='all')

        result = aggregate_expenses(sample_expenses, criteria, NOW)

        assert [e.id for e in result.filtered_expenses] == ['1', '3']

    def test_every_filtered_entry_matches_search(self, sample_expenses):
        """Test that filtered entries match and excluded entries do not."""
        term = 'o'
        criteria = ExpenseFilter(search_term=term, period_mode='all')

        filtered = filter_expenses(sample_expenses, criteria, NOW)
        filtered_ids = {e.id for e in filtered}

        for expense in sample_expenses:
            matches = term in expense.description.lower() or term in expense.category.lower()
            assert (expense.id in filtered_ids) == matches

    def test_category_filter_is_exact(self, sample_expenses):
        """Test filtering by a selected category."""
        criteria = ExpenseFilter(selected_category='Groceries', period_mode='all')

        result = aggregate_expenses(sample_expenses, criteria, NOW)

        assert [e.id for e in result.filtered_expenses] == ['1', '3']
        assert list(result.category_totals) == ['Groceries']

        criteria = ExpenseFilter(selected_category='groceries', period_mode='all')
        assert aggregate_expenses(sample_expenses, criteria, NOW).filtered_expenses == []

    def test_filters_combine(self, sample_expenses):
        """Test search, category and period together."""
        criteria = ExpenseFilter(
            search_term='market',
            selected_category='Groceries',
            period_mode='month'
        )

        result = aggregate_expenses(sample_expenses, criteria, NOW)

        assert [e.id for e in result.filtered_expenses] == ['3']

    def test_category_totals_first_seen_order(self, sample_expenses):
        """Test that category totals keep first-seen order."""
        totals = category_totals(sample_expenses)

        assert list(totals) == ['Groceries', 'Food & Dining', 'Transportation', 'Shopping']
        assert totals['Groceries'] == Decimal('75.67')

    def test_category_totals_sum_to_total(self, sample_expenses):
        """Test that the breakdown sums exactly to the total."""
        result = aggregate_expenses(sample_expenses, ExpenseFilter(period_mode='all'), NOW)

        assert sum(result.category_totals.values(), Decimal('0')) == result.total_spent

    def test_zero_and_fractional_amounts(self):
        """Test that zero and fractional amounts aggregate exactly."""
        expenses = [
            make_expense('1', '0', 'Other'),
            make_expense('2', '0.10', 'Other'),
            make_expense('3', '0.20', 'Other'),
        ]

        result = aggregate_expenses(expenses, ExpenseFilter(), NOW)

        assert result.total_spent == Decimal('0.30')
        assert len(result.filtered_expenses) == 3

    def test_empty_input(self):
        """Test aggregating no expenses."""
        result = aggregate_expenses([], ExpenseFilter(), NOW)

        assert result.filtered_expenses == []
        assert result.total_spent == Decimal('0')
        assert result.category_totals == {}

    def test_accepts_datetime_now(self, sample_expenses):
        """Test that a datetime reference behaves like its date."""
        by_date = aggregate_expenses(sample_expenses, ExpenseFilter(), NOW)
        by_datetime = aggregate_expenses(sample_expenses, ExpenseFilter(), datetime(2024, 1, 20, 23, 59))

        assert by_date == by_datetime

    def test_month_bounds(self):
        """Test month bounds, including a leap February."""
        assert month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))
        assert month_bounds(date(2023, 12, 31)) == (date(2023, 12, 1), date(2023, 12, 31))

    def test_week_bounds_start_on_sunday(self):
        """Test that weeks run Sunday through Saturday."""
        # 2024-01-17 is a Wednesday
        assert week_bounds(date(2024, 1, 17)) == (date(2024, 1, 14), date(2024, 1, 20))
        # Sunday starts its own week
        assert week_bounds(date(2024, 1, 14)) == (date(2024, 1, 14), date(2024, 1, 20))
        # Saturday ends it
        assert week_bounds(date(2024, 1, 20)) == (date(2024, 1, 14), date(2024, 1, 20))

    def test_filter_from_query(self):
        """Test building criteria from query parameters."""
        criteria = ExpenseFilter.from_query({'search': 'coffee', 'category': 'Food', 'period': 'ALL'})

        assert criteria.search_term == 'coffee'
        assert criteria.selected_category == 'Food'
        assert criteria.period_mode == 'all'

        defaults = ExpenseFilter.from_query(None)
        assert defaults == ExpenseFilter()

    def test_filter_from_query_rejects_unknown_period(self):
        """Test that an unknown period mode is rejected."""
        with pytest.raises(ValidationError):
            ExpenseFilter.from_query({'period': 'decade'})


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
