"""Unit tests for budget service."""

import pytest
from decimal import Decimal
import sys
import os

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from budgets.service import BudgetService
from shared.exceptions import NotFoundError, ValidationError
from shared.store import InMemoryRecordStore


class TestBudgetService:
    """Test cases for BudgetService."""

    @pytest.fixture
    def budget_service(self):
        """Create budget service with one existing budget."""
        store = InMemoryRecordStore('Budget', records=[
            {'id': 'b1', 'category_id': '1', 'amount': Decimal('500'), 'period': 'monthly'}
        ])
        return BudgetService(store=store)

    @pytest.mark.asyncio
    async def test_create_budget(self, budget_service):
        """Test creating a budget from camelCase input."""
        result = await budget_service.create_budget({'categoryId': '2', 'amount': '150.00'})

        assert result.category_id == '2'
        assert result.amount == Decimal('150.00')
        assert result.period == 'monthly'
        assert len(await budget_service.list_budgets()) == 2

    @pytest.mark.asyncio
    async def test_create_budget_with_period(self, budget_service):
        result = await budget_service.create_budget({'category_id': '3', 'amount': 20, 'period': 'Weekly'})

        assert result.period == 'weekly'

    @pytest.mark.asyncio
    async def test_create_large_yearly_budget(self, budget_service):
        """Test that amounts above 999999.99 are accepted."""
        result = await budget_service.create_budget({'categoryId': '5', 'amount': '1000000.00', 'period': 'yearly'})

        assert result.amount == Decimal('1000000.00')

    @pytest.mark.asyncio
    async def test_create_budget_for_unknown_category(self, budget_service):
        """Test that the category id is not checked."""
        result = await budget_service.create_budget({'categoryId': 'does-not-exist', 'amount': 10})

        assert result.category_id == 'does-not-exist'

    @pytest.mark.asyncio
    @pytest.mark.parametrize('data', [
        {'amount': 100},
        {'categoryId': '1'},
        {'categoryId': '1', 'amount': -1},
        {'categoryId': '1', 'amount': 100, 'period': 'daily'},
    ])
    async def test_create_budget_invalid(self, budget_service, data):
        with pytest.raises(ValidationError):
            await budget_service.create_budget(data)

        assert len(await budget_service.list_budgets()) == 1

    @pytest.mark.asyncio
    async def test_get_budget(self, budget_service):
        result = await budget_service.get_budget('b1')

        assert result.amount == Decimal('500')

    @pytest.mark.asyncio
    async def test_update_budget(self, budget_service):
        result = await budget_service.update_budget('b1', {'amount': 750})

        assert result.amount == Decimal('750')
        assert result.category_id == '1'

    @pytest.mark.asyncio
    async def test_update_budget_invalid(self, budget_service):
        with pytest.raises(ValidationError):
            await budget_service.update_budget('b1', {'categoryId': ''})

        with pytest.raises(ValidationError):
            await budget_service.update_budget('b1', {'spent': 10})

    @pytest.mark.asyncio
    async def test_update_budget_not_found(self, budget_service):
        with pytest.raises(NotFoundError, match="Budget not found"):
            await budget_service.update_budget('missing', {'amount': 10})

    @pytest.mark.asyncio
    async def test_delete_budget(self, budget_service):
        await budget_service.delete_budget('b1')

        assert await budget_service.list_budgets() == []

        with pytest.raises(NotFoundError):
            await budget_service.delete_budget('b1')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
