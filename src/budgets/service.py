"""Budget service for managing budgets."""

from typing import Dict, Any, List
import logging

from pydantic import ValidationError as ModelValidationError

from shared.exceptions import DatabaseError, ValidationError
from shared.models import snake_case_keys
from shared.store import get_store
from shared.validators import (
    validate_amount,
    validate_period,
    validate_required_fields,
    sanitize_string
)
from budgets.models import Budget

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('category_id', 'amount', 'period')


class BudgetService:
    """Service for managing budgets."""

    def __init__(self, store=None):
        """Initialize budget service."""
        self.store = store or get_store('budgets')

    async def list_budgets(self) -> List[Budget]:
        records = await self.store.get_all()
        return [self._to_model(record) for record in records]

    async def get_budget(self, budget_id: str) -> Budget:
        """
        Get budget by ID.

        Raises:
            NotFoundError: If budget not found
        """
        record = await self.store.get_by_id(budget_id)
        return self._to_model(record)

    async def create_budget(self, data: Dict[str, Any]) -> Budget:
        """
        Create a new budget.

        The category id is not checked against the category store; budgets
        for missing categories are shown with the default appearance.

        Args:
            data: ``category_id`` and ``amount`` are required, ``period``
                defaults to monthly

        Returns:
            Created budget

        Raises:
            ValidationError: If validation fails
        """
        data = snake_case_keys(data)
        validate_required_fields(data, ['category_id', 'amount'])

        fields = {
            'category_id': sanitize_string(str(data['category_id']), max_length=100),
            'amount': validate_amount(data['amount']),
            'period': validate_period(data.get('period') or 'monthly')
        }

        record = await self.store.create(fields)

        logger.info(f"Created budget {record['id']} for category {fields['category_id']}")
        return self._to_model(record)

    async def update_budget(self, budget_id: str, updates: Dict[str, Any]) -> Budget:
        """
        Update budget.

        Raises:
            NotFoundError: If budget not found
            ValidationError: If validation fails
        """
        updates = snake_case_keys(updates)

        if not updates:
            raise ValidationError("No updates provided")

        unknown = [key for key in updates if key not in UPDATABLE_FIELDS]
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}")

        fields = {}

        if 'category_id' in updates:
            if not updates['category_id']:
                raise ValidationError("Category is required")
            fields['category_id'] = sanitize_string(str(updates['category_id']), max_length=100)

        if 'amount' in updates:
            fields['amount'] = validate_amount(updates['amount'])

        if 'period' in updates:
            fields['period'] = validate_period(updates['period'])

        record = await self.store.update(budget_id, fields)

        logger.info(f"Updated budget {budget_id}")
        return self._to_model(record)

    async def delete_budget(self, budget_id: str) -> None:
        """
        Delete budget.

        Raises:
            NotFoundError: If budget not found
        """
        await self.store.delete(budget_id)

        logger.info(f"Deleted budget {budget_id}")

    @staticmethod
    def _to_model(record: Dict[str, Any]) -> Budget:
        try:
            return Budget.model_validate(record)
        except ModelValidationError as e:
            logger.error(f"Invalid budget record {record.get('id')}: {e}")
            raise DatabaseError(f"Invalid budget record: {record.get('id')}")
