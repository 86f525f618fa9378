"""Expense service for managing expenses."""

from typing import Any, Callable, Dict, List, Optional
from datetime import date, datetime, timezone
import logging

from pydantic import ValidationError as ModelValidationError

from shared.exceptions import DatabaseError, ValidationError
from shared.models import snake_case_keys
from shared.store import get_store
from shared.validators import (
    validate_amount,
    validate_category_name,
    validate_date,
    validate_required_fields,
    validate_tags,
    sanitize_string
)
from expenses.models import Expense

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('amount', 'category', 'description', 'date', 'tags')


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExpenseService:
    """Service for managing expenses."""

    def __init__(self, store=None, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize expense service.

        Args:
            store: Record store for expenses (defaults to the process-wide one)
            clock: Callable returning the current timestamp
        """
        self.store = store or get_store('expenses')
        self._now = clock or _utcnow

    async def list_expenses(self) -> List[Expense]:
        """
        List all expenses, newest date first.

        Returns:
            Expenses sorted by date, descending
        """
        records = await self.store.get_all()
        expenses = [self._to_model(record) for record in records]
        return sorted(expenses, key=lambda expense: expense.date, reverse=True)

    async def get_expense(self, expense_id: str) -> Expense:
        """
        Get expense by ID.

        Raises:
            NotFoundError: If expense not found
        """
        record = await self.store.get_by_id(expense_id)
        return self._to_model(record)

    async def create_expense(self, data: Dict[str, Any]) -> Expense:
        """
        Create an expense.

        Args:
            data: Submitted fields; ``amount`` and ``category`` are required,
                ``date`` defaults to today

        Returns:
            Created expense

        Raises:
            ValidationError: If validation fails
        """
        data = snake_case_keys(data)
        validate_required_fields(data, ['amount', 'category'])

        fields = {
            'amount': validate_amount(data['amount']),
            'category': validate_category_name(data['category']),
            'description': sanitize_string(data.get('description') or '', max_length=500),
            'date': validate_date(data.get('date') or self._now().date()),
            'tags': validate_tags(data.get('tags')),
            'created_at': self._now()
        }

        record = await self.store.create(fields)

        logger.info(f"Created expense {record['id']}")
        return self._to_model(record)

    async def update_expense(self, expense_id: str, updates: Dict[str, Any]) -> Expense:
        """
        Update expense.

        Args:
            expense_id: Expense ID
            updates: Fields to update

        Returns:
            Updated expense

        Raises:
            NotFoundError: If expense not found
            ValidationError: If validation fails
        """
        updates = snake_case_keys(updates)

        if not updates:
            raise ValidationError("No updates provided")

        unknown = [key for key in updates if key not in UPDATABLE_FIELDS]
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}")

        fields = {}

        if 'amount' in updates:
            fields['amount'] = validate_amount(updates['amount'])

        if 'category' in updates:
            fields['category'] = validate_category_name(updates['category'])

        if 'description' in updates:
            fields['description'] = sanitize_string(updates['description'] or '', max_length=500)

        if 'date' in updates:
            fields['date'] = validate_date(updates['date'])

        if 'tags' in updates:
            fields['tags'] = validate_tags(updates['tags'])

        record = await self.store.update(expense_id, fields)

        logger.info(f"Updated expense {expense_id}")
        return self._to_model(record)

    async def delete_expense(self, expense_id: str) -> None:
        """
        Delete expense.

        Raises:
            NotFoundError: If expense not found
        """
        await self.store.delete(expense_id)

        logger.info(f"Deleted expense {expense_id}")

    @staticmethod
    def _to_model(record: Dict[str, Any]) -> Expense:
        try:
            return Expense.model_validate(record)
        except ModelValidationError as e:
            logger.error(f"Invalid expense record {record.get('id')}: {e}")
            raise DatabaseError(f"Invalid expense record: {record.get('id')}")
