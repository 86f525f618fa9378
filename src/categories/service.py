"""Category service and category lookups."""

from typing import Any, Dict, Iterable, List, Optional
import logging

from pydantic import ValidationError as ModelValidationError

from shared.exceptions import DatabaseError, ValidationError
from shared.models import snake_case_keys
from shared.store import get_store
from shared.validators import (
    validate_color,
    validate_required_fields,
    sanitize_string
)
from categories.defaults import DEFAULT_CATEGORIES
from categories.models import (
    Category,
    CategoryAppearance,
    DEFAULT_CATEGORY_COLOR,
    DEFAULT_CATEGORY_ICON
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('name', 'color', 'icon')


def find_category_by_id(categories: Iterable[Category], category_id: str) -> Optional[Category]:
    """Return the first category with the given id, or None."""
    return next((c for c in categories if c.id == category_id), None)


def find_category_by_name(categories: Iterable[Category], name: str) -> Optional[Category]:
    """Return the first category with the given name, or None."""
    return next((c for c in categories if c.name == name), None)


def category_appearance(categories: Iterable[Category], name: str) -> CategoryAppearance:
    """
    Resolve how an expense's category is displayed.

    A name that matches no category falls back to the default color and icon.
    """
    category = find_category_by_name(categories, name)

    if category is None:
        return CategoryAppearance(
            name=name,
            color=DEFAULT_CATEGORY_COLOR,
            icon=DEFAULT_CATEGORY_ICON,
            found=False
        )

    return CategoryAppearance(
        name=category.name,
        color=category.color,
        icon=category.icon,
        found=True
    )


class CategoryService:
    """Service for managing categories."""

    def __init__(self, store=None):
        """Initialize category service."""
        self.store = store or get_store('categories', DEFAULT_CATEGORIES)

    async def list_categories(self) -> List[Category]:
        records = await self.store.get_all()
        return [self._to_model(record) for record in records]

    async def get_category(self, category_id: str) -> Category:
        """
        Get category by ID.

        Raises:
            NotFoundError: If category not found
        """
        record = await self.store.get_by_id(category_id)
        return self._to_model(record)

    async def create_category(self, data: Dict[str, Any]) -> Category:
        """
        Create a category.

        Args:
            data: ``name`` is required; ``color`` and ``icon`` default to the
                fallback appearance

        Raises:
            ValidationError: If validation fails
        """
        data = snake_case_keys(data)
        validate_required_fields(data, ['name'])

        fields = {
            'name': sanitize_string(data['name'], max_length=100),
            'color': validate_color(data.get('color') or DEFAULT_CATEGORY_COLOR),
            'icon': sanitize_string(data.get('icon') or DEFAULT_CATEGORY_ICON, max_length=50)
        }

        if not fields['name']:
            raise ValidationError("Name is required")

        record = await self.store.create(fields)

        logger.info(f"Created category {record['id']} ({fields['name']})")
        return self._to_model(record)

    async def update_category(self, category_id: str, updates: Dict[str, Any]) -> Category:
        """
        Update category.

        Renaming does not touch expenses that still carry the old name.

        Raises:
            NotFoundError: If category not found
            ValidationError: If validation fails
        """
        updates = snake_case_keys(updates)

        if not updates:
            raise ValidationError("No updates provided")

        unknown = [key for key in updates if key not in UPDATABLE_FIELDS]
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}")

        fields = {}

        if 'name' in updates:
            fields['name'] = sanitize_string(updates['name'] or '', max_length=100)
            if not fields['name']:
                raise ValidationError("Name is required")

        if 'color' in updates:
            fields['color'] = validate_color(updates['color'])

        if 'icon' in updates:
            fields['icon'] = sanitize_string(updates['icon'] or DEFAULT_CATEGORY_ICON, max_length=50)

        record = await self.store.update(category_id, fields)

        logger.info(f"Updated category {category_id}")
        return self._to_model(record)

    async def delete_category(self, category_id: str) -> None:
        """
        Delete category.

        Raises:
            NotFoundError: If category not found
        """
        await self.store.delete(category_id)

        logger.info(f"Deleted category {category_id}")

    @staticmethod
    def _to_model(record: Dict[str, Any]) -> Category:
        try:
            return Category.model_validate(record)
        except ModelValidationError as e:
            logger.error(f"Invalid category record {record.get('id')}: {e}")
            raise DatabaseError(f"Invalid category record: {record.get('id')}")
