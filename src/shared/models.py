"""Base model shared by the record types."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel, to_snake
from typing import Any, Dict

from .exceptions import ValidationError


class CamelModel(BaseModel):
    """Model that reads snake_case or camelCase keys and dumps camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def snake_case_keys(data: Any) -> Dict[str, Any]:
    """
    Normalize request keys such as ``categoryId`` to ``category_id``.

    Raises:
        ValidationError: If the request body is not a JSON object
    """
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON body")

    return {to_snake(key): value for key, value in data.items()}
