"""Category data models."""

from pydantic import Field

from shared.models import CamelModel


# Appearance used when an expense or budget points at a missing category
DEFAULT_CATEGORY_COLOR = "#ccc"
DEFAULT_CATEGORY_ICON = "Target"


class Category(CamelModel):
    """Category model.

    Names are unique by convention only; expenses refer to categories by name.
    """

    id: str
    name: str
    color: str = Field(DEFAULT_CATEGORY_COLOR, description="Hex color")
    icon: str = Field(DEFAULT_CATEGORY_ICON, description="Icon name")


class CategoryAppearance(CamelModel):
    """Color and icon shown next to an expense or budget."""

    name: str
    color: str
    icon: str
    found: bool
