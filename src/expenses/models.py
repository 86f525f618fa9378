"""Expense data models."""

import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from shared.models import CamelModel


class Expense(CamelModel):
    """Expense model.

    ``category`` holds the category *name*, not its id.
    """

    id: str
    amount: Decimal = Field(..., ge=0, description="Expense amount")
    category: str = Field(..., description="Category name")
    description: str = ""
    date: dt.date
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[dt.datetime] = None
