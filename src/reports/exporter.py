"""CSV export and JSON backup of expense data."""

import csv
import json
import logging
import os
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from pydantic import BaseModel, ValidationError as ModelValidationError

from budgets.models import Budget
from categories.models import Category
from expenses.models import Expense
from reports.aggregator import total_spent
from shared.exceptions import StorageError, ValidationError
from shared.models import CamelModel
from shared.response import to_json
from shared.s3 import S3Client

logger = logging.getLogger(__name__)

CSV_HEADER = ['Date', 'Amount', 'Category', 'Description']

EXPORT_PREFIX = 'exports/'


class ExportFile(BaseModel):
    """A generated export ready to download or publish."""

    filename: str
    content_type: str
    content: str


class Backup(CamelModel):
    """Full backup of expenses, categories and budgets."""

    export_date: datetime
    total_expenses: int
    total_amount: Decimal
    expenses: List[Expense]
    categories: List[Category]
    budgets: List[Budget]


def _format_amount(amount: Decimal) -> str:
    return f"{amount:f}"


def _stamp(now: Union[date, datetime]) -> str:
    return now.strftime('%Y-%m-%d')


def csv_filename(now: Union[date, datetime]) -> str:
    return f"pennywise-expenses-{_stamp(now)}.csv"


def backup_filename(now: Union[date, datetime]) -> str:
    return f"pennywise-backup-{_stamp(now)}.json"


def expenses_to_csv(expenses: Iterable[Expense]) -> str:
    """
    Render expenses as CSV.

    The header is always written, one row per expense follows in the given
    order with dates as ``YYYY-MM-DD``.
    """
    output = StringIO()
    writer = csv.writer(output, lineterminator='\n')

    writer.writerow(CSV_HEADER)

    for expense in expenses:
        writer.writerow([
            expense.date.strftime('%Y-%m-%d'),
            _format_amount(expense.amount),
            expense.category,
            expense.description
        ])

    csv_content = output.getvalue()
    output.close()

    return csv_content


def build_backup(
    expenses: Sequence[Expense],
    categories: Sequence[Category],
    budgets: Sequence[Budget],
    total_amount: Optional[Decimal] = None,
    now: Optional[datetime] = None
) -> Backup:
    """
    Build a backup of all records.

    Args:
        expenses: Expenses to include
        categories: Categories to include
        budgets: Budgets to include
        total_amount: Total shown in the backup (defaults to the sum of expenses)
        now: Export timestamp (defaults to the current UTC time)
    """
    return Backup(
        export_date=now or datetime.now(timezone.utc),
        total_expenses=len(expenses),
        total_amount=total_spent(expenses) if total_amount is None else total_amount,
        expenses=list(expenses),
        categories=list(categories),
        budgets=list(budgets)
    )


def backup_to_json(backup: Backup) -> str:
    return to_json(backup.model_dump(by_alias=True), indent=2)


def read_backup(content: Union[str, bytes]) -> Backup:
    """
    Parse a JSON backup back into typed records.

    Raises:
        ValidationError: If the content is not a valid backup
    """
    try:
        data = json.loads(content, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid backup file: {e}")

    try:
        return Backup.model_validate(data)
    except ModelValidationError as e:
        raise ValidationError(f"Invalid backup file: {e.error_count()} invalid field(s)")


class ExportService:
    """Service producing export files and publishing them to S3."""

    def __init__(self, s3_client: Optional[S3Client] = None):
        """
        Initialize export service.

        Args:
            s3_client: Client for the exports bucket; built from
                ``EXPORTS_BUCKET`` when omitted, publishing is unavailable
                when neither is set
        """
        bucket = os.environ.get('EXPORTS_BUCKET')
        self.s3 = s3_client or (S3Client(bucket) if bucket else None)

    def export_csv(self, expenses: Iterable[Expense], now: Optional[datetime] = None) -> ExportFile:
        now = now or datetime.now(timezone.utc)
        return ExportFile(
            filename=csv_filename(now),
            content_type='text/csv',
            content=expenses_to_csv(expenses)
        )

    def export_backup(
        self,
        expenses: Sequence[Expense],
        categories: Sequence[Category],
        budgets: Sequence[Budget],
        total_amount: Optional[Decimal] = None,
        now: Optional[datetime] = None
    ) -> ExportFile:
        now = now or datetime.now(timezone.utc)
        backup = build_backup(expenses, categories, budgets, total_amount, now)
        return ExportFile(
            filename=backup_filename(now),
            content_type='application/json',
            content=backup_to_json(backup)
        )

    def publish(self, export_file: ExportFile, expiration: int = 3600) -> Dict[str, Any]:
        """
        Upload an export to the exports bucket.

        Returns:
            The object key and a presigned download URL

        Raises:
            StorageError: If no bucket is configured or the upload fails
        """
        if self.s3 is None:
            raise StorageError("No exports bucket configured")

        key = f"{EXPORT_PREFIX}{export_file.filename}"
        self.s3.upload_file(
            export_file.content.encode('utf-8'),
            key,
            content_type=export_file.content_type
        )

        logger.info(f"Published export {key}")

        return {
            'key': key,
            'url': self.s3.get_presigned_url(key, expiration=expiration)
        }

    def load_backup(self, key: str) -> Backup:
        """
        Download and parse a published backup.

        Raises:
            StorageError: If no bucket is configured or the download fails
            ValidationError: If the file is not a valid backup
        """
        if self.s3 is None:
            raise StorageError("No exports bucket configured")

        return read_backup(self.s3.download_file(key))
