"""Unit tests for exports and backups."""

import pytest
import json
from unittest.mock import Mock
from datetime import date, datetime, timezone
from decimal import Decimal
import sys
import os

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from budgets.models import Budget
from categories.defaults import DEFAULT_CATEGORIES
from categories.models import Category
from expenses.models import Expense
from reports.exporter import (
    CSV_HEADER,
    ExportService,
    backup_filename,
    backup_to_json,
    build_backup,
    csv_filename,
    expenses_to_csv,
    read_backup
)
from shared.exceptions import StorageError, ValidationError


NOW = datetime(2024, 1, 20, 10, 30, tzinfo=timezone.utc)


class TestExporter:
    """Test cases for CSV export and JSON backup."""

    @pytest.fixture
    def sample_expenses(self):
        """Sample expenses."""
        return [
            Expense(
                id='1',
                amount=Decimal('45.67'),
                category='Food & Dining',
                description='Dinner, with friends',
                date=date(2024, 1, 15)
            ),
            Expense(
                id='2',
                amount=Decimal('12'),
                category='Transportation',
                description='Bus',
                date=date(2024, 1, 5)
            ),
        ]

    @pytest.fixture
    def categories(self):
        return [Category.model_validate(record) for record in DEFAULT_CATEGORIES]

    @pytest.fixture
    def budgets(self):
        return [Budget(id='b1', category_id='1', amount=Decimal('300'))]

    def test_filenames(self):
        """Test that filenames carry the export date."""
        assert csv_filename(NOW) == 'pennywise-expenses-2024-01-20.csv'
        assert backup_filename(date(2024, 3, 1)) == 'pennywise-backup-2024-03-01.json'

    def test_csv_content(self, sample_expenses):
        """Test CSV rows, quoting and date format."""
        lines = expenses_to_csv(sample_expenses).splitlines()

        assert lines[0] == ','.join(CSV_HEADER)
        assert lines[0] == 'Date,Amount,Category,Description'
        assert lines[1] == '2024-01-15,45.67,Food & Dining,"Dinner, with friends"'
        assert lines[2] == '2024-01-05,12,Transportation,Bus'

    def test_csv_empty(self):
        """Test that an empty export still has a header."""
        assert expenses_to_csv([]) == 'Date,Amount,Category,Description\n'

    def test_backup_counts(self, sample_expenses, categories, budgets):
        """Test backup totals."""
        backup = build_backup(sample_expenses, categories, budgets, now=NOW)

        assert backup.total_expenses == 2
        assert backup.total_amount == Decimal('57.67')
        assert backup.export_date == NOW

    def test_backup_uses_given_total(self, sample_expenses, categories, budgets):
        """Test that a filtered total can be passed in."""
        backup = build_backup(sample_expenses, categories, budgets, total_amount=Decimal('45.67'), now=NOW)

        assert backup.total_expenses == 2
        assert backup.total_amount == Decimal('45.67')

    def test_backup_json_is_camel_case(self, sample_expenses, categories, budgets):
        """Test the backup document layout."""
        data = json.loads(backup_to_json(build_backup(sample_expenses, categories, budgets, now=NOW)))

        assert data['exportDate'] == '2024-01-20T10:30:00+00:00'
        assert data['totalExpenses'] == 2
        assert data['totalExpenses'] == len(data['expenses'])
        assert data['budgets'][0]['categoryId'] == '1'
        assert data['expenses'][0]['date'] == '2024-01-15'

    def test_read_backup(self, sample_expenses, categories, budgets):
        """Test reading a backup back into records."""
        content = backup_to_json(build_backup(sample_expenses, categories, budgets, now=NOW))

        backup = read_backup(content)

        assert backup.total_expenses == len(backup.expenses) == 2
        assert backup.expenses[0].amount == Decimal('45.67')
        assert [c.name for c in backup.categories] == [c.name for c in categories]

    @pytest.mark.parametrize('content', ['not json', '{"totalExpenses": 1}'])
    def test_read_backup_invalid(self, content):
        with pytest.raises(ValidationError, match="Invalid backup file"):
            read_backup(content)


class TestExportService:
    """Test cases for ExportService."""

    @pytest.fixture
    def mock_s3(self):
        s3 = Mock()
        s3.get_presigned_url.return_value = 'https://example.com/signed'
        return s3

    def test_export_csv(self):
        export_file = ExportService(s3_client=Mock()).export_csv([], now=NOW)

        assert export_file.filename == 'pennywise-expenses-2024-01-20.csv'
        assert export_file.content_type == 'text/csv'

    def test_export_backup(self):
        export_file = ExportService(s3_client=Mock()).export_backup([], [], [], now=NOW)

        assert export_file.filename == 'pennywise-backup-2024-01-20.json'
        assert export_file.content_type == 'application/json'
        assert json.loads(export_file.content)['totalExpenses'] == 0

    def test_publish(self, mock_s3):
        """Test uploading an export and returning a download link."""
        service = ExportService(s3_client=mock_s3)
        export_file = service.export_csv([], now=NOW)

        result = service.publish(export_file, expiration=60)

        assert result == {
            'key': 'exports/pennywise-expenses-2024-01-20.csv',
            'url': 'https://example.com/signed'
        }
        mock_s3.upload_file.assert_called_once_with(
            b'Date,Amount,Category,Description\n',
            'exports/pennywise-expenses-2024-01-20.csv',
            content_type='text/csv'
        )
        mock_s3.get_presigned_url.assert_called_once_with(
            'exports/pennywise-expenses-2024-01-20.csv',
            expiration=60
        )

    def test_publish_without_bucket(self, monkeypatch):
        """Test that publishing needs a configured bucket."""
        monkeypatch.delenv('EXPORTS_BUCKET', raising=False)
        service = ExportService()

        with pytest.raises(StorageError):
            service.publish(service.export_csv([], now=NOW))

        with pytest.raises(StorageError):
            service.load_backup('exports/pennywise-backup-2024-01-20.json')

    def test_load_backup(self, mock_s3):
        service = ExportService(s3_client=mock_s3)
        mock_s3.download_file.return_value = service.export_backup([], [], [], now=NOW).content.encode('utf-8')

        backup = service.load_backup('exports/pennywise-backup-2024-01-20.json')

        assert backup.total_expenses == 0
        mock_s3.download_file.assert_called_once_with('exports/pennywise-backup-2024-01-20.json')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
