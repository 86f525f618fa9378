"""Lambda handler for dashboard, summary and export operations."""

import asyncio
import os
import logging
from datetime import date
from typing import Dict, Any

from shared.response import success_response, error_response, validation_error_response, file_response
from shared.exceptions import ExpenseTrackerException, ValidationError
from dashboard.service import DashboardService, build_dashboard
from reports.aggregator import ExpenseFilter, aggregate_expenses
from reports.exporter import ExportService
from reports.summary import summarize

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))

# Initialize services
dashboard_service = DashboardService()
export_service = ExportService()


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for report operations.

    Handles:
    - GET /dashboard - Dashboard view for the query filters
    - GET /summary - Weekly or monthly summary (``period`` parameter)
    - GET /exports/csv - CSV export of every expense
    - GET /exports/backup - JSON backup of all records

    Exports are returned as file downloads, or uploaded to the exports
    bucket when ``publish=true`` is passed.

    Args:
        event: Lambda event
        context: Lambda context

    Returns:
        API Gateway response
    """
    try:
        logger.info(f"Request: {event.get('httpMethod')} {event.get('path')}")

        http_method = event.get('httpMethod')
        path = event.get('path')

        if http_method != 'GET':
            return error_response("Route not found", status_code=404)

        # Route request
        if path == '/dashboard':
            return handle_dashboard(event)
        elif path == '/summary':
            return handle_summary(event)
        elif path == '/exports/csv':
            return handle_export_csv(event)
        elif path == '/exports/backup':
            return handle_export_backup(event)
        else:
            return error_response("Route not found", status_code=404)

    except ExpenseTrackerException as e:
        logger.error(f"Application error: {str(e)}")
        return error_response(e.message, status_code=e.status_code)
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        return error_response("Internal server error", status_code=500)


def should_publish(event: Dict[str, Any]) -> bool:
    query_params = event.get('queryStringParameters') or {}
    return str(query_params.get('publish', 'false')).lower() == 'true'


def handle_dashboard(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle dashboard request."""
    try:
        criteria = ExpenseFilter.from_query(event.get('queryStringParameters'))

        workspace = asyncio.run(dashboard_service.load())
        view = build_dashboard(workspace, criteria, date.today())

        return success_response(data=view)

    except ValidationError as e:
        return validation_error_response(str(e))


def handle_summary(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle weekly/monthly summary request."""
    try:
        query_params = event.get('queryStringParameters') or {}
        period = (query_params.get('period') or 'monthly').lower()

        expenses = asyncio.run(dashboard_service.expense_service.list_expenses())
        summary = summarize(expenses, period, date.today())

        return success_response(data=summary)

    except ValidationError as e:
        return validation_error_response(str(e))


def handle_export_csv(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle CSV export of every expense."""
    expenses = asyncio.run(dashboard_service.expense_service.list_expenses())

    export_file = export_service.export_csv(expenses)

    if should_publish(event):
        return success_response(
            data=export_service.publish(export_file),
            message="Data exported successfully"
        )

    return file_response(export_file.content, export_file.filename, export_file.content_type)


def handle_export_backup(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Handle full backup export.

    The backup holds every expense, while ``totalAmount`` is the total of the
    expenses matching the query filters.
    """
    try:
        criteria = ExpenseFilter.from_query(event.get('queryStringParameters'))

        workspace = asyncio.run(dashboard_service.load())
        result = aggregate_expenses(workspace.expenses, criteria, date.today())

        export_file = export_service.export_backup(
            workspace.expenses,
            workspace.categories,
            workspace.budgets,
            total_amount=result.total_spent
        )

        if should_publish(event):
            return success_response(
                data=export_service.publish(export_file),
                message="Backup created successfully"
            )

        return file_response(export_file.content, export_file.filename, export_file.content_type)

    except ValidationError as e:
        return validation_error_response(str(e))
