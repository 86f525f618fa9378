"""Lambda handler for expense operations."""

import asyncio
import json
import os
import logging
from datetime import date
from typing import Dict, Any

from shared.response import success_response, error_response, validation_error_response, not_found_response
from shared.exceptions import ExpenseTrackerException, ValidationError, NotFoundError
from expenses.service import ExpenseService
from reports.aggregator import ExpenseFilter, aggregate_expenses

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))

# Initialize service
expense_service = ExpenseService()


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for expense operations.

    Handles:
    - GET /expenses - List expenses (search, category and period filters)
    - POST /expenses - Create expense
    - GET /expenses/{id} - Get expense details
    - PUT /expenses/{id} - Update expense
    - DELETE /expenses/{id} - Delete expense

    Args:
        event: Lambda event
        context: Lambda context

    Returns:
        API Gateway response
    """
    try:
        logger.info(f"Request: {event.get('httpMethod')} {event.get('path')}")

        http_method = event.get('httpMethod')
        path = event.get('path') or ''

        # Route request
        if path == '/expenses' and http_method == 'GET':
            return handle_list(event)
        elif path == '/expenses' and http_method == 'POST':
            return handle_create(event)
        elif path.startswith('/expenses/') and http_method == 'GET':
            return handle_get(event)
        elif path.startswith('/expenses/') and http_method == 'PUT':
            return handle_update(event)
        elif path.startswith('/expenses/') and http_method == 'DELETE':
            return handle_delete(event)
        else:
            return error_response("Route not found", status_code=404)

    except ExpenseTrackerException as e:
        logger.error(f"Application error: {str(e)}")
        return error_response(e.message, status_code=e.status_code)
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        return error_response("Internal server error", status_code=500)


def handle_list(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle list expenses."""
    try:
        criteria = ExpenseFilter.from_query(event.get('queryStringParameters'))

        expenses = asyncio.run(expense_service.list_expenses())
        result = aggregate_expenses(expenses, criteria, date.today())

        return success_response(data={
            'expenses': result.filtered_expenses,
            'count': len(result.filtered_expenses),
            'totalSpent': result.total_spent,
            'categoryTotals': result.category_totals
        })

    except ValidationError as e:
        return validation_error_response(str(e))


def handle_create(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle create expense."""
    try:
        body = json.loads(event.get('body') or '{}')

        expense = asyncio.run(expense_service.create_expense(body))

        logger.info(f"Expense created successfully: {expense.id}")

        return success_response(
            data=expense,
            message="Expense added successfully",
            status_code=201
        )

    except json.JSONDecodeError:
        return validation_error_response("Invalid JSON body")
    except ValidationError as e:
        return validation_error_response(str(e))


def handle_get(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle get expense details."""
    try:
        path_params = event.get('pathParameters') or {}
        expense_id = path_params.get('id')

        if not expense_id:
            return validation_error_response("Expense ID is required")

        expense = asyncio.run(expense_service.get_expense(expense_id))

        return success_response(data=expense)

    except NotFoundError as e:
        return not_found_response(str(e))


def handle_update(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle update expense."""
    try:
        path_params = event.get('pathParameters') or {}
        expense_id = path_params.get('id')

        if not expense_id:
            return validation_error_response("Expense ID is required")

        body = json.loads(event.get('body') or '{}')

        expense = asyncio.run(expense_service.update_expense(expense_id, body))

        logger.info(f"Expense updated successfully: {expense_id}")

        return success_response(
            data=expense,
            message="Expense updated successfully"
        )

    except json.JSONDecodeError:
        return validation_error_response("Invalid JSON body")
    except ValidationError as e:
        return validation_error_response(str(e))
    except NotFoundError as e:
        return not_found_response(str(e))


def handle_delete(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle delete expense."""
    try:
        path_params = event.get('pathParameters') or {}
        expense_id = path_params.get('id')

        if not expense_id:
            return validation_error_response("Expense ID is required")

        asyncio.run(expense_service.delete_expense(expense_id))

        logger.info(f"Expense deleted successfully: {expense_id}")

        return success_response(message="Expense deleted successfully")

    except NotFoundError as e:
        return not_found_response(str(e))
