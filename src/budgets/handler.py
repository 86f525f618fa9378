"""Lambda handler for budget operations."""

import asyncio
import json
import os
import logging
from datetime import date
from typing import Dict, Any

from shared.response import success_response, error_response, validation_error_response, not_found_response
from shared.exceptions import ExpenseTrackerException, ValidationError, NotFoundError
from budgets.evaluator import budget_overview
from budgets.service import BudgetService
from dashboard.service import DashboardService
from reports.aggregator import ExpenseFilter, aggregate_expenses

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))

# Initialize services
budget_service = BudgetService()
dashboard_service = DashboardService(budget_service=budget_service)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for budget operations.

    Handles:
    - POST /budgets - Create budget
    - GET /budgets - List budgets with progress against current spending
    - GET /budgets/{id} - Get budget
    - PUT /budgets/{id} - Update budget
    - DELETE /budgets/{id} - Delete budget

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
        if path == '/budgets' and http_method == 'POST':
            return handle_create(event)
        elif path == '/budgets' and http_method == 'GET':
            return handle_list(event)
        elif path.startswith('/budgets/') and http_method == 'GET':
            return handle_get(event)
        elif path.startswith('/budgets/') and http_method == 'PUT':
            return handle_update(event)
        elif path.startswith('/budgets/') and http_method == 'DELETE':
            return handle_delete(event)
        else:
            return error_response("Route not found", status_code=404)

    except ExpenseTrackerException as e:
        logger.error(f"Application error: {str(e)}")
        return error_response(e.message, status_code=e.status_code)
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        return error_response("Internal server error", status_code=500)


def handle_create(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle create budget."""
    try:
        body = json.loads(event.get('body') or '{}')

        budget = asyncio.run(budget_service.create_budget(body))

        logger.info(f"Budget created successfully: {budget.id}")

        return success_response(
            data=budget,
            message="Budget set successfully",
            status_code=201
        )

    except json.JSONDecodeError:
        return validation_error_response("Invalid JSON body")
    except ValidationError as e:
        return validation_error_response(str(e))


def handle_list(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Handle list budgets.

    Spending is derived from the expenses matching the query filters
    (``search``, ``category``, ``period``), the same way the dashboard does.
    """
    try:
        criteria = ExpenseFilter.from_query(event.get('queryStringParameters'))

        workspace = asyncio.run(dashboard_service.load())
        result = aggregate_expenses(workspace.expenses, criteria, date.today())
        cards = budget_overview(workspace.budgets, workspace.categories, result.category_totals)

        return success_response(data={'budgets': cards, 'count': len(cards)})

    except ValidationError as e:
        return validation_error_response(str(e))


def handle_get(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle get budget."""
    try:
        path_params = event.get('pathParameters') or {}
        budget_id = path_params.get('id')

        if not budget_id:
            return validation_error_response("Budget ID is required")

        budget = asyncio.run(budget_service.get_budget(budget_id))

        return success_response(data=budget)

    except NotFoundError as e:
        return not_found_response(str(e))


def handle_update(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle update budget."""
    try:
        path_params = event.get('pathParameters') or {}
        budget_id = path_params.get('id')

        if not budget_id:
            return validation_error_response("Budget ID is required")

        body = json.loads(event.get('body') or '{}')

        budget = asyncio.run(budget_service.update_budget(budget_id, body))

        logger.info(f"Budget updated successfully: {budget_id}")

        return success_response(
            data=budget,
            message="Budget updated successfully"
        )

    except json.JSONDecodeError:
        return validation_error_response("Invalid JSON body")
    except ValidationError as e:
        return validation_error_response(str(e))
    except NotFoundError as e:
        return not_found_response(str(e))


def handle_delete(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle delete budget."""
    try:
        path_params = event.get('pathParameters') or {}
        budget_id = path_params.get('id')

        if not budget_id:
            return validation_error_response("Budget ID is required")

        asyncio.run(budget_service.delete_budget(budget_id))

        logger.info(f"Budget deleted successfully: {budget_id}")

        return success_response(message="Budget deleted successfully")

    except NotFoundError as e:
        return not_found_response(str(e))
