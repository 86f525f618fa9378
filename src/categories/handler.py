"""Lambda handler for category operations."""

import asyncio
import json
import os
import logging
from typing import Dict, Any

from shared.response import success_response, error_response, validation_error_response, not_found_response
from shared.exceptions import ExpenseTrackerException, ValidationError, NotFoundError
from categories.service import CategoryService

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))

# Initialize service
category_service = CategoryService()


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for category operations.

    Handles:
    - GET /categories - List categories
    - POST /categories - Create category
    - GET /categories/{id} - Get category
    - PUT /categories/{id} - Update category
    - DELETE /categories/{id} - Delete category
    """
    try:
        logger.info(f"Request: {event.get('httpMethod')} {event.get('path')}")

        http_method = event.get('httpMethod')
        path = event.get('path') or ''

        # Route request
        if path == '/categories' and http_method == 'GET':
            categories = asyncio.run(category_service.list_categories())
            return success_response(data={'categories': categories, 'count': len(categories)})
        elif path == '/categories' and http_method == 'POST':
            return handle_create(event)
        elif path.startswith('/categories/') and http_method in ('GET', 'PUT', 'DELETE'):
            return handle_item(event, http_method)
        else:
            return error_response("Route not found", status_code=404)

    except ExpenseTrackerException as e:
        logger.error(f"Application error: {str(e)}")
        return error_response(e.message, status_code=e.status_code)
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        return error_response("Internal server error", status_code=500)


def handle_create(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle create category."""
    try:
        body = json.loads(event.get('body') or '{}')

        category = asyncio.run(category_service.create_category(body))

        return success_response(
            data=category,
            message="Category created successfully",
            status_code=201
        )

    except json.JSONDecodeError:
        return validation_error_response("Invalid JSON body")
    except ValidationError as e:
        return validation_error_response(str(e))


def handle_item(event: Dict[str, Any], http_method: str) -> Dict[str, Any]:
    """Handle get, update and delete of a single category."""
    try:
        path_params = event.get('pathParameters') or {}
        category_id = path_params.get('id')

        if not category_id:
            return validation_error_response("Category ID is required")

        if http_method == 'GET':
            category = asyncio.run(category_service.get_category(category_id))
            return success_response(data=category)

        if http_method == 'PUT':
            body = json.loads(event.get('body') or '{}')
            category = asyncio.run(category_service.update_category(category_id, body))
            return success_response(data=category, message="Category updated successfully")

        asyncio.run(category_service.delete_category(category_id))
        return success_response(message="Category deleted successfully")

    except json.JSONDecodeError:
        return validation_error_response("Invalid JSON body")
    except ValidationError as e:
        return validation_error_response(str(e))
    except NotFoundError as e:
        return not_found_response(str(e))
