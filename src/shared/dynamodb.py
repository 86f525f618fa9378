"""DynamoDB utilities and helper functions."""

import os
import boto3
from typing import Any, Dict, List, Optional
from datetime import date, datetime
from decimal import Decimal
from botocore.exceptions import ClientError
import logging

from .exceptions import DatabaseError

logger = logging.getLogger(__name__)


class DynamoDBClient:
    """DynamoDB client wrapper with common operations."""

    def __init__(self, table_name: str):
        """
        Initialize DynamoDB client.

        Args:
            table_name: Name of the DynamoDB table
        """
        self.table_name = table_name

        # Support for LocalStack
        endpoint_url = os.environ.get('LOCALSTACK_ENDPOINT')
        if endpoint_url and os.environ.get('USE_LOCALSTACK', 'false').lower() == 'true':
            self.dynamodb = boto3.resource('dynamodb', endpoint_url=endpoint_url)
        else:
            self.dynamodb = boto3.resource('dynamodb')

        self.table = self.dynamodb.Table(table_name)

    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """
        Put an item in the table.

        Args:
            item: Item to put

        Returns:
            The item that was put

        Raises:
            DatabaseError: If the operation fails
        """
        try:
            item = self._python_to_dynamodb(item)
            self.table.put_item(Item=item)
            return item
        except ClientError as e:
            logger.error(f"Error putting item: {e}")
            raise DatabaseError(f"Failed to put item: {str(e)}")

    def get_item(self, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Get an item from the table.

        Args:
            key: Primary key of the item

        Returns:
            The item if found, None otherwise

        Raises:
            DatabaseError: If the operation fails
        """
        try:
            response = self.table.get_item(Key=key)
            return response.get('Item')
        except ClientError as e:
            logger.error(f"Error getting item: {e}")
            raise DatabaseError(f"Failed to get item: {str(e)}")

    def update_item(
        self,
        key: Dict[str, Any],
        updates: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Set the given attributes on an item.

        Attribute names always go through expression names, since fields
        such as ``date`` are DynamoDB reserved words.

        Args:
            key: Primary key of the item
            updates: Attribute values to set

        Returns:
            Updated item

        Raises:
            DatabaseError: If the operation fails
        """
        update_parts = []
        expr_values = {}
        expr_names = {}

        for name, value in updates.items():
            update_parts.append(f"#{name} = :{name}")
            expr_names[f'#{name}'] = name
            expr_values[f':{name}'] = value

        try:
            response = self.table.update_item(
                Key=key,
                UpdateExpression="SET " + ", ".join(update_parts),
                ExpressionAttributeNames=expr_names,
                ExpressionAttributeValues=self._python_to_dynamodb(expr_values),
                ReturnValues='ALL_NEW'
            )
            return response['Attributes']
        except ClientError as e:
            logger.error(f"Error updating item: {e}")
            raise DatabaseError(f"Failed to update item: {str(e)}")

    def delete_item(self, key: Dict[str, Any]) -> None:
        """
        Delete an item from the table.

        Args:
            key: Primary key of the item

        Raises:
            DatabaseError: If the operation fails
        """
        try:
            self.table.delete_item(Key=key)
        except ClientError as e:
            logger.error(f"Error deleting item: {e}")
            raise DatabaseError(f"Failed to delete item: {str(e)}")

    def scan(
        self,
        limit: Optional[int] = None,
        exclusive_start_key: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Scan items from the table.

        Args:
            limit: Optional limit
            exclusive_start_key: Optional pagination key

        Returns:
            Dictionary with items and optional LastEvaluatedKey

        Raises:
            DatabaseError: If the operation fails
        """
        try:
            kwargs = {}

            if limit:
                kwargs['Limit'] = limit
            if exclusive_start_key:
                kwargs['ExclusiveStartKey'] = exclusive_start_key

            response = self.table.scan(**kwargs)

            return {
                'items': response.get('Items', []),
                'last_evaluated_key': response.get('LastEvaluatedKey')
            }
        except ClientError as e:
            logger.error(f"Error scanning items: {e}")
            raise DatabaseError(f"Failed to scan items: {str(e)}")

    def scan_all(self) -> List[Dict[str, Any]]:
        """Scan every page of the table."""
        items = []
        last_key = None

        while True:
            result = self.scan(exclusive_start_key=last_key)
            items.extend(result['items'])
            last_key = result.get('last_evaluated_key')

            if not last_key:
                break

        return items

    @staticmethod
    def _python_to_dynamodb(obj: Any) -> Any:
        """Convert Python objects to DynamoDB compatible format."""
        if isinstance(obj, dict):
            return {k: DynamoDBClient._python_to_dynamodb(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [DynamoDBClient._python_to_dynamodb(item) for item in obj]
        elif isinstance(obj, float):
            return Decimal(str(obj))
        elif isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return obj

