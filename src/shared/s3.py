"""S3 utilities and helper functions."""

import os
import boto3
from typing import Optional
from botocore.exceptions import ClientError
import logging

from .exceptions import StorageError

logger = logging.getLogger(__name__)


class S3Client:
    """S3 client wrapper for export files."""

    def __init__(self, bucket_name: str):
        """
        Initialize S3 client.

        Args:
            bucket_name: Name of the S3 bucket
        """
        self.bucket_name = bucket_name

        # Support for LocalStack
        endpoint_url = os.environ.get('LOCALSTACK_ENDPOINT')
        if endpoint_url and os.environ.get('USE_LOCALSTACK', 'false').lower() == 'true':
            self.s3 = boto3.client('s3', endpoint_url=endpoint_url)
        else:
            self.s3 = boto3.client('s3')

    def upload_file(
        self,
        file_content: bytes,
        key: str,
        content_type: Optional[str] = None
    ) -> str:
        """
        Upload a file to S3.

        Args:
            file_content: File content as bytes
            key: S3 object key
            content_type: Optional content type

        Returns:
            S3 object key

        Raises:
            StorageError: If the upload fails
        """
        try:
            kwargs = {
                'Bucket': self.bucket_name,
                'Key': key,
                'Body': file_content,
                'ServerSideEncryption': 'AES256'
            }

            if content_type:
                kwargs['ContentType'] = content_type

            self.s3.put_object(**kwargs)
            logger.info(f"Successfully uploaded file to s3://{self.bucket_name}/{key}")
            return key
        except ClientError as e:
            logger.error(f"Error uploading file to S3: {e}")
            raise StorageError(f"Failed to upload file: {str(e)}")

    def download_file(self, key: str) -> bytes:
        """
        Download a file from S3.

        Args:
            key: S3 object key

        Returns:
            File content as bytes

        Raises:
            StorageError: If the download fails
        """
        try:
            response = self.s3.get_object(Bucket=self.bucket_name, Key=key)
            return response['Body'].read()
        except ClientError as e:
            logger.error(f"Error downloading file from S3: {e}")
            raise StorageError(f"Failed to download file: {str(e)}")

    def get_presigned_url(self, key: str, expiration: int = 3600) -> str:
        """
        Generate a presigned download URL for an S3 object.

        Args:
            key: S3 object key
            expiration: URL expiration time in seconds (default: 1 hour)

        Returns:
            Presigned URL

        Raises:
            StorageError: If URL generation fails
        """
        try:
            return self.s3.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.bucket_name, 'Key': key},
                ExpiresIn=expiration
            )
        except ClientError as e:
            logger.error(f"Error generating presigned URL: {e}")
            raise StorageError(f"Failed to generate presigned URL: {str(e)}")
