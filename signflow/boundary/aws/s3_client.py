"""
S3 client for document bucket operations.

Stores and deletes raw document bytes and issues presigned download URLs.
boto3 is synchronous, so every call runs in the threadpool; botocore
timeouts bound each call and tenacity retries transient failures.

Dependencies: boto3, botocore, tenacity, fastapi.concurrency
System role: Storage gateway for uploaded documents
"""

import logging
from datetime import datetime, timedelta, timezone

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, ConnectionError, ReadTimeoutError
from fastapi.concurrency import run_in_threadpool
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from signflow.core.exceptions import StorageError

logger = logging.getLogger(__name__)

_RETRYABLE_ERROR_CODES = {
    "RequestTimeout",
    "SlowDown",
    "ServiceUnavailable",
    "InternalError",
    "Throttling",
    "ThrottlingException",
}


def _is_transient(error: BaseException) -> bool:
    """True for network failures and throttling responses."""
    if isinstance(error, (ConnectionError, ReadTimeoutError)):
        return True
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code") in _RETRYABLE_ERROR_CODES
    return False


_storage_retry = retry(
    retry=retry_if_exception(_is_transient),
    stop=stop_after_attempt(3),
    wait=wait_exponential_jitter(initial=0.5, max=5, jitter=1),
    before_sleep=lambda retry_state: logger.warning(
        f"{__name__} - Retry {retry_state.attempt_number}/3 after transient S3 error"
    ),
    reraise=True,
)


class S3DocumentClient:
    """S3 client for document bucket operations."""

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        connect_timeout: int = 5,
        read_timeout: int = 30,
        s3_client=None,
    ) -> None:
        """
        Initialize S3 client for document bucket.

        Args:
            bucket: S3 bucket name for document storage
            region: AWS region for S3 bucket
            connect_timeout: Seconds to wait for a connection
            read_timeout: Seconds to wait for a response
            s3_client: Pre-built boto3 client (tests inject a stub)
        """
        self._bucket = bucket
        self._region = region
        self._s3_client = s3_client or boto3.client(
            "s3",
            region_name=region,
            config=Config(
                connect_timeout=connect_timeout,
                read_timeout=read_timeout,
                retries={"max_attempts": 1, "mode": "standard"},
            ),
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    def object_url(self, s3_key: str) -> str:
        """Public-style URL of an object, stored on the document row."""
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{s3_key}"

    @_storage_retry
    def _put_object(self, s3_key: str, content: bytes, content_type: str) -> None:
        self._s3_client.put_object(
            Bucket=self._bucket,
            Key=s3_key,
            Body=content,
            ContentType=content_type,
        )

    @_storage_retry
    def _delete_object(self, s3_key: str) -> None:
        self._s3_client.delete_object(Bucket=self._bucket, Key=s3_key)

    async def put(self, content: bytes, s3_key: str, content_type: str) -> str:
        """
        Upload bytes under a key.

        Args:
            content: Raw file bytes
            s3_key: S3 object key (path in bucket)
            content_type: MIME type of the file

        Returns:
            str: Object URL

        Raises:
            StorageError: If the upload failed after retries
        """
        try:
            await run_in_threadpool(self._put_object, s3_key, content, content_type)
        except (ClientError, BotoCoreError) as e:
            logger.error(
                f"{__name__}:put - {type(e).__name__}: {e}",
                extra={"s3_key": s3_key, "size": len(content)},
            )
            raise StorageError("Failed to store document", operation="put", details={"key": s3_key}) from e

        logger.info(f"{__name__}:put - Stored object", extra={"s3_key": s3_key, "size": len(content)})
        return self.object_url(s3_key)

    async def delete(self, s3_key: str) -> None:
        """
        Delete an object. Missing keys are not an error in S3.

        Raises:
            StorageError: If the delete failed after retries
        """
        try:
            await run_in_threadpool(self._delete_object, s3_key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"{__name__}:delete - {type(e).__name__}: {e}", extra={"s3_key": s3_key})
            raise StorageError("Failed to delete document", operation="delete", details={"key": s3_key}) from e

    def generate_presigned_download_url(
        self,
        s3_key: str,
        expires_in: int = 3600,
    ) -> tuple[str, datetime]:
        """
        Generate presigned URL for downloading/viewing an S3 object.

        Signing is a local computation; no network call is made.

        Args:
            s3_key: S3 object key (path in bucket)
            expires_in: URL expiry in seconds (default 1 hour)

        Returns:
            tuple[str, datetime]: (presigned_url, expires_at)

        Raises:
            StorageError: If presigned URL generation fails
        """
        try:
            presigned_url = self._s3_client.generate_presigned_url(
                ClientMethod="get_object",
                Params={
                    "Bucket": self._bucket,
                    "Key": s3_key,
                },
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(
                "Failed to sign download URL", operation="sign_url", details={"key": s3_key}
            ) from e
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
        return presigned_url, expires_at
