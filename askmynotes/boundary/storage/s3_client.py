"""
S3 client for the raw document bucket.

Stores uploaded files, reads them back for the processing pipeline and
builds object keys of the form `<session>/<subject>/<uuid>_<filename>`.
All methods are blocking; async callers wrap them with run_in_threadpool.

Dependencies: boto3
System role: Object storage boundary for uploaded documents
"""

import uuid
from pathlib import PurePosixPath

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from askmynotes.core.exceptions import StorageError


def build_storage_path(session_id: str, subject_id: uuid.UUID | str, filename: str) -> str:
    """
    Object key for a new upload.

    The random prefix keeps repeated uploads of the same filename apart.

    Args:
        session_id: Owning session token
        subject_id: Owning subject
        filename: Original filename (directory components are dropped)

    Returns:
        str: Object key
    """
    safe_name = PurePosixPath(filename.replace("\\", "/")).name or "upload"
    return f"{session_id}/{subject_id}/{uuid.uuid4()}_{safe_name}"


class S3DocumentClient:
    """Upload, download and delete raw documents."""

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        client=None,
    ) -> None:
        """
        Initialize S3 client for document bucket.

        Args:
            bucket: S3 bucket name for document storage
            region: AWS region for S3 bucket
            endpoint_url: Optional custom endpoint (MinIO, LocalStack)
            client: Preconfigured boto3 S3 client (tests)
        """
        self._bucket = bucket
        self._region = region
        self._s3_client = client or boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    def upload_bytes(
        self,
        storage_path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> None:
        """
        Store an object.

        Raises:
            StorageError: When the put fails
        """
        try:
            self._s3_client.put_object(
                Bucket=self._bucket,
                Key=storage_path,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to upload to S3: {e}", storage_path) from e

    def download_bytes(self, storage_path: str) -> bytes:
        """
        Read an object fully into memory.

        Raises:
            StorageError: When the key is missing or the read fails
        """
        if not storage_path:
            raise StorageError("Storage path is required")

        try:
            response = self._s3_client.get_object(Bucket=self._bucket, Key=storage_path)
            return response["Body"].read()
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in ("404", "NoSuchKey"):
                raise StorageError(f"File not found in S3: {storage_path}", storage_path) from e
            raise StorageError(f"Failed to download from S3: {e}", storage_path) from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to download from S3: {e}", storage_path) from e

    def delete(self, storage_path: str) -> None:
        """Remove an object; missing keys are not an error in S3."""
        try:
            self._s3_client.delete_object(Bucket=self._bucket, Key=storage_path)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to delete from S3: {e}", storage_path) from e
