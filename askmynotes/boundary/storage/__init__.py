"""Object storage for raw uploaded documents."""

from askmynotes.boundary.storage.s3_client import S3DocumentClient, build_storage_path

__all__ = ["S3DocumentClient", "build_storage_path"]
