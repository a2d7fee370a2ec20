"""Storage and video-store backends for the preview pipeline."""

from .bunny_storage import BunnyObjectStorage
from .dynamodb_store import DynamoDBVideoStore
from .postgrest_store import PostgrestVideoStore
from .s3_storage import S3ObjectStorage

__all__ = [
    "BunnyObjectStorage",
    "DynamoDBVideoStore",
    "PostgrestVideoStore",
    "S3ObjectStorage",
]
