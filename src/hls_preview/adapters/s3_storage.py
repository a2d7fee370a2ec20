"""S3 implementation of ObjectStorage."""

from __future__ import annotations

import asyncio

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import UploadError


class S3ObjectStorage:
    """ObjectStorage implementation using S3; blocking boto3 calls run in a worker thread."""

    def __init__(
        self,
        bucket: str,
        *,
        region_name: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        self._bucket = bucket
        self._client = boto3.client(
            "s3",
            region_name=region_name,
            endpoint_url=endpoint_url,
        )

    def put_sync(self, key: str, body: bytes, *, content_type: str) -> None:
        try:
            self._client.put_object(
                Bucket=self._bucket, Key=key, Body=body, ContentType=content_type
            )
        except ClientError as e:
            meta = e.response.get("ResponseMetadata", {})
            error = e.response.get("Error", {})
            raise UploadError(
                key, meta.get("HTTPStatusCode"), error.get("Message") or error.get("Code", "")
            ) from e
        except BotoCoreError as e:
            raise UploadError(key, None, str(e)) from e

    async def put(self, key: str, body: bytes, *, content_type: str) -> None:
        """Upload bytes to the bucket under key."""
        await asyncio.to_thread(self.put_sync, key, body, content_type=content_type)
