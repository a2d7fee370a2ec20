"""DynamoDB implementation of VideoStore."""

from __future__ import annotations

import asyncio

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import RecordError


class DynamoDBVideoStore:
    """VideoStore: DynamoDB Videos table keyed by video_id."""

    def __init__(
        self,
        table_name: str,
        *,
        region_name: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        self._table_name = table_name
        self._resource = boto3.resource(
            "dynamodb",
            region_name=region_name,
            endpoint_url=endpoint_url,
        )
        self._table = self._resource.Table(table_name)

    def set_preview_sync(self, video_id: str, preview_url: str) -> None:
        """Overwrite preview_url; the item must already exist."""
        try:
            self._table.update_item(
                Key={"video_id": video_id},
                UpdateExpression="SET #pu = :pu",
                ConditionExpression="attribute_exists(video_id)",
                ExpressionAttributeNames={"#pu": "preview_url"},
                ExpressionAttributeValues={":pu": preview_url},
            )
        except ClientError as e:
            meta = e.response.get("ResponseMetadata", {})
            error = e.response.get("Error", {})
            raise RecordError(
                video_id, meta.get("HTTPStatusCode"), error.get("Code", "")
            ) from e
        except BotoCoreError as e:
            raise RecordError(video_id, None, str(e)) from e

    async def set_preview(self, video_id: str, preview_url: str) -> None:
        await asyncio.to_thread(self.set_preview_sync, video_id, preview_url)
