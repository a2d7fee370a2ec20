"""Bunny-style HTTP storage implementation of ObjectStorage (PUT with AccessKey header)."""

from __future__ import annotations

import httpx

from ..errors import UploadError

# Keep error bodies short in logs
ERROR_BODY_MAX_CHARS = 500


class BunnyObjectStorage:
    """ObjectStorage implementation for an HTTP storage zone (PUT {storage_base}/{key})."""

    def __init__(self, client: httpx.AsyncClient, storage_base: str, access_key: str) -> None:
        self._client = client
        self._storage_base = storage_base.rstrip("/")
        self._access_key = access_key

    def object_url(self, key: str) -> str:
        return f"{self._storage_base}/{key.lstrip('/')}"

    async def put(self, key: str, body: bytes, *, content_type: str) -> None:
        """Upload bytes to key; non-2xx or transport failure raises UploadError."""
        try:
            resp = await self._client.put(
                self.object_url(key),
                content=body,
                headers={"AccessKey": self._access_key, "Content-Type": content_type},
            )
        except httpx.HTTPError as e:
            raise UploadError(key, None, str(e)) from e
        if not resp.is_success:
            raise UploadError(key, resp.status_code, resp.text[:ERROR_BODY_MAX_CHARS])
