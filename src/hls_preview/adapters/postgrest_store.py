"""PostgREST (hosted Postgres REST API) implementation of VideoStore."""

from __future__ import annotations

import httpx

from ..errors import RecordError

ERROR_BODY_MAX_CHARS = 500


def _updated_rows(resp: httpx.Response) -> list:
    """Rows echoed back under Prefer: return=representation (empty when unparsable)."""
    try:
        rows = resp.json()
    except ValueError:
        return []
    return rows if isinstance(rows, list) else []


class PostgrestVideoStore:
    """VideoStore: PATCH {base_url}/rest/v1/{table}?id=eq.{video_id} setting preview_url."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        api_key: str,
        *,
        table: str = "videos",
        preview_column: str = "preview_url",
    ) -> None:
        self._client = client
        self._endpoint = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self._api_key = api_key
        self._preview_column = preview_column

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    async def set_preview(self, video_id: str, preview_url: str) -> None:
        """
        Single-row update keyed by id.

        PostgREST answers 2xx even when the id filter matches nothing (or the row
        is hidden by row-level security), so the returned rows are checked too.
        Non-2xx or zero updated rows raise RecordError.
        """
        try:
            resp = await self._client.patch(
                self._endpoint,
                params={"id": f"eq.{video_id}", "select": "id"},
                json={self._preview_column: preview_url},
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            raise RecordError(video_id, None, str(e)) from e
        if not resp.is_success:
            raise RecordError(video_id, resp.status_code, resp.text[:ERROR_BODY_MAX_CHARS])
        if not _updated_rows(resp):
            raise RecordError(video_id, resp.status_code, "no row updated")
