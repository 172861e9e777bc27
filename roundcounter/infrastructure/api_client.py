"""RoundCounter API Client — async httpx wrapper over the /api/activities endpoints.

Invariants:
    - Non-2xx responses raise ApiRequestError carrying the server's `error` string
      (fallback "Request failed") and the HTTP status
    - Transport failures (connection refused, timeouts) raise ApiRequestError with
      status_code=None; httpx exceptions never leak past this module
    - No custom timeout or retry logic: httpx defaults apply

Design Decisions:
    - Accepts an existing httpx.AsyncClient so tests can route through ASGITransport
    - Without an explicit base_url or client, Settings.api_base_url is used
"""

import logging

import httpx

from roundcounter.config import get_settings

logger = logging.getLogger(__name__)


class ApiRequestError(Exception):
    """A command against the RoundCounter API failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RoundCounterApiClient:
    """Thin async client for the activity/lap API."""

    def __init__(
        self,
        base_url: str | None = None,
        http: httpx.AsyncClient | None = None,
    ):
        self._owns_http = http is None
        if http is None:
            http = httpx.AsyncClient(
                base_url=base_url or get_settings().api_base_url,
            )
        self._http = http

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "RoundCounterApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(
        self, method: str, path: str, body: dict | None = None,
    ):
        try:
            response = await self._http.request(method, path, json=body)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} transport error: {e}")
            raise ApiRequestError("Request failed") from e
        try:
            data = response.json()
        except ValueError:
            data = None
        if response.is_error:
            message = "Request failed"
            if isinstance(data, dict) and isinstance(data.get("error"), str):
                message = data["error"]
            raise ApiRequestError(message, status_code=response.status_code)
        return data

    async def list_activities(self) -> list[dict]:
        return await self._request("GET", "/api/activities")

    async def create_activity(self, name: str) -> dict:
        return await self._request("POST", "/api/activities", {"name": name})

    async def delete_activity(self, activity_id: int) -> dict:
        return await self._request("DELETE", f"/api/activities/{activity_id}")

    async def record_lap(self, activity_id: int) -> dict:
        return await self._request("POST", f"/api/activities/{activity_id}/laps")

    async def list_laps(self, activity_id: int) -> dict:
        """`{"activity": {...}, "laps": [...]}` with laps newest first."""
        return await self._request("GET", f"/api/activities/{activity_id}/laps")

    async def delete_lap(self, activity_id: int, lap_id: int) -> dict:
        return await self._request(
            "DELETE", f"/api/activities/{activity_id}/laps/{lap_id}",
        )
