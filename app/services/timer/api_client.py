"""HTTP implementation of the timer mutations port, for controllers running outside the API process"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

import httpx

from app import config
from app.utils.datetime_helper import to_iso

from .errors import NotFoundError, TransientRemoteError, ValidationError
from .models.timer_state import TimerSubject

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class TimerApiClient:
    """
    Calls the /api/tasks/{id}/timer endpoints with a Supabase access token.

    HTTP 404 maps to NotFoundError, 400/422 to ValidationError, and
    everything else that goes wrong (network errors, 5xx, unexpected
    bodies) to TransientRemoteError.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = config.LIFELOG_API_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "TimerApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> TimerSubject:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"Timer request {method} {path} failed: {e}")
            raise TransientRemoteError(f"Request to {path} failed: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(self._detail(response) or "Task not found")
        if response.status_code in (400, 422):
            raise ValidationError(self._detail(response) or "Invalid timer request")
        if response.status_code >= 400:
            logger.error(f"Timer request {method} {path} returned {response.status_code}: {response.text}")
            raise TransientRemoteError(f"{path} returned HTTP {response.status_code}")

        try:
            return TimerSubject.from_task(response.json()["task"])
        except (ValueError, KeyError, TypeError) as e:
            raise TransientRemoteError(f"Unexpected response from {path}: {e}") from e

    @staticmethod
    def _detail(response: httpx.Response) -> Optional[str]:
        try:
            body = response.json()
        except ValueError:
            return None
        detail = body.get("detail") if isinstance(body, dict) else None
        if not detail:
            return None
        return detail if isinstance(detail, str) else str(detail)

    async def start_timer(
        self,
        subject_id: str,
        duration_seconds: int,
        start_time: Optional[datetime] = None,
    ) -> TimerSubject:
        body: Dict[str, Any] = {"duration_seconds": duration_seconds}
        if start_time is not None:
            body["start_time"] = to_iso(start_time)
        return await self._request("POST", f"/api/tasks/{subject_id}/timer/start", json=body)

    async def complete_timer(self, subject_id: str) -> TimerSubject:
        return await self._request("POST", f"/api/tasks/{subject_id}/timer/complete")

    async def reset_timer(self, subject_id: str) -> TimerSubject:
        return await self._request("POST", f"/api/tasks/{subject_id}/timer/reset")

    async def clear_timer(self, subject_id: str) -> TimerSubject:
        return await self._request("DELETE", f"/api/tasks/{subject_id}/timer")
