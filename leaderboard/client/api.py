import asyncio
from typing import Any, Callable, Dict, List, Optional

import httpx

from ..config import client as client_config
from ..logger import get_logger

logger = get_logger(__name__)


class ApiError(Exception):
    """A request that failed in transport or came back with an unexpected status"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class LeaderboardClient:
    """Async wrapper around the leaderboard REST API"""

    def __init__(self, base_url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None,
                 max_retries: Optional[int] = None, retry_delay: Optional[float] = None,
                 timeout: Optional[float] = None):
        self.base_url = base_url or client_config.API_BASE_URL
        self.max_retries = client_config.max_retries if max_retries is None else max_retries
        self.retry_delay = client_config.retry_delay if retry_delay is None else retry_delay
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            timeout=timeout or client_config.request_timeout,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def close(self):
        await self._http.aclose()

    async def list_scores(self, limit: Optional[int] = None,
                          on_error: Optional[Callable[[ApiError, int], None]] = None) -> List[Dict[str, Any]]:
        """Fetch the top scores, retrying failed attempts.

        After the first failure the request is retried up to ``max_retries``
        more times, sleeping ``retry_delay * attempt`` seconds before each
        retry. ``on_error`` sees every failure with its attempt number. The
        last error is raised once the retries are exhausted.
        """
        limit = limit or client_config.LIST_LIMIT
        retry_count = 0
        while True:
            try:
                return await self._request("GET", "/api/scores", "Failed to load", params={"limit": limit})
            except ApiError as e:
                if on_error is not None:
                    on_error(e, retry_count)
                if retry_count >= self.max_retries:
                    logger.error(f"Giving up loading scores after {retry_count + 1} attempts: {e}")
                    raise
                retry_count += 1
                logger.warning(f"{e} (retry {retry_count}/{self.max_retries})")
                await asyncio.sleep(self.retry_delay * retry_count)

    async def create_score(self, name: str, score: int) -> Dict[str, Any]:
        return await self._request("POST", "/api/scores", "Failed to submit",
                                   json={"name": name, "score": score})

    async def update_score(self, score_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PATCH", f"/api/scores/{score_id}", "Failed to update", json=changes)

    async def delete_score(self, score_id: str) -> None:
        await self._request("DELETE", f"/api/scores/{score_id}", "Failed to delete", expected=(204,))

    async def health(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/health", "Health check failed")

    async def _request(self, method: str, path: str, failure: str, expected=None, **kwargs):
        try:
            res = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise ApiError(f"{failure}: {e}") from e
        ok = res.status_code in expected if expected else res.is_success
        if not ok:
            raise ApiError(f"{failure}: {res.status_code}", status_code=res.status_code)
        if res.status_code == 204 or not res.content:
            return None
        return res.json()
