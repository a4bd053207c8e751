import asyncio
import math
from typing import Any, Callable, Dict, List, Optional

from ..config import client as client_config
from ..logger import get_logger
from .api import ApiError, LeaderboardClient
from .view import EditRejected, EditState, build_update_payload, can_submit

logger = get_logger(__name__)


def is_new_top(submitted: int, previous_top: Optional[int], new_top: Optional[int]) -> bool:
    """A submission celebrates when it holds the top spot and beats the old top"""
    before = -math.inf if previous_top is None else previous_top
    after = -math.inf if new_top is None else new_top
    return submitted >= after and submitted > before


def _confirm_all(_message: str) -> bool:
    return True


class LeaderboardSession:
    """Client-side state for one user session.

    Holds the last loaded scores, the active backing store reported by the
    health endpoint, the current error message and the inline edit state.
    Failed requests set ``error`` and leave everything else as it was.
    """

    def __init__(self, api: LeaderboardClient,
                 on_celebrate: Optional[Callable[[Dict[str, Any]], None]] = None,
                 on_notice: Optional[Callable[[str], None]] = None,
                 confirm: Callable[[str], bool] = _confirm_all,
                 limit: Optional[int] = None,
                 health_interval: Optional[float] = None):
        self.api = api
        self.on_celebrate = on_celebrate
        self.on_notice = on_notice
        self.confirm = confirm
        self.limit = limit or client_config.LIST_LIMIT
        self.health_interval = health_interval or client_config.health_interval
        self.scores: List[Dict[str, Any]] = []
        self.top_snapshot: Optional[Dict[str, Any]] = None
        self.db_mode = ""
        self.error = ""
        self.loading = False
        self.pending = False
        self.edit = EditState()
        self._health_task = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def start(self):
        """Load scores and health right away, then keep polling health"""
        await self.load_scores()
        await self.load_health()
        self._health_task = asyncio.create_task(self._poll_health())

    async def close(self):
        if self._health_task:
            self._health_task.cancel()
            try:
                await self._health_task
            except asyncio.CancelledError:
                pass
            self._health_task = None

    async def _poll_health(self):
        while True:
            await asyncio.sleep(self.health_interval)
            await self.load_health()

    def _notice(self, message: str):
        if self.on_notice is not None:
            self.on_notice(message)

    def _record_failure(self, error: ApiError, attempt: int):
        self.error = error.message

    async def load_scores(self) -> Optional[List[Dict[str, Any]]]:
        """Reload the list; on final failure keep the old list and return None"""
        self.loading = True
        self.error = ""
        try:
            data = await self.api.list_scores(self.limit, on_error=self._record_failure)
        except ApiError as e:
            self.error = e.message
            return None
        finally:
            self.loading = False
        self.error = ""
        self.scores = data
        if data:
            self.top_snapshot = data[0]
        return data

    async def load_health(self):
        try:
            data = await self.api.health()
        except ApiError as e:
            logger.debug(f"Health poll failed, keeping db mode {self.db_mode!r}: {e}")
            return
        self.db_mode = data.get("dbMode", "")

    @property
    def top_score(self) -> Optional[int]:
        return self.scores[0]["score"] if self.scores else None

    async def submit(self, name: str, score: Any) -> bool:
        """Post a score and reload; returns True when it was stored"""
        if not can_submit(name, score):
            self.error = "Enter a name and a whole-number score between 0 and 1000000"
            return False
        value = int(str(score).strip())
        self.error = ""
        self.pending = True
        try:
            created = await self.api.create_score(name.strip(), value)
            before_top = self.top_score
            new_scores = await self.load_scores()
            if new_scores is not None:
                after_top = new_scores[0]["score"] if new_scores else None
                if is_new_top(value, before_top, after_top) and self.on_celebrate is not None:
                    self.on_celebrate(created)
            self._notice("Score submitted")
            return True
        except ApiError as e:
            self.error = e.message
            return False
        finally:
            self.pending = False

    def find(self, score_id: str) -> Optional[Dict[str, Any]]:
        return next((row for row in self.scores if row["id"] == score_id), None)

    def start_edit(self, score_id: str) -> bool:
        row = self.find(score_id)
        if row is None:
            return False
        self.edit.start(row)
        return True

    async def save_edit(self) -> bool:
        """Send the pending inline edit; the edit stays open if anything fails"""
        score_id = self.edit.editing_id
        current = self.find(score_id) or {}
        try:
            payload = build_update_payload(current, self.edit.name, self.edit.score)
        except EditRejected as e:
            self._notice(str(e))
            return False
        if not self.confirm(f"Save changes for {current.get('name', 'this score')}?"):
            return False
        self.pending = True
        try:
            await self.api.update_score(score_id, payload)
            await self.load_scores()
            self._notice("Updated")
            self.edit.cancel()
            return True
        except ApiError as e:
            self.error = e.message
            return False
        finally:
            self.pending = False

    async def delete(self, score_id: str) -> bool:
        row = self.find(score_id)
        label = f"{row['name']} ({row['score']})" if row else "this score"
        if not self.confirm(f"Delete {label}?"):
            return False
        self.pending = True
        try:
            await self.api.delete_score(score_id)
            await self.load_scores()
            self._notice("Deleted")
            return True
        except ApiError as e:
            self.error = e.message
            return False
        finally:
            self.pending = False
