"""Process-local registry of plan editing sessions.

Sessions idle longer than PLANNER_SESSION_IDLE_MINUTES are dropped, and at
most PLANNER_MAX_SESSIONS are kept (least recently used goes first). Dropped
sessions lose their unsaved edits.
"""

import logging
import time
import uuid
from collections import OrderedDict
from typing import Callable, Optional

from app.core.config import settings
from app.services.plan_editor import PlanEditor

logger = logging.getLogger(__name__)


class PlannerSessions:
    """Keeps one PlanEditor per editing session, scoped to its owner."""

    def __init__(
        self,
        idle_seconds: Optional[float] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.idle_seconds = idle_seconds or settings.PLANNER_SESSION_IDLE_MINUTES * 60
        self.max_sessions = max_sessions or settings.PLANNER_MAX_SESSIONS
        self.clock = clock
        # session_id -> (user_id, editor, last_used), least recently used first
        self._editors: "OrderedDict[str, tuple[Optional[str], PlanEditor, float]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._editors)

    def _expire(self) -> None:
        cutoff = self.clock() - self.idle_seconds
        while self._editors:
            session_id, (_, _, last_used) = next(iter(self._editors.items()))
            if last_used > cutoff:
                break
            del self._editors[session_id]
            logger.info("Expired idle planner session %s", session_id)

    def open(self, user_id: Optional[str] = None, default_meals_per_day: Optional[int] = None):
        """Start a session with no plan loaded. Returns (session_id, editor)."""
        self._expire()
        while len(self._editors) >= self.max_sessions:
            session_id, _ = self._editors.popitem(last=False)
            logger.warning("Evicted planner session %s (limit %d)", session_id, self.max_sessions)

        session_id = uuid.uuid4().hex
        editor = PlanEditor(
            default_meals_per_day=default_meals_per_day,
            history_limit=settings.PLANNER_HISTORY_LIMIT,
        )
        self._editors[session_id] = (user_id, editor, self.clock())
        logger.info("Opened planner session %s", session_id)
        return session_id, editor

    def get(self, session_id: str, user_id: Optional[str] = None) -> Optional[PlanEditor]:
        """The session's editor, or None if unknown, expired or owned by someone else."""
        self._expire()
        entry = self._editors.get(session_id)
        if entry is None or entry[0] != user_id:
            return None
        editor = entry[1]
        self._editors[session_id] = (user_id, editor, self.clock())
        self._editors.move_to_end(session_id)
        return editor

    def close(self, session_id: str, user_id: Optional[str] = None) -> bool:
        if self.get(session_id, user_id) is None:
            return False
        del self._editors[session_id]
        logger.info("Closed planner session %s", session_id)
        return True

    def clear(self) -> None:
        self._editors.clear()


planner_sessions = PlannerSessions()
