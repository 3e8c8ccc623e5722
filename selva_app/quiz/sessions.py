"""In-process registry of open quiz sessions.

One open session per user: opening the quiz again discards the previous
one. When a session reaches the result screen an APScheduler `date` job
closes it after QUIZ_AUTO_CLOSE_SECONDS unless the user completes or closes
it first. Closing only discards the session; the profile was already saved
by finalize().
"""
from datetime import datetime, timedelta, timezone
import threading
from typing import Dict, Optional

from apscheduler.jobstores.base import JobLookupError

from selva_app.core.logger import setup_logger
from selva_app.quiz.engine import QuizSession

logger = setup_logger(__name__)


def _job_id(session_id: str) -> str:
    return f"quiz-auto-close-{session_id}"


class QuizSessionRegistry:
    def __init__(self, scheduler=None, auto_close_seconds: int = 5, ttl_minutes: int = 30):
        self.scheduler = scheduler
        self.auto_close_seconds = auto_close_seconds
        self.ttl = timedelta(minutes=ttl_minutes)
        self._sessions: Dict[str, QuizSession] = {}
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._sessions)

    def open(self, session: QuizSession) -> QuizSession:
        with self._lock:
            stale = [sid for sid, s in self._sessions.items() if s.user_id == session.user_id]
            for sid in stale:
                self._sessions.pop(sid, None)
            self._sessions[session.session_id] = session
        for sid in stale:
            self.cancel_auto_close(sid)
        return session

    def get(self, session_id: str, user_id: Optional[int] = None) -> Optional[QuizSession]:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None or (user_id is not None and session.user_id != user_id):
            return None
        return session

    def close(self, session_id: str) -> Optional[QuizSession]:
        """Discard a session and its pending auto-close job."""
        self.cancel_auto_close(session_id)
        with self._lock:
            return self._sessions.pop(session_id, None)

    def _auto_close(self, session_id: str):
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is not None:
            logger.info(f"Quiz session {session_id} auto-closed on the result screen")

    def schedule_auto_close(self, session_id: str) -> bool:
        """Arm the result-screen timer; returns False when no scheduler is running."""
        if self.scheduler is None:
            return False
        run_date = datetime.now(timezone.utc) + timedelta(seconds=self.auto_close_seconds)
        self.scheduler.add_job(
            self._auto_close,
            'date',
            run_date=run_date,
            args=[session_id],
            id=_job_id(session_id),
            replace_existing=True,
        )
        return True

    def cancel_auto_close(self, session_id: str):
        if self.scheduler is None:
            return
        try:
            self.scheduler.remove_job(_job_id(session_id))
        except JobLookupError:
            # Already fired or never armed
            pass

    def purge_stale(self, now: Optional[datetime] = None) -> int:
        """Drop sessions idle for longer than the TTL (abandoned quiz modals)."""
        now = now or datetime.utcnow()
        with self._lock:
            expired = [sid for sid, s in self._sessions.items() if now - s.updated_at > self.ttl]
            for sid in expired:
                self._sessions.pop(sid, None)
        for sid in expired:
            self.cancel_auto_close(sid)
        if expired:
            logger.info(f"Purged {len(expired)} stale quiz sessions")
        return len(expired)
