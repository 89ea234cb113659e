"""
Session Aggregator Service - Gộp log sự kiện thành trạng thái phiên thi
"""

import logging
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from models.derived_session import DerivedSession, SessionStatus
from models.exam_event import ExamEvent
from services.event_severity_service import EventSeverityService, Severity

logger = logging.getLogger(__name__)

LIVENESS_WINDOW = timedelta(minutes=2)

PAUSED_EVENT = "SESSION_PAUSED"
RESUMED_EVENT = "SESSION_RESUMED"
COMPLETED_EVENT = "SESSION_COMPLETED"
TERMINATED_EVENT = "SESSION_TERMINATED"


def _as_utc(value: datetime) -> datetime:
    """Datetime không có tzinfo được coi là UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SessionAggregatorService:
    """
    Service suy ra DerivedSession từ toàn bộ log sự kiện

    Mỗi lần gọi đều gộp lại từ đầu (không giữ state giữa các lần gọi),
    nên có thể chạy song song từ nhiều dashboard.
    """

    def __init__(self, liveness_window: timedelta = LIVENESS_WINDOW):
        self.liveness_window = liveness_window

    @staticmethod
    def group_events(events: Sequence[ExamEvent]) -> Dict[Tuple[str, Optional[int]], List[ExamEvent]]:
        """Nhóm sự kiện theo (student_id, attempt)"""
        groups = defaultdict(list)
        for event in events:
            groups[(event.student_id, event.attempt)].append(event)
        return groups

    @staticmethod
    def compute_status(session: DerivedSession) -> SessionStatus:
        """TERMINATED > COMPLETED > PAUSED (chưa resume) > IN_PROGRESS"""
        if session.has_terminated:
            return SessionStatus.TERMINATED
        if session.has_completed:
            return SessionStatus.COMPLETED
        if session.has_paused and not session.has_resumed:
            return SessionStatus.PAUSED
        return SessionStatus.IN_PROGRESS

    def fold_session(self, student_id: str, attempt: Optional[int],
                     events: Sequence[ExamEvent], now: datetime) -> DerivedSession:
        """
        Gộp sự kiện của một phiên theo thứ tự created_at tăng dần

        Args:
            student_id: ID học sinh
            attempt: Lần làm bài (có thể None)
            events: Sự kiện của phiên, không cần đúng thứ tự (phải khác rỗng)
            now: Thời điểm hiện tại để tính is_online

        Returns:
            DerivedSession
        """
        ordered = sorted(events, key=lambda e: _as_utc(e.created_at))

        session = DerivedSession(
            student_id=student_id,
            attempt=attempt,
            first_event_at=_as_utc(ordered[0].created_at),
            last_event_at=_as_utc(ordered[0].created_at)
        )

        for event in ordered:
            created_at = _as_utc(event.created_at)
            session.first_event_at = min(session.first_event_at, created_at)
            session.last_event_at = max(session.last_event_at, created_at)
            session.event_count += 1

            severity = EventSeverityService.severity_of(event.event_type)
            if severity == Severity.HIGH:
                session.high_count += 1
            elif severity == Severity.MEDIUM:
                session.medium_count += 1

            event_type = (event.event_type or "").strip().upper()
            if event_type == PAUSED_EVENT:
                session.has_paused = True
            elif event_type == RESUMED_EVENT:
                session.has_resumed = True
            elif event_type == COMPLETED_EVENT:
                session.has_completed = True
            elif event_type == TERMINATED_EVENT:
                session.has_terminated = True

        session.status = self.compute_status(session)
        session.is_online = (_as_utc(now) - session.last_event_at) < self.liveness_window
        return session

    def derive_sessions(self, events: Sequence[ExamEvent],
                        now: Optional[datetime] = None) -> List[DerivedSession]:
        """
        Suy ra danh sách phiên thi từ log sự kiện

        Args:
            events: Toàn bộ sự kiện (có thể đến không đúng thứ tự)
            now: Thời điểm hiện tại (mặc định: UTC now)

        Returns:
            Danh sách DerivedSession, sắp theo thời điểm sự kiện đầu tiên
        """
        now = _as_utc(now) if now is not None else datetime.now(timezone.utc)

        sessions = [
            self.fold_session(student_id, attempt, group, now)
            for (student_id, attempt), group in self.group_events(events).items()
        ]
        sessions.sort(key=lambda s: (
            s.first_event_at,
            s.student_id,
            s.attempt if s.attempt is not None else -1
        ))

        logger.debug("Derived %d sessions from %d events", len(sessions), len(events))
        return sessions
