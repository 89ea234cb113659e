"""
Suspicion Service - Đánh giá mức độ nghi ngờ gian lận
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Sequence

from models.derived_session import DerivedSession
from models.exam_event import ExamEvent
from services.event_severity_service import EventSeverityService

HIGH_THRESHOLD = 1
COMBINED_THRESHOLD = 3

HIGH_RISK_SCORE = 50
MEDIUM_RISK_SCORE = 20

_EVENT_TYPE_ALIASES = {
    "TAB_SWITCH_DETECTED": "TAB_SWITCH",
    "COPY_PASTE_ATTEMPT": "CLIPBOARD",
}


@dataclass(frozen=True)
class ScoringRule:
    rule_id: str
    title: str
    event_type: str
    points_per_hit: int
    max_points: int
    details: str


SCORING_RULES = [
    ScoringRule(
        "fullscreen_exit", "Thoát fullscreen", "FULLSCREEN_EXIT", 20, 40,
        "Thoát fullscreen có thể cho thấy học sinh rời màn hình làm bài."
    ),
    ScoringRule(
        "tab_switch", "Chuyển tab", "TAB_SWITCH", 12, 60,
        "Chuyển tab trong lúc làm bài là tín hiệu rủi ro cao (tra cứu/trao đổi)."
    ),
    ScoringRule(
        "window_blur", "Rời cửa sổ (blur)", "WINDOW_BLUR", 5, 20,
        "Cửa sổ mất focus (alt-tab, chuyển ứng dụng) trong lúc làm bài."
    ),
    ScoringRule(
        "clipboard", "Copy/Cut/Paste/Context menu", "CLIPBOARD", 8, 24,
        "Hệ thống phát hiện thao tác clipboard bị chặn (copy/paste/cut/contextmenu)."
    ),
    ScoringRule(
        "shortcut", "Phím tắt nghi ngờ", "SHORTCUT", 6, 18,
        "Phát hiện phím tắt (Ctrl/Cmd+C/V/X/A...) bị chặn."
    ),
]


def _clamp_int(value: float, low: int, high: int) -> int:
    return min(high, max(low, int(value)))


class SuspicionService:
    """
    Service đánh giá nghi ngờ cho dashboard giám sát

    - is_flagged: high >= 1 hoặc high + medium >= 3
    - compute_score: điểm 0..100 theo luật, chỉ dựa vào loại sự kiện và số lần
    """

    def __init__(self, high_threshold: int = HIGH_THRESHOLD,
                 combined_threshold: int = COMBINED_THRESHOLD):
        self.high_threshold = high_threshold
        self.combined_threshold = combined_threshold

    def is_flagged(self, session: DerivedSession) -> bool:
        return (session.high_count >= self.high_threshold
                or session.high_count + session.medium_count >= self.combined_threshold)

    @staticmethod
    def rank_sessions(sessions: Sequence[DerivedSession]) -> List[DerivedSession]:
        """Sắp phiên thi theo tổng số sự kiện giảm dần"""
        return sorted(sessions, key=lambda s: s.event_count, reverse=True)

    @staticmethod
    def summarize_by_type(events: Sequence[ExamEvent]) -> List[Dict]:
        """
        Bảng tần suất theo loại sự kiện

        Returns:
            List các dict {event_type, count, severity}, sắp theo count giảm dần
        """
        counts = Counter(event.event_type for event in events)
        rows = [
            {
                "event_type": event_type,
                "count": count,
                "severity": EventSeverityService.severity_of(event_type).value
            }
            for event_type, count in counts.items()
        ]
        rows.sort(key=lambda row: (-row["count"], row["event_type"]))
        return rows

    @staticmethod
    def normalize_event_type(event_type: str) -> str:
        raw = (event_type or "").strip().upper()
        return _EVENT_TYPE_ALIASES.get(raw, raw)

    @staticmethod
    def risk_level_from_score(score: int) -> str:
        if score >= HIGH_RISK_SCORE:
            return "high"
        if score >= MEDIUM_RISK_SCORE:
            return "medium"
        return "low"

    @classmethod
    def compute_score(cls, events: Sequence[ExamEvent]) -> Dict:
        """
        Tính điểm nghi ngờ (0..100) theo luật từ danh sách sự kiện

        Không dựa vào metadata của sự kiện vì dữ liệu từ client không đáng tin.

        Returns:
            Dict gồm suspicion_score, risk_level, breakdown, counts_by_type
        """
        counts_by_type = Counter()
        for event in events:
            event_type = cls.normalize_event_type(event.event_type)
            if event_type:
                counts_by_type[event_type] += 1

        breakdown = []
        for rule in SCORING_RULES:
            count = counts_by_type.get(rule.event_type, 0)
            points = _clamp_int(min(rule.max_points, count * rule.points_per_hit), 0, 100)
            breakdown.append({
                "rule_id": rule.rule_id,
                "title": rule.title,
                "count": _clamp_int(count, 0, 9999),
                "points": points,
                "max_points": rule.max_points,
                "details": rule.details
            })

        score = _clamp_int(min(100, sum(item["points"] for item in breakdown)), 0, 100)

        return {
            "suspicion_score": score,
            "risk_level": cls.risk_level_from_score(score),
            "breakdown": [b for b in breakdown if b["count"] > 0 or b["points"] > 0],
            "counts_by_type": dict(counts_by_type)
        }
