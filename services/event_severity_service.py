"""
Event Severity Service - Phân loại mức độ nghiêm trọng của sự kiện telemetry
"""

from enum import Enum


class Severity(str, Enum):
    INFO = "info"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


INFO_EVENT_TYPES = frozenset({
    "SESSION_STARTED",
    "SESSION_RESUMED",
    "AUTO_SAVED",
})

HIGH_EVENT_TYPES = frozenset({
    "FULLSCREEN_EXIT",
    "TAB_SWITCH_DETECTED",
    "TAB_SWITCH",
    "COPY_PASTE_ATTEMPT",
    "CLIPBOARD",
    "SHORTCUT",
    "SUSPICIOUS_BEHAVIOR_DETECTED",
    "SUSPICIOUS_BEHAVIOR",
})

MEDIUM_EVENT_TYPES = frozenset({
    "SESSION_PAUSED",
    "GRACE_PERIOD_ADDED",
    "WINDOW_BLUR",
})


class EventSeverityService:
    """
    Tra cứu mức độ nghiêm trọng theo loại sự kiện

    Loại sự kiện chưa biết được xếp vào low thay vì báo lỗi,
    để pipeline vẫn chạy khi client gửi loại sự kiện mới.
    """

    @staticmethod
    def severity_of(event_type: str) -> Severity:
        normalized = (event_type or "").strip().upper()

        if normalized in INFO_EVENT_TYPES:
            return Severity.INFO
        if normalized in HIGH_EVENT_TYPES:
            return Severity.HIGH
        if normalized in MEDIUM_EVENT_TYPES:
            return Severity.MEDIUM
        return Severity.LOW
