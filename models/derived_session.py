"""
DerivedSession Model
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class SessionStatus(str, Enum):
    """Trạng thái phiên thi suy ra từ log sự kiện"""
    IN_PROGRESS = "IN_PROGRESS"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"
    TERMINATED = "TERMINATED"


@dataclass
class DerivedSession:
    """
    Phiên thi của một học sinh theo (student_id, attempt)

    Chỉ là projection từ log sự kiện, không phải dữ liệu gốc.
    """
    student_id: str
    attempt: Optional[int]
    first_event_at: datetime
    last_event_at: datetime
    event_count: int = 0
    high_count: int = 0
    medium_count: int = 0
    has_paused: bool = False
    has_resumed: bool = False
    has_completed: bool = False
    has_terminated: bool = False
    status: SessionStatus = SessionStatus.IN_PROGRESS
    is_online: bool = False
