"""
ExamEvent Model
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class ExamEvent:
    """Sự kiện telemetry trong lúc làm bài (created_at luôn có timezone)"""
    assignment_id: str
    student_id: str
    attempt: Optional[int]
    event_type: str
    created_at: datetime
    metadata: Dict[str, Any] = field(default_factory=dict)
