"""
AttemptRecord Model
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class AttemptRecord:
    """
    Bản ghi một lần làm bài

    Lưu đủ thông tin (assignment_id, student_id, seed) để dựng lại
    chính xác thứ tự câu hỏi/đáp án khi cần kiểm tra hoặc chấm lại.
    """
    assignment_id: str
    student_id: str
    attempt_number: int
    seed: str
    time_limit_minutes: Optional[int] = None
    status: str = "IN_PROGRESS"
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
