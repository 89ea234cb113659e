"""
Attempt Service - Quản lý lần làm bài và dựng lại bố cục đề
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from models.anti_cheat_config import AntiCheatConfig
from models.attempt_record import AttemptRecord
from models.presented_question import PresentedQuestion
from models.question import Question
from services.errors import AttemptLimitExceededError
from services.question_shuffle_service import QuestionShuffleService

logger = logging.getLogger(__name__)


class AttemptService:
    """
    Service lập bản ghi attempt

    Core không ghi dữ liệu; bản ghi trả về để kho lưu trữ bên ngoài lưu lại.
    """

    @staticmethod
    def plan_next_attempt(assignment_id: str,
                          student_id: str,
                          previous_attempts: Sequence[AttemptRecord],
                          max_attempts: int = 1,
                          time_limit_minutes: Optional[int] = None,
                          now: Optional[datetime] = None) -> AttemptRecord:
        """
        Lấy attempt đang làm dở hoặc tạo attempt mới

        Args:
            assignment_id: ID bài thi
            student_id: ID học sinh
            previous_attempts: Các attempt đã có của học sinh cho bài này
            max_attempts: Số lần làm tối đa
            time_limit_minutes: Giới hạn thời gian (phút)
            now: Thời điểm bắt đầu (mặc định: UTC now)

        Returns:
            AttemptRecord

        Raises:
            AttemptLimitExceededError: nếu đã hết lượt làm bài
        """
        own_attempts = [
            a for a in previous_attempts
            if a.assignment_id == assignment_id and a.student_id == student_id
        ]

        in_progress = [a for a in own_attempts if a.ended_at is None]
        if in_progress:
            return max(in_progress, key=lambda a: a.attempt_number)

        next_number = max((a.attempt_number for a in own_attempts), default=0) + 1
        if next_number > max_attempts:
            logger.warning(
                "Student %s exceeded max attempts (%d) for assignment %s",
                student_id, max_attempts, assignment_id
            )
            raise AttemptLimitExceededError(max_attempts)

        return AttemptRecord(
            assignment_id=assignment_id,
            student_id=student_id,
            attempt_number=next_number,
            seed=QuestionShuffleService.generate_deterministic_seed(student_id, assignment_id),
            time_limit_minutes=time_limit_minutes,
            status="IN_PROGRESS",
            started_at=now or datetime.now(timezone.utc)
        )

    @staticmethod
    def rebuild_layout(record: AttemptRecord,
                       questions: Sequence[Question],
                       config: AntiCheatConfig) -> List[PresentedQuestion]:
        """Dựng lại đúng bố cục học sinh đã thấy từ seed trong bản ghi"""
        return QuestionShuffleService.present_with_seed(questions, record.seed, config)
