"""
Exam Event Loader Service - Load sự kiện telemetry từ dữ liệu thô
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from models.exam_event import ExamEvent
from services.errors import InvalidEventTimestampError

logger = logging.getLogger(__name__)


class ExamEventLoaderService:
    """
    Service chuyển dữ liệu sự kiện thô (dict) thành ExamEvent

    Chấp nhận cả key snake_case lẫn camelCase (createdAt, studentId, ...).
    Timestamp lỗi sẽ báo lỗi ngay thay vì bỏ qua, vì gộp sai thứ tự
    làm hỏng trạng thái phiên thi.
    """

    @staticmethod
    def parse_timestamp(value, event_index: Optional[int] = None) -> datetime:
        """
        Parse timestamp: datetime, chuỗi ISO-8601 hoặc epoch milliseconds

        Timestamp không có timezone được coi là UTC.

        Raises:
            InvalidEventTimestampError: nếu không parse được
        """
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, bool) or value is None:
            raise InvalidEventTimestampError(value, event_index)
        elif isinstance(value, (int, float)):
            try:
                parsed = datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                raise InvalidEventTimestampError(value, event_index)
        elif isinstance(value, str):
            text = value.strip()
            if text.endswith("Z") or text.endswith("z"):
                text = text[:-1] + "+00:00"
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                raise InvalidEventTimestampError(value, event_index)
        else:
            raise InvalidEventTimestampError(value, event_index)

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    @staticmethod
    def _parse_attempt(value) -> Optional[int]:
        if value is None or value == "":
            return None
        return int(value)

    @classmethod
    def load_event(cls, row: Dict, event_index: Optional[int] = None) -> ExamEvent:
        raw_timestamp = row.get('created_at', row.get('createdAt'))
        metadata = row.get('metadata')

        return ExamEvent(
            assignment_id=str(row.get('assignment_id', row.get('assignmentId', ''))),
            student_id=str(row.get('student_id', row.get('studentId', ''))),
            attempt=cls._parse_attempt(row.get('attempt')),
            event_type=str(row.get('event_type', row.get('eventType', ''))),
            created_at=cls.parse_timestamp(raw_timestamp, event_index),
            metadata=metadata if isinstance(metadata, dict) else {}
        )

    @classmethod
    def load_events(cls, rows: List[Dict]) -> List[ExamEvent]:
        """
        Load danh sách sự kiện

        Args:
            rows: Dữ liệu sự kiện thô từ kho lưu trữ

        Returns:
            Danh sách ExamEvent theo thứ tự đầu vào

        Raises:
            InvalidEventTimestampError: nếu có sự kiện mang timestamp lỗi
        """
        events = []
        for index, row in enumerate(rows):
            try:
                events.append(cls.load_event(row, index))
            except InvalidEventTimestampError:
                logger.warning("Rejected event batch: bad timestamp at index %d", index)
                raise
        return events
