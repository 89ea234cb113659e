"""
Domain errors
"""


class LabelNotFoundError(ValueError):
    """Nhãn đáp án không tồn tại trong danh sách đáp án của câu hỏi"""

    def __init__(self, label: str, available_labels=None):
        self.label = label
        self.available_labels = list(available_labels or [])
        super().__init__(
            f"Không tìm thấy nhãn đáp án '{label}' "
            f"(các nhãn hợp lệ: {', '.join(self.available_labels) or 'không có'})"
        )


class InvalidEventTimestampError(ValueError):
    """Timestamp của sự kiện không parse được"""

    def __init__(self, raw_value, event_index=None):
        self.raw_value = raw_value
        self.event_index = event_index
        location = f" tại sự kiện #{event_index}" if event_index is not None else ""
        super().__init__(f"Timestamp không hợp lệ{location}: {raw_value!r}")


class AttemptLimitExceededError(ValueError):
    """Học sinh đã dùng hết số lần làm bài"""

    def __init__(self, max_attempts: int):
        self.max_attempts = max_attempts
        super().__init__(f"Đã vượt quá số lần làm tối đa ({max_attempts})")


class QuestionBankError(ValueError):
    """Dữ liệu ngân hàng câu hỏi không hợp lệ"""
