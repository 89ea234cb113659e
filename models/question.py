"""
Question Model
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class QuestionType(str, Enum):
    """Loại câu hỏi trắc nghiệm"""
    SINGLE = "SINGLE"
    MULTI = "MULTI"
    TRUE_FALSE = "TRUE_FALSE"


class Difficulty(str, Enum):
    """Mức độ khó của câu hỏi"""
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"

    @property
    def rank(self) -> int:
        return _DIFFICULTY_RANKS[self]


_DIFFICULTY_RANKS = {
    Difficulty.EASY: 1,
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 3,
}


@dataclass
class Option:
    """Đáp án của câu hỏi. label là nhãn gốc, gán lúc soạn đề và không đổi."""
    option_id: str
    label: str
    content: str
    is_correct: bool = False


@dataclass
class QuestionMetadata:
    """
    Metadata của câu hỏi (tùy chọn)

    Các trường để None sẽ được suy luận bằng heuristic
    (xem MetadataInferenceService), kết quả chỉ là ước lượng.
    """
    difficulty: Optional[Difficulty] = None
    category: Optional[str] = None
    importance: Optional[float] = None
    estimated_time: Optional[int] = None
    prerequisites: Optional[List[str]] = None
    tags: Optional[List[str]] = None

    def __post_init__(self):
        if isinstance(self.difficulty, str) and not isinstance(self.difficulty, Difficulty):
            self.difficulty = Difficulty(self.difficulty.upper())


@dataclass
class Question:
    """Thông tin câu hỏi"""
    question_id: str
    content: str
    question_type: QuestionType = QuestionType.SINGLE
    options: List[Option] = field(default_factory=list)
    explanation: Optional[str] = None
    metadata: Optional[QuestionMetadata] = None

    def __post_init__(self):
        if isinstance(self.question_type, str) and not isinstance(self.question_type, QuestionType):
            self.question_type = QuestionType(self.question_type.upper())
