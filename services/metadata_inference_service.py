"""
Metadata Inference Service - Suy luận metadata khi đề không khai báo
"""

from typing import List

from models.question import Difficulty, Question, QuestionMetadata

DEFAULT_CATEGORY = "General"
DEFAULT_IMPORTANCE = 5
MAX_ESTIMATED_TIME = 300

_HARD_KEYWORDS = ("phân tích", "so sánh", "analyze", "analyse", "compare")
_MEDIUM_KEYWORDS = ("giải thích", "tại sao", "explain", "why")

_CATEGORY_KEYWORDS = [
    ("Math", ("toán", "tính", "math", "calculate")),
    ("History", ("lịch sử", "năm", "history", "century")),
    ("Literature", ("văn học", "thơ", "literature", "poem")),
    ("Science", ("khoa học", "thí nghiệm", "science", "experiment")),
]

_TAG_KEYWORDS = [
    ("definition", ("định nghĩa", "define", "definition")),
    ("example", ("ví dụ", "example")),
    ("formula", ("công thức", "formula")),
    ("comparison", ("so sánh", "compare")),
]


class MetadataInferenceService:
    """
    Heuristic fallback cho metadata câu hỏi

    Kết quả chỉ là ước lượng dựa trên từ khóa và độ dài nội dung,
    metadata khai báo tường minh luôn được ưu tiên.
    """

    @staticmethod
    def infer_difficulty(question: Question) -> Difficulty:
        content = question.content.lower()
        option_count = len(question.options)

        if any(k in content for k in _HARD_KEYWORDS) or option_count > 4:
            return Difficulty.HARD
        if any(k in content for k in _MEDIUM_KEYWORDS) or option_count == 4:
            return Difficulty.MEDIUM
        return Difficulty.EASY

    @staticmethod
    def infer_category(question: Question) -> str:
        content = question.content.lower()
        for category, keywords in _CATEGORY_KEYWORDS:
            if any(k in content for k in keywords):
                return category
        return DEFAULT_CATEGORY

    @staticmethod
    def estimate_time(question: Question) -> int:
        """
        Ước lượng thời gian làm câu hỏi (giây)

        30s cơ bản + 10s mỗi 100 ký tự + 5s mỗi đáp án + 15s nếu có giải thích,
        tối đa 300s.
        """
        estimated = 30
        estimated += (len(question.content) // 100) * 10
        estimated += len(question.options) * 5
        if question.explanation:
            estimated += 15
        return min(estimated, MAX_ESTIMATED_TIME)

    @staticmethod
    def extract_tags(question: Question) -> List[str]:
        content = question.content.lower()
        return [
            tag for tag, keywords in _TAG_KEYWORDS
            if any(k in content for k in keywords)
        ]

    @classmethod
    def resolve(cls, question: Question) -> QuestionMetadata:
        """
        Metadata đầy đủ cho câu hỏi: trường khai báo giữ nguyên, trường thiếu được suy luận

        Args:
            question: Câu hỏi (metadata có thể None hoặc thiếu một phần)

        Returns:
            QuestionMetadata với mọi trường đã có giá trị
        """
        declared = question.metadata

        if declared is None:
            return QuestionMetadata(
                difficulty=cls.infer_difficulty(question),
                category=cls.infer_category(question),
                importance=DEFAULT_IMPORTANCE,
                estimated_time=cls.estimate_time(question),
                prerequisites=[],
                tags=cls.extract_tags(question)
            )

        return QuestionMetadata(
            difficulty=declared.difficulty or cls.infer_difficulty(question),
            category=declared.category or DEFAULT_CATEGORY,
            importance=declared.importance or DEFAULT_IMPORTANCE,
            estimated_time=declared.estimated_time or cls.estimate_time(question),
            prerequisites=list(declared.prerequisites or []),
            tags=list(declared.tags or [])
        )
