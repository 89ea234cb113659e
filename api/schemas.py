"""
API Schemas - Request/Response models
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field


# =============== Question bank ===============


class OptionSchema(BaseModel):
    """Đáp án theo thứ tự soạn đề"""
    option_id: str
    label: str = Field(..., description="Nhãn gốc, dùng để chấm điểm")
    content: str
    is_correct: bool = False


class QuestionMetadataSchema(BaseModel):
    """Metadata tùy chọn; trường bỏ trống sẽ được suy luận"""
    difficulty: Optional[str] = Field(default=None, description="EASY / MEDIUM / HARD")
    category: Optional[str] = None
    importance: Optional[float] = Field(default=None, ge=0, description="Độ quan trọng (thường 1-10)")
    estimated_time: Optional[int] = Field(default=None, ge=0, description="Thời gian ước tính (giây)")
    prerequisites: Optional[List[str]] = None
    tags: Optional[List[str]] = None


class QuestionSchema(BaseModel):
    """Câu hỏi trong ngân hàng đề"""
    question_id: str
    content: str
    question_type: str = Field(default="SINGLE", description="SINGLE / MULTI / TRUE_FALSE")
    options: List[OptionSchema] = Field(default_factory=list)
    explanation: Optional[str] = None
    metadata: Optional[QuestionMetadataSchema] = None

    class Config:
        json_schema_extra = {
            "example": {
                "question_id": "q1",
                "content": "2 + 2 = ?",
                "question_type": "SINGLE",
                "options": [
                    {"option_id": "q1-a", "label": "A", "content": "3", "is_correct": False},
                    {"option_id": "q1-b", "label": "B", "content": "4", "is_correct": True},
                ],
                "metadata": {"difficulty": "EASY", "category": "Math"},
            }
        }


class AntiCheatConfigSchema(BaseModel):
    """Cấu hình chống gian lận của bài thi"""
    shuffle_questions: bool = True
    shuffle_options: bool = True
    single_question_mode: bool = False
    time_per_question: Optional[int] = None
    require_fullscreen: bool = False
    detect_tab_switch: bool = False
    disable_copy_paste: bool = False
    preset: str = "CUSTOM"


# =============== Presented layout ===============


class PresentedOptionResponse(BaseModel):
    option_id: str
    content: str
    canonical_label: str
    presented_label: str


class PresentedQuestionResponse(BaseModel):
    question_id: str
    content: str
    question_type: str
    original_index: int
    presented_index: int
    options: List[PresentedOptionResponse]
    metadata: Optional[QuestionMetadataSchema] = None


class PresentExamRequest(BaseModel):
    """
    Request sinh bố cục đề cho một học sinh.
    Nếu không truyền questions, câu hỏi được lấy từ ngân hàng đề theo assignment_id.
    """
    student_id: str
    assignment_id: str
    questions: Optional[List[QuestionSchema]] = None
    anti_cheat_config: AntiCheatConfigSchema = Field(default_factory=AntiCheatConfigSchema)

    class Config:
        json_schema_extra = {
            "example": {
                "student_id": "student_1",
                "assignment_id": "assignment_1",
                "anti_cheat_config": {"shuffle_questions": True, "shuffle_options": True},
            }
        }


class PresentExamResponse(BaseModel):
    seed: str = Field(..., description="Seed cần lưu cùng attempt để dựng lại bố cục")
    questions: List[PresentedQuestionResponse]
    total_questions: int


class ConvertAnswerRequest(BaseModel):
    """Chuyển đáp án giữa nhãn hiển thị và nhãn gốc"""
    answer: Union[str, List[str]]
    presented_options: List[PresentedOptionResponse]
    direction: str = Field(
        default="to_canonical",
        pattern="^(to_canonical|to_presented)$",
        description="to_canonical hoặc to_presented",
    )


class ConvertAnswerResponse(BaseModel):
    answer: Union[str, List[str]]
    direction: str


class ShufflePreviewRequest(BaseModel):
    assignment_id: str
    sample_student_ids: List[str] = Field(..., min_length=1)
    questions: Optional[List[QuestionSchema]] = None
    anti_cheat_config: AntiCheatConfigSchema = Field(default_factory=AntiCheatConfigSchema)


class StudentPreview(BaseModel):
    student_id: str
    questions: List[PresentedQuestionResponse]


class ShuffleDiversity(BaseModel):
    question_order_diversity: float = Field(..., description="0-1, 1 = hoàn toàn khác nhau")
    option_order_diversity: float
    average_difference: float


class ShufflePreviewResponse(BaseModel):
    previews: List[StudentPreview]
    diversity: ShuffleDiversity


# =============== Randomization strategies ===============


class RandomizeRequest(BaseModel):
    strategy: str = Field(default="SIMPLE_SHUFFLE", description="Chiến lược randomization")
    seed: str
    questions: List[QuestionSchema]
    custom_weights: Optional[Dict[str, float]] = None
    anti_cheat_config: AntiCheatConfigSchema = Field(default_factory=AntiCheatConfigSchema)

    class Config:
        json_schema_extra = {
            "example": {
                "strategy": "DIFFICULTY_BALANCED",
                "seed": "student_1-assignment_1",
                "questions": [],
            }
        }


class RandomizationDiagnostics(BaseModel):
    strategy: str
    seed: str
    difficulty_distribution: Dict[str, int]
    category_distribution: Dict[str, int]
    average_estimated_time: float
    quality_score: int = Field(..., ge=0, le=100)


class RandomizeResponse(BaseModel):
    questions: List[PresentedQuestionResponse]
    diagnostics: RandomizationDiagnostics
    warnings: List[str]


class RecommendStrategyResponse(BaseModel):
    strategy: str


# =============== Proctoring ===============


class ExamEventSchema(BaseModel):
    """Sự kiện telemetry thô; created_at là chuỗi ISO-8601 hoặc epoch milliseconds"""
    assignment_id: str
    student_id: str
    attempt: Optional[int] = None
    event_type: str
    created_at: Union[str, int]
    metadata: Dict[str, Any] = Field(default_factory=dict)


class EventsRequest(BaseModel):
    events: List[ExamEventSchema]
    now: Optional[datetime] = Field(default=None, description="Mốc thời gian tính is_online")

    class Config:
        json_schema_extra = {
            "example": {
                "events": [
                    {
                        "assignment_id": "assignment_1",
                        "student_id": "student_1",
                        "attempt": 1,
                        "event_type": "TAB_SWITCH_DETECTED",
                        "created_at": "2024-05-01T08:00:00Z",
                    }
                ]
            }
        }


class DerivedSessionResponse(BaseModel):
    student_id: str
    attempt: Optional[int]
    first_event_at: datetime
    last_event_at: datetime
    event_count: int
    high_count: int
    medium_count: int
    has_paused: bool
    has_resumed: bool
    has_completed: bool
    has_terminated: bool
    status: str
    is_online: bool
    flagged: bool


class SessionsResponse(BaseModel):
    sessions: List[DerivedSessionResponse]
    total_sessions: int
    flagged_sessions: int


class EventTypeSummaryRow(BaseModel):
    event_type: str
    count: int
    severity: str


class ProctoringSummaryResponse(BaseModel):
    by_type: List[EventTypeSummaryRow]
    by_student_attempt: List[DerivedSessionResponse]
    total_events: int


class ScoreBreakdownItem(BaseModel):
    rule_id: str
    title: str
    count: int
    points: int
    max_points: int
    details: str


class SuspicionScoreResponse(BaseModel):
    suspicion_score: int = Field(..., ge=0, le=100)
    risk_level: str
    breakdown: List[ScoreBreakdownItem]
    counts_by_type: Dict[str, int]
    total_events: int


# =============== Attempts ===============


class AttemptRecordSchema(BaseModel):
    assignment_id: str
    student_id: str
    attempt_number: int = Field(..., ge=1)
    seed: str
    time_limit_minutes: Optional[int] = None
    status: str = "IN_PROGRESS"
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None


class StartAttemptRequest(BaseModel):
    """Backend không lưu attempt; client/kho lưu trữ gửi lên các attempt đã có"""
    assignment_id: str
    student_id: str
    previous_attempts: List[AttemptRecordSchema] = Field(default_factory=list)
    max_attempts: int = Field(default=1, ge=1)
    time_limit_minutes: Optional[int] = Field(default=None, ge=1)


class RebuildLayoutRequest(BaseModel):
    attempt: AttemptRecordSchema
    questions: Optional[List[QuestionSchema]] = None
    anti_cheat_config: AntiCheatConfigSchema = Field(default_factory=AntiCheatConfigSchema)
