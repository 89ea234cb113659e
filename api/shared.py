"""
Shared utilities, data loaders và dependencies cho tất cả API routes
"""

import logging
import os
from datetime import timedelta
from typing import Dict, List, Optional

from fastapi import HTTPException

import config
from api.schemas import (
    AntiCheatConfigSchema,
    DerivedSessionResponse,
    PresentedOptionResponse,
    PresentedQuestionResponse,
    QuestionMetadataSchema,
    QuestionSchema,
)
from models.anti_cheat_config import AntiCheatConfig
from models.derived_session import DerivedSession
from models.presented_question import PresentedQuestion
from models.question import Question
from services.question_bank_loader_service import QuestionBankLoaderService
from services.session_aggregator_service import SessionAggregatorService
from services.suspicion_service import SuspicionService

logger = logging.getLogger(__name__)

# Cache variables
_question_bank_cache = None


def load_question_bank() -> Dict[str, List[Question]]:
    """Load ngân hàng câu hỏi từ QUESTION_BANK_FILE (có cache)"""
    global _question_bank_cache

    if _question_bank_cache is not None:
        return _question_bank_cache

    if not os.path.exists(config.settings.QUESTION_BANK_FILE):
        raise FileNotFoundError(f"File không tồn tại: {config.settings.QUESTION_BANK_FILE}")

    _question_bank_cache = QuestionBankLoaderService.load_bank_file(config.settings.QUESTION_BANK_FILE)
    logger.info(
        "Loaded question bank from %s (%d assignments)",
        config.settings.QUESTION_BANK_FILE, len(_question_bank_cache)
    )
    return _question_bank_cache


def resolve_questions(assignment_id: str,
                      questions: Optional[List[QuestionSchema]]) -> List[Question]:
    """Câu hỏi gửi kèm request, hoặc lấy từ ngân hàng đề theo assignment_id"""
    if questions is not None:
        return QuestionBankLoaderService.load_questions([q.model_dump() for q in questions])

    try:
        bank = load_question_bank()
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if assignment_id not in bank:
        raise HTTPException(
            status_code=404,
            detail=f"Không tìm thấy câu hỏi cho assignment {assignment_id}"
        )
    return bank[assignment_id]


def to_anti_cheat_config(schema: AntiCheatConfigSchema) -> AntiCheatConfig:
    return AntiCheatConfig(**schema.model_dump())


def to_presented_response(presented: PresentedQuestion) -> PresentedQuestionResponse:
    metadata = None
    if presented.metadata is not None:
        metadata = QuestionMetadataSchema(
            difficulty=presented.metadata.difficulty.value if presented.metadata.difficulty else None,
            category=presented.metadata.category,
            importance=presented.metadata.importance,
            estimated_time=presented.metadata.estimated_time,
            prerequisites=presented.metadata.prerequisites,
            tags=presented.metadata.tags,
        )

    return PresentedQuestionResponse(
        question_id=presented.question_id,
        content=presented.question.content,
        question_type=presented.question.question_type.value,
        original_index=presented.original_index,
        presented_index=presented.presented_index,
        options=[
            PresentedOptionResponse(
                option_id=o.option_id,
                content=o.content,
                canonical_label=o.canonical_label,
                presented_label=o.presented_label,
            )
            for o in presented.presented_options
        ],
        metadata=metadata,
    )


def to_session_response(session: DerivedSession,
                        suspicion: SuspicionService) -> DerivedSessionResponse:
    return DerivedSessionResponse(
        student_id=session.student_id,
        attempt=session.attempt,
        first_event_at=session.first_event_at,
        last_event_at=session.last_event_at,
        event_count=session.event_count,
        high_count=session.high_count,
        medium_count=session.medium_count,
        has_paused=session.has_paused,
        has_resumed=session.has_resumed,
        has_completed=session.has_completed,
        has_terminated=session.has_terminated,
        status=session.status.value,
        is_online=session.is_online,
        flagged=suspicion.is_flagged(session),
    )


def get_session_aggregator() -> SessionAggregatorService:
    """Dependency để tạo SessionAggregatorService"""
    return SessionAggregatorService(
        liveness_window=timedelta(seconds=config.settings.LIVENESS_WINDOW_SECONDS)
    )


def get_suspicion_service() -> SuspicionService:
    """Dependency để tạo SuspicionService"""
    return SuspicionService(
        high_threshold=config.settings.SUSPICION_HIGH_THRESHOLD,
        combined_threshold=config.settings.SUSPICION_COMBINED_THRESHOLD,
    )


def clear_cache():
    """Clear cache - dùng cho testing hoặc reload data"""
    global _question_bank_cache
    _question_bank_cache = None
