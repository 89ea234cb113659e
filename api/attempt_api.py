"""
Attempt API endpoints
"""

import logging

from fastapi import APIRouter, HTTPException

from api.schemas import (
    AttemptRecordSchema,
    PresentExamResponse,
    RebuildLayoutRequest,
    StartAttemptRequest,
)
from api.shared import resolve_questions, to_anti_cheat_config, to_presented_response
from models.attempt_record import AttemptRecord
from services.attempt_service import AttemptService
from services.errors import AttemptLimitExceededError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/attempts", tags=["Attempts"])


@router.post("/start",
             response_model=AttemptRecordSchema,
             summary="Lập bản ghi attempt mới (hoặc trả về attempt đang làm dở)")
async def start_attempt(request: StartAttemptRequest):
    """
    Lập bản ghi attempt cho học sinh

    Backend không lưu DB: bản ghi trả về (kèm seed) để kho lưu trữ bên ngoài
    lưu lại, đủ để dựng lại bố cục đề khi cần.
    """
    try:
        record = AttemptService.plan_next_attempt(
            assignment_id=request.assignment_id,
            student_id=request.student_id,
            previous_attempts=[AttemptRecord(**a.model_dump()) for a in request.previous_attempts],
            max_attempts=request.max_attempts,
            time_limit_minutes=request.time_limit_minutes
        )
    except AttemptLimitExceededError as e:
        raise HTTPException(status_code=403, detail=str(e))

    return AttemptRecordSchema(**record.__dict__)


@router.post("/layout",
             response_model=PresentExamResponse,
             summary="Dựng lại bố cục đề từ bản ghi attempt")
async def rebuild_layout(request: RebuildLayoutRequest):
    """Dựng lại chính xác bố cục học sinh đã thấy (phục vụ kiểm tra/chấm lại)"""
    try:
        questions = resolve_questions(request.attempt.assignment_id, request.questions)
        record = AttemptRecord(**request.attempt.model_dump())

        presented = AttemptService.rebuild_layout(
            record, questions, to_anti_cheat_config(request.anti_cheat_config)
        )

        return PresentExamResponse(
            seed=record.seed,
            questions=[to_presented_response(p) for p in presented],
            total_questions=len(presented)
        )

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Failed to rebuild layout for attempt %s", request.attempt.attempt_number)
        raise HTTPException(status_code=500, detail=f"Lỗi khi dựng lại bố cục: {str(e)}")
