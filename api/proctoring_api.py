"""
Proctoring dashboard API endpoints
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.schemas import (
    EventsRequest,
    EventTypeSummaryRow,
    ProctoringSummaryResponse,
    ScoreBreakdownItem,
    SessionsResponse,
    SuspicionScoreResponse,
)
from api.shared import get_session_aggregator, get_suspicion_service, to_session_response
from services.errors import InvalidEventTimestampError
from services.exam_event_loader_service import ExamEventLoaderService
from services.session_aggregator_service import SessionAggregatorService
from services.suspicion_service import SuspicionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/proctoring", tags=["Proctoring"])


def _load_events(request: EventsRequest):
    try:
        return ExamEventLoaderService.load_events([e.model_dump() for e in request.events])
    except InvalidEventTimestampError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Dữ liệu sự kiện không hợp lệ: {str(e)}")


def _resolve_now(request: EventsRequest):
    if request.now is None:
        return None
    return ExamEventLoaderService.parse_timestamp(request.now)


@router.post("/sessions",
             response_model=SessionsResponse,
             summary="Suy ra trạng thái phiên thi theo học sinh/attempt")
async def derive_sessions(
    request: EventsRequest,
    aggregator: SessionAggregatorService = Depends(get_session_aggregator),
    suspicion: SuspicionService = Depends(get_suspicion_service)
):
    """
    Gộp toàn bộ log sự kiện thành danh sách phiên thi

    Sự kiện có thể gửi lên không đúng thứ tự; timestamp lỗi trả về 400.
    Dashboard gọi lại định kỳ (polling), mỗi lần là một phép tính độc lập.
    """
    events = _load_events(request)
    sessions = aggregator.derive_sessions(events, now=_resolve_now(request))
    responses = [to_session_response(s, suspicion) for s in sessions]

    return SessionsResponse(
        sessions=responses,
        total_sessions=len(responses),
        flagged_sessions=sum(1 for r in responses if r.flagged)
    )


@router.post("/summary",
             response_model=ProctoringSummaryResponse,
             summary="Tổng hợp theo loại sự kiện và theo học sinh/attempt")
async def summarize(
    request: EventsRequest,
    aggregator: SessionAggregatorService = Depends(get_session_aggregator),
    suspicion: SuspicionService = Depends(get_suspicion_service)
):
    """
    Bảng tổng hợp cho dashboard giám sát

    - by_type: tần suất từng loại sự kiện kèm mức độ nghiêm trọng
    - by_student_attempt: các phiên sắp theo số sự kiện giảm dần
    """
    events = _load_events(request)
    sessions = aggregator.derive_sessions(events, now=_resolve_now(request))

    return ProctoringSummaryResponse(
        by_type=[EventTypeSummaryRow(**row) for row in suspicion.summarize_by_type(events)],
        by_student_attempt=[
            to_session_response(s, suspicion) for s in suspicion.rank_sessions(sessions)
        ],
        total_events=len(events)
    )


@router.post("/score",
             response_model=SuspicionScoreResponse,
             summary="Tính điểm nghi ngờ gian lận (0-100) theo luật")
async def compute_score(request: EventsRequest):
    """
    Tính suspicion score và risk level từ danh sách sự kiện

    Chỉ dựa vào loại sự kiện và số lần xuất hiện, không dựa vào metadata.
    """
    events = _load_events(request)
    score = SuspicionService.compute_score(events)

    return SuspicionScoreResponse(
        suspicion_score=score["suspicion_score"],
        risk_level=score["risk_level"],
        breakdown=[ScoreBreakdownItem(**item) for item in score["breakdown"]],
        counts_by_type=score["counts_by_type"],
        total_events=len(events)
    )
