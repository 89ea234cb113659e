"""
Exam presentation API endpoints
"""

import logging

from fastapi import APIRouter, HTTPException

from api.schemas import (
    ConvertAnswerRequest,
    ConvertAnswerResponse,
    PresentExamRequest,
    PresentExamResponse,
    ShuffleDiversity,
    ShufflePreviewRequest,
    ShufflePreviewResponse,
    StudentPreview,
)
from api.shared import resolve_questions, to_anti_cheat_config, to_presented_response
from models.presented_question import PresentedOption
from models.question import Option
from services.errors import LabelNotFoundError
from services.question_shuffle_service import QuestionShuffleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/exam", tags=["Exam Presentation"])


@router.post("/present",
             response_model=PresentExamResponse,
             summary="Sinh bố cục đề (thứ tự câu hỏi và đáp án) cho một học sinh")
async def present_exam(request: PresentExamRequest):
    """
    Sinh bố cục đề cho học sinh

    Cùng (student_id, assignment_id, câu hỏi, cấu hình) luôn trả về cùng bố cục,
    nên học sinh tải lại trang vẫn thấy đúng thứ tự cũ.

    Returns:
        Danh sách câu hỏi theo thứ tự hiển thị kèm nhãn gốc và nhãn hiển thị
    """
    try:
        questions = resolve_questions(request.assignment_id, request.questions)

        presented = QuestionShuffleService.present_exam(
            questions=questions,
            student_id=request.student_id,
            assignment_id=request.assignment_id,
            config=to_anti_cheat_config(request.anti_cheat_config)
        )

        return PresentExamResponse(
            seed=QuestionShuffleService.generate_deterministic_seed(
                request.student_id, request.assignment_id
            ),
            questions=[to_presented_response(p) for p in presented],
            total_questions=len(presented)
        )

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Failed to present exam %s", request.assignment_id)
        raise HTTPException(status_code=500, detail=f"Lỗi khi sinh bố cục đề: {str(e)}")


@router.post("/convert-answer",
             response_model=ConvertAnswerResponse,
             summary="Chuyển đáp án giữa nhãn hiển thị và nhãn gốc")
async def convert_answer(request: ConvertAnswerRequest):
    """
    Chuyển đáp án của học sinh về nhãn gốc trước khi chấm (hoặc ngược lại)

    Đáp án dạng list (câu MULTI) được chuyển từng phần tử.
    Nhãn không tồn tại trả về 400 thay vì giữ nguyên đầu vào.
    """
    presented_options = [
        PresentedOption(
            option=Option(
                option_id=o.option_id,
                label=o.canonical_label,
                content=o.content
            ),
            canonical_label=o.canonical_label,
            presented_label=o.presented_label
        )
        for o in request.presented_options
    ]

    try:
        if request.direction == "to_canonical":
            converted = QuestionShuffleService.to_canonical(request.answer, presented_options)
        else:
            converted = QuestionShuffleService.to_presented(request.answer, presented_options)
    except LabelNotFoundError as e:
        logger.warning("Answer conversion failed: %s", e)
        raise HTTPException(status_code=400, detail=str(e))

    return ConvertAnswerResponse(answer=converted, direction=request.direction)


@router.post("/preview",
             response_model=ShufflePreviewResponse,
             summary="Preview bố cục của các học sinh mẫu và độ khác biệt giữa chúng")
async def preview_shuffle(request: ShufflePreviewRequest):
    """
    Preview cho giáo viên trước khi giao bài

    Returns:
        Bố cục của từng học sinh mẫu và độ khác biệt trung bình (0-1)
    """
    try:
        questions = resolve_questions(request.assignment_id, request.questions)

        previews = QuestionShuffleService.create_shuffle_preview(
            questions=questions,
            config=to_anti_cheat_config(request.anti_cheat_config),
            sample_student_ids=request.sample_student_ids,
            assignment_id=request.assignment_id
        )
        diversity = QuestionShuffleService.calculate_shuffle_diversity(previews)

        return ShufflePreviewResponse(
            previews=[
                StudentPreview(
                    student_id=student_id,
                    questions=[to_presented_response(p) for p in presented]
                )
                for student_id, presented in previews
            ],
            diversity=ShuffleDiversity(**diversity)
        )

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Failed to build shuffle preview for %s", request.assignment_id)
        raise HTTPException(status_code=500, detail=f"Lỗi khi tạo preview: {str(e)}")
