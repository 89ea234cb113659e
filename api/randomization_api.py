"""
Randomization strategy API endpoints
"""

import logging

from fastapi import APIRouter, HTTPException, Query

from api.schemas import (
    RandomizationDiagnostics,
    RandomizeRequest,
    RandomizeResponse,
    RecommendStrategyResponse,
)
from api.shared import to_anti_cheat_config, to_presented_response
from services.question_bank_loader_service import QuestionBankLoaderService
from services.randomization_service import RandomizationConfig, RandomizationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/randomization", tags=["Randomization"])


@router.post("/randomize",
             response_model=RandomizeResponse,
             summary="Sắp xếp câu hỏi theo chiến lược randomization")
async def randomize(request: RandomizeRequest):
    """
    Sắp xếp câu hỏi theo một trong các chiến lược:

    - **SIMPLE_SHUFFLE**: xáo ngẫu nhiên
    - **DIFFICULTY_BALANCED**: xen kẽ dễ / trung bình / khó
    - **CATEGORY_GROUPED**: gom theo chủ đề
    - **ADAPTIVE_ORDER**: từ dễ đến khó
    - **WEIGHTED_RANDOM**: câu quan trọng hơn có xác suất xuất hiện sớm hơn

    Returns:
        Bố cục, diagnostics (quality score 0-100) và cảnh báo
    """
    try:
        questions = QuestionBankLoaderService.load_questions(
            [q.model_dump() for q in request.questions]
        )
        service = RandomizationService(RandomizationConfig(
            strategy=request.strategy,
            seed=request.seed,
            custom_weights=request.custom_weights
        ))

        result = service.randomize(questions, to_anti_cheat_config(request.anti_cheat_config))

        return RandomizeResponse(
            questions=[to_presented_response(p) for p in result.presented],
            diagnostics=RandomizationDiagnostics(**result.diagnostics),
            warnings=result.warnings
        )

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Randomization failed with strategy %s", request.strategy)
        raise HTTPException(status_code=500, detail=f"Lỗi khi randomize: {str(e)}")


@router.get("/recommend-strategy",
            response_model=RecommendStrategyResponse,
            summary="Gợi ý chiến lược randomization")
async def recommend_strategy(question_count: int = Query(..., ge=0),
                             has_categories: bool = False,
                             has_difficulties: bool = False):
    strategy = RandomizationService.recommend_strategy(
        question_count, has_categories, has_difficulties
    )
    return RecommendStrategyResponse(strategy=strategy.value)
