"""
Randomization Service - Các chiến lược sắp xếp câu hỏi nâng cao
"""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

import numpy as np

from models.anti_cheat_config import AntiCheatConfig
from models.presented_question import PresentedQuestion
from models.question import Difficulty, Question, QuestionMetadata
from models.seeded_random import SeededRandom
from services.metadata_inference_service import MetadataInferenceService
from services.question_shuffle_service import QuestionShuffleService

logger = logging.getLogger(__name__)


class RandomizationStrategy(str, Enum):
    SIMPLE_SHUFFLE = "SIMPLE_SHUFFLE"
    DIFFICULTY_BALANCED = "DIFFICULTY_BALANCED"
    CATEGORY_GROUPED = "CATEGORY_GROUPED"
    ADAPTIVE_ORDER = "ADAPTIVE_ORDER"
    WEIGHTED_RANDOM = "WEIGHTED_RANDOM"


@dataclass
class RandomizationConfig:
    """Cấu hình randomization: chiến lược, seed và trọng số tùy chỉnh theo question_id"""
    strategy: RandomizationStrategy
    seed: str
    custom_weights: Optional[Dict[str, float]] = None

    def __post_init__(self):
        if not isinstance(self.strategy, RandomizationStrategy):
            try:
                self.strategy = RandomizationStrategy(str(self.strategy).upper())
            except ValueError:
                raise ValueError(f"Chiến lược randomization không hợp lệ: {self.strategy}")


@dataclass
class RandomizationResult:
    presented: List[PresentedQuestion]
    diagnostics: Dict
    warnings: List[str] = field(default_factory=list)


@dataclass
class _Candidate:
    question: Question
    original_index: int
    metadata: QuestionMetadata


class RandomizationService:
    """
    Engine sắp xếp câu hỏi theo nhiều chiến lược

    Chiến lược chỉ quyết định thứ tự câu hỏi; đáp án vẫn được xáo
    theo seed con "{seed}-q{i}" như QuestionShuffleService.
    """

    def __init__(self, config: RandomizationConfig):
        self.config = config
        self.rng = SeededRandom(config.seed)

    def randomize(self, questions: Sequence[Question],
                  anti_cheat_config: Optional[AntiCheatConfig] = None) -> RandomizationResult:
        """
        Sắp xếp câu hỏi theo chiến lược đã chọn

        Args:
            questions: Câu hỏi theo thứ tự soạn đề
            anti_cheat_config: Cấu hình chống gian lận (mặc định: xáo đáp án)

        Returns:
            RandomizationResult gồm bố cục, diagnostics và cảnh báo
        """
        anti_cheat_config = anti_cheat_config or AntiCheatConfig()
        # Mỗi lần gọi bắt đầu lại từ seed
        self.rng = SeededRandom(self.config.seed)

        candidates = [
            _Candidate(question, index, MetadataInferenceService.resolve(question))
            for index, question in enumerate(questions)
        ]

        strategies = {
            RandomizationStrategy.SIMPLE_SHUFFLE: self._simple_shuffle,
            RandomizationStrategy.DIFFICULTY_BALANCED: self._difficulty_balanced,
            RandomizationStrategy.CATEGORY_GROUPED: self._category_grouped,
            RandomizationStrategy.ADAPTIVE_ORDER: self._adaptive_order,
            RandomizationStrategy.WEIGHTED_RANDOM: self._weighted_random,
        }
        ordered = strategies[self.config.strategy](candidates)

        presented = [
            PresentedQuestion(
                question=candidate.question,
                original_index=candidate.original_index,
                presented_options=QuestionShuffleService.shuffle_options(
                    candidate.question.options,
                    f"{self.config.seed}-q{position}",
                    anti_cheat_config.shuffle_options
                ),
                presented_index=position,
                metadata=candidate.metadata
            )
            for position, candidate in enumerate(ordered)
        ]

        diagnostics = self.calculate_diagnostics(presented)
        warnings = self.validate_result(presented)

        logger.debug(
            "Randomized %d questions with strategy %s (quality=%s, warnings=%d)",
            len(presented), self.config.strategy.value,
            diagnostics["quality_score"], len(warnings)
        )
        return RandomizationResult(presented=presented, diagnostics=diagnostics, warnings=warnings)

    def _simple_shuffle(self, candidates: List[_Candidate]) -> List[_Candidate]:
        return self.rng.shuffle(candidates)

    def _difficulty_balanced(self, candidates: List[_Candidate]) -> List[_Candidate]:
        tiers = [
            self.rng.shuffle([c for c in candidates if c.metadata.difficulty == difficulty])
            for difficulty in (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD)
        ]

        result = []
        longest = max(len(tier) for tier in tiers) if tiers else 0
        for i in range(longest):
            for tier in tiers:
                if i < len(tier):
                    result.append(tier[i])
        return result

    def _category_grouped(self, candidates: List[_Candidate]) -> List[_Candidate]:
        groups = defaultdict(list)
        for candidate in candidates:
            groups[candidate.metadata.category].append(candidate)

        result = []
        for category in self.rng.shuffle(list(groups.keys())):
            result.extend(self.rng.shuffle(groups[category]))
        return result

    def _adaptive_order(self, candidates: List[_Candidate]) -> List[_Candidate]:
        # sorted() ổn định nên thứ tự ngẫu nhiên trong cùng mức độ khó được giữ
        shuffled = self.rng.shuffle(candidates)
        return sorted(shuffled, key=lambda c: c.metadata.difficulty.rank)

    def _weight_of(self, candidate: _Candidate) -> float:
        weight = candidate.metadata.importance
        if self.config.custom_weights:
            custom = self.config.custom_weights.get(candidate.question.question_id)
            if custom is not None:
                weight = custom
        return max(0.0, float(weight))

    def _weighted_random(self, candidates: List[_Candidate]) -> List[_Candidate]:
        remaining = list(candidates)
        weights = [self._weight_of(c) for c in remaining]
        result = []

        while remaining:
            threshold = self.rng.next() * sum(weights)

            selected = len(remaining) - 1
            for i, weight in enumerate(weights):
                threshold -= weight
                if threshold <= 0:
                    selected = i
                    break

            result.append(remaining.pop(selected))
            weights.pop(selected)

        return result

    def calculate_diagnostics(self, presented: Sequence[PresentedQuestion]) -> Dict:
        """
        Thống kê bố cục: phân bố độ khó, phân bố chủ đề, thời gian trung bình, quality score
        """
        difficulty_distribution = defaultdict(int)
        category_distribution = defaultdict(int)
        for question in presented:
            difficulty_distribution[question.metadata.difficulty.value] += 1
            category_distribution[question.metadata.category] += 1

        times = [question.metadata.estimated_time for question in presented]
        average_time = float(np.mean(times)) if times else 0.0

        return {
            "strategy": self.config.strategy.value,
            "seed": self.config.seed,
            "difficulty_distribution": dict(difficulty_distribution),
            "category_distribution": dict(category_distribution),
            "average_estimated_time": average_time,
            "quality_score": self.calculate_quality_score(presented)
        }

    @classmethod
    def calculate_quality_score(cls, presented: Sequence[PresentedQuestion]) -> int:
        """
        Điểm chất lượng 0-100

        100 - 20*(1 - progression) - 15*(1 - category_balance) - 15*(1 - time_variance)
        """
        score = 100.0
        score -= (1 - cls.difficulty_progression_score(presented)) * 20
        score -= (1 - cls.category_balance_score(presented)) * 15
        score -= (1 - cls.time_variance_score(presented)) * 15
        return max(0, int(math.floor(score + 0.5)))

    @staticmethod
    def difficulty_progression_score(presented: Sequence[PresentedQuestion]) -> float:
        """Cặp liền kề không giảm độ khó được 1 điểm, giảm đúng một mức được 0.5"""
        if len(presented) < 3:
            return 1.0

        points = 0.0
        for previous, current in zip(presented, presented[1:]):
            previous_rank = previous.metadata.difficulty.rank
            current_rank = current.metadata.difficulty.rank
            if current_rank >= previous_rank:
                points += 1
            elif current_rank == previous_rank - 1:
                points += 0.5

        return points / (len(presented) - 1)

    @staticmethod
    def category_balance_score(presented: Sequence[PresentedQuestion]) -> float:
        counts = defaultdict(int)
        for question in presented:
            counts[question.metadata.category] += 1

        if len(counts) <= 1:
            return 1.0

        ideal = len(presented) / len(counts)
        scores = [max(0.0, 1 - abs(count - ideal) / ideal) for count in counts.values()]
        return float(np.mean(scores))

    @staticmethod
    def time_variance_score(presented: Sequence[PresentedQuestion]) -> float:
        times = np.array([question.metadata.estimated_time for question in presented], dtype=float)
        if times.size == 0:
            return 1.0

        mean_time = float(times.mean())
        if mean_time == 0:
            return 1.0

        deviations = np.abs(times - mean_time) / mean_time
        return float(np.mean(np.maximum(0.0, 1 - deviations)))

    @staticmethod
    def validate_result(presented: Sequence[PresentedQuestion]) -> List[str]:
        """Cảnh báo (không chặn) về bố cục kết quả"""
        warnings = []

        if not presented:
            warnings.append("Không có câu hỏi nào được randomize")
            return warnings

        if len({q.metadata.difficulty for q in presented}) == 1:
            warnings.append("Tất cả câu hỏi có cùng độ khó")

        if len({q.metadata.category for q in presented}) == 1:
            warnings.append("Tất cả câu hỏi thuộc cùng một chủ đề")

        times = [q.metadata.estimated_time for q in presented]
        average_time = sum(times) / len(times)
        if max(times) - min(times) > average_time * 2:
            warnings.append("Thời gian làm bài giữa các câu chênh lệch quá lớn")

        return warnings

    @staticmethod
    def recommend_strategy(question_count: int,
                           has_categories: bool,
                           has_difficulties: bool) -> RandomizationStrategy:
        """Gợi ý chiến lược dựa trên số câu và metadata có sẵn"""
        if question_count < 5:
            return RandomizationStrategy.SIMPLE_SHUFFLE
        if has_difficulties and has_categories:
            return RandomizationStrategy.ADAPTIVE_ORDER
        if has_difficulties:
            return RandomizationStrategy.DIFFICULTY_BALANCED
        if has_categories:
            return RandomizationStrategy.CATEGORY_GROUPED
        return RandomizationStrategy.SIMPLE_SHUFFLE
