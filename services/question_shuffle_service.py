"""
Question Shuffle Service - Xáo câu hỏi và đáp án theo seed
"""

import logging
import time
from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from models.anti_cheat_config import AntiCheatConfig
from models.presented_question import PresentedOption, PresentedQuestion
from models.question import Option, Question
from models.seeded_random import SeededRandom
from services.errors import LabelNotFoundError

logger = logging.getLogger(__name__)

Answer = Union[str, List[str]]

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


class QuestionShuffleService:
    """
    Service xáo thứ tự câu hỏi và đáp án cho từng học sinh

    Mỗi học sinh có thứ tự khác nhau nhưng luôn giống nhau khi tải lại,
    vì seed chỉ phụ thuộc vào (student_id, assignment_id).
    """

    @staticmethod
    def generate_deterministic_seed(student_id: str, assignment_id: str) -> str:
        """Seed ổn định, không phụ thuộc thời gian (dùng cho chấm điểm)"""
        return f"{student_id}-{assignment_id}"

    @staticmethod
    def generate_attempt_seed(student_id: str, assignment_id: str,
                              now: Optional[float] = None) -> str:
        """
        Seed có hậu tố thời gian (base-36 của epoch milliseconds)

        Chỉ dùng cho preview hoặc thử nghiệm; không dùng khi cần dựng lại
        bố cục để chấm điểm.
        """
        millis = int((time.time() if now is None else now) * 1000)
        return f"{student_id}-{assignment_id}-{_to_base36(millis)}"

    @staticmethod
    def generate_option_labels(count: int) -> List[str]:
        """Nhãn A, B, ..., Z, AA, AB, ... cho count đáp án"""
        labels = []
        for i in range(count):
            label = ""
            n = i + 1
            while n > 0:
                n, remainder = divmod(n - 1, 26)
                label = chr(65 + remainder) + label
            labels.append(label)
        return labels

    @classmethod
    def shuffle_options(cls, options: Sequence[Option], seed: str,
                        should_shuffle: bool) -> List[PresentedOption]:
        """
        Xáo đáp án của một câu hỏi

        Args:
            options: Đáp án theo thứ tự soạn đề
            seed: Seed riêng của câu hỏi
            should_shuffle: False thì giữ nguyên thứ tự

        Returns:
            Danh sách PresentedOption, nhãn hiển thị gán lại theo thứ tự mới
        """
        ordered = list(options)
        if should_shuffle:
            ordered = SeededRandom(seed).shuffle(ordered)

        labels = cls.generate_option_labels(len(ordered))
        return [
            PresentedOption(
                option=option,
                canonical_label=option.label,
                presented_label=labels[index]
            )
            for index, option in enumerate(ordered)
        ]

    @classmethod
    def present_exam(cls,
                     questions: Sequence[Question],
                     student_id: str,
                     assignment_id: str,
                     config: AntiCheatConfig) -> List[PresentedQuestion]:
        """
        Sinh bố cục đề thi cho một học sinh

        1. seed = "{student_id}-{assignment_id}"
        2. Xáo thứ tự câu hỏi nếu config.shuffle_questions
        3. Mỗi câu ở vị trí i dùng seed con "{seed}-q{i}" để xáo đáp án
        4. Gán lại nhãn hiển thị A, B, C, ...

        Args:
            questions: Ngân hàng câu hỏi theo thứ tự soạn đề
            student_id: ID học sinh
            assignment_id: ID bài thi
            config: Cấu hình chống gian lận

        Returns:
            Danh sách PresentedQuestion theo thứ tự hiển thị
        """
        seed = cls.generate_deterministic_seed(student_id, assignment_id)
        return cls.present_with_seed(questions, seed, config)

    @classmethod
    def present_with_seed(cls,
                          questions: Sequence[Question],
                          seed: str,
                          config: AntiCheatConfig) -> List[PresentedQuestion]:
        """Giống present_exam nhưng nhận seed trực tiếp (dựng lại từ attempt record)"""
        indexed = list(enumerate(questions))

        if config.shuffle_questions:
            indexed = SeededRandom(seed).shuffle(indexed)

        presented = [
            PresentedQuestion(
                question=question,
                original_index=original_index,
                presented_options=cls.shuffle_options(
                    question.options,
                    f"{seed}-q{position}",
                    config.shuffle_options
                ),
                presented_index=position
            )
            for position, (original_index, question) in enumerate(indexed)
        ]

        logger.debug(
            "Presented %d questions with seed %r (shuffle_questions=%s, shuffle_options=%s)",
            len(presented), seed, config.shuffle_questions, config.shuffle_options
        )
        return presented

    @staticmethod
    def _convert_single(label: str,
                        presented_options: Sequence[PresentedOption],
                        from_presented: bool) -> str:
        for option in presented_options:
            source = option.presented_label if from_presented else option.canonical_label
            if source == label:
                return option.canonical_label if from_presented else option.presented_label

        available = [
            o.presented_label if from_presented else o.canonical_label
            for o in presented_options
        ]
        raise LabelNotFoundError(label, available)

    @classmethod
    def to_canonical(cls, presented_answer: Answer,
                     presented_options: Sequence[PresentedOption]) -> Answer:
        """
        Chuyển đáp án từ nhãn hiển thị về nhãn gốc (để chấm điểm)

        Raises:
            LabelNotFoundError: nếu nhãn không có trong danh sách đáp án
        """
        if isinstance(presented_answer, list):
            return [cls._convert_single(a, presented_options, True) for a in presented_answer]
        return cls._convert_single(presented_answer, presented_options, True)

    @classmethod
    def to_presented(cls, canonical_answer: Answer,
                     presented_options: Sequence[PresentedOption]) -> Answer:
        """
        Chuyển đáp án từ nhãn gốc sang nhãn hiển thị

        Raises:
            LabelNotFoundError: nếu nhãn không có trong danh sách đáp án
        """
        if isinstance(canonical_answer, list):
            return [cls._convert_single(a, presented_options, False) for a in canonical_answer]
        return cls._convert_single(canonical_answer, presented_options, False)

    @staticmethod
    def create_question_order_mapping(
            presented: Sequence[PresentedQuestion]) -> Tuple[Dict[int, int], Dict[int, int]]:
        """Trả về (original_to_presented, presented_to_original)"""
        original_to_presented = {}
        presented_to_original = {}
        for presented_index, question in enumerate(presented):
            original_to_presented[question.original_index] = presented_index
            presented_to_original[presented_index] = question.original_index
        return original_to_presented, presented_to_original

    @staticmethod
    def validate_presented_questions(original: Sequence[Question],
                                     presented: Sequence[PresentedQuestion]) -> Tuple[bool, List[str]]:
        """
        Kiểm tra bố cục đã xáo không mất hoặc lặp câu hỏi/đáp án

        Returns:
            (is_valid, errors)
        """
        errors = []

        if len(original) != len(presented):
            errors.append("Số lượng câu hỏi không khớp")

        original_ids = Counter(q.question_id for q in original)
        presented_ids = Counter(p.question_id for p in presented)
        for question_id in original_ids:
            if original_ids[question_id] != presented_ids.get(question_id, 0):
                errors.append(f"Thiếu hoặc thừa câu hỏi ID: {question_id}")
        for question_id in presented_ids:
            if question_id not in original_ids:
                errors.append(f"Câu hỏi lạ ID: {question_id}")

        by_id = {q.question_id: q for q in original}
        for item in presented:
            source = by_id.get(item.question_id)
            if source is None:
                continue
            if len(source.options) != len(item.presented_options):
                errors.append(f"Câu hỏi {item.question_id}: Số lượng đáp án không khớp")
            source_options = Counter(o.option_id for o in source.options)
            shown_options = Counter(o.option_id for o in item.presented_options)
            if source_options != shown_options:
                errors.append(f"Câu hỏi {item.question_id}: Đáp án không khớp với đề gốc")

        return len(errors) == 0, errors

    @classmethod
    def create_shuffle_preview(cls,
                               questions: Sequence[Question],
                               config: AntiCheatConfig,
                               sample_student_ids: Sequence[str],
                               assignment_id: str) -> List[Tuple[str, List[PresentedQuestion]]]:
        """Preview bố cục của vài học sinh mẫu cho giáo viên"""
        return [
            (student_id, cls.present_exam(questions, student_id, assignment_id, config))
            for student_id in sample_student_ids
        ]

    @staticmethod
    def _question_order_difference(first: Sequence[PresentedQuestion],
                                   second: Sequence[PresentedQuestion]) -> float:
        if len(first) != len(second):
            return 1.0
        if not first:
            return 0.0
        differences = sum(
            1 for a, b in zip(first, second) if a.question_id != b.question_id
        )
        return differences / len(first)

    @staticmethod
    def _option_order_difference(first: Sequence[PresentedQuestion],
                                 second: Sequence[PresentedQuestion]) -> float:
        if len(first) != len(second):
            return 1.0

        second_by_id = {q.question_id: q for q in second}
        total_differences = 0
        total_options = 0
        for question in first:
            other = second_by_id.get(question.question_id)
            if other is None or len(other.presented_options) != len(question.presented_options):
                continue
            total_differences += sum(
                1 for a, b in zip(question.presented_options, other.presented_options)
                if a.option_id != b.option_id
            )
            total_options += len(question.presented_options)

        return total_differences / total_options if total_options > 0 else 0.0

    @classmethod
    def calculate_shuffle_diversity(
            cls, previews: Sequence[Tuple[str, List[PresentedQuestion]]]) -> Dict[str, float]:
        """
        Độ khác biệt trung bình giữa các cặp bố cục (0 = giống hệt, 1 = khác hoàn toàn)

        Returns:
            Dict gồm question_order_diversity, option_order_diversity, average_difference
        """
        if len(previews) < 2:
            return {
                "question_order_diversity": 0.0,
                "option_order_diversity": 0.0,
                "average_difference": 0.0
            }

        question_diffs = []
        option_diffs = []
        for i in range(len(previews)):
            for j in range(i + 1, len(previews)):
                first = previews[i][1]
                second = previews[j][1]
                question_diffs.append(cls._question_order_difference(first, second))
                option_diffs.append(cls._option_order_difference(first, second))

        question_diversity = float(np.mean(question_diffs))
        option_diversity = float(np.mean(option_diffs))
        return {
            "question_order_diversity": question_diversity,
            "option_order_diversity": option_diversity,
            "average_difference": (question_diversity + option_diversity) / 2
        }

    @staticmethod
    def kendall_tau_distance(first: Sequence, second: Sequence) -> float:
        """
        Khoảng cách Kendall tau chuẩn hóa giữa 2 hoán vị

        Returns:
            Tỷ lệ cặp bị đảo thứ tự trong [0, 1]; 1.0 nếu không cùng tập phần tử
        """
        if len(first) != len(second) or set(first) != set(second):
            return 1.0
        n = len(first)
        if n < 2:
            return 0.0

        position = {item: index for index, item in enumerate(second)}
        inversions = 0
        for i in range(n):
            for j in range(i + 1, n):
                if position[first[i]] > position[first[j]]:
                    inversions += 1

        return inversions / (n * (n - 1) / 2)
