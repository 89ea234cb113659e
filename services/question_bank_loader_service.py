"""
Question Bank Loader Service
"""

import json
from typing import Dict, List

from models.question import Option, Question, QuestionMetadata
from services.errors import QuestionBankError


class QuestionBankLoaderService:
    """
    Service để tải ngân hàng câu hỏi từ dữ liệu thô

    Metadata được đọc tường minh tại đây; trường thiếu để None
    cho MetadataInferenceService xử lý sau.
    """

    @staticmethod
    def load_option(row: Dict) -> Option:
        return Option(
            option_id=str(row.get('option_id', row.get('id', ''))),
            label=str(row.get('label', '')),
            content=str(row.get('content', '')),
            is_correct=bool(row.get('is_correct', row.get('isCorrect', False)))
        )

    @staticmethod
    def load_metadata(row: Dict) -> QuestionMetadata:
        try:
            return QuestionMetadata(
                difficulty=row.get('difficulty') or None,
                category=row.get('category') or None,
                importance=row.get('importance'),
                estimated_time=row.get('estimated_time', row.get('estimatedTime')),
                prerequisites=row.get('prerequisites'),
                tags=row.get('tags')
            )
        except ValueError as e:
            raise QuestionBankError(f"Metadata không hợp lệ: {e}")

    @classmethod
    def load_question(cls, row: Dict) -> Question:
        """
        Tạo Question từ một dict

        Raises:
            QuestionBankError: nếu thiếu id hoặc loại câu hỏi không hợp lệ
        """
        question_id = row.get('question_id', row.get('id'))
        if not question_id:
            raise QuestionBankError("Câu hỏi thiếu id")

        metadata_row = row.get('metadata')

        try:
            return Question(
                question_id=str(question_id),
                content=str(row.get('content', '')),
                question_type=row.get('question_type', row.get('type', 'SINGLE')),
                options=[cls.load_option(o) for o in row.get('options') or []],
                explanation=row.get('explanation'),
                metadata=cls.load_metadata(metadata_row) if isinstance(metadata_row, dict) else None
            )
        except QuestionBankError:
            raise
        except ValueError as e:
            raise QuestionBankError(f"Câu hỏi {question_id}: {e}")

    @classmethod
    def load_questions(cls, rows: List[Dict]) -> List[Question]:
        return [cls.load_question(row) for row in rows]

    @classmethod
    def load_bank_file(cls, path: str) -> Dict[str, List[Question]]:
        """
        Load file JSON dạng {assignment_id: [question, ...]}

        Args:
            path: Đường dẫn file ngân hàng câu hỏi

        Returns:
            Dict mapping assignment_id -> List[Question]
        """
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise QuestionBankError("File ngân hàng câu hỏi phải là object {assignment_id: [...]}")

        return {
            str(assignment_id): cls.load_questions(rows)
            for assignment_id, rows in data.items()
        }
