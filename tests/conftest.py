"""
Pytest Configuration
"""
import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.anti_cheat_config import AntiCheatConfig
from models.exam_event import ExamEvent
from models.question import Difficulty, Option, Question, QuestionMetadata


BASE_TIME = datetime(2024, 5, 1, 8, 0, 0, tzinfo=timezone.utc)


def make_question(question_id, option_count=4, difficulty=None, category=None,
                  importance=None, estimated_time=None, content=None):
    """Tạo câu hỏi mẫu với option_count đáp án"""
    metadata = None
    if any(v is not None for v in (difficulty, category, importance, estimated_time)):
        metadata = QuestionMetadata(
            difficulty=difficulty,
            category=category,
            importance=importance,
            estimated_time=estimated_time
        )

    return Question(
        question_id=question_id,
        content=content or f"Question {question_id}",
        options=[
            Option(
                option_id=f"{question_id}-opt{i}",
                label=chr(65 + i),
                content=f"Option {i} of {question_id}",
                is_correct=(i == 0)
            )
            for i in range(option_count)
        ],
        metadata=metadata
    )


def make_event(event_type, seconds=0, student_id="S", attempt=1, assignment_id="A1"):
    return ExamEvent(
        assignment_id=assignment_id,
        student_id=student_id,
        attempt=attempt,
        event_type=event_type,
        created_at=BASE_TIME + timedelta(seconds=seconds)
    )


@pytest.fixture
def questions():
    """Bộ 6 câu hỏi, mỗi câu 4 đáp án"""
    return [make_question(f"q{i}") for i in range(6)]


@pytest.fixture
def shuffle_all():
    return AntiCheatConfig(shuffle_questions=True, shuffle_options=True)


@pytest.fixture
def shuffle_none():
    return AntiCheatConfig(shuffle_questions=False, shuffle_options=False)


@pytest.fixture
def tagged_questions():
    """Câu hỏi có metadata tường minh: 2 dễ, 2 trung bình, 1 khó, 2 chủ đề"""
    return [
        make_question("e1", difficulty=Difficulty.EASY, category="Math", estimated_time=60),
        make_question("e2", difficulty=Difficulty.EASY, category="History", estimated_time=60),
        make_question("m1", difficulty=Difficulty.MEDIUM, category="Math", estimated_time=60),
        make_question("m2", difficulty=Difficulty.MEDIUM, category="History", estimated_time=60),
        make_question("h1", difficulty=Difficulty.HARD, category="Math", estimated_time=60),
    ]
