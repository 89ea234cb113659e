"""
Models module - Các class định nghĩa dữ liệu
"""

from .question import Question, Option, QuestionMetadata, QuestionType, Difficulty
from .presented_question import PresentedQuestion, PresentedOption
from .anti_cheat_config import AntiCheatConfig
from .exam_event import ExamEvent
from .derived_session import DerivedSession, SessionStatus
from .attempt_record import AttemptRecord
from .seeded_random import SeededRandom

__all__ = [
    'Question',
    'Option',
    'QuestionMetadata',
    'QuestionType',
    'Difficulty',
    'PresentedQuestion',
    'PresentedOption',
    'AntiCheatConfig',
    'ExamEvent',
    'DerivedSession',
    'SessionStatus',
    'AttemptRecord',
    'SeededRandom'
]
