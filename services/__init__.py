"""
Services module - Business logic
"""

from .question_shuffle_service import QuestionShuffleService
from .metadata_inference_service import MetadataInferenceService
from .randomization_service import (
    RandomizationService,
    RandomizationConfig,
    RandomizationStrategy,
    RandomizationResult,
)
from .event_severity_service import EventSeverityService, Severity
from .session_aggregator_service import SessionAggregatorService
from .suspicion_service import SuspicionService
from .exam_event_loader_service import ExamEventLoaderService
from .question_bank_loader_service import QuestionBankLoaderService
from .attempt_service import AttemptService

__all__ = [
    'QuestionShuffleService',
    'MetadataInferenceService',
    'RandomizationService',
    'RandomizationConfig',
    'RandomizationStrategy',
    'RandomizationResult',
    'EventSeverityService',
    'Severity',
    'SessionAggregatorService',
    'SuspicionService',
    'ExamEventLoaderService',
    'QuestionBankLoaderService',
    'AttemptService'
]
