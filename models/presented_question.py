"""
Presented Question Model
"""

from dataclasses import dataclass, field
from typing import List, Optional
from models.question import Option, Question, QuestionMetadata


@dataclass
class PresentedOption:
    """Đáp án sau khi xáo: giữ nhãn gốc và nhãn hiển thị cho học sinh"""
    option: Option
    canonical_label: str
    presented_label: str

    @property
    def option_id(self) -> str:
        return self.option.option_id

    @property
    def content(self) -> str:
        return self.option.content


@dataclass
class PresentedQuestion:
    """
    Câu hỏi theo thứ tự hiển thị cho một học sinh

    original_index: vị trí trong đề gốc
    presented_index: vị trí sau khi xáo
    """
    question: Question
    original_index: int
    presented_options: List[PresentedOption] = field(default_factory=list)
    presented_index: int = 0
    metadata: Optional[QuestionMetadata] = None

    @property
    def question_id(self) -> str:
        return self.question.question_id
