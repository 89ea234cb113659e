"""
AntiCheatConfig Model
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class AntiCheatConfig:
    """
    Cấu hình chống gian lận của bài thi

    Core chỉ dùng shuffle_questions và shuffle_options,
    các trường còn lại thuộc về phần giao diện làm bài.
    """
    shuffle_questions: bool = True
    shuffle_options: bool = True
    single_question_mode: bool = False
    time_per_question: Optional[int] = None
    require_fullscreen: bool = False
    detect_tab_switch: bool = False
    disable_copy_paste: bool = False
    preset: str = "CUSTOM"
