"""
Tests for QuestionShuffleService
"""
from collections import Counter

import pytest

from conftest import make_question
from models.anti_cheat_config import AntiCheatConfig
from services.errors import LabelNotFoundError
from services.question_shuffle_service import QuestionShuffleService


def layout_signature(presented):
    return [
        (p.question_id, tuple(o.option_id for o in p.presented_options), tuple(o.presented_label for o in p.presented_options))
        for p in presented
    ]


class TestPresentExam:

    def test_bijection(self, questions, shuffle_all):
        presented = QuestionShuffleService.present_exam(questions, "S1", "A1", shuffle_all)

        assert Counter(p.question_id for p in presented) == Counter(q.question_id for q in questions)
        by_id = {q.question_id: q for q in questions}
        for p in presented:
            assert Counter(o.option_id for o in p.presented_options) == \
                Counter(o.option_id for o in by_id[p.question_id].options)

        is_valid, errors = QuestionShuffleService.validate_presented_questions(questions, presented)
        assert is_valid
        assert errors == []

    def test_deterministic(self, questions, shuffle_all):
        first = QuestionShuffleService.present_exam(questions, "S1", "A1", shuffle_all)
        second = QuestionShuffleService.present_exam(questions, "S1", "A1", shuffle_all)
        assert layout_signature(first) == layout_signature(second)

    def test_config_off_keeps_authoring_order(self, questions, shuffle_none):
        presented = QuestionShuffleService.present_exam(questions, "S1", "A1", shuffle_none)

        assert [p.question_id for p in presented] == [q.question_id for q in questions]
        assert [p.original_index for p in presented] == list(range(len(questions)))
        for p, q in zip(presented, questions):
            assert [o.option_id for o in p.presented_options] == [o.option_id for o in q.options]

    def test_options_only_keeps_question_order(self, questions):
        config = AntiCheatConfig(shuffle_questions=False, shuffle_options=True)
        presented = QuestionShuffleService.present_exam(questions, "S1", "A1", config)
        assert [p.question_id for p in presented] == [q.question_id for q in questions]

    def test_original_index_points_to_source(self, questions, shuffle_all):
        presented = QuestionShuffleService.present_exam(questions, "S9", "A1", shuffle_all)
        for position, p in enumerate(presented):
            assert questions[p.original_index].question_id == p.question_id
            assert p.presented_index == position

    def test_presented_labels_are_sequential(self, questions, shuffle_all):
        presented = QuestionShuffleService.present_exam(questions, "S1", "A1", shuffle_all)
        for p in presented:
            assert [o.presented_label for o in p.presented_options] == ["A", "B", "C", "D"]

    def test_canonical_labels_unchanged(self, questions, shuffle_all):
        presented = QuestionShuffleService.present_exam(questions, "S1", "A1", shuffle_all)
        for p in presented:
            for o in p.presented_options:
                assert o.canonical_label == o.option.label

    def test_empty_question_list(self, shuffle_all):
        assert QuestionShuffleService.present_exam([], "S1", "A1", shuffle_all) == []

    def test_zero_option_question(self, shuffle_all):
        presented = QuestionShuffleService.present_exam(
            [make_question("empty", option_count=0)], "S1", "A1", shuffle_all
        )
        assert len(presented) == 1
        assert presented[0].presented_options == []

    def test_diversity_between_students(self, shuffle_all):
        questions = [make_question(f"q{i}", option_count=4) for i in range(5)]
        reference = layout_signature(
            QuestionShuffleService.present_exam(questions, "student-0", "A1", shuffle_all)
        )

        identical = 0
        for i in range(1, 51):
            other = QuestionShuffleService.present_exam(questions, f"student-{i}", "A1", shuffle_all)
            if layout_signature(other) == reference:
                identical += 1

        assert identical <= 1


class TestLabelConversion:

    def test_round_trip(self, questions, shuffle_all):
        presented = QuestionShuffleService.present_exam(questions, "S1", "A1", shuffle_all)
        for p in presented:
            for o in p.presented_options:
                shown = QuestionShuffleService.to_presented(o.canonical_label, p.presented_options)
                assert QuestionShuffleService.to_canonical(shown, p.presented_options) == o.canonical_label

    def test_list_answers_converted_element_wise(self, questions, shuffle_all):
        options = QuestionShuffleService.present_exam(questions, "S1", "A1", shuffle_all)[0].presented_options
        expected = [options[0].canonical_label, options[2].canonical_label]
        assert QuestionShuffleService.to_canonical(["A", "C"], options) == expected

    def test_unknown_label_raises(self, questions, shuffle_all):
        options = QuestionShuffleService.present_exam(questions, "S1", "A1", shuffle_all)[0].presented_options
        with pytest.raises(LabelNotFoundError):
            QuestionShuffleService.to_canonical("Z", options)
        with pytest.raises(LabelNotFoundError):
            QuestionShuffleService.to_presented(["A", "Q"], options)


class TestHelpers:

    def test_option_labels(self):
        assert QuestionShuffleService.generate_option_labels(3) == ["A", "B", "C"]
        labels = QuestionShuffleService.generate_option_labels(28)
        assert labels[25] == "Z"
        assert labels[26:] == ["AA", "AB"]

    def test_deterministic_seed(self):
        assert QuestionShuffleService.generate_deterministic_seed("S1", "A1") == "S1-A1"

    def test_attempt_seed_has_time_suffix(self):
        seed = QuestionShuffleService.generate_attempt_seed("S1", "A1", now=36.0)
        assert seed == "S1-A1-rs0"

    def test_question_order_mapping(self, questions, shuffle_all):
        presented = QuestionShuffleService.present_exam(questions, "S1", "A1", shuffle_all)
        original_to_presented, presented_to_original = \
            QuestionShuffleService.create_question_order_mapping(presented)

        for original_index, presented_index in original_to_presented.items():
            assert presented_to_original[presented_index] == original_index
        assert sorted(original_to_presented) == list(range(len(questions)))

    def test_validate_detects_missing_question(self, questions, shuffle_all):
        presented = QuestionShuffleService.present_exam(questions, "S1", "A1", shuffle_all)
        is_valid, errors = QuestionShuffleService.validate_presented_questions(questions, presented[1:])
        assert not is_valid
        assert errors

    def test_preview_and_diversity(self, questions, shuffle_all, shuffle_none):
        previews = QuestionShuffleService.create_shuffle_preview(
            questions, shuffle_all, ["S1", "S2", "S3"], "A1"
        )
        assert [student for student, _ in previews] == ["S1", "S2", "S3"]

        diversity = QuestionShuffleService.calculate_shuffle_diversity(previews)
        assert 0.0 < diversity["average_difference"] <= 1.0

        same = QuestionShuffleService.create_shuffle_preview(
            questions, shuffle_none, ["S1", "S2"], "A1"
        )
        diversity = QuestionShuffleService.calculate_shuffle_diversity(same)
        assert diversity["question_order_diversity"] == 0.0
        assert diversity["option_order_diversity"] == 0.0

    def test_diversity_needs_two_previews(self):
        result = QuestionShuffleService.calculate_shuffle_diversity([])
        assert result["average_difference"] == 0.0

    def test_kendall_tau(self):
        assert QuestionShuffleService.kendall_tau_distance([1, 2, 3], [1, 2, 3]) == 0.0
        assert QuestionShuffleService.kendall_tau_distance([1, 2, 3], [3, 2, 1]) == 1.0
        assert QuestionShuffleService.kendall_tau_distance([1, 2, 3], [2, 1, 3]) == pytest.approx(1 / 3)
        assert QuestionShuffleService.kendall_tau_distance([1, 2], [1, 2, 3]) == 1.0
