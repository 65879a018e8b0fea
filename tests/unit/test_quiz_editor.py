"""
Tests for quiz authoring and the reader-side quiz session.
"""

from __future__ import annotations

import pytest

from blockdoc.components.block_editors import QuizEditor, QuizSession
from blockdoc.domain.blocks import create_block
from blockdoc.domain.entities import QuizMetadata, QuizOption, QuizQuestion
from blockdoc.rules.models import QuizRules, Rules


@pytest.fixture
def editor() -> QuizEditor:
    return QuizEditor(create_block("quiz"))


def only_question(editor: QuizEditor) -> QuizQuestion:
    assert len(editor.questions) == 1
    return editor.questions[0]


class TestQuestions:
    def test_add_question_seeds_options(self, editor: QuizEditor) -> None:
        update = editor.add_question()
        question = update.metadata.questions[0]
        assert question.type == "multiple-choice"
        assert len(question.options) == 2
        assert question.points == 1
        assert question.id in editor.expanded

    def test_option_seed_follows_rules(self) -> None:
        rules = Rules(quiz=QuizRules(min_options=3, max_options=4))
        editor = QuizEditor(create_block("quiz"), rules=rules)
        editor.add_question()
        assert len(only_question(editor).options) == 3

    def test_update_text_fields(self, editor: QuizEditor) -> None:
        editor.add_question()
        question_id = only_question(editor).id
        update = editor.update_question(question_id, question="Why?", explanation="Because", points=3)
        changed = update.metadata.questions[0]
        assert (changed.question, changed.explanation, changed.points) == ("Why?", "Because", 3)

    def test_update_rejects_structural_fields(self, editor: QuizEditor) -> None:
        editor.add_question()
        assert editor.update_question(only_question(editor).id, type="true-false") is None
        assert editor.update_question("missing", question="x") is None

    def test_delete_question(self, editor: QuizEditor) -> None:
        editor.add_question()
        question_id = only_question(editor).id
        update = editor.delete_question(question_id)
        assert update.metadata.questions == []
        assert question_id not in editor.expanded
        assert editor.delete_question(question_id) is None

    def test_toggle_expanded(self, editor: QuizEditor) -> None:
        editor.add_question()
        question_id = only_question(editor).id
        assert editor.toggle_expanded(question_id) is False
        assert editor.toggle_expanded(question_id) is True


class TestQuestionType:
    def test_true_false_drops_options(self, editor: QuizEditor) -> None:
        editor.add_question()
        update = editor.set_question_type(only_question(editor).id, "true-false")
        question = update.metadata.questions[0]
        assert question.options is None
        assert question.correct_answer == "true"

    def test_true_false_answer_limited(self, editor: QuizEditor) -> None:
        editor.add_question()
        question_id = only_question(editor).id
        editor.set_question_type(question_id, "true-false")
        assert editor.update_question(question_id, correct_answer="maybe") is None
        assert editor.update_question(question_id, correct_answer="false") is not None

    def test_back_to_multiple_choice_reseeds_options(self, editor: QuizEditor) -> None:
        editor.add_question()
        question_id = only_question(editor).id
        editor.set_question_type(question_id, "short-answer")
        update = editor.set_question_type(question_id, "multiple-choice")
        question = update.metadata.questions[0]
        assert len(question.options) == 2
        assert question.correct_answer is None

    def test_same_type_is_noop(self, editor: QuizEditor) -> None:
        editor.add_question()
        assert editor.set_question_type(only_question(editor).id, "multiple-choice") is None


class TestOptions:
    @pytest.fixture
    def question_id(self, editor: QuizEditor) -> str:
        editor.add_question()
        return only_question(editor).id

    def test_add_until_max(self) -> None:
        rules = Rules(quiz=QuizRules(min_options=2, max_options=3))
        editor = QuizEditor(create_block("quiz"), rules=rules)
        editor.add_question()
        qid = only_question(editor).id
        assert editor.add_option(qid) is not None
        assert not editor.can_add_option(qid)
        assert editor.add_option(qid) is None

    def test_delete_not_below_min(self, editor: QuizEditor, question_id: str) -> None:
        first = only_question(editor).options[0].id
        assert not editor.can_delete_option(question_id)
        assert editor.delete_option(question_id, first) is None
        editor.add_option(question_id)
        update = editor.delete_option(question_id, first)
        assert first not in [o.id for o in update.metadata.questions[0].options]

    def test_delete_unknown_option(self, editor: QuizEditor, question_id: str) -> None:
        editor.add_option(question_id)
        assert editor.delete_option(question_id, "missing") is None

    def test_update_option_text(self, editor: QuizEditor, question_id: str) -> None:
        option_id = only_question(editor).options[1].id
        update = editor.update_option(question_id, option_id, "Paris")
        assert update.metadata.questions[0].options[1].text == "Paris"
        assert editor.update_option(question_id, "missing", "x") is None

    def test_single_correct_option(self, editor: QuizEditor, question_id: str) -> None:
        first, second = (o.id for o in only_question(editor).options)
        editor.set_correct_option(question_id, first)
        update = editor.set_correct_option(question_id, second)
        flags = [o.is_correct for o in update.metadata.questions[0].options]
        assert flags == [False, True]

    def test_true_false_has_no_options_to_add(self, editor: QuizEditor, question_id: str) -> None:
        editor.set_question_type(question_id, "true-false")
        assert not editor.can_add_option(question_id)


class TestQuizSettings:
    def test_flags(self, editor: QuizEditor) -> None:
        assert editor.set_show_results(True).metadata.show_results is True
        assert editor.set_randomize_options(True).metadata.randomize_options is True


@pytest.fixture
def quiz() -> QuizMetadata:
    return QuizMetadata(
        questions=[
            QuizQuestion(
                id="q1",
                question="2 + 2?",
                options=[QuizOption(id="a", text="3"), QuizOption(id="b", text="4", is_correct=True)],
            ),
            QuizQuestion(id="q2", question="Sky is green", type="true-false", correct_answer="false"),
        ]
    )


class TestQuizSession:
    def test_score_after_check(self, quiz: QuizMetadata) -> None:
        session = QuizSession(quiz)
        session.answer("q1", "b")
        session.answer("q2", "true")
        score = session.check_answers()
        assert (score.correct, score.total) == (1, 2)
        assert session.percentage == 50
        assert session.is_correct("q1")
        assert not session.is_correct("q2")

    def test_answers_locked_after_check(self, quiz: QuizMetadata) -> None:
        session = QuizSession(quiz)
        session.check_answers()
        assert not session.answer("q1", "b")

    def test_unknown_question_ignored(self, quiz: QuizMetadata) -> None:
        assert not QuizSession(quiz).answer("nope", "a")

    def test_try_again_resets(self, quiz: QuizMetadata) -> None:
        session = QuizSession(quiz)
        session.answer("q1", "b")
        session.check_answers()
        session.try_again()
        assert session.answers == {}
        assert not session.checked
        assert session.answer("q1", "a")

    def test_progress_snapshot(self, quiz: QuizMetadata) -> None:
        session = QuizSession(quiz)
        session.answer("q1", "a")
        progress = session.progress
        session.answer("q1", "b")
        assert progress.answers == {"q1": "a"}
        assert not progress.checked
