"""
Quiz authoring and answering.

QuizEditor edits the questions stored in the block. QuizSession holds one
reader's answers; it never changes the block.
"""

from __future__ import annotations

from typing import Any, ClassVar

from blockdoc.domain.entities import BlockType, QuestionType, QuizMetadata, QuizOption, QuizQuestion
from blockdoc.domain.quiz import QuizProgress, QuizScore, is_answer_correct, score_answers
from blockdoc.rules.models import QuizRules

from .base import BlockEditor, BlockUpdate


class QuizEditor(BlockEditor):
    block_types: ClassVar[frozenset[BlockType]] = frozenset(["quiz"])

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.expanded: set[str] = set()

    @property
    def metadata(self) -> QuizMetadata:
        metadata = self.block.metadata
        return metadata if isinstance(metadata, QuizMetadata) else QuizMetadata()

    @property
    def questions(self) -> list[QuizQuestion]:
        return list(self.metadata.questions)

    @property
    def bounds(self) -> QuizRules:
        return self.rules.quiz

    def _find(self, question_id: str) -> QuizQuestion | None:
        return next((q for q in self.metadata.questions if q.id == question_id), None)

    def _with_questions(self, questions: list[QuizQuestion]) -> BlockUpdate:
        return self._emit(metadata=self.metadata.model_copy(update={"questions": questions}))

    def _replace_question(self, question: QuizQuestion) -> BlockUpdate:
        return self._with_questions([question if q.id == question.id else q for q in self.metadata.questions])

    # --- Questions ---

    def add_question(self) -> BlockUpdate:
        question = QuizQuestion(
            question="",
            type="multiple-choice",
            options=[QuizOption() for _ in range(self.bounds.min_options)],
            explanation="",
            points=1,
        )
        self.expanded.add(question.id)
        return self._with_questions([*self.metadata.questions, question])

    def update_question(self, question_id: str, **changes: Any) -> BlockUpdate | None:
        """Change text fields of a question (question, explanation, points, correct_answer)."""
        question = self._find(question_id)
        allowed = {"question", "explanation", "points", "correct_answer"}
        if question is None or not changes or not set(changes) <= allowed:
            return None
        if "correct_answer" in changes and question.type == "true-false":
            if changes["correct_answer"] not in ("true", "false"):
                return None
        return self._replace_question(question.model_copy(update=changes))

    def delete_question(self, question_id: str) -> BlockUpdate | None:
        if self._find(question_id) is None:
            return None
        self.expanded.discard(question_id)
        return self._with_questions([q for q in self.metadata.questions if q.id != question_id])

    def set_question_type(self, question_id: str, question_type: QuestionType) -> BlockUpdate | None:
        question = self._find(question_id)
        if question is None or question.type == question_type:
            return None

        changes: dict[str, Any] = {"type": question_type}
        if question_type == "multiple-choice":
            options = list(question.options or [])
            while len(options) < self.bounds.min_options:
                options.append(QuizOption())
            changes["options"] = options
            changes["correct_answer"] = None
        elif question_type == "true-false":
            changes["options"] = None
            changes["correct_answer"] = "true"
        else:
            changes["options"] = None
        return self._replace_question(question.model_copy(update=changes))

    def toggle_expanded(self, question_id: str) -> bool:
        """Expand or collapse a question in the authoring view; returns the new state."""
        if question_id in self.expanded:
            self.expanded.discard(question_id)
            return False
        self.expanded.add(question_id)
        return True

    # --- Options ---

    def can_add_option(self, question_id: str) -> bool:
        question = self._find(question_id)
        return (
            question is not None
            and question.type == "multiple-choice"
            and len(question.options or []) < self.bounds.max_options
        )

    def can_delete_option(self, question_id: str) -> bool:
        question = self._find(question_id)
        return question is not None and len(question.options or []) > self.bounds.min_options

    def add_option(self, question_id: str) -> BlockUpdate | None:
        question = self._find(question_id)
        if question is None or not self.can_add_option(question_id):
            return None
        options = [*(question.options or []), QuizOption()]
        return self._replace_question(question.model_copy(update={"options": options}))

    def update_option(self, question_id: str, option_id: str, text: str) -> BlockUpdate | None:
        question = self._find(question_id)
        if question is None or not any(o.id == option_id for o in question.options or []):
            return None
        options = [
            o.model_copy(update={"text": text}) if o.id == option_id else o for o in question.options or []
        ]
        return self._replace_question(question.model_copy(update={"options": options}))

    def delete_option(self, question_id: str, option_id: str) -> BlockUpdate | None:
        question = self._find(question_id)
        if question is None or not self.can_delete_option(question_id):
            return None
        options = [o for o in question.options or [] if o.id != option_id]
        if len(options) == len(question.options or []):
            return None
        return self._replace_question(question.model_copy(update={"options": options}))

    def set_correct_option(self, question_id: str, option_id: str) -> BlockUpdate | None:
        question = self._find(question_id)
        if question is None or not any(o.id == option_id for o in question.options or []):
            return None
        options = [o.model_copy(update={"is_correct": o.id == option_id}) for o in question.options or []]
        return self._replace_question(question.model_copy(update={"options": options}))

    # --- Quiz settings ---

    def set_show_results(self, show: bool) -> BlockUpdate:
        return self._emit(metadata=self.metadata.model_copy(update={"show_results": show}))

    def set_randomize_options(self, randomize: bool) -> BlockUpdate:
        return self._emit(metadata=self.metadata.model_copy(update={"randomize_options": randomize}))


class QuizSession:
    """One reader answering one quiz block."""

    def __init__(self, metadata: QuizMetadata) -> None:
        self.metadata = metadata
        self.answers: dict[str, str] = {}
        self.checked = False

    def answer(self, question_id: str, answer: str) -> bool:
        """Record an answer; ignored after checking or for unknown questions."""
        if self.checked or not any(q.id == question_id for q in self.metadata.questions):
            return False
        self.answers[question_id] = answer
        return True

    def check_answers(self) -> QuizScore:
        self.checked = True
        return self.score()

    def score(self) -> QuizScore:
        return score_answers(self.metadata.questions, self.answers)

    @property
    def percentage(self) -> int:
        return self.score().percentage

    def is_correct(self, question_id: str) -> bool:
        question = next((q for q in self.metadata.questions if q.id == question_id), None)
        return question is not None and is_answer_correct(question, self.answers.get(question_id))

    def try_again(self) -> None:
        self.answers = {}
        self.checked = False

    @property
    def progress(self) -> QuizProgress:
        """Immutable view of the reader state, for the renderer."""
        return QuizProgress(answers=dict(self.answers), checked=self.checked)
