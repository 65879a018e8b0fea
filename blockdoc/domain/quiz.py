from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from blockdoc.domain.entities import QuizQuestion


@dataclass(frozen=True)
class QuizScore:
    correct: int
    total: int

    @property
    def percentage(self) -> int:
        """Whole percent, rounded half up; 0 for an empty quiz."""
        if self.total == 0:
            return 0
        return (self.correct * 200 + self.total) // (self.total * 2)


@dataclass(frozen=True)
class QuizProgress:
    """A reader's answers for one quiz block and whether they were checked."""

    answers: Mapping[str, str] = field(default_factory=dict)
    checked: bool = False


def correct_option_id(question: QuizQuestion) -> str | None:
    for option in question.options or []:
        if option.is_correct:
            return option.id
    return None


def is_answer_correct(question: QuizQuestion, answer: str | None) -> bool:
    # Short-answer questions are never auto-graded.
    if answer is None:
        return False
    if question.type == "multiple-choice":
        return answer == correct_option_id(question)
    if question.type == "true-false":
        return question.correct_answer is not None and answer == question.correct_answer
    return False


def score_answers(questions: Sequence[QuizQuestion], answers: Mapping[str, str]) -> QuizScore:
    correct = sum(1 for q in questions if is_answer_correct(q, answers.get(q.id)))
    return QuizScore(correct=correct, total=len(questions))
