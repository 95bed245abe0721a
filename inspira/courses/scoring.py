"""
Quiz Scorer
Pure functions over a course's questions and the learner's answer sheet.

An answer sheet maps question index -> chosen option index. It is sparse:
unanswered questions are simply absent and count as incorrect.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Union

from inspira.courses.models import Module, Question

AnswerSheet = Mapping[int, Optional[int]]


@dataclass(frozen=True)
class Tally:
    correct: int = 0
    answered: int = 0
    total: int = 0

    @property
    def unanswered(self) -> int:
        return self.total - self.answered

    @property
    def score(self) -> int:
        return percentage(self.correct, self.total)

    def __add__(self, other: "Tally") -> "Tally":
        return Tally(
            self.correct + other.correct,
            self.answered + other.answered,
            self.total + other.total,
        )


def percentage(correct: int, total: int) -> int:
    """round(100 * correct / total) with half-up rounding; 0 when there is nothing to score"""
    if total <= 0:
        return 0
    return math.floor(100 * correct / total + 0.5)


def _correct_answer(question: Union[Question, dict]):
    if isinstance(question, dict):
        return question.get("correct_answer")
    return question.correct_answer


def is_correct(question: Union[Question, dict], answer: Optional[int]) -> bool:
    """Exact index equality, no partial credit"""
    return answer is not None and answer == _correct_answer(question)


def tally_questions(questions: Iterable[Union[Question, dict]], answers: AnswerSheet) -> Tally:
    correct = answered = total = 0
    for index, question in enumerate(questions):
        total += 1
        answer = answers.get(index)
        if answer is None:
            continue
        answered += 1
        if is_correct(question, answer):
            correct += 1
    return Tally(correct, answered, total)


def _quiz_questions(module: Union[Module, dict]) -> Optional[List]:
    if isinstance(module, dict):
        quiz = module.get("quiz")
        return None if quiz is None else quiz.get("questions", [])
    return None if module.quiz is None else module.quiz.questions


def module_score(module: Union[Module, dict], answers: AnswerSheet) -> int:
    return score_module(module, answers).score


def score_module(module: Union[Module, dict], answers: AnswerSheet) -> Tally:
    """Tally for a single module; a module without a quiz scores 0 out of 0"""
    questions = _quiz_questions(module)
    if questions is None:
        return Tally()
    return tally_questions(questions, answers)


def score_course(modules: Iterable[Union[Module, dict]], answers: AnswerSheet) -> Tally:
    """
    Aggregate tally over every module that has a quiz.
    The same answer sheet is checked against each module's question list.
    """
    tally = Tally()
    for module in modules:
        if _quiz_questions(module) is None:
            continue
        tally = tally + score_module(module, answers)
    return tally


def course_score(modules: Iterable[Union[Module, dict]], answers: AnswerSheet) -> int:
    return score_course(modules, answers).score
