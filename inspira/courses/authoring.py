"""
Course authoring wizard

The admin builds a course one module at a time:

    COLLECTING_MODULES --save_module--> EDITING_QUIZ
    EDITING_QUIZ --save_quiz--> COLLECTING_MODULES (next module)
    EDITING_QUIZ --save_quiz--> PREVIEWING (after the last module)

Every handler takes the current AuthoringState and returns a new one; nothing is mutated in place.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

import pydantic

from inspira.courses.models import CourseCreate
from inspira.errors import ValidationError, validation_error_from


class AuthoringStep(str, Enum):
    COLLECTING_MODULES = "collecting_modules"
    EDITING_QUIZ = "editing_quiz"
    PREVIEWING = "previewing"


@dataclass(frozen=True)
class QuestionDraft:
    question: str = ""
    options: Tuple[str, ...] = ("", "")
    correct_answer: int = 0


@dataclass(frozen=True)
class QuizDraft:
    video_url: str = ""
    questions: Tuple[QuestionDraft, ...] = ()


@dataclass(frozen=True)
class ModuleDraft:
    title: str = ""
    content: str = ""
    video_url: str = ""
    quiz: QuizDraft = field(default_factory=QuizDraft)


@dataclass(frozen=True)
class AuthoringState:
    title: str = ""
    modules: Tuple[ModuleDraft, ...] = ()
    current_index: int = 0
    step: AuthoringStep = AuthoringStep.COLLECTING_MODULES

    @property
    def current_module(self) -> Optional[ModuleDraft]:
        if 0 <= self.current_index < len(self.modules):
            return self.modules[self.current_index]
        return None

    @property
    def is_last_module(self) -> bool:
        return self.current_index == len(self.modules) - 1


def _expect(state: AuthoringState, step: AuthoringStep):
    if state.step != step:
        raise ValidationError(
            f"Cannot do that while {state.step.value.replace('_', ' ')}",
            field="step",
        )


def _current(state: AuthoringState) -> ModuleDraft:
    module = state.current_module
    if module is None:
        raise ValidationError("No such module", field="module_index")
    return module


def _put_module(state: AuthoringState, module: ModuleDraft) -> Tuple[ModuleDraft, ...]:
    modules = list(state.modules)
    modules[state.current_index] = module
    return tuple(modules)


# ==================== TRANSITIONS ====================

def start(title: str, module_count: int) -> AuthoringState:
    if module_count < 1:
        raise ValidationError("A course needs at least one module", field="module_count")
    return AuthoringState(title=title, modules=tuple(ModuleDraft() for _ in range(module_count)))


def save_module(state: AuthoringState, title: str, content: str = "", video_url: str = "") -> AuthoringState:
    """Store the module text and move on to its quiz"""
    _expect(state, AuthoringStep.COLLECTING_MODULES)
    module = replace(_current(state), title=title, content=content, video_url=video_url)
    return replace(state, modules=_put_module(state, module), step=AuthoringStep.EDITING_QUIZ)


def save_quiz(state: AuthoringState, quiz: QuizDraft) -> AuthoringState:
    """Store the quiz, then advance to the next module or to the preview"""
    _expect(state, AuthoringStep.EDITING_QUIZ)
    modules = _put_module(state, replace(_current(state), quiz=quiz))
    if state.is_last_module:
        return replace(state, modules=modules, step=AuthoringStep.PREVIEWING)
    return replace(
        state,
        modules=modules,
        current_index=state.current_index + 1,
        step=AuthoringStep.COLLECTING_MODULES,
    )


def go_to_module(state: AuthoringState, index: int) -> AuthoringState:
    if not 0 <= index < len(state.modules):
        raise ValidationError("No such module", field="module_index")
    return replace(state, current_index=index, step=AuthoringStep.COLLECTING_MODULES)


def reset() -> AuthoringState:
    return AuthoringState()


# ==================== QUIZ EDITING ====================

def _question(quiz: QuizDraft, index: int) -> QuestionDraft:
    if not 0 <= index < len(quiz.questions):
        raise ValidationError("No such question", field="question_index")
    return quiz.questions[index]


def _put_question(quiz: QuizDraft, index: int, question: QuestionDraft) -> QuizDraft:
    questions = list(quiz.questions)
    questions[index] = question
    return replace(quiz, questions=tuple(questions))


def add_question(quiz: QuizDraft) -> QuizDraft:
    return replace(quiz, questions=quiz.questions + (QuestionDraft(),))


def remove_question(quiz: QuizDraft, index: int) -> QuizDraft:
    _question(quiz, index)
    return replace(quiz, questions=tuple(q for i, q in enumerate(quiz.questions) if i != index))


def add_option(quiz: QuizDraft, question_index: int) -> QuizDraft:
    question = _question(quiz, question_index)
    return _put_question(quiz, question_index, replace(question, options=question.options + ("",)))


def remove_option(quiz: QuizDraft, question_index: int, option_index: int) -> QuizDraft:
    """
    Drop an option; the correct answer shifts down when it sat at or after the removed slot.

    Raises:
        ValidationError: if either index is out of range
    """
    question = _question(quiz, question_index)
    if not 0 <= option_index < len(question.options):
        raise ValidationError("No such option", field="option_index")
    options = tuple(o for i, o in enumerate(question.options) if i != option_index)
    correct = question.correct_answer
    if correct >= option_index:
        correct = max(0, correct - 1)
    return _put_question(quiz, question_index, replace(question, options=options, correct_answer=correct))


# ==================== SUBMISSION ====================

def to_course(state: AuthoringState, description: str = "", subject: str = "", professor_name: str = "") -> CourseCreate:
    """
    Build the course payload from a finished wizard.
    Rejects the submission unless every question has at least 2 options and an in-bounds correct answer.
    """
    _expect(state, AuthoringStep.PREVIEWING)
    payload = {
        "title": state.title,
        "description": description,
        "subject": subject,
        "professor_name": professor_name,
        "content_title": state.title,
        "modules": [
            {
                "title": module.title,
                "content": module.content,
                "video_url": module.video_url or None,
                "quiz": {
                    "video_url": module.quiz.video_url or None,
                    "questions": [
                        {
                            "question": q.question,
                            "options": list(q.options),
                            "correct_answer": q.correct_answer,
                        }
                        for q in module.quiz.questions
                    ],
                },
            }
            for module in state.modules
        ],
    }
    try:
        return CourseCreate(**payload)
    except pydantic.ValidationError as e:
        raise validation_error_from(e.errors())
