"""Question banks, quiz sessions and the shells that drive them."""

from __future__ import annotations

from .bank import (
    Question,
    QuestionBank,
    ResourceUnavailableError,
    load_bank,
    load_default_bank,
    parse_questions,
)
from .session import (
    DEFAULT_LIMIT,
    AnswerOutcome,
    InvalidStateError,
    Phase,
    QuizResults,
    QuizSession,
    answers_match,
)
from .console import ConsoleRunResult, render_results, run_console_quiz
from .view import MissedQuestionsScreen, QuizApp, format_missed

__all__ = [
    "Question",
    "QuestionBank",
    "ResourceUnavailableError",
    "load_bank",
    "load_default_bank",
    "parse_questions",
    "DEFAULT_LIMIT",
    "AnswerOutcome",
    "InvalidStateError",
    "Phase",
    "QuizResults",
    "QuizSession",
    "answers_match",
    "ConsoleRunResult",
    "render_results",
    "run_console_quiz",
    "MissedQuestionsScreen",
    "QuizApp",
    "format_missed",
]
