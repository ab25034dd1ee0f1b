"""Quiz session state machine.

A :class:`QuizSession` owns the score, the position and the missed
questions for one run through a :class:`~quiz_runner.quiz.bank.QuestionBank`.
Presentation code drives it with :meth:`QuizSession.start` and
:meth:`QuizSession.submit_answer` and re-renders from the returned values; the
session itself never performs I/O.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum

from .bank import Question, QuestionBank

__all__ = [
    "DEFAULT_LIMIT",
    "AnswerOutcome",
    "InvalidStateError",
    "Phase",
    "QuizResults",
    "QuizSession",
    "answers_match",
]

DEFAULT_LIMIT = 10


class InvalidStateError(RuntimeError):
    """Raised when a session operation is called outside its legal phase."""


class Phase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"


@dataclass(frozen=True)
class AnswerOutcome:
    """Result of grading a single submitted answer."""

    question: Question
    submitted: str
    correct: bool
    finished: bool


@dataclass(frozen=True)
class QuizResults:
    """Final report for a finished session."""

    final_score: int
    total_asked: int
    missed: tuple[Question, ...]

    @property
    def accuracy(self) -> float:
        if self.total_asked == 0:
            return 0.0
        return self.final_score / self.total_asked


def answers_match(submitted: str, expected: str) -> bool:
    """Case-insensitive equality after trimming surrounding whitespace."""

    return submitted.strip().casefold() == expected.strip().casefold()


class QuizSession:
    """Mutable state for one quiz run, reset on every :meth:`start`."""

    def __init__(
        self,
        bank: QuestionBank,
        *,
        limit: int = DEFAULT_LIMIT,
        rng: random.Random | None = None,
    ) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self._bank = bank
        self._limit = limit
        self._rng = rng if rng is not None else random.Random()
        self._order: list[int] = []
        self._position = 0
        self._score = 0
        self._missed: list[Question] = []
        self._phase = Phase.IDLE

    @property
    def bank(self) -> QuestionBank:
        return self._bank

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def position(self) -> int:
        return self._position

    @property
    def score(self) -> int:
        return self._score

    @property
    def missed(self) -> tuple[Question, ...]:
        return tuple(self._missed)

    @property
    def active_order(self) -> tuple[int, ...]:
        return tuple(self._order)

    @property
    def total(self) -> int:
        """Number of questions this run asks: ``min(limit, bank size)``."""

        return min(self._limit, len(self._order))

    @property
    def current(self) -> Question | None:
        if self._phase is not Phase.RUNNING or self._position >= self.total:
            return None
        return self._bank[self._order[self._position]]

    def start(self) -> str | None:
        """Reset all progress, reshuffle and return the first prompt.

        Returns ``None`` when the bank is empty, in which case the session
        is already finished.
        """

        self._missed.clear()
        self._score = 0
        self._position = 0
        self._order = list(range(len(self._bank)))
        self._rng.shuffle(self._order)
        self._phase = Phase.RUNNING
        self._advance()
        return self.current_question()

    def current_question(self) -> str | None:
        """Prompt to display now, or ``None`` once nothing is left to ask."""

        question = self.current
        return question.prompt if question is not None else None

    def submit_answer(self, text: str) -> AnswerOutcome:
        """Grade ``text`` against the current question and move on."""

        if self._phase is not Phase.RUNNING:
            raise InvalidStateError(
                f"Cannot submit an answer while {self._phase.value}."
            )
        question = self.current
        if question is None:
            raise InvalidStateError("No question left to answer.")

        submitted = text.strip()
        correct = answers_match(submitted, question.answer)
        if correct:
            self._score += 1
        else:
            self._missed.append(question)
        self._position += 1
        self._advance()
        return AnswerOutcome(
            question=question,
            submitted=submitted,
            correct=correct,
            finished=self._phase is Phase.FINISHED,
        )

    def results(self) -> QuizResults:
        if self._phase is not Phase.FINISHED:
            raise InvalidStateError(
                f"Results are only available once finished, not while "
                f"{self._phase.value}."
            )
        return QuizResults(
            final_score=self._score,
            total_asked=self.total,
            missed=tuple(self._missed),
        )

    def _advance(self) -> None:
        if self._position >= self._limit or self._position >= len(self._order):
            self._phase = Phase.FINISHED
