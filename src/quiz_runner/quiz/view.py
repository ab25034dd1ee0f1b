"""Textual front end for a :class:`QuizSession`."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static

from .bank import Question
from .session import AnswerOutcome, InvalidStateError, Phase, QuizSession

IDLE_TEXT = "Press 'Start Quiz' to begin"


def format_missed(missed: Sequence[Question]) -> str:
    """Render missed questions one per line with their correct answers."""

    lines = ["Missed Questions:"]
    for question in missed:
        lines.append(f"{question.prompt} | Correct Answer: {question.answer}")
    return "\n".join(lines)


class MissedQuestionsScreen(ModalScreen[None]):
    """Modal listing each missed question and its answer."""

    DEFAULT_CSS = """
MissedQuestionsScreen { align: center middle; }
#review { width: 70; height: auto; border: thick $accent; padding: 1 2; }
#review-title { text-style: bold; }
"""
    BINDINGS = [("escape", "close", "Close")]

    def __init__(self, missed: Sequence[Question]) -> None:
        super().__init__()
        self.missed = tuple(missed)

    def compose(self) -> ComposeResult:
        with Vertical(id="review"):
            yield Static("Review Missed Questions", id="review-title")
            yield Static(format_missed(self.missed), id="review-body")
            yield Button("OK", id="ok", variant="primary")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "ok":
            self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)


class QuizApp(App):
    """Single-window quiz driven by a :class:`QuizSession`.

    All state lives in the session; the widgets are redrawn from it after
    every action.
    """

    CSS = """
Screen { align: center middle; }
#quiz { width: 60; height: auto; }
#quiz > * { margin-bottom: 1; }
"""
    TITLE = "Quiz App"

    def __init__(
        self,
        session: QuizSession,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__()
        self.session = session
        self._log = logger or logging.getLogger(__name__)

    def compose(self) -> ComposeResult:
        with Vertical(id="quiz"):
            yield Button("Start Quiz", id="start", variant="primary")
            yield Static(IDLE_TEXT, id="question")
            yield Input(placeholder="Your answer", id="answer")
            yield Button("Submit", id="submit")
            yield Static(self.score_text(), id="score")

    # Text helpers read straight from the session so they work without a
    # running App.
    def question_text(self) -> str:
        phase = self.session.phase
        if phase is Phase.IDLE:
            return IDLE_TEXT
        if phase is Phase.FINISHED:
            return f"Quiz Finished! Your Score: {self.session.score}"
        return self.session.current_question() or ""

    def score_text(self) -> str:
        return f"Score: {self.session.score}"

    def start_quiz(self) -> None:
        self.session.start()
        self._log.info(
            "Quiz started",
            extra={"bank_size": len(self.session.bank)},
        )
        self._refresh_widgets(clear_answer=True)
        if self.session.phase is Phase.FINISHED:
            self._finish()

    def submit(self, text: str) -> Optional[AnswerOutcome]:
        """Grade ``text``; returns ``None`` when no quiz is in progress."""

        try:
            outcome = self.session.submit_answer(text)
        except InvalidStateError as exc:
            self._log.debug("Ignored submission", extra={"reason": str(exc)})
            return None
        self._log.debug(
            "Answer graded",
            extra={
                "correct": outcome.correct,
                "position": self.session.position,
            },
        )
        self._refresh_widgets(clear_answer=True)
        if outcome.finished:
            self._finish()
        return outcome

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "start":
            self.start_quiz()
        elif event.button.id == "submit":
            self.submit(self._answer_value())

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.submit(event.value)

    def _finish(self) -> None:
        results = self.session.results()
        self._log.info(
            "Quiz finished",
            extra={
                "score": results.final_score,
                "total": results.total_asked,
                "missed": len(results.missed),
            },
        )
        if results.missed and self.is_running:
            self.push_screen(MissedQuestionsScreen(results.missed))

    def _answer_value(self) -> str:
        if not self.is_running:
            return ""
        try:
            return self.query_one("#answer", Input).value
        except NoMatches:
            return ""

    def _refresh_widgets(self, *, clear_answer: bool = False) -> None:
        if not self.is_running:
            return
        try:
            self.query_one("#question", Static).update(self.question_text())
            self.query_one("#score", Static).update(self.score_text())
            self.query_one("#start", Button).disabled = (
                self.session.phase is Phase.RUNNING
            )
            if clear_answer:
                self.query_one("#answer", Input).value = ""
        except NoMatches:
            return
