"""Rich-powered console shell around :class:`QuizSession`.

The loop renders the current prompt, reads one line per question from an
injectable input provider and prints feedback after each answer. It keeps
no quiz state of its own; everything it shows comes from the session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .session import QuizResults, QuizSession

InputProvider = Callable[[], str]
ExitAction = Literal["finished", "quit", "empty"]


@dataclass(frozen=True)
class ConsoleRunResult:
    """Return value from :func:`run_console_quiz`.

    ``results`` is ``None`` only when the run was interrupted.
    """

    exit_action: ExitAction
    results: Optional[QuizResults]


def run_console_quiz(
    session: QuizSession,
    console: Console,
    input_provider: InputProvider,
    *,
    logger: Optional[logging.Logger] = None,
) -> ConsoleRunResult:
    """Run one full quiz in the console and return how it ended."""

    log = logger or logging.getLogger(__name__)
    session.start()
    log.info(
        "Quiz started",
        extra={
            "bank_size": len(session.bank),
            "total": session.total,
            "source": session.bank.source,
        },
    )

    if session.total == 0:
        console.print(
            Panel(
                "Question bank is empty.",
                title="Quiz",
                border_style="yellow",
            )
        )
        log.warning("Quiz finished immediately: empty question bank")
        return ConsoleRunResult("empty", session.results())

    while session.current is not None:
        _render_question(console, session)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Quiz interrupted.[/]")
            log.info(
                "Quiz interrupted",
                extra={"position": session.position, "score": session.score},
            )
            return ConsoleRunResult("quit", None)

        outcome = session.submit_answer(raw)
        log.debug(
            "Answer graded",
            extra={"correct": outcome.correct, "position": session.position},
        )
        if outcome.correct:
            console.print("[bold green]Correct.[/]")
        else:
            console.print(
                Text.assemble(
                    ("Incorrect. ", "bold red"),
                    "Correct answer: ",
                    (outcome.question.answer, "bold"),
                )
            )

    results = session.results()
    log.info(
        "Quiz finished",
        extra={
            "score": results.final_score,
            "total": results.total_asked,
            "missed": len(results.missed),
        },
    )
    render_results(console, results)
    return ConsoleRunResult("finished", results)


def render_results(console: Console, results: QuizResults) -> None:
    """Print the final score and, if any, the missed questions."""

    console.print()
    title = f"Quiz Finished! Your Score: {results.final_score}"
    console.rule(Text(title, style="bold magenta"))

    overview = Table(show_header=False, box=box.MINIMAL_DOUBLE_HEAD)
    overview.add_column("Metric", style="bold")
    overview.add_column("Value", justify="right")
    overview.add_row("Questions asked", str(results.total_asked))
    overview.add_row("Correct", str(results.final_score))
    overview.add_row("Missed", str(len(results.missed)))
    overview.add_row("Accuracy", f"{results.accuracy * 100:.1f}%")
    console.print(overview)

    if not results.missed:
        return

    missed = Table(
        title="Review Missed Questions", box=box.SIMPLE, expand=True
    )
    missed.add_column("#", justify="right")
    missed.add_column("Question", overflow="fold")
    missed.add_column("Correct answer")
    for idx, question in enumerate(results.missed, start=1):
        missed.add_row(str(idx), question.prompt, question.answer)
    console.print(missed)


def _render_question(console: Console, session: QuizSession) -> None:
    header = Text.assemble(
        (f"Question {session.position + 1}", "bold cyan"),
        (f" / {session.total}", "dim"),
    )
    console.print()
    console.rule(header)
    console.print(Text(session.current_question() or "", style="bold"))
    console.print(Text(f"Score: {session.score}", style="dim"))
