from __future__ import annotations

import logging
import random

from rich.console import Console

from fixtures import make_bank

from quiz_runner.quiz.bank import Question, QuestionBank
from quiz_runner.quiz.console import (
    ConsoleRunResult,
    render_results,
    run_console_quiz,
)
from quiz_runner.quiz.session import Phase, QuizResults, QuizSession

ANSWERS = {"2+2": "4", "Capital of France": "Paris"}


def make_console() -> Console:
    return Console(record=True, width=100, force_terminal=True)


def answering(session: QuizSession, wrong: set[str] | None = None):
    """Input provider that answers from the session's current question."""

    wrong = wrong or set()

    def _provider() -> str:
        prompt = session.current_question()
        if prompt in wrong:
            return "definitely wrong"
        return "  " + ANSWERS[prompt].upper() + " "

    return _provider


def test_run_console_quiz_all_correct(small_bank) -> None:
    console = make_console()
    session = QuizSession(small_bank, rng=random.Random(5))

    result = run_console_quiz(session, console, answering(session))

    assert isinstance(result, ConsoleRunResult)
    assert result.exit_action == "finished"
    assert result.results == QuizResults(2, 2, ())
    assert session.phase is Phase.FINISHED
    output = console.export_text()
    assert "Question 1 / 2" in output
    assert "Question 2 / 2" in output
    assert "Correct." in output
    assert "Quiz Finished! Your Score: 2" in output
    assert "Review Missed Questions" not in output


def test_run_console_quiz_lists_missed_questions(small_bank) -> None:
    console = make_console()
    session = QuizSession(small_bank, rng=random.Random(5))

    result = run_console_quiz(
        session, console, answering(session, wrong={"2+2"})
    )

    assert result.results is not None
    assert result.results.final_score == 1
    assert result.results.missed == (Question("2+2", "4"),)
    output = console.export_text()
    assert "Incorrect. Correct answer: 4" in output
    assert "Review Missed Questions" in output
    assert "Quiz Finished! Your Score: 1" in output


def test_run_console_quiz_empty_bank() -> None:
    console = make_console()
    session = QuizSession(QuestionBank())

    result = run_console_quiz(session, console, lambda: "unused")

    assert result.exit_action == "empty"
    assert result.results == QuizResults(0, 0, ())
    assert "Question bank is empty." in console.export_text()


def test_run_console_quiz_interrupted() -> None:
    console = make_console()
    session = QuizSession(make_bank([("Q1", "A1"), ("Q2", "A2")]))
    answers = iter(["A1"])

    result = run_console_quiz(session, console, answers.__next__)

    assert result.exit_action == "quit"
    assert result.results is None
    assert session.phase is Phase.RUNNING
    assert session.position == 1
    assert "Quiz interrupted." in console.export_text()


def test_run_console_quiz_handles_eof() -> None:
    console = make_console()
    session = QuizSession(make_bank([("Q1", "A1")]))

    def _eof() -> str:
        raise EOFError

    result = run_console_quiz(session, console, _eof)

    assert result.exit_action == "quit"


def test_run_console_quiz_respects_limit(large_bank) -> None:
    console = make_console()
    session = QuizSession(large_bank, limit=3, rng=random.Random(1))
    calls = []

    def _provider() -> str:
        calls.append(session.current_question())
        return "x"

    result = run_console_quiz(session, console, _provider)

    assert len(calls) == 3
    assert result.results is not None
    assert result.results.total_asked == 3
    assert len(result.results.missed) == 3
    assert "Question 3 / 3" in console.export_text()


def test_run_console_quiz_logs_progress(small_bank, caplog) -> None:
    logger = logging.getLogger("quiz_runner.test.console")
    session = QuizSession(small_bank, rng=random.Random(2))

    with caplog.at_level(logging.DEBUG, logger=logger.name):
        run_console_quiz(
            session, make_console(), answering(session), logger=logger
        )

    messages = [record.getMessage() for record in caplog.records]
    assert "Quiz started" in messages
    assert messages.count("Answer graded") == 2
    assert "Quiz finished" in messages


def test_render_results_shows_accuracy() -> None:
    console = make_console()
    results = QuizResults(1, 2, (Question("Largest ocean?", "Pacific"),))

    render_results(console, results)

    output = console.export_text()
    assert "50.0%" in output
    assert "Largest ocean?" in output
    assert "Pacific" in output
