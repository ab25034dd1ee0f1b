from __future__ import annotations

import asyncio
import random

from textual.widgets import Button, Input

from fixtures import make_bank

from quiz_runner.quiz.bank import Question, QuestionBank
from quiz_runner.quiz.session import Phase, QuizSession
from quiz_runner.quiz import view as qv

ANSWERS = {"2+2": "4", "Capital of France": "paris"}


def test_format_missed_lists_prompt_and_answer() -> None:
    text = qv.format_missed(
        [Question("2+2", "4"), Question("Capital of France", "Paris")]
    )

    assert text.splitlines() == [
        "Missed Questions:",
        "2+2 | Correct Answer: 4",
        "Capital of France | Correct Answer: Paris",
    ]


def test_quiz_app_texts_follow_session(small_bank) -> None:
    session = QuizSession(small_bank, rng=random.Random(1))
    app = qv.QuizApp(session)

    assert app.question_text() == qv.IDLE_TEXT
    assert app.score_text() == "Score: 0"

    app.start_quiz()
    assert app.question_text() == session.current_question()

    app.submit(ANSWERS[session.current_question()])
    assert app.score_text() == "Score: 1"

    app.submit("wrong")
    assert session.phase is Phase.FINISHED
    assert app.question_text() == "Quiz Finished! Your Score: 1"


def test_quiz_app_submit_outside_running_is_ignored(small_bank) -> None:
    session = QuizSession(small_bank)
    app = qv.QuizApp(session)

    assert app.submit("4") is None
    assert session.phase is Phase.IDLE
    assert session.position == 0


def test_quiz_app_empty_bank_finishes_on_start() -> None:
    session = QuizSession(QuestionBank())
    app = qv.QuizApp(session)

    app.start_quiz()

    assert session.phase is Phase.FINISHED
    assert app.question_text() == "Quiz Finished! Your Score: 0"


def test_quiz_app_headless_run_all_correct(small_bank) -> None:
    session = QuizSession(small_bank, rng=random.Random(7))

    async def scenario() -> None:
        app = qv.QuizApp(session)
        async with app.run_test() as pilot:
            start = app.query_one("#start", Button)
            assert start.disabled is False

            await pilot.click("#start")
            await pilot.pause()
            assert session.phase is Phase.RUNNING
            assert start.disabled is True

            for _ in range(2):
                app.query_one("#answer", Input).focus()
                await pilot.press(*ANSWERS[session.current_question()])
                await pilot.press("enter")
                await pilot.pause()

            assert session.phase is Phase.FINISHED
            assert session.score == 2
            assert start.disabled is False
            assert not isinstance(app.screen, qv.MissedQuestionsScreen)

    asyncio.run(scenario())


def test_quiz_app_headless_shows_missed_modal() -> None:
    session = QuizSession(make_bank([("2+2", "4")]))

    async def scenario() -> None:
        app = qv.QuizApp(session)
        async with app.run_test() as pilot:
            await pilot.click("#start")
            await pilot.pause()

            app.query_one("#answer", Input).value = "5"
            await pilot.click("#submit")
            await pilot.pause()

            assert session.phase is Phase.FINISHED
            assert session.missed == (Question("2+2", "4"),)
            assert isinstance(app.screen, qv.MissedQuestionsScreen)
            assert app.screen.missed == (Question("2+2", "4"),)

            await pilot.click("#ok")
            await pilot.pause()
            assert not isinstance(app.screen, qv.MissedQuestionsScreen)

    asyncio.run(scenario())
