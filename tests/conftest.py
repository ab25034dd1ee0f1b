from __future__ import annotations

import logging
import random
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import BankWriter, make_bank  # noqa: E402

from quiz_runner.core.workspace import WORKSPACE_ENV  # noqa: E402
from quiz_runner.quiz.bank import QuestionBank  # noqa: E402

SAMPLE_PAIRS = [("2+2", "4"), ("Capital of France", "Paris")]


@pytest.fixture
def small_bank() -> QuestionBank:
    """The two-question bank used by the end-to-end scenarios."""

    return make_bank(SAMPLE_PAIRS)


@pytest.fixture
def large_bank() -> QuestionBank:
    return make_bank((f"Q{i}", f"A{i}") for i in range(25))


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def bank_writer(tmp_path: Path) -> BankWriter:
    return BankWriter(tmp_path / "banks")


@pytest.fixture
def workspace_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point QUIZ_RUNNER_HOME at a per-test directory."""

    home = tmp_path / "workspace"
    monkeypatch.setenv(WORKSPACE_ENV, str(home))
    for key in ("CONFIG", "BANK", "LIMIT", "SEED", "LOG_LEVEL"):
        monkeypatch.delenv(f"QUIZ_RUNNER_{key}", raising=False)
    return home


@pytest.fixture(autouse=True)
def _close_quiz_loggers() -> Iterator[None]:
    yield
    for name in ("quiz_runner.quiz", "quiz_runner.test"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
