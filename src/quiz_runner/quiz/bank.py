"""Question bank loading for the ``prompt|answer`` text format.

Each line of a bank holds one question: the prompt, a literal ``|`` and the
answer. Lines that do not split into exactly two non-blank fields are
skipped without raising; there is no escaping for ``|`` inside a field.
A trailing delimiter counts as an empty third field, so ``"a|b|"`` is
skipped rather than read as ``a`` / ``b``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from importlib import resources
from pathlib import Path

__all__ = [
    "DELIMITER",
    "DEFAULT_BANK_RESOURCE",
    "Question",
    "QuestionBank",
    "ResourceUnavailableError",
    "load_bank",
    "load_default_bank",
    "parse_questions",
]

DELIMITER = "|"
DEFAULT_BANK_RESOURCE = "quiz.txt"

_log = logging.getLogger(__name__)


class ResourceUnavailableError(RuntimeError):
    """Raised when a question bank cannot be read at all."""


@dataclass(frozen=True)
class Question:
    """A prompt and its expected answer, stored as they appear in the bank."""

    prompt: str
    answer: str


@dataclass(frozen=True)
class QuestionBank:
    """Ordered, read-only collection of questions."""

    questions: tuple[Question, ...] = ()
    skipped: int = 0
    source: str | None = None

    def __len__(self) -> int:
        return len(self.questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self.questions)

    def __getitem__(self, index: int) -> Question:
        return self.questions[index]

    @property
    def is_empty(self) -> bool:
        return not self.questions


def parse_questions(
    lines: Iterable[str], *, source: str | None = None
) -> QuestionBank:
    """Build a bank from raw text lines, dropping malformed ones."""

    questions: list[Question] = []
    skipped = 0
    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        question = _parse_line(line)
        if question is None:
            skipped += 1
            _log.debug(
                "Skipping malformed question line",
                extra={"source": source, "line_number": line_number},
            )
            continue
        questions.append(question)
    return QuestionBank(tuple(questions), skipped=skipped, source=source)


def load_bank(path: Path, *, encoding: str = "utf-8") -> QuestionBank:
    """Read and parse the bank stored at ``path``."""

    try:
        text = Path(path).read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise ResourceUnavailableError(
            f"Question bank unavailable: {path} ({exc})"
        ) from exc
    return parse_questions(text.splitlines(), source=str(path))


def load_default_bank() -> QuestionBank:
    """Load the sample bank packaged with quiz_runner."""

    try:
        resource = resources.files(__package__).joinpath(DEFAULT_BANK_RESOURCE)
        text = resource.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ResourceUnavailableError(
            f"Packaged question bank unavailable: {DEFAULT_BANK_RESOURCE}"
        ) from exc
    return parse_questions(
        text.splitlines(), source=f"package:{DEFAULT_BANK_RESOURCE}"
    )


def _parse_line(line: str) -> Question | None:
    parts = line.split(DELIMITER)
    if len(parts) != 2:
        return None
    prompt, answer = parts
    if not prompt.strip() or not answer.strip():
        return None
    return Question(prompt=prompt, answer=answer)
