"""CLI entry points for playing quizzes and checking question banks."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console

from quiz_runner.core import workspace as workspace_mod
from quiz_runner.core.logging import configure_logger
from quiz_runner.core.workspace import WorkspaceError

from .bank import (
    QuestionBank,
    ResourceUnavailableError,
    load_bank,
    load_default_bank,
)
from .config import (
    CONFIG_FILENAME,
    ConfigOverrides,
    LoadResult,
    QuizConfig,
    QuizConfigError,
    load_config,
    write_config_template,
)
from .console import InputProvider, run_console_quiz
from .session import QuizSession
from .view import QuizApp

LOGGER_NAME = "quiz_runner.quiz"


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--bank",
        type=Path,
        help=(
            "Question bank file with one `prompt|answer` pair per line "
            "(defaults to the bundled sample bank)."
        ),
    )
    parser.add_argument(
        "--config",
        type=Path,
        help=(
            "Path to a TOML config file (defaults to the workspace config "
            "directory)."
        ),
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root used for config and log files.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz play",
        description="Ask shuffled questions from a bank and report the score.",
        epilog=(
            "Run `quiz play config init` to scaffold the default quiz.toml "
            "template."
        ),
    )
    _add_common_arguments(parser)
    parser.add_argument(
        "--limit",
        type=int,
        help="Maximum number of questions per run (defaults to 10).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed the shuffle so question order is reproducible.",
    )
    parser.add_argument(
        "--tui",
        action="store_true",
        help="Use the Textual interface instead of the console prompt.",
    )
    parser.add_argument(
        "--log-level",
        help="Set the logging level for the run (defaults to INFO).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log records to stderr.",
    )
    return parser


def _build_check_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz check",
        description="Load a question bank and report how many lines parse.",
    )
    _add_common_arguments(parser)
    return parser


def main(
    argv: Sequence[str] | None = None,
    *,
    console: Optional[Console] = None,
    input_provider: Optional[InputProvider] = None,
) -> int:
    args_list = list(argv) if argv is not None else list(sys.argv[1:])

    if args_list[:1] == ["config"]:
        return _handle_config(args_list[1:])

    parser = _build_parser()
    args = parser.parse_args(args_list)
    if args.limit is not None and args.limit < 1:
        parser.error("--limit must be at least 1.")

    try:
        load_result = _load(args, limit=args.limit, seed=args.seed)
    except QuizConfigError as exc:
        parser.error(str(exc))

    config = load_result.config
    logger, log_path = configure_logger(
        LOGGER_NAME,
        log_dir=load_result.layout.path_for("logs"),
        level=config.log_level,
        verbose=args.verbose,
    )
    logger.debug(
        "quiz play invoked",
        extra={"config_path": load_result.config_path, "tui": args.tui},
    )

    bank = load_bank_or_empty(config, logger)
    session = QuizSession(
        bank,
        limit=config.limit,
        rng=random.Random(config.seed),
    )

    if args.tui:
        QuizApp(session, logger=logger).run()
        return 0

    console = console or Console()
    provider = input_provider or (lambda: console.input("[bold]> [/]"))
    result = run_console_quiz(session, console, provider, logger=logger)
    console.print(f"[dim]Log file: {log_path}[/]")
    return 130 if result.exit_action == "quit" else 0


def check_main(argv: Sequence[str] | None = None) -> int:
    parser = _build_check_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        config = _load(args).config
    except QuizConfigError as exc:
        parser.error(str(exc))

    try:
        bank = _load_configured_bank(config)
    except ResourceUnavailableError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    lines = [
        f"Question bank: {bank.source}",
        f"  questions: {len(bank)}",
        f"  skipped:   {bank.skipped}",
    ]
    sys.stdout.write("\n".join(lines) + "\n")
    return 1 if bank.is_empty else 0


def init_main(argv: Sequence[str] | None = None) -> int:
    """Create the workspace and drop a starter ``quiz.toml`` into it.

    An existing config file is never replaced; use
    ``quiz play config init --force`` for that.
    """

    parser = _build_init_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        layout = workspace_mod.ensure_workspace(path=args.path)
        config_state = "skipped"
        config_file = layout.path_for("config") / CONFIG_FILENAME
        if not args.no_config:
            config_state = "exists"
            if not config_file.exists():
                write_config_template(config_file)
                config_state = "written"
    except (WorkspaceError, QuizConfigError) as exc:
        sys.stderr.write(f"{exc}\n")
        return 1

    if args.quiet:
        return 0

    def state(key: str) -> str:
        return "created" if layout.created.get(key) else "exists"

    lines = [f"Workspace ready at {layout.home} ({state('home')})"]
    for name, directory in layout.items():
        lines.append(f"  {name:<10} {directory} ({state(name)})")
    lines.append(f"  {CONFIG_FILENAME:<10} {config_file} ({config_state})")
    sys.stdout.write("\n".join(lines) + "\n")
    return 0


def _build_init_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz init",
        description=(
            "Create the quiz-runner workspace (config and logs directories) "
            "with a starter quiz.toml."
        ),
    )
    parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Workspace root (defaults to QUIZ_RUNNER_HOME or "
            "~/.quiz-runner)."
        ),
    )
    parser.add_argument(
        "--no-config",
        action="store_true",
        help="Only create the directories; do not write quiz.toml.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Print nothing on success.",
    )
    return parser


def load_bank_or_empty(
    config: QuizConfig, logger: logging.Logger
) -> QuestionBank:
    """Load the configured bank, falling back to an empty one on failure."""

    try:
        bank = _load_configured_bank(config)
    except ResourceUnavailableError as exc:
        logger.error(
            "Question bank unavailable",
            extra={"bank_path": config.bank_path, "error": str(exc)},
        )
        sys.stderr.write(f"{exc}\n")
        return QuestionBank()
    logger.info(
        "Question bank loaded",
        extra={
            "source": bank.source,
            "questions": len(bank),
            "skipped": bank.skipped,
        },
    )
    return bank


def _load_configured_bank(config: QuizConfig) -> QuestionBank:
    if config.bank_path is None:
        return load_default_bank()
    return load_bank(config.bank_path, encoding=config.encoding)


def _load(
    args: argparse.Namespace,
    *,
    limit: Optional[int] = None,
    seed: Optional[int] = None,
) -> LoadResult:
    overrides = ConfigOverrides(
        bank_path=args.bank,
        limit=limit,
        seed=seed,
        log_level=getattr(args, "log_level", None),
    )
    return load_config(
        config_path=args.config,
        overrides=overrides,
        workspace_path=args.workspace,
    )


def _handle_config(argv: Sequence[str]) -> int:
    parser = _build_config_parser()
    args = parser.parse_args(argv)
    return _handle_config_init(args)


def _build_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz play config",
        description="Manage configuration files for quiz play.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser(
        "init",
        help="Write the default quiz.toml template.",
    )
    init_parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Destination for the config TOML (defaults to the workspace "
            "config directory)."
        ),
    )
    init_parser.add_argument(
        "--workspace",
        type=Path,
        help="Workspace root used when resolving the default config path.",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the destination if a config already exists.",
    )
    return parser


def _handle_config_init(args: argparse.Namespace) -> int:
    try:
        target = _resolve_config_target(args)
    except WorkspaceError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    try:
        written = write_config_template(target, overwrite=args.force)
    except QuizConfigError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    sys.stdout.write(f"Wrote quiz config to {written}\n")
    return 0


def _resolve_config_target(args: argparse.Namespace) -> Path:
    if args.path is not None:
        candidate = args.path.expanduser()
        if not candidate.is_absolute():
            candidate = (Path.cwd() / candidate).resolve()
        return candidate

    layout = workspace_mod.ensure_workspace(path=args.workspace)
    return layout.path_for("config") / CONFIG_FILENAME


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
