"""Configuration loader for ``quiz play``.

Settings live in a small TOML file with three tables (``[bank]``,
``[session]`` and ``[logging]``). The packaged ``quiz.toml`` doubles as the
starter file written by ``quiz init`` and ``quiz play config init``.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

from quiz_runner.core import workspace as workspace_mod

from .session import DEFAULT_LIMIT

CONFIG_FILENAME = "quiz.toml"
CONFIG_ENV = "QUIZ_RUNNER_CONFIG"
ENV_PREFIX = "QUIZ_RUNNER_"

_DEFAULT_ENCODING = "utf-8"
_DEFAULT_LOG_LEVEL = "INFO"


class QuizConfigError(RuntimeError):
    """Raised when quiz configuration cannot be loaded or is invalid."""


@dataclass(frozen=True)
class QuizConfig:
    """Resolved settings for a quiz run.

    ``bank_path`` of ``None`` selects the sample bank bundled with the
    package.
    """

    bank_path: Optional[Path]
    encoding: str
    limit: int
    seed: Optional[int]
    log_level: str


@dataclass(frozen=True)
class ConfigOverrides:
    """Values taken from the command line."""

    bank_path: Optional[Path] = None
    limit: Optional[int] = None
    seed: Optional[int] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    config: QuizConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Load configuration applying precedence CLI > env > TOML > defaults."""

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    try:
        layout = workspace_mod.ensure_workspace(
            env=env_map, path=workspace_path
        )
    except workspace_mod.WorkspaceError as exc:
        raise QuizConfigError(str(exc)) from exc

    requested = _resolve_config_path(
        config_path=config_path,
        env_map=env_map,
        default_path=layout.path_for("config") / CONFIG_FILENAME,
    )

    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested.exists():
        loaded_path = requested
        _apply_file(table, _read_toml(requested))
    elif config_path is not None or _parse_env_string(env_map, "CONFIG"):
        raise QuizConfigError(f"Config file not found: {requested}")

    file_bank = _coerce_optional_path(table["bank"]["path"])
    if file_bank is not None and not file_bank.is_absolute():
        file_bank = requested.parent / file_bank

    bank_path = _pick_first(
        overrides.bank_path,
        _parse_env_path(env_map, "BANK"),
        file_bank,
    )

    config = QuizConfig(
        bank_path=(
            Path(bank_path).expanduser().resolve()
            if bank_path is not None
            else None
        ),
        encoding=_require_string(table["bank"]["encoding"], "bank.encoding"),
        limit=_resolve_limit(
            _pick_first(
                overrides.limit,
                _parse_env_string(env_map, "LIMIT"),
                table["session"]["limit"],
            )
        ),
        seed=_resolve_seed(
            _pick_first(
                overrides.seed,
                _parse_env_string(env_map, "SEED"),
                table["session"]["seed"],
            )
        ),
        log_level=_resolve_level(
            _pick_first(
                overrides.log_level,
                _parse_env_string(env_map, "LOG_LEVEL"),
                table["logging"]["level"],
            )
        ),
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def read_config_template() -> str:
    """Return the packaged ``quiz.toml`` starter file."""

    resource = resources.files(__package__).joinpath(CONFIG_FILENAME)
    return resource.read_text(encoding="utf-8")


def write_config_template(path: Path, *, overwrite: bool = False) -> Path:
    """Copy the starter config to ``path``.

    An existing file is kept unless ``overwrite`` is set.
    """

    if path.exists() and not overwrite:
        raise QuizConfigError(f"Config already exists: {path}")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(read_config_template(), encoding="utf-8")
    except OSError as exc:
        raise QuizConfigError(f"Unable to write config {path}: {exc}") from exc
    return path


def _read_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except OSError as exc:
        raise QuizConfigError(f"Unable to read config {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise QuizConfigError(
            f"Failed to parse config TOML {path}: {exc}"
        ) from exc


def _apply_file(
    table: MutableMapping[str, MutableMapping[str, object]],
    loaded: Mapping[str, Any],
) -> None:
    # Only the known [section] key = value pairs are accepted.
    for section, values in loaded.items():
        if section not in table:
            raise QuizConfigError(f"Unknown config table [{section}].")
        if not isinstance(values, Mapping):
            raise QuizConfigError(
                f"[{section}] must be a table, found {type(values).__name__}."
            )
        for key, value in values.items():
            if key not in table[section]:
                raise QuizConfigError(
                    f"Unknown config key '{section}.{key}'."
                )
            table[section][key] = value


def _default_table() -> MutableMapping[str, MutableMapping[str, object]]:
    return {
        "bank": {"path": None, "encoding": _DEFAULT_ENCODING},
        "session": {"limit": DEFAULT_LIMIT, "seed": None},
        "logging": {"level": _DEFAULT_LOG_LEVEL},
    }


def _resolve_config_path(
    *,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = _parse_env_string(env_map, "CONFIG")
    if env_candidate:
        return Path(env_candidate).expanduser()
    return default_path


def _resolve_limit(value: object) -> int:
    if isinstance(value, bool):
        raise QuizConfigError("session.limit must be an integer.")
    try:
        limit = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise QuizConfigError(
            f"session.limit must be an integer, got {value!r}."
        ) from exc
    if limit < 1:
        raise QuizConfigError("session.limit must be at least 1.")
    return limit


def _resolve_seed(value: object) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, bool):
        raise QuizConfigError("session.seed must be an integer.")
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise QuizConfigError(
            f"session.seed must be an integer, got {value!r}."
        ) from exc


def _resolve_level(value: object) -> str:
    level = _require_string(value, "logging.level").upper()
    if level not in logging.getLevelNamesMapping():
        raise QuizConfigError(
            f"logging.level must be a logging level name, got {value!r}."
        )
    return level


def _require_string(value: object, key: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise QuizConfigError(f"{key} must be a non-empty string.")
    return value.strip()


def _coerce_optional_path(value: object) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, str):
        raw = value.strip()
        return Path(raw).expanduser() if raw else None
    raise QuizConfigError("bank.path must be a string when provided.")


def _parse_env_path(env_map: Mapping[str, str], key: str) -> Optional[Path]:
    raw = _parse_env_string(env_map, key)
    if raw is None:
        return None
    return Path(raw).expanduser()


def _parse_env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _pick_first(*candidates: object) -> object:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
