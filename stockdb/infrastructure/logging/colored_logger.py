"""Colored store logger: stage-tagged ANSI console lines for store activity.

    LOAD / SAVE   green
    PART          blue
    PROJECT       magenta
    HISTORY       cyan
    STORE         white
    failures      red, details gray
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, NamedTuple

_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_RED = "\033[91m"
_GRAY = "\033[90m"


class Stage(NamedTuple):
    label: str
    color: str


class StoreStage:
    """Stages a store log line can be tagged with."""

    LOAD = Stage("LOAD", "\033[92m")
    SAVE = Stage("SAVE", "\033[92m")
    PART = Stage("PART", "\033[94m")
    PROJECT = Stage("PROJECT", "\033[95m")
    HISTORY = Stage("HISTORY", "\033[96m")
    LIFECYCLE = Stage("STORE", "\033[97m")


def _with_fields(text: str, fields: dict[str, Any]) -> str:
    if not fields:
        return text
    joined = ", ".join(f"{key}={value}" for key, value in fields.items())
    return f"{text} {_GRAY}[{joined}]{_RESET}"


class StoreLogger:
    """Wraps a module logger with stage-colored formatting.

        slog = StoreLogger(__name__)
        slog.step(StoreStage.PART, "Inserted part", mpn="R1")
        with slog.timed_step(StoreStage.SAVE, "Saving stock.smd"):
            repository.save(document)
    """

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def step(self, stage: Stage, message: str, **fields: Any) -> None:
        text = f"{stage.color}{_BOLD}{stage.label:<8}{_RESET} {stage.color}{message}{_RESET}"
        self._logger.info(_with_fields(text, fields))

    def rejected(self, stage: Stage, message: str, **fields: Any) -> None:
        """An operation refused without touching the store."""
        text = f"{stage.color}{stage.label:<8}{_RESET} {_DIM}x {message}{_RESET}"
        self._logger.info(_with_fields(text, fields))

    def step_error(self, stage: Stage, message: str, error: BaseException | None = None) -> None:
        text = f"{_RED}{_BOLD}{stage.label:<8}{_RESET} {_RED}{message}{_RESET}"
        if error is not None:
            text += f" {_DIM}({type(error).__name__}: {error}){_RESET}"
        self._logger.error(text)

    def detail(self, message: str, **fields: Any) -> None:
        self._logger.debug(_with_fields(f"{_GRAY}  . {message}{_RESET}", fields))

    @contextmanager
    def timed_step(self, stage: Stage, message: str, **fields: Any):
        """Log ``message`` with its duration once the block finishes, or the error if it raises."""
        started = time.perf_counter()
        try:
            yield
        except Exception as exc:
            self.step_error(stage, f"{message} failed after {time.perf_counter() - started:.3f}s", error=exc)
            raise
        self.step(stage, f"{message} ({time.perf_counter() - started:.3f}s)", **fields)
