"""Colored pipeline logger — ANSI-colored console logging for the product edit pipeline.

Gives the upload and save flows color-coded, stage-labelled log lines so a
single edit session can be followed in the terminal.

Color scheme:
    🟢 Green   — Upload / Merge
    🟡 Yellow  — Validation
    🔵 Blue    — Reconciliation
    🟣 Magenta — Submission
    🟠 Cyan    — Reference data / child editor
    🔴 Red     — Errors
    ⚪ Gray    — Timing / Stats
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"


# ── Pipeline Stage Definitions ───────────────────────────────────────

class PipelineStage:
    """Stages of the product edit pipeline with their colors and icons."""

    UPLOAD = ("UPLOAD", _Colors.GREEN, "📁")
    MERGE = ("MERGE", _Colors.GREEN, "🧩")
    EDITOR = ("EDITOR", _Colors.CYAN, "✏️")
    REFERENCE = ("REFERENCE", _Colors.CYAN, "📚")
    VALIDATE = ("VALIDATE", _Colors.YELLOW, "🔎")
    RECONCILE = ("RECONCILE", _Colors.BLUE, "🔀")
    SUBMIT = ("SUBMIT", _Colors.MAGENTA, "📤")
    ERROR = ("ERROR", _Colors.RED, "❌")
    COMPLETE = ("COMPLETE", _Colors.GREEN, "✅")


def _format_details(kwargs: dict[str, Any], color: str) -> str:
    details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    return f" {color}({details}){_Colors.RESET}"


# ── PipelineLogger ───────────────────────────────────────────────────

class PipelineLogger:
    """Color-coded logger for uploads and saves.

    Usage:
        log = PipelineLogger("ProductEditPipeline")
        log.step_start(PipelineStage.UPLOAD, "Uploading 2 file(s)")
        log.step_complete(PipelineStage.MERGE, "Appended /a.png")
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)
        self._component = component_name

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += _format_details(kwargs, _Colors.GRAY)
        self._logger.info(formatted)

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += _format_details(kwargs, _Colors.GRAY)
        self._logger.info(formatted)

    def step_warning(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        """A recoverable problem, e.g. one file of a batch failed."""
        label, _, icon = stage
        formatted = (
            f"{_Colors.YELLOW}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.YELLOW}! {message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += _format_details(kwargs, _Colors.DIM)
        self._logger.warning(formatted)

    def step_error(self, stage: tuple[str, str, str], message: str, error: Exception | None = None) -> None:
        label, _, _ = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def stats(self, **kwargs: Any) -> None:
        parts = [f"{k}: {v}" for k, v in kwargs.items()]
        self._logger.info(f"   {_Colors.GRAY}📈 {' | '.join(parts)}{_Colors.RESET}")

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Log start and end of a step with its elapsed time.

        Usage:
            with log.timed_step(PipelineStage.SUBMIT, "Updating product"):
                await gateway.update(product_id, payload)
        """
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.step_error(stage, f"{message} — failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message} — {elapsed:.2f}s")
