# src/mdxtr/logging_utils.py
"""
Application-wide logging setup.

- Console output on stdout, optional UTF-8 log file (appended across runs).
- Initialized once from main(); modules only call logging.getLogger("mdxtr.<name>").
- Every record carries the run id, so lines from one translation pass can be
  grepped out of a shared log file (the same id is attached to LLM calls).
- The openai/httpx loggers are kept at WARNING unless DEBUG is requested,
  otherwise every HTTP request line drowns the per-document progress.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

NOISY_LOGGERS = ("httpx", "openai")
LOG_FORMAT = "%(asctime)s | %(levelname)s | run=%(run_id)s | %(name)s | %(message)s"


class RunIdFilter(logging.Filter):
    """Stamps record.run_id; attached to handlers so third-party records get it too."""

    def __init__(self, run_id: str) -> None:
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self.run_id
        return True


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    run_id: str = "-",
) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    run_filter = RunIdFilter(run_id)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(log_level)
        handler.addFilter(run_filter)

    # force=True: main() may be called more than once in a process (tests, notebooks).
    logging.basicConfig(level=log_level, handlers=handlers, format=LOG_FORMAT, force=True)

    noisy_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)
