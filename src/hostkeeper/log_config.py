from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional


def setup_logging(
    verbose: bool = False,
    log_dir: Optional[Path] = None,
    level: str = "INFO",
) -> None:
    """Configure logging for the entire application.

    Console output is kept at WARNING unless *verbose* is set so that rich
    output from the CLI stays readable; the log file records *level*.
    """
    # Get the root logger
    root_logger = logging.getLogger()

    # Remove any existing handlers to avoid duplication
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    log_level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root_logger.addHandler(stream_handler)

    if log_dir is not None:
        log_dir = Path(log_dir).expanduser()
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_dir / "hostkeeper.log")
        except OSError as e:
            root_logger.warning(f"Cannot open log file in {log_dir}: {e}")
        else:
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    logger = logging.getLogger("hostkeeper")
    logger.setLevel(log_level)

    if verbose:
        logger.debug("🔍 Verbose logging enabled")
