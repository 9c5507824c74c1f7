"""Logging and reporting module."""

import json
import logging
import logging.handlers
import threading
from pathlib import Path
from datetime import datetime

from shiftplan.models.optimization import OptimizationResult, ProgressEvent
from shiftplan.utils import format_currency


def configure_logging(level: str = "INFO", log_file: str = "shiftplan.log") -> None:
    """
    Configure structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=10 * 1024 * 1024, backupCount=5
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)


class JSONLogger:
    """JSON-lines trace of optimization runs for machine parsing."""

    def __init__(self, log_file: str = "progress.jsonl"):
        """
        Initialize JSON logger.

        Args:
            log_file: Path to JSON lines file
        """
        self.log_file = Path(log_file)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self.file_handle = open(self.log_file, "a")
        self._lock = threading.Lock()  # Runs write from their own threads

    def log_progress(self, run_id: str, event: ProgressEvent) -> None:
        """Append one progress snapshot."""
        self._write({
            "timestamp": datetime.now().isoformat(),
            "run_id": run_id,
            "type": "progress",
            "event": event.model_dump(mode="json"),
        })

    def log_result(self, run_id: str, result: OptimizationResult) -> None:
        """Append a terminal result (per-day rows omitted)."""
        self._write({
            "timestamp": datetime.now().isoformat(),
            "run_id": run_id,
            "type": "result",
            "result": result.model_dump(mode="json", exclude={"formatted_schedule"}),
        })
        if result.final_balance is not None:
            logging.info(
                f"Run {run_id} finished {result.status.value}: "
                f"final balance {format_currency(result.final_balance)}, "
                f"{result.work_days_count} work days, {result.violations} violations"
            )

    def _write(self, entry: dict) -> None:
        with self._lock:
            json.dump(entry, self.file_handle)
            self.file_handle.write("\n")
            self.file_handle.flush()

    def close(self) -> None:
        """Close log file."""
        self.file_handle.close()
