"""
Structured logging for the match scoring engine.

Console and daily file output, keyword context rendered as JSON, and
counters for provider health (calls per capability, failures by type) and
scoring throughput.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks provider and scoring metrics.
    """

    def __init__(
        self,
        name: str = "matchscore",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()

        self.metrics = {
            "provider_calls": 0,
            "provider_failures": 0,
            "matches_scored": 0,
            "records_saved": 0,
            "errors_by_type": {},
            "capability_stats": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"matchscore_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def set_level(self, level: str):
        """Change the logger and console level; the file handler keeps DEBUG."""
        self.logger.setLevel(getattr(logging, level.upper()))
        for handler in self.logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(getattr(logging, level.upper()))

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_provider_attempt(self, capability: str):
        """Record an outbound call to a provider capability."""
        self.metrics["provider_calls"] += 1
        stats = self.metrics["capability_stats"].setdefault(
            capability, {"attempts": 0, "successes": 0}
        )
        stats["attempts"] += 1

    def record_provider_success(self, capability: str):
        stats = self.metrics["capability_stats"].get(capability)
        if stats is not None:
            stats["successes"] += 1

    def record_provider_failure(self, capability: str, error_type: str):
        """Record a failed provider call, keyed by error type."""
        self.metrics["provider_failures"] += 1
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def record_match_scored(self):
        self.metrics["matches_scored"] += 1

    def record_saved(self):
        self.metrics["records_saved"] += 1

    def get_metrics(self) -> dict:
        """Return current metrics with per-capability success rates."""
        metrics_copy = self.metrics.copy()
        for capability, stats in metrics_copy["capability_stats"].items():
            if stats["attempts"] > 0:
                stats["success_rate"] = round(
                    stats["successes"] / stats["attempts"], 3
                )

        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Match Scoring Metrics ===")
        self.info(f"Matches scored: {metrics['matches_scored']} (saved: {metrics['records_saved']})")
        self.info(f"Provider calls: {metrics['provider_calls']} (failed: {metrics['provider_failures']})")

        if metrics["capability_stats"]:
            self.info("Capability Success Rates:")
            for capability, stats in metrics["capability_stats"].items():
                rate = stats.get("success_rate", 0) * 100
                self.info(f"  {capability}: {stats['successes']}/{stats['attempts']} ({rate:.1f}%)")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "matchscore",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
