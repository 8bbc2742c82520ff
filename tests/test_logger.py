"""
Tests for structured logging and provider metrics.
"""

import logging

import pytest

from matchscore.logger import StructuredLogger, get_logger, reset_logger


@pytest.fixture
def quiet_logger(tmp_path):
    return StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, quiet_logger):
        assert quiet_logger.logger.name == "test"
        assert quiet_logger.metrics["provider_calls"] == 0
        assert quiet_logger.metrics["matches_scored"] == 0

    def test_log_file_named_by_day(self, tmp_path, quiet_logger):
        quiet_logger.info("Computed match score", final_score=78)

        log_files = list(tmp_path.glob("matchscore_*.log"))
        assert len(log_files) == 1
        content = log_files[0].read_text(encoding="utf-8")
        assert "Computed match score" in content
        assert '"final_score": 78' in content

    def test_debug_reaches_file_after_set_level(self, tmp_path, quiet_logger):
        quiet_logger.debug("Requesting summary")

        content = next(tmp_path.glob("*.log")).read_text(encoding="utf-8")
        assert "Requesting summary" not in content  # logger level INFO filters first

        quiet_logger.set_level("DEBUG")
        quiet_logger.debug("Requesting summary")
        content = next(tmp_path.glob("*.log")).read_text(encoding="utf-8")
        assert "Requesting summary" in content

    def test_set_level_leaves_file_handler_at_debug(self, tmp_path):
        logger = StructuredLogger(name="test-levels", log_dir=tmp_path)

        logger.set_level("WARNING")

        assert logger.logger.level == logging.WARNING
        for handler in logger.logger.handlers:
            if isinstance(handler, logging.FileHandler):
                assert handler.level == logging.DEBUG
            else:
                assert handler.level == logging.WARNING

    def test_context_is_json_rendered(self, tmp_path, quiet_logger):
        quiet_logger.warning("Provider call failed", capability="similarity", status=503)

        content = next(tmp_path.glob("*.log")).read_text(encoding="utf-8")
        assert '"capability": "similarity"' in content
        assert '"status": 503' in content


class TestMetrics:
    """Test provider and scoring counters."""

    def test_provider_counters(self, quiet_logger):
        quiet_logger.record_provider_attempt("summarize")
        quiet_logger.record_provider_success("summarize")
        quiet_logger.record_provider_attempt("similarity")
        quiet_logger.record_provider_failure("similarity", "HTTPError")

        metrics = quiet_logger.get_metrics()

        assert metrics["provider_calls"] == 2
        assert metrics["provider_failures"] == 1
        assert metrics["errors_by_type"] == {"HTTPError": 1}
        assert metrics["capability_stats"]["summarize"]["success_rate"] == 1.0
        assert metrics["capability_stats"]["similarity"]["success_rate"] == 0.0

    def test_success_rate(self, quiet_logger):
        for _ in range(3):
            quiet_logger.record_provider_attempt("summarize")
        quiet_logger.record_provider_success("summarize")
        quiet_logger.record_provider_success("summarize")

        rate = quiet_logger.get_metrics()["capability_stats"]["summarize"]["success_rate"]
        assert rate == pytest.approx(0.667, rel=0.01)

    def test_scoring_counters(self, quiet_logger):
        quiet_logger.record_match_scored()
        quiet_logger.record_match_scored()
        quiet_logger.record_saved()

        assert quiet_logger.metrics["matches_scored"] == 2
        assert quiet_logger.metrics["records_saved"] == 1

    def test_metrics_summary(self, tmp_path, quiet_logger):
        quiet_logger.record_provider_attempt("summarize")
        quiet_logger.record_provider_failure("summarize", "Timeout")

        quiet_logger.log_metrics_summary()

        content = next(tmp_path.glob("*.log")).read_text(encoding="utf-8")
        assert "Match Scoring Metrics" in content
        assert "Timeout: 1" in content


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_singleton(self, tmp_path):
        reset_logger()
        try:
            first = get_logger(name="test-global", log_dir=tmp_path, enable_console=False)
            assert get_logger() is first
        finally:
            reset_logger()

    def test_reset_gives_fresh_metrics(self, tmp_path):
        reset_logger()
        try:
            first = get_logger(name="test-global", log_dir=tmp_path, enable_console=False)
            first.record_match_scored()
            reset_logger()

            second = get_logger(name="test-global", log_dir=tmp_path, enable_console=False)
            assert second is not first
            assert second.metrics["matches_scored"] == 0
        finally:
            reset_logger()
