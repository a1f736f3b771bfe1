import logging

import pytest
from unittest.mock import MagicMock, patch

from tennis_picks.config import ObservabilitySettings
from tennis_picks.utils.logging import setup_logging
from tennis_picks.utils.observability import Logger, MetricsRegistry, initialize_observability


class TestObservability:

    @pytest.fixture
    def mock_logger(self):
        return MagicMock()

    def test_logger_event_structure(self, mock_logger):
        """Log events include required context fields."""
        with patch("structlog.get_logger", return_value=mock_logger):
            logger = Logger("test_module")
            logger.log_event("test_event", custom_field=123)

            mock_logger.info.assert_called_once()
            call_args = mock_logger.info.call_args
            assert call_args[0][0] == "test_event"

            kwargs = call_args[1]
            assert kwargs["module"] == "test_module"
            assert kwargs["custom_field"] == 123
            assert "correlation_id" in kwargs

    def test_logger_error_capture(self, mock_logger):
        """Error logs capture exception info."""
        with patch("structlog.get_logger", return_value=mock_logger):
            logger = Logger("test_module")
            try:
                raise ValueError("Oops")
            except ValueError as e:
                logger.log_error("test_error", exc_info=e)

            mock_logger.error.assert_called_once()
            kwargs = mock_logger.error.call_args[1]
            assert kwargs["exc_info"] is not None

    def test_correlation_id_propagates(self, mock_logger):
        with patch("structlog.get_logger", return_value=mock_logger):
            logger = Logger("test_module")
            logger.with_correlation_id("job-123")
            logger.log_event("after_bind")
            assert mock_logger.info.call_args[1]["correlation_id"] == "job-123"

    def test_metrics_registry_initialization(self):
        """Each registry owns its metrics."""
        registry = MetricsRegistry()
        assert hasattr(registry, "leaderboard_rebuild_latency")
        assert hasattr(registry, "pair_upserts")
        assert hasattr(registry, "pair_repairs")
        assert hasattr(registry, "brackets_scored")
        assert hasattr(registry, "leaderboard_entries")

    def test_pair_upserts_counted(self, make_event):
        from tennis_picks.h2h import PairStore

        metrics = initialize_observability(ObservabilitySettings())
        store = PairStore()
        event = make_event(1, 3, 7, winner=7)
        store.apply(event)
        store.apply(event)

        applied = metrics.registry.get_sample_value("pair_upserts_total", {"outcome": "applied"})
        duplicate = metrics.registry.get_sample_value("pair_upserts_total", {"outcome": "duplicate"})
        assert applied == 1.0
        assert duplicate == 1.0

    def test_metrics_disabled(self, make_event):
        from tennis_picks.brackets import Bracket, score_bracket
        from tennis_picks.h2h import PairStore

        metrics = initialize_observability(ObservabilitySettings(enable_metrics=False))
        assert metrics.enabled is False

        PairStore().apply(make_event(1, 3, 7, winner=7))
        score_bracket(Bracket(bracket_id="b-off", user_id=1, tournament_id=9))

        assert metrics.registry.get_sample_value("pair_upserts_total", {"outcome": "applied"}) is None
        assert metrics.registry.get_sample_value("brackets_scored_total") is None
        with metrics.leaderboard_rebuild_latency.labels(timeframe="Season").time():
            metrics.leaderboard_entries.labels(timeframe="Season").set(3)


class TestSetupLogging:

    def test_console_format(self):
        logger = setup_logging("tennis_picks.test_console", observability=ObservabilitySettings())
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, logging.Formatter)

    def test_no_duplicate_handlers(self):
        setup_logging("tennis_picks.test_dupes", level="DEBUG")
        logger = setup_logging("tennis_picks.test_dupes", level="DEBUG")
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_json_format_in_production(self):
        from pythonjsonlogger.json import JsonFormatter

        logger = setup_logging(
            "tennis_picks.test_json",
            observability=ObservabilitySettings(environment="production"),
        )
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "engine.log"
        logger = setup_logging("tennis_picks.test_file", log_file=log_file)
        assert len(logger.handlers) == 2
        assert log_file.parent.exists()
