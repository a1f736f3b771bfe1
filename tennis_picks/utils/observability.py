# tennis_picks/utils/observability.py
import contextlib
import logging
import sys
from typing import Optional
import structlog
import contextvars
from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry

from tennis_picks.config import ObservabilitySettings

# Correlation ID for tracing a request/job through the engine
CORRELATION_ID = contextvars.ContextVar('correlation_id', default=None)


class _DisabledMetric:
    """Stand-in for a metric when ENABLE_METRICS is false; every call is a no-op."""

    def labels(self, *args, **kwargs):
        return self

    def inc(self, amount=1):
        pass

    def set(self, value):
        pass

    def observe(self, amount):
        pass

    def time(self):
        return contextlib.nullcontext()


class MetricsRegistry:
    """Centralized metrics management."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.registry = CollectorRegistry()
        if enabled:
            self._init_metrics()
        else:
            self._disable_metrics()

    def _disable_metrics(self):
        disabled = _DisabledMetric()
        self.leaderboard_rebuild_latency = disabled
        self.pair_upserts = disabled
        self.pair_repairs = disabled
        self.brackets_scored = disabled
        self.leaderboard_entries = disabled

    def _init_metrics(self):
        """Initialize all metrics with proper naming conventions."""

        # HISTOGRAMS (timing data)
        self.leaderboard_rebuild_latency = Histogram(
            'leaderboard_rebuild_seconds',
            'Full leaderboard rebuild latency in seconds',
            labelnames=['timeframe'],
            buckets=(0.001, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0),
            registry=self.registry
        )

        # COUNTERS (monotonic increases)
        self.pair_upserts = Counter(
            'pair_upserts_total',
            'Resolved-match events offered to the pair store',
            labelnames=['outcome'],  # 'applied' or 'duplicate'
            registry=self.registry
        )

        self.pair_repairs = Counter(
            'pair_repairs_total',
            'Pair records re-oriented by the repair pass',
            registry=self.registry
        )

        self.brackets_scored = Counter(
            'brackets_scored_total',
            'Bracket scoring passes',
            registry=self.registry
        )

        # GAUGES (point-in-time snapshots)
        self.leaderboard_entries = Gauge(
            'leaderboard_entries',
            'Entries in the most recently rebuilt leaderboard',
            labelnames=['timeframe'],
            registry=self.registry
        )


class StructlogConfig:
    """Structured logging configuration."""

    @staticmethod
    def configure(env: str = 'development', log_level: str = 'INFO'):
        """
        Configure structlog with environment-appropriate settings.

        Production: JSON output (machine-readable)
        Development: Console output (human-readable)
        """

        shared_processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt='iso'),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
        ]

        if env == 'production':
            processors = shared_processors + [
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(),
            ]
        else:
            processors = shared_processors + [
                structlog.dev.ConsoleRenderer(),
            ]

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(
                logging.getLevelName(log_level)
            ),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
            cache_logger_on_first_use=True,
        )


class Logger:
    """Wrapper for structured logging with context awareness."""

    def __init__(self, module_name: str):
        self.logger = structlog.get_logger(module_name)
        self.module_name = module_name

    def with_correlation_id(self, correlation_id: str):
        """Bind correlation ID to all subsequent logs."""
        CORRELATION_ID.set(correlation_id)
        return self.logger.bind(correlation_id=correlation_id)

    def log_event(self, event: str, **kwargs):
        """Log structured event with automatic context."""
        ctx = {'correlation_id': CORRELATION_ID.get(), 'module': self.module_name}
        ctx.update(kwargs)
        return self.logger.info(event, **ctx)

    def log_error(self, event: str, exc_info=None, **kwargs):
        """Log error with exception details."""
        ctx = {'correlation_id': CORRELATION_ID.get(), 'module': self.module_name}
        ctx.update(kwargs)
        return self.logger.error(event, exc_info=exc_info, **ctx)


def initialize_observability(observability: Optional[ObservabilitySettings] = None):
    """One-stop initialization for logging and metrics."""
    global METRICS
    if observability is None:
        observability = ObservabilitySettings()
    StructlogConfig.configure(env=observability.environment, log_level=observability.log_level)
    METRICS = MetricsRegistry(enabled=observability.enable_metrics)

    logger = structlog.get_logger(__name__)
    logger.info(
        'observability_initialized',
        environment=observability.environment,
        log_format=observability.log_format,
        metrics_enabled=observability.enable_metrics,
    )

    return METRICS


# Global metrics instance
METRICS: Optional[MetricsRegistry] = None


def get_metrics() -> MetricsRegistry:
    """Lazy-load metrics singleton."""
    global METRICS
    if METRICS is None:
        METRICS = MetricsRegistry(enabled=ObservabilitySettings().enable_metrics)
    return METRICS
