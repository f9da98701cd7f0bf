"""Prometheus metrics for the UA engine.

Counters are process-wide; per-engine numbers live in ``Engine.get_stats()``.
Metrics are exposed at the /metrics/prometheus endpoint.
"""

import time

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

# ============ Metrics Definitions ============

PARSES_TOTAL = Counter(
    'uaengine_parses_total',
    'Total number of UA parse calls',
    ['source']  # cache / plugin / classifier
)

PARSE_DURATION = Histogram(
    'uaengine_parse_duration_seconds',
    'Time spent classifying UA strings on cache miss',
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1]
)

PLUGIN_ERRORS_TOTAL = Counter(
    'uaengine_plugin_errors_total',
    'Plugins that raised from test() or parse()'
)

INVALID_RANGES_TOTAL = Counter(
    'uaengine_invalid_ranges_total',
    'Malformed version range expressions'
)

GENERATE_FALLBACKS_TOTAL = Counter(
    'uaengine_generate_fallbacks_total',
    'generate_ua calls that fell back to the default UA'
)


# ============ Helper Functions ============

def record_parse(source: str, duration: float = 0.0):
    """Record a parse call.

    Args:
        source: 'cache', 'plugin' or 'classifier'
        duration: Classification time in seconds (ignored for cache hits)
    """
    PARSES_TOTAL.labels(source=source).inc()
    if source != 'cache':
        PARSE_DURATION.observe(duration)


def record_plugin_error():
    PLUGIN_ERRORS_TOTAL.inc()


def record_invalid_range():
    INVALID_RANGES_TOTAL.inc()


def record_generate_fallback():
    GENERATE_FALLBACKS_TOTAL.inc()


class ParseTimer:
    """Context manager measuring one classification."""

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        return False

    @property
    def duration(self):
        end = getattr(self, 'end_time', None) or time.perf_counter()
        return end - self.start_time


def get_metrics():
    """Get current metrics in Prometheus format.

    Returns:
        bytes: Prometheus-formatted metrics
    """
    return generate_latest()


def get_content_type():
    """Get Prometheus content type header value."""
    return CONTENT_TYPE_LATEST
