"""
Prometheus metrics for the licensing core.

Custom metrics for license lifecycle and network health.
"""

from prometheus_client import Counter, Gauge, Histogram

# Network metrics
connectivity_probes_total = Counter(
    "connectivity_probes_total",
    "Total connectivity probes",
    ["result"],
)

license_api_requests_total = Counter(
    "license_api_requests_total",
    "Total licensing API requests",
    ["operation", "outcome"],
)

license_api_request_duration_seconds = Histogram(
    "license_api_request_duration_seconds",
    "Licensing API request duration in seconds",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# License metrics
license_lifecycle_events_total = Counter(
    "license_lifecycle_events_total",
    "Total license lifecycle events",
    ["event_type"],
)

# Current state metrics
premium_enabled = Gauge(
    "premium_enabled",
    "1 when premium features are currently enabled",
)

# Feature metrics
feature_executions_total = Counter(
    "feature_executions_total",
    "Total feature execution requests",
    ["feature", "outcome"],
)
