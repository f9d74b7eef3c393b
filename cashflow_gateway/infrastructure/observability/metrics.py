"""Prometheus metrics for forecast load, allocation outcomes, and ledger sync performance"""

from prometheus_client import Counter, Histogram

# Forecast metrics
forecast_counter = Counter(
    "cashflow_forecast_total",
    "Forecasts computed",
)

exposed_weeks_histogram = Histogram(
    "cashflow_forecast_exposed_weeks",
    "Weeks with at least one obligation per forecast",
    buckets=[0, 1, 2, 4, 6, 8],
)

# Allocation metrics
allocation_counter = Counter(
    "cashflow_allocation_total",
    "Allocation proposals by lifecycle outcome",
    ["outcome"],  # proposed | confirmed | discarded
)

free_cash_counter = Counter(
    "cashflow_free_cash_sign",
    "Confirmed allocations by free cash sign",
    ["sign"],  # negative | zero | positive
)

# Ledger sync metrics
sync_latency_histogram = Histogram(
    "ledger_sync_latency_seconds",
    "Ledger sync response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

sync_failure_counter = Counter(
    "ledger_sync_failures_total",
    "Failed ledger sync deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_forecast(exposed_weeks: int) -> None:
    """Record a computed forecast and how many of its weeks carry exposure"""
    forecast_counter.inc()
    exposed_weeks_histogram.observe(exposed_weeks)


def record_allocation(outcome: str, free_cash_cents: int | None = None) -> None:
    """Record allocation lifecycle transition; free cash sign is tracked on confirmation"""
    allocation_counter.labels(outcome=outcome).inc()

    if free_cash_cents is None:
        return

    if free_cash_cents < 0:
        sign = "negative"
    elif free_cash_cents == 0:
        sign = "zero"
    else:
        sign = "positive"

    free_cash_counter.labels(sign=sign).inc()
