"""Custom metrics for the menu acquisition pipeline."""

from opentelemetry import metrics

meter = metrics.get_meter("cafe-menu-svc")

stage_attempt_counter = meter.create_counter(
    name="menu_stage_attempt_total",
    description="Acquisition stage attempts by stage and outcome",
    unit="1",
)

acquisition_duration_histogram = meter.create_histogram(
    name="menu_acquisition_duration_seconds",
    description="Duration of full acquisition runs by winning source",
    unit="s",
)

cache_lookup_counter = meter.create_counter(
    name="menu_cache_lookup_total",
    description="Menu cache lookups by result (hit, miss, stale)",
    unit="1",
)


def record_stage_attempt(stage: str, outcome: str) -> None:
    """Record one acquisition stage attempt.

    Args:
        stage: Stage tag (e.g. "structured-endpoint", "rendered-page")
        outcome: "success", "empty", "corrupted" or "error"
    """
    stage_attempt_counter.add(1, {"stage": stage, "outcome": outcome})


def record_acquisition_duration(source: str, duration_seconds: float) -> None:
    """Record how long an acquisition run took.

    Args:
        source: Stage that produced the result, or "none" when every stage failed
        duration_seconds: Duration in seconds
    """
    acquisition_duration_histogram.record(duration_seconds, {"source": source})


def record_cache_lookup(result: str) -> None:
    """Record a cache lookup made by the refresh policy."""
    cache_lookup_counter.add(1, {"result": result})
