"""
Prometheus metrics definitions for the progression engine.

Metrics by category:
- Mutation metrics: operation counts by outcome
- Gamification metrics: XP awarded, level ups, app-open minutes
- Storage metrics: write failures, load-time recoveries

Recording helpers are no-ops when ENABLE_PROMETHEUS is false.
"""

import logging
from prometheus_client import Counter

from progression.config import ENABLE_PROMETHEUS

logger = logging.getLogger(__name__)

# =============================================================================
# Mutation Metrics
# =============================================================================

progression_mutations_total = Counter(
    "progression_mutations_total",
    "Total progress mutations",
    ["operation", "status"],  # status: success/failure
)

# =============================================================================
# Gamification Metrics
# =============================================================================

progression_xp_awarded_total = Counter(
    "progression_xp_awarded_total",
    "Total XP awarded",
    ["source"],  # source: drill/workout
)

progression_level_ups_total = Counter(
    "progression_level_ups_total",
    "Total level ups",
)

progression_app_open_minutes_total = Counter(
    "progression_app_open_minutes_total",
    "Total app-open minutes recorded",
)

# =============================================================================
# Storage Metrics
# =============================================================================

progression_persist_failures_total = Counter(
    "progression_persist_failures_total",
    "Snapshot writes that failed and were kept in memory only",
)

progression_snapshot_recoveries_total = Counter(
    "progression_snapshot_recoveries_total",
    "Snapshots replaced with defaults at load time",
    ["reason"],  # reason: malformed/read_error
)


def record_mutation(operation: str, success: bool) -> None:
    if not ENABLE_PROMETHEUS:
        return
    progression_mutations_total.labels(
        operation=operation, status="success" if success else "failure"
    ).inc()


def record_xp(source: str, amount: int, leveled_up: bool) -> None:
    if not ENABLE_PROMETHEUS:
        return
    progression_xp_awarded_total.labels(source=source).inc(amount)
    if leveled_up:
        progression_level_ups_total.inc()


def record_app_open_minute() -> None:
    if ENABLE_PROMETHEUS:
        progression_app_open_minutes_total.inc()


def record_persist_failure() -> None:
    if ENABLE_PROMETHEUS:
        progression_persist_failures_total.inc()


def record_snapshot_recovery(reason: str) -> None:
    if ENABLE_PROMETHEUS:
        progression_snapshot_recoveries_total.labels(reason=reason).inc()
