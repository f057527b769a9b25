"""Unit tests for Prometheus metric helpers (progression/observability/metrics.py)"""
from unittest.mock import patch

from prometheus_client import REGISTRY

from progression.observability import metrics


def sample(name, **labels):
    return REGISTRY.get_sample_value(name, labels) or 0


def test_record_mutation_increments_by_status():
    """Test success and failure are counted separately"""
    labels = {"operation": "test_op", "status": "failure"}
    before = sample("progression_mutations_total", **labels)

    with patch.object(metrics, "ENABLE_PROMETHEUS", True):
        metrics.record_mutation("test_op", success=False)

    assert sample("progression_mutations_total", **labels) == before + 1
    assert sample("progression_mutations_total", operation="test_op", status="success") == 0


def test_record_xp_counts_level_ups():
    """Test XP amount and level ups are recorded"""
    xp_before = sample("progression_xp_awarded_total", source="drill")
    levels_before = sample("progression_level_ups_total")

    with patch.object(metrics, "ENABLE_PROMETHEUS", True):
        metrics.record_xp("drill", 50, leveled_up=True)

    assert sample("progression_xp_awarded_total", source="drill") == xp_before + 50
    assert sample("progression_level_ups_total") == levels_before + 1


def test_record_snapshot_recovery():
    """Test recoveries are counted by reason"""
    before = sample("progression_snapshot_recoveries_total", reason="malformed")

    with patch.object(metrics, "ENABLE_PROMETHEUS", True):
        metrics.record_snapshot_recovery("malformed")

    assert sample("progression_snapshot_recoveries_total", reason="malformed") == before + 1


def test_metrics_disabled():
    """Test helpers are no-ops when Prometheus is disabled"""
    before = sample("progression_persist_failures_total")

    with patch.object(metrics, "ENABLE_PROMETHEUS", False):
        metrics.record_persist_failure()

    assert sample("progression_persist_failures_total") == before
