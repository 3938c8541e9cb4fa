"""Tests for the liveness evaluator."""

from datetime import datetime, timedelta, timezone

import pytest

from status_monitor.services.liveness import OFFLINE, ONLINE, ensure_utc, evaluate

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestEvaluate:
    @pytest.mark.parametrize("age", [0, 1, 30, 59, 59.9])
    def test_recent_is_online(self, age):
        result = evaluate(NOW, NOW - timedelta(seconds=age), threshold_seconds=60)
        assert result.status == ONLINE
        assert result.is_online

    @pytest.mark.parametrize("age", [60.1, 61, 90, 3600])
    def test_stale_is_offline(self, age):
        result = evaluate(NOW, NOW - timedelta(seconds=age), threshold_seconds=60)
        assert result.status == OFFLINE
        assert not result.is_online

    def test_exact_threshold_is_offline(self):
        result = evaluate(NOW, NOW - timedelta(seconds=60), threshold_seconds=60)
        assert result.status == OFFLINE

    def test_minutes_rounded_to_one_decimal(self):
        result = evaluate(NOW, NOW - timedelta(seconds=127), threshold_seconds=60)
        assert result.seconds_since_last_seen == 127
        assert result.minutes_since_last_seen == 2.1

    def test_two_minutes_stale(self):
        result = evaluate(NOW, NOW - timedelta(minutes=2), threshold_seconds=60)
        assert result.status == OFFLINE
        assert result.minutes_since_last_seen == 2.0

    def test_naive_last_seen_treated_as_utc(self):
        naive = (NOW - timedelta(seconds=10)).replace(tzinfo=None)
        result = evaluate(NOW, naive, threshold_seconds=60)
        assert result.status == ONLINE
        assert result.seconds_since_last_seen == 10

    def test_last_seen_in_future_is_online(self):
        result = evaluate(NOW, NOW + timedelta(seconds=5), threshold_seconds=60)
        assert result.status == ONLINE
        assert result.seconds_since_last_seen == -5

    def test_monotonic_now_crosses_once(self):
        last_seen = NOW
        statuses = [
            evaluate(NOW + timedelta(seconds=s), last_seen, threshold_seconds=60).status
            for s in range(0, 180, 10)
        ]
        crossings = sum(1 for a, b in zip(statuses, statuses[1:]) if a != b)
        assert crossings == 1
        assert statuses[0] == ONLINE
        assert statuses[-1] == OFFLINE


class TestEnsureUtc:
    def test_naive_gets_utc(self):
        assert ensure_utc(datetime(2026, 1, 1)).tzinfo == timezone.utc

    def test_aware_untouched(self):
        tz = timezone(timedelta(hours=2))
        dt = datetime(2026, 1, 1, tzinfo=tz)
        assert ensure_utc(dt) is dt
