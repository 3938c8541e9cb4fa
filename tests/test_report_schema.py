"""Tests for lenient coercion of inbound status reports."""

import pytest

from status_monitor.schemas.report import ReportIn


class TestReportIn:
    def test_defaults(self):
        report = ReportIn.model_validate({})
        assert report.device_id == "unknown"
        assert report.status == "online"
        assert report.uptime_seconds == 0
        assert report.ip_address == ""
        assert report.is_boot is False
        assert report.client_timestamp is None

    @pytest.mark.parametrize("body", [None, [], "online", 42])
    def test_non_object_body_uses_defaults(self, body):
        assert ReportIn.model_validate(body) == ReportIn()

    def test_timestamp_alias(self):
        assert ReportIn.model_validate({"timestamp": 1234}).client_timestamp == 1234
        assert ReportIn.model_validate({"client_timestamp": "99", "timestamp": 1}).client_timestamp == 99

    def test_negative_counters_clamped(self):
        report = ReportIn.model_validate({"uptime_seconds": -5, "free_heap": "-1", "rssi": -80})
        assert report.uptime_seconds == 0
        assert report.free_heap == 0
        assert report.rssi == -80

    def test_strings_coerced_and_truncated(self):
        report = ReportIn.model_validate({"device_id": 7, "status": "x" * 50, "ip_address": None})
        assert report.device_id == "7"
        assert len(report.status) == 20
        assert report.ip_address == ""

    def test_blank_device_id_falls_back(self):
        assert ReportIn.model_validate({"device_id": "   "}).device_id == "unknown"

    @pytest.mark.parametrize("raw,expected", [("true", True), ("0", False), (1, True), ("nope", False), (None, False)])
    def test_is_boot_variants(self, raw, expected):
        assert ReportIn.model_validate({"is_boot": raw}).is_boot is expected

    def test_out_of_range_integers_clamped(self):
        report = ReportIn.model_validate(
            {"uptime_seconds": 10**20, "rssi": 10**20, "free_heap": "1e30", "timestamp": 10**20}
        )
        assert report.uptime_seconds == 2**63 - 1
        assert report.rssi == 2**31 - 1
        assert report.free_heap == 2**63 - 1
        assert report.client_timestamp is None

    def test_negative_rssi_clamped_to_int32(self):
        assert ReportIn.model_validate({"rssi": -(10**12)}).rssi == -(2**31)

    def test_infinite_float_falls_back(self):
        assert ReportIn.model_validate({"uptime_seconds": "inf"}).uptime_seconds == 0
