"""Tests for cron parsing, presets and timestamps."""

from datetime import datetime, timezone

import pytest

from cron8n.cron import (
    CRON_PRESETS,
    TIMEZONE_OPTIONS,
    archive_timestamp,
    get_preset,
    iso_timestamp,
    parse_cron,
    validate_cron,
)
from cron8n.errors import ValidationError

NOW = datetime(2026, 10, 18, 12, 30, tzinfo=timezone.utc)


class TestParseCron:
    """Tests for parse_cron."""

    @pytest.mark.parametrize("expression", ["* * * * *", "*/15 * * * *", "0 9 * * 1-5", "0 0 1 * *", "5 4 * * sun"])
    def test_valid_expressions_return_future_ascending_runs(self, expression):
        """Test valid expressions yield exactly count strictly-future ascending runs."""
        info = parse_cron(expression, "UTC", count=4, now=NOW)

        assert info.is_valid
        assert info.error is None
        assert len(info.next_runs) == 4
        assert all(run > NOW for run in info.next_runs)
        assert info.next_runs == sorted(info.next_runs)
        assert len(set(info.next_runs)) == 4

    @pytest.mark.parametrize(
        "expression",
        ["60 * * * *", "* 24 * * *", "* * * *", "* * * * * *", "not a cron", "", "0 0 32 * *"],
    )
    def test_malformed_expressions(self, expression):
        """Test malformed expressions give no runs and an error."""
        info = parse_cron(expression, "UTC", now=NOW)

        assert not info.is_valid
        assert info.next_runs == []
        assert info.error

    def test_minute_out_of_range(self):
        """Test a minute of 60 is rejected."""
        assert parse_cron("60 * * * *").is_valid is False

    def test_runs_are_in_requested_timezone(self):
        """Test next runs are computed in the schedule's timezone."""
        info = parse_cron("0 9 * * *", "Asia/Tokyo", count=1, now=NOW)

        run = info.next_runs[0]
        assert run.hour == 9
        assert run.utcoffset().total_seconds() == 9 * 3600

    def test_unknown_timezone(self):
        info = parse_cron("0 9 * * *", "Mars/Olympus_Mons")

        assert not info.is_valid
        assert "Unknown timezone" in info.error

    def test_to_dict(self):
        """Test JSON shape used by the CLI and the UI."""
        data = parse_cron("0 * * * *", "UTC", count=2, now=NOW).to_dict()

        assert data["isValid"] is True
        assert data["nextRuns"] == ["2026-10-18T13:00:00+00:00", "2026-10-18T14:00:00+00:00"]
        assert "error" not in data


class TestValidateCron:
    """Tests for validate_cron."""

    def test_raises_for_invalid(self):
        with pytest.raises(ValidationError, match="Invalid cron expression"):
            validate_cron("60 * * * *")

    def test_returns_info_for_valid(self):
        assert validate_cron("0 0 * * *", "UTC").is_valid


class TestPresets:
    """Tests for cron presets and timezone options."""

    def test_five_presets(self):
        assert [p.name for p in CRON_PRESETS] == ["every-minute", "hourly", "daily", "weekly", "monthly"]

    @pytest.mark.parametrize("preset", CRON_PRESETS, ids=lambda p: p.name)
    def test_presets_validate(self, preset):
        """Test every preset is a valid expression."""
        assert parse_cron(preset.expression).is_valid

    def test_get_preset(self):
        assert get_preset("daily").expression == "0 0 * * *"
        assert get_preset("yearly") is None

    def test_timezone_options(self):
        assert len(TIMEZONE_OPTIONS) == 12
        assert TIMEZONE_OPTIONS[0] == "Europe/Istanbul"
        assert "UTC" in TIMEZONE_OPTIONS


class TestTimestamps:
    """Tests for timestamp helpers."""

    def test_iso_timestamp(self):
        assert iso_timestamp(NOW) == "2026-10-18T12:30:00.000Z"

    def test_archive_timestamp_is_filename_safe(self):
        stamp = archive_timestamp(NOW)

        assert stamp == "2026-10-18T12-30-00-000Z"
        assert ":" not in stamp and "." not in stamp
