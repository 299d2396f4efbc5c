"""
Tests for reference-calendar configuration loading.

Covers:
- Shipped default set -- matches ReferenceCalendar defaults
- Loader (parse_calendar, parse_config_set) -- YAML dict parsing
- get_active_calendar -- file override and BUDGET_CONFIG_TRACE
- Failure modes -- missing file, malformed YAML, unknown or invalid settings
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path

import pytest
import yaml

from budget_config import get_active_calendar
from budget_config.loader import (
    compute_checksum,
    load_config_set,
    parse_calendar,
    parse_config_set,
)
from budget_engines.proration import ProrationEngine
from budget_kernel.domain.budget import BudgetRecord
from budget_kernel.domain.calendar import ReferenceCalendar
from budget_kernel.domain.clock import DeterministicClock
from budget_kernel.domain.repository import InMemoryBudgetRepository
from budget_kernel.exceptions import CalendarConfigError


def _write(path: Path, data: dict) -> Path:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestParseCalendar:

    def test_empty_mapping_gives_defaults(self):
        assert parse_calendar({}) == ReferenceCalendar()

    def test_all_settings(self):
        calendar = parse_calendar({
            "utc_offset_minutes": -300,
            "fallback_days_in_month": 31,
            "decimal_precision": 40,
        })

        assert calendar == ReferenceCalendar(
            utc_offset_minutes=-300,
            fallback_days_in_month=31,
            decimal_precision=40,
        )

    def test_unknown_setting_rejected(self):
        with pytest.raises(CalendarConfigError) as exc_info:
            parse_calendar({"locale": "zh_Hant_TW"})
        assert exc_info.value.value == ["locale"]

    def test_non_mapping_rejected(self):
        with pytest.raises(CalendarConfigError):
            parse_calendar(["utc_offset_minutes", 0])

    def test_out_of_range_value_rejected(self):
        with pytest.raises(CalendarConfigError):
            parse_calendar({"fallback_days_in_month": 45})


class TestParseConfigSet:

    def test_full_set(self):
        data = {
            "config_id": "apac",
            "version": 3,
            "description": "Taipei books",
            "calendar": {"utc_offset_minutes": 480},
        }

        config_set = parse_config_set(data)

        assert config_set.config_id == "apac"
        assert config_set.version == 3
        assert config_set.description == "Taipei books"
        assert config_set.calendar.utc_offset_minutes == 480
        assert config_set.checksum == compute_checksum(data)

    def test_missing_calendar_raises_key_error(self):
        with pytest.raises(KeyError):
            parse_config_set({"config_id": "x"})

    def test_missing_config_id_raises_key_error(self):
        with pytest.raises(KeyError):
            parse_config_set({"calendar": {}})


class TestChecksum:

    def test_key_order_irrelevant(self):
        assert compute_checksum({"a": 1, "b": {"c": 2, "d": 3}}) == compute_checksum(
            {"b": {"d": 3, "c": 2}, "a": 1}
        )

    def test_value_change_detected(self):
        assert compute_checksum({"a": 1}) != compute_checksum({"a": 2})


class TestGetActiveCalendar:

    def test_shipped_default_matches_defaults(self):
        assert get_active_calendar() == ReferenceCalendar()

    def test_override_path(self, tmp_path):
        path = _write(tmp_path / "cal.yaml", {
            "config_id": "apac",
            "calendar": {"utc_offset_minutes": 480},
        })

        assert get_active_calendar(path).utc_offset_minutes == 480

    def test_config_trace_logged(self, tmp_path, captured_logs):
        path = _write(tmp_path / "cal.yaml", {"config_id": "traced", "calendar": {}})

        get_active_calendar(path)

        traces = [r for r in captured_logs() if r["message"] == "BUDGET_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["config_set_id"] == "traced"
        assert traces[0]["checksum"] == load_config_set(path).checksum

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_calendar(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("calendar: [unclosed", encoding="utf-8")

        with pytest.raises(yaml.YAMLError):
            get_active_calendar(path)

    @pytest.mark.parametrize(
        ("setting", "field"),
        [
            ("fallback_days_in_month: 30.0", "fallback_days_in_month"),
            ("decimal_precision: 28.5", "decimal_precision"),
            ("decimal_precision: '28'", "decimal_precision"),
            ("utc_offset_minutes: yes", "utc_offset_minutes"),
        ],
    )
    def test_non_integer_setting_rejected(self, tmp_path, setting, field):
        path = tmp_path / "cal.yaml"
        path.write_text(f"config_id: typed\ncalendar:\n  {setting}\n", encoding="utf-8")

        with pytest.raises(CalendarConfigError) as exc_info:
            get_active_calendar(path)
        assert exc_info.value.field == field

    def test_configured_calendar_drives_engine(self, tmp_path):
        path = _write(tmp_path / "cal.yaml", {
            "config_id": "fallback31",
            "calendar": {"fallback_days_in_month": 31},
        })
        engine = ProrationEngine(
            InMemoryBudgetRepository([BudgetRecord("bad", 310)]),
            calendar=get_active_calendar(path),
            clock=DeterministicClock(datetime(2024, 1, 15, tzinfo=timezone.utc)),
        )

        assert engine.total_amount(date(2024, 1, 1), date(2024, 1, 1)) == 10
