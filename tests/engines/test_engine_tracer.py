"""
Tests for the @traced_engine decorator and input fingerprinting.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

from budget_engines.tracer import _canonicalize, compute_input_fingerprint, traced_engine
from budget_kernel.logging_config import LogContext


@traced_engine("demo", "2.0", fingerprint_fields=("start", "end"))
def _demo_engine(start, end, scale=1):
    return (end - start).days * scale


class TestCanonicalize:

    def test_none(self):
        assert _canonicalize(None) == "null"

    def test_dates_are_iso(self):
        assert _canonicalize(date(2023, 8, 31)) == "2023-08-31"
        assert _canonicalize(datetime(2023, 8, 31, 12, 0, tzinfo=timezone.utc)) == (
            "2023-08-31T12:00:00+00:00"
        )

    def test_dict_keys_sorted(self):
        assert _canonicalize({"b": 1, "a": 2}) == _canonicalize({"a": 2, "b": 1})

    def test_decimal_falls_back_to_str(self):
        assert _canonicalize(Decimal("1.50")) == "1.50"


class TestFingerprint:

    def test_deterministic(self):
        args = {"start": date(2023, 8, 1), "end": date(2023, 8, 31)}

        first = compute_input_fingerprint(("start", "end"), args)
        second = compute_input_fingerprint(("start", "end"), dict(args))

        assert first == second
        assert len(first) == 16

    def test_differs_for_different_inputs(self):
        a = compute_input_fingerprint(("start",), {"start": date(2023, 8, 1)})
        b = compute_input_fingerprint(("start",), {"start": date(2023, 8, 2)})

        assert a != b

    def test_missing_field_recorded_as_null(self):
        assert compute_input_fingerprint(("start",), {}) == compute_input_fingerprint(
            ("start",), {"start": None}
        )


class TestTracedEngine:

    def test_result_passed_through(self):
        assert _demo_engine(date(2023, 8, 1), date(2023, 8, 31)) == 30

    def test_wraps_preserves_name(self):
        assert _demo_engine.__name__ == "_demo_engine"

    def test_trace_record_emitted(self, captured_logs):
        _demo_engine(date(2023, 8, 1), date(2023, 8, 31))

        traces = [r for r in captured_logs() if r["message"] == "BUDGET_ENGINE_TRACE"]
        assert len(traces) == 1
        trace = traces[0]
        assert trace["trace_type"] == "BUDGET_ENGINE_TRACE"
        assert trace["engine_name"] == "demo"
        assert trace["engine_version"] == "2.0"
        assert trace["function"] == "_demo_engine"
        assert trace["duration_ms"] >= 0

    def test_positional_and_keyword_calls_share_fingerprint(self, captured_logs):
        _demo_engine(date(2023, 8, 1), date(2023, 8, 31))
        _demo_engine(end=date(2023, 8, 31), start=date(2023, 8, 1))

        traces = [r for r in captured_logs() if r["message"] == "BUDGET_ENGINE_TRACE"]
        assert traces[0]["input_fingerprint"] == traces[1]["input_fingerprint"]

    def test_unlisted_arguments_do_not_affect_fingerprint(self, captured_logs):
        _demo_engine(date(2023, 8, 1), date(2023, 8, 31), scale=1)
        _demo_engine(date(2023, 8, 1), date(2023, 8, 31), scale=5)

        traces = [r for r in captured_logs() if r["message"] == "BUDGET_ENGINE_TRACE"]
        assert traces[0]["input_fingerprint"] == traces[1]["input_fingerprint"]

    def test_each_call_gets_its_own_invocation_id(self, captured_logs):
        _demo_engine(date(2023, 8, 1), date(2023, 8, 31))
        _demo_engine(date(2023, 8, 1), date(2023, 8, 31))

        traces = [r for r in captured_logs() if r["message"] == "BUDGET_ENGINE_TRACE"]
        assert traces[0]["invocation_id"] != traces[1]["invocation_id"]
        assert LogContext.get_all() == {}
