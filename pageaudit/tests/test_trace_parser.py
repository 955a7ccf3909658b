#!/usr/bin/env python3
"""Tests for trace and DevTools log loading."""

import json

import pytest

from pageaudit.src.artifacts import RawArtifacts
from pageaudit.src.errors import MalformedTrace, MissingArtifact
from pageaudit.src.traces import TraceEvent, load_devtools_log, load_trace, parse_trace, parse_trace_event
from pageaudit.tests.fixtures import devtools_logs as logs
from pageaudit.tests.fixtures import trace_builders as tb


class TestParseTrace:

    def test_bare_array_and_wrapped_object_agree(self):
        events = tb.progressive_app_trace()
        assert parse_trace(events) == parse_trace({"traceEvents": events})

    def test_event_fields(self):
        evt = parse_trace_event(tb.paint("firstPaint", tb.at(10), rank=3))
        assert isinstance(evt, TraceEvent)
        assert evt.ts == tb.at(10)
        assert evt.frame == tb.FRAME
        assert evt.data["rank"] == 3
        assert evt.end == evt.ts

    def test_event_without_args(self):
        evt = TraceEvent(ts=1.0, name="RunTask")
        assert dict(evt.args) == {}
        assert evt.frame is None
        assert dict(evt.data) == {}

    def test_duration_extends_end(self):
        evt = parse_trace_event(tb.task(1_000, 250))
        assert evt.end == 1_250

    def test_already_parsed_events_pass_through(self):
        events = parse_trace(tb.no_paint_trace())
        assert parse_trace(events) == events

    @pytest.mark.parametrize("ts", [None, "12", True, -5])
    def test_bad_timestamp(self, ts):
        with pytest.raises(MalformedTrace):
            parse_trace([{"name": "x", "ts": ts}])

    def test_not_a_trace(self):
        with pytest.raises(MalformedTrace):
            parse_trace({"events": []})


class TestLoadFiles:

    def test_load_json(self, tmp_path):
        path = tb.write_trace(tmp_path / "trace.json", tb.progressive_app_trace(), wrap=False)
        assert len(load_trace(path)) == len(tb.progressive_app_trace())

    def test_load_gzip(self, tmp_path):
        path = tb.write_trace(tmp_path / "trace.json.gz", tb.progressive_app_trace())
        assert load_trace(path) == parse_trace(tb.progressive_app_trace())

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(MalformedTrace):
            load_trace(path)

    def test_load_devtools_log(self, tmp_path):
        path = tmp_path / "log.devtools.json"
        path.write_text(json.dumps(logs.http2_push_log()), encoding="utf-8")
        assert len(load_devtools_log(path)) == len(logs.http2_push_log())

    def test_devtools_log_must_be_array(self, tmp_path):
        path = tmp_path / "log.devtools.json"
        path.write_text("{}", encoding="utf-8")
        with pytest.raises(MalformedTrace):
            load_devtools_log(path)


class TestRawArtifacts:

    def test_missing_trace(self):
        raw = RawArtifacts.from_json(devtools_log=[])
        with pytest.raises(MissingArtifact):
            raw.require_trace()
        assert raw.require_devtools_log() == ()

    def test_identity_not_equality(self):
        events = tb.no_paint_trace()
        assert RawArtifacts.from_json(events) != RawArtifacts.from_json(events)
