#!/usr/bin/env python3
"""
Tests for the First Meaningful Paint and First Contentful Paint audits.

Traces come from fixtures.trace_builders; each scenario reproduces a
trace shape seen in the wild (late tracing marker, bogus navigationStart,
missing milestones) with exact expected timings.
"""

import asyncio

import pytest

from pageaudit.src.artifacts import AuditArtifacts, RawArtifacts, build_default_registry
from pageaudit.src.errors import MetricUnavailable
from pageaudit.src.metrics import (
    FIRST_MEANINGFUL_PAINT,
    compute_first_meaningful_paint,
    compute_log_normal_score,
)
from pageaudit.src.metrics.audits import (
    audit_first_contentful_paint,
    audit_first_meaningful_paint,
)
from pageaudit.src.traces import (
    TraceEventIndex,
    compute_trace_of_tab,
    parse_trace,
    select_first_meaningful_paint,
)
from pageaudit.tests.fixtures import trace_builders as tb


def make_artifacts(events):
    raw = RawArtifacts.from_json(trace=events)
    return AuditArtifacts(passes={raw.pass_name: raw}, computed=build_default_registry())


def run_fmp(events, options=None):
    return asyncio.run(audit_first_meaningful_paint(make_artifacts(events), options))


def run_fcp(events, options=None):
    return asyncio.run(audit_first_contentful_paint(make_artifacts(events), options))


# =============================================================================
# FMP scenarios
# =============================================================================

class TestFirstMeaningfulPaint:

    def test_progressive_app(self):
        result = run_fmp(tb.progressive_app_trace())
        assert result.raw_value == 1099.523
        assert result.score == 0.99
        assert result.display_value == "1,100\xa0ms"
        assert result.debug_string is None
        assert result.available

    def test_tracing_started_after_navigation_start(self):
        result = run_fmp(tb.late_tracing_started_trace())
        assert result.raw_value == 529.916
        assert result.display_value == "530\xa0ms"

    def test_bad_navigation_start_is_reconstructed(self):
        result = run_fmp(tb.bad_nav_start_trace())
        assert result.raw_value == 632.424
        assert result.display_value == "630\xa0ms"

    def test_fmp_before_fcp(self):
        result = run_fmp(tb.preact_trace())
        assert result.raw_value == 878.353
        assert result.display_value == "880\xa0ms"

    def test_candidate_fallback_picks_latest_when_unranked(self):
        result = run_fmp(tb.no_fmp_event_trace())
        assert result.raw_value == 4460.928
        assert result.display_value == "4,460\xa0ms"
        assert "candidate" in result.debug_string

    def test_candidate_fallback_respects_rank(self):
        result = run_fmp(tb.no_fmp_event_trace(ranks=[1, 5, 2]))
        assert result.raw_value == 2800.0
        assert result.debug_string is not None

    def test_rank_ties_go_to_latest(self):
        result = run_fmp(tb.no_fmp_event_trace(ranks=[3, 3, 1]))
        assert result.raw_value == 2800.0

    def test_missing_fcp_does_not_affect_fmp(self):
        result = run_fmp(tb.no_fcp_trace())
        assert result.raw_value == 482.318
        assert result.display_value == "480\xa0ms"
        assert result.debug_string is None

    def test_no_meaningful_marks_uses_fcp(self):
        result = run_fmp(tb.no_meaningful_paint_trace())
        assert result.raw_value == 482.318
        assert result.display_value == "480\xa0ms"
        assert result.debug_string is None

    def test_marks_from_previous_navigation_are_ignored(self):
        result = run_fmp(tb.reload_trace())
        assert result.raw_value == 482.318
        assert result.display_value == "480\xa0ms"
        assert result.debug_string is None

    def test_no_paint_degrades(self):
        result = run_fmp(tb.no_paint_trace())
        assert result.raw_value is None
        assert result.score is None
        assert not result.available
        assert "FirstMeaningfulPaint unavailable" in result.debug_string
        assert "paint milestone" in result.debug_string

    def test_empty_trace_degrades(self):
        result = run_fmp([])
        assert result.raw_value is None
        assert "reading the trace timeline" in result.debug_string

    def test_custom_scoring_options(self):
        options = {"score_podr": 500, "score_median": 1000}
        result = run_fmp(tb.progressive_app_trace(), options)
        assert result.raw_value == 1099.523
        assert result.score == compute_log_normal_score(1099.523, 500, 1000)
        assert result.score < 0.5

    def test_to_dict_uses_wire_names(self):
        payload = run_fmp(tb.progressive_app_trace()).to_dict()
        assert payload == {"rawValue": 1099.523, "score": 0.99, "displayValue": "1,100\xa0ms"}

    def test_metric_is_computed_once_per_run(self):
        artifacts = make_artifacts(tb.progressive_app_trace())

        async def scenario():
            return await asyncio.gather(
                audit_first_meaningful_paint(artifacts),
                audit_first_meaningful_paint(artifacts),
                audit_first_contentful_paint(artifacts),
            )

        fmp_a, fmp_b, fcp = asyncio.run(scenario())
        assert fmp_a == fmp_b
        assert fcp.raw_value == 880.0
        assert artifacts.computed.execution_counts["TraceOfTab"] == 1
        assert artifacts.computed.execution_counts[FIRST_MEANINGFUL_PAINT] == 1


# =============================================================================
# FCP
# =============================================================================

class TestFirstContentfulPaint:

    def test_progressive_app(self):
        result = run_fcp(tb.progressive_app_trace())
        assert result.raw_value == 880.0
        assert result.display_value == "880\xa0ms"
        assert result.score == 1.0

    def test_missing_fcp_degrades(self):
        result = run_fcp(tb.no_fcp_trace())
        assert result.raw_value is None
        assert "FirstContentfulPaint unavailable" in result.debug_string


# =============================================================================
# TraceOfTab
# =============================================================================

class TestTraceOfTab:

    def test_timings_relative_to_navigation_start(self):
        trace_of_tab = compute_trace_of_tab(parse_trace(tb.progressive_app_trace()))
        assert trace_of_tab.main_frame_ids.frame_id == tb.FRAME
        assert trace_of_tab.main_frame_ids.pid == tb.PID
        assert trace_of_tab.timings["navigationStart"] == 0
        assert trace_of_tab.timings["firstPaint"] == 880.0
        assert trace_of_tab.timings["firstMeaningfulPaint"] == 1099.523
        assert trace_of_tab.timings["domContentLoaded"] == 1200.0
        assert trace_of_tab.timings["load"] == 1500.0
        assert trace_of_tab.timings["traceEnd"] == 3001.0
        assert not trace_of_tab.fmp_fell_back

    def test_frame_events_are_time_ordered(self):
        trace_of_tab = compute_trace_of_tab(parse_trace(tb.progressive_app_trace()))
        timestamps = [e.ts for e in trace_of_tab.frame_events]
        assert timestamps == sorted(timestamps)
        main_thread = [e.ts for e in trace_of_tab.main_thread_events]
        assert main_thread == sorted(main_thread)
        assert all(e.pid == tb.PID for e in trace_of_tab.process_events)

    def test_candidate_fallback_is_flagged(self):
        trace_of_tab = compute_trace_of_tab(parse_trace(tb.no_fmp_event_trace()))
        assert trace_of_tab.fmp_fell_back
        assert trace_of_tab.first_meaningful_paint.stage == "firstMeaningfulPaintCandidate"

    def test_missing_fmp_is_recorded_not_raised(self):
        trace_of_tab = compute_trace_of_tab(parse_trace(tb.no_paint_trace()))
        assert trace_of_tab.first_meaningful_paint is None
        assert trace_of_tab.fmp_failure
        with pytest.raises(MetricUnavailable):
            compute_first_meaningful_paint(trace_of_tab)

    def test_custom_ranker(self):
        def earliest_first(event):
            return -event.ts

        trace_of_tab = compute_trace_of_tab(parse_trace(tb.no_fmp_event_trace()), ranker=earliest_first)
        assert trace_of_tab.timings["firstMeaningfulPaint"] == 1200.0


# =============================================================================
# Candidate window
# =============================================================================

class TestCandidateWindow:

    def _frame_events(self):
        index = TraceEventIndex.from_events(parse_trace(tb.no_fmp_event_trace()))
        return index.frame_events(tb.FRAME)

    def test_candidates_after_window_are_dropped(self):
        selection = select_first_meaningful_paint(self._frame_events(), tb.at(0), tb.at(3_000_000))
        assert selection.event.ts == tb.at(2_800_000)
        assert selection.fell_back

    def test_window_end_is_inclusive(self):
        selection = select_first_meaningful_paint(self._frame_events(), tb.at(0), tb.at(1_200_000))
        assert selection.event.ts == tb.at(1_200_000)

    def test_no_candidate_inside_window(self):
        with pytest.raises(MetricUnavailable):
            select_first_meaningful_paint(self._frame_events(), tb.at(0), tb.at(1_100_000))
