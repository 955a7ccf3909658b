#!/usr/bin/env python3
"""Tests for the audit_trace CLI exit codes and report shape."""

import json

from pageaudit.cli.audit_trace import main


def test_writes_report(tmp_path, progressive_trace_file, push_log_file):
    output = tmp_path / "out" / "metrics.json"
    code = main([
        "--trace", str(progressive_trace_file),
        "--devtools-log", str(push_log_file),
        "--output", str(output),
    ])
    assert code == 0

    report = json.loads(output.read_text(encoding="utf-8"))
    fmp = report["metrics"]["FirstMeaningfulPaint"]
    assert fmp == {"rawValue": 1099.523, "score": 0.99, "displayValue": "1,100\xa0ms"}
    assert report["metrics"]["FirstContentfulPaint"]["rawValue"] == 880.0
    assert [r["requestId"] for r in report["pushedRequests"]] == ["1000.2", "1000.3"]
    assert report["schemaVersion"] == "1.0.0"
    assert report["provenance"]["traceHash"].startswith("sha256:")


def test_output_is_deterministic(tmp_path, progressive_trace_file):
    first, second = tmp_path / "a.json", tmp_path / "b.json"
    assert main(["--trace", str(progressive_trace_file), "--output", str(first)]) == 0
    assert main(["--trace", str(progressive_trace_file), "--output", str(second)]) == 0
    assert first.read_bytes() == second.read_bytes()


def test_prints_to_stdout(progressive_trace_file, capsys):
    assert main(["--trace", str(progressive_trace_file)]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["pushedRequests"] == []


def test_degraded_metric_exit_code(tmp_path, no_fcp_trace_file):
    output = tmp_path / "metrics.json"
    assert main(["--trace", str(no_fcp_trace_file), "--output", str(output)]) == 1

    report = json.loads(output.read_text(encoding="utf-8"))
    assert report["metrics"]["FirstMeaningfulPaint"]["rawValue"] == 482.318
    assert "rawValue" not in report["metrics"]["FirstContentfulPaint"]
    assert "debugString" in report["metrics"]["FirstContentfulPaint"]


def test_missing_trace_file(tmp_path):
    assert main(["--trace", str(tmp_path / "missing.json")]) == 2


def test_missing_configs(tmp_path, progressive_trace_file):
    assert main(["--trace", str(progressive_trace_file), "--configs", str(tmp_path)]) == 2
