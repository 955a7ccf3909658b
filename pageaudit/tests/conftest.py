#!/usr/bin/env python3
"""
Pytest configuration for page audit tests.

Ensures the repository root is importable and provides on-disk trace
fixtures for the CLI tests.
"""

import json
import sys
from pathlib import Path

import pytest

# Add repository root to path for `pageaudit.*` imports
repo_root = Path(__file__).parent.parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from pageaudit.tests.fixtures import devtools_logs, trace_builders  # noqa: E402


@pytest.fixture
def progressive_trace_file(tmp_path):
    return trace_builders.write_trace(tmp_path / "progressive-app.json.gz", trace_builders.progressive_app_trace())


@pytest.fixture
def no_fcp_trace_file(tmp_path):
    return trace_builders.write_trace(tmp_path / "no-fcp.json", trace_builders.no_fcp_trace())


@pytest.fixture
def push_log_file(tmp_path):
    path = tmp_path / "progressive-app.devtools.json"
    path.write_text(json.dumps(devtools_logs.http2_push_log()), encoding="utf-8")
    return path
