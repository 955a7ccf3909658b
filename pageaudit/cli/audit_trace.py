#!/usr/bin/env python3
"""
Page audit CLI

Compute First Meaningful Paint and First Contentful Paint for a captured
trace, plus the server-pushed requests of its DevTools log.

Usage:
    python -m pageaudit.cli.audit_trace --trace data/progressive-app.json
    python -m pageaudit.cli.audit_trace --trace t.json.gz --devtools-log t.devtools.json
    python -m pageaudit.cli.audit_trace --trace t.json --output out/metrics.json

Exit codes:
    0  every metric resolved
    1  at least one metric is unavailable (see debugString)
    2  the inputs or the configuration could not be read
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from ..src.artifacts import (
    DEFAULT_PASS,
    PUSHED_REQUESTS,
    AuditArtifacts,
    RawArtifacts,
    build_default_registry,
)
from ..src.config import get_metric_options, load_scoring_config
from ..src.deterministic import compute_file_hash, dumps_deterministic, write_json_deterministic
from ..src.errors import PageAuditError
from ..src.metrics import FIRST_CONTENTFUL_PAINT, FIRST_MEANINGFUL_PAINT, METRICS_SCHEMA_VERSION
from ..src.metrics.audits import audit_metric
from ..src.traces import load_devtools_log, load_trace

logger = logging.getLogger(__name__)

METRICS = (FIRST_MEANINGFUL_PAINT, FIRST_CONTENTFUL_PAINT)


async def run_audit(raw: RawArtifacts, config: dict) -> dict:
    """
    Audit one pass with a fresh computed artifact graph.

    Returns:
        {"metrics": {name: MetricResult dict}, "pushedRequests": [...]}
    """
    artifacts = AuditArtifacts(passes={raw.pass_name: raw}, computed=build_default_registry())

    results = await asyncio.gather(
        *(
            audit_metric(name, artifacts, get_metric_options(name, config), raw.pass_name)
            for name in METRICS
        )
    )

    pushed = []
    if raw.devtools_log is not None:
        records = await artifacts.computed.request(PUSHED_REQUESTS, raw)
        pushed = [{"requestId": r.request_id, "url": r.url} for r in records]

    return {
        "metrics": {name: result.to_dict() for name, result in zip(METRICS, results)},
        "pushedRequests": pushed,
    }


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Page audit: paint timing metrics from a Chrome trace",
    )
    parser.add_argument(
        "--trace",
        type=Path,
        required=True,
        help="Trace file (.json or .json.gz)",
    )
    parser.add_argument(
        "--devtools-log",
        type=Path,
        help="DevTools protocol log (.json or .json.gz)",
    )
    parser.add_argument(
        "--configs",
        type=Path,
        help="Configs directory containing scoring.yaml (default: bundled)",
    )
    parser.add_argument(
        "--pass-name",
        default=DEFAULT_PASS,
        help="Capture pass name",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write the JSON report here instead of stdout",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = load_scoring_config(args.configs, include_hashes=True)
        raw = RawArtifacts(
            pass_name=args.pass_name,
            trace=load_trace(args.trace),
            devtools_log=load_devtools_log(args.devtools_log) if args.devtools_log else None,
        )
    except (OSError, ValueError, PageAuditError) as e:
        logger.error("Could not read inputs: %s", e)
        return 2

    report = asyncio.run(run_audit(raw, config))
    report["schemaVersion"] = METRICS_SCHEMA_VERSION
    report["provenance"] = {
        "traceHash": compute_file_hash(args.trace),
        "configHash": config["_provenance"]["config_hash"],
    }

    if args.output:
        write_json_deterministic(report, args.output)
        logger.info("Wrote %s", args.output)
    else:
        print(dumps_deterministic(report))

    degraded = [name for name, result in report["metrics"].items() if "rawValue" not in result]
    if degraded:
        logger.warning("Unavailable metrics: %s", ", ".join(degraded))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
