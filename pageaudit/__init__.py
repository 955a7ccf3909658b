# Page audit module
"""
Performance auditing of captured page loads.

This module provides:
- Computed artifacts: memoized derivations over raw traces and protocol logs
- Trace analysis: navigation start resolution and paint milestone selection
- Metrics: First Meaningful Paint / First Contentful Paint scoring
"""
