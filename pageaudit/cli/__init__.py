"""Command-line entrypoints for page audits."""
