"""Core library for page audits."""
