"""
Shared utilities for the evolutionary tuning engine.

Holds the exception hierarchy, run-wide constants and defaults, and small
file/JSON helpers used by the engines.
"""
