"""Helpers for pihole-FTL style config files, PID files and the FTL config CLI."""

__version__ = "0.1.0"
