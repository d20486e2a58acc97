"""Shared telemetry: logging setup."""

from fireprobe.shared.telemetry.logging import setup_logging

__all__ = ["setup_logging"]
