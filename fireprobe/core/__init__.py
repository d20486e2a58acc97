"""Core: config, the operation log, the session and console bootstrap."""

from fireprobe.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
