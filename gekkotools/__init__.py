"""Gekko CPU registers, memory addresses and primitives, and .dol executable tools."""

__version__ = "0.1.0"
__all__ = ["address", "primitive", "dol", "dolinfo", "arch", "registers"]