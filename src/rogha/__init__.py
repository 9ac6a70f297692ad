"""Rogha: weekly editions for friends and circles."""

__version__ = "0.1.0"
