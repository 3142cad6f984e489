"""Trigger GitHub Actions workflows and resolve the runs they produce."""

__version__ = "1.2.0"
