"""Reporting module - JSON session reports."""

from .json_reporter import JsonReporter

__all__ = ["JsonReporter"]
