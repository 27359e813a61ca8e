"""Report storage."""

from .output import ReportWriter

__all__ = ["ReportWriter"]
