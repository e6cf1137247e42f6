"""Alerting and report output for PathWatch."""

from .base import BaseAlertReporter, ConfigurationError
from .report_generator import ReplayReportGenerator
from .smtp_reporter import SMTPAlertReporter
from .templates import AlertTemplates

__all__ = [
    "AlertTemplates",
    "BaseAlertReporter",
    "ConfigurationError",
    "ReplayReportGenerator",
    "SMTPAlertReporter",
]
