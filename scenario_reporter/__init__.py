"""TeamCity service message reporting for scenario test runs."""

from scenario_reporter.config import ReporterConfig
from scenario_reporter.plugin import ConcurrentHandlingError, ServiceMessagePlugin

__all__ = [
    "ConcurrentHandlingError",
    "ReporterConfig",
    "ServiceMessagePlugin",
]
