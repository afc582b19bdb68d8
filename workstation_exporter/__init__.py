"""
Workstation Exporter - hardware telemetry for Prometheus.
"""

from .const import APP_VERSION

__version__ = APP_VERSION
