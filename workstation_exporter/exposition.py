"""
Prometheus text exposition of the metric registry.
"""

from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .registry import MetricRegistry

CONTENT_TYPE = CONTENT_TYPE_LATEST


def render_exposition(registry: MetricRegistry) -> str:
    """Render every declared series in the text exposition format."""
    return generate_latest(registry.collector_registry).decode("utf-8")
