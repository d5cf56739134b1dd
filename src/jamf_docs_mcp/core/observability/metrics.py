"""Metrics collection for observability.

Metrics are emitted as structured log records on a dedicated logger so any
log pipeline can aggregate them.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


class MetricType(Enum):
    """Types of metrics that can be emitted."""

    COUNTER = "counter"
    TIMER = "timer"


@dataclass
class Metric:
    """Structured metric data."""

    name: str
    value: Union[int, float]
    metric_type: MetricType
    labels: Dict[str, str] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "value": self.value,
            "type": self.metric_type.value,
            "labels": self.labels,
            "timestamp": self.timestamp,
        }


class MetricsCollector:
    """Emits metrics to the standard logger."""

    def __init__(self, prefix: str = "jamf_docs_mcp"):
        self.prefix = prefix
        self._logger = logging.getLogger(f"{__name__}.metrics")

    def emit(self, metric: Metric) -> None:
        self._logger.info(f"METRIC: {self.prefix}.{metric.name}", extra={"metric": metric.to_dict()})

    def counter(self, name: str, value: int = 1, labels: Optional[Dict[str, str]] = None) -> None:
        """Emit a counter metric."""
        self.emit(Metric(name=name, value=value, metric_type=MetricType.COUNTER, labels=labels or {}))

    def timer(self, name: str, duration_ms: float, labels: Optional[Dict[str, str]] = None) -> None:
        """Emit a timer metric (duration in milliseconds)."""
        self.emit(Metric(name=name, value=duration_ms, metric_type=MetricType.TIMER, labels=labels or {}))


# Global metrics collector
_metrics = MetricsCollector()


def get_metrics() -> MetricsCollector:
    """Get the global metrics collector."""
    return _metrics
