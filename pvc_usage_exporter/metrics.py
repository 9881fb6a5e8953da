from prometheus_client import CollectorRegistry, Gauge

from pvc_usage_exporter.models import MetricRecord

LABEL_NAMES = ["pvcname", "namespace", "storageclass", "pvname"]


class PrometheusMetricSink:
    """
    Label-addressed gauges for requested and used bytes per claim.

    Values are overwritten on every publish. Label sets that stop appearing
    keep their last value until the process restarts.
    """

    registry: CollectorRegistry
    requested_bytes_gauge: Gauge
    used_bytes_gauge: Gauge

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry if registry is not None else CollectorRegistry()
        self.requested_bytes_gauge = Gauge(
            name="storage_requested_bytes",
            documentation="The number of bytes requested by pvc",
            labelnames=LABEL_NAMES,
            registry=self.registry,
        )
        self.used_bytes_gauge = Gauge(
            name="storage_used_bytes",
            documentation="The number of bytes used by pvc",
            labelnames=LABEL_NAMES,
            registry=self.registry,
        )

    def publish(self, record: MetricRecord) -> None:
        labels = record.labels
        self.requested_bytes_gauge.labels(**labels).set(record.requested_bytes)
        self.used_bytes_gauge.labels(**labels).set(record.used_bytes)
