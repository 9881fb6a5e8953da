from __future__ import annotations

import threading
import time
from typing import Iterable, Mapping

from pvc_usage_exporter import utils
from pvc_usage_exporter.claims import ClaimSource
from pvc_usage_exporter.errors import RecordError, TickError
from pvc_usage_exporter.inventory import VolumeInventory
from pvc_usage_exporter.metrics import PrometheusMetricSink
from pvc_usage_exporter.models import ClaimRecord, MetricRecord

_logger = utils.createLogger(__name__)


def join(
    sizes: Mapping[str, int],
    claims: Iterable[ClaimRecord],
    storage_class_name: str,
) -> list[MetricRecord]:
    """
    Match claims of the target storage class to measured volume directories.

    Claims without a matching directory, and directories without a claim, are
    left out. A claim whose requested quantity cannot be parsed is logged and
    skipped.
    """
    records = []
    for claim in claims:
        if claim.storage_class_name is None:
            _logger.debug(f"PVC {claim.namespace}/{claim.pvc_name} has no storage class")
            continue
        if claim.storage_class_name != storage_class_name:
            continue
        key = claim.identity_key
        if key is None:
            _logger.debug(f"PVC {claim.namespace}/{claim.pvc_name} is not bound yet")
            continue
        if key not in sizes:
            continue
        try:
            requested_bytes = claim.requested_bytes
        except RecordError as e:
            _logger.error(f"Skipping PVC {claim.namespace}/{claim.pvc_name}: {e}")
            continue
        records.append(
            MetricRecord(
                pvc_name=claim.pvc_name,
                namespace=claim.namespace,
                storage_class_name=claim.storage_class_name,
                volume_name=claim.volume_name,
                requested_bytes=float(requested_bytes),
                used_bytes=float(sizes[key]),
            )
        )
    return records


class Reconciler:
    inventory: VolumeInventory
    claim_source: ClaimSource
    sink: PrometheusMetricSink
    storage_class_name: str
    interval: float

    def __init__(
        self,
        inventory: VolumeInventory,
        claim_source: ClaimSource,
        sink: PrometheusMetricSink,
        storage_class_name: str,
        interval: float,
    ):
        self.inventory = inventory
        self.claim_source = claim_source
        self.sink = sink
        self.storage_class_name = storage_class_name
        self.interval = interval

    def run_once(self) -> list[MetricRecord] | None:
        """
        Run a single tick. Returns the published records, or None when a data
        source failed and the tick was skipped.
        """
        started = time.monotonic()
        try:
            sizes = self.inventory.snapshot()
        except TickError as e:
            _logger.error(f"Skipping tick, volume inventory failed: {e}")
            return None

        try:
            claims = self.claim_source.list()
        except TickError as e:
            _logger.error(f"Skipping tick, listing pvcs failed: {e}")
            return None

        records = join(sizes, claims, self.storage_class_name)
        for record in records:
            self.sink.publish(record)

        _logger.info(
            f"Measured {len(sizes)} volumes, listed {len(claims)} pvcs, published {len(records)} records"
        )
        _logger.debug(f"Tick took {time.monotonic() - started:.3f} seconds")
        return records

    def run_forever(self, stop_event: threading.Event | None = None) -> None:
        if stop_event is None:
            stop_event = threading.Event()
        while not stop_event.is_set():
            try:
                self.run_once()
            except Exception:
                _logger.exception("Unexpected error during tick")
            stop_event.wait(self.interval)
