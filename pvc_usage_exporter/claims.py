from __future__ import annotations

import urllib3
from kubernetes import client
from kubernetes.client.models.v1_persistent_volume_claim import (
    V1PersistentVolumeClaim,
)
from kubernetes.client.models.v1_persistent_volume_claim_list import (
    V1PersistentVolumeClaimList,
)

from pvc_usage_exporter import utils
from pvc_usage_exporter.errors import ClaimSourceError, RecordError
from pvc_usage_exporter.models import ClaimRecord

_logger = utils.createLogger(__name__)


def claim_record_from_pvc(pvc: V1PersistentVolumeClaim) -> ClaimRecord:
    """Raises RecordError when the claim lacks metadata or spec."""
    if pvc.metadata is None or pvc.spec is None:
        raise RecordError("pvc without metadata or spec")
    spec = pvc.spec
    requests = {}
    if spec.resources is not None and spec.resources.requests:
        requests = spec.resources.requests
    return ClaimRecord(
        pvc_name=pvc.metadata.name,
        namespace=pvc.metadata.namespace,
        storage_class_name=spec.storage_class_name,
        volume_name=spec.volume_name,
        requested_storage=requests.get("storage"),
    )


class ClaimSource:
    k8s_client: client.CoreV1Api
    timeout_seconds: int | None

    def __init__(self, k8s_client: client.CoreV1Api, timeout_seconds: int | None = None):
        self.k8s_client = k8s_client
        self.timeout_seconds = timeout_seconds

    def list(self) -> list[ClaimRecord]:
        """List PersistentVolumeClaims in all namespaces."""
        kwargs = {}
        if self.timeout_seconds:
            kwargs["timeout_seconds"] = self.timeout_seconds
        try:
            pvcs: V1PersistentVolumeClaimList = (
                self.k8s_client.list_persistent_volume_claim_for_all_namespaces(**kwargs)
            )
        except client.ApiException as e:
            raise ClaimSourceError(
                f"Failed to list pvcs: {e.status} {e.reason}"
            ) from e
        except urllib3.exceptions.HTTPError as e:
            raise ClaimSourceError(f"Failed to reach k8s api: {e}") from e

        records = []
        for pvc in pvcs.items:
            try:
                records.append(claim_record_from_pvc(pvc))
            except RecordError as e:
                name = pvc.metadata.name if pvc.metadata is not None else "<unknown>"
                _logger.error(f"Skipping pvc {name}: {e}")
        return records
