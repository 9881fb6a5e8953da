from __future__ import annotations

from dataclasses import dataclass

from pvc_usage_exporter.utils import convert_storage_capacity_to_bytes

# Local path provisioner names volume directories "<pv>_<namespace>_<pvc>"
IDENTITY_KEY_SEPARATOR = "_"


def volume_identity_key(volume_name: str, namespace: str, pvc_name: str) -> str:
    """
    Build the key that joins a volume directory to its PersistentVolumeClaim.

    The same function is used for the directory naming convention on disk and
    for the key derived from cluster metadata, so both sides always agree.
    """
    return IDENTITY_KEY_SEPARATOR.join((volume_name, namespace, pvc_name))


@dataclass(frozen=True)
class ClaimRecord:
    pvc_name: str
    namespace: str
    storage_class_name: str | None
    volume_name: str | None
    requested_storage: str | None

    @property
    def identity_key(self) -> str | None:
        if not self.volume_name:
            return None
        return volume_identity_key(self.volume_name, self.namespace, self.pvc_name)

    @property
    def requested_bytes(self) -> int:
        """Raises QuantityError when the requested quantity is malformed."""
        return convert_storage_capacity_to_bytes(self.requested_storage)


@dataclass(frozen=True)
class MetricRecord:
    pvc_name: str
    namespace: str
    storage_class_name: str
    volume_name: str
    requested_bytes: float
    used_bytes: float

    @property
    def labels(self) -> dict[str, str]:
        return {
            "pvcname": self.pvc_name,
            "namespace": self.namespace,
            "storageclass": self.storage_class_name,
            "pvname": self.volume_name,
        }
