"""
Shared fixtures for the exporter tests.
"""

import pytest

from pvc_usage_exporter.models import ClaimRecord, volume_identity_key


class FakeSink:
    """Collects published records instead of exposing them."""

    def __init__(self):
        self.records = []
        self.values = {}

    def publish(self, record):
        self.records.append(record)
        key = tuple(sorted(record.labels.items()))
        self.values[key] = (record.requested_bytes, record.used_bytes)


class FakeInventory:
    def __init__(self, sizes=None, error=None, on_snapshot=None):
        self.sizes = sizes or {}
        self.error = error
        self.on_snapshot = on_snapshot
        self.calls = 0

    def snapshot(self):
        self.calls += 1
        if self.on_snapshot is not None:
            self.on_snapshot(self.calls)
        if self.error is not None:
            raise self.error
        return dict(self.sizes)


class FakeClaims:
    def __init__(self, claims=None, error=None):
        self.claims = claims or []
        self.error = error
        self.calls = 0

    def list(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.claims)


def _make_claim(
    pvc_name="pvc1",
    namespace="ns1",
    storage_class_name="local-path",
    volume_name="vol1",
    requested_storage="2Gi",
):
    return ClaimRecord(
        pvc_name=pvc_name,
        namespace=namespace,
        storage_class_name=storage_class_name,
        volume_name=volume_name,
        requested_storage=requested_storage,
    )


@pytest.fixture
def make_claim():
    """Factory for ClaimRecords, defaults to pvc1/ns1 bound to vol1 requesting 2Gi."""
    return _make_claim


@pytest.fixture
def fake_inventory():
    return FakeInventory


@pytest.fixture
def fake_claims():
    return FakeClaims


@pytest.fixture
def fake_sink():
    return FakeSink()


@pytest.fixture
def volume_root(tmp_path):
    """Root with a single 1,000,000 byte volume for pvc1 in ns1."""
    volume = tmp_path / volume_identity_key("vol1", "ns1", "pvc1")
    volume.mkdir()
    (volume / "data.bin").write_bytes(b"\0" * 600_000)
    nested = volume / "nested"
    nested.mkdir()
    (nested / "more.bin").write_bytes(b"\0" * 400_000)
    return tmp_path
