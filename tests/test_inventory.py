import os

import pytest

from pvc_usage_exporter import inventory
from pvc_usage_exporter.errors import InventoryError, SizeProbeError
from pvc_usage_exporter.inventory import VolumeInventory, measure


class TestMeasure:
    def test_empty_directory(self, tmp_path):
        assert measure(str(tmp_path)) == 0

    def test_sums_nested_files(self, tmp_path):
        (tmp_path / "a").write_bytes(b"x" * 10)
        sub = tmp_path / "sub" / "deeper"
        sub.mkdir(parents=True)
        (sub / "b").write_bytes(b"x" * 25)
        (tmp_path / "sub" / "c").write_bytes(b"x" * 5)
        assert measure(str(tmp_path)) == 40

    def test_directories_do_not_count(self, tmp_path):
        for name in ("one", "two", "three"):
            (tmp_path / name).mkdir()
        assert measure(str(tmp_path)) == 0

    def test_regular_file_root(self, tmp_path):
        target = tmp_path / "file"
        target.write_bytes(b"x" * 123)
        assert measure(str(target)) == 123

    def test_symlink_is_not_followed(self, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "big").write_bytes(b"x" * 10_000)
        volume = tmp_path / "volume"
        volume.mkdir()
        link = volume / "link"
        link.symlink_to(outside, target_is_directory=True)
        assert measure(str(volume)) == os.lstat(link).st_size

    def test_missing_path(self, tmp_path):
        with pytest.raises(SizeProbeError) as excinfo:
            measure(str(tmp_path / "missing"))
        assert excinfo.value.partial_bytes == 0
        assert isinstance(excinfo.value.cause, FileNotFoundError)

    def test_unreadable_subdirectory_reports_partial_sum(self, tmp_path, monkeypatch):
        (tmp_path / "readable").write_bytes(b"x" * 7)
        locked = tmp_path / "locked"
        locked.mkdir()
        (locked / "hidden").write_bytes(b"x" * 100)
        real_scandir = os.scandir

        def fake_scandir(path):
            if os.path.basename(path) == "locked":
                raise PermissionError(13, "Permission denied", path)
            return real_scandir(path)

        monkeypatch.setattr(inventory.os, "scandir", fake_scandir)
        with pytest.raises(SizeProbeError) as excinfo:
            measure(str(tmp_path))
        assert excinfo.value.partial_bytes == 7
        assert isinstance(excinfo.value.cause, PermissionError)


class TestVolumeInventory:
    def test_snapshot_lists_children(self, volume_root):
        (volume_root / "vol2_ns2_pvc2").mkdir()
        sizes = VolumeInventory(str(volume_root)).snapshot()
        assert sizes == {"vol1_ns1_pvc1": 1_000_000, "vol2_ns2_pvc2": 0}

    def test_snapshot_is_one_level(self, volume_root):
        sizes = VolumeInventory(str(volume_root)).snapshot()
        assert "nested" not in sizes

    def test_failed_probe_is_omitted(self, volume_root, monkeypatch):
        (volume_root / "broken").mkdir()
        real_measure = measure

        def fake_measure(path):
            if path.endswith("broken"):
                raise SizeProbeError(path, 3, PermissionError("denied"))
            return real_measure(path)

        monkeypatch.setattr("pvc_usage_exporter.inventory.measure", fake_measure)
        sizes = VolumeInventory(str(volume_root)).snapshot()
        assert sizes == {"vol1_ns1_pvc1": 1_000_000}

    def test_unlistable_root_raises(self, tmp_path):
        with pytest.raises(InventoryError):
            VolumeInventory(str(tmp_path / "missing")).snapshot()
