from __future__ import annotations

import os
import stat

from pvc_usage_exporter import utils
from pvc_usage_exporter.errors import InventoryError, SizeProbeError

_logger = utils.createLogger(__name__)


def measure(path: str) -> int:
    """
    Return the total size of every non-directory entry under path.

    Symlinks are not followed, their own size is counted. On the first
    unreadable entry a SizeProbeError is raised carrying the bytes summed so far.
    """
    total = 0
    try:
        st = os.lstat(path)
        if not stat.S_ISDIR(st.st_mode):
            return st.st_size
        pending = [path]
        while pending:
            current = pending.pop()
            with os.scandir(current) as entries:
                for entry in entries:
                    if entry.is_dir(follow_symlinks=False):
                        pending.append(entry.path)
                    else:
                        total += entry.stat(follow_symlinks=False).st_size
    except OSError as e:
        raise SizeProbeError(path, total, e) from e
    return total


class VolumeInventory:
    root_path: str

    def __init__(self, root_path: str):
        self.root_path = root_path

    def snapshot(self) -> dict[str, int]:
        """Map each immediate child of the root path to its size in bytes."""
        try:
            names = sorted(os.listdir(self.root_path))
        except OSError as e:
            raise InventoryError(f"failed to list {self.root_path}: {e}") from e

        sizes = {}
        for name in names:
            try:
                sizes[name] = measure(os.path.join(self.root_path, name))
            except SizeProbeError as e:
                _logger.error(f"{e}, skipping volume {name} ({e.partial_bytes} bytes read)")
        return sizes
