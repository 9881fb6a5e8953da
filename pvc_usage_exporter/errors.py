class StartupError(Exception):
    """Unrecoverable misconfiguration detected before the loop starts."""


class TickError(Exception):
    """A data source failed; the current tick is skipped."""


class InventoryError(TickError):
    pass


class ClaimSourceError(TickError):
    pass


class RecordError(Exception):
    """A single volume or claim could not be handled and is dropped."""


class SizeProbeError(RecordError):
    def __init__(self, path: str, partial_bytes: int, cause: OSError):
        super().__init__(f"failed to measure {path}: {cause}")
        self.path = path
        self.partial_bytes = partial_bytes
        self.cause = cause


class QuantityError(RecordError, ValueError):
    pass
