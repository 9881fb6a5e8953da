import re
import logging
import os

from pvc_usage_exporter.errors import QuantityError


# fmt: off
STORAGE_CAPACITY_PATTERN = re.compile(r"^(\d*\.?\d+)([a-zA-Z]+)$", re.ASCII)
PLAIN_BYTES_PATTERN = re.compile(r"[0-9]+")
STORAGE_UNITS = {
    "Ki": 1024, "Mi": 1024**2, "Gi": 1024**3, "Ti": 1024**4, "Pi": 1024**5, "Ei": 1024**6,
    "k": 10**3, "M": 10**6,    "G": 10**9,    "T": 10**12,   "P": 10**15,   "E": 10**18
}
# fmt: on


def convert_storage_capacity_to_bytes(storage_capacity: str) -> int:
    """
    Convert a Kubernetes quantity such as "2Gi", "500M" or "1.5Gi" to bytes.
    """
    if storage_capacity is None:
        raise QuantityError("missing storage quantity")
    storage_capacity = storage_capacity.strip()
    match = STORAGE_CAPACITY_PATTERN.match(storage_capacity)
    if match:
        value, unit = match.groups()
        if unit not in STORAGE_UNITS:
            raise QuantityError(f"unknown storage unit {unit!r} in {storage_capacity!r}")
        return int(float(value) * STORAGE_UNITS[unit])
    if not PLAIN_BYTES_PATTERN.fullmatch(storage_capacity):
        raise QuantityError(f"invalid storage quantity {storage_capacity!r}")
    return int(storage_capacity)


def convert_str_to_seconds(timestr: str) -> float:
    units = {
        "ms": 0.001,
        "s": 1,
        "m": 60,
        "h": 3600,
    }
    number = 0
    unit = ""

    # Extract number and unit from string
    for char in timestr.strip():
        if char.isdigit() and unit == "":
            number = number * 10 + int(char)
        else:
            unit += char

    if not unit:
        # default to seconds if no unit is provided
        return number
    if unit not in units:
        raise ValueError(f"Invalid time unit: {unit}")
    return number * units[unit]


def createLogger(name: str) -> logging.Logger:
    """
    Create a logger with the specified name and set its level to LOGLEVEL env or INFO.
    """
    LOGLEVEL = os.environ.get("LOGLEVEL", "INFO").upper()
    loglevel = logging.getLevelNamesMapping().get(LOGLEVEL, logging.INFO)
    logger = logging.getLogger(name)
    logger.setLevel(loglevel)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(loglevel)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    if LOGLEVEL not in logging.getLevelNamesMapping():
        logger.warning(
            f"Invalid log level: {LOGLEVEL}. Must be one of {list(logging.getLevelNamesMapping().keys())}, defaulting to INFO."
        )

    return logger
