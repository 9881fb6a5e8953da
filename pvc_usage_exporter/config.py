from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from pvc_usage_exporter import utils
from pvc_usage_exporter.errors import StartupError

TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Config:
    default_path: str
    node_name: str
    delay_seconds: float = 30
    storage_class: str = "local-path"
    metrics_port: int = 2112
    list_timeout_seconds: int = 60
    kubeconfig_fallback: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        """
        Read configuration from environment variables.
        Raises StartupError for missing or invalid values.
        """
        if environ is None:
            environ = os.environ

        missing = [name for name in ("DEFAULT_PATH", "NODE_NAME") if not environ.get(name)]
        if missing:
            raise StartupError(f"Missing required environment variables: {', '.join(missing)}")

        # Update interval with ms, s, m, h suffixes, no suffix means seconds
        delay = environ.get("DELAY_SECONDS")
        try:
            delay_seconds = utils.convert_str_to_seconds(delay) if delay else cls.delay_seconds
        except ValueError as e:
            raise StartupError(f"Invalid DELAY_SECONDS {delay!r}: {e}") from e
        if delay_seconds <= 0:
            raise StartupError(f"DELAY_SECONDS must be positive, got {delay!r}")

        try:
            metrics_port = int(environ.get("METRICS_PORT", cls.metrics_port))
            list_timeout_seconds = int(
                environ.get("LIST_TIMEOUT_SECONDS", cls.list_timeout_seconds)
            )
        except ValueError as e:
            raise StartupError(f"Invalid numeric setting: {e}") from e

        return cls(
            default_path=environ["DEFAULT_PATH"],
            node_name=environ["NODE_NAME"],
            delay_seconds=delay_seconds,
            storage_class=environ.get("STORAGE_CLASS") or cls.storage_class,
            metrics_port=metrics_port,
            list_timeout_seconds=list_timeout_seconds,
            kubeconfig_fallback=environ.get("KUBECONFIG_FALLBACK", "").lower() in TRUE_VALUES,
        )
