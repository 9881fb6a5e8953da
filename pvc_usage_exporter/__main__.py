import signal
import sys
import threading

from kubernetes import client, config
from prometheus_client import start_http_server

from pvc_usage_exporter import utils
from pvc_usage_exporter.claims import ClaimSource
from pvc_usage_exporter.config import Config
from pvc_usage_exporter.errors import StartupError
from pvc_usage_exporter.inventory import VolumeInventory
from pvc_usage_exporter.metrics import PrometheusMetricSink
from pvc_usage_exporter.reconciler import Reconciler

_logger = utils.createLogger(__name__)


def load_k8s_client(cfg: Config) -> client.CoreV1Api:
    try:
        config.load_incluster_config()
    except config.ConfigException as e:
        if not cfg.kubeconfig_fallback:
            raise StartupError(f"Failed to load k8s config: {e}") from e
        _logger.warning(f"Not running in cluster ({e}), loading kubeconfig")
        try:
            config.load_kube_config()
        except config.ConfigException as e:
            raise StartupError(f"Failed to load kubeconfig: {e}") from e
    return client.CoreV1Api()


def main():
    try:
        cfg = Config.from_env()
        _logger.info(
            f"path: {cfg.default_path}, delay: {cfg.delay_seconds}, "
            f"storage class: {cfg.storage_class}, node name: {cfg.node_name}"
        )
        k8s_client = load_k8s_client(cfg)
    except StartupError as e:
        _logger.error(f"Startup failed: {e}")
        sys.exit(1)

    sink = PrometheusMetricSink()
    reconciler = Reconciler(
        inventory=VolumeInventory(cfg.default_path),
        claim_source=ClaimSource(k8s_client, timeout_seconds=cfg.list_timeout_seconds),
        sink=sink,
        storage_class_name=cfg.storage_class,
        interval=cfg.delay_seconds,
    )

    stop_event = threading.Event()

    def _stop(signum, _frame):
        _logger.info(f"Received signal {signum}, stopping")
        stop_event.set()

    signal.signal(signal.SIGTERM, _stop)
    signal.signal(signal.SIGINT, _stop)

    start_http_server(cfg.metrics_port, registry=sink.registry)  # Metrics exporter server
    _logger.info(f"Started pvc usage exporter on port {cfg.metrics_port}")
    reconciler.run_forever(stop_event)


if __name__ == "__main__":
    main()
