"""This module contains functionality to start a prometheus exporter and expose metrics with it"""

from logging import getLogger
from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, start_http_server

from catalogprep.util.configuration import MetricsConfig

logger = getLogger("Exporter")


class PrometheusExporter:
    """Used to control the prometheus exporter and to manage the metrics"""

    @property
    def is_running(self) -> bool:
        """Returns whether the exporter is running"""
        return bool(self._thread and self._thread.is_alive())

    def __init__(self, configuration: MetricsConfig, registry: Optional[CollectorRegistry] = None):
        logger.debug("Initializing Prometheus Exporter")
        self.configuration = configuration
        self.registry = registry if registry is not None else REGISTRY
        self._server = None
        self._thread = None

    def run(self) -> None:
        """Starts the default prometheus http endpoint"""
        if self.is_running:
            return
        port = self.configuration.port
        self._server, self._thread = start_http_server(port, registry=self.registry)
        logger.info("Prometheus Exporter started on port %s", port)

    def shut_down(self) -> None:
        """Stops the prometheus http endpoint"""
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        self._server = None
        self._thread = None
        logger.info("Prometheus Exporter stopped")
