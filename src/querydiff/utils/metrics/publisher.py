"""
HTTP exporter for Prometheus metrics.
"""

import logging
from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, start_http_server

logger = logging.getLogger(__name__)


class MetricsPublisher:
    """
    Expose the registry on http://0.0.0.0:<port>/metrics.

    Args:
        port: Port to listen on (default: 9091)
        registry: Prometheus registry (default: global REGISTRY)
    """

    def __init__(self, port: int = 9091, registry: Optional[CollectorRegistry] = None):
        self.port = port
        self.registry = registry or REGISTRY
        self._server_started = False

    def start(self) -> None:
        """
        Start the HTTP server once.

        Raises:
            RuntimeError: If the port is already taken
        """
        if self._server_started:
            logger.warning(f"Metrics server already running on port {self.port}")
            return

        try:
            start_http_server(self.port, registry=self.registry)
        except OSError as e:
            raise RuntimeError(f"Metrics server cannot bind port {self.port}: {e}") from e

        self._server_started = True
        logger.info(f"Metrics server started on port {self.port}")

    def is_started(self) -> bool:
        return self._server_started
