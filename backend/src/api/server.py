"""
Theme Park Wait Times - Health Server
Serves the health app from a background thread inside the worker process,
so it reads the same in-memory ingestion state as the scheduler.
"""

import threading

from flask import Flask
from werkzeug.serving import make_server, BaseWSGIServer

from utils.logger import logger


class HealthServer:
    """Threaded WSGI server wrapper with start/stop."""

    def __init__(self, app: Flask, host: str = '0.0.0.0', port: int = 3000):
        self.app = app
        self.host = host
        self.port = port
        self._server: BaseWSGIServer = None
        self._thread: threading.Thread = None

    def start(self) -> None:
        self._server = make_server(self.host, self.port, self.app, threaded=True)
        # Port 0 binds an ephemeral port; report the real one
        self.port = self._server.server_port
        self._thread = threading.Thread(
            target=self._server.serve_forever, name='health-server', daemon=True
        )
        self._thread.start()
        logger.info(f"Health server listening on port {self.port}")

    def stop(self) -> None:
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        self._thread.join(timeout=5)
        self._server = None
        logger.info("Health server stopped")


def start_health_server(app: Flask, port: int, host: str = '0.0.0.0') -> HealthServer:
    """Start serving `app` on `port` and return the running server."""
    server = HealthServer(app, host=host, port=port)
    server.start()
    return server
