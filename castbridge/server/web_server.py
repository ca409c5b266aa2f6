import socket
import socketserver
import logging
import threading
from typing import Optional
from castbridge.config import BridgeSettings, find_free_port
from castbridge.server.api_handler import BridgeHandler
from castbridge.server.network import resolve_local_address
from castbridge.server.router import EndpointRouter

logger = logging.getLogger(__name__)


class _ThreadingServer(socketserver.ThreadingTCPServer):
    # Allow address reuse to prevent "Address already in use" errors on quick restarts
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, address, handler, router: EndpointRouter, chunk_size: int, idle_timeout: float):
        self.router = router
        self.chunk_size = chunk_size
        self.idle_timeout = idle_timeout
        self._connections = set()
        self._connections_lock = threading.Lock()
        super().__init__(address, handler, bind_and_activate=False)

    def process_request(self, request, client_address):
        with self._connections_lock:
            self._connections.add(request)
        super().process_request(request, client_address)

    def shutdown_request(self, request):
        with self._connections_lock:
            self._connections.discard(request)
        super().shutdown_request(request)

    def close_connections(self) -> int:
        """Shuts down every open client socket. Returns how many were open."""
        with self._connections_lock:
            connections = list(self._connections)
        for conn in connections:
            try:
                conn.shutdown(socket.SHUT_RDWR)
            except OSError:
                # Already closed by the client
                pass
        return len(connections)

    def handle_error(self, request, client_address):
        # Only connection-level failures reach here; keep them out of stderr
        logger.debug(f"Connection error from {client_address}", exc_info=True)


class StreamServer:
    """
    Start/stop wrapper around a thread-per-request HTTP server.

    Both start() and stop() are idempotent, since the session controller may
    race through several transitions when a cast session flaps.
    """
    def __init__(self, router: EndpointRouter, settings: BridgeSettings):
        self.router = router
        self.settings = settings
        self._server: Optional[_ThreadingServer] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._server is not None

    @property
    def port(self) -> Optional[int]:
        server = self._server
        return server.server_address[1] if server else None

    @property
    def base_url(self) -> str:
        ip = resolve_local_address(self.settings.advertise_host)
        return f"http://{ip}:{self.port}"

    def _bind(self, port: int) -> _ThreadingServer:
        server = _ThreadingServer(
            (self.settings.host, port),
            BridgeHandler,
            self.router,
            self.settings.chunk_size,
            self.settings.idle_timeout,
        )
        try:
            server.server_bind()
            server.server_activate()
        except OSError:
            server.server_close()
            raise
        return server

    def start(self) -> int:
        """Binds and starts serving on a daemon thread. Returns the bound port."""
        with self._lock:
            if self._server is not None:
                logger.debug("Stream server already running")
                return self.port

            port = self.settings.port
            try:
                server = self._bind(port)
            except OSError as e:
                if port == 0:
                    raise
                logger.warning(f"⚠️ Error binding to port {port}: {e}")
                # fallback: find another port if the configured one is taken
                new_port = find_free_port(port + 1)
                logger.info(f"Attempting fallback to port {new_port}...")
                server = self._bind(new_port)

            self._server = server
            self._thread = threading.Thread(
                target=server.serve_forever, name="castbridge-server", daemon=True
            )
            self._thread.start()

        logger.info(f"🚀 Stream server started on port {self.port}")
        return self.port

    def stop(self) -> None:
        """Stops the accept loop, closes the listening socket and drops open connections."""
        with self._lock:
            server, thread = self._server, self._thread
            self._server = None
            self._thread = None
            if server is None:
                logger.debug("Stream server already stopped")
                return
            server.shutdown()
            dropped = server.close_connections()
            server.server_close()
            if dropped:
                logger.info(f"Closed {dropped} open connection(s)")
            if thread is not None:
                thread.join(timeout=5)
        logger.info("🛑 Stream server stopped")
