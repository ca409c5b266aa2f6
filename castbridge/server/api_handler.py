import http.server
import logging
from castbridge.models import StreamResponse
from castbridge.server.streaming_util import CLIENT_GONE_ERRORS, copy_body

logger = logging.getLogger(__name__)


class BridgeHandler(http.server.BaseHTTPRequestHandler):
    """
    Writes router responses to the socket.

    Expects the owning server to carry `router`, `chunk_size` and `idle_timeout`
    (see StreamServer). One instance handles one connection on its own thread.
    """
    protocol_version = "HTTP/1.1"
    server_version = "CastBridge/1.0"

    def setup(self):
        # Idle keep-alive connections are dropped after this many seconds
        self.timeout = self.server.idle_timeout
        super().setup()

    def do_GET(self):
        self._handle("GET")

    def do_HEAD(self):
        self._handle("HEAD")

    # Other methods still go through token and ID checks, then get 405
    def do_POST(self):
        self._handle("POST")

    def do_PUT(self):
        self._handle("PUT")

    def do_DELETE(self):
        self._handle("DELETE")

    def do_OPTIONS(self):
        self._handle("OPTIONS")

    def _handle(self, method: str):
        if method not in ("GET", "HEAD"):
            # Request bodies are never read, so the connection cannot be reused
            self.close_connection = True
        try:
            response = self.server.router.route(method, self.path, self.headers)
        except Exception as e:
            # The router converts its own failures; this only guards the worker thread
            logger.exception(f"❌ Error handling {method} {self.path}")
            response = StreamResponse.text(500, f"Error: {e}")
        self._send(response, method)

    def _send(self, response: StreamResponse, method: str):
        chunked = False
        try:
            self.send_response(response.status)
            self.send_header("Content-Type", response.content_type)
            for name, value in response.headers.items():
                self.send_header(name, value)
            if response.content_length is not None:
                self.send_header("Content-Length", str(response.content_length))
            elif self.request_version == "HTTP/1.1":
                chunked = True
                self.send_header("Transfer-Encoding", "chunked")
            else:
                # HTTP/1.0 clients read until the connection closes
                self.close_connection = True
                self.send_header("Connection", "close")
            self.end_headers()

            if method == "HEAD":
                return
            if response.is_stream:
                written = copy_body(response.body, self.wfile, self.server.chunk_size, chunked=chunked)
                if response.content_length is not None and written < response.content_length:
                    # Body ended early; closing is the only way to tell the client
                    logger.warning(
                        f"⚠️ Short body for {self.path}: sent {written} of {response.content_length} bytes"
                    )
                    self.close_connection = True
            else:
                self.wfile.write(response.body)
        except CLIENT_GONE_ERRORS as e:
            # Remote player seeked or stopped; nothing to report upstream
            logger.debug(f"Client disconnected during {method} {self.path}: {e}")
            self.close_connection = True
        except OSError as e:
            logger.error(f"❌ I/O error while streaming {self.path}: {e}")
            self.close_connection = True
        finally:
            try:
                response.close()
            except OSError as e:
                logger.debug(f"Error closing stream for {self.path}: {e}")

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)
