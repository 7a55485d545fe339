import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest


class _CountingServer:
    """Local HTTP endpoint that answers every POST with a fixed status."""

    def __init__(self, status_code):
        self.status_code = status_code
        self.hits = []
        counter = self

        class _Handler(BaseHTTPRequestHandler):
            def do_POST(self):
                length = int(self.headers.get("Content-Length") or 0)
                self.rfile.read(length)
                counter.hits.append(self.path)
                body = b'{"error": "unavailable"}'
                self.send_response(counter.status_code)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def log_message(self, *args):
                pass

        self._server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def url(self):
        host, port = self._server.server_address
        return f"http://{host}:{port}/api"

    def start(self):
        self._thread.start()
        return self

    def stop(self):
        self._server.shutdown()
        self._server.server_close()


@pytest.fixture
def unavailable_server():
    server = _CountingServer(503).start()
    yield server
    server.stop()
