from __future__ import annotations

import json
import logging
import mimetypes
import threading
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import unquote, urlparse

from mazeshot.scores.store import ScoreStore, ScoreStoreError, ScoreValidationError

if TYPE_CHECKING:
    from mazeshot.app_config import ServerConfig

logger = logging.getLogger(__name__)

SCORES_ROUTE = "/api/scores"
_JSON = "application/json; charset=utf-8"
MAX_BODY_BYTES = 64 * 1024


def resolve_static_path(static_dir: Path, request_path: str) -> Path | None:
    """Map a URL path onto a file under `static_dir`; None for anything outside it or missing."""

    root = Path(static_dir).resolve()
    rel = unquote(request_path).lstrip("/")
    try:
        candidate = (root / rel).resolve() if rel else root
        if candidate != root and root not in candidate.parents:
            return None
        if candidate.is_dir():
            candidate = candidate / "index.html"
        if not candidate.is_file():
            return None
    except (OSError, ValueError):
        # Embedded NUL bytes and over-long names are rejected by the OS layer.
        return None
    return candidate


def make_handler(*, store: ScoreStore, static_dir: Path | None) -> type[BaseHTTPRequestHandler]:
    class ScoreHandler(BaseHTTPRequestHandler):
        protocol_version = "HTTP/1.1"
        # Seconds a connection may sit idle mid-request before the worker thread gives up on it.
        timeout = 10.0

        def _send_bytes(self, body: bytes, content_type: str, status: int = HTTPStatus.OK) -> None:
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def _send_json(self, payload: Any, status: int = HTTPStatus.OK) -> None:
            self._send_bytes(json.dumps(payload).encode("utf-8"), _JSON, status)

        def _read_raw_body(self) -> bytes | None:
            """Request body, or None when it is larger than MAX_BODY_BYTES (left unread)."""

            try:
                length = int(self.headers.get("Content-Length", "0"))
            except ValueError:
                return b""
            if length <= 0:
                return b""
            if length > MAX_BODY_BYTES:
                self.close_connection = True
                return None
            return self.rfile.read(length)

        def do_GET(self) -> None:  # noqa: N802
            parsed = urlparse(self.path)
            if parsed.path == SCORES_ROUTE:
                self._send_json(store.as_payload())
                return

            if static_dir is not None:
                target = resolve_static_path(static_dir, parsed.path)
                if target is not None:
                    mime_type = mimetypes.guess_type(str(target))[0] or "application/octet-stream"
                    self._send_bytes(target.read_bytes(), mime_type)
                    return

            self._send_json({"error": "Not found"}, HTTPStatus.NOT_FOUND)

        def do_POST(self) -> None:  # noqa: N802
            parsed = urlparse(self.path)
            raw = self._read_raw_body()
            if parsed.path != SCORES_ROUTE:
                self._send_json({"error": "Not found"}, HTTPStatus.NOT_FOUND)
                return
            if raw is None:
                self._send_json({"error": "Invalid input"}, HTTPStatus.BAD_REQUEST)
                return

            try:
                payload = json.loads(raw.decode("utf-8")) if raw else None
            except ValueError:
                self._send_json({"error": "Invalid input"}, HTTPStatus.BAD_REQUEST)
                return

            try:
                entry = store.submit(payload)
            except ScoreValidationError:
                self._send_json({"error": "Invalid input"}, HTTPStatus.BAD_REQUEST)
                return
            except ScoreStoreError:
                self._send_json({"error": "Failed to save score"}, HTTPStatus.INTERNAL_SERVER_ERROR)
                return
            self._send_json(entry.to_json(), HTTPStatus.CREATED)

        def log_message(self, format: str, *args: Any) -> None:
            logger.info("%s - %s", self.address_string(), format % args)

    return ScoreHandler


class ScoreServer:
    """Threaded HTTP server for the score API plus the game client's static files."""

    def __init__(
        self,
        *,
        store: ScoreStore,
        host: str = "127.0.0.1",
        port: int = 0,
        static_dir: Path | None = None,
    ) -> None:
        self.store = store
        self.static_dir = Path(static_dir) if static_dir is not None else None
        handler = make_handler(store=store, static_dir=self.static_dir)
        self._httpd = ThreadingHTTPServer((str(host), int(port)), handler)
        self._httpd.daemon_threads = True
        self._thread: threading.Thread | None = None

    @property
    def address(self) -> tuple[str, int]:
        host, port = self._httpd.server_address[:2]
        return (str(host), int(port))

    @property
    def url(self) -> str:
        host, port = self.address
        if host in ("0.0.0.0", ""):
            host = "127.0.0.1"
        return f"http://{host}:{port}"

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True, name="mazeshot-scores")
        self._thread.start()

    def serve_forever(self) -> None:
        self._httpd.serve_forever()

    def close(self) -> None:
        if self._thread is not None:
            self._httpd.shutdown()
            self._thread.join(timeout=2.0)
            self._thread = None
        self._httpd.server_close()


def run_server(cfg: ServerConfig) -> None:
    store = ScoreStore.load(cfg.scores_file)
    server = ScoreServer(store=store, host=cfg.host, port=cfg.port, static_dir=cfg.static_dir)
    host, port = server.address
    logger.info("Server running on %s:%d (scores: %s)", host, port, store.path)
    if cfg.static_dir is not None:
        logger.info("Serving static files from %s", cfg.static_dir)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.close()


__all__ = ["MAX_BODY_BYTES", "SCORES_ROUTE", "ScoreServer", "make_handler", "resolve_static_path", "run_server"]
