"""HTTP front end: redirect handler, bang listing page and server loop."""

from __future__ import annotations

import json
import logging
import socket
import threading
import time
from collections.abc import Mapping
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from ipaddress import IPv6Address
from urllib.parse import parse_qsl, urlsplit

from redirector.config import AppConfig
from redirector.resolver import BangCache, resolve, update_bangs

logger = logging.getLogger(__name__)

UPDATE_INTERVAL = 24 * 60 * 60

_PAGE_HEAD = (
    "<style>:root { background: #181818; color: #ffffff; font-family: monospace; } "
    "table { border-collapse: collapse; width: 100vw; } "
    "table th { text-align: left; padding: 1rem 0; font-size: 1.25rem; width: 100vw; } "
    "table tr { border-bottom: #ffffff10 solid 2px; } "
    "table tr:nth-child(2n) { background: #161616; } "
    "table tr:nth-child(2n+1) { background: #181818; }</style>"
    "<html><head><title>Bang Commands</title></head><body><h1>Bang Commands</h1>"
)


def _optional_repr(value: str | None) -> str:
    if value is None:
        return "None"
    return f"Some({json.dumps(value, ensure_ascii=False)})"


def render_bangs_page(app_config: AppConfig, cache: BangCache) -> str:
    """Render the HTML page listing configured and active bangs."""
    parts = [_PAGE_HEAD]
    if app_config.bangs is not None:
        parts.append(
            "<h2>Configured Bangs</h2><table><th>Abbr.</th><th>Trigger</th><th>URL</th>"
        )
        parts.extend(
            f"<tr><td><strong>{_optional_repr(bang.short_name)}</strong></td>"
            f"<td>{bang.trigger}</td><td>{bang.url_template}</td></tr>"
            for bang in app_config.bangs
        )
        parts.append("</table>")
    parts.append("<h2>Active Bangs</h2><table><th>Trigger</th><th>URL</th>")
    parts.extend(
        f"<tr><td><strong>{trigger}</strong></td><td>{template}</td></tr>"
        for trigger, template in cache.items()
    )
    parts.append("</ul></body></html>")
    return "".join(parts)


def redirect_target(
    app_config: AppConfig, cache: BangCache, params: Mapping[str, str]
) -> str:
    """Return where a request with the given query parameters is redirected."""
    query = params.get("q")
    if query is None:
        return "/bangs"
    start = time.perf_counter()
    target = resolve(app_config, query, cache)
    logger.debug("Request completed in %.3f ms", (time.perf_counter() - start) * 1000)
    logger.info("Redirecting '%s' to '%s'.", query, target)
    return target


def make_handler(
    app_config: AppConfig, cache: BangCache
) -> type[BaseHTTPRequestHandler]:
    """Build a request handler class serving '/' and '/bangs'."""

    class Handler(BaseHTTPRequestHandler):
        server_version = "redirector"

        def do_GET(self) -> None:  # noqa: N802
            url = urlsplit(self.path)
            if url.path == "/":
                params = dict(parse_qsl(url.query, keep_blank_values=True))
                self._redirect(redirect_target(app_config, cache, params))
            elif url.path == "/bangs":
                body = render_bangs_page(app_config, cache).encode("utf-8")
                self._send(HTTPStatus.OK, "text/html; charset=utf-8", body)
            else:
                self._send(HTTPStatus.NOT_FOUND, "text/plain; charset=utf-8", b"")

        def _redirect(self, location: str) -> None:
            self.send_response(HTTPStatus.SEE_OTHER)
            self.send_header("Location", location)
            self.send_header("Content-Length", "0")
            self.end_headers()

        def _send(self, status: HTTPStatus, content_type: str, body: bytes) -> None:
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format: str, *args: object) -> None:  # noqa: A002
            logger.debug("%s - %s", self.address_string(), format % args)

    return Handler


def start_periodic_update(
    app_config: AppConfig, cache: BangCache, interval: float = UPDATE_INTERVAL
) -> threading.Event:
    """Refresh the bang cache now and then every interval seconds.

    Returns an event that stops the background refresh when set.
    """
    stop = threading.Event()

    def run() -> None:
        while True:
            try:
                update_bangs(app_config, cache)
            except (OSError, ValueError) as error:
                logger.error("Failed to update bang commands: %s", error)
            if stop.wait(interval):
                return

    threading.Thread(target=run, name="bang-updater", daemon=True).start()
    return stop


class _IPv6Server(ThreadingHTTPServer):
    address_family = socket.AF_INET6


def _display_address(app_config: AppConfig) -> str:
    if isinstance(app_config.ip, IPv6Address):
        return f"[{app_config.ip}]:{app_config.port}"
    return f"{app_config.ip}:{app_config.port}"


def serve(app_config: AppConfig, cache: BangCache) -> None:
    """Run the redirecting server until interrupted."""
    start_periodic_update(app_config, cache)
    server_class = (
        _IPv6Server if isinstance(app_config.ip, IPv6Address) else ThreadingHTTPServer
    )
    address = _display_address(app_config)
    try:
        server = server_class(
            (str(app_config.ip), app_config.port), make_handler(app_config, cache)
        )
    except OSError as error:
        logger.error("Failed to bind to address '%s': %s", address, error)
        return
    logger.info("Server running on '%s'", address)
    with server:
        server.serve_forever()