"""Bang detection, the bang cache and query resolution."""

from __future__ import annotations

import logging
import re
import string
import tempfile
import threading
import time
import urllib.request
from collections.abc import Callable, Iterable
from os import PathLike
from pathlib import Path
from urllib.parse import quote

from redirector.bang import Bang, load_bangs
from redirector.config import AppConfig

logger = logging.getLogger(__name__)

CACHE_MAX_AGE = 24 * 60 * 60
CACHE_FILE_NAME = "bang_cache.json"
TEMPLATE_PLACEHOLDER = "{{{s}}}"
FETCH_TIMEOUT = 30

_BANG_AFTER_SPACE = re.compile(r"(?<= )![^ ]+")
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


class BangCache:
    """Thread-safe map from bang trigger to URL template."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._templates: dict[str, str] = {}
        self.last_update: float | None = None

    def update(self, entries: Iterable[Bang], app_config: AppConfig) -> None:
        """Replace the contents with the given entries, then the configured bangs."""
        templates = {bang.trigger: bang.url_template for bang in entries}
        templates.update(
            (bang.trigger, bang.url_template) for bang in app_config.bangs or ()
        )
        with self._lock:
            self._templates = templates
            self.last_update = time.monotonic()
        logger.debug("Bang commands updated successfully.")

    def get(self, trigger: str) -> str | None:
        """Return the URL template for a trigger, if known."""
        with self._lock:
            return self._templates.get(trigger)

    def items(self) -> list[tuple[str, str]]:
        """Return a snapshot of (trigger, template) pairs."""
        with self._lock:
            return list(self._templates.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._templates)


def get_bang(query: str) -> str | None:
    """Return the bang in a query, if any.

    A bang is a '!' at the start of the query or after a space, followed by at
    least one non-space character; it runs up to the next space.
    """
    if len(query) < 2:
        return None
    if query.startswith("!"):
        first_word = query.split(" ", 1)[0]
        if len(first_word) > 1:
            return first_word
    match = _BANG_AFTER_SPACE.search(query)
    return match.group() if match else None


def _encode(text: str) -> str:
    return quote(text, safe="")


def _default_search(app_config: AppConfig, query: str) -> str:
    return app_config.default_search.replace("{}", _encode(query))


def resolve(app_config: AppConfig, query: str, cache: BangCache) -> str:
    """Return the URL a query redirects to."""
    if not query:
        return app_config.default_search.replace("{}", "")

    if not query.startswith("!") and " " not in query:
        return _default_search(app_config, query)

    bang = get_bang(query)
    if bang is not None:
        template = cache.get(bang[1:].translate(_ASCII_LOWER))
        if template is not None:
            term = query.replace(bang, "", 1).strip()
            encoded = _encode(term).replace("%2F", "/")
            if TEMPLATE_PLACEHOLDER in template:
                return template.replace(TEMPLATE_PLACEHOLDER, encoded)
            return template + encoded

    return _default_search(app_config, query)


def _fetch(url: str) -> str:
    with urllib.request.urlopen(url, timeout=FETCH_TIMEOUT) as response:
        charset = response.headers.get_content_charset() or "utf-8"
        return response.read().decode(charset)


def _default_cache_path() -> Path:
    return Path(tempfile.gettempdir()) / CACHE_FILE_NAME


def _read_fresh_cache(path: Path) -> str | None:
    try:
        modified = path.stat().st_mtime
    except OSError:
        return None
    age = time.time() - modified
    if age < 0:
        raise OSError(f"bang cache file {path} was modified in the future")
    if age >= CACHE_MAX_AGE:
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def update_bangs(
    app_config: AppConfig,
    cache: BangCache,
    cache_path: str | PathLike[str] | None = None,
    fetch: Callable[[str], str] | None = None,
) -> None:
    """Fill the cache from the cache file if it is fresh, otherwise from the bangs URL."""
    path = Path(cache_path) if cache_path is not None else _default_cache_path()

    contents = _read_fresh_cache(path)
    if contents is not None:
        entries = load_bangs(contents)
        logger.info("Bang cache is up to date.")
        cache.update(entries, app_config)
        return

    response = (fetch or _fetch)(app_config.bangs_url)
    entries = load_bangs(response)
    path.write_text(response, encoding="utf-8")
    cache.update(entries, app_config)