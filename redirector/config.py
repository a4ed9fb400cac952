"""Application configuration: file settings, command-line settings and their merge."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from ipaddress import IPv4Address, IPv6Address, ip_address
from os import PathLike
from pathlib import Path
from typing import Any

from redirector.bang import Bang, parse_bang

DEFAULT_SEARCH = "https://www.qwant.com/?q={}"
DEFAULT_BANGS_URL = "https://duckduckgo.com/bang.js"
DEFAULT_PORT = 3000
DEFAULT_IP = ip_address("0.0.0.0")

IPAddress = IPv4Address | IPv6Address


@dataclass(frozen=True)
class AppConfig:
    """Final application configuration."""

    port: int = DEFAULT_PORT
    ip: IPAddress = DEFAULT_IP
    bangs_url: str = DEFAULT_BANGS_URL
    default_search: str = DEFAULT_SEARCH
    bangs: tuple[Bang, ...] | None = None


@dataclass(frozen=True)
class FileConfig:
    """Configuration read from the configuration file."""

    port: int | None = None
    ip: IPAddress | None = None
    bangs_url: str | None = None
    default_search: str | None = None
    bangs: tuple[Bang, ...] | None = None

    def merge(self, config: Config) -> AppConfig:
        """Merge with command-line settings, which take precedence."""
        return config.merge(self)


@dataclass(frozen=True)
class Config:
    """Configuration given on the command line."""

    port: int | None = None
    ip: IPAddress | None = None
    bangs_url: str | None = None
    default_search: str | None = None

    def merge(self, file: FileConfig | None) -> AppConfig:
        """Merge with an optional file configuration, falling back on defaults."""
        file = file if file is not None else FileConfig()
        default = AppConfig()
        return AppConfig(
            port=_first(self.port, file.port, default.port),
            ip=_first(self.ip, file.ip, default.ip),
            bangs_url=_first(self.bangs_url, file.bangs_url, default.bangs_url),
            default_search=_first(
                self.default_search, file.default_search, default.default_search
            ),
            bangs=file.bangs,
        )


def _first(*values: Any) -> Any:
    return next(value for value in values if value is not None)


def _port(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 65535:
        raise ValueError("'port' must be an integer between 0 and 65535")
    return value


def _ip(value: Any) -> IPAddress | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("'ip' must be a string")
    try:
        return ip_address(value)
    except ValueError:
        raise ValueError(f"invalid IP address {value!r}") from None


def _text(name: str, value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise ValueError(f"{name!r} must be a string")


def _bangs(value: Any) -> tuple[Bang, ...] | None:
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValueError("'bangs' must be an array of tables")
    return tuple(parse_bang(entry) for entry in value)


def parse_file_config(text: str) -> FileConfig:
    """Parse the TOML text of a configuration file."""
    data = tomllib.loads(text)
    return FileConfig(
        port=_port(data.get("port")),
        ip=_ip(data.get("ip")),
        bangs_url=_text("bangs_url", data.get("bangs_url")),
        default_search=_text("default_search", data.get("default_search")),
        bangs=_bangs(data.get("bangs")),
    )


def load_file_config(path: str | PathLike[str]) -> FileConfig:
    """Read and parse a configuration file."""
    return parse_file_config(Path(path).read_text(encoding="utf-8"))