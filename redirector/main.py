"""Program entry point: load configuration and run the chosen command."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from os import PathLike
from pathlib import Path

from redirector.cli import completion_script, config_from_args, parse_args
from redirector.config import FileConfig, parse_file_config
from redirector.resolver import BangCache, resolve, update_bangs
from redirector.server import serve

logger = logging.getLogger(__name__)


def default_config_path() -> Path:
    """Return the configuration file location under the home directory."""
    home = os.environ.get("HOME", ".")
    return Path(home) / ".config" / "redirector" / "config.toml"


def read_config(path: str | PathLike[str]) -> FileConfig | None:
    """Load the configuration file, or None if it is missing or unusable."""
    path = Path(path)
    if not path.exists():
        logger.debug("Configuration file not found at %s.", path)
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        logger.error("Failed to read configuration file at %s: %s", path, error)
        return None
    try:
        return parse_file_config(text)
    except ValueError as error:
        logger.error("Failed to parse configuration file at %s: %s", path, error)
        return None


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line."""
    args = parse_args(argv)
    command = args.command
    level = logging.DEBUG if command in (None, "serve") else logging.INFO
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    file_config = read_config(default_config_path()) or FileConfig()
    app_config = file_config.merge(config_from_args(args))

    if command in (None, "serve"):
        serve(app_config, BangCache())
    elif command == "resolve":
        cache = BangCache()
        try:
            update_bangs(app_config, cache)
        except (OSError, ValueError) as error:
            logger.error("Failed to update bang commands: %s", error)
        print(resolve(app_config, args.query, cache))
    elif command == "completions":
        sys.stdout.write(completion_script(args.shell))
    return 0


if __name__ == "__main__":
    sys.exit(main())