from ipaddress import ip_address

import pytest

from redirector.bang import Bang, Category
from redirector.config import (
    AppConfig,
    Config,
    FileConfig,
    load_file_config,
    parse_file_config,
)


def test_app_config_defaults():
    config = AppConfig()
    assert config.port == 3000
    assert config.ip == ip_address("0.0.0.0")
    assert config.bangs_url == "https://duckduckgo.com/bang.js"
    assert config.default_search == "https://www.qwant.com/?q={}"
    assert config.bangs is None


def test_config_merge_without_file_gives_defaults():
    assert Config().merge(None) == AppConfig()


def test_cli_takes_precedence_over_file():
    file = FileConfig(port=9090, bangs_url="https://bangs.example.com/list.json")
    merged = Config(port=8080).merge(file)
    assert merged.port == 8080
    assert merged.bangs_url == "https://bangs.example.com/list.json"
    assert merged.default_search == AppConfig().default_search


def test_file_merge_matches_config_merge():
    file = FileConfig(ip=ip_address("127.0.0.1"), default_search="https://s.example.com/?q={}")
    cli = Config(ip=ip_address("::1"), port=4000)
    assert file.merge(cli) == cli.merge(file)
    merged = file.merge(cli)
    assert merged.ip == ip_address("::1")
    assert merged.default_search == "https://s.example.com/?q={}"


def test_bangs_come_from_file():
    bangs = (Bang(trigger="x", url_template="https://x.example.com/?q="),)
    assert Config(port=1).merge(FileConfig(bangs=bangs)).bangs == bangs


def test_parse_file_config_full():
    text = """
port = 8080
ip = "127.0.0.1"
bangs_url = "https://bangs.example.com/list.json"
default_search = "https://s.example.com/?q={}"

[[bangs]]
trigger = "ex"
url_template = "https://example.com/?q={{{s}}}"
category = "Tech"

[[bangs]]
t = "doc"
u = "https://docs.example.com/search?q="
"""
    config = parse_file_config(text)
    assert config.port == 8080
    assert config.ip == ip_address("127.0.0.1")
    assert config.bangs_url == "https://bangs.example.com/list.json"
    assert config.default_search == "https://s.example.com/?q={}"
    assert config.bangs == (
        Bang(
            trigger="ex",
            url_template="https://example.com/?q={{{s}}}",
            category=Category.TECH,
        ),
        Bang(trigger="doc", url_template="https://docs.example.com/search?q="),
    )


def test_parse_empty_file_config():
    assert parse_file_config("") == FileConfig()


@pytest.mark.parametrize(
    "text",
    [
        "port = 70000",
        "port = -1",
        "port = true",
        'ip = "not-an-ip"',
        "ip = 5",
        "bangs_url = 3",
        'bangs = "nope"',
        "[[bangs]]\ntrigger = \"x\"",
        "port = = 1",
    ],
)
def test_parse_file_config_errors(text):
    with pytest.raises(ValueError):
        parse_file_config(text)


def test_load_file_config(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('port = 5000\ndefault_search = "https://s.example.com/?q={}"\n')
    config = load_file_config(path)
    assert config.port == 5000
    assert config.default_search == "https://s.example.com/?q={}"


def test_load_missing_file_config(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_file_config(tmp_path / "missing.toml")