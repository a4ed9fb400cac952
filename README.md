# redirector

A small search redirector. Set it as your browser's search engine and it
forwards each query to the right site. A query that holds a *bang* such as
`!gh` goes to the site registered for that trigger. Any other query goes to
your default search engine.

## Installation

```
pip install .
```

Only the Python standard library is needed, on Python 3.11 or later. To run
the tests, install the `test` extra (`pip install .[test]`) and run `pytest`.

## Commands

### Starting the server

Start the redirecting server. This is also what runs when no subcommand is
given:

```
redirector serve --port 3000 --ip 127.0.0.1
```

`-p`/`--port` sets the port and `-i`/`--ip` sets the address to listen on. The
address may be IPv4 or IPv6. Once the server is running, use
`http://127.0.0.1:3000/?q=%s` as the search URL in your browser.

The server answers these paths:

- `/?q=...` answers with a `303 See Other` redirect to the resolved URL.
- `/` without a `q` parameter redirects to `/bangs`.
- `/bangs` shows an HTML page that lists the bangs from the configuration
  file, followed by every bang in the active cache.
- Any other path answers `404`.

The bang list is loaded in the background when the server starts. It is
loaded again every 24 hours after that. If a load fails, the error is logged
and the server keeps running.

### Resolving a single query

Resolve one query and print the URL it leads to:

```
redirector resolve "!gh rust programming"
```

### Shell completions

Print a completion script for `bash`, `zsh`, `fish`, `elvish` or
`powershell`:

```
redirector completions bash
```

### Global options

These options go before the subcommand:

- `-b`/`--bangs-url` gives the URL to fetch the bang list from.
- `-d`/`--default-search` gives the default search URL template. In the
  template, `{}` stands for the query.

For example:

```
redirector --default-search "https://search.example.com/?q={}" resolve "hello world"
```

These options take effect only with the `serve` and `resolve` subcommands.
When no subcommand is given, the server runs with the settings from the
configuration file and the built-in defaults.

`-V`/`--version` prints the version.

## How queries are resolved

- **Empty query:** it goes to the default search template, with `{}` removed.
- **Single word that does not start with `!`:** it is percent-encoded and
  placed in the default search template.
- **What counts as a bang:** a word that starts with `!`, stands at the start
  of the query or after a space, and has at least one character after the
  `!`. The first such word is the bang.
- **Finding the bang:** the trigger, which is the bang without its `!`, is
  lowercased (ASCII letters only) and looked up in the bang cache.
- **Known trigger:**
  1. The first occurrence of the bang is removed from the query.
  2. The rest of the query is trimmed and percent-encoded. Encoded slashes
     are turned back into `/`.
  3. The result takes the place of `{{{s}}}` in the bang's URL template. If
     the template has no `{{{s}}}`, the result is added to the end of the
     template.
- **Unknown trigger or no bang:** the whole query is encoded into the default
  search template.

The built-in default search engine is Qwant (`https://www.qwant.com/?q={}`).

The bang list that was downloaded is saved as `bang_cache.json` in the
system's temporary directory. If that file is less than 24 hours old, it is
used and nothing is downloaded.

## Configuration file

Settings may also be read from `$HOME/.config/redirector/config.toml`. If
`HOME` is not set, the current directory is used in its place.

Settings are applied in this order of precedence:

1. Values given on the command line.
2. Values in the configuration file.
3. The built-in defaults: port 3000 and address 0.0.0.0.

If the file cannot be read or parsed, the error is logged and the file is
ignored.

```toml
port = 8080
ip = "127.0.0.1"
bangs_url = "https://bangs.example.com/bang.js"
default_search = "https://search.example.com/?q={}"

[[bangs]]
trigger = "ex"
url_template = "https://example.com/search?q={{{s}}}"
short_name = "Example"
category = "Research"
```

Bangs listed in the file are added on top of the downloaded ones. When a
trigger appears in both places, the one in the file wins.

Each entry accepts the long field names shown above or the short ones that
the downloaded list uses:

| Long name      | Short name |
|----------------|------------|
| `trigger`      | `t`        |
| `url_template` | `u`        |
| `short_name`   | `s`        |
| `category`     | `c`        |
| `subcategory`  | `sc`       |
| `domain`       | `d`        |
| `relevance`    | `r`        |

- `trigger` and `url_template` are required.
- `category` must be one of these: Entertainment, Multimedia, News, Online
  Services, Research, Shopping, Tech, Translation.
- Giving the same field under both names is an error.

## Library use

The pieces can be imported:

```python
from redirector.config import AppConfig
from redirector.resolver import BangCache, get_bang, resolve, update_bangs

config = AppConfig()
cache = BangCache()
update_bangs(config, cache)          # fresh cache file, or download from config.bangs_url
print(get_bang("search !gh term"))   # "!gh"
print(resolve(config, "!gh rust", cache))
```

- `update_bangs` also takes `cache_path` to choose the cache file. It takes
  `fetch`, a function from URL to text, to replace the download.
- `BangCache.update(entries, app_config)` fills a cache directly.
- `redirector.bang.load_bangs` reads a JSON bang list.
- `redirector.config.parse_file_config` and `load_file_config` read the TOML
  configuration.

## Limitations

- The server is a plain HTTP server from the standard library. It has no TLS.
- The `/bangs` page writes triggers and templates into the HTML as they are,
  without escaping them.
- The completion scripts complete subcommand names, option names and shell
  names only.