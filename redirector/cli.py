"""Command-line interface: arguments, the settings they carry and shell completions."""

from __future__ import annotations

import argparse
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from ipaddress import ip_address

from redirector.config import Config, IPAddress

PROG = "redirector"
VERSION = "0.5.2"
SHELLS = ("bash", "elvish", "fish", "powershell", "zsh")


@dataclass(frozen=True)
class _Option:
    short: str
    long: str
    help: str
    takes_value: bool = True

    @property
    def words(self) -> tuple[str, str]:
        return (self.short, self.long)


_HELP = _Option("-h", "--help", "Print help", takes_value=False)
_BANGS_URL = _Option("-b", "--bangs-url", "URL to fetch bang commands from")
_DEFAULT_SEARCH = _Option(
    "-d",
    "--default-search",
    "Default search engine URL template (use '{}' as placeholder for the query)",
)
_VERSION = _Option("-V", "--version", "Print version", takes_value=False)
_PORT = _Option("-p", "--port", "Port to listen on")
_IP = _Option("-i", "--ip", "IP to serve the application on")

_GLOBAL_OPTIONS = (_BANGS_URL, _DEFAULT_SEARCH, _HELP, _VERSION)
_SUBCOMMANDS: dict[str, tuple[str, tuple[_Option, ...]]] = {
    "serve": ("Start the redirecting server", (_PORT, _IP, _HELP)),
    "resolve": ("Resolve a search query", (_HELP,)),
    "completions": ("Generate shell completions", (_HELP,)),
}
_POSITIONAL_VALUES: dict[str, tuple[str, ...]] = {"completions": SHELLS}


def _port(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port {text!r}") from None
    if not 0 <= value <= 65535:
        raise argparse.ArgumentTypeError(f"port {value} is not in 0-65535")
    return value


def _ip(text: str) -> IPAddress:
    try:
        return ip_address(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid IP address {text!r}") from None


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the command line."""
    parser = argparse.ArgumentParser(prog=PROG, description="A simple URL redirector")
    parser.add_argument(*_VERSION.words, action="version", version=f"{PROG} {VERSION}")
    parser.add_argument(*_BANGS_URL.words, dest="bangs_url", help=_BANGS_URL.help)
    parser.add_argument(
        *_DEFAULT_SEARCH.words, dest="default_search", help=_DEFAULT_SEARCH.help
    )
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    about, _ = _SUBCOMMANDS["serve"]
    serve = commands.add_parser("serve", help=about, description=about)
    serve.add_argument(*_PORT.words, dest="port", type=_port, help=_PORT.help)
    serve.add_argument(*_IP.words, dest="ip", type=_ip, help=_IP.help)

    about, _ = _SUBCOMMANDS["resolve"]
    resolve = commands.add_parser("resolve", help=about, description=about)
    resolve.add_argument("query", help="The search query to resolve")

    about, _ = _SUBCOMMANDS["completions"]
    completions = commands.add_parser("completions", help=about, description=about)
    completions.add_argument("shell", choices=SHELLS)

    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments; exits on invalid input."""
    return build_parser().parse_args(argv)


def config_from_args(args: argparse.Namespace) -> Config:
    """Extract the command-line settings relevant to the chosen command."""
    command = getattr(args, "command", None)
    if command == "serve":
        return Config(
            port=args.port,
            ip=args.ip,
            bangs_url=args.bangs_url,
            default_search=args.default_search,
        )
    if command == "resolve":
        return Config(bangs_url=args.bangs_url, default_search=args.default_search)
    return Config()


def _top_candidates() -> list[str]:
    words = [word for option in _GLOBAL_OPTIONS for word in option.words]
    return words + list(_SUBCOMMANDS)


def _command_candidates(name: str) -> list[str]:
    _, options = _SUBCOMMANDS[name]
    words = [word for option in options for word in option.words]
    return words + list(_POSITIONAL_VALUES.get(name, ()))


def _bash() -> str:
    names = "|".join(_SUBCOMMANDS)
    cases = "\n".join(
        f'        {name}) opts="{" ".join(_command_candidates(name))}" ;;'
        for name in _SUBCOMMANDS
    )
    top = " ".join(_top_candidates())
    return f"""_{PROG}() {{
    local cur word cmd opts
    cur="${{COMP_WORDS[COMP_CWORD]}}"
    cmd=""
    for word in "${{COMP_WORDS[@]:1:COMP_CWORD-1}}"; do
        case "$word" in
            {names}) cmd="$word"; break ;;
        esac
    done
    case "$cmd" in
{cases}
        *) opts="{top}" ;;
    esac
    COMPREPLY=($(compgen -W "$opts" -- "$cur"))
}}
complete -F _{PROG} {PROG}
"""


def _zsh() -> str:
    return f"#compdef {PROG}\nautoload -U +X bashcompinit && bashcompinit\n" + _bash()


def _fish_quote(text: str) -> str:
    return "'" + text.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _fish_option(condition: str, option: _Option) -> str:
    line = (
        f'complete -c {PROG} -n "{condition}" '
        f"-s {option.short.lstrip('-')} -l {option.long.lstrip('-')}"
    )
    if option.takes_value:
        line += " -r"
    return f"{line} -d {_fish_quote(option.help)}"


def _fish() -> str:
    top = "__fish_use_subcommand"
    lines = [_fish_option(top, option) for option in _GLOBAL_OPTIONS]
    lines += [
        f'complete -c {PROG} -n "{top}" -f -a {name} -d {_fish_quote(about)}'
        for name, (about, _) in _SUBCOMMANDS.items()
    ]
    for name, (_, options) in _SUBCOMMANDS.items():
        condition = f"__fish_seen_subcommand_from {name}"
        lines += [_fish_option(condition, option) for option in options]
        values = _POSITIONAL_VALUES.get(name)
        if values:
            lines.append(f'complete -c {PROG} -n "{condition}" -f -a "{" ".join(values)}"')
    return "\n".join(lines) + "\n"


def _elvish_list(words: Sequence[str]) -> str:
    return "[" + " ".join(f"'{word}'" for word in words) + "]"


def _elvish() -> str:
    commands = " ".join(
        f"&{name}={_elvish_list(_command_candidates(name))}" for name in _SUBCOMMANDS
    )
    top = " ".join(f"'{word}'" for word in _top_candidates())
    return f"""set edit:completion:arg-completer[{PROG}] = {{|@words|
    var commands = [{commands}]
    for word $words[1..-1] {{
        if (has-key $commands $word) {{
            all $commands[$word]
            return
        }}
    }}
    put {top}
}}
"""


def _powershell_list(words: Sequence[str]) -> str:
    return "@(" + ", ".join("'" + word.replace("'", "''") + "'" for word in words) + ")"


def _powershell() -> str:
    commands = "; ".join(
        f"'{name}' = {_powershell_list(_command_candidates(name))}" for name in _SUBCOMMANDS
    )
    top = _powershell_list(_top_candidates())
    return f"""Register-ArgumentCompleter -Native -CommandName '{PROG}' -ScriptBlock {{
    param($wordToComplete, $commandAst, $cursorPosition)
    $commands = @{{ {commands} }}
    $candidates = {top}
    foreach ($element in ($commandAst.CommandElements | Select-Object -Skip 1)) {{
        $text = $element.ToString()
        if ($commands.ContainsKey($text)) {{
            $candidates = $commands[$text]
            break
        }}
    }}
    $candidates | Where-Object {{ $_ -like "$wordToComplete*" }} | ForEach-Object {{
        [System.Management.Automation.CompletionResult]::new($_, $_, 'ParameterValue', $_)
    }}
}}
"""


_GENERATORS: dict[str, Callable[[], str]] = {
    "bash": _bash,
    "elvish": _elvish,
    "fish": _fish,
    "powershell": _powershell,
    "zsh": _zsh,
}


def completion_script(shell: str) -> str:
    """Return a completion script for the given shell."""
    try:
        generator = _GENERATORS[shell]
    except KeyError:
        raise ValueError(f"unsupported shell {shell!r}") from None
    return generator()