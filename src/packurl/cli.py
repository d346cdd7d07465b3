"""packurl.cli
Command line front end.

    packurl parse "http://user@example.com:8080/a/b?x=1#f"
    packurl normalize "HTTP://Example.COM/a/./b/../c"
    packurl compare "http://a/%7e" "HTTP://A/~"
    packurl resolve "http://a/b/c/d;p?q" "../g"

A URL of "-" is read from stdin.

Exit codes
----------
  0  Success.
  1  A URL did not parse, or an operation on it failed.
  2  Usage error.
"""

import argparse
import logging
import sys

from collections.abc import Sequence
from typing import Callable

from . import __version__
from .errors import UrlError
from .parse import parse_absolute_uri, parse_origin_form, parse_relative_ref, parse_uri, parse_uri_reference
from .url import Url
from .view import UrlView

EXIT_OK: int = 0
EXIT_INVALID: int = 1
EXIT_USAGE: int = 2

LOG_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_PARSERS: dict[str, Callable[[str], UrlView]] = {
    "reference": parse_uri_reference,
    "uri": parse_uri,
    "absolute": parse_absolute_uri,
    "relative": parse_relative_ref,
    "origin": parse_origin_form,
}

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.WARNING) -> None:
    """Configure root logging for the command line tool. The library itself never configures logging."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )


def _read_arg(text: str) -> str:
    if text != "-":
        return text
    return sys.stdin.read().strip()


def describe(view: UrlView) -> list[tuple[str, str]]:
    """(label, value) lines for the parse command. Absent parts are left out."""
    lines: list[tuple[str, str]] = []
    if view.has_scheme:
        lines.append(("scheme", view.scheme))
    if view.has_authority:
        if view.has_userinfo:
            lines.append(("user", view.user))
        if view.has_password:
            lines.append(("password", view.password))
        lines.append(("host", view.encoded_host))
        lines.append(("host_type", view.host_type.name))
        if view.has_port:
            lines.append(("port", view.port))
    lines.append(("path", view.path))
    for segment in view.segments():
        lines.append(("segment", segment))
    if view.has_query:
        lines.append(("query", view.query))
        for key, value in view.params():
            lines.append(("param", key if value is None else f"{key}={value}"))
    if view.has_fragment:
        lines.append(("fragment", view.fragment))
    return lines


def _cmd_parse(args: argparse.Namespace) -> int:
    view: UrlView = _PARSERS[args.form](_read_arg(args.url))
    for label, value in describe(view):
        print(f"{label}: {value}")
    return EXIT_OK


def _cmd_normalize(args: argparse.Namespace) -> int:
    print(Url(_read_arg(args.url)).normalize())
    return EXIT_OK


def _cmd_compare(args: argparse.Namespace) -> int:
    a: UrlView = parse_uri_reference(_read_arg(args.a))
    b: UrlView = parse_uri_reference(_read_arg(args.b))
    print(a.compare(b))
    return EXIT_OK


def _cmd_resolve(args: argparse.Namespace) -> int:
    base: Url = Url(_read_arg(args.base))
    ref: UrlView = parse_uri_reference(_read_arg(args.ref))
    print(base.resolve(ref, strict=not args.non_strict))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="packurl",
        description="Parse, normalize, compare and resolve RFC 3986 URLs.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output to stderr")
    commands = parser.add_subparsers(dest="command", required=True)

    cmd: argparse.ArgumentParser = commands.add_parser("parse", help="print the components of a URL")
    cmd.add_argument("url", help="the URL to parse, or '-' for stdin")
    cmd.add_argument("--form", choices=sorted(_PARSERS), default="reference", help="grammar to parse with")
    cmd.set_defaults(func=_cmd_parse)

    cmd = commands.add_parser("normalize", help="print the normalized form of a URL")
    cmd.add_argument("url", help="the URL to normalize, or '-' for stdin")
    cmd.set_defaults(func=_cmd_normalize)

    cmd = commands.add_parser("compare", help="print -1, 0 or 1")
    cmd.add_argument("a")
    cmd.add_argument("b")
    cmd.set_defaults(func=_cmd_compare)

    cmd = commands.add_parser("resolve", help="resolve a reference against a base URL")
    cmd.add_argument("base")
    cmd.add_argument("ref")
    cmd.add_argument("--non-strict", action="store_true", help="ignore a ref scheme equal to the base scheme")
    cmd.set_defaults(func=_cmd_resolve)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args: argparse.Namespace = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return args.func(args)
    except UrlError as e:
        logger.debug("%s failed", args.command, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":
    raise SystemExit(main())
