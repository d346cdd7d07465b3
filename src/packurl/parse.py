"""packurl.parse
RFC 3986 parser.
Each parse_* function matches one top-level production and returns a UrlView over the input buffer.
The input is not copied (unless it is a str), so keep it alive and unchanged while the view is in use.
"""

import dataclasses

from typing import Any, Self

from .charsets import ALPHA, FRAGMENT_CHARS, PARAM_CHARS, SCHEME_CHARS, SEGMENT_CHARS, SEGMENT_NC_CHARS
from .errors import UrlSyntaxError
from .grammar import Alternative, Buffer, Literal, OneChar, Optional, PctToken, Repeat, Rule, Sequence, Span, Token, parse_all
from .hosts import AUTHORITY, Authority
from .packed import PackedUrl, Part
from .pct import ascii_buffer
from .schemes import Scheme, string_to_scheme
from .view import UrlView


@dataclasses.dataclass(frozen=True, slots=True)
class _Path:
    span: Span
    segment_count: int


@dataclasses.dataclass(frozen=True, slots=True)
class _Hier:
    authority: Authority | None
    path: _Path


@dataclasses.dataclass(frozen=True, slots=True)
class _Query:
    span: Span
    param_count: int


@dataclasses.dataclass(slots=True)
class _Parts:
    scheme: Span | None = None
    hier: _Hier | _Path | None = None
    query: _Query | None = None
    fragment: Span | None = None


def _sum_decoded(spans: list[Span]) -> int:
    return sum(s.decoded_size for s in spans)


# scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )
class SchemeRule(Rule):
    production = "scheme"

    _rule: Sequence = Sequence(OneChar(ALPHA), Token(SCHEME_CHARS))

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, Span]:
        stop, _ = self._rule.parse(buf, pos, end)
        return stop, Span(pos, stop, stop - pos)


SCHEME: SchemeRule = SchemeRule()

# segment       = *pchar
# segment-nz    = 1*pchar
# segment-nz-nc = 1*( unreserved / pct-encoded / sub-delims / "@" )
SEGMENT: PctToken = PctToken(SEGMENT_CHARS, production="segment")
SEGMENT_NZ: PctToken = PctToken(SEGMENT_CHARS, 1, production="segment-nz")
SEGMENT_NZ_NC: PctToken = PctToken(SEGMENT_NC_CHARS, 1, production="segment-nz-nc")

_SLASH_SEGMENTS: Repeat = Repeat(Sequence(OneChar("/"), SEGMENT), production='*( "/" segment )')


def _slash_segments_decoded(values: list[tuple[Span, Span]]) -> int:
    return sum(1 + seg.decoded_size for _, seg in values)


class PathRule(Rule):
    """Wraps one of the path productions and counts its segments from the repetition counters"""

    def __init__(self: Self, rule: Rule, production: str) -> None:
        self.rule: Rule = rule
        self.production = production

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, _Path]:
        stop, value = self.rule.parse(buf, pos, end)
        decoded, count = self.measure(value)
        return stop, _Path(Span(pos, stop, decoded), count)

    def measure(self: Self, value: Any) -> tuple[int, int]:
        raise NotImplementedError


# path-abempty = *( "/" segment )
class PathAbemptyRule(PathRule):
    def __init__(self: Self) -> None:
        super().__init__(_SLASH_SEGMENTS, "path-abempty")

    def measure(self: Self, value: list[tuple[Span, Span]]) -> tuple[int, int]:
        decoded: int = _slash_segments_decoded(value)
        if len(value) == 1 and value[0][1].decoded_size == 0:
            # "/" on its own has no segments
            return decoded, 0
        return decoded, len(value)


# path-absolute = "/" [ segment-nz *( "/" segment ) ]
class PathAbsoluteRule(PathRule):
    def __init__(self: Self) -> None:
        super().__init__(Sequence(OneChar("/"), Optional(Sequence(SEGMENT_NZ, _SLASH_SEGMENTS))), "path-absolute")

    def measure(self: Self, value: tuple[Span, Any]) -> tuple[int, int]:
        _, rest = value
        if rest is None:
            return 1, 0
        first, more = rest
        return 1 + first.decoded_size + _slash_segments_decoded(more), 1 + len(more)


# path-rootless = segment-nz *( "/" segment )
# path-noscheme = segment-nz-nc *( "/" segment )
class PathRootlessRule(PathRule):
    def __init__(self: Self, first: Rule, production: str) -> None:
        super().__init__(Sequence(first, _SLASH_SEGMENTS), production)

    def measure(self: Self, value: tuple[Span, list]) -> tuple[int, int]:
        first, more = value
        return first.decoded_size + _slash_segments_decoded(more), 1 + len(more)


# path-empty = 0<pchar>
class PathEmptyRule(Rule):
    production = "path-empty"

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, _Path]:
        return pos, _Path(Span(pos, pos, 0), 0)


PATH_ABEMPTY: PathAbemptyRule = PathAbemptyRule()
PATH_ABSOLUTE: PathAbsoluteRule = PathAbsoluteRule()
PATH_ROOTLESS: PathRootlessRule = PathRootlessRule(SEGMENT_NZ, "path-rootless")
PATH_NOSCHEME: PathRootlessRule = PathRootlessRule(SEGMENT_NZ_NC, "path-noscheme")
PATH_EMPTY: PathEmptyRule = PathEmptyRule()


class HierPartRule(Rule):
    """"//" authority path-abempty, or one of the paths that can appear without an authority"""

    _authority_path: Sequence = Sequence(Literal("//"), AUTHORITY, PATH_ABEMPTY)

    def __init__(self: Self, *paths: Rule, production: str) -> None:
        self.rule: Alternative = Alternative(self._authority_path, *paths, production=production)
        self.production = production

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, _Hier]:
        stop, (index, value) = self.rule.parse(buf, pos, end)
        if index == 0:
            _, authority, path = value
            return stop, _Hier(authority, path)
        return stop, _Hier(None, value)


# hier-part = "//" authority path-abempty / path-absolute / path-rootless / path-empty
HIER_PART: HierPartRule = HierPartRule(PATH_ABSOLUTE, PATH_ROOTLESS, PATH_EMPTY, production="hier-part")

# relative-part = "//" authority path-abempty / path-absolute / path-noscheme / path-empty
RELATIVE_PART: HierPartRule = HierPartRule(PATH_ABSOLUTE, PATH_NOSCHEME, PATH_EMPTY, production="relative-part")


# query = *( pchar / "/" / "?" ), read as "&"-separated params
class QueryRule(Rule):
    production = "query"

    _params: Repeat = Repeat(PctToken(PARAM_CHARS, production="param"), 1, delimiter=OneChar("&"), production="query")

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, _Query]:
        stop, params = self._params.parse(buf, pos, end)
        decoded: int = _sum_decoded(params) + len(params) - 1
        return stop, _Query(Span(pos, stop, decoded), len(params))


QUERY: QueryRule = QueryRule()

# fragment = *( pchar / "/" / "?" )
FRAGMENT: PctToken = PctToken(FRAGMENT_CHARS, production="fragment")

_SCHEME_PART: Sequence = Sequence(SCHEME, OneChar(":"), production="scheme")
_QUERY_PART: Optional = Optional(Sequence(OneChar("?"), QUERY))
_FRAGMENT_PART: Optional = Optional(Sequence(OneChar("#"), FRAGMENT))


class ReferenceRule(Rule):
    """[ scheme ":" ] hier [ "?" query ] [ "#" fragment ], with the optional pieces switched on or off"""

    def __init__(self: Self, hier: Rule, scheme: bool, fragment: bool, production: str) -> None:
        self.hier: Rule = hier
        self.scheme: bool = scheme
        self.fragment: bool = fragment
        self.production = production

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, _Parts]:
        parts: _Parts = _Parts()
        if self.scheme:
            pos, (parts.scheme, _) = _SCHEME_PART.parse(buf, pos, end)
        pos, parts.hier = self.hier.parse(buf, pos, end)
        pos, query = _QUERY_PART.parse(buf, pos, end)
        if query is not None:
            parts.query = query[1]
        if self.fragment:
            pos, fragment = _FRAGMENT_PART.parse(buf, pos, end)
            if fragment is not None:
                parts.fragment = fragment[1]
        return pos, parts


# URI = scheme ":" hier-part [ "?" query ] [ "#" fragment ]
URI: ReferenceRule = ReferenceRule(HIER_PART, scheme=True, fragment=True, production="URI")

# absolute-URI = scheme ":" hier-part [ "?" query ]
ABSOLUTE_URI: ReferenceRule = ReferenceRule(HIER_PART, scheme=True, fragment=False, production="absolute-URI")

# relative-ref = relative-part [ "?" query ] [ "#" fragment ]
RELATIVE_REF: ReferenceRule = ReferenceRule(RELATIVE_PART, scheme=False, fragment=True, production="relative-ref")


# absolute-path = 1*( "/" segment )
class AbsolutePathRule(PathAbemptyRule):
    def __init__(self: Self) -> None:
        PathRule.__init__(self, Repeat(Sequence(OneChar("/"), SEGMENT), 1), "absolute-path")


# origin-form = absolute-path [ "?" query ]
ORIGIN_FORM: ReferenceRule = ReferenceRule(AbsolutePathRule(), scheme=False, fragment=False, production="origin-form")


def _commit(buf: Buffer, parts: _Parts) -> PackedUrl:
    """Build the offset table from a complete match. Nothing is built for a failed match."""
    u: PackedUrl = PackedUrl(buf)
    off: list[int] = u.offsets
    dec: list[int] = u.decoded
    hier: _Hier | _Path = parts.hier
    path: _Path = hier.path if isinstance(hier, _Hier) else hier
    authority: Authority | None = hier.authority if isinstance(hier, _Hier) else None

    off[Part.SCHEME] = 0
    if parts.scheme is not None:
        off[Part.USER] = parts.scheme.stop + 1
        dec[Part.SCHEME] = len(parts.scheme)
        u.scheme_id = string_to_scheme(buf[parts.scheme.start : parts.scheme.stop])
    else:
        off[Part.USER] = 0
        u.scheme_id = Scheme.NONE

    if authority is not None:
        host = authority.host
        if authority.userinfo is not None:
            off[Part.PASSWORD] = authority.userinfo.user.stop
            dec[Part.USER] = authority.userinfo.user.decoded_size
            if authority.userinfo.password is not None:
                dec[Part.PASSWORD] = authority.userinfo.password.decoded_size
        else:
            off[Part.PASSWORD] = off[Part.USER] + 2
        off[Part.HOST] = host.span.start
        off[Part.PORT] = host.span.stop
        dec[Part.HOST] = host.span.decoded_size
        u.host_type = host.type
        u.address = host.address
        if authority.port is not None:
            off[Part.PATH] = authority.port.stop
            dec[Part.PORT] = len(authority.port)
            u.port_number = authority.port_number
        else:
            off[Part.PATH] = host.span.stop
    else:
        off[Part.PASSWORD] = off[Part.HOST] = off[Part.PORT] = off[Part.PATH] = off[Part.USER]

    off[Part.QUERY] = path.span.stop
    dec[Part.PATH] = path.span.decoded_size
    u.segment_count = path.segment_count
    if parts.query is not None:
        off[Part.FRAGMENT] = parts.query.span.stop
        dec[Part.QUERY] = parts.query.span.decoded_size
        u.param_count = parts.query.param_count
    else:
        off[Part.FRAGMENT] = off[Part.QUERY]
    if parts.fragment is not None:
        dec[Part.FRAGMENT] = parts.fragment.decoded_size
    off[Part.END] = len(buf)
    return u


def _parse(data: str | Buffer, rule: Rule) -> UrlView:
    buf: Buffer = ascii_buffer(data)
    parts: _Parts = parse_all(rule, buf)
    return UrlView(_commit(buf, parts))


def parse_uri(data: str | Buffer) -> UrlView:
    """RFC 3986 URI parser, e.g. "http://example.org/path?query#fragment" """
    return _parse(data, URI)


def parse_absolute_uri(data: str | Buffer) -> UrlView:
    """RFC 3986 absolute-URI parser: a URI without a fragment"""
    return _parse(data, ABSOLUTE_URI)


def parse_relative_ref(data: str | Buffer) -> UrlView:
    """RFC 3986 relative-ref parser, e.g. "//example.org/path?query#fragment" or "../x" """
    return _parse(data, RELATIVE_REF)


def parse_origin_form(data: str | Buffer) -> UrlView:
    """RFC 7230 origin-form parser, the request target of most HTTP requests, e.g. "/path?query" """
    return _parse(data, ORIGIN_FORM)


def parse_uri_reference(data: str | Buffer) -> UrlView:
    """RFC 3986 URI-reference parser.
    Only use this when you don't know whether you want to parse a URI or a relative-ref.
    When both fail, the error is the one that got further into the input.
    """
    buf: Buffer = ascii_buffer(data)
    try:
        return UrlView(_commit(buf, parse_all(URI, buf)))
    except UrlSyntaxError as e:
        uri_error: UrlSyntaxError = e
    try:
        return UrlView(_commit(buf, parse_all(RELATIVE_REF, buf)))
    except UrlSyntaxError as e:
        if e.offset >= uri_error.offset:
            raise
    raise uri_error
