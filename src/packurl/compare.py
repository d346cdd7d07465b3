"""packurl.compare
Syntax-based comparison (RFC 3986 section 6.2.2) of two packed URLs.

Nothing is normalized up front. Each part is read as a stream of ints in normalized form,
and the streams of two URLs are compared a byte at a time:

    scheme       lowercased
    user         triplets of unreserved characters decoded, other triplets uppercased
    password     same as user
    host         its HostType first; names lowercased as well, IP addresses by their raw bytes.
                 A name that decodes to an IPv4address is that address.
    port         by numeric value
    path         same as user (case-sensitive), with "." and ".." segments removed (RFC 3986 section 5.2.4)
    query        same as user
    fragment     same as user

Presence is part of each stream, so "http://a/?" and "http://a/" differ, as do a missing port and any port.
digest() hashes exactly these streams, so equal URLs get equal digests.
"""

import itertools

from typing import Callable, Iterable, Iterator

from .hosts import Host, HostType, parse_host
from .packed import PackedUrl, Part, dot_segment_spans
from .pct import iter_normalized, normalize_triplets

_FNV_OFFSET: int = 0xCBF29CE484222325
_FNV_PRIME: int = 0x100000001B3
_MASK: int = (1 << 64) - 1

# Separates the streams of two parts inside a digest. Not a byte value.
_PART_END: int = 0x100

_SLASH: int = ord("/")


def _scheme(u: PackedUrl) -> Iterator[int]:
    n: int = u.length(Part.SCHEME)
    yield 1 if n > 0 else 0
    if n > 0:
        yield from iter_normalized(u.buf, 0, n - 1, lowercase=True)


def _user(u: PackedUrl) -> Iterator[int]:
    has_userinfo: bool = u.length(Part.PASSWORD) > 0
    yield 1 if has_userinfo else 0
    if has_userinfo:
        yield from iter_normalized(u.buf, u.offset(Part.USER) + 2, u.offset(Part.PASSWORD))


def _password(u: PackedUrl) -> Iterator[int]:
    has_password: bool = u.length(Part.PASSWORD) > 1
    yield 1 if has_password else 0
    if has_password:
        yield from iter_normalized(u.buf, u.offset(Part.PASSWORD) + 1, u.offset(Part.HOST) - 1)


def _host_kind(u: PackedUrl) -> tuple[HostType, bytes]:
    """Host type and address, after decoding triplets in a name: "1%2E2.3.4" is the IPv4 address 1.2.3.4"""
    if u.host_type != HostType.NAME or b"%" not in u.buf[u.offset(Part.HOST) : u.offset(Part.PORT)]:
        return u.host_type, u.address
    host: Host = parse_host(normalize_triplets(u.buf, start=u.offset(Part.HOST), end=u.offset(Part.PORT)))
    return host.type, host.address


def _host(u: PackedUrl) -> Iterator[int]:
    host_type, address = _host_kind(u)
    yield int(host_type)
    if host_type == HostType.NAME or host_type == HostType.IPVFUTURE:
        yield from iter_normalized(u.buf, u.offset(Part.HOST), u.offset(Part.PORT), lowercase=True)
    elif host_type == HostType.IPV4:
        yield from address[:4]
    elif host_type == HostType.IPV6:
        yield from address


def _port(u: PackedUrl) -> Iterator[int]:
    n: int = u.length(Part.PORT)
    yield 1 if n > 0 else 0
    if n > 0:
        # Leading zeros do not change the number, and with them gone a longer run of digits is a bigger number.
        digits: bytes = bytes(u.buf[u.offset(Part.PORT) + 1 : u.offset(Part.PATH)]).lstrip(b"0")
        yield len(digits)
        yield from digits


def _path(u: PackedUrl) -> Iterator[int]:
    for slash, start, stop in dot_segment_spans(u.buf, u.offset(Part.PATH), u.offset(Part.QUERY), decode=True):
        if slash >= 0:
            yield _SLASH
        yield from iter_normalized(u.buf, start, stop)


def _query(u: PackedUrl) -> Iterator[int]:
    n: int = u.length(Part.QUERY)
    yield 1 if n > 0 else 0
    if n > 0:
        yield from iter_normalized(u.buf, u.offset(Part.QUERY) + 1, u.offset(Part.FRAGMENT))


def _fragment(u: PackedUrl) -> Iterator[int]:
    n: int = u.length(Part.FRAGMENT)
    yield 1 if n > 0 else 0
    if n > 0:
        yield from iter_normalized(u.buf, u.offset(Part.FRAGMENT) + 1, u.size())


# In priority order
_STREAMS: tuple[Callable[[PackedUrl], Iterable[int]], ...] = (
    _scheme,
    _user,
    _password,
    _host,
    _port,
    _path,
    _query,
    _fragment,
)


def _compare_streams(a: Iterable[int], b: Iterable[int]) -> int:
    # A stream that runs out first sorts first.
    for x, y in itertools.zip_longest(a, b, fillvalue=-1):
        if x != y:
            return -1 if x < y else 1
    return 0


def compare(a: PackedUrl, b: PackedUrl) -> int:
    """-1, 0 or 1. Stops at the first part that differs."""
    for stream in _STREAMS:
        result: int = _compare_streams(stream(a), stream(b))
        if result != 0:
            return result
    return 0


def _fold(h: int, stream: Iterable[int]) -> int:
    for c in stream:
        h = ((h ^ c) * _FNV_PRIME) & _MASK
    return h


def digest(u: PackedUrl, seed: int = 0) -> int:
    """FNV-1a over the same normalized streams compare() reads"""
    h: int = (_FNV_OFFSET ^ seed) & _MASK
    for stream in _STREAMS:
        h = _fold(h, stream(u))
        h = _fold(h, (_PART_END,))
    return h
