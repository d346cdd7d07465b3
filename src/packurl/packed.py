"""packurl.packed
The packed representation of a URL: one buffer, and a table of offsets into it.

The eight parts always appear in this order, and each part's span carries its own delimiters:

    scheme    "http:"
    user      "//user"         ("//" alone for an authority without userinfo)
    password  ":pass@"         ("@" alone for userinfo without a password)
    host      "example.com"
    port      ":80"
    path      "/a/b"
    query     "?x=1"
    fragment  "#f"

so the buffer is exactly the concatenation of the spans, and nothing is ever stored twice.
"""

import enum

from typing import Self

from .hosts import HostType
from .schemes import Scheme

Buffer = bytes | bytearray


class Part(enum.IntEnum):
    SCHEME = 0
    USER = 1
    PASSWORD = 2
    HOST = 3
    PORT = 4
    PATH = 5
    QUERY = 6
    FRAGMENT = 7
    END = 8


PARTS: tuple[Part, ...] = tuple(p for p in Part if p != Part.END)


class PackedUrl:
    """State shared by the read-only view and the editor.
    decoded[p] is the size of part p's value after percent-decoding, without its delimiters.
    """

    __slots__ = (
        "buf",
        "offsets",
        "decoded",
        "host_type",
        "address",
        "port_number",
        "segment_count",
        "param_count",
        "scheme_id",
    )

    def __init__(self: Self, buf: Buffer = b"") -> None:
        self.buf: Buffer = buf
        self.offsets: list[int] = [0] * (len(Part) - 1) + [len(buf)]
        self.decoded: list[int] = [0] * len(PARTS)
        self.host_type: HostType = HostType.NONE
        self.address: bytes = bytes(16)
        self.port_number: int = 0
        self.segment_count: int = 0
        self.param_count: int = 0
        self.scheme_id: Scheme = Scheme.NONE

    def offset(self: Self, part: Part) -> int:
        return self.offsets[part]

    def length(self: Self, first: Part, last: Part | None = None) -> int:
        """Size of the spans first..last (exclusive), or of first alone"""
        if last is None:
            last = Part(first + 1)
        return self.offsets[last] - self.offsets[first]

    def get(self: Self, first: Part, last: Part | None = None) -> bytes:
        if last is None:
            last = Part(first + 1)
        return bytes(self.buf[self.offsets[first] : self.offsets[last]])

    def size(self: Self) -> int:
        return self.offsets[Part.END]

    def copy(self: Self, buf: Buffer) -> "PackedUrl":
        """The same table over another buffer holding the same bytes"""
        other: PackedUrl = PackedUrl.__new__(PackedUrl)
        other.buf = buf
        other.offsets = list(self.offsets)
        other.decoded = list(self.decoded)
        other.host_type = self.host_type
        other.address = self.address
        other.port_number = self.port_number
        other.segment_count = self.segment_count
        other.param_count = self.param_count
        other.scheme_id = self.scheme_id
        return other

    def has_authority(self: Self) -> bool:
        return self.length(Part.USER) >= 2

    def __repr__(self: Self) -> str:
        return f"PackedUrl({bytes(self.buf[: self.size()])!r}, offsets={self.offsets})"


def count_segments(path: Buffer) -> int:
    """Number of segments in an encoded path. "" and "/" have none; "/a/" has two."""
    if len(path) == 0 or path == b"/":
        return 0
    if path[:1] == b"/":
        return path.count(b"/")
    return path.count(b"/") + 1


def count_params(query: Buffer) -> int:
    """Number of params in an encoded query (without the "?"). A present query has at least one."""
    return query.count(b"&") + 1


_SLASH: int = ord("/")
_DOT: int = ord(".")


def _dots(buf: Buffer, start: int, stop: int, decode: bool) -> int:
    """1 if buf[start:stop] is ".", 2 if it is "..", 0 otherwise"""
    n: int = 0
    pos: int = start
    while pos < stop:
        if buf[pos] == _DOT:
            pos += 1
        elif decode and buf[pos : pos + 3] in (b"%2e", b"%2E"):
            pos += 3
        else:
            return 0
        n += 1
        if n > 2:
            return 0
    return n


def dot_segment_spans(buf: Buffer, start: int, end: int, decode: bool = False) -> list[tuple[int, int, int]]:
    """remove_dot_segments() from RFC 3986 section 5.2.4 over buf[start:end], without copying it.

    The output path comes back as (slash, start, stop) pieces: the "/" at buf[slash] (none if slash is -1)
    followed by buf[start:stop]. Only the first piece can lack its "/". With decode, "%2E" counts as ".".
    """
    out: list[tuple[int, int, int]] = []
    # Index of the "/" the remaining input starts with, or -1
    slash: int = -1
    pos: int = start
    if pos < end and buf[pos] == _SLASH:
        slash = pos
        pos += 1
    while slash >= 0 or pos < end:
        stop: int = buf.find(b"/", pos, end)
        if stop < 0:
            stop = end
        dots: int = _dots(buf, pos, stop, decode)
        if dots == 0:
            out.append((slash, pos, stop))
            if stop == end:
                break
            slash, pos = stop, stop + 1
        elif slash < 0:
            # "./" and "../" prefixes go, and so does a lone "." or ".."
            pos = stop + 1
        else:
            if dots == 2 and len(out) > 0:
                out.pop()
            if stop < end:
                slash, pos = stop, stop + 1
            else:
                # "/." and "/.." at the end leave "/" behind
                pos = end
    return out
