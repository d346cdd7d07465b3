"""packurl.view
Read-only access to a parsed URL.
Every accessor slices the one buffer; encoded_* accessors return the text as written,
the others percent-decode it.
"""

import functools
import ipaddress

from typing import Self

from .compare import compare as _compare_packed, digest as _digest_packed
from .hosts import HostType
from .packed import PackedUrl, Part
from .pct import decode_str
from .schemes import Scheme


@functools.total_ordering
class UrlView:
    """A URL over a buffer. You should not instantiate this directly. Instead use one of the parse_* functions.
    Views compare and hash by RFC 3986 section 6.2.2 equivalence, so HTTP://a/%7e and http://a/~ are equal.
    """

    __slots__ = ("_u",)

    def __init__(self: Self, packed: PackedUrl | None = None) -> None:
        self._u: PackedUrl = packed if packed is not None else PackedUrl()

    @property
    def packed(self: Self) -> PackedUrl:
        return self._u

    def _text(self: Self, start: int, stop: int) -> str:
        return bytes(self._u.buf[start:stop]).decode("ascii")

    def _decoded(self: Self, start: int, stop: int, query: bool = False) -> str:
        return decode_str(self._u.buf, query, start, stop)

    # ---------------------------------------------------------------- whole URL

    def __len__(self: Self) -> int:
        return self._u.size()

    @property
    def size(self: Self) -> int:
        return self._u.size()

    @property
    def empty(self: Self) -> bool:
        return self._u.size() == 0

    @property
    def buffer(self: Self) -> bytes:
        return bytes(self._u.buf[: self._u.size()])

    def __bytes__(self: Self) -> bytes:
        return self.buffer

    def __str__(self: Self) -> str:
        return self._text(0, self._u.size())

    def __repr__(self: Self) -> str:
        return f"{self.__class__.__name__}({str(self)!r})"

    def persist(self: Self) -> "UrlView":
        """A view that owns an immutable copy of the bytes, so the original buffer can go away"""
        return UrlView(self._u.copy(self.buffer))

    # ---------------------------------------------------------------- scheme

    @property
    def has_scheme(self: Self) -> bool:
        return self._u.length(Part.SCHEME) > 0

    @property
    def scheme(self: Self) -> str:
        """The scheme as written, without the ":" """
        if not self.has_scheme:
            return ""
        return self._text(0, self._u.offset(Part.USER) - 1)

    @property
    def scheme_id(self: Self) -> Scheme:
        return self._u.scheme_id

    # ---------------------------------------------------------------- authority

    @property
    def has_authority(self: Self) -> bool:
        return self._u.has_authority()

    @property
    def encoded_authority(self: Self) -> str:
        """userinfo@host:port, without the "//" """
        if not self.has_authority:
            return ""
        return self._text(self._u.offset(Part.USER) + 2, self._u.offset(Part.PATH))

    @property
    def has_userinfo(self: Self) -> bool:
        # The password span holds the "@", so it is empty exactly when there is no userinfo.
        return self._u.length(Part.PASSWORD) > 0

    @property
    def encoded_userinfo(self: Self) -> str:
        if not self.has_userinfo:
            return ""
        return self._text(self._u.offset(Part.USER) + 2, self._u.offset(Part.HOST) - 1)

    @property
    def userinfo(self: Self) -> str:
        if not self.has_userinfo:
            return ""
        return self._decoded(self._u.offset(Part.USER) + 2, self._u.offset(Part.HOST) - 1)

    @property
    def encoded_user(self: Self) -> str:
        if not self.has_authority:
            return ""
        return self._text(self._u.offset(Part.USER) + 2, self._u.offset(Part.PASSWORD))

    @property
    def user(self: Self) -> str:
        if not self.has_authority:
            return ""
        return self._decoded(self._u.offset(Part.USER) + 2, self._u.offset(Part.PASSWORD))

    @property
    def has_password(self: Self) -> bool:
        return self._u.length(Part.PASSWORD) > 1

    @property
    def encoded_password(self: Self) -> str:
        if not self.has_password:
            return ""
        return self._text(self._u.offset(Part.PASSWORD) + 1, self._u.offset(Part.HOST) - 1)

    @property
    def password(self: Self) -> str:
        if not self.has_password:
            return ""
        return self._decoded(self._u.offset(Part.PASSWORD) + 1, self._u.offset(Part.HOST) - 1)

    # ---------------------------------------------------------------- host

    @property
    def host_type(self: Self) -> HostType:
        return self._u.host_type

    @property
    def encoded_host(self: Self) -> str:
        """The host as written, brackets included for IP literals"""
        return self._text(self._u.offset(Part.HOST), self._u.offset(Part.PORT))

    @property
    def host(self: Self) -> str:
        return self._decoded(self._u.offset(Part.HOST), self._u.offset(Part.PORT))

    @property
    def encoded_host_address(self: Self) -> str:
        """Like encoded_host, but without the brackets of an IP literal"""
        start: int = self._u.offset(Part.HOST)
        stop: int = self._u.offset(Part.PORT)
        if self._u.host_type in (HostType.IPV6, HostType.IPVFUTURE):
            return self._text(start + 1, stop - 1)
        return self._text(start, stop)

    @property
    def host_address(self: Self) -> str:
        start: int = self._u.offset(Part.HOST)
        stop: int = self._u.offset(Part.PORT)
        if self._u.host_type in (HostType.IPV6, HostType.IPVFUTURE):
            return self._text(start + 1, stop - 1)
        return self._decoded(start, stop)

    @property
    def host_ipv4_address(self: Self) -> ipaddress.IPv4Address | None:
        if self._u.host_type != HostType.IPV4:
            return None
        return ipaddress.IPv4Address(self._u.address[:4])

    @property
    def host_ipv6_address(self: Self) -> ipaddress.IPv6Address | None:
        if self._u.host_type != HostType.IPV6:
            return None
        return ipaddress.IPv6Address(self._u.address)

    @property
    def host_ipvfuture(self: Self) -> str:
        if self._u.host_type != HostType.IPVFUTURE:
            return ""
        return self.encoded_host_address

    @property
    def encoded_host_name(self: Self) -> str:
        if self._u.host_type != HostType.NAME:
            return ""
        return self.encoded_host

    @property
    def host_name(self: Self) -> str:
        if self._u.host_type != HostType.NAME:
            return ""
        return self.host

    # ---------------------------------------------------------------- port

    @property
    def has_port(self: Self) -> bool:
        return self._u.length(Part.PORT) > 0

    @property
    def port(self: Self) -> str:
        """The port digits as written, without the ":" """
        if not self.has_port:
            return ""
        return self._text(self._u.offset(Part.PORT) + 1, self._u.offset(Part.PATH))

    @property
    def port_number(self: Self) -> int:
        """The port as a number; 0 when absent, empty or larger than 65535"""
        return self._u.port_number

    @property
    def encoded_host_and_port(self: Self) -> str:
        return self._text(self._u.offset(Part.HOST), self._u.offset(Part.PATH))

    @property
    def encoded_origin(self: Self) -> str:
        """scheme://authority, or "" when there is no authority"""
        if not self.has_authority:
            return ""
        return self._text(0, self._u.offset(Part.PATH))

    # ---------------------------------------------------------------- path

    @property
    def is_path_absolute(self: Self) -> bool:
        u: PackedUrl = self._u
        return u.length(Part.PATH) > 0 and u.buf[u.offset(Part.PATH)] == ord("/")

    @property
    def encoded_path(self: Self) -> str:
        return self._text(self._u.offset(Part.PATH), self._u.offset(Part.QUERY))

    @property
    def path(self: Self) -> str:
        return self._decoded(self._u.offset(Part.PATH), self._u.offset(Part.QUERY))

    @property
    def segment_count(self: Self) -> int:
        return self._u.segment_count

    def encoded_segments(self: Self) -> list[str]:
        """The path split at each "/". An encoded slash (%2F) stays inside its segment."""
        if self._u.segment_count == 0:
            return []
        path: str = self.encoded_path
        if path.startswith("/"):
            path = path[1:]
        return path.split("/")

    def segments(self: Self) -> list[str]:
        return [decode_str(s) for s in self.encoded_segments()]

    # ---------------------------------------------------------------- query

    @property
    def has_query(self: Self) -> bool:
        return self._u.length(Part.QUERY) > 0

    @property
    def encoded_query(self: Self) -> str:
        if not self.has_query:
            return ""
        return self._text(self._u.offset(Part.QUERY) + 1, self._u.offset(Part.FRAGMENT))

    @property
    def query(self: Self) -> str:
        """The decoded query, with "+" read as a space"""
        if not self.has_query:
            return ""
        return self._decoded(self._u.offset(Part.QUERY) + 1, self._u.offset(Part.FRAGMENT), query=True)

    @property
    def param_count(self: Self) -> int:
        return self._u.param_count

    def encoded_params(self: Self) -> list[tuple[str, str | None]]:
        """(key, value) for each "&"-separated param; value is None when there is no "=" """
        if not self.has_query:
            return []
        result: list[tuple[str, str | None]] = []
        for param in self.encoded_query.split("&"):
            key, eq, value = param.partition("=")
            result.append((key, value if eq else None))
        return result

    def params(self: Self) -> list[tuple[str, str | None]]:
        return [
            (decode_str(key, query=True), decode_str(value, query=True) if value is not None else None)
            for key, value in self.encoded_params()
        ]

    @property
    def encoded_target(self: Self) -> str:
        """path and query, as in an HTTP request line"""
        return self._text(self._u.offset(Part.PATH), self._u.offset(Part.FRAGMENT))

    # ---------------------------------------------------------------- fragment

    @property
    def has_fragment(self: Self) -> bool:
        return self._u.length(Part.FRAGMENT) > 0

    @property
    def encoded_fragment(self: Self) -> str:
        if not self.has_fragment:
            return ""
        return self._text(self._u.offset(Part.FRAGMENT) + 1, self._u.size())

    @property
    def fragment(self: Self) -> str:
        if not self.has_fragment:
            return ""
        return self._decoded(self._u.offset(Part.FRAGMENT) + 1, self._u.size())

    @property
    def encoded_resource(self: Self) -> str:
        """path, query and fragment"""
        return self._text(self._u.offset(Part.PATH), self._u.size())

    # ---------------------------------------------------------------- comparison

    def compare(self: Self, other: "UrlView") -> int:
        """-1, 0 or 1, comparing as if both URLs were normalized first"""
        return _compare_packed(self._u, other._u)

    def digest(self: Self, seed: int = 0) -> int:
        return _digest_packed(self._u, seed)

    def __eq__(self: Self, other: object) -> bool:
        if not isinstance(other, UrlView):
            return NotImplemented
        return _compare_packed(self._u, other._u) == 0

    def __lt__(self: Self, other: "UrlView") -> bool:
        if not isinstance(other, UrlView):
            return NotImplemented
        return _compare_packed(self._u, other._u) < 0

    def __hash__(self: Self) -> int:
        return _digest_packed(self._u)
