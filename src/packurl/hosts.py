"""packurl.hosts
Rules for the authority: userinfo, host and port (RFC 3986 section 3.2).
"""

import dataclasses
import enum

from typing import Self

from .charsets import DIGIT, HEXDIG, IPVFUTURE_CHARS, PASSWORD_CHARS, REG_NAME_CHARS, USER_CHARS, CharSet
from .errors import UrlSyntaxError
from .grammar import Alternative, Buffer, Literal, OneChar, Optional, PctToken, Repeat, Rule, Sequence, Span, Token, parse_all
from .pct import ascii_buffer

# Largest value port_number can hold. Anything bigger reads as 0.
MAX_PORT: int = 65535


class HostType(enum.IntEnum):
    """Which kind of host an authority has. NONE means there is no authority."""

    NONE = 0
    IPV4 = 1
    IPV6 = 2
    IPVFUTURE = 3
    NAME = 4


_NO_ADDRESS: bytes = bytes(16)


@dataclasses.dataclass(frozen=True, slots=True)
class Host:
    """A parsed host. address holds 4 (IPv4) or 16 (IPv6) bytes in network order, zero padded to 16."""

    type: HostType
    span: Span
    address: bytes = _NO_ADDRESS


@dataclasses.dataclass(frozen=True, slots=True)
class Userinfo:
    user: Span
    password: Span | None


@dataclasses.dataclass(frozen=True, slots=True)
class Authority:
    userinfo: Userinfo | None
    host: Host
    port: Span | None
    port_number: int


# dec-octet = DIGIT                 ; 0-9
#           / %x31-39 DIGIT         ; 10-99
#           / "1" 2DIGIT            ; 100-199
#           / "2" %x30-34 DIGIT     ; 200-249
#           / "25" %x30-35          ; 250-255
class DecOctetRule(Rule):
    production = "dec-octet"

    _digits: Token = Token(DIGIT, 1, 3)

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, int]:
        stop, _ = self._digits.parse(buf, pos, end)
        if stop - pos > 1 and buf[pos] == ord("0"):
            raise self.fail(pos)
        value: int = int(buf[pos:stop])
        if value > 255:
            raise self.fail(pos)
        return stop, value


# IPv4address = dec-octet "." dec-octet "." dec-octet "." dec-octet
class IPv4AddressRule(Rule):
    production = "IPv4address"

    _octets: Repeat = Repeat(DecOctetRule(), 4, 4, delimiter=OneChar("."))

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, bytes]:
        try:
            stop, octets = self._octets.parse(buf, pos, end)
        except UrlSyntaxError as e:
            raise self.fail(e.offset) from e
        return stop, bytes(octets)


# h16 = 1*4HEXDIG
_H16: Token = Token(HEXDIG, 1, 4, production="h16")
_IPV4: IPv4AddressRule = IPv4AddressRule()


# IPv6address =                            6( h16 ":" ) ls32
#             /                       "::" 5( h16 ":" ) ls32
#             / [               h16 ] "::" 4( h16 ":" ) ls32
#             / [ *1( h16 ":" ) h16 ] "::" 3( h16 ":" ) ls32
#             / [ *2( h16 ":" ) h16 ] "::" 2( h16 ":" ) ls32
#             / [ *3( h16 ":" ) h16 ] "::"    h16 ":"   ls32
#             / [ *4( h16 ":" ) h16 ] "::"              ls32
#             / [ *5( h16 ":" ) h16 ] "::"              h16
#             / [ *6( h16 ":" ) h16 ] "::"
# ls32        = ( h16 ":" h16 ) / IPv4address
class IPv6AddressRule(Rule):
    """The nine alternatives above come down to: at most one "::", eight 16-bit pieces without it
    (an IPv4address counts as two and must come last), and at most seven with it.
    """

    production = "IPv6address"

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, bytes]:
        head: list[int] = []
        tail: list[int] = []
        pieces: list[int] = head
        compressed: bool = False
        ipv4: bytes = b""
        if buf[pos : pos + 2] == b"::":
            compressed = True
            pieces = tail
            pos += 2
        while pos < end and buf[pos] in HEXDIG:
            start: int = pos
            pos, span = _H16.parse(buf, pos, end)
            if pos < end and buf[pos] == ord("."):
                pos, ipv4 = _IPV4.parse(buf, start, end)
                break
            pieces.append(int(buf[span.start : span.stop], 16))
            if buf[pos : pos + 2] == b"::":
                if compressed:
                    raise self.fail(pos)
                compressed = True
                pieces = tail
                pos += 2
            elif pos < end and buf[pos] == ord(":"):
                pos += 1
                if pos >= end or buf[pos] not in HEXDIG:
                    raise self.fail(pos)
            else:
                break
        count: int = len(head) + len(tail) + len(ipv4) // 2
        if (compressed and count > 7) or (not compressed and count != 8):
            raise self.fail(pos)
        words: list[int] = head + [0] * (8 - count) + tail
        return pos, b"".join(w.to_bytes(2, "big") for w in words) + ipv4


# IPvFuture = "v" 1*HEXDIG "." 1*( unreserved / sub-delims / ":" )
IPVFUTURE: Sequence = Sequence(
    OneChar(CharSet("vV")),
    Token(HEXDIG, 1),
    OneChar("."),
    Token(IPVFUTURE_CHARS, 1),
    production="IPvFuture",
)

# IP-literal = "[" ( IPv6address / IPvFuture ) "]"
IP_LITERAL: Sequence = Sequence(
    OneChar("["),
    Alternative(IPv6AddressRule(), IPVFUTURE, production="IP-literal"),
    OneChar("]"),
    production="IP-literal",
)

# reg-name = *( unreserved / pct-encoded / sub-delims )
REG_NAME: PctToken = PctToken(REG_NAME_CHARS, production="reg-name")


# host = IP-literal / IPv4address / reg-name
class HostRule(Rule):
    """The first alternative that takes the whole host wins.
    IPv4address has to cover the entire reg-name token, so "1.2.3.4.5" or "01.2.3.4" are names.
    """

    production = "host"

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, Host]:
        if pos < end and buf[pos] == ord("["):
            stop, (_, (index, value), _) = IP_LITERAL.parse(buf, pos, end)
            span: Span = Span(pos, stop, stop - pos)
            if index == 0:
                return stop, Host(HostType.IPV6, span, value)
            return stop, Host(HostType.IPVFUTURE, span)
        stop, span = REG_NAME.parse(buf, pos, end)
        try:
            address: bytes = parse_all(_IPV4, buf, pos, stop)
        except UrlSyntaxError:
            return stop, Host(HostType.NAME, span)
        return stop, Host(HostType.IPV4, span, address + bytes(12))


HOST: HostRule = HostRule()

# userinfo = *( unreserved / pct-encoded / sub-delims / ":" )
# Split at the first ":" into user and password.
USERINFO: Sequence = Sequence(
    PctToken(USER_CHARS, production="user"),
    Optional(Sequence(OneChar(":"), PctToken(PASSWORD_CHARS, production="password"))),
    production="userinfo",
)

# port = *DIGIT
PORT: Token = Token(DIGIT, production="port")


def port_value(digits: Buffer) -> int:
    """Numeric value of a port. Digits that do not fit in 0..MAX_PORT, or no digits at all, give 0."""
    digits = digits.lstrip(b"0")
    if len(digits) == 0 or len(digits) > 5:
        return 0
    value: int = int(digits)
    if value > MAX_PORT:
        return 0
    return value


# authority = [ userinfo "@" ] host [ ":" port ]
class AuthorityRule(Rule):
    production = "authority"

    _userinfo_at: Optional = Optional(Sequence(USERINFO, Literal("@")))
    _port: Optional = Optional(Sequence(OneChar(":"), PORT))

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, Authority]:
        pos, ui = self._userinfo_at.parse(buf, pos, end)
        userinfo: Userinfo | None = None
        if ui is not None:
            (user, password), _ = ui
            userinfo = Userinfo(user, password[1] if password is not None else None)
        pos, host = HOST.parse(buf, pos, end)
        pos, colon_port = self._port.parse(buf, pos, end)
        port: Span | None = None
        number: int = 0
        if colon_port is not None:
            port = colon_port[1]
            number = port_value(buf[port.start : port.stop])
        return pos, Authority(userinfo, host, port, number)


AUTHORITY: AuthorityRule = AuthorityRule()


def parse_host(text: str | bytes) -> Host:
    """Parse a complete host"""
    return parse_all(HOST, ascii_buffer(text))


def parse_authority(text: str | bytes) -> Authority:
    """Parse a complete authority (without the leading "//")"""
    return parse_all(AUTHORITY, ascii_buffer(text))
