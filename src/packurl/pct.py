"""packurl.pct
Percent-encoding codec (RFC 3986 section 2.1).
All of these work on a span of a bytes-like buffer so that callers never have to slice first.
"""

from typing import Iterator

from .charsets import CharSet, HEXDIG, UNRESERVED
from .errors import IllegalCharacterError, InvalidEncodingError

Buffer = bytes | bytearray

_PERCENT: int = ord("%")

_HEX_UPPER: bytes = b"0123456789ABCDEF"

# Value of each hex digit, 0xFF for everything else.
_HEX_VALUES: bytes = bytes(
    int(chr(c), 16) if c in HEXDIG else 0xFF
    for c in range(256)
)


def ascii_buffer(s: str | Buffer) -> Buffer:
    """Encoded text has to be ASCII. Anything else is rejected at the first offending offset."""
    if isinstance(s, str):
        try:
            return s.encode("ascii")
        except UnicodeEncodeError as e:
            raise IllegalCharacterError(e.start) from e
    return s


def _triplet_value(buf: Buffer, pos: int, end: int) -> int:
    """Value of the %XX triplet at buf[pos]"""
    if pos + 2 >= end:
        raise InvalidEncodingError(pos)
    hi: int = _HEX_VALUES[buf[pos + 1]]
    lo: int = _HEX_VALUES[buf[pos + 2]]
    if hi == 0xFF or lo == 0xFF:
        raise InvalidEncodingError(pos)
    return (hi << 4) | lo


def decoded_size(s: str | Buffer, start: int = 0, end: int | None = None) -> int:
    """Number of bytes s[start:end] decodes to, without decoding it"""
    buf: Buffer = ascii_buffer(s)
    if end is None:
        end = len(buf)
    n: int = end - start
    pos: int = buf.find(b"%", start, end)
    while pos >= 0:
        _triplet_value(buf, pos, end)
        n -= 2
        pos = buf.find(b"%", pos + 3, end)
    return n


def decode(s: str | Buffer, query: bool = False, start: int = 0, end: int | None = None) -> bytes:
    """Resolve every %XX triplet in s[start:end].
    In query context "+" stands for a space; everywhere else it is a literal "+".
    """
    buf: Buffer = ascii_buffer(s)
    if end is None:
        end = len(buf)
    out: bytearray = bytearray()
    pos: int = start
    while pos < end:
        i: int = buf.find(b"%", pos, end)
        if i < 0:
            i = end
        chunk: Buffer = buf[pos:i]
        if query:
            chunk = chunk.replace(b"+", b" ")
        out += chunk
        if i == end:
            break
        out.append(_triplet_value(buf, i, end))
        pos = i + 3
    return bytes(out)


def decode_str(s: str | Buffer, query: bool = False, start: int = 0, end: int | None = None) -> str:
    """decode(), then read the octets as UTF-8. Octets that are not UTF-8 become U+FFFD."""
    return decode(s, query, start, end).decode("utf-8", errors="replace")


def validate(s: str | Buffer, charset: CharSet, start: int = 0, end: int | None = None) -> int:
    """Check that s[start:end] is a valid encoding over charset and return its decoded size.
    Triplets are always allowed since they can stand for any octet.
    """
    buf: Buffer = ascii_buffer(s)
    if end is None:
        end = len(buf)
    n: int = 0
    pos: int = start
    while pos < end:
        c: int = buf[pos]
        if c == _PERCENT:
            _triplet_value(buf, pos, end)
            pos += 3
        elif c in charset:
            pos += 1
        else:
            raise IllegalCharacterError(pos, c)
        n += 1
    return n


def _raw_bytes(raw: str | Buffer) -> Buffer:
    if isinstance(raw, str):
        return raw.encode("utf-8")
    return raw


def encoded_size(raw: str | Buffer, charset: CharSet) -> int:
    """Number of bytes encode(raw, charset) would produce"""
    n: int = 0
    for c in _raw_bytes(raw):
        n += 1 if c != _PERCENT and c in charset else 3
    return n


def encode(raw: str | Buffer, charset: CharSet) -> bytes:
    """Escape every byte of raw that is not in charset. "%" is always escaped.
    str input is encoded as UTF-8 first.
    """
    out: bytearray = bytearray()
    for c in _raw_bytes(raw):
        if c != _PERCENT and c in charset:
            out.append(c)
        else:
            out.append(_PERCENT)
            out.append(_HEX_UPPER[c >> 4])
            out.append(_HEX_UPPER[c & 0xF])
    return bytes(out)


def _lower(c: int) -> int:
    if 0x41 <= c <= 0x5A:
        return c | 0x20
    return c


def iter_normalized(buf: Buffer, start: int, end: int, lowercase: bool = False) -> Iterator[int]:
    """Yield the bytes of buf[start:end] in RFC 3986 section 6.2.2 form.
    Triplets of unreserved characters are decoded, other triplets get uppercase hex digits.
    With lowercase, literal letters are lowered too (hex digits of triplets stay uppercase).
    """
    pos: int = start
    while pos < end:
        c: int = buf[pos]
        if c == _PERCENT:
            v: int = _triplet_value(buf, pos, end)
            pos += 3
            if v in UNRESERVED:
                yield _lower(v) if lowercase else v
            else:
                yield _PERCENT
                yield _HEX_UPPER[v >> 4]
                yield _HEX_UPPER[v & 0xF]
        else:
            pos += 1
            yield _lower(c) if lowercase else c


def normalize_triplets(s: str | Buffer, lowercase: bool = False, start: int = 0, end: int | None = None) -> bytes:
    """Materialized form of iter_normalized()"""
    buf: Buffer = ascii_buffer(s)
    if end is None:
        end = len(buf)
    return bytes(iter_normalized(buf, start, end, lowercase))
