"""packurl.charsets
Character classes from RFC 3986 as lookup tables.
Membership is tested on byte values (ints), which is what indexing a bytes-like buffer gives you.
"""

from typing import Iterable, Self


class CharSet:
    """A set of byte values backed by a 256-entry table"""

    __slots__ = ("_table", "name")

    def __init__(self: Self, chars: str | bytes | Iterable[int] = b"", name: str = "") -> None:
        if isinstance(chars, str):
            chars = chars.encode("ascii")
        table: bytearray = bytearray(256)
        for c in chars:
            table[c] = 1
        self._table: bytes = bytes(table)
        self.name: str = name

    @classmethod
    def from_range(cls: type[Self], first: str, last: str, name: str = "") -> Self:
        return cls(range(ord(first), ord(last) + 1), name=name)

    def __contains__(self: Self, c: int) -> bool:
        return self._table[c] == 1

    def __or__(self: Self, other: "CharSet | str") -> "CharSet":
        if isinstance(other, str):
            other = CharSet(other)
        return CharSet((i for i in range(256) if self._table[i] or other._table[i]))

    def __sub__(self: Self, other: "CharSet | str") -> "CharSet":
        if isinstance(other, str):
            other = CharSet(other)
        return CharSet((i for i in range(256) if self._table[i] and not other._table[i]))

    def __iter__(self: Self):
        return (i for i in range(256) if self._table[i])

    def __len__(self: Self) -> int:
        return sum(self._table)

    def __repr__(self: Self) -> str:
        if self.name:
            return f"CharSet({self.name})"
        return f"CharSet({bytes(self)!r})"

    def __bytes__(self: Self) -> bytes:
        return bytes(iter(self))

    def named(self: Self, name: str) -> Self:
        self.name = name
        return self

    def find_if_not(self: Self, buf: bytes | bytearray, pos: int, end: int) -> int:
        """Index of the first byte in buf[pos:end] that is not in the set, or end"""
        table: bytes = self._table
        while pos < end and table[buf[pos]]:
            pos += 1
        return pos

    def find_if(self: Self, buf: bytes | bytearray, pos: int, end: int) -> int:
        """Index of the first byte in buf[pos:end] that is in the set, or end"""
        table: bytes = self._table
        while pos < end and not table[buf[pos]]:
            pos += 1
        return pos


# Each of these ABNF rules is from RFC 3986 or 5234.

# ALPHA = %x41-5A / %x61-7A
ALPHA: CharSet = (CharSet.from_range("A", "Z") | CharSet.from_range("a", "z")).named("ALPHA")

# DIGIT = %x30-39
DIGIT: CharSet = CharSet.from_range("0", "9", name="DIGIT")

# HEXDIG = DIGIT / "A" / "B" / "C" / "D" / "E" / "F"
# (case-insensitive, like every ABNF literal)
HEXDIG: CharSet = (DIGIT | "ABCDEFabcdef").named("HEXDIG")

# unreserved = ALPHA / DIGIT / "-" / "." / "_" / "~"
UNRESERVED: CharSet = (ALPHA | DIGIT | "-._~").named("unreserved")

# sub-delims = "!" / "$" / "&" / "'" / "(" / ")" / "*" / "+" / "," / ";" / "="
SUB_DELIMS: CharSet = CharSet("!$&'()*+,;=", name="sub-delims")

# gen-delims = ":" / "/" / "?" / "#" / "[" / "]" / "@"
GEN_DELIMS: CharSet = CharSet(":/?#[]@", name="gen-delims")

# reserved = gen-delims / sub-delims
RESERVED: CharSet = (GEN_DELIMS | SUB_DELIMS).named("reserved")

# pchar = unreserved / pct-encoded / sub-delims / ":" / "@"
# The pct-encoded alternative is handled by the rules that consume triplets.
PCHAR: CharSet = (UNRESERVED | SUB_DELIMS | ":@").named("pchar")

# scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )
SCHEME_CHARS: CharSet = (ALPHA | DIGIT | "+-.").named("scheme")

# userinfo = *( unreserved / pct-encoded / sub-delims / ":" )
# The first ":" splits user from password, so the user may not contain one.
USER_CHARS: CharSet = (UNRESERVED | SUB_DELIMS).named("user")
PASSWORD_CHARS: CharSet = (USER_CHARS | ":").named("password")

# reg-name = *( unreserved / pct-encoded / sub-delims )
REG_NAME_CHARS: CharSet = (UNRESERVED | SUB_DELIMS).named("reg-name")

# IPvFuture = "v" 1*HEXDIG "." 1*( unreserved / sub-delims / ":" )
IPVFUTURE_CHARS: CharSet = (UNRESERVED | SUB_DELIMS | ":").named("IPvFuture")

# segment = *pchar
SEGMENT_CHARS: CharSet = PCHAR

# segment-nz-nc = 1*( unreserved / pct-encoded / sub-delims / "@" )
SEGMENT_NC_CHARS: CharSet = (PCHAR - ":").named("segment-nz-nc")

# path = segments joined by "/"
PATH_CHARS: CharSet = (PCHAR | "/").named("path")

# query = *( pchar / "/" / "?" )
QUERY_CHARS: CharSet = (PCHAR | "/?").named("query")

# A single key[=value] unit of the query
PARAM_CHARS: CharSet = (QUERY_CHARS - "&").named("param")
PARAM_KEY_CHARS: CharSet = (PARAM_CHARS - "=").named("param-key")

# fragment = *( pchar / "/" / "?" )
FRAGMENT_CHARS: CharSet = (PCHAR | "/?").named("fragment")
