"""packurl.schemes
Well-known schemes, so callers can switch on an enum instead of comparing strings.
"""

import enum


class Scheme(enum.Enum):
    """NONE means the URL has no scheme, UNKNOWN that it has one this table does not know."""

    NONE = "none"
    UNKNOWN = "unknown"
    FTP = "ftp"
    FILE = "file"
    HTTP = "http"
    HTTPS = "https"
    WS = "ws"
    WSS = "wss"


_KNOWN: dict[str, Scheme] = {
    s.value: s for s in Scheme if s not in (Scheme.NONE, Scheme.UNKNOWN)
}

_DEFAULT_PORTS: dict[Scheme, int] = {
    Scheme.FTP: 21,
    Scheme.HTTP: 80,
    Scheme.HTTPS: 443,
    Scheme.WS: 80,
    Scheme.WSS: 443,
}


def string_to_scheme(s: str | bytes) -> Scheme:
    """Look up a scheme, ignoring case. The empty string is NONE."""
    if isinstance(s, (bytes, bytearray)):
        s = s.decode("ascii")
    if len(s) == 0:
        return Scheme.NONE
    return _KNOWN.get(s.lower(), Scheme.UNKNOWN)


def to_string(scheme: Scheme) -> str:
    """Canonical (lowercase) name of a known scheme, "" for NONE and UNKNOWN"""
    if scheme in (Scheme.NONE, Scheme.UNKNOWN):
        return ""
    return scheme.value


def default_port(scheme: Scheme) -> int:
    """The port a scheme uses when none is given, or 0"""
    return _DEFAULT_PORTS.get(scheme, 0)
