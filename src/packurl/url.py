"""packurl.url
A URL that owns its buffer and can be changed in place.

Every operation works the same way: encode and validate the new value, and only then touch the buffer.
Growing or shrinking a part moves the bytes after it and shifts the offsets after it; the bytes before it
stay where they are. If an operation raises, the URL is exactly what it was before the call.
"""

import ipaddress

from typing import Self

from .charsets import FRAGMENT_CHARS, PASSWORD_CHARS, PATH_CHARS, QUERY_CHARS, REG_NAME_CHARS, USER_CHARS, CharSet
from .errors import InvalidArgumentError, PortOverflowError, UrlError, UrlSyntaxError
from .grammar import Buffer, parse_all
from .hosts import MAX_PORT, Host, HostType, parse_authority, parse_host, port_value
from .packed import PackedUrl, Part, count_params, count_segments
from .parse import SCHEME, parse_uri_reference
from .pct import decoded_size, encode, normalize_triplets, validate
from .resolve import remove_dot_segments, resolve_text
from .schemes import Scheme, string_to_scheme
from .view import UrlView

# A literal "+" in a decoded query has to be escaped, or it would read back as a space.
_QUERY_ENCODE_CHARS: CharSet = QUERY_CHARS - "+"


def _validated(text: str | Buffer, charset: CharSet, what: str) -> bytes:
    """Encoded input for a set_encoded_* call, checked against charset"""
    try:
        if isinstance(text, str):
            text = text.encode("ascii")
        validate(text, charset)
    except (UnicodeEncodeError, UrlError) as e:
        raise InvalidArgumentError(f"invalid encoded {what}: {text!r}") from e
    return bytes(text)


def _fix_path(path: bytes, has_authority: bool, has_scheme: bool) -> bytes:
    """Make an encoded path fit the grammar it will be parsed with.
    Under an authority it has to be empty or start with "/". Without one it must not start with "//",
    and without a scheme too its first segment must not contain ":".
    """
    if has_authority:
        if path and path[:1] != b"/":
            return b"/" + path
        return path
    if path[:2] == b"//":
        return b"/." + path
    if not has_scheme and path[:1] != b"/":
        first_segment: bytes = path.split(b"/", 1)[0]
        if b":" in first_segment:
            return b"./" + path
    return path


def _encode_host(host: str | ipaddress.IPv4Address | ipaddress.IPv6Address) -> tuple[bytes, Host]:
    """Encoded host text and what it parses as.
    IP literals in brackets and IPv4 addresses are taken as they are; anything else is a reg-name.
    """
    if isinstance(host, ipaddress.IPv6Address):
        host = f"[{host.compressed}]"
    elif isinstance(host, ipaddress.IPv4Address):
        host = str(host)
    if host.startswith("["):
        try:
            text: bytes = host.encode("ascii")
            return text, parse_host(text)
        except (UnicodeEncodeError, UrlError) as e:
            raise InvalidArgumentError(f"invalid IP literal: {host!r}") from e
    text = encode(host, REG_NAME_CHARS)
    # An IPv4address comes back as IPV4, everything else as NAME.
    return text, parse_host(text)


def _port_digits(port: int | str) -> bytes:
    if isinstance(port, bool):
        raise InvalidArgumentError(f"invalid port: {port!r}")
    if isinstance(port, int):
        if port < 0 or port > MAX_PORT:
            raise PortOverflowError(port)
        return str(port).encode("ascii")
    if not (port.isascii() and (port.isdigit() or port == "")):
        raise InvalidArgumentError(f"invalid port: {port!r}")
    return port.encode("ascii")


class Url(UrlView):
    """A modifiable URL.

    Url() is empty, Url(text) parses a URI-reference, Url(view) copies a view.
    The apply_* methods take decoded values and encode them; the set_encoded_* methods take text that is
    already percent-encoded and only check it. All of them return the Url so calls can be chained.
    """

    __slots__ = ()

    # Mutable, so not hashable. Use digest() or persist() for a stable key.
    __hash__ = None  # type: ignore[assignment]

    def __init__(self: Self, text: "str | Buffer | UrlView" = "") -> None:
        view: UrlView = text if isinstance(text, UrlView) else parse_uri_reference(text)
        super().__init__(view.packed.copy(bytearray(view.buffer)))

    def copy(self: Self) -> "Url":
        return Url(self)

    def clear(self: Self) -> Self:
        self._u = PackedUrl(bytearray())
        return self

    # ---------------------------------------------------------------- buffer primitives

    def _resize_range(self: Self, first: Part, last: Part, new_len: int) -> int:
        """Make parts first..last (exclusive) one span of new_len bytes belonging to first.
        Bytes after the span move by the change in size, and so do the offsets after it.
        Returns where the span starts.
        """
        u: PackedUrl = self._u
        start: int = u.offsets[first]
        old_len: int = u.offsets[last] - start
        delta: int = new_len - old_len
        if delta > 0:
            u.buf[start + old_len : start + old_len] = bytes(delta)
        elif delta < 0:
            del u.buf[start + new_len : start + old_len]
        for p in range(first + 1, last):
            u.offsets[p] = start + new_len
        for p in range(last, Part.END + 1):
            u.offsets[p] += delta
        return start

    def resize_component(self: Self, part: Part, new_len: int) -> int:
        """Resize one part's span, keeping everything before it and moving everything after it"""
        return self._resize_range(part, Part(part + 1), new_len)

    def _replace(self: Self, pieces: list[tuple[Part, bytes]]) -> None:
        """Overwrite a run of consecutive parts with new spans"""
        first: Part = pieces[0][0]
        last: Part = Part(pieces[-1][0] + 1)
        pos: int = self._resize_range(first, last, sum(len(data) for _, data in pieces))
        for part, data in pieces:
            self._u.offsets[part] = pos
            self._u.buf[pos : pos + len(data)] = data
            pos += len(data)

    # ---------------------------------------------------------------- scheme

    def apply_scheme(self: Self, scheme: str | Scheme) -> Self:
        if isinstance(scheme, Scheme):
            if scheme in (Scheme.NONE, Scheme.UNKNOWN):
                raise InvalidArgumentError(f"not a scheme: {scheme}")
            scheme = scheme.value
        try:
            text: bytes = scheme.encode("ascii")
            parse_all(SCHEME, text)
        except (UnicodeEncodeError, UrlSyntaxError) as e:
            raise InvalidArgumentError(f"invalid scheme: {scheme!r}") from e
        self._replace([(Part.SCHEME, text + b":")])
        self._u.decoded[Part.SCHEME] = len(text)
        self._u.scheme_id = string_to_scheme(text)
        return self

    def remove_scheme(self: Self) -> Self:
        """Drop the scheme. A ":" in the first segment of a rootless path is escaped so it is not read as one."""
        if not self.has_scheme:
            return self
        path: bytes = self._u.get(Part.PATH)
        if not self.has_authority and path[:1] != b"/":
            first, slash, rest = path.partition(b"/")
            path = first.replace(b":", b"%3A") + slash + rest
        self._replace([(Part.SCHEME, b"")])
        self._replace([(Part.PATH, path)])
        self._u.decoded[Part.SCHEME] = 0
        self._u.scheme_id = Scheme.NONE
        return self

    # ---------------------------------------------------------------- authority

    def _spans(self: Self, first: Part, last: Part) -> dict[Part, bytes]:
        return {Part(p): self._u.get(Part(p)) for p in range(first, last)}

    def _commit_authority(self: Self, spans: dict[Part, bytes], host: Host | None = None, port_number: int | None = None) -> None:
        """Write user, password, host and port spans (delimiters included) and refresh what depends on them.
        host and port_number describe the new host and port spans; None keeps the current ones.
        """
        u: PackedUrl = self._u
        path: bytes = _fix_path(u.get(Part.PATH), True, self.has_scheme)
        decoded: dict[Part, int] = {
            Part.USER: decoded_size(spans[Part.USER], 2),
            Part.PASSWORD: decoded_size(spans[Part.PASSWORD], 1, len(spans[Part.PASSWORD]) - 1) if len(spans[Part.PASSWORD]) > 1 else 0,
            Part.HOST: decoded_size(spans[Part.HOST]),
            Part.PORT: max(len(spans[Part.PORT]) - 1, 0),
            Part.PATH: decoded_size(path),
        }
        self._replace(
            [
                (Part.USER, spans[Part.USER]),
                (Part.PASSWORD, spans[Part.PASSWORD]),
                (Part.HOST, spans[Part.HOST]),
                (Part.PORT, spans[Part.PORT]),
                (Part.PATH, path),
            ]
        )
        for part, size in decoded.items():
            u.decoded[part] = size
        if host is not None:
            u.host_type = host.type
            u.address = host.address
        elif u.host_type == HostType.NONE:
            u.host_type = HostType.NAME
        if port_number is not None:
            u.port_number = port_number

    def _authority_spans(self: Self) -> dict[Part, bytes]:
        """The current user..port spans, with an empty authority made up if there is none"""
        spans: dict[Part, bytes] = self._spans(Part.USER, Part.PATH)
        if not self.has_authority:
            spans[Part.USER] = b"//"
        return spans

    def apply_authority(
        self: Self,
        host: str | ipaddress.IPv4Address | ipaddress.IPv6Address = "",
        user: str | None = None,
        password: str | None = None,
        port: int | str | None = None,
    ) -> Self:
        """Replace the whole authority. The "//" is written even when every piece is empty."""
        spans: dict[Part, bytes] = {Part.USER: b"//", Part.PASSWORD: b"", Part.HOST: b"", Part.PORT: b""}
        if user is not None or password is not None:
            spans[Part.USER] = b"//" + encode(user or "", USER_CHARS)
            spans[Part.PASSWORD] = b"@" if password is None else b":" + encode(password, PASSWORD_CHARS) + b"@"
        spans[Part.HOST], parsed_host = _encode_host(host)
        number: int = 0
        if port is not None:
            digits: bytes = _port_digits(port)
            spans[Part.PORT] = b":" + digits
            number = port_value(digits)
        self._commit_authority(spans, parsed_host, number)
        return self

    def set_encoded_authority(self: Self, text: str | Buffer) -> Self:
        """Replace the whole authority with already encoded text (without the "//")"""
        try:
            buf: bytes = text.encode("ascii") if isinstance(text, str) else bytes(text)
            authority = parse_authority(buf)
        except (UnicodeEncodeError, UrlError) as e:
            raise InvalidArgumentError(f"invalid authority: {text!r}") from e
        host_start: int = authority.host.span.start
        host_stop: int = authority.host.span.stop
        spans: dict[Part, bytes] = {
            Part.USER: b"//",
            Part.PASSWORD: b"",
            Part.HOST: buf[host_start:host_stop],
            Part.PORT: buf[host_stop:],
        }
        if authority.userinfo is not None:
            spans[Part.USER] = b"//" + buf[: authority.userinfo.user.stop]
            spans[Part.PASSWORD] = buf[authority.userinfo.user.stop : host_start]
        self._commit_authority(spans, parse_host(spans[Part.HOST]), authority.port_number)
        return self

    def remove_authority(self: Self) -> Self:
        """Drop the authority. A path that starts with "//" gets a "/." in front, or it would read as one."""
        if not self.has_authority:
            return self
        u: PackedUrl = self._u
        path: bytes = _fix_path(u.get(Part.PATH), False, self.has_scheme)
        self._replace([(Part.USER, b""), (Part.PASSWORD, b""), (Part.HOST, b""), (Part.PORT, b""), (Part.PATH, path)])
        u.decoded[Part.USER] = u.decoded[Part.PASSWORD] = u.decoded[Part.HOST] = u.decoded[Part.PORT] = 0
        u.decoded[Part.PATH] = decoded_size(path)
        u.segment_count = count_segments(path)
        u.host_type = HostType.NONE
        u.address = bytes(16)
        u.port_number = 0
        return self

    # ---------------------------------------------------------------- userinfo

    def apply_userinfo(self: Self, user: str, password: str | None = None) -> Self:
        spans: dict[Part, bytes] = self._authority_spans()
        spans[Part.USER] = b"//" + encode(user, USER_CHARS)
        spans[Part.PASSWORD] = b"@" if password is None else b":" + encode(password, PASSWORD_CHARS) + b"@"
        self._commit_authority(spans)
        return self

    def apply_user(self: Self, user: str) -> Self:
        spans: dict[Part, bytes] = self._authority_spans()
        spans[Part.USER] = b"//" + encode(user, USER_CHARS)
        if not spans[Part.PASSWORD]:
            spans[Part.PASSWORD] = b"@"
        self._commit_authority(spans)
        return self

    def set_encoded_user(self: Self, user: str | Buffer) -> Self:
        text: bytes = _validated(user, USER_CHARS, "user")
        spans: dict[Part, bytes] = self._authority_spans()
        spans[Part.USER] = b"//" + text
        if not spans[Part.PASSWORD]:
            spans[Part.PASSWORD] = b"@"
        self._commit_authority(spans)
        return self

    def apply_password(self: Self, password: str) -> Self:
        spans: dict[Part, bytes] = self._authority_spans()
        spans[Part.PASSWORD] = b":" + encode(password, PASSWORD_CHARS) + b"@"
        self._commit_authority(spans)
        return self

    def set_encoded_password(self: Self, password: str | Buffer) -> Self:
        text: bytes = _validated(password, PASSWORD_CHARS, "password")
        spans: dict[Part, bytes] = self._authority_spans()
        spans[Part.PASSWORD] = b":" + text + b"@"
        self._commit_authority(spans)
        return self

    def remove_password(self: Self) -> Self:
        if not self.has_password:
            return self
        spans: dict[Part, bytes] = self._authority_spans()
        spans[Part.PASSWORD] = b"@"
        self._commit_authority(spans)
        return self

    def remove_userinfo(self: Self) -> Self:
        if not self.has_userinfo:
            return self
        spans: dict[Part, bytes] = self._authority_spans()
        spans[Part.USER] = b"//"
        spans[Part.PASSWORD] = b""
        self._commit_authority(spans)
        return self

    # ---------------------------------------------------------------- host

    def apply_host(self: Self, host: str | ipaddress.IPv4Address | ipaddress.IPv6Address) -> Self:
        """Set the host from its decoded form. "[...]" is taken as an IP literal, dotted quads as IPv4."""
        text, parsed = _encode_host(host)
        spans: dict[Part, bytes] = self._authority_spans()
        spans[Part.HOST] = text
        self._commit_authority(spans, parsed)
        return self

    def set_encoded_host(self: Self, host: str | Buffer) -> Self:
        try:
            text: bytes = host.encode("ascii") if isinstance(host, str) else bytes(host)
            parsed: Host = parse_host(text)
        except (UnicodeEncodeError, UrlError) as e:
            raise InvalidArgumentError(f"invalid host: {host!r}") from e
        spans: dict[Part, bytes] = self._authority_spans()
        spans[Part.HOST] = text
        self._commit_authority(spans, parsed)
        return self

    # ---------------------------------------------------------------- port

    def apply_port(self: Self, port: int | str | None) -> Self:
        """Set the port. Numbers outside 0..65535 raise PortOverflowError; None removes the port."""
        if port is None:
            return self.remove_port()
        digits: bytes = _port_digits(port)
        spans: dict[Part, bytes] = self._authority_spans()
        spans[Part.PORT] = b":" + digits
        self._commit_authority(spans, port_number=port_value(digits))
        return self

    def remove_port(self: Self) -> Self:
        if not self.has_port:
            return self
        spans: dict[Part, bytes] = self._authority_spans()
        spans[Part.PORT] = b""
        self._commit_authority(spans, port_number=0)
        return self

    # ---------------------------------------------------------------- path

    def _commit_path(self: Self, path: bytes) -> None:
        path = _fix_path(path, self.has_authority, self.has_scheme)
        size: int = decoded_size(path)
        self._replace([(Part.PATH, path)])
        self._u.decoded[Part.PATH] = size
        self._u.segment_count = count_segments(path)

    def apply_path(self: Self, path: str) -> Self:
        """Set the path from its decoded form. "/" separates segments; anything else that needs it is escaped."""
        self._commit_path(encode(path, PATH_CHARS))
        return self

    def set_encoded_path(self: Self, path: str | Buffer) -> Self:
        self._commit_path(_validated(path, PATH_CHARS, "path"))
        return self

    # ---------------------------------------------------------------- query

    def _commit_query(self: Self, query: bytes) -> None:
        size: int = decoded_size(query)
        self._replace([(Part.QUERY, b"?" + query)])
        self._u.decoded[Part.QUERY] = size
        self._u.param_count = count_params(query)

    def apply_query(self: Self, query: str | None) -> Self:
        """Set the query from its decoded form. "&" and "=" are kept as separators, "+" is escaped."""
        if query is None:
            return self.remove_query()
        self._commit_query(encode(query, _QUERY_ENCODE_CHARS))
        return self

    def set_encoded_query(self: Self, query: str | Buffer) -> Self:
        self._commit_query(_validated(query, QUERY_CHARS, "query"))
        return self

    def remove_query(self: Self) -> Self:
        self._replace([(Part.QUERY, b"")])
        self._u.decoded[Part.QUERY] = 0
        self._u.param_count = 0
        return self

    # ---------------------------------------------------------------- fragment

    def _commit_fragment(self: Self, fragment: bytes) -> None:
        size: int = decoded_size(fragment)
        self._replace([(Part.FRAGMENT, b"#" + fragment)])
        self._u.decoded[Part.FRAGMENT] = size

    def apply_fragment(self: Self, fragment: str | None) -> Self:
        if fragment is None:
            return self.remove_fragment()
        self._commit_fragment(encode(fragment, FRAGMENT_CHARS))
        return self

    def set_encoded_fragment(self: Self, fragment: str | Buffer) -> Self:
        self._commit_fragment(_validated(fragment, FRAGMENT_CHARS, "fragment"))
        return self

    def remove_fragment(self: Self) -> Self:
        self._replace([(Part.FRAGMENT, b"")])
        self._u.decoded[Part.FRAGMENT] = 0
        return self

    # ---------------------------------------------------------------- normalization

    def normalize_scheme(self: Self) -> Self:
        if self.has_scheme:
            self._replace([(Part.SCHEME, self._u.get(Part.SCHEME).lower())])
        return self

    def normalize_authority(self: Self) -> Self:
        """Lowercase the host and put every triplet in normal form. Decoded sizes do not change.
        A name can decode to an IPv4 address ("1%2E2.3.4"), so the host type is read again.
        """
        if not self.has_authority:
            return self
        u: PackedUrl = self._u
        user: bytes = u.get(Part.USER)
        password: bytes = u.get(Part.PASSWORD)
        host: bytes = u.get(Part.HOST)
        reparsed: Host | None = None
        if u.host_type == HostType.NAME:
            host = normalize_triplets(host, lowercase=True)
            reparsed = parse_host(host)
        elif u.host_type in (HostType.IPV6, HostType.IPVFUTURE):
            host = host.lower()
        pieces: list[tuple[Part, bytes]] = [
            (Part.USER, b"//" + normalize_triplets(user[2:])),
            (Part.PASSWORD, password[:1] + normalize_triplets(password[1:-1]) + password[-1:] if len(password) > 1 else password),
            (Part.HOST, host),
        ]
        self._replace(pieces)
        if reparsed is not None:
            u.host_type = reparsed.type
            u.address = reparsed.address
        return self

    def normalize_path(self: Self) -> Self:
        """Normal triplets, then remove_dot_segments() from RFC 3986 section 5.2.4"""
        path: bytes = normalize_triplets(self._u.get(Part.PATH))
        self._commit_path(remove_dot_segments(path.decode("ascii")).encode("ascii"))
        return self

    def normalize_query(self: Self) -> Self:
        if self.has_query:
            self._replace([(Part.QUERY, b"?" + normalize_triplets(self._u.get(Part.QUERY)[1:]))])
        return self

    def normalize_fragment(self: Self) -> Self:
        if self.has_fragment:
            self._replace([(Part.FRAGMENT, b"#" + normalize_triplets(self._u.get(Part.FRAGMENT)[1:]))])
        return self

    def normalize(self: Self) -> Self:
        """Syntax-based normalization, RFC 3986 section 6.2.2"""
        self.normalize_scheme()
        self.normalize_authority()
        self.normalize_path()
        self.normalize_query()
        self.normalize_fragment()
        return self

    # ---------------------------------------------------------------- resolution

    def resolve(self: Self, ref: UrlView, strict: bool = True) -> Self:
        """Resolve ref against this URL (RFC 3986 section 5.2) and become the result"""
        self._u = Url(resolve_text(self, ref, strict)).packed
        return self
