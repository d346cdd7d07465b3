"""packurl.resolve
Reference resolution, RFC 3986 section 5.2.
Everything here works on encoded text; nothing is decoded on the way through.
"""

import logging

from typing import TYPE_CHECKING

from .errors import InvalidArgumentError
from .packed import dot_segment_spans
from .view import UrlView

if TYPE_CHECKING:
    from .url import Url

logger = logging.getLogger(__name__)


def remove_dot_segments(path: str) -> str:
    """The "remove_dot_segments" routine from RFC 3986 section 5.2.4, on an encoded path.
    Only literal "." and ".." segments count; decode unreserved triplets first to catch "%2E".
    """
    buf: bytes = path.encode("ascii")
    return "".join(
        ("/" if slash >= 0 else "") + path[start:stop] for slash, start, stop in dot_segment_spans(buf, 0, len(buf))
    )


def merge(base: UrlView, ref_path: str) -> str:
    """Implementation of the "merge" routine defined in RFC 3986 section 5.2.3"""
    if base.has_authority and len(base.encoded_path) == 0:
        return f"/{ref_path}"
    dirname, slash, _ = base.encoded_path.rpartition("/")
    return dirname + slash + ref_path


def _recompose(
    scheme: str,
    authority: str | None,
    path: str,
    query: str | None,
    fragment: str | None,
) -> str:
    """RFC 3986 section 5.3, plus the "/." guard of section 5.2.4 for a path that would read as an authority"""
    result: str = f"{scheme}:"
    if authority is not None:
        result += f"//{authority}"
    elif path.startswith("//"):
        path = f"/.{path}"
    result += path
    if query is not None:
        result += f"?{query}"
    if fragment is not None:
        result += f"#{fragment}"
    return result


def resolve_text(base: UrlView, ref: UrlView, strict: bool = True) -> str:
    """Implementation of the "Transform References" algorithm from RFC 3986 section 5.2.2.
    With strict=False a ref whose scheme matches the base's is treated as if it had none (section 5.2.2, note).
    """
    if not base.has_scheme:
        raise InvalidArgumentError(f"base URL has no scheme: {str(base)!r}")

    authority: str | None
    path: str
    query: str | None

    def _query(view: UrlView) -> str | None:
        return view.encoded_query if view.has_query else None

    def _authority(view: UrlView) -> str | None:
        return view.encoded_authority if view.has_authority else None

    # Kept close to the pseudocode so it is easy to check against the RFC.
    ref_has_scheme: bool = ref.has_scheme
    if not strict and ref_has_scheme and ref.scheme.lower() == base.scheme.lower():
        ref_has_scheme = False
    if ref_has_scheme:
        scheme = ref.scheme
        authority = _authority(ref)
        path = remove_dot_segments(ref.encoded_path)
        query = _query(ref)
    else:
        if ref.has_authority:
            authority = _authority(ref)
            path = remove_dot_segments(ref.encoded_path)
            query = _query(ref)
        else:
            if len(ref.encoded_path) == 0:
                path = base.encoded_path
                query = _query(ref) if ref.has_query else _query(base)
            else:
                if ref.encoded_path.startswith("/"):
                    path = remove_dot_segments(ref.encoded_path)
                else:
                    path = remove_dot_segments(merge(base, ref.encoded_path))
                query = _query(ref)
            authority = _authority(base)
        scheme = base.scheme
    fragment: str | None = ref.encoded_fragment if ref.has_fragment else None

    result: str = _recompose(scheme, authority, path, query, fragment)
    logger.debug("resolved %r against %r: %r", str(ref), str(base), result)
    return result


def resolve(base: UrlView, ref: UrlView, strict: bool = True) -> "Url":
    """Resolve ref against base and return the target as a new Url"""
    from .url import Url

    return Url(resolve_text(base, ref, strict))
