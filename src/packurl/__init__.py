"""packurl - RFC 3986 URLs in one buffer

This package parses URI references into a single buffer plus a table of offsets,
gives read-only views over it, edits it in place, and compares URLs by
RFC 3986 section 6.2.2 equivalence without building normalized copies.
"""

import logging

from .errors import (
    UrlError,
    UrlSyntaxError,
    InvalidEncodingError,
    IllegalCharacterError,
    InvalidArgumentError,
    PortOverflowError,
)
from .hosts import HostType, parse_authority, parse_host
from .packed import PackedUrl, Part
from .parse import (
    parse_uri,
    parse_absolute_uri,
    parse_relative_ref,
    parse_origin_form,
    parse_uri_reference,
)
from .pct import decode, decode_str, encode, validate
from .resolve import remove_dot_segments, resolve
from .schemes import Scheme, default_port, string_to_scheme
from .url import Url
from .view import UrlView
from .compare import compare, digest

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "UrlError",
    "UrlSyntaxError",
    "InvalidEncodingError",
    "IllegalCharacterError",
    "InvalidArgumentError",
    "PortOverflowError",
    "HostType",
    "parse_authority",
    "parse_host",
    "PackedUrl",
    "Part",
    "parse_uri",
    "parse_absolute_uri",
    "parse_relative_ref",
    "parse_origin_form",
    "parse_uri_reference",
    "decode",
    "decode_str",
    "encode",
    "validate",
    "remove_dot_segments",
    "resolve",
    "Scheme",
    "default_port",
    "string_to_scheme",
    "Url",
    "UrlView",
    "compare",
    "digest",
]
