import pytest

from packurl import compare, digest, parse_uri, parse_uri_reference


def _cmp(a, b):
    return compare(parse_uri_reference(a).packed, parse_uri_reference(b).packed)


@pytest.mark.parametrize(
    "a,b",
    [
        ("HTTP://example.com/", "http://example.com/"),
        ("http://EXAMPLE.com/", "http://example.COM/"),
        ("http://a/%7e", "http://a/~"),
        ("http://a/%7E", "http://a/~"),
        ("http://a/%41", "http://a/A"),
        ("http://a/%2f", "http://a/%2F"),
        ("http://a:080/", "http://a:80/"),
        ("http://[::1]/", "http://[0:0::1]/"),
        ("http://[::A]/", "http://[::a]/"),
        ("http://[v1.X]/", "http://[V1.x]/"),
        ("http://%41/", "http://a/"),
        ("", ""),
        ("http://a/b/../c", "http://a/c"),
        ("http://a/x/%2e/y", "http://a/x/y"),
        ("http://a/x/%2E%2E/y", "http://a/y"),
        ("http://a/b/.", "http://a/b/"),
        ("a:/x/..//y", "a:/.//y"),
        ("http://1%2E2.3.4/", "http://1.2.3.4/"),
    ],
)
def test_equivalent(a, b):
    assert _cmp(a, b) == 0
    assert _cmp(b, a) == 0
    assert digest(parse_uri_reference(a).packed) == digest(parse_uri_reference(b).packed)


@pytest.mark.parametrize(
    "a,b",
    [
        ("http://a/A", "http://a/a"),
        ("http://a/?", "http://a/"),
        ("http://a/#", "http://a/"),
        ("http://a:80/", "http://a/"),
        ("http://u@a/", "http://a/"),
        ("http://u:@a/", "http://u@a/"),
        ("http://1.2.3.4/", "http://01.2.3.4/"),
        ("http://a/%2F", "http://a//"),
        ("http://a/?a=1", "http://a/?A=1"),
        ("http://u@a/", "http://U@a/"),
        ("http://a", "http://a/"),
        ("http://a/b/..", "http://a/b"),
        ("http://a/.b", "http://a/b"),
        ("http://1%2E2.3.4.5/", "http://1.2.3.4/"),
    ],
)
def test_not_equivalent(a, b):
    assert _cmp(a, b) != 0
    assert _cmp(a, b) == -_cmp(b, a)


def test_missing_scheme_sorts_first():
    assert _cmp("/a", "http://a") == -1


def test_port_by_value():
    assert _cmp("http://a:9/", "http://a:10/") == -1
    assert _cmp("http://a:0010/", "http://a:9/") == 1


def test_scheme_before_host():
    assert _cmp("a://z/", "b://a/") == -1


def test_reflexive():
    for text in ("http://u:p@h:1/a?b#c", "mailto:x", "/p", ""):
        assert _cmp(text, text) == 0


def test_digest_seed():
    url = parse_uri("http://a/")
    assert digest(url.packed, 1) != digest(url.packed)
    assert url.digest() == digest(url.packed)


def test_view_operators():
    a = parse_uri("http://a/")
    b = parse_uri("http://b/")
    assert a < b
    assert a <= b
    assert b > a
    assert a != b
    assert a == parse_uri("HTTP://A/")
    assert a.compare(b) == -1
