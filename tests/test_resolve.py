import pytest

from packurl import InvalidArgumentError, Url, parse_uri, parse_uri_reference, remove_dot_segments, resolve

BASE = "http://a/b/c/d;p?q"


@pytest.mark.parametrize(
    "ref,expected",
    [
        # RFC 3986 section 5.4.1
        ("g:h", "g:h"),
        ("g", "http://a/b/c/g"),
        ("./g", "http://a/b/c/g"),
        ("g/", "http://a/b/c/g/"),
        ("/g", "http://a/g"),
        ("//g", "http://g"),
        ("?y", "http://a/b/c/d;p?y"),
        ("g?y", "http://a/b/c/g?y"),
        ("#s", "http://a/b/c/d;p?q#s"),
        ("g#s", "http://a/b/c/g#s"),
        ("g?y#s", "http://a/b/c/g?y#s"),
        (";x", "http://a/b/c/;x"),
        ("g;x", "http://a/b/c/g;x"),
        ("g;x?y#s", "http://a/b/c/g;x?y#s"),
        ("", "http://a/b/c/d;p?q"),
        (".", "http://a/b/c/"),
        ("./", "http://a/b/c/"),
        ("..", "http://a/b/"),
        ("../", "http://a/b/"),
        ("../g", "http://a/b/g"),
        ("../..", "http://a/"),
        ("../../", "http://a/"),
        ("../../g", "http://a/g"),
        # RFC 3986 section 5.4.2
        ("../../../g", "http://a/g"),
        ("../../../../g", "http://a/g"),
        ("/./g", "http://a/g"),
        ("/../g", "http://a/g"),
        ("g.", "http://a/b/c/g."),
        (".g", "http://a/b/c/.g"),
        ("g..", "http://a/b/c/g.."),
        ("..g", "http://a/b/c/..g"),
        ("./../g", "http://a/b/g"),
        ("./g/.", "http://a/b/c/g/"),
        ("g/./h", "http://a/b/c/g/h"),
        ("g/../h", "http://a/b/c/h"),
        ("g;x=1/./y", "http://a/b/c/g;x=1/y"),
        ("g;x=1/../y", "http://a/b/c/y"),
        ("g?y/./x", "http://a/b/c/g?y/./x"),
        ("g?y/../x", "http://a/b/c/g?y/../x"),
        ("g#s/./x", "http://a/b/c/g#s/./x"),
        ("g#s/../x", "http://a/b/c/g#s/../x"),
        ("http:g", "http:g"),
    ],
)
def test_rfc_examples(ref, expected):
    result = resolve(parse_uri(BASE), parse_uri_reference(ref))
    assert isinstance(result, Url)
    assert str(result) == expected


def test_non_strict_ignores_matching_scheme():
    result = resolve(parse_uri(BASE), parse_uri_reference("http:g"), strict=False)
    assert str(result) == "http://a/b/c/g"


def test_base_without_authority_or_path():
    assert str(resolve(parse_uri("a:"), parse_uri_reference("b"))) == "a:b"
    assert str(resolve(parse_uri("http://h"), parse_uri_reference("b"))) == "http://h/b"


def test_result_never_reads_as_authority():
    result = resolve(parse_uri("a:/x/y"), parse_uri_reference("..//z"))
    assert str(result) == "a:/.//z"
    assert not result.has_authority


def test_base_needs_scheme():
    with pytest.raises(InvalidArgumentError):
        resolve(parse_uri_reference("/a/b"), parse_uri_reference("c"))


def test_resolve_in_place():
    url = Url(BASE)
    url.resolve(parse_uri_reference("../g?x#y"))
    assert str(url) == "http://a/b/g?x#y"
    assert url.encoded_query == "x"


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/a/b/c/./../../g", "/a/g"),
        ("mid/content=5/../6", "mid/6"),
        ("/..", "/"),
        ("", ""),
        ("/a//b/../c", "/a//c"),
        ("a/..", "/"),
        ("../a", "a"),
        (".", ""),
        ("/a/%2E/b", "/a/%2E/b"),
    ],
)
def test_remove_dot_segments(path, expected):
    assert remove_dot_segments(path) == expected
