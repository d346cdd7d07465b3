import ipaddress

from packurl import HostType, parse_relative_ref, parse_uri, parse_uri_reference


def test_userinfo():
    url = parse_uri("http://us%65r:p%40ss@h/")
    assert url.has_userinfo
    assert url.has_password
    assert url.encoded_user == "us%65r"
    assert url.user == "user"
    assert url.encoded_password == "p%40ss"
    assert url.password == "p@ss"
    assert url.encoded_userinfo == "us%65r:p%40ss"
    assert url.userinfo == "user:p@ss"
    assert url.encoded_authority == "us%65r:p%40ss@h"


def test_empty_userinfo():
    url = parse_uri("http://@h/")
    assert url.has_userinfo
    assert not url.has_password
    assert url.user == ""


def test_empty_password():
    url = parse_uri("http://u:@h/")
    assert url.has_password
    assert url.password == ""


def test_no_userinfo():
    url = parse_uri("http://h/")
    assert not url.has_userinfo
    assert url.encoded_userinfo == ""
    assert url.user == ""


def test_composite_accessors():
    url = parse_uri("http://a:1/p?q#f")
    assert url.encoded_origin == "http://a:1"
    assert url.encoded_host_and_port == "a:1"
    assert url.encoded_target == "/p?q"
    assert url.encoded_resource == "/p?q#f"


def test_no_origin_without_authority():
    assert parse_uri("mailto:x").encoded_origin == ""


def test_ipv4_accessors():
    url = parse_uri("http://10.0.0.1/")
    assert url.host_type == HostType.IPV4
    assert url.host_ipv4_address == ipaddress.IPv4Address("10.0.0.1")
    assert url.host_ipv6_address is None
    assert url.host_name == ""


def test_ipv6_address_text():
    url = parse_uri("http://[2001:DB8::7]/")
    assert url.encoded_host == "[2001:DB8::7]"
    assert url.encoded_host_address == "2001:DB8::7"
    assert url.host_ipv4_address is None


def test_ipvfuture_accessors():
    url = parse_uri("http://[v1.x]/")
    assert url.host_type == HostType.IPVFUTURE
    assert url.host_ipvfuture == "v1.x"
    assert url.encoded_host == "[v1.x]"


def test_host_name():
    url = parse_uri("http://Ex%41mple.com/")
    assert url.encoded_host_name == "Ex%41mple.com"
    assert url.host_name == "ExAmple.com"


def test_query_plus_is_space():
    url = parse_uri("http://a/?q=a+b%20c&flag")
    assert url.query == "q=a b c&flag"
    assert url.encoded_params() == [("q", "a+b%20c"), ("flag", None)]
    assert url.params() == [("q", "a b c"), ("flag", None)]


def test_path_plus_is_literal():
    assert parse_relative_ref("/a+b").path == "/a+b"


def test_persist_outlives_buffer_changes():
    buf = bytearray(b"http://a/b")
    url = parse_uri(buf)
    kept = url.persist()
    buf[7:8] = b"z"
    assert str(kept) == "http://a/b"
    assert str(url) == "http://z/b"


def test_len_and_bytes():
    url = parse_uri("http://a/")
    assert len(url) == 9
    assert url.size == 9
    assert bytes(url) == b"http://a/"


def test_repr():
    assert repr(parse_uri("http://a")) == "UrlView('http://a')"


def test_views_hash_by_equivalence():
    assert hash(parse_uri("HTTP://a/%7e")) == hash(parse_uri("http://a/~"))
    assert len({parse_uri("http://a/"), parse_uri("HTTP://A/")}) == 1


def test_views_sort():
    urls = [parse_uri_reference(s) for s in ("http://b/", "/x", "http://a/")]
    assert [str(u) for u in sorted(urls)] == ["/x", "http://a/", "http://b/"]
