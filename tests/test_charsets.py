from packurl.charsets import (
    ALPHA,
    DIGIT,
    HEXDIG,
    PARAM_CHARS,
    PARAM_KEY_CHARS,
    PASSWORD_CHARS,
    PCHAR,
    QUERY_CHARS,
    RESERVED,
    SEGMENT_NC_CHARS,
    UNRESERVED,
    USER_CHARS,
    CharSet,
)


def test_membership_is_by_byte_value():
    assert ord("a") in ALPHA
    assert ord("Z") in ALPHA
    assert ord("1") not in ALPHA
    assert ord("~") in UNRESERVED
    assert ord("%") not in PCHAR


def test_sizes():
    assert len(DIGIT) == 10
    assert len(HEXDIG) == 22
    assert len(ALPHA) == 52


def test_union_and_difference():
    cs = CharSet("ab") | "c"
    assert bytes(cs) == b"abc"
    assert bytes(cs - CharSet("b")) == b"ac"


def test_rfc_subsets():
    assert ord(":") not in SEGMENT_NC_CHARS
    assert ord("@") in SEGMENT_NC_CHARS
    assert ord(":") not in USER_CHARS
    assert ord(":") in PASSWORD_CHARS
    assert ord("?") in QUERY_CHARS
    assert ord("&") in QUERY_CHARS
    assert ord("&") not in PARAM_CHARS
    assert ord("=") in PARAM_CHARS
    assert ord("=") not in PARAM_KEY_CHARS
    assert len(RESERVED) == 18


def test_find_if_not():
    assert ALPHA.find_if_not(b"abc/d", 0, 5) == 3
    assert ALPHA.find_if_not(b"abc", 0, 3) == 3
    assert ALPHA.find_if_not(b"abc/d", 1, 2) == 2


def test_find_if():
    assert DIGIT.find_if(b"ab1", 0, 3) == 2
    assert DIGIT.find_if(b"abc", 0, 3) == 3


def test_repr_uses_name():
    assert repr(DIGIT) == "CharSet(DIGIT)"
    assert repr(CharSet("ba")) == "CharSet(b'ab')"
