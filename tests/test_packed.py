from packurl import Part, parse_uri
from packurl.packed import PackedUrl, count_params, count_segments, dot_segment_spans


def test_count_segments():
    assert count_segments(b"") == 0
    assert count_segments(b"/") == 0
    assert count_segments(b"/a") == 1
    assert count_segments(b"/a/") == 2
    assert count_segments(b"a") == 1
    assert count_segments(b"a/b") == 2


def test_count_params():
    assert count_params(b"") == 1
    assert count_params(b"a=1&b") == 2


def test_spans_carry_delimiters():
    packed = parse_uri("http://u:p@h:8/x?q#f").packed
    assert packed.get(Part.SCHEME) == b"http:"
    assert packed.get(Part.USER) == b"//u"
    assert packed.get(Part.PASSWORD) == b":p@"
    assert packed.get(Part.HOST) == b"h"
    assert packed.get(Part.PORT) == b":8"
    assert packed.get(Part.PATH) == b"/x"
    assert packed.get(Part.QUERY) == b"?q"
    assert packed.get(Part.FRAGMENT) == b"#f"
    assert packed.get(Part.USER, Part.PATH) == b"//u:p@h:8"
    assert packed.length(Part.SCHEME, Part.END) == packed.size()


def test_decoded_sizes_exclude_delimiters():
    packed = parse_uri("http://u%41:p@h:8/x%20y?q#f").packed
    assert packed.decoded[Part.SCHEME] == 4
    assert packed.decoded[Part.USER] == 2
    assert packed.decoded[Part.PASSWORD] == 1
    assert packed.decoded[Part.PORT] == 1
    assert packed.decoded[Part.PATH] == 4
    assert packed.decoded[Part.QUERY] == 1
    assert packed.decoded[Part.FRAGMENT] == 1


def test_empty():
    packed = PackedUrl()
    assert packed.size() == 0
    assert not packed.has_authority()


def test_copy_shares_nothing():
    packed = parse_uri("http://a/").packed
    other = packed.copy(bytearray(packed.buf))
    other.offsets[Part.END] = 0
    assert packed.size() == 9


def test_dot_segment_spans():
    buf = b"/a/./b/../c"
    assert dot_segment_spans(buf, 0, len(buf)) == [(0, 1, 2), (9, 10, 11)]
    assert dot_segment_spans(b"a/..", 0, 4) == [(1, 4, 4)]
    assert dot_segment_spans(b"../a", 0, 4) == [(-1, 3, 4)]
    assert dot_segment_spans(b".", 0, 1) == []
    assert dot_segment_spans(b"", 0, 0) == []


def test_dot_segment_spans_decoded():
    buf = b"/%2e/x"
    assert dot_segment_spans(buf, 0, len(buf)) == [(0, 1, 4), (4, 5, 6)]
    assert dot_segment_spans(buf, 0, len(buf), decode=True) == [(4, 5, 6)]
    buf = b"/a/%2E%2e"
    assert dot_segment_spans(buf, 0, len(buf), decode=True) == [(2, 9, 9)]
