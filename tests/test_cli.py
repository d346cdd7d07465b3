import io

import pytest

from packurl.cli import EXIT_INVALID, EXIT_OK, EXIT_USAGE, main


def test_parse(capsys):
    assert main(["parse", "http://u@h:8/p/q?a=1&b#f"]) == EXIT_OK
    out = capsys.readouterr().out.splitlines()
    assert "scheme: http" in out
    assert "user: u" in out
    assert "host: h" in out
    assert "host_type: NAME" in out
    assert "port: 8" in out
    assert "path: /p/q" in out
    assert "segment: q" in out
    assert "param: a=1" in out
    assert "param: b" in out
    assert "fragment: f" in out


def test_parse_with_form(capsys):
    assert main(["parse", "--form", "origin", "/x?y"]) == EXIT_OK
    assert "query: y" in capsys.readouterr().out.splitlines()


def test_parse_invalid(capsys):
    assert main(["parse", "http://[::1"]) == EXIT_INVALID
    assert capsys.readouterr().err.startswith("error:")


def test_parse_wrong_form(capsys):
    assert main(["parse", "--form", "uri", "/relative"]) == EXIT_INVALID


def test_parse_from_stdin(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("http://x/\n"))
    assert main(["parse", "-"]) == EXIT_OK
    assert "host: x" in capsys.readouterr().out.splitlines()


def test_normalize(capsys):
    assert main(["normalize", "HTTP://A/./b/%7e"]) == EXIT_OK
    assert capsys.readouterr().out == "http://a/b/~\n"


def test_compare(capsys):
    assert main(["compare", "HTTP://a/", "http://a/"]) == EXIT_OK
    assert capsys.readouterr().out == "0\n"
    assert main(["compare", "http://a/", "http://b/"]) == EXIT_OK
    assert capsys.readouterr().out == "-1\n"


def test_resolve(capsys):
    assert main(["resolve", "http://a/b/c/d;p?q", "../g"]) == EXIT_OK
    assert capsys.readouterr().out == "http://a/b/g\n"


def test_resolve_relative_base(capsys):
    assert main(["resolve", "/a", "b"]) == EXIT_INVALID


def test_usage_error():
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == EXIT_USAGE
