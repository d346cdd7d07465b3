"""packurl.grammar
A small rule engine for writing ABNF productions.

Every rule has the same contract: rule.parse(buf, pos, end) consumes a prefix of buf[pos:end]
and returns (new_pos, value), or raises UrlSyntaxError anchored at the offset where matching failed.
A failed rule leaves nothing behind, so the caller simply keeps its own pos.
Rules do not backtrack into what they have already consumed; "%" always starts a 3-byte triplet.
"""

import dataclasses

from typing import Any, Callable, Self

from .charsets import CharSet, HEXDIG
from .errors import InvalidEncodingError, UrlSyntaxError

Buffer = bytes | bytearray

_PERCENT: int = ord("%")


@dataclasses.dataclass(frozen=True, slots=True)
class Span:
    """A matched range of the input, with the size it decodes to"""

    start: int
    stop: int
    decoded_size: int = -1

    def __len__(self: Self) -> int:
        return self.stop - self.start


class Rule:
    """Base class of all rules. production names the ABNF rule for error messages."""

    production: str = "rule"

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, Any]:
        raise NotImplementedError

    def fail(self: Self, pos: int) -> UrlSyntaxError:
        return UrlSyntaxError(pos, self.production)

    def named(self: Self, production: str) -> Self:
        self.production = production
        return self

    def __repr__(self: Self) -> str:
        return f"<{self.__class__.__name__} {self.production}>"


class OneChar(Rule):
    """Exactly one byte, either a specific one or any member of a CharSet"""

    def __init__(self: Self, char: str | int | CharSet, production: str | None = None) -> None:
        if isinstance(char, str):
            char = ord(char)
        self.char: int | CharSet = char
        if production is not None:
            self.production = production
        elif isinstance(char, CharSet):
            self.production = char.name or "char"
        else:
            self.production = repr(chr(char))

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, Span]:
        if pos >= end:
            raise self.fail(pos)
        c: int = buf[pos]
        if isinstance(self.char, CharSet):
            if c not in self.char:
                raise self.fail(pos)
        elif c != self.char:
            raise self.fail(pos)
        return pos + 1, Span(pos, pos + 1, 1)


class Literal(Rule):
    """An exact sequence of bytes"""

    def __init__(self: Self, text: str | bytes, production: str | None = None) -> None:
        if isinstance(text, str):
            text = text.encode("ascii")
        self.text: bytes = text
        self.production = production if production is not None else repr(text.decode("ascii"))

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, Span]:
        stop: int = pos + len(self.text)
        if stop > end or buf[pos:stop] != self.text:
            # Point at the first byte that differs.
            i: int = pos
            while i < min(stop, end) and buf[i] == self.text[i - pos]:
                i += 1
            raise self.fail(i)
        return stop, Span(pos, stop, len(self.text))


class Token(Rule):
    """The longest run of bytes inside a CharSet, between min_count and max_count bytes long"""

    def __init__(self: Self, charset: CharSet, min_count: int = 0, max_count: int | None = None, production: str | None = None) -> None:
        self.charset: CharSet = charset
        self.min_count: int = min_count
        self.max_count: int | None = max_count
        self.production = production if production is not None else (charset.name or "token")

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, Span]:
        limit: int = end if self.max_count is None else min(end, pos + self.max_count)
        stop: int = self.charset.find_if_not(buf, pos, limit)
        if stop - pos < self.min_count:
            raise self.fail(stop)
        return stop, Span(pos, stop, stop - pos)


class PctToken(Rule):
    """The longest run of bytes inside a CharSet and %XX triplets.
    A "%" is never a literal; a malformed triplet is an InvalidEncodingError.
    """

    def __init__(self: Self, charset: CharSet, min_count: int = 0, production: str | None = None) -> None:
        self.charset: CharSet = charset
        self.min_count: int = min_count
        self.production = production if production is not None else (charset.name or "pct-token")

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, Span]:
        start: int = pos
        n: int = 0
        charset: CharSet = self.charset
        while pos < end:
            c: int = buf[pos]
            if c == _PERCENT:
                if pos + 2 >= end or buf[pos + 1] not in HEXDIG or buf[pos + 2] not in HEXDIG:
                    raise InvalidEncodingError(pos)
                pos += 3
            elif c in charset:
                pos += 1
            else:
                break
            n += 1
        if n < self.min_count:
            raise self.fail(pos)
        return pos, Span(start, pos, n)


class Sequence(Rule):
    """All rules, in order. The value is the tuple of their values."""

    def __init__(self: Self, *rules: Rule, production: str = "sequence") -> None:
        self.rules: tuple[Rule, ...] = rules
        self.production = production

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, tuple]:
        values: list[Any] = []
        for rule in self.rules:
            pos, value = rule.parse(buf, pos, end)
            values.append(value)
        return pos, tuple(values)


class Alternative(Rule):
    """The first rule that matches. The value is (index, value).
    If none match, the failure that got furthest into the input is reported.
    A malformed triplet is an error in every alternative, so it is not caught.
    """

    def __init__(self: Self, *rules: Rule, production: str = "alternative") -> None:
        self.rules: tuple[Rule, ...] = rules
        self.production = production

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, tuple[int, Any]]:
        furthest: UrlSyntaxError | None = None
        for index, rule in enumerate(self.rules):
            try:
                stop, value = rule.parse(buf, pos, end)
            except InvalidEncodingError:
                raise
            except UrlSyntaxError as e:
                if furthest is None or e.offset > furthest.offset:
                    furthest = e
                continue
            return stop, (index, value)
        raise furthest if furthest is not None else self.fail(pos)


class Optional(Rule):
    """The rule, or nothing. The value is None when it did not match."""

    def __init__(self: Self, rule: Rule) -> None:
        self.rule: Rule = rule
        self.production = f"[ {rule.production} ]"

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, Any]:
        try:
            return self.rule.parse(buf, pos, end)
        except InvalidEncodingError:
            raise
        except UrlSyntaxError:
            return pos, None


class Repeat(Rule):
    """Between min_count and max_count occurrences of element, optionally separated by delimiter.
    Greedy: a delimiter that is not followed by an element is left unconsumed.
    The value is the list of element values, so its length is the repetition count.
    """

    def __init__(
        self: Self,
        element: Rule,
        min_count: int = 0,
        max_count: int | None = None,
        delimiter: Rule | None = None,
        production: str | None = None,
    ) -> None:
        self.element: Rule = element
        self.min_count: int = min_count
        self.max_count: int | None = max_count
        self.delimiter: Rule | None = delimiter
        self.production = production if production is not None else f"*( {element.production} )"

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, list]:
        values: list[Any] = []
        failure: UrlSyntaxError | None = None
        while self.max_count is None or len(values) < self.max_count:
            next_pos: int = pos
            try:
                if values and self.delimiter is not None:
                    next_pos, _ = self.delimiter.parse(buf, next_pos, end)
                next_pos, value = self.element.parse(buf, next_pos, end)
            except InvalidEncodingError:
                raise
            except UrlSyntaxError as e:
                failure = e
                break
            if next_pos == pos and self.delimiter is None:
                # An empty match would repeat forever.
                values.append(value)
                break
            values.append(value)
            pos = next_pos
        if len(values) < self.min_count:
            raise failure if failure is not None else self.fail(pos)
        return pos, values


class Mapped(Rule):
    """Apply fn to the value of rule"""

    def __init__(self: Self, rule: Rule, fn: Callable[[Any], Any], production: str | None = None) -> None:
        self.rule: Rule = rule
        self.fn: Callable[[Any], Any] = fn
        self.production = production if production is not None else rule.production

    def parse(self: Self, buf: Buffer, pos: int, end: int) -> tuple[int, Any]:
        pos, value = self.rule.parse(buf, pos, end)
        return pos, self.fn(value)


def parse_all(rule: Rule, buf: Buffer, pos: int = 0, end: int | None = None) -> Any:
    """Run rule over buf[pos:end] and require it to consume all of it"""
    if end is None:
        end = len(buf)
    stop, value = rule.parse(buf, pos, end)
    if stop != end:
        raise UrlSyntaxError(stop, rule.production)
    return value
