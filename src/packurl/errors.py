"""packurl.errors
Exceptions raised by the parser, the codec and the editor.
Everything derives from ValueError, so callers that only care about "bad URL" can catch that.
"""

from typing import Self


class UrlError(ValueError):
    """Base exception for packurl errors"""

    pass


class UrlSyntaxError(UrlError):
    """A grammar production did not match.
    offset is the index into the input where matching failed.
    """

    def __init__(self: Self, offset: int, production: str) -> None:
        self.offset: int = offset
        self.production: str = production
        super().__init__(f"syntax error in {production} at offset {offset}")


class InvalidEncodingError(UrlSyntaxError):
    """A "%" not followed by exactly two hex digits"""

    def __init__(self: Self, offset: int) -> None:
        super().__init__(offset, "pct-encoded")


class IllegalCharacterError(UrlError):
    """A raw byte that is not allowed where it appears"""

    def __init__(self: Self, offset: int, char: int | None = None) -> None:
        self.offset: int = offset
        self.char: int | None = char
        if char is None:
            super().__init__(f"illegal character at offset {offset}")
        else:
            super().__init__(f"illegal character {chr(char)!r} at offset {offset}")


class InvalidArgumentError(UrlError):
    """A builder input that cannot be encoded into a valid component"""

    pass


class PortOverflowError(InvalidArgumentError):
    """A port number outside of 0..65535"""

    def __init__(self: Self, value: int) -> None:
        self.value: int = value
        super().__init__(f"port {value} is out of range")
