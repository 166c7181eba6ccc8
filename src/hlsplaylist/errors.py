from typing import Any


class ParseError(Exception):
    """Base class for every playlist parse and serialization failure."""


class MalformedError(ParseError, ValueError):
    def __init__(self, context: Any) -> None:
        super().__init__(f"Malformed input: {context!r}")
        self.context = context


class PlaylistIOError(ParseError, OSError):
    pass


class FloatParseError(ParseError, ValueError):
    pass


class IntParseError(ParseError, ValueError):
    pass
