import re
from typing import Dict, List, NamedTuple, Tuple

from hlsplaylist.errors import FloatParseError, IntParseError, MalformedError

# See rfc8216 section 4.1 for the playlist line grammar.

HEADER = "#EXTM3U\n"
TAG_PREFIX = "#EXT"
EXTENSION_MARKER = "-X-"

_uint_re = re.compile(r"\+?[0-9]+")
_float_re = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


class UnknownTag(NamedTuple):
    """A tag this parser has no kind for, named as it appears after `-X-`."""

    name: str

    def __str__(self) -> str:
        return self.name


def split_lines(text: str) -> List[str]:
    """Check the `#EXTM3U` header and split the rest of `text` into lines.

    Lines are split on LF with one trailing CR removed from each, and a
    trailing newline does not produce a final empty line.
    """
    if not text.startswith(HEADER):
        raise MalformedError(text[: len(HEADER)])
    body = text[len(HEADER) :]
    if not body:
        return []
    lines = body.split("\n")
    if body.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def scan_tag(line: str) -> Tuple[str, str]:
    """Split a tag line into its raw tag name and the rest of the line.

    >>> scan_tag("#EXT-X-MEDIA:TYPE=VIDEO")
    ('-X-MEDIA', 'TYPE=VIDEO')
    >>> scan_tag("#EXTM3U")
    ('M3U', '')
    """
    if not line.startswith(TAG_PREFIX) or len(line) == len(TAG_PREFIX):
        raise MalformedError(line)
    tag = line[len(TAG_PREFIX) :]
    name, colon, remainder = tag.partition(":")
    if not colon or not name:
        return tag, ""
    return name, remainder


def strip_marker(name: str) -> str:
    while name.startswith(EXTENSION_MARKER):
        name = name[len(EXTENSION_MARKER) :]
    return name


def parse_attributes(remainder: str) -> Dict[str, str]:
    """Parse a `KEY=VALUE,...` attribute list.

    Quoted values keep their quotes and may contain commas. A key seen twice
    keeps its first position and takes the last value.
    """
    attributes: Dict[str, str] = {}
    if not remainder:
        return attributes
    pos = 0
    end = len(remainder)
    while True:
        equals = remainder.find("=", pos)
        if equals <= pos:
            raise MalformedError(remainder[pos:])
        key = remainder[pos:equals]
        pos = equals + 1
        closing = remainder.find('"', pos + 1) if remainder.startswith('"', pos) else -1
        if closing > pos + 1:
            value = remainder[pos : closing + 1]
            pos = closing + 1
            if pos < end and remainder[pos] != ",":
                raise MalformedError(remainder[pos:])
        else:
            comma = remainder.find(",", pos)
            if comma == -1:
                comma = end
            value = remainder[pos:comma]
            pos = comma
        attributes[key] = value
        if pos == end:
            return attributes
        pos += 1  # Skip the comma


def parse_uint(text: str, bits: int) -> int:
    if not text:
        raise IntParseError("cannot parse integer from empty string")
    if not _uint_re.fullmatch(text):
        raise IntParseError("invalid digit found in string")
    value = int(text)
    if value >= 1 << bits:
        raise IntParseError("number too large to fit in target type")
    return value


def parse_float(text: str) -> float:
    if not _float_re.fullmatch(text):
        raise FloatParseError("invalid float literal")
    return float(text)
