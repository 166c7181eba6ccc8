import logging
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Union

from .grammar import UnknownTag, parse_attributes, scan_tag, split_lines, strip_marker

_logger = logging.getLogger("hlsplaylist")

UNKNOWN_NAME = "Unknown"


class MasterTagKind(Enum):
    MEDIA = "MEDIA"
    STREAM_INF = "STREAM-INF"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, raw_name: str) -> Union["MasterTagKind", UnknownTag]:
        name = strip_marker(raw_name)
        try:
            return cls(name)
        except ValueError:
            return UnknownTag(name)


class MasterEntry(NamedTuple):
    tag: Union[MasterTagKind, UnknownTag]
    attributes: Dict[str, str]


class MasterPlaylist:
    """Variant streams and renditions of a master playlist, in file order."""

    def __init__(self, entries: Optional[List[MasterEntry]] = None) -> None:
        self.entries: List[MasterEntry] = entries if entries is not None else []

    def _entries_of(self, tag: MasterTagKind) -> List[MasterEntry]:
        return [entry for entry in self.entries if entry.tag == tag]

    def rendition_names(self) -> List[str]:
        return [
            entry.attributes.get("NAME", UNKNOWN_NAME)
            for entry in self._entries_of(MasterTagKind.MEDIA)
        ]

    def first_variant_uri(self) -> Optional[str]:
        variants = self._entries_of(MasterTagKind.STREAM_INF)
        return variants[0].attributes.get("URI") if variants else None

    def rendition_uri(self, name: str) -> Optional[str]:
        """Return the variant stream URI for the rendition called `name`.

        The rendition's GROUP-ID is matched against the VIDEO attribute of
        the variant streams. Values are compared as written in the playlist,
        so quoted names must be passed with their quotes.
        """
        group_id = next(
            (
                entry.attributes.get("GROUP-ID")
                for entry in self._entries_of(MasterTagKind.MEDIA)
                if entry.attributes.get("NAME") == name
            ),
            None,
        )
        if group_id is None:
            return None
        return next(
            (
                entry.attributes.get("URI")
                for entry in self._entries_of(MasterTagKind.STREAM_INF)
                if entry.attributes.get("VIDEO") == group_id
            ),
            None,
        )


def parse_master(text: str) -> MasterPlaylist:
    lines = split_lines(text)
    entries: List[MasterEntry] = []
    cursor = 0
    while cursor < len(lines):
        raw_name, remainder = scan_tag(lines[cursor])
        cursor += 1
        tag = MasterTagKind.from_name(raw_name)
        attributes = parse_attributes(remainder)
        if tag == MasterTagKind.STREAM_INF:
            if cursor < len(lines):
                attributes["URI"] = lines[cursor]
            else:
                _logger.debug("Dropped URI of dangling %s tag", tag)
            cursor += 1
        entries.append(MasterEntry(tag, attributes))
    _logger.debug("Parsed master playlist with %d entries", len(entries))
    return MasterPlaylist(entries)
