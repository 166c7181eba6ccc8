import io
import logging
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Dict, List, NamedTuple, Optional, Union

from hlsplaylist.errors import MalformedError, PlaylistIOError

from .grammar import (
    EXTENSION_MARKER,
    HEADER,
    TAG_PREFIX,
    UnknownTag,
    parse_attributes,
    parse_float,
    parse_uint,
    scan_tag,
    split_lines,
    strip_marker,
)

# See rfc8216 section 4.3.2 (media segment tags) and 4.3.3 (media playlist tags)

_logger = logging.getLogger("hlsplaylist")

UNKNOWN_KEY = "UNKNOWN"


class MediaTagKind(Enum):
    VERSION = "VERSION"
    TARGETDURATION = "TARGETDURATION"
    MEDIA_SEQUENCE = "MEDIA-SEQUENCE"
    DATERANGE = "DATERANGE"
    DISCONTINUITY = "DISCONTINUITY"
    INF = "INF"
    PROGRAM_DATE_TIME = "PROGRAM-DATE-TIME"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, raw_name: str) -> Union["MediaTagKind", UnknownTag]:
        name = strip_marker(raw_name)
        try:
            return cls(name)
        except ValueError:
            return UnknownTag(name)


class MediaExtEntry(NamedTuple):
    tag: Union[MediaTagKind, UnknownTag]
    attributes: Dict[str, str]


class MediaSegment(NamedTuple):
    duration: float
    title: Optional[str]
    uri: str
    program_date_time: Optional[str] = None


def _rejoin_attributes(attributes: Dict[str, str]) -> str:
    return ",".join(
        value if key == UNKNOWN_KEY else f"{key}={value}"
        for key, value in attributes.items()
    )


class MediaPlaylist:
    def __init__(
        self,
        version: int = 0,
        target_duration: int = 0,
        media_sequence: int = 0,
        segments: Optional[List[MediaSegment]] = None,
        ext_entries: Optional[List[MediaExtEntry]] = None,
    ) -> None:
        self.version = version
        self.target_duration = target_duration
        self.media_sequence = media_sequence
        self.segments: List[MediaSegment] = segments if segments is not None else []
        self.ext_entries: List[MediaExtEntry] = (
            ext_entries if ext_entries is not None else []
        )

    def _lines(self) -> List[str]:
        ext_tag = f"{TAG_PREFIX}{EXTENSION_MARKER}"
        lines = [
            HEADER.rstrip("\n"),
            f"{ext_tag}{MediaTagKind.VERSION}:{self.version}",
            f"{ext_tag}{MediaTagKind.TARGETDURATION}:{self.target_duration}",
            f"{ext_tag}{MediaTagKind.MEDIA_SEQUENCE}:{self.media_sequence}",
        ]
        for entry in self.ext_entries:
            if entry.tag in (MediaTagKind.INF, MediaTagKind.PROGRAM_DATE_TIME):
                continue  # Written per segment
            if entry.tag == MediaTagKind.DISCONTINUITY:
                lines.append(f"{ext_tag}{entry.tag}")
            else:
                attributes = _rejoin_attributes(entry.attributes)
                lines.append(f"{ext_tag}{entry.tag}:{attributes}")
        for segment in self.segments:
            if segment.program_date_time is not None:
                lines.append(
                    f"{ext_tag}{MediaTagKind.PROGRAM_DATE_TIME}:"
                    f"{segment.program_date_time}"
                )
            lines.append(
                f"{TAG_PREFIX}{MediaTagKind.INF}:"
                f"{segment.duration:.3f},{segment.title or ''}"
            )
            lines.append(segment.uri)
        return lines

    def serialize(self, sink: BinaryIO) -> None:
        """Write the playlist to a binary sink as UTF-8 text.

        VERSION, TARGETDURATION and MEDIA-SEQUENCE always come from the
        playlist's fields and are written right after the header. Stored ext
        entries follow in order, then the segments. Short writes are retried
        until every byte of a line is accepted.
        """
        for line in self._lines():
            data = memoryview(f"{line}\n".encode("utf-8"))
            while data:
                try:
                    written = sink.write(data)
                except (OSError, ValueError) as error:
                    raise PlaylistIOError(str(error)) from error
                if not written:
                    raise PlaylistIOError("failed to write whole buffer")
                data = data[written:]

    def dumps(self) -> str:
        buffer = io.BytesIO()
        self.serialize(buffer)
        return buffer.getvalue().decode("utf-8")

    def write(self, path: Path) -> None:
        try:
            with path.open(mode="wb") as m3u8:
                self.serialize(m3u8)
        except PlaylistIOError:
            raise
        except OSError as error:
            raise PlaylistIOError(str(error)) from error


def parse_media(text: str) -> MediaPlaylist:
    lines = split_lines(text)
    playlist = MediaPlaylist()
    program_date_time: Optional[str] = None
    cursor = 0
    while cursor < len(lines):
        raw_name, remainder = scan_tag(lines[cursor])
        cursor += 1
        tag = MediaTagKind.from_name(raw_name)
        if tag == MediaTagKind.VERSION:
            playlist.version = parse_uint(remainder, 8)
        elif tag == MediaTagKind.TARGETDURATION:
            playlist.target_duration = parse_uint(remainder, 8)
        elif tag == MediaTagKind.MEDIA_SEQUENCE:
            playlist.media_sequence = parse_uint(remainder, 32)
        elif tag == MediaTagKind.DATERANGE:
            playlist.ext_entries.append(
                MediaExtEntry(tag, parse_attributes(remainder))
            )
        elif tag == MediaTagKind.DISCONTINUITY:
            playlist.ext_entries.append(MediaExtEntry(tag, {}))
        elif tag == MediaTagKind.PROGRAM_DATE_TIME:
            # Applies to the next segment only
            program_date_time = remainder
        elif tag == MediaTagKind.INF:
            duration, comma, title = remainder.partition(",")
            if not comma:
                raise MalformedError(remainder)
            if cursor >= len(lines):
                _logger.debug("Dropped dangling %s tag: %s", tag, remainder)
                break
            uri = lines[cursor]
            cursor += 1
            playlist.segments.append(
                MediaSegment(parse_float(duration), title or None, uri, program_date_time)
            )
            program_date_time = None
        else:
            playlist.ext_entries.append(MediaExtEntry(tag, {UNKNOWN_KEY: remainder}))
    _logger.debug(
        "Parsed media playlist with %d segments and %d ext entries",
        len(playlist.segments),
        len(playlist.ext_entries),
    )
    return playlist
