import logging
import os

from hlsplaylist.m3u8 import (
    MediaExtEntry,
    MediaPlaylist,
    MediaSegment,
    MediaTagKind,
    UnknownTag,
)

AD_TITLE_PREFIX = os.getenv("HLSPLAYLIST_AD_TITLE_PREFIX", "Amazon")

# Twitch marks stitched ads with these DATERANGE classes.
AD_CLASSES = frozenset({'"twitch-ad-quartile"', '"twitch-stitched-ad"'})

_logger = logging.getLogger("hlsplaylist")


def is_ad_segment(segment: MediaSegment) -> bool:
    return (segment.title or "").startswith(AD_TITLE_PREFIX)


def is_ad_entry(entry: MediaExtEntry) -> bool:
    stream_source = entry.attributes.get("X-TV-TWITCH-STREAM-SOURCE", "")
    return (
        entry.attributes.get("CLASS", "") in AD_CLASSES
        or stream_source.startswith(f'"{AD_TITLE_PREFIX}')
        or entry.tag == MediaTagKind.DISCONTINUITY
        or entry.tag == UnknownTag("START")
    )


def strip_ads(playlist: MediaPlaylist) -> int:
    """Remove ad segments and their markers from `playlist` in place.

    Returns the number of removed segments.
    """
    segments = [s for s in playlist.segments if not is_ad_segment(s)]
    entries = [e for e in playlist.ext_entries if not is_ad_entry(e)]
    removed = len(playlist.segments) - len(segments)
    _logger.info(
        "Stripped %d ad segment(s) and %d marker(s)",
        removed,
        len(playlist.ext_entries) - len(entries),
    )
    playlist.segments = segments
    playlist.ext_entries = entries
    return removed
