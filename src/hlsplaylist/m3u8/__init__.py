import logging
import os
import sys

from .master import MasterEntry, MasterPlaylist, MasterTagKind, parse_master
from .media import MediaExtEntry, MediaPlaylist, MediaSegment, MediaTagKind, parse_media
from .grammar import UnknownTag

logger = logging.getLogger("hlsplaylist")
logger.setLevel(os.getenv("HLSPLAYLIST_LOG_LEVEL", "INFO").upper())
logger.addHandler(logging.StreamHandler(sys.stderr))

__all__ = [
    "MasterEntry",
    "MasterPlaylist",
    "MasterTagKind",
    "MediaExtEntry",
    "MediaPlaylist",
    "MediaSegment",
    "MediaTagKind",
    "UnknownTag",
    "parse_master",
    "parse_media",
]
