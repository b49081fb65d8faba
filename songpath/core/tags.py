from __future__ import annotations

import re

from .config import FormatOptions
from .constants import INVALID_DIR_CHARACTERS, NSEC_PER_SEC
from .song import Song

KNOWN_TAGS: tuple[str, ...] = (
    "title",
    "album",
    "artist",
    "artistinitial",
    "albumartist",
    "composer",
    "track",
    "disc",
    "year",
    "originalyear",
    "genre",
    "comment",
    "length",
    "bitrate",
    "samplerate",
    "bitdepth",
    "extension",
    "performer",
    "grouping",
    "lyrics",
)

# A non-empty value for any of these makes the rendered name self-disambiguating.
UNIQUE_TAGS: frozenset[str] = frozenset({"title", "track"})

_TEXT_FIELDS = {
    "title": "title",
    "album": "album",
    "artist": "artist",
    "composer": "composer",
    "performer": "performer",
    "grouping": "grouping",
    "lyrics": "lyrics",
    "genre": "genre",
    "comment": "comment",
}

_NUMERIC_FIELDS = {
    "year": "year",
    "originalyear": "effective_originalyear",
    "track": "track",
    "disc": "disc",
    "bitrate": "bitrate",
    "samplerate": "samplerate",
    "bitdepth": "bitdepth",
}

_SENTINELS = ("0", "-1")
_LEADING_THE = re.compile(r"^the\s+", re.IGNORECASE)


def _seconds(nanosec: int) -> int:
    seconds = abs(nanosec) // NSEC_PER_SEC
    return -seconds if nanosec < 0 else seconds


def _artist_initial(song: Song) -> str:
    value = song.effective_albumartist.strip()
    value = _LEADING_THE.sub("", value)
    return value.upper()[:1]


def _raw_value(tag: str, song: Song) -> str:
    if tag in _TEXT_FIELDS:
        return getattr(song, _TEXT_FIELDS[tag]) or ""
    if tag in _NUMERIC_FIELDS:
        return str(int(getattr(song, _NUMERIC_FIELDS[tag])))
    if tag == "length":
        return str(_seconds(song.length_nanosec))
    if tag == "extension":
        return song.extension
    if tag == "artistinitial":
        return _artist_initial(song)
    if tag == "albumartist":
        return "Various Artists" if song.is_compilation else song.effective_albumartist
    return ""


def tag_value(tag: str, song: Song, options: FormatOptions | None = None) -> str:
    """Resolve ``%tag`` for ``song``; unknown tags resolve to ""."""
    options = options or FormatOptions()
    value = _raw_value(tag, song)

    if value in _SENTINELS:
        value = ""

    if tag == "track" and len(value) == 1:
        value = "0" + value

    value = INVALID_DIR_CHARACTERS.sub("", value)
    if options.remove_problematic:
        value = value.replace(".", "")
    return value.strip()
