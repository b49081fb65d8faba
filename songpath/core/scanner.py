from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from mutagen import File as MutagenFile

from .constants import NSEC_PER_SEC
from .song import Song
from .utils import is_audio

logger = logging.getLogger(__name__)


TAG_KEY_ALIASES = {
    "title": ("title", "TITLE", "TIT2", "©nam"),
    "artist": ("artist", "ARTIST", "TPE1", "©ART"),
    "album": ("album", "ALBUM", "TALB", "©alb"),
    "albumartist": ("albumartist", "ALBUMARTIST", "album artist", "TPE2", "aART"),
    "composer": ("composer", "COMPOSER", "TCOM", "©wrt"),
    "performer": ("performer", "PERFORMER", "TOPE"),
    "grouping": ("grouping", "GROUPING", "TIT1", "GRP1", "©grp"),
    "lyrics": ("lyrics", "LYRICS", "UNSYNCEDLYRICS", "USLT", "©lyr"),
    "genre": ("genre", "GENRE", "TCON", "©gen"),
    "comment": ("comment", "COMMENT", "COMM", "©cmt"),
    "date": ("date", "DATE", "TDRC", "©day"),
    "year": ("year", "YEAR", "TYER"),
    "originaldate": ("originaldate", "ORIGINALDATE", "TDOR", "TORY"),
    "tracknumber": ("tracknumber", "TRACKNUMBER", "TRCK", "trkn"),
    "discnumber": ("discnumber", "DISCNUMBER", "TPOS", "disk"),
    "compilation": ("compilation", "COMPILATION", "TCMP", "cpil"),
}

_TEXT_FIELDS = (
    "title",
    "artist",
    "album",
    "albumartist",
    "composer",
    "performer",
    "grouping",
    "lyrics",
    "genre",
    "comment",
)


def iter_songs(root: Path) -> Iterator[Song]:
    root = root.expanduser().resolve()
    for p in sorted(root.rglob("*")):
        if not p.is_file() or not is_audio(p):
            continue
        yield read_song(p)


def read_song(p: Path) -> Song:
    info: dict = {"path": str(p)}
    try:
        audio = MutagenFile(str(p))
        if audio:
            tags = getattr(audio, "tags", None)
            if tags:
                for name in _TEXT_FIELDS:
                    info[name] = _first(tags, TAG_KEY_ALIASES[name]) or ""
                info["year"] = _int_or_unset(
                    _first(tags, TAG_KEY_ALIASES["date"])
                    or _first(tags, TAG_KEY_ALIASES["year"])
                )
                info["originalyear"] = _int_or_unset(_first(tags, TAG_KEY_ALIASES["originaldate"]))
                info["track"] = _int_or_unset(_first(tags, TAG_KEY_ALIASES["tracknumber"]))
                info["disc"] = _int_or_unset(_first(tags, TAG_KEY_ALIASES["discnumber"]))
                info["compilation"] = _truthy(_first(tags, TAG_KEY_ALIASES["compilation"]))
            audio_info = getattr(audio, "info", None)
            if audio_info and getattr(audio_info, "length", None) is not None:
                info["length_nanosec"] = int(float(audio_info.length) * NSEC_PER_SEC)
            if audio_info and getattr(audio_info, "bitrate", None):
                info["bitrate"] = int(audio_info.bitrate) // 1000
            if audio_info and getattr(audio_info, "sample_rate", None) is not None:
                info["samplerate"] = int(audio_info.sample_rate)
            if audio_info and getattr(audio_info, "bits_per_sample", None) is not None:
                info["bitdepth"] = int(audio_info.bits_per_sample)
    except Exception as e:
        logger.warning("[scan] error with %s: %s", p, e)
    return Song(**info)


def _first(meta, key):
    if meta is None or key is None:
        return None

    if isinstance(key, (list, tuple)):
        for name in key:
            value = _first(meta, name)
            if value not in (None, ""):
                return value
        return None

    candidates = []
    getter = getattr(meta, "getall", None)
    if callable(getter):
        try:
            candidates.extend(getter(key) or [])
        except Exception:
            pass

    getter = getattr(meta, "get", None)
    if callable(getter):
        candidates.append(getter(key))
    else:
        try:
            candidates.append(meta[key])
        except Exception:
            pass

    for candidate in candidates:
        value = _coerce_first(candidate)
        if value not in (None, ""):
            return value
    return None


def _coerce_first(value):
    if value is None:
        return None
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, str):
        return value or None
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return value.decode("latin-1", errors="ignore")
    if isinstance(value, (list, tuple)):
        for item in value:
            normalized = _coerce_first(item)
            if normalized not in (None, ""):
                return normalized
        return None
    if hasattr(value, "text"):
        return _coerce_first(value.text)
    if hasattr(value, "value"):
        return _coerce_first(value.value)
    return str(value)


def _int_or_unset(s) -> int:
    if s is None:
        return -1
    try:
        return int(str(s).split("/")[0][:4])
    except ValueError:
        return -1


def _truthy(s) -> bool:
    return str(s or "").strip().lower() in {"1", "true", "yes"}
