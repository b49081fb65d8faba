from __future__ import annotations

from pathlib import Path

from unidecode import unidecode

from .constants import INVALID_DIR_CHARACTERS

AUDIO_EXT = {".mp3", ".flac", ".wav", ".aiff", ".aif", ".m4a", ".ogg", ".opus", ".wma"}


def is_audio(path: Path) -> bool:
    return path.suffix.lower() in AUDIO_EXT


def file_suffix(name: str) -> str:
    """Text after the last dot of ``name`` ("" when there is no dot)."""
    _, dot, suffix = name.rpartition(".")
    return suffix if dot else ""


def complete_base_name(name: str) -> str:
    """``name`` without its last suffix: ``a.tar.gz`` -> ``a.tar``."""
    base, dot, _ = name.rpartition(".")
    return base if dot else name


def transliterate(text: str) -> str:
    """Best-effort ASCII folding of every path segment.

    Segments are folded one by one and any separator produced by the
    folding itself (``½`` -> ``1/2``) is dropped.
    """
    return "/".join(
        INVALID_DIR_CHARACTERS.sub("", unidecode(part)) for part in text.split("/")
    )
