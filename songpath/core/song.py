from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .utils import file_suffix


@dataclass(frozen=True)
class Song:
    """Read-only metadata snapshot of one audio file.

    Numeric fields use ``-1`` for "unset", the same default the tag readers
    produce when a frame is missing.
    """

    path: str = ""
    title: str = ""
    album: str = ""
    artist: str = ""
    albumartist: str = ""
    composer: str = ""
    performer: str = ""
    grouping: str = ""
    lyrics: str = ""
    genre: str = ""
    comment: str = ""
    compilation: bool = False
    year: int = -1
    originalyear: int = -1
    track: int = -1
    disc: int = -1
    length_nanosec: int = -1
    bitrate: int = -1
    samplerate: int = -1
    bitdepth: int = -1

    @property
    def effective_albumartist(self) -> str:
        return self.albumartist or self.artist

    @property
    def effective_originalyear(self) -> int:
        return self.originalyear if self.originalyear >= 0 else self.year

    @property
    def is_compilation(self) -> bool:
        return self.compilation

    @property
    def basefilename(self) -> str:
        return Path(self.path).name if self.path else ""

    @property
    def extension(self) -> str:
        return file_suffix(self.basefilename)
