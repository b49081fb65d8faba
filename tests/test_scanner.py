from __future__ import annotations

from pathlib import Path

from songpath.core.scanner import iter_songs, read_song


class _FakeInfo:
    length = 200.0
    bitrate = 256000
    sample_rate = 44100
    bits_per_sample = 16


class _FakeAudio:
    def __init__(self) -> None:
        self.tags = {
            "title": ["Demo"],
            "artist": ["Unit"],
            "album": ["Test"],
            "albumartist": ["Various"],
            "composer": ["Someone"],
            "genre": ["Rock"],
            "date": ["2024-05-01"],
            "originaldate": ["1999"],
            "tracknumber": ["3/12"],
            "discnumber": ["1/2"],
            "compilation": ["1"],
        }
        self.info = _FakeInfo()


def test_read_song_maps_tags_and_info(monkeypatch, tmp_path: Path) -> None:
    audio = tmp_path / "track.flac"
    audio.write_bytes(b"fake")
    monkeypatch.setattr("songpath.core.scanner.MutagenFile", lambda _: _FakeAudio())

    song = read_song(audio)

    assert song.path == str(audio)
    assert song.title == "Demo"
    assert song.artist == "Unit"
    assert song.album == "Test"
    assert song.albumartist == "Various"
    assert song.composer == "Someone"
    assert song.performer == ""
    assert song.genre == "Rock"
    assert song.year == 2024
    assert song.originalyear == 1999
    assert song.track == 3
    assert song.disc == 1
    assert song.compilation is True
    assert song.length_nanosec == 200_000_000_000
    assert song.bitrate == 256
    assert song.samplerate == 44100
    assert song.bitdepth == 16


def test_read_song_mp4_style_values(monkeypatch, tmp_path: Path) -> None:
    class _Mp4Audio:
        tags = {"©nam": ["Title"], "trkn": [(7, 10)], "cpil": True}
        info = None

    audio = tmp_path / "track.m4a"
    audio.write_bytes(b"fake")
    monkeypatch.setattr("songpath.core.scanner.MutagenFile", lambda _: _Mp4Audio())

    song = read_song(audio)
    assert song.title == "Title"
    assert song.track == 7
    assert song.compilation is True
    assert song.year == -1


def test_read_song_survives_unreadable_file(monkeypatch, tmp_path: Path) -> None:
    audio = tmp_path / "broken.mp3"
    audio.write_bytes(b"")

    def _boom(_: str):
        raise ValueError("not audio")

    monkeypatch.setattr("songpath.core.scanner.MutagenFile", _boom)
    song = read_song(audio)
    assert song.path == str(audio)
    assert song.title == ""
    assert song.track == -1


def test_iter_songs_only_yields_audio(monkeypatch, tmp_path: Path) -> None:
    for name in ("b.mp3", "a.flac", "notes.txt", "sub/c.ogg"):
        p = tmp_path / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.touch()
    monkeypatch.setattr("songpath.core.scanner.MutagenFile", lambda _: None)

    names = [Path(s.path).name for s in iter_songs(tmp_path)]
    assert names == ["a.flac", "b.mp3", "c.ogg"]
