from __future__ import annotations

import csv
from pathlib import Path

import pytest

from songpath.core.config import FormatOptions
from songpath.core.organizer import (
    PlanEntry,
    RenderResult,
    export_csv,
    get_filename_for_song,
    plan_songs,
    simulate,
)
from songpath.core.song import Song


def _song(**fields) -> Song:
    fields.setdefault("path", "/music/in/song.mp3")
    return Song(**fields)


def test_renders_full_path():
    song = _song(path="/in/x.flac", artist="Queen", album="Jazz", track=3, title="Mustapha")
    result = get_filename_for_song("%artist/%album/%track - %title", song)
    assert result == RenderResult("Queen/Jazz/03_-_Mustapha.flac", True)


def test_explicit_extension_wins():
    song = _song(artist="A", title="T")
    result = get_filename_for_song("%artist/%title", song, extension="ogg")
    assert result.path == "A/T.ogg"


def test_optional_section_example():
    song = _song(artist="A", title="T")
    result = get_filename_for_song("%artist - {%composer - }%title", song)
    assert result.path == "A_-_T.mp3"


def test_dots_in_values():
    song = _song(path="/in/a.mp3", title="Mr. Brightside")
    plain = get_filename_for_song("%title.%extension", song, FormatOptions(replace_spaces=False))
    assert plain.path == "Mr. Brightside.mp3"
    cleaned = get_filename_for_song(
        "%title.%extension", song, FormatOptions(remove_problematic=True, replace_spaces=False)
    )
    assert cleaned.path == "Mr Brightside.mp3"


def test_empty_render_falls_back_to_file_name():
    song = _song(path="/in/track01.ogg")
    result = get_filename_for_song("{%composer}", song)
    assert result == RenderResult("track01.ogg", False)


def test_fallback_keeps_directory():
    song = _song(path="/x/song.mp3", artist="A")
    assert get_filename_for_song("%artist/{%composer}", song).path == "A/song.mp3"
    assert get_filename_for_song("%artist/.%extension", song).path == "A/song.mp3"


@pytest.mark.parametrize(
    "template, song",
    [
        ("{%composer}", Song()),
        ("/%title", Song(path="/x/a.mp3", title="T")),
        ("%artist/%title", Song(path="/x/a.mp3", title="T")),
        ("%artist/{%composer}", Song(artist="A")),
    ],
)
def test_rejected_paths(template, song):
    assert get_filename_for_song(template, song) is None


def test_backslashes_are_separators():
    song = _song(artist="A", title="T")
    assert get_filename_for_song("%artist\\%title", song).path == "A/T.mp3"


def test_leading_dot_segments_are_fixed():
    song = _song(artist=".hidden", title="T")
    assert get_filename_for_song("%artist/%title", song).path == "hidden/T.mp3"


def test_fat_target():
    song = _song(path="/x/a.mp3", artist="Motörhead", title='Ace: of "Spades"')
    options = FormatOptions(remove_non_fat=True, replace_spaces=False)
    assert get_filename_for_song("%artist/%title", song, options).path == "Motorhead/Ace of Spades.mp3"


@pytest.mark.parametrize(
    "title", ["Tab\there", "Many    spaces", " padded ", "line\nbreak", "Mr. Brown", "Vol. 2 . Live"]
)
def test_no_whitespace_with_replace_spaces(title):
    song = _song(artist="Some Artist", title=title)
    result = get_filename_for_song("%artist/{%track - }%title", song)
    assert not any(c.isspace() for c in result.path)


def test_plan_disambiguates_collisions_and_skips_rejected():
    songs = [
        _song(path="/in/1.mp3", album="A"),
        _song(path="/in/2.mp3", album="A"),
        _song(path="/in/3.mp3", album="A"),
        _song(path="/in/4.mp3"),
    ]
    plan = plan_songs(songs, "%album/%album")
    assert plan == [
        PlanEntry("/in/1.mp3", "A/A.mp3", False),
        PlanEntry("/in/2.mp3", "A/A_(1).mp3", False),
        PlanEntry("/in/3.mp3", "A/A_(2).mp3", False),
    ]


def test_plan_collision_suffix_keeps_spaces_when_allowed():
    songs = [_song(path="/in/1.mp3", album="A"), _song(path="/in/2.mp3", album="A")]
    plan = plan_songs(songs, "%album", FormatOptions(replace_spaces=False))
    assert [e.target for e in plan] == ["A.mp3", "A (1).mp3"]


def test_simulate_and_export(monkeypatch, tmp_path: Path):
    songs = [
        _song(path="/in/1.flac", artist="A", title="One", track=1),
        _song(path="/in/2.flac", artist="A", title="Two", track=2),
    ]
    monkeypatch.setattr("songpath.core.organizer.iter_songs", lambda root: iter(songs))
    dest = tmp_path / "out"
    plan = simulate(tmp_path, dest, "%artist/%track %title")
    assert [e.target for e in plan] == [
        str(dest.resolve() / "A" / "01_One.flac"),
        str(dest.resolve() / "A" / "02_Two.flac"),
    ]

    out = export_csv(plan, tmp_path / "logs" / "plan.csv")
    with out.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["source", "target", "unique"]
    assert rows[1] == ["/in/1.flac", plan[0].target, "1"]
    assert len(rows) == 3


@pytest.mark.parametrize("artist", ["..", "...", " . . "])
def test_dot_only_segments_are_rejected(artist):
    song = _song(artist=artist, album="Album")
    assert get_filename_for_song("%artist/%album", song) is None


def test_leading_dots_never_survive():
    song = _song(artist="..x", album=". Album")
    result = get_filename_for_song("%artist/%album", song)
    assert result.path == "x/Album.mp3"
    assert not any(part.startswith(".") for part in result.path.split("/"))


def test_dotted_title_keeps_source_extension():
    song = _song(path="/in/a.mp3", artist="A", title="Mr. Brown")
    assert get_filename_for_song("%artist/%title", song).path == "A/Mr._Brown.mp3"
    assert get_filename_for_song("%artist/%title", song, extension="ogg").path == "A/Mr._Brown.ogg"
