from pathlib import Path

from songpath.core.utils import complete_base_name, file_suffix, is_audio, transliterate


def test_suffix_helpers():
    assert file_suffix("a.tar.gz") == "gz"
    assert file_suffix("noext") == ""
    assert file_suffix(".hidden") == "hidden"
    assert complete_base_name("a.tar.gz") == "a.tar"
    assert complete_base_name(".hidden") == ""
    assert complete_base_name("noext") == "noext"


def test_is_audio():
    assert is_audio(Path("x/Song.FLAC"))
    assert not is_audio(Path("cover.jpg"))


def test_transliterate_keeps_segments():
    assert transliterate("Sigur Rós/Ágætis byrjun") == "Sigur Ros/Agaetis byrjun"
