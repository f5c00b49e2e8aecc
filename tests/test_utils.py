# tests/test_utils.py
import pytest
from pathlib import Path

from llm_renamer import utils


# --- Test split_extension ---
@pytest.mark.parametrize("name, expected", [
    ("Show S01E01.mkv", ("Show S01E01", ".mkv")),
    ("Show S01E01", ("Show S01E01", "")),
    ("Mr. Robot S01E01", ("Mr. Robot S01E01", "")),
    ("Temptation.Island.2019.S01E04.1080p.WEB-DL.DDP5.1.x264-", ("Temptation.Island.2019.S01E04.1080p.WEB-DL.DDP5.1.x264-", "")),
    ("Show.S01E01.DDP5.1", ("Show.S01E01.DDP5.1", "")),
    ("archive.tar.gz", ("archive.tar", ".gz")),
    (".DS_Store", (".DS_Store", "")),
    ("Show S01E01.M2TS", ("Show S01E01", ".M2TS")),
    ("Show.S01E03.720p", ("Show.S01E03.720p", "")),
    ("Show.S01E03.WEB.HEVC", ("Show.S01E03.WEB.HEVC", "")),
    ("Show.S01E03.x265", ("Show.S01E03.x265", "")),
    ("Show.S01E03.720p.x265.mkv", ("Show.S01E03.720p.x265", ".mkv")),
    ("Show S01E03.en.srt", ("Show S01E03.en", ".srt")),
])
def test_split_extension(name, expected):
    assert utils.split_extension(name) == expected


def test_file_stem_and_extension():
    path = "/tv/Family Guy/Season 03/Family Guy S03E05.mkv"
    assert utils.file_stem(path) == "Family Guy S03E05"
    assert utils.file_extension(Path(path)) == ".mkv"


@pytest.mark.parametrize("path, expected", [
    ("/tv/Show/Show S01E01.mkv", "/tv/Show/Show S01E01"),
    ("/tv/Mr. Robot/Mr. Robot S01E01", "/tv/Mr. Robot/Mr. Robot S01E01"),
    (Path("relative/Show.S01E01.mp4"), str(Path("relative/Show.S01E01"))),
])
def test_strip_extension(path, expected):
    assert utils.strip_extension(path) == expected


# --- Test parse_positive_number ---
@pytest.mark.parametrize("value, expected", [
    (3, 3), ("03", 3), (" 12 ", 12), ("+7", 7), ("7 (of 12)", 7), (4.0, 4),
    (4.5, None), ("twelve", None), (None, None), (True, None), ([3], None), ("-3", None),
])
def test_parse_positive_number(value, expected):
    assert utils.parse_positive_number(value) == expected


# --- Test sanitize_os_chars ---
@pytest.mark.parametrize("name, expected", [
    ("Family Guy", "Family Guy"),
    ("Law & Order: SVU", "Law & Order_ SVU"),
    ("S.H.I.E.L.D.", "S.H.I.E.L.D"),
    ("What/If?", "What_If"),
    ("???", "_invalid_char_removal_"),
])
def test_sanitize_os_chars(name, expected):
    assert utils.sanitize_os_chars(name) == expected
