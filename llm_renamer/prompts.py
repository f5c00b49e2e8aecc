# llm_renamer/prompts.py
#
# System prompts and few-shot sets for every request the app sends.

import json

from .models import FewShotExample

FAMILY_GUY_S03E05 = '/Volumes/Movies/series/Family Guy/Season 03/Family Guy - S03E05 - And The Wiener Is.mkv'
ANIME_BD_RIP = '/Volumes/Anime/[Judas] Vinland Saga (Season 2) [BD 1080p][HEVC x265 10bit]/[Judas] Vinland Saga - S02E07.mkv'
ANIME_NESTED = '/Volumes/Anime/[SubsPlease] Frieren (01-28) (1080p) [Batch]/Season 1/[SubsPlease] Sousou no Frieren - 12 (1080p) [C2D27A28].mkv'
ANIME_NCED = '/Volumes/Anime/[Moozzi2] Mushishi [BD 1080p]/Extras/[Moozzi2] Mushishi - NCED 01 (BD 1920x1080 x.264 Flac).mkv'
TEMPTATION_RELEASE = '/Volumes/Shared/todo/Temptation Island/Season 01/Temptation.Island.2019.S01E04.1080p.PCOK.WEB-DL.DDP5.1.x264-WhiteHat.mkv'
KAOS_RELEASE = '/Volumes/Movies/series/KAOS, 2160p NF WEB-DL DD+ 5.1 Atmos H.265-NTb/Season 01/KAOS, 2160p NF WEB-DL DD+ 5.1 Atmos H.265-NTb S01E01.mkv'


EPISODE_SYSTEM = (
    "It is your job to extract the episode number from file paths I give you. "
    "You will be given a file path and you must extract the episode number from the file path or name. "
    "Please remember that sometimes the episode numbers can be in weird formats, for example '- 12' in anime releases "
    "or 'E07' after a season marker. Never return the season number, a year, a resolution or a checksum. "
    "Respond with a JSON object: { \"episode\": EpisodeNumber }. Make sure that the field is a number."
)

EPISODE_EXAMPLES = (
    FewShotExample.of(FAMILY_GUY_S03E05, {"episode": 5}),
    FewShotExample.of(ANIME_BD_RIP, {"episode": 7}),
    FewShotExample.of(ANIME_NESTED, {"episode": 12}),
    FewShotExample.of(TEMPTATION_RELEASE, {"episode": 4}),
)

SERIES_SYSTEM = (
    "It is your job to extract the series name from file paths I give you. "
    "You will be given a file path and you must extract the full series name from the file path or name. "
    "Please remember that sometimes the series names can be in weird formats, separated by dots or underscores. "
    "Do not include the year, the release group, the resolution, the source, codecs or any other quality annotation. "
    "Respond with a JSON object: { \"series\": \"Series Name\" }."
)

SERIES_EXAMPLES = (
    FewShotExample.of(FAMILY_GUY_S03E05, {"series": "Family Guy"}),
    FewShotExample.of(TEMPTATION_RELEASE, {"series": "Temptation Island"}),
    FewShotExample.of(KAOS_RELEASE, {"series": "KAOS"}),
    FewShotExample.of(ANIME_BD_RIP, {"series": "Vinland Saga"}),
)

SEASON_SYSTEM = (
    "It is your job to extract the season number from file paths I give you. "
    "You will be given a file path and you must extract the season number from the file path or name. "
    "Please remember that sometimes the season numbers can be in weird formats, for example 'S02', 'Season 2' "
    "or only in a parent folder name. If no season is given at all, the season is 1. "
    "Respond with a JSON object: { \"season\": SeasonNumber }. Make sure that the field is a number."
)

SEASON_EXAMPLES = (
    FewShotExample.of(FAMILY_GUY_S03E05, {"season": 3}),
    FewShotExample.of(ANIME_BD_RIP, {"season": 2}),
    FewShotExample.of(ANIME_NESTED, {"season": 1}),
    FewShotExample.of(TEMPTATION_RELEASE, {"season": 1}),
)

CLASSIFY_SYSTEM = """It is your job to classify file paths I give you.
You have to give me your response in the JSON Format.
You will be given a file path and you must classify it as a { "classification": "Movie" }, an { "classification": "Episode" }, or { "classification": "Unrelated" }.
If the file ending is the file ending of a video file it is most likely a movie or episode. If it doesn't contain a season and episode number, it is most likely a movie.
Openings, endings, credits, trailers, samples and other extras (for example NCOP or NCED) are Unrelated, even if they are numbered.
Subtitles, images, text files, metadata and system files are Unrelated.
If you are unsure or the file is unrelated, classify it as 'Unrelated'.
Respond with a JSON object: { "classification": "Movie" | "Episode" | "Unrelated" }"""

CLASSIFY_EXAMPLES = (
    FewShotExample.of('/Volumes/Movies/series/Family Guy/The Movie - Stewie Griffin The Untold Story (Uncensored)/Family Guy - Stewie Griffin The Untold Story (Uncensored).mkv', {"classification": "Movie"}),
    FewShotExample.of(FAMILY_GUY_S03E05, {"classification": "Episode"}),
    FewShotExample.of('/Volumes/Movies/other/Some Random File.mkv', {"classification": "Unrelated"}),
    FewShotExample.of(KAOS_RELEASE, {"classification": "Episode"}),
    FewShotExample.of(ANIME_NESTED, {"classification": "Episode"}),
    FewShotExample.of(ANIME_NCED, {"classification": "Unrelated"}),
    FewShotExample.of('/Volumes/Movies/series/Temptation Island/Season 04/Temptation.Island.S04E03.nfo', {"classification": "Unrelated"}),
    FewShotExample.of('/Volumes/Movies/series/Temptation Island/Season 04/.DS_Store', {"classification": "Unrelated"}),
    FewShotExample.of('/Volumes/Movies/series/output.txt', {"classification": "Unrelated"}),
)

BATCH_FORMAT_SYSTEM = """It is your job to check whether the files, which represent episodes of a series, all match the following series format: 'Series Name SXXEYY' followed only by the file extension, where XX is the two digit season number and YY is the two digit episode number. Return a JSON object: { "matches": true | false }.
If even one file does not match the format, return false. If all files match the format, return true. Be aware that all files need to follow the series format exactly without even one character difference: no episode titles, no release groups, no quality tags and no missing zero padding. Files that are not episodes also make the answer false. If you are unsure, return false. Return a JSON object: { "matches": true | false }."""


def _paths(*paths: str) -> str:
    return json.dumps(list(paths))


BATCH_FORMAT_EXAMPLES = (
    FewShotExample.of(_paths(
        FAMILY_GUY_S03E05,
        '/Volumes/Movies/series/Family Guy/Season 03/Family Guy - S03E06 - Death Lives.mkv',
    ), {"matches": False}),
    FewShotExample.of(_paths(
        '/Volumes/Movies/series/Family Guy/Season 03/Family Guy S03E05',
        '/Volumes/Movies/series/Family Guy/Season 03/Family Guy S03E06',
    ), {"matches": True}),
    FewShotExample.of(_paths(*[
        f'/Volumes/Shared/todo/Temptation Island/Season 01/Temptation.Island.S01E{n:02d}.1080p.PCOK.WEB-DL.DDP5.1.x264-WhiteHat.mkv'
        for n in range(1, 6)
    ]), {"matches": False}),
    FewShotExample.of(_paths(*[
        f'/Volumes/Movies/series/Family Guy/Season 01/Family Guy S01E{n:02d}.mkv' for n in range(1, 8)
    ]), {"matches": True}),
    FewShotExample.of(_paths(
        '/Volumes/Movies/series/Family Guy/Season 01/Family Guy S01E01.mkv',
        '/Volumes/Movies/series/Family Guy/Season 01/Family Guy S01E02.mkv',
        '/Volumes/Movies/series/Family Guy/Season 01/Family Guy S01E03 - The Sheep in the bag.mkv',
        '/Volumes/Movies/series/Family Guy/Season 01/Family Guy S01E04.mkv',
    ), {"matches": False}),
    FewShotExample.of(_paths(
        '/Volumes/Movies/series/Invincible/Season 02/Invincible S02E05.mkv',
        '/Volumes/Movies/series/Invincible/Season 02/Invincible S02E06.mkv',
        '/Volumes/Movies/series/Invincible/Season 02/Invincible S02E08.mkv',
        '/Volumes/Movies/series/Invincible/Season 02/Invincible S02E7.mkv',
    ), {"matches": False}),
    FewShotExample.of(_paths(
        '/Volumes/Movies/series/.DS_Store',
        '/Volumes/Movies/series/output.txt',
        '/Volumes/Movies/series/rename.py',
    ), {"matches": False}),
)
