import re
from pathlib import Path
from typing import Any, Optional, Tuple, Union

VIDEO_EXTENSIONS = {".mkv", ".mp4", ".avi", ".mov", ".wmv", ".flv", ".webm", ".mpg", ".mpeg", ".m4v", ".ts", ".m2ts", ".rmvb", ".ogm", ".vob", ".divx", ".iso"}
SUBTITLE_EXTENSIONS = {".srt", ".sub", ".ass", ".ssa", ".vtt", ".idx", ".sup"}
ASSOCIATED_EXTENSIONS = {
    ".nfo", ".txt", ".jpg", ".jpeg", ".png", ".sfv", ".md5", ".xml", ".json", ".log",
    ".mka", ".mp3", ".flac", ".aac", ".ac3", ".dts",
    ".rar", ".zip", ".7z", ".gz", ".par2", ".torrent", ".part",
}
KNOWN_EXTENSIONS = VIDEO_EXTENSIONS | SUBTITLE_EXTENSIONS | ASSOCIATED_EXTENSIONS

# Only known suffixes count, so release tokens (".720p", ".HEVC", ".x265", ".DDP5.1")
# and dotted titles ("Mr. Robot S01E01") keep their text.
EXTENSION_PATTERN = re.compile(r'\.[A-Za-z0-9]{1,8}$')
LEADING_INT_PATTERN = re.compile(r'^\s*\+?(\d+)')

PathLike = Union[str, Path]


def split_extension(name: str) -> Tuple[str, str]:
    match = EXTENSION_PATTERN.search(name)
    if not match or match.start() == 0 or match.group(0).lower() not in KNOWN_EXTENSIONS:
        return name, ""
    return name[:match.start()], match.group(0)


def file_stem(path: PathLike) -> str:
    """Base name without directory and extension."""
    return split_extension(Path(path).name)[0]


def file_extension(path: PathLike) -> str:
    return split_extension(Path(path).name)[1]


def strip_extension(path: PathLike) -> str:
    """Full path text with only the extension removed."""
    path_str = str(path)
    _, ext = split_extension(Path(path_str).name)
    return path_str[:len(path_str) - len(ext)] if ext else path_str


def parse_positive_number(value: Any) -> Optional[int]:
    """Integer from a JSON field the way a lenient parser reads it ("03", 3, "7 (of 12)", 4.0)."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        match = LEADING_INT_PATTERN.match(value)
        return int(match.group(1)) if match else None
    return None


def sanitize_os_chars(name: str) -> str:
    sanitized = re.sub(r'[<>:"/\\|?*]', '_', name)
    # Prevent names ending in '.' or ' ' which are problematic on Windows
    sanitized = sanitized.rstrip('. ')
    sanitized = sanitized.strip('_ ')
    return sanitized if sanitized else "_invalid_char_removal_"
