"""Percent-encoding of location components and location string helpers.

Resource locations are plain URL strings:

- ``file:///abs/root/name`` for members of a directory root
- ``zip:file:///abs/archive.zip!/name`` for members of an archive root

Names are store-relative and may hold spaces or non-ASCII characters, so
they are percent-encoded before they become part of a location and decoded
when a location is turned back into a filesystem path or entry name.
"""

from __future__ import annotations

from pathlib import Path
import re
from typing import Final
from urllib.parse import quote, unquote

FILE_SCHEME: Final = "file"
ARCHIVE_SCHEME: Final = "zip"
ARCHIVE_SEPARATOR: Final = "!/"
DEFAULT_CHARSET: Final = "utf-8"

# Characters left as-is per component, on top of the unreserved set
# (ALPHA / DIGIT / "-" / "." / "_" / "~") that quote() never escapes.
_SUB_DELIMS: Final = "!$&'()*+,;="
_PATH_SEGMENT_SAFE: Final = _SUB_DELIMS + ":@"
_PATH_SAFE: Final = _PATH_SEGMENT_SAFE + "/"
# "!" is escaped in file paths so that "!/" only ever marks the archive separator.
_FILE_PATH_SAFE: Final = _PATH_SAFE.replace("!", "")

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def encode(text: str, charset: str = DEFAULT_CHARSET) -> str:
    """Encode every character outside the unreserved set."""
    return _encode(text, charset, safe="")


def encode_path(text: str, charset: str = DEFAULT_CHARSET) -> str:
    """Encode a path, keeping ``/`` and the characters legal in segments."""
    return _encode(text, charset, safe=_PATH_SAFE)


def encode_path_segment(text: str, charset: str = DEFAULT_CHARSET) -> str:
    """Encode a single path segment; ``/`` is escaped."""
    return _encode(text, charset, safe=_PATH_SEGMENT_SAFE)


def _encode(text: str, charset: str, *, safe: str) -> str:
    if not text:
        return text
    return quote(text, safe=safe, encoding=charset, errors="strict")


def decode(text: str, charset: str = DEFAULT_CHARSET) -> str:
    """Decode percent-escapes in ``text``.

    Raises:
        ValueError: If a ``%`` is not followed by two hex digits, or the
            escaped bytes are not valid in ``charset``.
    """
    if not text:
        return text
    bad = _BAD_ESCAPE.search(text)
    if bad is not None:
        raise ValueError(f'Invalid encoded sequence "{text[bad.start() :]}"')
    return unquote(text, encoding=charset, errors="strict")


# --- Location helpers ---


def file_location(
    path: str | Path, *, directory: bool = False, charset: str = DEFAULT_CHARSET
) -> str:
    """Return the ``file:`` location of ``path``.

    Directories get a trailing slash so that names can be appended to the
    location to address their members.
    """
    posix = Path(path).absolute().as_posix()
    if not posix.startswith("/"):
        # Windows drive paths
        posix = "/" + posix
    if directory and not posix.endswith("/"):
        posix += "/"
    return f"{FILE_SCHEME}://{_encode(posix, charset, safe=_FILE_PATH_SAFE)}"


def archive_location(
    archive: str | Path, name: str = "", *, charset: str = DEFAULT_CHARSET
) -> str:
    """Return the location of entry ``name`` inside ``archive``.

    An empty ``name`` gives the archive root location (ending in ``!/``).
    """
    base = file_location(archive, charset=charset)
    return f"{ARCHIVE_SCHEME}:{base}{ARCHIVE_SEPARATOR}{encode_path(name, charset)}"


def scheme_of(location: str) -> str:
    """Return the lowercased scheme of ``location`` (empty if none)."""
    head, sep, _ = location.partition(":")
    return head.lower() if sep else ""


def location_to_path(location: str, charset: str = DEFAULT_CHARSET) -> Path:
    """Turn a ``file:`` location back into a filesystem path.

    Raises:
        ValueError: If the location is not a ``file:`` location.
    """
    if scheme_of(location) != FILE_SCHEME:
        raise ValueError(f"Not a {FILE_SCHEME}: location: {location}")
    raw = location[len(FILE_SCHEME) + 1 :]
    if raw.startswith("//"):
        raw = raw[2:]
    decoded = decode(raw, charset)
    # "/C:/x" on Windows
    if len(decoded) > 2 and decoded[0] == "/" and decoded[2] == ":":
        decoded = decoded[1:]
    return Path(decoded)


def split_archive_location(
    location: str, charset: str = DEFAULT_CHARSET
) -> tuple[Path, str]:
    """Split an archive location into the archive path and the entry name.

    Raises:
        ValueError: If the location is not an archive location.
    """
    if scheme_of(location) != ARCHIVE_SCHEME:
        raise ValueError(f"Not a {ARCHIVE_SCHEME}: location: {location}")
    inner = location[len(ARCHIVE_SCHEME) + 1 :]
    index = inner.find(ARCHIVE_SEPARATOR)
    if index < 0:
        raise ValueError(f"Archive location has no '{ARCHIVE_SEPARATOR}': {location}")
    archive = location_to_path(inner[:index], charset)
    name = decode(inner[index + len(ARCHIVE_SEPARATOR) :], charset)
    return archive, name


def relative_name(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` in ``/`` separated form."""
    return path.relative_to(root).as_posix()
