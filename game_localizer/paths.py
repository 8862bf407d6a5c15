"""
Local filenames for downloaded resources.
"""

import os
import posixpath
import re
from urllib.parse import unquote, urlsplit


# Checked in order, first substring match wins
CONTENT_TYPE_EXTENSIONS = [
    ("text/html", ".html"),
    ("text/css", ".css"),
    ("text/javascript", ".js"),
    ("application/javascript", ".js"),
    ("application/json", ".json"),
    ("image/png", ".png"),
    ("image/jpeg", ".jpg"),
    ("image/gif", ".gif"),
    ("image/svg+xml", ".svg"),
    ("image/webp", ".webp"),
    ("audio/mpeg", ".mp3"),
    ("audio/ogg", ".ogg"),
    ("audio/wav", ".wav"),
    ("font/woff", ".woff"),
    ("font/woff2", ".woff2"),
    ("font/ttf", ".ttf"),
    ("application/wasm", ".wasm"),
]

UNSAFE_FILENAME_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(name: str) -> str:
    return UNSAFE_FILENAME_CHARS_RE.sub("_", name)


def extension_for(url: str, content_type: str) -> str:
    """Extension of the URL path, else one guessed from the content type ('' if unknown)."""
    ext = posixpath.splitext(urlsplit(url).path)[1]
    if ext:
        return ext
    content_type = content_type or ""
    for ctype, extension in CONTENT_TYPE_EXTENSIONS:
        if ctype in content_type:
            return extension
    return ""


def filename_for(url: str, content_type: str) -> str:
    """
    Derive the on-disk filename for a downloaded URL.

    - last path segment (percent-decoded), or 'index' when the path ends in '/'
    - extension inferred from content type when the segment has none
    - characters outside [A-Za-z0-9._-] replaced by '_'
    """
    name = unquote(posixpath.basename(urlsplit(url).path)) or "index"
    if not os.path.splitext(name)[1]:
        name += extension_for(url, content_type)
    return sanitize_filename(name)


def dedupe_path(rel_path: str, taken: set) -> str:
    """Append _2, _3, ... before the extension until rel_path is not in taken."""
    if rel_path not in taken:
        return rel_path
    stem, ext = posixpath.splitext(rel_path)
    n = 2
    while f"{stem}_{n}{ext}" in taken:
        n += 1
    return f"{stem}_{n}{ext}"


def relative_to(rel_path: str, from_file: str) -> str:
    """Path of rel_path as referenced from a file at from_file (both relative to the game dir)."""
    return posixpath.relpath(rel_path, posixpath.dirname(from_file) or ".")
