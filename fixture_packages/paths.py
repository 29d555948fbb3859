"""Path and file helpers shared by the discovery, merge and export steps."""

from __future__ import annotations

import hashlib
import posixpath
import re
from pathlib import Path

_PREFIX_RE = re.compile(r"^([0-9a-z]{2,}:(?://(?:[a-z]:)?)?|[a-z]:)", re.IGNORECASE)
_DRIVE_RE = re.compile(r"^[a-z]:$", re.IGNORECASE)
_DRIVE_ROOT_RE = re.compile(r"^[a-z]:/?$", re.IGNORECASE)


def normalize_path(path: str) -> str:
    """Return ``path`` with forward slashes, ``.``/``..`` resolved and no trailing slash.

    The empty string stays empty, any all-slash string collapses to ``/`` and a
    drive letter prefix is kept (``C:\\`` normalizes to ``C:``). The filesystem is
    never consulted.
    """
    if path == "":
        return ""

    path = path.replace("\\", "/")
    prefix = ""
    absolute = ""

    # UNC paths, e.g. //server/share
    if path.startswith("//") and len(path) > 2:
        absolute = "//"
        path = path[2:]

    match = _PREFIX_RE.match(path)
    if match:
        prefix = match.group(1)
        path = path[len(prefix):]

    if path.startswith("/"):
        absolute = "/"
        path = path[1:]

    parts: list[str] = []
    up = False
    for chunk in path.split("/"):
        if chunk == ".." and (absolute or up):
            if parts:
                parts.pop()
            up = not (not parts or parts[-1] == "..")
        elif chunk not in (".", ""):
            parts.append(chunk)
            up = chunk != ".."

    if _DRIVE_RE.match(prefix):
        prefix = prefix.upper()

    normalized = prefix + absolute + "/".join(parts)
    if normalized.endswith("/") and normalized != "/":
        normalized = normalized.rstrip("/") or "/"
    return normalized


def is_absolute_path(path: str) -> bool:
    """Return True for unix roots, drive-letter paths and UNC paths."""
    return path.startswith("/") or path[1:2] == ":" or path.startswith("\\\\")


def find_shortest_path(
    from_path: str,
    to_path: str,
    *,
    directories: bool = False,
    prefer_relative: bool = False,
) -> str:
    """Return the shortest path from ``from_path`` to ``to_path``.

    Both paths must be absolute. With ``directories`` the source is treated as a
    directory rather than a file. Without ``prefer_relative`` two top level
    directories only sharing ``/`` are addressed absolutely.
    """
    if not is_absolute_path(from_path) or not is_absolute_path(to_path):
        raise ValueError(
            f"Both paths must be absolute, got {from_path!r} and {to_path!r}"
        )

    from_path = normalize_path(from_path)
    to_path = normalize_path(to_path)

    if directories:
        from_path = from_path.rstrip("/") + "/dummy_file"

    if posixpath.dirname(from_path) == to_path:
        return "./"

    common_path = to_path
    while (
        not (from_path + "/").startswith(common_path + "/")
        and common_path != "/"
        and not _DRIVE_ROOT_RE.match(common_path)
    ):
        common_path = posixpath.dirname(common_path)

    # no commonality at all
    if not from_path.startswith(common_path):
        return to_path

    common_path = common_path.rstrip("/") + "/"
    source_depth = from_path[len(common_path):].count("/")

    if not prefer_relative and common_path == "/" and source_depth > 1:
        return to_path

    result = "../" * source_depth + to_path[len(common_path):]
    return result or "./"


def hash_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


def put_contents_if_modified(path: Path, content: str) -> bool:
    """Write ``content`` to ``path`` unless the file already holds it.

    Returns True when the file was (re)written.
    """
    if path.is_file() and path.read_text(encoding="utf-8") == content:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return True


__all__ = [
    "find_shortest_path",
    "hash_file",
    "is_absolute_path",
    "normalize_path",
    "put_contents_if_modified",
]
