"""Discovery of fixture packages below configured directory patterns."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Collection, Iterator, List, Optional, Sequence, Set, Tuple

from .config import PathConfig
from .logging import get_logger
from .manifest import ManifestError, load_package
from .models import PackageDescriptor
from .paths import normalize_path

logger = get_logger("repository")

_WILDCARD_CHARS = ("*", "?", "[")


def _is_wildcard(segment: str) -> bool:
    return any(char in segment for char in _WILDCARD_CHARS)


def expand_pattern(pattern: str) -> List[Path]:
    """Return the existing directories matched by ``pattern``.

    Wildcard segments match exactly one directory level and skip hidden
    directories. Results are depth-first with siblings sorted by name, so the
    same tree always yields the same order.
    """
    normalized = normalize_path(pattern)
    if normalized == "":
        return []

    segments = normalized.split("/")
    first_wildcard = next(
        (index for index, segment in enumerate(segments) if _is_wildcard(segment)),
        len(segments),
    )
    literal = "/".join(segments[:first_wildcard])
    if literal == "" and normalized.startswith("/"):
        literal = "/"
    start = Path(literal) if literal else Path.cwd()
    if not start.is_dir():
        return []
    return list(_walk(start, segments[first_wildcard:]))


def _walk(directory: Path, segments: Sequence[str]) -> Iterator[Path]:
    if not segments:
        yield directory
        return

    head, rest = segments[0], segments[1:]
    if not _is_wildcard(head):
        candidate = directory / head
        if candidate.is_dir():
            yield from _walk(candidate, rest)
        return

    try:
        with os.scandir(directory) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError as exc:
        logger.warning("Unable to list %s: %s", directory, exc)
        return

    for entry in entries:
        if entry.name.startswith("."):
            continue
        if not entry.is_dir():
            continue
        if fnmatchcase(entry.name, head):
            yield from _walk(Path(entry.path), rest)


class FixtureRepository:
    """Packages living in the directories matched by one configured pattern."""

    def __init__(self, pattern: str, modes: Sequence[str], *, base_dir: str) -> None:
        self.pattern = pattern
        self.modes: Tuple[str, ...] = tuple(modes)
        self.base_dir = normalize_path(base_dir)

    def packages(self, seen: Optional[Set[str]] = None) -> List[PackageDescriptor]:
        """Load every package below the pattern.

        Directories whose real path is already in ``seen`` are skipped; newly
        visited ones are added to it.
        """
        seen = seen if seen is not None else set()
        packages: List[PackageDescriptor] = []
        for directory in expand_pattern(self.pattern):
            real_path = os.path.realpath(directory)
            if real_path in seen:
                logger.debug("Skipping %s, already registered by another pattern", directory)
                continue
            seen.add(real_path)

            try:
                package = load_package(directory, location=self._location_for(directory))
            except ManifestError as exc:
                logger.warning("Skipping fixture candidate %s: %s", directory, exc)
                continue
            if package is None:
                logger.debug("No manifest in %s, not a fixture package", directory)
                continue

            package.adopt_modes = self.modes
            packages.append(package)
        return packages

    def _location_for(self, directory: Path) -> str:
        path = normalize_path(directory.as_posix())
        base = self.base_dir.rstrip("/")
        if path == self.base_dir:
            return "."
        if path.startswith(f"{base}/"):
            return path[len(base) + 1:]
        return path


def discover_fixture_packages(
    config: PathConfig,
    allowed_types: Collection[str] | None = None,
) -> List[PackageDescriptor]:
    """Collect fixture packages for all configured patterns in configured order."""
    seen: Set[str] = set()
    packages: List[PackageDescriptor] = []
    for pattern, modes in config.paths().items():
        repository = FixtureRepository(pattern, modes, base_dir=config.base_dir)
        found = repository.packages(seen)
        logger.debug("Pattern %s matched %d fixture packages", pattern, len(found))
        for package in found:
            if allowed_types and package.type not in allowed_types:
                continue
            packages.append(package)
    return packages


__all__ = ["FixtureRepository", "discover_fixture_packages", "expand_pattern"]
