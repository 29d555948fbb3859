"""Fixture path configuration read from the root manifest ``extra`` block."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Mapping, Sequence, Tuple

from .logging import VERBOSE, get_logger
from .models import ADOPT_MODES, AUTOLOAD
from .paths import normalize_path

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .host import Host

CONFIG_KEY = "fixture-packages"
PATHS_KEY = "paths"

logger = get_logger("config")


class PathConfig:
    """Configured fixture directory patterns and the project base directory."""

    def __init__(
        self,
        base_dir: str,
        paths: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        self._base_dir = normalize_path(base_dir)
        self._paths: Dict[str, Tuple[str, ...]] = {}
        if paths:
            self.merge(paths)

    @property
    def base_dir(self) -> str:
        return self._base_dir

    def merge(self, paths: Mapping[str, Sequence[str]]) -> "PathConfig":
        """Add patterns, ignoring empty patterns and patterns without modes."""
        for pattern, modes in paths.items():
            if not isinstance(pattern, str) or not pattern or not modes:
                continue
            self._paths[pattern] = tuple(modes)
        return self

    def resolve(self, path: str) -> str:
        """Turn ``path`` into an absolute path without touching the filesystem.

        Target directories might not exist yet, so no realpath lookup happens.
        """
        normalized = normalize_path(path)
        if normalized == "":
            return self._base_dir
        if normalized.startswith("/") or normalized[1:2] == ":":
            return normalized
        return f"{self._base_dir}/{normalized}"

    def paths(self, *, relative: bool = False) -> Dict[str, Tuple[str, ...]]:
        """Return pattern -> adoption modes, patterns as configured or resolved."""
        if relative:
            return dict(self._paths)
        resolved: Dict[str, Tuple[str, ...]] = {}
        for pattern, modes in self._paths.items():
            resolved.setdefault(self.resolve(pattern), modes)
        return resolved

    @classmethod
    def from_extra(cls, base_dir: str, extra: Mapping[str, Any]) -> "PathConfig":
        """Build a config from an unvalidated root ``extra`` block."""
        filtered = filter_extra_config(extra)
        block = filtered.get(CONFIG_KEY)
        paths = block.get(PATHS_KEY) if isinstance(block, dict) else None
        return cls(base_dir, paths if isinstance(paths, dict) else None)

    @classmethod
    def load(cls, host: "Host") -> "PathConfig":
        return cls.from_extra(host.base_dir, host.root_package.extra)


def filter_extra_config(extra: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate the plugin block of the root ``extra`` configuration.

    Unrelated keys pass through unchanged. A ``paths`` value of the wrong type is
    dropped with a warning while sibling settings are kept. Path entries without
    a usable adoption mode are dropped. The input mapping is never mutated.
    """
    filtered = copy.deepcopy(dict(extra))
    block = filtered.get(CONFIG_KEY)
    if not isinstance(block, dict) or PATHS_KEY not in block:
        return filtered

    raw_paths = block[PATHS_KEY]
    if not isinstance(raw_paths, (dict, list)):
        logger.warning(
            'extra->%s/%s must be a mapping, "%s" given.',
            CONFIG_KEY,
            PATHS_KEY,
            _type_name(raw_paths),
        )
        del block[PATHS_KEY]
        return filtered

    if not raw_paths:
        return filtered

    valid: Dict[str, List[str]] = {}
    for pattern, selection in _iter_path_entries(raw_paths):
        if not isinstance(pattern, str) or pattern == "":
            continue
        modes = _filter_modes(selection)
        if not modes:
            logger.log(
                VERBOSE,
                'No adopt mode selected for "%s", none of its autoload sections will be adopted.',
                pattern,
            )
            continue
        valid[pattern] = modes
    block[PATHS_KEY] = valid
    return filtered


def _iter_path_entries(raw_paths: Any) -> Iterator[Tuple[Any, Any]]:
    if isinstance(raw_paths, dict):
        yield from raw_paths.items()
        return
    # list form: every item is a pattern adopting the regular autoload section
    for entry in raw_paths:
        yield entry, [AUTOLOAD]


def _filter_modes(selection: Any) -> List[str]:
    if isinstance(selection, str):
        mode = selection.strip().lower()
        return [mode] if mode in ADOPT_MODES else [AUTOLOAD]
    if not isinstance(selection, list):
        selection = [AUTOLOAD]

    modes: List[str] = []
    for value in selection:
        if not isinstance(value, str):
            continue
        mode = value.strip().lower()
        if mode in ADOPT_MODES and mode not in modes:
            modes.append(mode)
    return modes


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    return type(value).__name__


__all__ = ["CONFIG_KEY", "PATHS_KEY", "PathConfig", "filter_extra_config"]
