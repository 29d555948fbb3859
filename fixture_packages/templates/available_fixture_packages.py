"""Read access to the fixture packages adopted by the last install run.

fixture-packages copies this module next to ``fixture_packages.py`` in the vendor
directory and replaces it whenever the bundled version changes, so it must not
import anything from fixture-packages itself.
"""

from __future__ import annotations

import os
import runpy
from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable

DATA_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "fixture_packages.py")

Record = Dict[str, Any]


@runtime_checkable
class PathRegistry(Protocol):
    """Registry accepting packages by their directory."""

    def add_from_path(self, path: str) -> Any:
        ...


@runtime_checkable
class InfoRegistry(Protocol):
    """Registry able to resolve package information from a directory."""

    def get_package_info_with_fallback(self, path: str) -> Any:
        ...


class AvailableFixturePackages:
    """Lists adopted fixture packages, optionally filtered by package type."""

    def __init__(self, data_file: Optional[str] = None) -> None:
        self.data_file = data_file if data_file is not None else DATA_FILE
        self._packages: Optional[Dict[str, Record]] = None

    def packages(self, types: Optional[Iterable[str]] = None) -> Dict[str, Record]:
        """Return name -> record, keeping only records whose type is in ``types``."""
        if self._packages is None:
            self._packages = self._load()
        allowed = set(types) if types else None
        if allowed is None:
            return dict(self._packages)
        return {
            name: record
            for name, record in self._packages.items()
            if record.get("type") in allowed
        }

    def package_names(self, types: Optional[Iterable[str]] = None) -> List[str]:
        return list(self.packages(types))

    def package_names_and_paths(self, types: Optional[Iterable[str]] = None) -> Dict[str, str]:
        return {
            name: str(record.get("path", ""))
            for name, record in self.packages(types).items()
        }

    def adopt_into(self, registry: object, types: Optional[Iterable[str]] = None) -> None:
        """Register the fixture packages with a downstream package registry.

        Raises RuntimeError when the registry supports neither ``add_from_path``
        nor ``get_package_info_with_fallback`` or a package cannot be resolved.
        """
        names_and_paths = self.package_names_and_paths(types)
        if not names_and_paths:
            return
        if isinstance(registry, PathRegistry):
            for path in names_and_paths.values():
                registry.add_from_path(path)
            return
        if isinstance(registry, InfoRegistry):
            for name, path in names_and_paths.items():
                if registry.get_package_info_with_fallback(path) is None:
                    raise RuntimeError(f'Failed to load package info for "{name}" in "{path}".')
            return
        raise RuntimeError(
            f"Adopting fixture packages not possible, {type(registry).__name__} provides"
            " neither add_from_path() nor get_package_info_with_fallback()."
        )

    def _load(self) -> Dict[str, Record]:
        if not self.data_file or not os.path.isfile(self.data_file):
            return {}
        packages = runpy.run_path(self.data_file).get("PACKAGES", {})
        return dict(packages) if isinstance(packages, dict) else {}
