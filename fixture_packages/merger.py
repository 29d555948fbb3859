"""Merging of fixture package autoload declarations into the root ``autoload-dev``."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Sequence, Tuple

from .logging import VERBOSE, get_logger
from .models import (
    ADOPT_MODES,
    LIST_SECTIONS,
    MAPPING_SECTIONS,
    PackageDescriptor,
    RootPackage,
)
from .paths import normalize_path

logger = get_logger("merger")


class AutoloadMerger:
    """Adopts package autoload sections into the root package development autoload.

    Declared paths are prefixed with the package location, so the manifest entry
    ``Classes`` of a package in ``packages/fake`` ends up as
    ``packages/fake/Classes`` in the root package.
    """

    def merge_to_dev_autoload(
        self,
        root: RootPackage,
        package: PackageDescriptor,
        modes: Sequence[str] | None = None,
    ) -> None:
        """Merge the sections of ``package`` selected by ``modes`` into ``root``.

        ``modes`` defaults to the adoption modes the repository tagged the package
        with. Sections are processed psr-0, psr-4, files, classmap; within each
        section ``autoload`` contributions come before ``autoload-dev`` ones.
        """
        selected = modes if modes is not None else package.adopt_modes
        active = [mode for mode in ADOPT_MODES if mode in selected]
        if not active:
            logger.debug("Package %s has no adoption mode, nothing to merge", package.name)
            return

        for section in MAPPING_SECTIONS:
            for mode in active:
                declared = package.autoload_for(mode).get(section)
                for prefix, path in _iter_mapping_entries(declared):
                    self._merge_mapping_entry(root, package, section, prefix, path)

        for section in LIST_SECTIONS:
            for mode in active:
                declared = package.autoload_for(mode).get(section)
                if not isinstance(declared, list) or not declared:
                    logger.debug(
                        'Package "%s" has no "%s" %s section, nothing to merge.',
                        package.name,
                        section,
                        mode,
                    )
                    continue
                for path in declared:
                    if isinstance(path, str):
                        self._merge_list_entry(root, package, section, path)

    def _merge_mapping_entry(
        self,
        root: RootPackage,
        package: PackageDescriptor,
        section: str,
        prefix: str,
        path: str,
    ) -> None:
        rewritten = rewrite_package_path(package, path)
        mapping = root.dev_autoload.get(section)
        if not isinstance(mapping, dict):
            mapping = {}
            root.dev_autoload[section] = mapping

        current = mapping.get(prefix)
        if current is None:
            # a single location stays a string, only collisions become lists
            mapping[prefix] = rewritten
        elif isinstance(current, str):
            if current == rewritten:
                return
            mapping[prefix] = [current, rewritten]
        elif isinstance(current, list):
            if rewritten in current:
                return
            current.append(rewritten)
        else:
            mapping[prefix] = rewritten
        _log_adopted(package.name, section, prefix, rewritten)

    def _merge_list_entry(
        self,
        root: RootPackage,
        package: PackageDescriptor,
        section: str,
        path: str,
    ) -> None:
        rewritten = rewrite_package_path(package, path)
        entries = root.dev_autoload.get(section)
        if not isinstance(entries, list):
            entries = []
            root.dev_autoload[section] = entries
        if rewritten in entries:
            logger.debug(
                'Package "%s" %s path "%s" already exists in root package as "%s". Skipped.',
                package.name,
                section,
                path,
                rewritten,
            )
            return
        entries.append(rewritten)
        _log_adopted(package.name, section, "", rewritten)


def rewrite_package_path(package: PackageDescriptor, path: str) -> str:
    """Anchor a package-relative autoload path at the package location."""
    return f"{package.location.rstrip('/')}/{normalize_path(path)}"


def _iter_mapping_entries(declared: Any) -> Iterator[Tuple[str, str]]:
    if not isinstance(declared, dict):
        return
    for prefix, paths in declared.items():
        if not isinstance(prefix, str):
            continue
        for path in _as_path_list(paths):
            yield prefix, path


def _as_path_list(paths: Any) -> Iterable[str]:
    if isinstance(paths, str):
        return [paths]
    if isinstance(paths, list):
        return [path for path in paths if isinstance(path, str)]
    return []


def _log_adopted(package_name: str, section: str, prefix: str, path: str) -> None:
    logger.log(VERBOSE, ">> [%s][%s][%s] = %s adopted.", package_name, section, prefix, path)


__all__ = ["AutoloadMerger", "rewrite_package_path"]
