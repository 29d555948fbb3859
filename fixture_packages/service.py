"""Adoption of configured fixture packages into the root project."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Optional

from .config import PathConfig
from .host import Host
from .logging import get_logger
from .merger import AutoloadMerger
from .models import CLASSMAP, AdoptedPackageRecord, PackageDescriptor, RootPackage
from .paths import find_shortest_path, is_absolute_path
from .repository import discover_fixture_packages
from .state import DATA_DIR_NAME, LOADER_FILENAME, install_loader, write_state_file


class FixturePackagesService:
    """Adopts fixture package autoload namespaces and exports the adopted set."""

    def __init__(
        self,
        config: PathConfig | None = None,
        merger: AutoloadMerger | None = None,
    ) -> None:
        self._config_override = config
        self._config: Optional[PathConfig] = config
        self.merger = merger or AutoloadMerger()
        self.logger = get_logger("service")
        self.last_export: Dict[str, AdoptedPackageRecord] = {}

    def config_for(self, host: Host) -> PathConfig:
        """Return the path configuration, loading it from ``host`` only once."""
        if self._config is None:
            self._config = PathConfig.load(host)
        return self._config

    def reset(self) -> None:
        """Forget the loaded configuration so the next run reads it again."""
        self._config = self._config_override
        self.last_export = {}

    def adopt(self, host: Host, dev_mode: bool) -> Dict[str, AdoptedPackageRecord]:
        """Adopt all fixture packages into the root package ``autoload-dev``.

        Namespace paths are prefixed with the package location so a later
        autoload dump generates working class loaders. Nothing happens outside
        development mode.
        """
        if not dev_mode:
            self.logger.debug("Not in development mode, skipping fixture package adoption")
            return {}

        config = self.config_for(host)
        root = host.root_package
        required = set(root.required_names())

        adopted = []
        for package in discover_fixture_packages(config):
            if package.name in required:
                self.logger.warning(
                    '>> Skipping autoload adopt for package "%s" in "%s", already installed.',
                    package.name,
                    package.location,
                )
                continue
            self.merger.merge_to_dev_autoload(root, package)
            adopted.append(package)

        data_dir = f"{host.vendor_dir}/{DATA_DIR_NAME}"
        exported = self.export_packages(config, data_dir, adopted)
        self._write_state(host, Path(data_dir), exported)
        self.last_export = exported
        self.logger.info("Adopted %d fixture packages", len(exported))
        return exported

    def export_packages(
        self,
        config: PathConfig,
        data_dir: str,
        packages: Iterable[PackageDescriptor],
    ) -> Dict[str, AdoptedPackageRecord]:
        """Build name-keyed records with paths relative to ``data_dir``."""
        exported: Dict[str, AdoptedPackageRecord] = {}
        locations: Dict[str, str] = {}
        for package in packages:
            location = package.location.rstrip("/")
            target = location if is_absolute_path(location) else f"{config.base_dir}/{location}"
            if package.name in exported:
                # last writer wins, the earlier package stays merged but unexported
                self.logger.warning(
                    'Fixture package name "%s" is declared in "%s" and "%s", keeping the latter.',
                    package.name,
                    locations[package.name],
                    package.location,
                )
            locations[package.name] = package.location
            exported[package.name] = AdoptedPackageRecord(
                name=package.name,
                type=package.type,
                path=find_shortest_path(data_dir, target, directories=True, prefer_relative=True),
                extra=package.extra,
            )
        return exported

    def _write_state(
        self,
        host: Host,
        data_dir: Path,
        exported: Dict[str, AdoptedPackageRecord],
    ) -> None:
        write_state_file(data_dir, {name: record.to_dict() for name, record in exported.items()})
        if install_loader(data_dir) is None:
            return
        _register_loader(host.root_package, f"{host.vendor_dir_relative}/{DATA_DIR_NAME}/{LOADER_FILENAME}")


def _register_loader(root: RootPackage, class_file: str) -> None:
    classmap = root.dev_autoload.get(CLASSMAP)
    if not isinstance(classmap, list):
        classmap = []
        root.dev_autoload[CLASSMAP] = classmap
    if class_file not in classmap:
        classmap.append(class_file)


__all__ = ["FixturePackagesService"]
