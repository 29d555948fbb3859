"""Host package manager interface used by the adoption service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from .manifest import load_root_package, read_manifest_data
from .models import RootPackage
from .paths import is_absolute_path, normalize_path

DEFAULT_VENDOR_DIR = "vendor"


class Host(ABC):
    """Contract for the package manager the plugin runs inside."""

    @property
    @abstractmethod
    def root_package(self) -> RootPackage:
        """Root project descriptor, its ``dev_autoload`` is updated in place."""

    @property
    @abstractmethod
    def base_dir(self) -> str:
        """Absolute, normalized project directory."""

    @property
    @abstractmethod
    def vendor_dir(self) -> str:
        """Absolute, normalized vendor directory."""

    @property
    def vendor_dir_relative(self) -> str:
        """Vendor directory relative to the project when it lies inside it."""
        base = self.base_dir.rstrip("/")
        vendor = self.vendor_dir
        if vendor.startswith(f"{base}/"):
            return vendor[len(base) + 1:]
        return vendor


class ProjectHost(Host):
    """Host backed by a project directory holding a root manifest."""

    def __init__(
        self,
        root_package: RootPackage,
        base_dir: str,
        vendor_dir: str = DEFAULT_VENDOR_DIR,
    ) -> None:
        self._root_package = root_package
        self._base_dir = normalize_path(base_dir)
        if is_absolute_path(vendor_dir):
            self._vendor_dir = normalize_path(vendor_dir)
        else:
            self._vendor_dir = f"{self._base_dir}/{normalize_path(vendor_dir)}"

    @classmethod
    def from_directory(cls, path: str | Path) -> "ProjectHost":
        """Create a host for the project rooted at ``path``."""
        root = Path(path).expanduser().resolve()
        if not root.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {path}")
        root_package = load_root_package(root)
        config = read_manifest_data(root).get("config")
        vendor_dir = DEFAULT_VENDOR_DIR
        if isinstance(config, dict) and isinstance(config.get("vendor-dir"), str):
            vendor_dir = config["vendor-dir"] or DEFAULT_VENDOR_DIR
        return cls(root_package, root.as_posix(), vendor_dir)

    @property
    def root_package(self) -> RootPackage:
        return self._root_package

    @property
    def base_dir(self) -> str:
        return self._base_dir

    @property
    def vendor_dir(self) -> str:
        return self._vendor_dir


__all__ = ["Host", "ProjectHost"]
