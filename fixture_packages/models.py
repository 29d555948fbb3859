"""Core data models shared across fixture-packages components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

AUTOLOAD = "autoload"
AUTOLOAD_DEV = "autoload-dev"
ADOPT_MODES: Tuple[str, ...] = (AUTOLOAD, AUTOLOAD_DEV)

PSR0 = "psr-0"
PSR4 = "psr-4"
FILES = "files"
CLASSMAP = "classmap"
MAPPING_SECTIONS: Tuple[str, ...] = (PSR0, PSR4)
LIST_SECTIONS: Tuple[str, ...] = (FILES, CLASSMAP)

Autoload = Dict[str, Any]


@dataclass
class PackageDescriptor:
    """A package read from a manifest, discovered by a fixture repository."""

    name: str
    type: str = "library"
    location: str = ""
    autoload: Autoload = field(default_factory=dict)
    dev_autoload: Autoload = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)
    requires: List[str] = field(default_factory=list)
    dev_requires: List[str] = field(default_factory=list)
    adopt_modes: Tuple[str, ...] = ()

    def __setattr__(self, key: str, value: Any) -> None:
        if key == "name" and "name" in self.__dict__:
            raise AttributeError("Package name cannot be changed once loaded")
        super().__setattr__(key, value)

    def autoload_for(self, mode: str) -> Autoload:
        """Return the autoload section matching an adoption mode."""
        if mode == AUTOLOAD:
            return self.autoload
        if mode == AUTOLOAD_DEV:
            return self.dev_autoload
        raise ValueError(f"Unknown adoption mode: {mode}")


@dataclass
class RootPackage(PackageDescriptor):
    """The consuming project; its ``dev_autoload`` receives adopted namespaces."""

    type: str = "project"

    def required_names(self) -> List[str]:
        return [*self.requires, *self.dev_requires]


@dataclass
class AdoptedPackageRecord:
    """Entry of the exported state artifact."""

    name: str
    type: str
    path: str
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "path": self.path,
            "extra": self.extra,
        }
