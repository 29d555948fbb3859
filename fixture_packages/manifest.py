"""Manifest (composer.json) reading for root and fixture packages."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import PackageDescriptor, RootPackage

MANIFEST_FILENAME = "composer.json"
ROOT_PACKAGE_NAME = "__root__"


class ManifestError(RuntimeError):
    """Raised when a manifest exists but cannot be used."""


def load_package(directory: Path, *, location: str = "") -> Optional[PackageDescriptor]:
    """Load the package living in ``directory``.

    Returns None when the directory carries no manifest at all.
    """
    manifest_path = directory / MANIFEST_FILENAME
    if not manifest_path.is_file():
        return None

    data = _read_manifest(manifest_path)
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ManifestError(f"{manifest_path} does not declare a package name")

    return PackageDescriptor(
        name=name.strip(),
        type=_as_str(data.get("type")) or "library",
        location=location,
        autoload=_as_dict(data.get("autoload")),
        dev_autoload=_as_dict(data.get("autoload-dev")),
        extra=_as_dict(data.get("extra")),
        requires=_requirement_names(data.get("require")),
        dev_requires=_requirement_names(data.get("require-dev")),
    )


def load_root_package(directory: Path) -> RootPackage:
    """Load the root project manifest from ``directory``."""
    manifest_path = directory / MANIFEST_FILENAME
    if not manifest_path.is_file():
        raise FileNotFoundError(f"Root manifest not found: {manifest_path}")

    data = _read_manifest(manifest_path)
    return RootPackage(
        name=_as_str(data.get("name")) or ROOT_PACKAGE_NAME,
        type=_as_str(data.get("type")) or "project",
        autoload=_as_dict(data.get("autoload")),
        dev_autoload=_as_dict(data.get("autoload-dev")),
        extra=_as_dict(data.get("extra")),
        requires=_requirement_names(data.get("require")),
        dev_requires=_requirement_names(data.get("require-dev")),
    )


def read_manifest_data(directory: Path) -> Dict[str, Any]:
    """Return the raw manifest mapping stored in ``directory``."""
    return _read_manifest(directory / MANIFEST_FILENAME)


def _read_manifest(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Failed to parse {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ManifestError(f"Failed to decode {path}: {exc}") from exc
    except OSError as exc:
        raise ManifestError(f"Failed to read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestError(f"{path} must contain a JSON object at the root")
    return data


def _requirement_names(value: Any) -> List[str]:
    if not isinstance(value, dict):
        return []
    return [name for name in value if isinstance(name, str)]


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


__all__ = [
    "MANIFEST_FILENAME",
    "ManifestError",
    "load_package",
    "load_root_package",
    "read_manifest_data",
]
