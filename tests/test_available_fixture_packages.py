"""Tests for the loader copied next to the adopted package state."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List

import pytest

from fixture_packages.state import write_state_file
from fixture_packages.templates.available_fixture_packages import (
    AvailableFixturePackages,
    InfoRegistry,
    PathRegistry,
)


@pytest.fixture()
def state_file(tmp_path: Path) -> Path:
    return write_state_file(
        tmp_path,
        {
            "vendor/test-extension-one": {
                "name": "vendor/test-extension-one",
                "type": "framework-extension",
                "path": "../Fixtures/Extensions/extension-one",
                "extra": {"framework": {"extension-key": "extension_one"}},
            },
            "vendor/test-package-one": {
                "name": "vendor/test-package-one",
                "type": "library",
                "path": "/opt/packages/package-one",
                "extra": {},
            },
        },
    )


class RecordingPathRegistry:
    def __init__(self) -> None:
        self.paths: List[str] = []

    def add_from_path(self, path: str) -> None:
        self.paths.append(path)


class StaticInfoRegistry:
    def __init__(self, known: bool = True) -> None:
        self.known = known
        self.requested: List[str] = []

    def get_package_info_with_fallback(self, path: str) -> Any:
        self.requested.append(path)
        return {"path": path} if self.known else None


def test_packages_lists_all_records(state_file: Path) -> None:
    available = AvailableFixturePackages(str(state_file))

    packages = available.packages()

    assert list(packages) == ["vendor/test-extension-one", "vendor/test-package-one"]
    assert packages["vendor/test-extension-one"]["extra"] == {
        "framework": {"extension-key": "extension_one"}
    }
    assert packages["vendor/test-extension-one"]["path"] == f"{state_file.parent}/../Fixtures/Extensions/extension-one"


def test_packages_filters_by_type(state_file: Path) -> None:
    available = AvailableFixturePackages(str(state_file))

    assert available.package_names(["framework-extension"]) == ["vendor/test-extension-one"]
    assert available.package_names(["library", "framework-extension"]) == [
        "vendor/test-extension-one",
        "vendor/test-package-one",
    ]
    assert available.package_names(["unknown"]) == []
    assert available.package_names([]) == available.package_names()


def test_package_names_and_paths(state_file: Path) -> None:
    available = AvailableFixturePackages(str(state_file))

    assert available.package_names_and_paths(["library"]) == {
        "vendor/test-package-one": "/opt/packages/package-one"
    }


def test_missing_data_file_means_no_packages(tmp_path: Path) -> None:
    available = AvailableFixturePackages(str(tmp_path / "fixture_packages.py"))

    assert available.packages() == {}
    assert available.package_names() == []


def test_adopt_into_path_registry(state_file: Path) -> None:
    registry = RecordingPathRegistry()
    assert isinstance(registry, PathRegistry)

    AvailableFixturePackages(str(state_file)).adopt_into(registry, ["library"])

    assert registry.paths == ["/opt/packages/package-one"]


def test_adopt_into_info_registry(state_file: Path) -> None:
    registry = StaticInfoRegistry()
    assert isinstance(registry, InfoRegistry)

    AvailableFixturePackages(str(state_file)).adopt_into(registry)

    assert len(registry.requested) == 2


def test_adopt_into_info_registry_fails_for_unknown_package(state_file: Path) -> None:
    with pytest.raises(RuntimeError, match="Failed to load package info"):
        AvailableFixturePackages(str(state_file)).adopt_into(StaticInfoRegistry(known=False))


def test_adopt_into_unsupported_registry(state_file: Path) -> None:
    with pytest.raises(RuntimeError, match="neither add_from_path"):
        AvailableFixturePackages(str(state_file)).adopt_into(object())


def test_adopt_into_without_packages_accepts_any_registry(tmp_path: Path) -> None:
    AvailableFixturePackages(str(tmp_path / "missing.py")).adopt_into(object())
