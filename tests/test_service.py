"""Tests for fixture_packages.service."""

from __future__ import annotations

import logging
import runpy
from pathlib import Path

import pytest

from fixture_packages.config import PathConfig
from fixture_packages.models import PackageDescriptor
from fixture_packages.service import FixturePackagesService
from fixture_packages.state import LOADER_FILENAME, STATE_FILENAME, TEMPLATE_PATH

LOADER_ENTRY = f"vendor/fixture-packages/{LOADER_FILENAME}"


@pytest.fixture()
def project(project_builder):
    project_builder.write_root(
        require={"vendor/installed": "*"},
        autoload_dev={"psr-4": {"Project\\Tests\\": "tests/"}},
        paths={
            "Fixtures/Extensions/*": ["autoload"],
            "Packages/*/Fixtures/*": ["autoload", "autoload-dev"],
        },
    )
    project_builder.add_package(
        "Fixtures/Extensions/extension-one",
        "vendor/test-extension-one",
        type="framework-extension",
        autoload={"psr-4": {"Vendor\\ExtensionOne\\": "Classes/"}},
        autoload_dev={"psr-4": {"Vendor\\ExtensionOne\\Tests\\": "Tests/"}},
        extra={"framework": {"extension-key": "extension_one"}},
    )
    project_builder.add_package(
        "Fixtures/Extensions/installed",
        "vendor/installed",
        autoload={"psr-4": {"Vendor\\Installed\\": "src/"}},
    )
    project_builder.add_package(
        "Packages/local/Fixtures/package-two",
        "vendor/test-package-two",
        autoload={"classmap": ["lib/"]},
        autoload_dev={"files": ["functions.php"]},
    )
    return project_builder


def test_adopt_merges_and_exports(project) -> None:
    host = project.host()
    service = FixturePackagesService()

    exported = service.adopt(host, dev_mode=True)

    assert list(exported) == ["vendor/test-extension-one", "vendor/test-package-two"]
    assert exported["vendor/test-extension-one"].path == "../../Fixtures/Extensions/extension-one"
    assert exported["vendor/test-extension-one"].type == "framework-extension"
    assert exported["vendor/test-package-two"].path == "../../Packages/local/Fixtures/package-two"
    assert service.last_export == exported

    assert host.root_package.dev_autoload == {
        "psr-4": {
            "Project\\Tests\\": "tests/",
            "Vendor\\ExtensionOne\\": "Fixtures/Extensions/extension-one/Classes",
        },
        "files": ["Packages/local/Fixtures/package-two/functions.php"],
        "classmap": ["Packages/local/Fixtures/package-two/lib", LOADER_ENTRY],
    }


def test_adopt_writes_state_and_loader(project) -> None:
    host = project.host()

    FixturePackagesService().adopt(host, dev_mode=True)

    data_dir = Path(host.vendor_dir) / "fixture-packages"
    assert (data_dir / LOADER_FILENAME).read_bytes() == TEMPLATE_PATH.read_bytes()
    packages = runpy.run_path(str(data_dir / STATE_FILENAME))["PACKAGES"]
    assert packages["vendor/test-extension-one"]["extra"] == {
        "framework": {"extension-key": "extension_one"}
    }
    resolved = Path(packages["vendor/test-extension-one"]["path"]).resolve()
    assert resolved == (project.path() / "Fixtures" / "Extensions" / "extension-one").resolve()


def test_adopt_skips_installed_packages(project, caplog) -> None:
    host = project.host()

    exported = FixturePackagesService().adopt(host, dev_mode=True)

    assert "vendor/installed" not in exported
    assert "Vendor\\Installed\\" not in host.root_package.dev_autoload["psr-4"]
    assert (
        '>> Skipping autoload adopt for package "vendor/installed" in '
        '"Fixtures/Extensions/installed", already installed.'
    ) in caplog.text


def test_adopt_survives_undecodable_fixture_manifest(project) -> None:
    project.mkdir("Fixtures/Extensions/broken")
    (project.path() / "Fixtures" / "Extensions" / "broken" / "composer.json").write_bytes(
        b'{"name": "vendor/broken\xff"}'
    )
    host = project.host()

    exported = FixturePackagesService().adopt(host, dev_mode=True)

    assert list(exported) == ["vendor/test-extension-one", "vendor/test-package-two"]
    assert (Path(host.vendor_dir) / "fixture-packages" / STATE_FILENAME).is_file()


def test_adopt_outside_dev_mode_does_nothing(project) -> None:
    host = project.host()
    before = dict(host.root_package.dev_autoload)

    assert FixturePackagesService().adopt(host, dev_mode=False) == {}
    assert host.root_package.dev_autoload == before
    assert not Path(host.vendor_dir).exists()


def test_adopt_without_configuration_writes_empty_state(project_builder) -> None:
    project_builder.write_root()
    host = project_builder.host()

    assert FixturePackagesService().adopt(host, dev_mode=True) == {}

    state = Path(host.vendor_dir) / "fixture-packages" / STATE_FILENAME
    assert runpy.run_path(str(state))["PACKAGES"] == {}
    assert host.root_package.dev_autoload == {"classmap": [LOADER_ENTRY]}


def test_adopt_registers_loader_once(project) -> None:
    host = project.host()
    service = FixturePackagesService()

    service.adopt(host, dev_mode=True)
    service.reset()
    service.adopt(host, dev_mode=True)

    assert host.root_package.dev_autoload["classmap"].count(LOADER_ENTRY) == 1
    assert host.root_package.dev_autoload["psr-4"]["Vendor\\ExtensionOne\\"] == (
        "Fixtures/Extensions/extension-one/Classes"
    )


def test_config_is_loaded_once_until_reset(project) -> None:
    service = FixturePackagesService()
    first = service.config_for(project.host())

    project.write_root(paths={"Other/*": ["autoload"]})
    host = project.host()

    assert service.config_for(host) is first
    service.reset()
    assert list(service.config_for(host).paths(relative=True)) == ["Other/*"]


def test_explicit_config_survives_reset(project) -> None:
    config = PathConfig(project.path().as_posix(), {"Fixtures/Extensions/*": ["autoload"]})
    service = FixturePackagesService(config=config)

    service.reset()

    assert service.config_for(project.host()) is config


def test_export_packages_last_writer_wins(caplog) -> None:
    config = PathConfig("/project")
    first = PackageDescriptor(name="vendor/dup", location="Fixtures/one")
    second = PackageDescriptor(name="vendor/dup", type="framework-extension", location="Fixtures/two")

    exported = FixturePackagesService().export_packages(
        config, "/project/vendor/fixture-packages", [first, second]
    )

    assert list(exported) == ["vendor/dup"]
    assert exported["vendor/dup"].path == "../../Fixtures/two"
    assert exported["vendor/dup"].type == "framework-extension"
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert '"Fixtures/one"' in warnings[0].getMessage()
    assert '"Fixtures/two"' in warnings[0].getMessage()


def test_export_packages_relates_absolute_locations_to_data_dir() -> None:
    config = PathConfig("/project")
    package = PackageDescriptor(name="vendor/shared", location="/opt/shared/package")

    exported = FixturePackagesService().export_packages(
        config, "/project/vendor/fixture-packages", [package]
    )

    assert exported["vendor/shared"].path == "../../../opt/shared/package"
