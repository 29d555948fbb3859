"""Adopt autoload namespaces of local fixture packages into the root project."""

from .config import PathConfig, filter_extra_config
from .host import Host, ProjectHost
from .merger import AutoloadMerger
from .models import AdoptedPackageRecord, PackageDescriptor, RootPackage
from .plugin import PRE_AUTOLOAD_DUMP, Event, Plugin
from .repository import FixtureRepository, discover_fixture_packages, expand_pattern
from .service import FixturePackagesService

__version__ = "0.1.0"

__all__ = [
    "AdoptedPackageRecord",
    "AutoloadMerger",
    "Event",
    "FixturePackagesService",
    "FixtureRepository",
    "Host",
    "PRE_AUTOLOAD_DUMP",
    "PackageDescriptor",
    "PathConfig",
    "Plugin",
    "ProjectHost",
    "RootPackage",
    "discover_fixture_packages",
    "expand_pattern",
    "filter_extra_config",
]
