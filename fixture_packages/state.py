"""Persistence of the adopted fixture package state and its companion loader."""

from __future__ import annotations

import math
import shutil
from pathlib import Path
from typing import Any, List, Mapping, Optional

from .logging import get_logger
from .paths import hash_file, is_absolute_path, put_contents_if_modified

DATA_DIR_NAME = "fixture-packages"
STATE_FILENAME = "fixture_packages.py"
LOADER_FILENAME = "available_fixture_packages.py"
TEMPLATE_PATH = Path(__file__).parent / "templates" / LOADER_FILENAME

_INDENT = "    "
_HEADER = (
    '"""Fixture packages adopted by the last install run. Generated file, do not edit."""\n'
    "\n"
    "import os\n"
    "\n"
    "_DIR = os.path.dirname(os.path.abspath(__file__))\n"
    "\n"
)

logger = get_logger("state")


class StateDumpError(TypeError):
    """Raised when the state contains a value that cannot be written out."""


def dump_state(packages: Mapping[str, Mapping[str, Any]]) -> str:
    """Render the package state as a loadable Python module.

    Relative ``path`` values of the records are anchored at the directory of the
    written module, so the whole tree can be moved without regenerating it.
    """
    lines = ["PACKAGES = {"]
    for name, record in packages.items():
        lines.append(f"{_INDENT}{_dump_key(name)}: {{")
        for key, value in record.items():
            prefix = f"{_INDENT * 2}{_dump_key(key)}: "
            if key == "path" and isinstance(value, str):
                lines.append(f"{prefix}{_dump_path(value)},")
            else:
                lines.append(f"{prefix}{_dump_value(value, 2)},")
        lines.append(f"{_INDENT}}},")
    lines.append("}")
    if not packages:
        lines = ["PACKAGES = {}"]
    return _HEADER + "\n".join(lines) + "\n"


def write_state_file(data_dir: Path, packages: Mapping[str, Mapping[str, Any]]) -> Path:
    """Write the state module unless its content is unchanged."""
    target = data_dir / STATE_FILENAME
    if put_contents_if_modified(target, dump_state(packages)):
        logger.debug("Wrote %s", target)
    else:
        logger.debug("%s is up to date", target)
    return target


def install_loader(data_dir: Path, template: Path = TEMPLATE_PATH) -> Optional[Path]:
    """Provide the companion loader next to the state file.

    An existing copy is replaced when it differs from the bundled template.
    """
    if not template.is_file():
        logger.error("Could not find %s template at %s.", LOADER_FILENAME, template)
        return None

    target = data_dir / LOADER_FILENAME
    if target.is_file() and hash_file(target) != hash_file(template):
        target.unlink()
        logger.info("%s exists, but content changed. Remove it.", LOADER_FILENAME)
    if not target.is_file():
        logger.info("Provide %s", LOADER_FILENAME)
        data_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(template, target)
    return target


def _dump_path(value: str) -> str:
    if is_absolute_path(value):
        return repr(value)
    return f"_DIR + {'/' + value!r}"


def _dump_key(key: Any) -> str:
    if isinstance(key, (str, int)) and not isinstance(key, bool):
        return repr(key)
    raise StateDumpError(f"Unexpected key type {type(key).__name__}")


def _dump_value(value: Any, level: int) -> str:
    if isinstance(value, dict):
        if not value:
            return "{}"
        lines: List[str] = ["{"]
        for key, item in value.items():
            lines.append(
                f"{_INDENT * (level + 1)}{_dump_key(key)}: {_dump_value(item, level + 1)},"
            )
        lines.append(f"{_INDENT * level}}}")
        return "\n".join(lines)
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        lines = ["["]
        for item in value:
            lines.append(f"{_INDENT * (level + 1)}{_dump_value(item, level + 1)},")
        lines.append(f"{_INDENT * level}]")
        return "\n".join(lines)
    if value is None or isinstance(value, (str, bool, int)):
        return repr(value)
    if isinstance(value, float) and math.isfinite(value):
        return repr(value)
    raise StateDumpError(f"Unexpected type {type(value).__name__}")


__all__ = [
    "DATA_DIR_NAME",
    "LOADER_FILENAME",
    "STATE_FILENAME",
    "StateDumpError",
    "TEMPLATE_PATH",
    "dump_state",
    "install_loader",
    "write_state_file",
]
