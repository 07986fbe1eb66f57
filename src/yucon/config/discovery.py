"""Config and units-file discovery.

``yucon.toml`` is found by walking up from the working directory, the way
git finds ``.git/``. ``YUCON_CONFIG`` and ``--config`` override the walk.

The units table is looked up in this order:
  1. an explicit path (``--units``)
  2. ``[units] path`` from yucon.toml
  3. ``~/.yucon/units.cfg``, seeded from the packaged table on first use
  4. the packaged ``yucon/data/units.cfg``
"""

from __future__ import annotations

import logging
import os
import shutil
from importlib import resources
from pathlib import Path

from yucon.config.models import UnitsConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "yucon.toml"
CONFIG_ENV_VAR = "YUCON_CONFIG"
USER_DIRNAME = ".yucon"
UNITS_FILENAME = "units.cfg"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for yucon.toml.

    ``YUCON_CONFIG`` wins when set; a dangling value means no config.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def packaged_units_file() -> Path:
    """The units table shipped inside the package."""
    return Path(str(resources.files("yucon").joinpath("data", UNITS_FILENAME)))


def user_units_file() -> Path:
    return Path.home() / USER_DIRNAME / UNITS_FILENAME


def find_units_file(explicit: Path | None, config: UnitsConfig) -> Path:
    """Resolve which units.cfg to load.

    An explicit or configured path is returned as-is, even when missing,
    so the caller can report it. Failing to seed the user copy is logged
    and falls back to the packaged table.
    """
    if explicit is not None:
        return explicit
    if config.path is not None:
        return config.path.expanduser()

    user_file = user_units_file()
    if user_file.is_file():
        return user_file

    packaged = packaged_units_file()
    if config.copy_default:
        try:
            user_file.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(packaged, user_file)
        except OSError as exc:
            logger.warning("Could not create %s: %s", user_file, exc)
        else:
            logger.info("Created %s from the default units table", user_file)
            return user_file
    return packaged
