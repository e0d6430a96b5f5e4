"""Finding the ledger a command should operate on.

The ledger root is the nearest directory, walking up from where the
command runs, that holds either ``fundctl.toml`` or a ``.fundctl/``
state directory. A ledger created without a config file is therefore
still found from its subdirectories.

``--config`` and ``FUNDCTL_CONFIG`` pin the config file instead. The
pinned file's directory becomes the root; a pinned path that does not
exist means no config and a root at the starting directory.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import NamedTuple

CONFIG_FILENAME = "fundctl.toml"
CONFIG_ENV_VAR = "FUNDCTL_CONFIG"
STATE_DIRNAME = ".fundctl"


class LedgerLocation(NamedTuple):
    root: Path
    config_path: Path | None


def locate_ledger(start: Path | None = None, *, config: str | None = None) -> LedgerLocation:
    """Resolve the ledger root and its config file, if any."""
    origin = start or Path.cwd()

    pinned = config or os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        path = Path(pinned)
        if path.is_file():
            return LedgerLocation(path.parent, path)
        return LedgerLocation(origin, None)

    for directory in (origin.resolve(), *origin.resolve().parents):
        config_file = directory / CONFIG_FILENAME
        if config_file.is_file():
            return LedgerLocation(directory, config_file)
        if (directory / STATE_DIRNAME).is_dir():
            return LedgerLocation(directory, None)
    return LedgerLocation(origin, None)
