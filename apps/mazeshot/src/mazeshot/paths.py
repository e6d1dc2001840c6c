from __future__ import annotations

from pathlib import Path

import mazeshot


def app_root() -> Path:
    """
    Return the MAZESHOT app root directory: <repo>/apps/mazeshot.

    Derived from the package location, so it stays correct for callers in any subpackage.
    """

    return Path(mazeshot.__file__).resolve().parents[2]
