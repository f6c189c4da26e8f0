"""
faucet.version - package version and a build-describe string for the CLI.

No third-party imports; safe to import from packaging hooks.
"""

from __future__ import annotations

import os
import subprocess
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version
from typing import Dict

__version__ = "0.1.0"

_DIST_NAME = "faucet-core"


def _installed_version() -> str:
    try:
        return version(_DIST_NAME)
    except PackageNotFoundError:
        return ""


@lru_cache(maxsize=1)
def git_describe() -> str:
    """
    Describe the running build.

    FAUCET_GIT_DESCRIBE wins when set. Otherwise `git describe --tags --dirty
    --always` from the package directory, then the installed distribution
    version, then `<__version__>+local`.
    """
    override = os.getenv("FAUCET_GIT_DESCRIBE")
    if override:
        return override.strip()

    here = os.path.dirname(os.path.abspath(__file__))
    try:
        out = subprocess.check_output(
            ["git", "describe", "--tags", "--dirty", "--always"],
            cwd=here,
            stderr=subprocess.DEVNULL,
        )
        desc = out.decode("utf-8", "replace").strip()
        if desc:
            return desc
    except (OSError, subprocess.CalledProcessError):
        pass

    return _installed_version() or f"{__version__}+local"


def version_info() -> Dict[str, str]:
    return {"version": __version__, "describe": git_describe()}


__all__ = ["__version__", "git_describe", "version_info"]
