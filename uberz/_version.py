"""
Versioning for uberz. The version number is hard-coded; when running from a
git checkout, the commit hash is appended as a local version label.
"""

import logging
import subprocess
from pathlib import Path


# The reference version number, to be bumped before each release.
# setup.py reads this definition when building a distribution.
__version__ = "0.1.0"


logger = logging.getLogger("uberz")

# The repo root if this is a git checkout, otherwise None.
repo_dir = Path(__file__).parents[1]
repo_dir = repo_dir if repo_dir.joinpath(".git").is_dir() else None


def get_version():
    """Get the version string, with the git hash appended for dev installs."""
    if not repo_dir:
        return __version__
    label = get_git_label()
    return f"{__version__}+{label}" if label else __version__


def get_git_label():
    """Get a label like 'g1a2b3c4' or 'g1a2b3c4.dirty' from git, or None."""
    command = ["git", "describe", "--always", "--dirty", "--abbrev=8"]
    try:
        p = subprocess.run(command, cwd=repo_dir, capture_output=True)
    except Exception as e:
        logger.warning("Could not get uberz version: " + str(e))
        return None
    if p.returncode:
        stderr = p.stderr.decode(errors="ignore")
        logger.warning("Could not get uberz version from git: " + stderr)
        return None
    parts = p.stdout.decode(errors="ignore").strip().split("-")
    return ".".join(["g" + parts[0]] + parts[1:])


version_info = tuple(int(i) for i in __version__.split("."))
__version__ = get_version()
