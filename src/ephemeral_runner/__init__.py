"""Top-level package for ephemeral-runner.

License: GPL-3.0
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("ephemeral-runner")
except PackageNotFoundError:
    # Source checkout without an installed distribution
    __version__ = "dev"
