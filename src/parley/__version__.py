"""Version information for Parley.

The version is read from the installed package metadata.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("parley")
except PackageNotFoundError:
    # Package not installed, fallback for development
    __version__ = "0.0.0-dev"
