"""Content-diff decisions for file integrity monitoring.

This package provides the checks a file integrity monitor runs before capturing a
file's content diff (nodiff exclusions) and before writing a diff artifact to disk
(platform path filtering).
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for programmatic use
try:
    __version__ = version("fimdiff")
except PackageNotFoundError:
    __version__ = "unknown"
