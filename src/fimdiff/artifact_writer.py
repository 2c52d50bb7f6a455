"""Writing diff artifacts to filtered destination paths.

This module provides the file handle the snapshot-writing stage uses. An artifact lives
under a trusted base directory; the fragment appended to it, derived from a monitored
path, is run through the platform path filter before anything is opened, so a fragment
with a reserved character aborts the write instead of producing a mangled file name.
"""

import logging
import types
from pathlib import Path
from typing import Optional, Type

from fimdiff.exceptions import PathRejectedError
from fimdiff.path_filter import PathPolicy, policy_for_platform, sanitize_or_raise
from fimdiff.types import PathType

log = logging.getLogger(__name__)


class ArtifactWriter:
    """Writing interface for one diff artifact.

    Attributes:
        base_dir: The trusted directory artifacts are written under.
        fragment: The fragment as requested by the caller.
        path: The filtered destination actually written to.
    """

    def __init__(self, base_dir: PathType, fragment: str, policy: Optional[PathPolicy] = None):
        """Filter the fragment, join it to the base directory and open it for writing.

        The base directory is native and trusted, so it is not filtered; on Windows it
        usually carries a drive colon. Missing parent directories are created.

        Args:
            base_dir: The directory artifacts are written under.
            fragment: Relative destination below ``base_dir``, possibly using foreign
                separators.
            policy: Platform path rules. Defaults to those of the running platform.

        Raises:
            PathRejectedError: If the fragment contains a reserved character.
            OSError: If the file cannot be opened.
        """
        self.base_dir = Path(base_dir)
        self.fragment = fragment
        self._closed = False

        try:
            self.path = self.base_dir / sanitize_or_raise(fragment, policy or policy_for_platform())
        except PathRejectedError:
            log.warning("Refusing to write diff artifact %r: reserved character in path", fragment)
            raise

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file_obj = self.path.open("w", encoding="utf-8")

    def write(self, data: str) -> None:
        """Write data to the artifact.

        Args:
            data: String data to write.

        Raises:
            ValueError: If attempting to write to a closed writer.
            OSError: If an I/O error occurs during writing.
        """
        if self._closed:
            raise ValueError("Cannot write to closed ArtifactWriter")

        self._file_obj.write(data)

    def close(self) -> None:
        """Close the artifact file.

        The writer is marked as closed even if the underlying close operation fails.
        """
        if self._closed:
            return

        self._closed = True
        self._file_obj.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "ArtifactWriter":
        """Enter the context manager.

        Returns:
            self: The ArtifactWriter instance for use in the with block.
        """
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        """Exit the context manager and close the file.

        If closing fails while an exception is already propagating out of the with
        block, the original exception is kept.
        """
        try:
            self.close()
        except OSError:
            if exc_type is None:
                raise
