"""The content-diff stage of the monitor.

When the monitor detects that a file changed, the diff stage first asks the nodiff rules
whether the file's content may be captured at all. Only if it may is the diff produced
and written out, below the diff directory, to a location derived from the monitored path
that has passed the platform path filter. Excluded files are still reported as changed,
just without content.
"""

import logging
from enum import Enum
from typing import Callable, Optional

from fimdiff.artifact_writer import ArtifactWriter
from fimdiff.exclusion_rules.nodiff_rules import NodiffConfig, is_excluded
from fimdiff.path_filter import PathPolicy, monitored_path_fragment
from fimdiff.types import PathType

log = logging.getLogger(__name__)

DEFAULT_ARTIFACT_NAME = "diff.1"


class ChangeOutcome(str, Enum):
    """What the diff stage did with a change.

    Values:
        NODIFF: The path is excluded; only metadata is reported
        WRITTEN: The diff was written to its artifact
    """

    NODIFF = "nodiff"
    WRITTEN = "written"


class DiffPipeline:
    """Decides on and persists content diffs for changed files.

    The pipeline holds no mutable state, so one instance can serve concurrent callers.

    Attributes:
        config: The frozen nodiff configuration, or None if none was loaded.
        diff_dir: Trusted native directory all artifacts are written under.
        policy: Platform path rules for artifact fragments, or None for the running
            platform's.

    Example:
        >>> pipeline = DiffPipeline(NodiffConfig(literal_paths=("/etc/shadow",)), "/unused")
        >>> pipeline.handle_change("/etc/shadow", lambda: "secret")
        <ChangeOutcome.NODIFF: 'nodiff'>
    """

    def __init__(self, config: Optional[NodiffConfig], diff_dir: PathType, policy: Optional[PathPolicy] = None):
        self.config = config
        self.diff_dir = diff_dir
        self.policy = policy

    def should_capture(self, path: str) -> bool:
        """Return True if the content of ``path`` may be diffed."""
        return not is_excluded(path, self.config)

    def handle_change(
        self, path: str, diff: Callable[[], str], artifact_name: str = DEFAULT_ARTIFACT_NAME
    ) -> ChangeOutcome:
        """Process one detected change.

        The artifact goes to ``<diff_dir>/<monitored path>/<artifact_name>``. Only the part
        derived from the monitored path is filtered; ``diff_dir`` is taken as is.

        Args:
            path: The changed file, as reported by the monitor.
            diff: Produces the diff text. Not called when the path is excluded.
            artifact_name: File name of the artifact inside the path's directory.

        Returns:
            ChangeOutcome: NODIFF if content capture is suppressed, WRITTEN otherwise.

        Raises:
            PathRejectedError: If the monitored path contains a reserved character.
            OSError: If the artifact cannot be written.
            Exception: Whatever ``diff`` raises. A previous artifact is left untouched.
        """
        if not self.should_capture(path):
            log.debug("Skipping content diff of %s", path)
            return ChangeOutcome.NODIFF

        # Opening truncates, so the content must exist first
        content = diff()
        fragment = f"{monitored_path_fragment(path)}/{artifact_name}"
        with ArtifactWriter(self.diff_dir, fragment, self.policy) as writer:
            writer.write(content)

        log.debug("Wrote diff of %s to %s", path, writer.path)
        return ChangeOutcome.WRITTEN
