"""Nodiff exclusion rules: which monitored files must never have their content diffed.

A file integrity monitor still reports that a sensitive file (a private key, a
credential store) changed, but it must not capture the file's content. The rules in this
module decide that, from a configuration made of exact paths and compiled patterns.
"""

import logging
from dataclasses import dataclass
from os import PathLike
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from fimdiff.config import read_nodiff_entries
from fimdiff.exceptions import InvalidPatternError
from fimdiff.types import MatcherKind, PathType

from .base_rules import BaseExclusionRules
from .matchers import LiteralMatcher, PathMatcher, compile_matcher

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodiffConfig(BaseExclusionRules):
    """Frozen nodiff configuration.

    A NodiffConfig is built once, when the monitor starts, and is read-only afterwards,
    so any number of threads may query it without locking. Both collections may be
    empty or None, in which case nothing is excluded.

    Attributes:
        literal_paths: Exact path strings, compared case-sensitively.
        patterns: Precompiled matchers, tested in order.

    Example:
        >>> from fimdiff.exclusion_rules.matchers import compile_matcher
        >>> config = NodiffConfig(
        ...     literal_paths=("/etc/ssl/private.key",),
        ...     patterns=(compile_matcher(".test$"),),
        ... )
        >>> config.exclude("/etc/ssl/private.key")
        True
        >>> config.exclude("file.test")
        True
        >>> config.exclude("test.file")
        False
        >>> NodiffConfig().exclude("/etc/ssl/private.key")
        False
    """

    literal_paths: Tuple[str, ...] = ()
    patterns: Tuple[PathMatcher, ...] = ()

    def __post_init__(self) -> None:
        # Absent collections mean nothing configured
        if self.literal_paths is None:
            object.__setattr__(self, "literal_paths", ())
        if self.patterns is None:
            object.__setattr__(self, "patterns", ())

    def matchers(self) -> Iterator[PathMatcher]:
        """Yield every entry as a matcher: literal paths first, then patterns, in configuration order."""
        for literal_path in self.literal_paths:
            yield LiteralMatcher(literal_path)
        yield from self.patterns

    def exclude(self, path: str) -> bool:
        return is_excluded(path, self)

    def has_rules(self) -> bool:
        return bool(self.literal_paths or self.patterns)


def is_excluded(path: str, config: Optional[NodiffConfig]) -> bool:
    """Check whether the content diff of ``path`` must be suppressed.

    Literal paths are compared first, then patterns, each in configuration order; the
    first hit wins. A missing or empty configuration excludes nothing. This function
    never raises and has no side effects beyond debug logging.

    Args:
        path: The monitored path, exactly as the monitor reports it. May be empty.
        config: The frozen nodiff configuration, or None if none was loaded.

    Returns:
        bool: True if the path is excluded from diff capture.

    Example:
        >>> config = NodiffConfig(literal_paths=("/etc/ssl/private.key",))
        >>> is_excluded("/etc/ssl/private.key", config)
        True
        >>> is_excluded("/dummy_file.key", config)
        False
        >>> is_excluded("/etc/ssl/private.key", None)
        False
    """
    if config is None:
        return False

    if config.literal_paths and path in config.literal_paths:
        log.debug("Path %r excluded from diff by literal nodiff entry", path)
        return True

    for matcher in config.patterns:
        if matcher.matches(path):
            log.debug("Path %r excluded from diff by %s nodiff entry %r", path, matcher.kind.value, matcher.expression)
            return True

    return False


class NodiffRulesBuilder(BaseExclusionRules):
    """Collects nodiff entries and freezes them into a NodiffConfig.

    The builder is the only mutable piece of the exclusion machinery. It is meant to be
    filled by a single writer while the monitor starts up (from configuration files with
    load_rules(), or programmatically) and then frozen with build(); the frozen
    configuration is what gets shared.

    Entries keep the order they are added in. Patterns are compiled as soon as they are
    added, so a malformed pattern is reported at load time, never at match time.

    Example:
        >>> builder = NodiffRulesBuilder()
        >>> builder.add_rule("/etc/ssl/private.key")
        >>> builder.add_pattern(".test$")
        >>> builder.exclude("file.test")
        True
        >>> config = builder.build()
        >>> config.literal_paths
        ('/etc/ssl/private.key',)
        >>> config.patterns
        (SimpleRegexMatcher('.test$'),)
    """

    def __init__(self, rules_files: Optional[Union[PathType, Sequence[PathType]]] = None):
        """Initialize the builder, optionally loading entries from configuration files.

        Args:
            rules_files: Path(s) to agent configuration file(s) holding ``<nodiff>`` entries.

        Raises:
            FileNotFoundError: If any configuration file does not exist.
            ConfigError: If any configuration file is malformed.
        """
        self._literal_paths: List[str] = []
        self._patterns: List[PathMatcher] = []

        if rules_files is not None:
            self.load_rules(rules_files)

    def exclude(self, path: str) -> bool:
        return is_excluded(path, self.build())

    def add_rule(self, rule: str) -> None:
        """Add an exact path to exclude.

        Args:
            rule: The path, compared case-sensitively and in full.
        """
        self._literal_paths.append(rule)

    def add_pattern(self, expression: str, kind: Union[MatcherKind, str] = MatcherKind.SREGEX) -> None:
        """Compile and add a pattern entry.

        Args:
            expression: The pattern text.
            kind: The matcher variant; simple regex by default. ``"literal"`` is accepted
                and behaves like add_rule().

        Raises:
            InvalidPatternError: If the pattern cannot be compiled.
        """
        matcher = compile_matcher(expression, kind)
        if isinstance(matcher, LiteralMatcher):
            self.add_rule(matcher.expression)
        else:
            self._patterns.append(matcher)

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """Load ``<nodiff>`` entries from one or more agent configuration files.

        Args:
            rules_files: Path(s) to configuration file(s).

        Raises:
            FileNotFoundError: If any configuration file does not exist.
            ConfigError: If any configuration file is malformed.
        """
        # Convert to list if it's a single path
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            entries = read_nodiff_entries(rules_file)
            for kind, expression in entries:
                try:
                    self.add_pattern(expression, kind)
                except InvalidPatternError as e:
                    raise InvalidPatternError(e.expression, e.kind, e.reason, source=str(rules_file)) from e
            log.debug("Loaded %d nodiff entries from %s", len(entries), rules_file)

    def has_rules(self) -> bool:
        return bool(self._literal_paths or self._patterns)

    def build(self) -> NodiffConfig:
        """Freeze the entries gathered so far into a NodiffConfig."""
        return NodiffConfig(literal_paths=tuple(self._literal_paths), patterns=tuple(self._patterns))


def load_nodiff_config(rules_files: Union[PathType, Sequence[PathType]]) -> NodiffConfig:
    """Read agent configuration file(s) and return the frozen nodiff configuration.

    Args:
        rules_files: Path(s) to configuration file(s).

    Returns:
        NodiffConfig: The frozen configuration.

    Raises:
        FileNotFoundError: If any configuration file does not exist.
        ConfigError: If any configuration file is malformed.
    """
    return NodiffRulesBuilder(rules_files).build()
