from abc import ABC, abstractmethod
from typing import Sequence, Union

from fimdiff.types import PathType


class BaseExclusionRules(ABC):
    """
    Abstract base class defining the interface for diff exclusion rules.

    This class serves as a contract for the rule sets that decide whether a monitored
    file's content diff must be withheld. All implementations must provide logic for
    checking if a given path is excluded. File loading and individual rule addition are
    optional capabilities: a frozen rule set answers queries but cannot be extended.

    Example:
        >>> from fimdiff.exclusion_rules.nodiff_rules import NodiffRulesBuilder
        >>> builder = NodiffRulesBuilder()
        >>> builder.add_rule("/etc/shadow")
        >>> builder.add_pattern(".key$")
        >>> config = builder.build()
        >>> config.exclude("/etc/shadow")
        True
        >>> config.exclude("/etc/ssl/server.key")
        True
        >>> config.exclude("/etc/hosts")
        False
        >>> # config.add_rule("/etc/passwd")  # Would raise NotImplementedError
    """

    @abstractmethod
    def exclude(self, path: str) -> bool:
        """
        Determine if the content diff of a given path must be suppressed.

        Args:
            path (str): The monitored file path, exactly as the monitor reports it.

        Returns:
            bool: True if the path is excluded from diff capture, False otherwise.
        """
        pass

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """
        Load exclusion rules from one or more configuration files.

        This method may be overridden by subclasses that support file-based rule loading.
        Frozen rule sets use the default implementation which raises NotImplementedError.

        Args:
            rules_files: Path to a file or sequence of paths containing exclusion rules.
                Can be any path-like object (str, Path, or anything implementing the PathLike protocol).

        Raises:
            NotImplementedError: If this rule type doesn't support loading from files.
            FileNotFoundError: If any rules file does not exist (for file-supporting rule types).
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support loading rules from files.")

    def add_rule(self, rule: str) -> None:
        """
        Add a single exclusion rule directly.

        This method may be overridden by subclasses that support programmatic rule addition.
        Frozen rule sets use the default implementation which raises NotImplementedError.

        Args:
            rule (str): The exclusion rule to add.

        Raises:
            NotImplementedError: If this rule type doesn't support adding individual rules.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support adding individual rules.")

    def has_rules(self) -> bool:
        """
        Check whether any rules are configured.

        Returns:
            bool: True unless the subclass knows its rule set is empty.
        """
        return True
