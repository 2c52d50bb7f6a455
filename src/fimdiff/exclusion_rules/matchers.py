"""Precompiled path matchers used by nodiff exclusion rules.

Every configured nodiff entry is compiled once, when the configuration is loaded, into
one of the matcher variants defined here. All variants share the same capability,
``matches(path) -> bool``, so the exclusion check can walk a single ordered sequence of
matchers without caring how each one was written in the configuration.
"""

import re
from abc import ABC, abstractmethod
from typing import List, Tuple, Union

from pathspec import PathSpec

from fimdiff.exceptions import InvalidPatternError
from fimdiff.types import MatcherKind


class PathMatcher(ABC):
    """Abstract base class for a single compiled nodiff entry.

    Matching is always case-sensitive and anchored exactly as the expression itself
    dictates; no variant adds implicit prefix or suffix wildcards.

    Attributes:
        expression (str): The entry as it was written in the configuration.
        kind (MatcherKind): The variant tag of this matcher.
    """

    kind: MatcherKind

    def __init__(self, expression: str):
        self.expression = expression

    @abstractmethod
    def matches(self, path: str) -> bool:
        """Return True if ``path`` is matched by this entry."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.expression!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathMatcher):
            return NotImplemented
        return self.kind == other.kind and self.expression == other.expression

    def __hash__(self) -> int:
        return hash((self.kind, self.expression))


class LiteralMatcher(PathMatcher):
    """Matches one exact path string.

    Example:
        >>> matcher = LiteralMatcher("/etc/ssl/private.key")
        >>> matcher.matches("/etc/ssl/private.key")
        True
        >>> matcher.matches("/etc/ssl/PRIVATE.key")
        False
    """

    kind = MatcherKind.LITERAL

    def matches(self, path: str) -> bool:
        return path == self.expression


class SimpleRegexMatcher(PathMatcher):
    """Matches paths using the monitor's simple regular expression syntax.

    The syntax knows four special characters:

    - ``^`` at the start of an alternative anchors it to the start of the path
    - ``$`` at the end of an alternative anchors it to the end of the path
    - ``|`` separates alternatives; the expression matches if any alternative does
    - ``!`` as the very first character negates the whole expression

    Every other character, including ``.`` and ``*``, is literal. An alternative with no
    anchors matches anywhere in the path.

    Example:
        >>> matcher = SimpleRegexMatcher(".test$")
        >>> matcher.matches("file.test")
        True
        >>> matcher.matches("test.file")
        False
        >>> SimpleRegexMatcher("^/etc/ssl|.key$").matches("/home/user/id.key")
        True
        >>> SimpleRegexMatcher("!.log$").matches("/var/log/syslog")
        True
    """

    kind = MatcherKind.SREGEX

    def __init__(self, expression: str):
        super().__init__(expression)

        body = expression
        self.negate = body.startswith("!")
        if self.negate:
            body = body[1:]

        self._alternatives: List[Tuple[str, bool, bool]] = []
        for alternative in body.split("|"):
            if not alternative:
                raise InvalidPatternError(expression, self.kind.value, "empty alternative")

            anchor_start = alternative.startswith("^")
            if anchor_start:
                alternative = alternative[1:]
            anchor_end = alternative.endswith("$")
            if anchor_end:
                alternative = alternative[:-1]

            self._alternatives.append((alternative, anchor_start, anchor_end))

    def matches(self, path: str) -> bool:
        found = any(self._match_alternative(path, *alternative) for alternative in self._alternatives)
        return found != self.negate

    @staticmethod
    def _match_alternative(path: str, text: str, anchor_start: bool, anchor_end: bool) -> bool:
        if anchor_start and anchor_end:
            return path == text
        if anchor_start:
            return path.startswith(text)
        if anchor_end:
            return path.endswith(text)
        return text in path


class RegexMatcher(PathMatcher):
    """Matches paths against a full regular expression.

    The expression is searched for anywhere in the path, so it is anchored only where it
    says so with ``^``, ``$`` or ``\\A``/``\\Z``.

    Example:
        >>> matcher = RegexMatcher(r"\\.(pem|key)$")
        >>> matcher.matches("/etc/ssl/server.pem")
        True
        >>> matcher.matches("/etc/ssl/server.pem.bak")
        False
    """

    kind = MatcherKind.PCRE2

    def __init__(self, expression: str):
        super().__init__(expression)
        try:
            self.regex: "re.Pattern[str]" = re.compile(expression)
        except re.error as e:
            raise InvalidPatternError(expression, self.kind.value, str(e))

    def matches(self, path: str) -> bool:
        return self.regex.search(path) is not None


class WildmatchMatcher(PathMatcher):
    """Matches paths using gitignore-style wildcard syntax.

    Patterns are compiled with the pathspec library, so ``*``, ``?``, ``[abc]`` and
    ``**`` behave as they do in a ``.gitignore`` file. Negated patterns (``!...``) have
    no meaning for a single entry and are rejected.

    Example:
        >>> matcher = WildmatchMatcher("*.pem")
        >>> matcher.matches("certs/server.pem")
        True
        >>> matcher.matches("certs/server.crt")
        False
    """

    kind = MatcherKind.WILDMATCH

    def __init__(self, expression: str):
        super().__init__(expression)
        self.spec = PathSpec.from_lines("gitwildmatch", [expression])

        pattern = self.spec.patterns[0] if self.spec.patterns else None
        if pattern is None or pattern.include is None:
            raise InvalidPatternError(expression, self.kind.value, "pattern matches nothing")
        if not pattern.include:
            raise InvalidPatternError(expression, self.kind.value, "negated patterns are not supported")

    def matches(self, path: str) -> bool:
        return self.spec.match_file(path)


_MATCHER_CLASSES = {
    MatcherKind.LITERAL: LiteralMatcher,
    MatcherKind.SREGEX: SimpleRegexMatcher,
    MatcherKind.PCRE2: RegexMatcher,
    MatcherKind.WILDMATCH: WildmatchMatcher,
}


def compile_matcher(expression: str, kind: Union[MatcherKind, str] = MatcherKind.SREGEX) -> PathMatcher:
    """Compile a nodiff entry into the matcher variant named by ``kind``.

    Args:
        expression: The entry text.
        kind: A MatcherKind or its string value (e.g. ``"sregex"``).

    Returns:
        PathMatcher: The compiled matcher.

    Raises:
        InvalidPatternError: If the expression is empty, the kind is unknown, or the
            expression does not compile.

    Example:
        >>> compile_matcher(".test$")
        SimpleRegexMatcher('.test$')
        >>> compile_matcher("/etc/shadow", "literal")
        LiteralMatcher('/etc/shadow')
    """
    try:
        kind = MatcherKind(kind)
    except ValueError:
        raise InvalidPatternError(expression, str(kind), "unknown matcher type")

    if not expression:
        raise InvalidPatternError(expression, kind.value, "empty expression")

    return _MATCHER_CLASSES[kind](expression)
