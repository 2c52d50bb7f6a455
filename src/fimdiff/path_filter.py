r"""Platform path filtering for diff artifact destinations.

Before a diff artifact is written, the destination built from a monitored path has to be
usable as a file name on the host. On Windows a fixed set of characters is reserved, and
paths use ``\`` rather than ``/``. A path containing a reserved character is rejected as a
whole; it is never partially cleaned, so no character is ever silently dropped.

The rules are expressed as a PathPolicy so that platforms with other reserved sets can
be described without touching the filter itself.

Example:
    >>> result = sanitize("a/unix/style/path/")
    >>> print(result.path)
    a\unix\style\path\
    >>> sanitize("This : is not valid") is REJECTED
    True
"""

import sys
from dataclasses import dataclass
from typing import FrozenSet, Optional, Union

from fimdiff.exceptions import PathRejectedError

# Reserved characters of the Windows file naming conventions, plus '%'
WINDOWS_RESERVED_CHARS = frozenset(':?<>|"*%')


@dataclass(frozen=True)
class PathPolicy:
    """Reserved characters and separator conventions of one platform.

    Attributes:
        forbidden_chars: Characters that make a path unusable.
        foreign_separator: Separator rewritten to the native one (empty for none).
        native_separator: The platform's own directory separator.
    """

    forbidden_chars: FrozenSet[str] = frozenset()
    foreign_separator: str = ""
    native_separator: str = "/"


WINDOWS_POLICY = PathPolicy(forbidden_chars=WINDOWS_RESERVED_CHARS, foreign_separator="/", native_separator="\\")
POSIX_POLICY = PathPolicy()


@dataclass(frozen=True)
class Sanitized:
    """A path that passed the filter, already rewritten to native separators."""

    path: str

    @property
    def ok(self) -> bool:
        """Always True; lets callers branch between Sanitized and REJECTED without isinstance checks."""
        return True


class Rejected:
    """Marker returned for a path containing a reserved character.

    There is a single instance, REJECTED. It carries no detail about which character
    caused the rejection.
    """

    _instance: Optional["Rejected"] = None

    def __new__(cls) -> "Rejected":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def ok(self) -> bool:
        """Always False; see Sanitized.ok."""
        return False

    def __repr__(self) -> str:
        return "REJECTED"


REJECTED = Rejected()

FilterResult = Union[Sanitized, Rejected]


def policy_for_platform(platform: str = sys.platform) -> PathPolicy:
    """Return the path policy of a platform.

    Args:
        platform: A ``sys.platform`` value. Defaults to the running platform.

    Example:
        >>> policy_for_platform("win32") is WINDOWS_POLICY
        True
        >>> policy_for_platform("linux") is POSIX_POLICY
        True
    """
    if platform.startswith(("win", "cygwin", "msys")):
        return WINDOWS_POLICY
    return POSIX_POLICY


def sanitize(value: str, policy: PathPolicy = WINDOWS_POLICY) -> FilterResult:
    r"""Filter a path fragment against a platform's reserved characters.

    Args:
        value: The candidate path or path fragment. May be empty.
        policy: The platform rules to apply. Defaults to Windows.

    Returns:
        FilterResult: Sanitized with every foreign separator rewritten to the native one,
        or REJECTED if any reserved character occurs anywhere in ``value``.

    Example:
        >>> sanitize("This string wont change")
        Sanitized(path='This string wont change')
        >>> sanitize("")
        Sanitized(path='')
        >>> sanitize('This " is not valid')
        REJECTED
    """
    if not policy.forbidden_chars.isdisjoint(value):
        return REJECTED

    if policy.foreign_separator:
        value = value.replace(policy.foreign_separator, policy.native_separator)
    return Sanitized(value)


def sanitize_or_raise(value: str, policy: PathPolicy = WINDOWS_POLICY) -> str:
    """Filter a path fragment, raising if it is rejected.

    Args:
        value: The candidate path or path fragment.
        policy: The platform rules to apply. Defaults to Windows.

    Returns:
        str: The rewritten path.

    Raises:
        PathRejectedError: If ``value`` contains a reserved character.
    """
    result = sanitize(value, policy)
    if isinstance(result, Rejected):
        raise PathRejectedError(value)
    return result.path


def monitored_path_fragment(path: str) -> str:
    r"""Turn a monitored absolute path into a fragment relative to an artifact directory.

    A drive designator loses its colon (``C:`` becomes ``C``), and leading separators
    are removed. The result still has to go through sanitize().

    Example:
        >>> monitored_path_fragment("C:\\Windows\\System32\\drivers\\etc\\hosts")
        'C\\Windows\\System32\\drivers\\etc\\hosts'
        >>> monitored_path_fragment("/etc/hosts")
        'etc/hosts'
    """
    if len(path) >= 2 and path[1] == ":" and path[0].isalpha():
        path = path[0] + path[2:]
    return path.lstrip("/\\")
