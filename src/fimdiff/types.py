from enum import Enum
from os import PathLike
from typing import Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


class MatcherKind(str, Enum):
    """Enumeration of the matcher variants a nodiff entry can compile to.

    The values double as the ``type`` attribute of a ``<nodiff>`` configuration entry;
    an entry without a ``type`` attribute is a literal path.

    Attributes:
        LITERAL: Exact, case-sensitive string equality
        SREGEX: Simple regular expression (``^``, ``$``, ``|`` and a leading ``!``)
        PCRE2: Full regular expression, searched anywhere in the path
        WILDMATCH: gitignore-style wildcard pattern
    """

    LITERAL = "literal"
    SREGEX = "sregex"
    PCRE2 = "pcre2"
    WILDMATCH = "wildmatch"
