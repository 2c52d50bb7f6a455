from typing import Optional


class FimDiffError(Exception):
    """Base class for all errors raised by fimdiff."""

    pass


class ConfigError(FimDiffError):
    """
    Exception raised when nodiff configuration is malformed.

    The exclusion check itself never fails; invalid configuration is reported here, while
    the rules are being loaded, so that a monitor can refuse to start instead of running
    with exclusions it does not understand.

    Attributes:
        source (Optional[str]): The configuration file the error was found in, if known.

    Example:
        >>> error = ConfigError("Unknown nodiff type 'glob'", source="ossec.conf")
        >>> str(error)
        "ossec.conf: Unknown nodiff type 'glob'"
        >>> str(ConfigError("Empty nodiff entry"))
        'Empty nodiff entry'
    """

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        """
        Initialize the exception, prefixing the message with its source when given.

        Args:
            message (str): Description of the problem.
            source (str, optional): Configuration file the problem was found in.
        """
        self.source = source
        super().__init__(f"{source}: {message}" if source else message)


class InvalidPatternError(ConfigError):
    """
    Exception raised when a nodiff pattern cannot be compiled.

    Attributes:
        expression (str): The offending pattern text.
        kind (str): The matcher kind the pattern was compiled as.

    Example:
        >>> error = InvalidPatternError("(unclosed", "pcre2", "missing ), unterminated subpattern")
        >>> str(error)
        "Invalid pcre2 pattern '(unclosed': missing ), unterminated subpattern"
    """

    def __init__(self, expression: str, kind: str, reason: str, source: Optional[str] = None) -> None:
        self.expression = expression
        self.kind = kind
        self.reason = reason
        super().__init__(f"Invalid {kind} pattern {expression!r}: {reason}", source=source)


class PathRejectedError(FimDiffError):
    """
    Exception raised when a destination path contains a reserved character.

    The error carries the rejected path only; which character caused the rejection is
    not reported.

    Attributes:
        path (str): The rejected path.

    Example:
        >>> error = PathRejectedError("C:/diff/a|b")
        >>> str(error)
        'Path contains a reserved character: C:/diff/a|b'
    """

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Path contains a reserved character: {path}")
