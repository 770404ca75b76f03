"""
Exceptions raised by segsim.

Every error is fatal for the run it occurs in: nothing is retried and no
partial alignment is written.
"""

from typing import Optional


class SegsimError(Exception):
    """
    Superclass of all exceptions raised by segsim.
    """


class ParseError(SegsimError):
    """
    A segment file record or tree could not be parsed.

    Parameters
    ----------
    message : str
        Human-readable description
    line : int, optional
        1-based line number where the offending record starts
    """

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class StructuralError(SegsimError):
    """
    The segments violate a structural invariant (leaf sets or boundaries).

    Parameters
    ----------
    message : str
        Human-readable description
    index : int
        0-based index of the offending segment
    kind : str
        Which invariant was violated ('leaf mismatch', 'boundary gap',
        'boundary order', 'coverage' or 'empty')
    """

    def __init__(self, message: str, index: int, kind: str):
        self.index = index
        self.kind = kind
        super().__init__(f"segment {index} ({kind}): {message}")


class FormatError(SegsimError):
    """
    Some file format error was detected in a rate table.
    """


class ConsistencyError(SegsimError):
    """
    Simulated blocks do not share the same set of sequence names.
    """


class ConfigError(SegsimError):
    """
    A configuration value is missing or invalid.
    """
