"""
Exceptions raised while decoding Unreal packages.

Malformed input is an expected condition: every error here derives from
UMXError so callers probing many files can catch one type and move on.
"""


class UMXError(Exception):
    """Base class for all package decoding errors."""


class SignatureError(UMXError):
    """The data does not start with the package signature."""


class InsufficientDataError(UMXError):
    """Not enough bytes were available to decide."""


class TruncatedError(InsufficientDataError):
    """A read ran past the end of the available bytes."""


class CompactIndexError(UMXError):
    """A compact index is malformed (more than 32 bits of magnitude)."""


class OutOfRangeError(UMXError):
    """A decoded index or extent points outside the table or file it refers to."""
