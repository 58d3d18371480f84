"""
Exception types raised by tiny-spell.

Every error raised on purpose by the library derives from TinySpellError, and
also from the closest built-in exception so callers can catch either.
"""


class TinySpellError(Exception):
    """Base class for tiny-spell errors."""


class InvalidParameter(TinySpellError, ValueError):
    """A filter or generator was configured with out-of-range values."""


class DigestUnavailable(TinySpellError, RuntimeError):
    """The configured digest algorithm cannot be used by hashlib."""


class DictionaryLoadError(TinySpellError, OSError):
    """A dictionary source could not be opened or read."""
