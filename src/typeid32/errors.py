"""Error taxonomy for TypeID parsing and construction."""

from __future__ import annotations

from enum import Enum


SUFFIX_ALPHABET = "0123456789abcdefghjkmnpqrstvwxyz"
SUFFIX_LENGTH = 26
PREFIX_MAX_LENGTH = 63

# NULL_OR_EMPTY_INPUT reports the empty string with its own wording
EMPTY_INPUT_MESSAGE = "must not be empty"


class ErrorKind(Enum):
    """Every way a TypeID can be rejected, each with its literal message.

    The messages are part of the public contract and are checked verbatim by
    the conformance fixtures.
    """

    NULL_OR_EMPTY_INPUT = "must not be null or empty"
    EMPTY_PREFIX_WITH_SEPARATOR = "empty prefix must not contain separator"
    SUFFIX_LENGTH_INVALID = f"illegal length, must be {SUFFIX_LENGTH}"
    SUFFIX_LEADING_BITS_OVERFLOW = "illegal leftmost suffix character, must be one of [0-7]"
    SUFFIX_CHARACTER_INVALID = f"illegal character in suffix, must be one of [{SUFFIX_ALPHABET}]"
    PREFIX_LENGTH_INVALID = f"illegal length, must not exceed {PREFIX_MAX_LENGTH}"
    PREFIX_CHARACTER_INVALID = "illegal character in prefix, must be one of [a-z_]"
    PREFIX_BOUNDARY_SEPARATOR = "illegal prefix, must not start or end with '_'"

    @property
    def message(self) -> str:
        return self.value

    @property
    def is_prefix_error(self) -> bool:
        return self in _PREFIX_KINDS


_PREFIX_KINDS = frozenset(
    {
        ErrorKind.PREFIX_LENGTH_INVALID,
        ErrorKind.PREFIX_CHARACTER_INVALID,
        ErrorKind.PREFIX_BOUNDARY_SEPARATOR,
    }
)


class TypeIDError(ValueError):
    """Raised when TypeID parsing or validation fails.

    ``str(error)`` is the literal message, by default the one of its ``kind``.
    """

    def __init__(self, kind: ErrorKind, message: str | None = None) -> None:
        self.kind = kind
        self.message = kind.message if message is None else message
        super().__init__(self.message)

    def __reduce__(self) -> tuple[type[TypeIDError], tuple[ErrorKind, str]]:
        return (type(self), (self.kind, self.message))


class PrefixMismatchError(ValueError):
    """Raised when a valid TypeID carries a different prefix than required."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"Expected prefix {expected!r}, got {actual!r}")
        self.expected = expected
        self.actual = actual

    def __reduce__(self) -> tuple[type[PrefixMismatchError], tuple[str, str]]:
        return (type(self), (self.expected, self.actual))


__all__ = [
    "EMPTY_INPUT_MESSAGE",
    "PREFIX_MAX_LENGTH",
    "SUFFIX_ALPHABET",
    "SUFFIX_LENGTH",
    "ErrorKind",
    "PrefixMismatchError",
    "TypeIDError",
]
