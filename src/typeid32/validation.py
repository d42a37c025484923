"""Validation of TypeID text and prefixes.

All checks run in a fixed order and the first failure wins. The order is part
of the contract: for any input there is exactly one reported error.

Canonical prefix grammar: empty, or 1-63 characters of ``[a-z_]`` that neither
start nor end with ``_``. The separator is the *last* ``_`` of the text, so a
prefix may itself contain underscores.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from typeid32 import base32
from typeid32.errors import (
    EMPTY_INPUT_MESSAGE,
    PREFIX_MAX_LENGTH,
    SUFFIX_LENGTH,
    ErrorKind,
    TypeIDError,
)
from typeid32.validated import Invalid, Valid


if TYPE_CHECKING:
    from uuid import UUID

    from typeid32.validated import Validated


SEPARATOR = "_"
_PREFIX_ALPHABET = frozenset("abcdefghijklmnopqrstuvwxyz_")


def validate_suffix(suffix: str) -> ErrorKind | None:
    """Return the first problem with ``suffix``, or None if it is valid."""
    if len(suffix) != SUFFIX_LENGTH:
        return ErrorKind.SUFFIX_LENGTH_INVALID
    if base32.leading_value(suffix) >= 8:
        return ErrorKind.SUFFIX_LEADING_BITS_OVERFLOW
    if not base32.is_alphabet_only(suffix):
        return ErrorKind.SUFFIX_CHARACTER_INVALID
    return None


def validate_prefix(prefix: str) -> ErrorKind | None:
    """Return the first problem with ``prefix``, or None if it is valid.

    The empty prefix is valid.
    """
    if not prefix:
        return None
    if len(prefix) > PREFIX_MAX_LENGTH:
        return ErrorKind.PREFIX_LENGTH_INVALID
    if not _PREFIX_ALPHABET.issuperset(prefix):
        return ErrorKind.PREFIX_CHARACTER_INVALID
    if prefix[0] == SEPARATOR or prefix[-1] == SEPARATOR:
        return ErrorKind.PREFIX_BOUNDARY_SEPARATOR
    return None


def require_valid_prefix(prefix: str) -> str:
    """Return ``prefix`` unchanged if it is valid.

    Raises:
        TypeError: If prefix is not a string.
        TypeIDError: If prefix is invalid.
    """
    if not isinstance(prefix, str):
        raise TypeError(f"Prefix must be a str, got {type(prefix).__name__}")
    kind = validate_prefix(prefix)
    if kind is not None:
        raise TypeIDError(kind)
    return prefix


def parse_parts(text: str | None) -> Validated[tuple[str, UUID]]:
    """Validate and decode TypeID text into its ``(prefix, uuid)`` parts.

    This is the single parsing routine; every ``TypeID.parse*`` variant is a
    thin adapter over it.

    Args:
        text: The text to parse, e.g. ``"user_01h455vb4pex5vsknk084sn02q"``.

    Returns:
        ``Valid((prefix, uuid))`` or ``Invalid(message, kind)``.

    Raises:
        TypeError: If text is neither a string nor None.
    """
    if text is None:
        return Invalid(ErrorKind.NULL_OR_EMPTY_INPUT.message, ErrorKind.NULL_OR_EMPTY_INPUT)
    if not isinstance(text, str):
        raise TypeError(f"TypeID text must be a str, got {type(text).__name__}")
    if not text:
        return Invalid(EMPTY_INPUT_MESSAGE, ErrorKind.NULL_OR_EMPTY_INPUT)

    separator_index = text.rfind(SEPARATOR)
    if separator_index == 0:
        return _invalid(ErrorKind.EMPTY_PREFIX_WITH_SEPARATOR)

    if separator_index == -1:
        prefix, suffix = "", text
    else:
        prefix, suffix = text[:separator_index], text[separator_index + 1 :]

    kind = validate_suffix(suffix)
    if kind is None:
        kind = validate_prefix(prefix)
    if kind is not None:
        return _invalid(kind)

    return Valid((prefix, base32.join_uuid(*base32.decode_unchecked(suffix))))


def _invalid(kind: ErrorKind) -> Invalid[tuple[str, UUID]]:
    return Invalid(kind.message, kind)


__all__ = [
    "SEPARATOR",
    "parse_parts",
    "require_valid_prefix",
    "validate_prefix",
    "validate_suffix",
]
