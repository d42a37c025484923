"""Fixed-width base32 codec for the 128-bit value of a TypeID.

The 128 bits are packed into 26 five-bit groups (130 bits). The two extra
bits sit at the top and must be zero, so the leftmost character is always one
of ``0-7``. That constraint makes the encoding canonical: every 128-bit value
has exactly one 26-character form and no two valid strings decode to the same
value.

The value is handled as two unsigned 64-bit halves, ``msb`` and ``lsb``. The
first 13 characters come from ``msb``, character 13 straddles both halves
(1 bit of ``msb``, 4 bits of ``lsb``) and the last 12 come from ``lsb``.
"""

from __future__ import annotations

from uuid import UUID

from typeid32.errors import SUFFIX_ALPHABET, SUFFIX_LENGTH, ErrorKind, TypeIDError


_MASK_5 = 0x1F
_MASK_64 = (1 << 64) - 1

# Marks code points that are not part of the alphabet. It is >= 8, so the
# leftmost-character check rejects it as well.
INVALID = 0xFF

# Reverse lookup: code point -> 5-bit value, INVALID otherwise.
# Code points beyond the table are INVALID too (see _lookup).
_LOOKUP_SIZE = 256
DECODE_TABLE: tuple[int, ...] = tuple(
    SUFFIX_ALPHABET.index(chr(cp)) if chr(cp) in SUFFIX_ALPHABET else INVALID
    for cp in range(_LOOKUP_SIZE)
)

# Shift positions of the 5-bit groups within each half
_MSB_SHIFTS = tuple(range(61, 0, -5))  # 61, 56, ..., 1 (13 groups)
_LSB_SHIFTS = tuple(range(55, -1, -5))  # 55, 50, ..., 0 (12 groups)
_OVERLAP_INDEX = len(_MSB_SHIFTS)


def _lookup(char: str) -> int:
    """Return the 5-bit value of ``char`` or INVALID."""
    cp = ord(char)
    if cp >= _LOOKUP_SIZE:
        return INVALID
    return DECODE_TABLE[cp]


def leading_value(suffix: str) -> int:
    """Return the decoded value of the first character (INVALID if unknown).

    A value of 8 or more would need more than 128 bits.
    """
    return _lookup(suffix[0])


def is_alphabet_only(suffix: str) -> bool:
    """Check that every character of ``suffix`` is in the suffix alphabet."""
    return all(_lookup(c) != INVALID for c in suffix)


def encode(msb: int, lsb: int) -> str:
    """Encode a 128-bit value given as two unsigned 64-bit halves.

    Args:
        msb: The most significant 64 bits.
        lsb: The least significant 64 bits.

    Returns:
        The 26-character suffix.
    """
    chars = [SUFFIX_ALPHABET[(msb >> shift) & _MASK_5] for shift in _MSB_SHIFTS]
    chars.append(SUFFIX_ALPHABET[((msb & 0x1) << 4) | (lsb >> 60)])
    chars.extend(SUFFIX_ALPHABET[(lsb >> shift) & _MASK_5] for shift in _LSB_SHIFTS)
    return "".join(chars)


def decode(suffix: str) -> tuple[int, int]:
    """Decode a 26-character suffix into its two 64-bit halves.

    Args:
        suffix: The encoded suffix.

    Returns:
        A ``(msb, lsb)`` tuple.

    Raises:
        TypeIDError: If the length is not 26, a character is outside the
            alphabet, or the leftmost character is not one of ``0-7``.
    """
    if len(suffix) != SUFFIX_LENGTH:
        raise TypeIDError(ErrorKind.SUFFIX_LENGTH_INVALID)
    values = [_lookup(c) for c in suffix]
    if INVALID in values:
        raise TypeIDError(ErrorKind.SUFFIX_CHARACTER_INVALID)
    if values[0] >= 8:
        raise TypeIDError(ErrorKind.SUFFIX_LEADING_BITS_OVERFLOW)
    return _unpack(values)


def decode_unchecked(suffix: str) -> tuple[int, int]:
    """Decode a suffix that has already passed validation."""
    return _unpack([_lookup(c) for c in suffix])


def _unpack(values: list[int]) -> tuple[int, int]:
    msb = 0
    for value, shift in zip(values[:_OVERLAP_INDEX], _MSB_SHIFTS, strict=True):
        msb |= value << shift

    overlap = values[_OVERLAP_INDEX]
    msb |= (overlap & 0x10) >> 4
    lsb = (overlap & 0xF) << 60

    for value, shift in zip(values[_OVERLAP_INDEX + 1 :], _LSB_SHIFTS, strict=True):
        lsb |= value << shift
    return msb, lsb


def split_uuid(uid: UUID) -> tuple[int, int]:
    """Split a UUID into its ``(msb, lsb)`` halves."""
    value = uid.int
    return value >> 64, value & _MASK_64


def join_uuid(msb: int, lsb: int) -> UUID:
    """Build a UUID from its ``(msb, lsb)`` halves."""
    return UUID(int=(msb << 64) | lsb)


def encode_uuid(uid: UUID) -> str:
    """Encode a UUID as a 26-character suffix."""
    return encode(*split_uuid(uid))


def decode_uuid(suffix: str) -> UUID:
    """Decode a 26-character suffix into a UUID.

    Raises:
        TypeIDError: Same conditions as :func:`decode`.
    """
    return join_uuid(*decode(suffix))


__all__ = [
    "DECODE_TABLE",
    "INVALID",
    "decode",
    "decode_uuid",
    "encode",
    "encode_uuid",
    "join_uuid",
    "split_uuid",
]
