"""A two-case container for a value that is either valid or not.

Used as the result of :meth:`typeid32.TypeID.parse_validated`, but independent
of TypeIDs otherwise.

Example:
    >>> match TypeID.parse_validated(text):
    ...     case Valid(value):
    ...         print(value.prefix)
    ...     case Invalid(message):
    ...         print(f"rejected: {message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Never


if TYPE_CHECKING:
    from collections.abc import Callable

    from typeid32.errors import ErrorKind


@dataclass(frozen=True, slots=True)
class Valid[T]:
    """A valid value."""

    value: T

    @property
    def is_valid(self) -> bool:
        return True

    @property
    def message(self) -> Never:
        raise ValueError("no message, value is valid")

    @property
    def kind(self) -> None:
        return None

    def get(self) -> T:
        return self.value

    def or_else(self, other: T) -> T:  # noqa: ARG002
        return self.value

    def to_optional(self) -> T | None:
        return self.value

    def map[O](self, mapper: Callable[[T], O]) -> Validated[O]:
        return Valid(mapper(self.value))

    def flat_map[O](self, mapper: Callable[[T], Validated[O]]) -> Validated[O]:
        return mapper(self.value)

    def filter(self, message: str, predicate: Callable[[T], bool]) -> Validated[T]:
        """Keep the value if ``predicate`` holds, otherwise become invalid with ``message``."""
        if predicate(self.value):
            return self
        return Invalid(message)

    def if_valid(self, consumer: Callable[[T], Any]) -> None:
        consumer(self.value)

    def if_invalid(self, consumer: Callable[[str], Any]) -> None:
        pass


@dataclass(frozen=True, slots=True)
class Invalid[T]:
    """A failed validation, carrying its message and, when known, its kind."""

    message: str
    kind: ErrorKind | None = None

    @property
    def is_valid(self) -> bool:
        return False

    def get(self) -> Never:
        raise ValueError(f"Validation failed: {self.message}")

    def or_else(self, other: T) -> T:
        return other

    def to_optional(self) -> T | None:
        return None

    def map[O](self, mapper: Callable[[T], O]) -> Validated[O]:  # noqa: ARG002
        return Invalid(self.message, self.kind)

    def flat_map[O](self, mapper: Callable[[T], Validated[O]]) -> Validated[O]:  # noqa: ARG002
        return Invalid(self.message, self.kind)

    def filter(self, message: str, predicate: Callable[[T], bool]) -> Validated[T]:  # noqa: ARG002
        return self

    def if_valid(self, consumer: Callable[[T], Any]) -> None:
        pass

    def if_invalid(self, consumer: Callable[[str], Any]) -> None:
        consumer(self.message)


type Validated[T] = Valid[T] | Invalid[T]


def valid[T](value: T) -> Validated[T]:
    """Wrap ``value`` as valid."""
    return Valid(value)


def invalid[T](message: str, kind: ErrorKind | None = None) -> Validated[T]:
    """Build an invalid result with ``message``."""
    return Invalid(message, kind)


__all__ = ["Invalid", "Valid", "Validated", "invalid", "valid"]
