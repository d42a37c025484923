"""Source of time-ordered UUIDs used by ``TypeID.generate``.

The process-wide default can be replaced, e.g. with a deterministic fake in
tests:

    with default_provider(FakeProvider()):
        TypeID.generate("user")
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from collections.abc import Iterator


logger = logging.getLogger(__name__)


@runtime_checkable
class UUIDProvider(Protocol):
    """Anything that hands out UUIDv7 values.

    Implementations must be safe to call from several threads at once.
    """

    def uuid7(self) -> uuid.UUID:
        """Return a new UUIDv7."""
        ...


class StdlibUUIDProvider:
    """Delegates to :func:`uuid.uuid7`, which is monotonic within a process."""

    __slots__ = ()

    def uuid7(self) -> uuid.UUID:
        return uuid.uuid7()

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


_default: UUIDProvider = StdlibUUIDProvider()


def get_default_provider() -> UUIDProvider:
    """Return the provider ``TypeID.generate`` uses when none is passed."""
    return _default


def set_default_provider(provider: UUIDProvider) -> UUIDProvider:
    """Replace the default provider and return the previous one.

    Raises:
        TypeError: If provider has no ``uuid7`` method.
    """
    global _default  # noqa: PLW0603
    if not isinstance(provider, UUIDProvider):
        raise TypeError(f"Expected a UUIDProvider, got {type(provider).__name__}")
    previous, _default = _default, provider
    logger.debug("Default UUID provider set to %r (was %r)", provider, previous)
    return previous


@contextmanager
def default_provider(provider: UUIDProvider) -> Iterator[UUIDProvider]:
    """Use ``provider`` as the default within a ``with`` block."""
    previous = set_default_provider(provider)
    try:
        yield provider
    finally:
        set_default_provider(previous)


__all__ = [
    "StdlibUUIDProvider",
    "UUIDProvider",
    "default_provider",
    "get_default_provider",
    "set_default_provider",
]
