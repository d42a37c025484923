"""Shared test fixtures, fakes and Hypothesis strategies."""

from __future__ import annotations

import random
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal
from uuid import UUID

import pytest
import yaml
from hypothesis import strategies as st

from typeid32 import TypeID, default_provider, factory
from typeid32.errors import SUFFIX_ALPHABET


if TYPE_CHECKING:
    from collections.abc import Iterator


# =============================================================================
# Common Type Aliases and Factories
# =============================================================================

UserId = TypeID[Literal["user"]]
OrgId = TypeID[Literal["org"]]
ApiKeyId = TypeID[Literal["api_key"]]

UserIdFactory = factory(UserId)
OrgIdFactory = factory(OrgId)
ApiKeyIdFactory = factory(ApiKeyId)

SOME_UUID = UUID("01890a5d-ac96-774b-bcce-b302099a8057")
SOME_PREFIX = "theprefix"
SOME_SUFFIX = "01h455vb4pex5vsknk084sn02q"
SOME_TYPEID = f"{SOME_PREFIX}_{SOME_SUFFIX}"


# =============================================================================
# Conformance fixtures
# =============================================================================

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixtures(name: str) -> list[dict[str, Any]]:
    """Load a list of conformance cases from tests/fixtures."""
    with (FIXTURES_DIR / name).open(encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# Fake UUID source
# =============================================================================


class FakeUUIDProvider:
    """Deterministic UUIDv7 source: one millisecond per call, seeded random bits."""

    def __init__(self, seed: int = 0, start_ms: int = 1_700_000_000_000) -> None:
        self._random = random.Random(seed)
        self._ms = start_ms
        self.calls = 0

    def uuid7(self) -> UUID:
        self._ms += 1
        self.calls += 1
        rand_a = self._random.getrandbits(12)
        rand_b = self._random.getrandbits(62)
        value = (self._ms << 80) | (0x7 << 76) | (rand_a << 64) | (0b10 << 62) | rand_b
        return UUID(int=value)


@pytest.fixture
def fake_provider() -> Iterator[FakeUUIDProvider]:
    """Install a FakeUUIDProvider as the default for the duration of a test."""
    provider = FakeUUIDProvider()
    with default_provider(provider):
        yield provider


# =============================================================================
# Hypothesis Strategies
# =============================================================================

# Strategy for valid prefixes: [a-z_], not starting/ending with underscore
prefix_strategy = st.from_regex(r"[a-z]([a-z_]*[a-z])?", fullmatch=True).filter(
    lambda s: len(s) <= 63
)

# Valid prefixes including the empty one
any_prefix_strategy = st.one_of(st.just(""), prefix_strategy)

uint128_strategy = st.integers(min_value=0, max_value=(1 << 128) - 1)
uuid_strategy = uint128_strategy.map(lambda n: UUID(int=n))

# Strategy for canonical 26-char suffixes
suffix_strategy = st.builds(
    lambda head, tail: head + tail,
    st.sampled_from("01234567"),
    st.text(st.sampled_from(SUFFIX_ALPHABET), min_size=25, max_size=25),
)
