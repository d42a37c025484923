"""TypeIDs - sortable, prefixed, canonical identifiers backed by a UUID."""

from __future__ import annotations

from datetime import UTC
from datetime import datetime as dt_datetime
from typing import (
    TYPE_CHECKING,
    Any,
    LiteralString,
    Protocol,
    Self,
    get_args,
    get_origin,
    overload,
    runtime_checkable,
)
from uuid import UUID

from pydantic_core import CoreSchema, core_schema

from typeid32 import base32
from typeid32.errors import PrefixMismatchError, TypeIDError
from typeid32.provider import get_default_provider
from typeid32.validated import Invalid, Valid
from typeid32.validation import SEPARATOR, parse_parts, require_valid_prefix


if TYPE_CHECKING:
    import datetime as dt
    from collections.abc import Callable

    from typeid32.provider import UUIDProvider
    from typeid32.validated import Validated


# UUIDv7 timestamp extraction (RFC 9562):
# Bits 0-47 contain 48-bit Unix timestamp in milliseconds
_UUIDV7_TIMESTAMP_SHIFT = 80  # 128 - 48 = shift to extract timestamp
_MS_PER_SECOND = 1000


@runtime_checkable
class TypeIDType(Protocol):
    """Protocol for any TypeID, useful for generic function signatures.

    Example:
        def log_entity(entity_id: TypeIDType) -> None:
            print(f"{entity_id.prefix} created at {entity_id.datetime}")
    """

    __slots__ = ()

    @property
    def prefix(self) -> str:
        """The prefix (e.g. 'user', 'api_key'), possibly empty."""
        ...

    @property
    def uuid(self) -> UUID:
        """The underlying UUID."""
        ...

    @property
    def suffix(self) -> str:
        """The base32-encoded UUID (26 characters)."""
        ...

    @property
    def datetime(self) -> dt.datetime:
        """The timestamp extracted from the UUIDv7."""
        ...

    @property
    def timestamp(self) -> float:
        """The Unix timestamp (seconds) from the UUIDv7."""
        ...

    def __str__(self) -> str:
        """String representation as '[<prefix>_]<suffix>'."""
        ...


class TypeID[PREFIX: LiteralString]:
    """A prefix plus a UUID, rendered as ``[<prefix>_]<suffix>``.

    The suffix is a 26-character base32 encoding of the UUID, so TypeIDs built
    from UUIDv7 values sort by creation time. The prefix names the kind of
    entity and may be empty, in which case the separator is omitted.

    Parameterizing with a literal prefix (``TypeID[Literal["user"]]``) lets
    Pydantic and the SQLAlchemy helpers enforce that prefix.

    Example:
        >>> from typing import Literal
        >>> UserId = TypeID[Literal["user"]]
        >>> user_id = TypeID.generate("user")
        >>> print(user_id)  # user_01h455vb4pex5vsknk084sn02q

    Note:
        The `datetime` and `timestamp` properties assume the underlying UUID
        is a UUIDv7. Any UUID version can be wrapped, but for other versions
        these properties return meaningless values, and `datetime` raises
        ValueError once the value is out of its range.
    """

    __slots__ = ("_prefix", "_suffix", "_uuid")

    def __init__(self, prefix: PREFIX, uid: UUID) -> None:
        """Initialize a TypeID with a prefix and UUID.

        Args:
            prefix: The prefix, empty or 1-63 characters of ``[a-z_]`` not
                starting or ending with an underscore.
            uid: The UUID of any version.

        Raises:
            TypeIDError: If prefix is invalid.
            TypeError: If prefix is not a string or uid is not a UUID.
        """
        require_valid_prefix(prefix)
        if not isinstance(uid, UUID):
            raise TypeError(f"Expected a UUID, got {type(uid).__name__}")
        self._prefix = prefix
        self._uuid = uid
        self._suffix: str | None = None

    @classmethod
    def _trusted(cls, prefix: str, uid: UUID) -> Self:
        """Build an instance from parts that have already been validated."""
        instance = cls.__new__(cls)
        instance._prefix = prefix  # noqa: SLF001
        instance._uuid = uid  # noqa: SLF001
        instance._suffix = None  # noqa: SLF001
        return instance

    @property
    def prefix(self) -> PREFIX:
        """The prefix (e.g. 'user', 'api_key'), possibly empty."""
        return self._prefix

    @property
    def uuid(self) -> UUID:
        """The underlying UUID (typically UUIDv7)."""
        return self._uuid

    @property
    def suffix(self) -> str:
        """The base32-encoded UUID (26 characters)."""
        if self._suffix is None:
            self._suffix = base32.encode_uuid(self._uuid)
        return self._suffix

    @property
    def datetime(self) -> dt_datetime:
        """The timestamp extracted from the UUIDv7.

        Raises:
            ValueError: If the 48-bit millisecond field lies past year 9999,
                which only happens for values that are not real UUIDv7s.
        """
        ms = self._uuid.int >> _UUIDV7_TIMESTAMP_SHIFT
        return dt_datetime.fromtimestamp(ms / _MS_PER_SECOND, tz=UTC)

    @property
    def timestamp(self) -> float:
        """The Unix timestamp (seconds) from the UUIDv7."""
        ms = self._uuid.int >> _UUIDV7_TIMESTAMP_SHIFT
        return ms / _MS_PER_SECOND

    def __str__(self) -> str:
        """Return the text form, without separator if the prefix is empty."""
        if not self._prefix:
            return self.suffix
        return f"{self._prefix}{SEPARATOR}{self.suffix}"

    def __repr__(self) -> str:
        return f"TypeID({self._prefix!r}, {self.suffix!r})"

    def __hash__(self) -> int:
        return hash((self._prefix, self._uuid))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TypeID):
            return self._prefix == other._prefix and self._uuid == other._uuid
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        """Compare for sorting (by prefix, then by uuid)."""
        if isinstance(other, TypeID):
            return (self._prefix, self._uuid) < (other._prefix, other._uuid)  # type: ignore[operator]
        return NotImplemented

    def __le__(self, other: object) -> bool:
        if isinstance(other, TypeID):
            return (self._prefix, self._uuid) <= (other._prefix, other._uuid)  # type: ignore[operator]
        return NotImplemented

    def __gt__(self, other: object) -> bool:
        if isinstance(other, TypeID):
            return (self._prefix, self._uuid) > (other._prefix, other._uuid)  # type: ignore[operator]
        return NotImplemented

    def __ge__(self, other: object) -> bool:
        if isinstance(other, TypeID):
            return (self._prefix, self._uuid) >= (other._prefix, other._uuid)  # type: ignore[operator]
        return NotImplemented

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        return self

    def __reduce__(self) -> tuple[type[Self], tuple[str, UUID]]:
        return (type(self), (self._prefix, self._uuid))

    @overload
    @classmethod
    def of(cls, uid: UUID, /) -> Self: ...

    @overload
    @classmethod
    def of(cls, prefix: PREFIX, uid: UUID, /) -> Self: ...

    @classmethod
    def of(cls, prefix_or_uid: PREFIX | UUID, uid: UUID | None = None, /) -> Self:
        """Create a TypeID from an existing UUID.

        ``TypeID.of(uid)`` has an empty prefix; ``TypeID.of(prefix, uid)``
        validates the prefix.

        Raises:
            TypeIDError: If the prefix is invalid.
            TypeError: If no UUID is given.
        """
        if uid is None:
            if not isinstance(prefix_or_uid, UUID):
                raise TypeError(f"Expected a UUID, got {type(prefix_or_uid).__name__}")
            return cls("", prefix_or_uid)  # type: ignore[arg-type]
        return cls(prefix_or_uid, uid)  # type: ignore[arg-type]

    @classmethod
    def generate(cls, prefix: PREFIX = "", *, provider: UUIDProvider | None = None) -> Self:  # type: ignore[assignment]
        """Generate a new TypeID from a fresh UUIDv7.

        Args:
            prefix: The prefix, empty by default.
            provider: Where to take the UUID from; the process-wide default
                provider if omitted.

        Raises:
            TypeIDError: If the prefix is invalid.
            TypeError: If the provider returns something other than a UUID.
        """
        require_valid_prefix(prefix)
        source = provider if provider is not None else get_default_provider()
        uid = source.uuid7()
        if not isinstance(uid, UUID):
            raise TypeError(f"{source!r} returned {type(uid).__name__}, expected a UUID")
        return cls._trusted(prefix, uid)

    @classmethod
    def _parse(cls, text: str | None) -> Validated[Self]:
        return parse_parts(text).map(lambda parts: cls._trusted(*parts))

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse the text form of a TypeID.

        Raises:
            TypeIDError: If the text is not a valid TypeID.
        """
        result = cls._parse(text)
        if isinstance(result, Invalid):
            raise TypeIDError(result.kind, result.message)  # type: ignore[arg-type]
        return result.value

    @classmethod
    def parse_or_none(cls, text: str | None) -> Self | None:
        """Parse the text form of a TypeID, returning None if it is invalid."""
        return cls._parse(text).to_optional()

    @classmethod
    def parse_validated(cls, text: str | None) -> Validated[Self]:
        """Parse the text form of a TypeID into ``Valid(typeid)`` or ``Invalid(message)``."""
        return cls._parse(text)

    @classmethod
    def parse_with[T](
        cls,
        text: str | None,
        on_success: Callable[[Self], T],
        on_error: Callable[[str], T],
    ) -> T:
        """Parse the text form of a TypeID and hand the outcome to a callback.

        Args:
            text: The text to parse.
            on_success: Called with the TypeID if parsing succeeds.
            on_error: Called with the error message if parsing fails.

        Returns:
            Whatever the called callback returns.
        """
        match cls._parse(text):
            case Valid(value):
                return on_success(value)
            case Invalid(message):
                return on_error(message)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,  # noqa: ANN401
        handler: Any,  # noqa: ANN401
    ) -> CoreSchema:
        """Pydantic integration for validation and serialization.

        A bare ``TypeID`` accepts any prefix; ``TypeID[Literal["user"]]``
        accepts only that prefix.
        """
        prefix_str = None if get_origin(source_type) is None else _get_prefix(source_type)
        if prefix_str is not None:
            require_valid_prefix(prefix_str)

        def validate(v: TypeID[Any] | str) -> TypeID[Any]:
            if isinstance(v, str):
                parsed = cls.parse(v)
            elif isinstance(v, TypeID):
                parsed = v
            else:
                raise ValueError(f"Expected TypeID or str, got {type(v).__name__}")
            if prefix_str is not None and parsed.prefix != prefix_str:
                raise PrefixMismatchError(prefix_str, parsed.prefix)
            return parsed

        return core_schema.json_or_python_schema(
            json_schema=core_schema.chain_schema(
                [
                    core_schema.str_schema(),
                    core_schema.no_info_plain_validator_function(validate),
                ]
            ),
            python_schema=core_schema.no_info_plain_validator_function(validate),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )


def _get_prefix[PREFIX: LiteralString](typeid_type: type[TypeID[PREFIX]]) -> str:
    """Extract the prefix string from a parameterized TypeID type.

    Raises:
        TypeError: If the type is not parameterized with a literal prefix.
    """
    args = get_args(typeid_type)
    if not args:
        raise TypeError("TypeID type must be parameterized with a Literal prefix")
    literal_type = args[0]
    literal_args = get_args(literal_type)
    # Handle TypeVar case (Python 3.12+ type parameter syntax)
    if not literal_args and hasattr(literal_type, "__value__"):  # pragma: no cover
        literal_args = get_args(literal_type.__value__)
    if not literal_args or not isinstance(literal_args[0], str):
        raise TypeError(f"Could not extract prefix from {literal_type}")
    return literal_args[0]


def factory[PREFIX: LiteralString](
    typeid_type: type[TypeID[PREFIX]],
) -> Callable[[], TypeID[PREFIX]]:
    """Create a factory function for generating new TypeIDs of a specific type.

    This is useful with Pydantic's Field(default_factory=...).

    Example:
        UserId = TypeID[Literal["user"]]

        class User(BaseModel):
            id: UserId = Field(default_factory=factory(UserId))
    """
    prefix = require_valid_prefix(_get_prefix(typeid_type))

    def _factory() -> TypeID[PREFIX]:
        return TypeID.generate(prefix)  # type: ignore[arg-type]

    return _factory


def parser[PREFIX: LiteralString](
    typeid_type: type[TypeID[PREFIX]],
) -> Callable[[str], TypeID[PREFIX]]:
    """Create a parse function that only accepts one prefix.

    Raises TypeIDError on malformed input and PrefixMismatchError on a
    well-formed TypeID with another prefix.

    Example:
        UserId = TypeID[Literal["user"]]
        parse_user_id = parser(UserId)

        try:
            user_id = parse_user_id("user_01h455vb4pex5vsknk084sn02q")
        except ValueError as e:
            print(f"Invalid ID: {e}")
    """
    prefix = require_valid_prefix(_get_prefix(typeid_type))

    def _parse(v: str) -> TypeID[PREFIX]:
        parsed = TypeID.parse(v)
        if parsed.prefix != prefix:
            raise PrefixMismatchError(prefix, parsed.prefix)
        return parsed

    return _parse
