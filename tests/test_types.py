from __future__ import annotations

from uuid import UUID

from typeid32 import ErrorKind, PrefixMismatchError, TypeIDError, TypeIDType

from .conftest import ApiKeyIdFactory, UserIdFactory


class TestTypeIDError:
    def test_is_value_error_subclass(self) -> None:
        assert issubclass(TypeIDError, ValueError)

    def test_message_defaults_to_kind_message(self) -> None:
        error = TypeIDError(ErrorKind.PREFIX_LENGTH_INVALID)
        assert str(error) == "illegal length, must not exceed 63"
        assert error.message == str(error)

    def test_can_catch_as_value_error(self) -> None:
        try:
            raise TypeIDError(ErrorKind.SUFFIX_LENGTH_INVALID)
        except ValueError as e:
            assert str(e) == "illegal length, must be 26"


class TestErrorKind:
    def test_messages_are_literal(self) -> None:
        assert ErrorKind.NULL_OR_EMPTY_INPUT.message == "must not be null or empty"
        assert ErrorKind.EMPTY_PREFIX_WITH_SEPARATOR.message == (
            "empty prefix must not contain separator"
        )
        assert ErrorKind.SUFFIX_CHARACTER_INVALID.message == (
            "illegal character in suffix, must be one of [0123456789abcdefghjkmnpqrstvwxyz]"
        )

    def test_prefix_kinds(self) -> None:
        prefix_kinds = {k for k in ErrorKind if k.is_prefix_error}
        assert prefix_kinds == {
            ErrorKind.PREFIX_LENGTH_INVALID,
            ErrorKind.PREFIX_CHARACTER_INVALID,
            ErrorKind.PREFIX_BOUNDARY_SEPARATOR,
        }


class TestPrefixMismatchError:
    def test_is_value_error_with_both_prefixes(self) -> None:
        error = PrefixMismatchError("user", "org")
        assert isinstance(error, ValueError)
        assert str(error) == "Expected prefix 'user', got 'org'"
        assert (error.expected, error.actual) == ("user", "org")


class TestTypeIDTypeProtocol:
    def test_protocol_has_required_attributes(self) -> None:
        for name in ("prefix", "uuid", "suffix", "datetime", "timestamp"):
            assert hasattr(TypeIDType, name)


class TestTypeIDConformsToProtocol:
    def test_typeid_instance_matches_protocol(self) -> None:
        assert isinstance(UserIdFactory(), TypeIDType)

    def test_non_typeid_does_not_match(self) -> None:
        assert not isinstance(UUID(int=0), TypeIDType)

    def test_protocol_allows_any_prefix(self) -> None:
        def format_id(typeid: TypeIDType) -> str:
            return f"[{typeid.prefix}] {typeid.datetime.isoformat()}"

        assert "[user]" in format_id(UserIdFactory())
        assert "[api_key]" in format_id(ApiKeyIdFactory())
