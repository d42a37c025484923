"""SQLAlchemy integration for TypeID.

Provides a TypeDecorator and helpers for using TypeIDs as typed columns
that store their text form as TEXT in the database.

Example:
    from typing import Literal
    from sqlalchemy.orm import DeclarativeBase, Mapped
    from typeid32 import TypeID
    from typeid32.sqlalchemy import typeid_column

    UserId = TypeID[Literal["user"]]
    OrgId = TypeID[Literal["org"]]

    class Base(DeclarativeBase):
        pass

    class User(Base):
        __tablename__ = "users"

        id: Mapped[UserId] = typeid_column(UserId, primary_key=True)
        org_id: Mapped[OrgId | None] = typeid_column(OrgId)
        name: Mapped[str]
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypedDict, Unpack, cast

from sqlalchemy import Text
from sqlalchemy.orm import mapped_column
from sqlalchemy.types import TypeDecorator

from typeid32 import PrefixMismatchError, TypeID, TypeIDType, _get_prefix


if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Dialect
    from sqlalchemy.orm import MappedColumn


logger = logging.getLogger(__name__)


class TypeIDColumnKwargs(TypedDict, total=False):
    """Keyword arguments for typeid_column, matching mapped_column's common options."""

    primary_key: bool
    nullable: bool
    default: object
    default_factory: Callable[[], object]
    index: bool
    unique: bool
    insert_default: object
    onupdate: object


class TypeIDColumn(TypeDecorator[TypeIDType]):
    """SQLAlchemy TypeDecorator for TypeID storage as TEXT.

    Serializes TypeID objects to their text form on write and parses them
    back on read.

    Args:
        prefix: The required prefix for TypeIDs in this column, or None to
            accept any prefix.

    Example:
        id: Mapped[UserId] = mapped_column(TypeIDColumn("user"), primary_key=True)
    """

    impl = Text
    cache_ok = True

    def __init__(self, prefix: str | None = None) -> None:
        self.prefix = prefix
        super().__init__()

    def _check_prefix(self, typeid: TypeIDType) -> None:
        if self.prefix is not None and typeid.prefix != self.prefix:
            logger.debug("Rejecting %s for column with prefix %r", typeid, self.prefix)
            raise PrefixMismatchError(self.prefix, typeid.prefix)

    def process_bind_param(
        self,
        value: TypeIDType | str | None,
        dialect: Dialect,  # noqa: ARG002
    ) -> str | None:
        """Convert a TypeID to its text form for database storage.

        Strings are parsed first, so malformed values and prefix mismatches
        are caught at write time rather than read time.

        Raises:
            TypeError: If value is neither a TypeID nor a string.
        """
        if value is None:
            return None
        if isinstance(value, str):
            typeid = TypeID.parse(value)
        elif isinstance(value, TypeID):
            typeid = value
        else:
            raise TypeError(f"Expected TypeID or str, got {type(value).__name__}")
        self._check_prefix(typeid)
        return str(typeid)

    def process_result_value(
        self,
        value: str | None,
        dialect: Dialect,  # noqa: ARG002
    ) -> TypeIDType | None:
        """Convert the stored text form back to a TypeID."""
        if value is None:
            return None
        typeid = TypeID.parse(value)
        self._check_prefix(typeid)
        return typeid


def typeid_column[T](
    typeid_type: type[T],
    **kwargs: Unpack[TypeIDColumnKwargs],
) -> MappedColumn[T]:
    """Create a mapped_column for a TypeID type (pure SQLAlchemy).

    Infers the prefix from the type parameter, so you don't need to
    specify it twice.

    Args:
        typeid_type: A parameterized TypeID type like TypeID[Literal["user"]].
        **kwargs: Additional arguments passed to mapped_column.

    Raises:
        TypeError: If typeid_type is not parameterized with a literal prefix.
    """
    prefix = _get_prefix(typeid_type)  # type: ignore[arg-type]
    return mapped_column(TypeIDColumn(prefix), **kwargs)


class TypeIDFieldKwargs(TypedDict, total=False):
    """Keyword arguments for typeid_field, matching SQLModel Field's common options."""

    default: object
    default_factory: Callable[[], object]
    primary_key: bool
    index: bool
    unique: bool


def typeid_field[T](
    typeid_type: type[T],
    **kwargs: Unpack[TypeIDFieldKwargs],
) -> Any:  # noqa: ANN401 - return type matches SQLModel's Field
    """Create a SQLModel Field for a TypeID type.

    Example:
        from sqlmodel import SQLModel
        from typeid32 import TypeID, factory
        from typeid32.sqlalchemy import typeid_field

        UserId = TypeID[Literal["user"]]

        class User(SQLModel, table=True):
            id: UserId = typeid_field(UserId, default_factory=factory(UserId), primary_key=True)
    """
    # Import here to avoid hard dependency on sqlmodel
    from sqlmodel import Field

    prefix = _get_prefix(typeid_type)  # type: ignore[arg-type]
    # SQLModel's sa_type is typed as type[Any] but accepts TypeEngine instances.
    sa_type = cast("type[Any]", TypeIDColumn(prefix))
    return Field(sa_type=sa_type, **kwargs)


__all__ = ["TypeIDColumn", "typeid_column", "typeid_field"]
